"""Module descriptors consumed by the annotation compiler"""
import json
from dataclasses import dataclass, field

CONSTANT = 'CONSTANT'
FUNCTION = 'FUNCTION'
VARIABLE = 'VARIABLE'
BASIC_CLASS = 'BASIC_CLASS'
BASIC_ALIAS = 'BASIC_ALIAS'

# Declaration order inside a namespace file
KIND_ORDER = {
    VARIABLE: 0,
    FUNCTION: 1,
    CONSTANT: 2,
    BASIC_CLASS: 3,
    BASIC_ALIAS: 4,
}


def _as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() == 'true'
    return bool(value)


@dataclass
class Parameter:
    name: str
    types: list = field(default_factory=list)
    doc: str = ''
    is_optional: bool = False

    @classmethod
    def from_dict(cls, data):
        return cls(
            name=data.get('name', ''),
            types=list(data.get('types') or []),
            doc=data.get('doc') or '',
            is_optional=_as_bool(data.get('is_optional', False)),
        )


@dataclass
class Element:
    kind: str
    name: str
    description: str = ''
    parameters: list = field(default_factory=list)
    returnvalues: list = field(default_factory=list)
    alias: str = None
    fields: dict = field(default_factory=dict)
    operators: dict = field(default_factory=dict)
    is_global: bool = False

    @classmethod
    def from_dict(cls, data):
        fields_ = dict(data.get('fields') or {})
        # Older descriptors flag global classes inside the field table
        is_global = _as_bool(fields_.pop('is_global', data.get('is_global', False)))
        return cls(
            kind=data.get('type') or data.get('kind', ''),
            name=data.get('name', ''),
            description=data.get('description') or '',
            parameters=[Parameter.from_dict(p) for p in data.get('parameters') or []],
            returnvalues=[Parameter.from_dict(r) for r in data.get('returnvalues') or []],
            alias=data.get('alias'),
            fields=fields_,
            operators=dict(data.get('operators') or {}),
            is_global=is_global,
        )

    def sort_key(self):
        return (KIND_ORDER.get(self.kind, len(KIND_ORDER)), self.name)


@dataclass
class Module:
    namespace: str
    brief: str = ''
    description: str = ''
    elements: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data):
        # Accept both the flat layout and the `info` block of raw doc exports
        info = data.get('info') or data
        return cls(
            namespace=info.get('namespace') or '',
            brief=info.get('brief') or '',
            description=info.get('description') or '',
            elements=[Element.from_dict(e) for e in data.get('elements') or []],
        )


def load_modules(path):
    """Load a JSON list of module descriptors."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get('modules', [])
    return [Module.from_dict(m) for m in data]
