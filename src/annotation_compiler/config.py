"""
Configuration tables for the annotation compiler.

The module-level tables are the defaults; a ``Config`` instance carries a copy
of them for one generation run and may be overlaid from a JSON file.
"""
import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path

GENERATOR_NAME = 'annotation-compiler'
API_NAME = 'Scripting API'

# Namespace tables are declared as `---@class <prefix>.<namespace>`
NAMESPACE_CLASS_PREFIX = 'api'

# Folder that receives one `<namespace>.lua` file per namespace
API_FOLDER = Path('api')

# Substituted for every type token that cannot be validated
UNKNOWN_TYPE = 'any'

STRICT_ENV_VAR = 'ANNOTATION_COMPILER_STRICT'

DISABLED_DIAGNOSTICS = [
    'lowercase-global',
    'missing-return',
    'duplicate-doc-param',
    'duplicate-set-field',
    'args-after-dots',
]

KNOWN_TYPES = [
    'nil', 'boolean', 'number', 'integer', 'string', 'table', 'function',
    'userdata', 'thread', 'any', 'hash', 'url', 'node', 'vector', 'vector3',
    'vector4', 'quaternion', 'matrix4', 'buffer_data', 'texture', 'resource_data',
]

# Class name -> {field name: type}
KNOWN_CLASSES = {
    'on_input.action': {
        'value': 'number',
        'pressed': 'boolean',
        'released': 'boolean',
        'repeated': 'boolean',
        'x': 'number',
        'y': 'number',
    },
}

# Alias name -> alias expression
KNOWN_ALIASES = {
    'array': 'table',
    'bool': 'boolean',
    'float': 'number',
    'object': 'userdata',
}

# Full-match regular expressions over raw type tokens, tried in order
GLOBAL_TYPE_REPLACEMENTS = {
    r'int': 'integer',
    r'double': 'number',
    r'str': 'string',
    r'tbl': 'table',
    r'(vmath\.)?matrix4x4': 'matrix4',
}

# Element name -> {'param_<type>_<name>' | 'return_<type>_<name>': replacement}
LOCAL_TYPE_REPLACEMENTS = {}

GLOBAL_NAME_REPLACEMENTS = {
    'function': 'func',
    'end': 'end_',
    'repeat': 'repeat_',
}

# Element name -> {'param_<name>' | 'return_<name>': replacement}
LOCAL_NAME_REPLACEMENTS = {}

# Element name -> type that becomes the generic `T` when used at least twice
GENERICS = {}

# Full-match regular expressions over function names that are never rendered
IGNORED_FUNCS = []


class UnknownTypeError(Exception):
    """Raised in strict mode when a type token cannot be validated."""


def _strict_from_env():
    return os.environ.get(STRICT_ENV_VAR) == '1'


@dataclass
class Config:
    api_folder: Path = API_FOLDER
    generator_name: str = GENERATOR_NAME
    api_name: str = API_NAME
    namespace_class_prefix: str = NAMESPACE_CLASS_PREFIX
    unknown_type: str = UNKNOWN_TYPE
    strict: bool = field(default_factory=_strict_from_env)
    disabled_diagnostics: list = field(default_factory=lambda: list(DISABLED_DIAGNOSTICS))
    known_types: list = field(default_factory=lambda: list(KNOWN_TYPES))
    known_classes: dict = field(default_factory=lambda: dict(KNOWN_CLASSES))
    known_aliases: dict = field(default_factory=lambda: dict(KNOWN_ALIASES))
    global_type_replacements: dict = field(default_factory=lambda: dict(GLOBAL_TYPE_REPLACEMENTS))
    local_type_replacements: dict = field(default_factory=lambda: dict(LOCAL_TYPE_REPLACEMENTS))
    global_name_replacements: dict = field(default_factory=lambda: dict(GLOBAL_NAME_REPLACEMENTS))
    local_name_replacements: dict = field(default_factory=lambda: dict(LOCAL_NAME_REPLACEMENTS))
    generics: dict = field(default_factory=lambda: dict(GENERICS))
    ignored_funcs: list = field(default_factory=lambda: list(IGNORED_FUNCS))

    def __post_init__(self):
        self.api_folder = Path(self.api_folder)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """Overlay a mapping onto the defaults.

        Raises ValueError for keys that are not configuration fields.
        """
        names = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - names)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_file(cls, path) -> 'Config':
        with open(path, 'r', encoding='utf-8') as f:
            return cls.from_dict(json.load(f))
