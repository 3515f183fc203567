"""
Per-run registries: declared constants and the alias groups built over them.

Both live on a GenerationContext that one generation run owns from start to
finish; nothing here is shared between runs.
"""
from dataclasses import dataclass, field

from .config import Config

DEFAULT_CONSTANT_TYPE = 'integer'


def split_name(full_name):
    """Split `namespace.NAME` at the last dot.

    Returns (None, None) when the name has no usable separator.
    """
    if not full_name:
        return None, None
    namespace, sep, short_name = full_name.rpartition('.')
    if not sep or not namespace or not short_name:
        return None, None
    return namespace, short_name


def name_tokens(short_name):
    return [t for t in short_name.split('_') if t]


@dataclass
class Constant:
    full_name: str
    namespace: str
    short_name: str
    description: str = ''
    rendered_type: str = DEFAULT_CONSTANT_TYPE


@dataclass
class AliasGroup:
    namespace: str
    alias_name: str
    members: set = field(default_factory=set)

    @property
    def full_name(self):
        return f'{self.namespace}.{self.alias_name}'

    def sorted_members(self):
        return sorted(self.members)


class ConstantCatalog:
    def __init__(self):
        # namespace -> {short name: Constant}, in registration order
        self._namespaces = {}

    def register(self, namespace, short_name, constant):
        if not namespace or not short_name:
            return False
        items = self._namespaces.setdefault(namespace, {})
        if short_name in items:
            return False
        items[short_name] = constant
        return True

    def add(self, full_name, description=''):
        """Register a constant by its full name; names without a namespace are dropped."""
        namespace, short_name = split_name(full_name)
        if not namespace:
            return None
        constant = Constant(full_name, namespace, short_name, description or '')
        self.register(namespace, short_name, constant)
        return self.lookup(namespace, short_name)

    def lookup(self, namespace, short_name):
        return self._namespaces.get(namespace, {}).get(short_name)

    def lookup_full(self, full_name):
        return self.lookup(*split_name(full_name))

    def set_rendered_type(self, full_name, type_name):
        constant = self.lookup_full(full_name)
        if constant is None:
            return
        # The first non-default assignment sticks
        if constant.rendered_type != DEFAULT_CONSTANT_TYPE:
            return
        constant.rendered_type = type_name

    def namespaces(self):
        return sorted(self._namespaces)

    def constants(self, namespace):
        return list(self._namespaces.get(namespace, {}).values())

    def __len__(self):
        return sum(len(items) for items in self._namespaces.values())


class AliasStore:
    """Alias groups keyed by (namespace, alias name); registration merges."""

    def __init__(self):
        self._namespaces = {}

    def register(self, namespace, alias_name, full_names):
        """Merge `full_names` into the alias, creating it when it reaches two members.

        Returns the alias group, or None when a new group would be too small.
        """
        aliases = self._namespaces.setdefault(namespace, {})
        alias = aliases.get(alias_name)
        if alias is None:
            members = set(full_names)
            if len(members) < 2:
                return None
            alias = AliasGroup(namespace, alias_name, members)
            aliases[alias_name] = alias
            return alias
        alias.members.update(full_names)
        return alias

    def get(self, namespace, alias_name):
        return self._namespaces.get(namespace, {}).get(alias_name)

    def is_registered(self, type_name):
        namespace, alias_name = split_name(type_name)
        if not namespace:
            return False
        return self.get(namespace, alias_name) is not None

    def owner_of(self, full_name):
        """Return the alias in the constant's own namespace that lists it as a member.

        When several do, the most specific (most tokens, then by name) wins.
        """
        namespace, _ = split_name(full_name)
        owners = [a for a in self._namespaces.get(namespace, {}).values() if full_name in a.members]
        if not owners:
            return None
        owners.sort(key=lambda a: (-len(name_tokens(a.alias_name)), a.alias_name))
        return owners[0]

    def aliases(self, namespace):
        aliases = self._namespaces.get(namespace, {})
        return [aliases[name] for name in sorted(aliases)]

    def __len__(self):
        return sum(len(aliases) for aliases in self._namespaces.values())


@dataclass
class GenerationContext:
    config: Config = field(default_factory=Config)
    catalog: ConstantCatalog = field(default_factory=ConstantCatalog)
    aliases: AliasStore = field(default_factory=AliasStore)
    unknown_types: list = field(default_factory=list)
