"""
Constant alias inference.

Two passes write into the same AliasStore:

- infer_prefix_aliases() runs once per generation and partitions every
  namespace's constants into groups sharing the most specific name prefix.
- resolve_references() runs for each parameter/return type list, groups the
  constants that list references and rewrites the list to use the alias.
"""
import re
from collections import namedtuple

from .registry import name_tokens, split_name

LITERAL_MARKER = 'type:'
CONSTANT_PLACEHOLDER = 'constant'

# `namespace.NAME`, `foo.bar.NAME` or `namespace.PREFIX*` inside free text
re_constant_ref = re.compile(r'(\w+(?:\.\w+)*)\.(\w*\*|\w+)')

ResolvedTypes = namedtuple('ResolvedTypes', ['types', 'fallback'])


def strip_marker(type_name):
    if type_name.startswith(LITERAL_MARKER):
        return type_name[len(LITERAL_MARKER):]
    return type_name


def _candidate_prefixes(short_names):
    """Map every proper token prefix to the names that start with it."""
    candidates = {}
    for short_name in short_names:
        tokens = name_tokens(short_name)
        for length in range(1, len(tokens)):
            prefix = '_'.join(tokens[:length])
            # Token joins can disagree with the raw name (e.g. `A__B`)
            if not short_name.startswith(prefix + '_'):
                continue
            entry = candidates.setdefault(prefix, (length, []))
            if short_name not in entry[1]:
                entry[1].append(short_name)
    return candidates


def infer_prefix_aliases(context):
    """Register one alias per most-specific shared prefix, each constant claimed once."""
    catalog = context.catalog
    for namespace in catalog.namespaces():
        short_names = [c.short_name for c in catalog.constants(namespace)]
        candidates = _candidate_prefixes(short_names)
        ranked = sorted(
            ((length, prefix, names) for prefix, (length, names) in candidates.items() if len(names) >= 2),
            key=lambda entry: (-entry[0], entry[1]),
        )
        claimed = set()
        for _, prefix, names in ranked:
            available = [n for n in names if n not in claimed]
            if len(available) < 2:
                continue
            context.aliases.register(namespace, prefix, [f'{namespace}.{n}' for n in available])
            claimed.update(available)


def common_prefix(short_names):
    """Longest run of leading tokens shared by every name, or None."""
    prefix_tokens = None
    for short_name in short_names:
        tokens = name_tokens(short_name)
        if prefix_tokens is None:
            prefix_tokens = tokens
            continue
        shared = []
        for ours, theirs in zip(prefix_tokens, tokens):
            if ours != theirs:
                break
            shared.append(ours)
        prefix_tokens = shared
        if not prefix_tokens:
            break
    if prefix_tokens:
        return '_'.join(prefix_tokens)
    return None


def _fallback_type(declared):
    if 'string' in declared:
        return 'string'
    if 'hash' in declared:
        return 'hash'
    return 'integer'


def _record_references(context, declared, description):
    """Collect referenced constants as namespace -> [short names], first-seen order."""
    catalog = context.catalog
    references = {}

    def record(full_name):
        namespace, short_name = split_name(full_name)
        if not namespace or catalog.lookup(namespace, short_name) is None:
            return
        names = references.setdefault(namespace, [])
        if short_name not in names:
            names.append(short_name)

    for type_name in declared:
        if type_name != CONSTANT_PLACEHOLDER:
            record(type_name)

    if CONSTANT_PLACEHOLDER in declared and description:
        for m in re_constant_ref.finditer(description):
            namespace, raw_name = m.group(1), m.group(2)
            if raw_name.endswith('*'):
                prefix = raw_name[:-1]
                for constant in catalog.constants(namespace):
                    if constant.short_name.startswith(prefix):
                        record(constant.full_name)
            else:
                record(f'{namespace}.{raw_name}')

    return references


def resolve_references(context, types, description=None):
    """Substitute constant references in a type list with their alias union.

    Returns ResolvedTypes(types, fallback); `fallback` is None when no alias
    was involved and `types` is then the declared list minus literal markers.
    """
    declared = [strip_marker(t) for t in types]
    references = _record_references(context, declared, description)

    # full constant name -> alias full name, and aliases in production order
    resolved = {}
    produced = []

    for namespace, short_names in references.items():
        full_names = [f'{namespace}.{n}' for n in short_names]
        alias = None
        if len(short_names) >= 2:
            prefix = common_prefix(short_names)
            if prefix:
                alias = context.aliases.register(namespace, prefix, full_names)
        if alias is not None:
            for full_name in full_names:
                resolved[full_name] = alias.full_name
            if alias.full_name not in produced:
                produced.append(alias.full_name)
            continue
        # No shared prefix: reuse whatever alias already owns each literal
        for full_name in full_names:
            owner = context.aliases.owner_of(full_name)
            if owner is None:
                continue
            resolved[full_name] = owner.full_name
            if owner.full_name not in produced:
                produced.append(owner.full_name)

    if not produced:
        return ResolvedTypes(declared, None)

    rebuilt = []
    for type_name in declared:
        if type_name == CONSTANT_PLACEHOLDER:
            continue
        type_name = resolved.get(type_name, type_name)
        if type_name in produced and type_name in rebuilt:
            continue
        rebuilt.append(type_name)
    for alias_name in produced:
        if alias_name not in rebuilt:
            rebuilt.append(alias_name)

    fallback = _fallback_type(declared)
    rebuilt.append(fallback)
    for full_name in resolved:
        context.catalog.set_rendered_type(full_name, fallback)

    return ResolvedTypes(rebuilt, fallback)
