"""Type signature rendering for parameter and return annotations"""
import re
import sys

from .config import UnknownTypeError
from .inference import resolve_references, strip_marker

re_empty_callable = re.compile(r'function\(\)')


def _role(is_return):
    return 'return' if is_return else 'param'


def make_param_name(config, parameter, is_return, element):
    name = parameter.name
    name = config.global_name_replacements.get(name, name)

    local_replacements = config.local_name_replacements.get(element.name, {})
    name = local_replacements.get(f'{_role(is_return)}_{name}', name)

    if name.endswith('...'):
        name = '...'

    return name.replace('-', '_')


def replace_type(config, type_name, name, is_return, element):
    """Apply the global pattern table, then the per-element override.

    Returns the replacement, or None when no rule applies.
    """
    replacement = None
    for pattern, value in config.global_type_replacements.items():
        if re.fullmatch(pattern, type_name):
            replacement = value
            break

    local_replacements = config.local_type_replacements.get(element.name, {})
    return local_replacements.get(f'{_role(is_return)}_{type_name}_{name}', replacement)


def is_known_type(context, type_name):
    config = context.config
    return (
        type_name in config.known_types
        or type_name in config.known_classes
        or context.aliases.is_registered(type_name)
        or type_name in config.known_aliases
        or type_name.startswith('function(')
    )


def normalize_callable(type_name):
    if type_name == 'function()':
        return 'function'
    if type_name.startswith('function('):
        # Empty callables nested in a signature are plain `function`
        return 'fun' + re_empty_callable.sub('function', type_name[len('function'):])
    return type_name


def unique(items):
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def make_param_types(context, name, types, is_return, element, description=None):
    """Render a declared type list as a `|` union.

    Constant references are folded into aliases first; unknown tokens are
    replaced with the configured sentinel type.
    """
    config = context.config
    resolved = resolve_references(context, types, description)

    rendered = []
    for type_name in resolved.types:
        type_name = strip_marker(type_name)
        replacement = replace_type(config, type_name, name, is_return, element)

        if replacement is not None:
            type_name = replacement
        elif not is_known_type(context, type_name):
            if config.strict:
                raise UnknownTypeError(f'Unknown type `{type_name}` in `{element.name}`')
            context.unknown_types.append((element.name, type_name))
            print(f'!!! WARNING: Unknown type `{type_name}` has been replaced with `{config.unknown_type}`',
                  file=sys.stderr)
            rendered.append(config.unknown_type)
            continue

        rendered.append(normalize_callable(type_name))

    return '|'.join(unique(rendered)) or config.unknown_type
