"""
Annotation generator for scripting API references.

Turns module descriptors (namespaces with constants, functions, variables,
classes and aliases) into one LuaLS annotation file per namespace.
"""
import argparse
import re
import sys
from pathlib import Path

from .config import Config, UnknownTypeError
from .formatting import (
    AnnotationWriter,
    make_comment,
    make_disabled_diagnostics,
    make_header,
    make_param_description,
)
from .inference import infer_prefix_aliases
from .model import BASIC_ALIAS, BASIC_CLASS, CONSTANT, FUNCTION, VARIABLE, Module, load_modules
from .registry import GenerationContext
from .signatures import make_param_name, make_param_types


def make_const(context, element):
    # Constants are rendered as namespace fields
    return None


def make_var(context, element):
    return make_comment(element.description) + '\n' + f'{element.name} = nil'


def make_param(context, parameter, element):
    name = make_param_name(context.config, parameter, False, element)
    types = make_param_types(context, name, parameter.types, False, element, parameter.doc)
    description = make_param_description(parameter.doc)
    optional = '?' if parameter.is_optional else ''
    return f'---@param {name}{optional} {types} {description}'


def make_return(context, returnvalue, element):
    name = make_param_name(context.config, returnvalue, True, element)
    types = make_param_types(context, name, returnvalue.types, True, element, returnvalue.doc)
    description = make_param_description(returnvalue.doc)
    return f'---@return {types} {name} {description}'


def is_ignored(config, name):
    return any(re.fullmatch(pattern, name) for pattern in config.ignored_funcs)


def make_func(context, element):
    config = context.config
    if is_ignored(config, element.name):
        return None

    lines = [make_param(context, p, element) for p in element.parameters]
    lines += [make_return(context, r, element) for r in element.returnvalues]

    generic = config.generics.get(element.name)
    generic_lines = []
    if generic:
        token = f' {generic} '
        if sum(line.count(token) for line in lines) >= 2:
            lines = [line.replace(token, ' T ') for line in lines]
            generic_lines.append(f'---@generic T: {generic}')

    param_names = [make_param_name(config, p, False, element) for p in element.parameters]
    signature = f"function {element.name}({', '.join(param_names)}) end"

    result = [make_comment(element.description)]
    result += generic_lines
    result += [line.rstrip() for line in lines]
    result.append(signature)
    return '\n'.join(result)


def make_alias(context, element):
    return f'---@alias {element.name} {element.alias}'


def make_class(context, element):
    name = element.name
    lines = [f'---@class {name}']

    for field_name in sorted(element.fields):
        lines.append(f'---@field {field_name} {element.fields[field_name]}')

    for operator_name in sorted(element.operators):
        operator = element.operators[operator_name]
        if operator.get('param'):
            lines.append(f"---@operator {operator_name}({operator['param']}): {operator['result']}")
        else:
            lines.append(f"---@operator {operator_name}: {operator['result']}")

    if element.is_global:
        lines.append(f'{name} = {{}}')

    return '\n'.join(lines)


MAKERS = {
    FUNCTION: make_func,
    VARIABLE: make_var,
    CONSTANT: make_const,
    BASIC_CLASS: make_class,
    BASIC_ALIAS: make_alias,
}


def merge_modules(modules):
    """Merge modules sharing a namespace; returns namespace -> Module."""
    merged = {}
    for module in modules:
        namespace = module.namespace
        # Some modules carry no namespace meta, derive it from the first element
        if not namespace and module.elements:
            namespace = module.elements[0].name.split('.')[0]

        existing = merged.get(namespace)
        if existing is None:
            merged[namespace] = Module(namespace, module.brief, module.description, list(module.elements))
            continue

        existing.elements.extend(module.elements)
        detailed = module.description != module.brief
        if detailed and len(module.description) > len(existing.description):
            existing.description = module.description
    return merged


def collect_constants(context, modules):
    for module in modules:
        for element in module.elements:
            if element.kind == CONSTANT:
                context.catalog.add(element.name, element.description)


def make_body(context, module):
    """Render the declarations of a module, or None if nothing is renderable."""
    elements = [e for e in module.elements if e.kind in MAKERS]
    if not elements:
        print(f'[-] The module "{module.namespace}" is skipped because there are no known elements')
        return None

    body = ''
    for element in sorted(elements, key=lambda e: e.sort_key()):
        text = MAKERS[element.kind](context, element)
        if text:
            body += text + ('\n' if element.kind == BASIC_ALIAS else '\n\n')
    return body.rstrip()


def make_constant_fields(context, writer, namespace):
    return '\n'.join(
        writer.field_declaration(c.short_name, c.rendered_type, c.description)
        for c in context.catalog.constants(namespace)
    )


def make_alias_lines(context, writer, namespace):
    return '\n\n'.join(
        writer.alias_declaration(alias.full_name, alias.sorted_members())
        for alias in context.aliases.aliases(namespace)
    )


def make_namespace(context, writer, name, body):
    parts = [f'---@class {context.config.namespace_class_prefix}.{name}']
    fields_ = make_constant_fields(context, writer, name)
    if fields_:
        parts.append(fields_)
    parts.append(f'{name} = {{}}')
    result = '\n'.join(parts) + '\n\n'
    if body:
        result += body + '\n\n'
    return result + f'return {name}'


def compose_module(context, writer, module, body, api_version):
    config = context.config

    aliases = make_alias_lines(context, writer, module.namespace)
    if aliases:
        body = aliases + '\n\n' + body if body else aliases

    namespace_is_required = any(e.name.startswith(module.namespace + '.') for e in module.elements)

    content = make_header(config.generator_name, config.api_name, api_version, module.brief, module.description)
    content += '\n\n' + make_disabled_diagnostics(config.disabled_diagnostics) + '\n\n'
    if namespace_is_required:
        content += make_namespace(context, writer, module.namespace, body)
    else:
        content += body
    return content.rstrip() + '\n'


def generate_api(modules, api_version, config=None):
    """Generate one annotation file per namespace.

    Returns a dict mapping namespace -> rendered file content.
    """
    print('-- Annotations Generation')

    context = GenerationContext(config or Config())
    writer = AnnotationWriter(context.config.api_folder)
    writer.prepare_folder()

    merged = merge_modules(modules)
    collect_constants(context, merged.values())
    infer_prefix_aliases(context)

    # Bodies first: rendering signatures may still add aliases in any namespace
    bodies = {}
    for namespace in sorted(merged):
        body = make_body(context, merged[namespace])
        if body is not None:
            bodies[namespace] = body

    outputs = {}
    for namespace, body in bodies.items():
        content = compose_module(context, writer, merged[namespace], body, api_version)
        writer.save(namespace, content)
        outputs[namespace] = content

    print('-- Annotations Generated Successfully!')
    print('-' * 40)
    print(f'  Namespaces:     {len(outputs)}')
    print(f'  Constants:      {len(context.catalog)}')
    print(f'  Aliases:        {len(context.aliases)}')
    print(f'  Unknown types:  {len(context.unknown_types)}')
    print(f'\n Output:   {writer.api_folder}')

    return outputs


def main(argv=None):
    parser = argparse.ArgumentParser(description='Generate LuaLS annotations from API module descriptors')
    parser.add_argument('modules', type=Path, help='JSON file with a list of module descriptors')
    parser.add_argument('-o', '--output', type=Path, help='folder that receives the annotation files')
    parser.add_argument('-c', '--config', type=Path, help='JSON file overriding the default configuration')
    parser.add_argument('--api-version', default='unknown', help='API version written into file headers')
    parser.add_argument('--strict', action='store_true', help='abort on the first unknown type')
    args = parser.parse_args(argv)

    if not args.modules.exists():
        print(f'Error: {args.modules} not found', file=sys.stderr)
        return 1

    if args.config and not args.config.exists():
        print(f'Error: {args.config} not found', file=sys.stderr)
        return 1

    try:
        config = Config.from_file(args.config) if args.config else Config()
        modules = load_modules(args.modules)
    except (ValueError, KeyError, TypeError) as e:
        # json.JSONDecodeError is a ValueError
        print(f'Error: invalid input: {e}', file=sys.stderr)
        return 1

    if args.output:
        config.api_folder = args.output
    if args.strict:
        config.strict = True

    try:
        generate_api(modules, args.api_version, config)
    except UnknownTypeError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
