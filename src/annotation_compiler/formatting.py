"""
Comment, header and declaration formatting for LuaLS annotation files.
"""
import html
import re
import shutil
from pathlib import Path

# tag -> (markdown, wrap both sides)
INLINE_TAGS = {
    'code': ('`', True),
    'strong': ('**', True),
    'b': ('**', True),
    'em': ('*', True),
    'i': ('*', True),
    'li': ('- ', False),
}

re_any_tag = re.compile(r'<[^<>]*>')


def decode_text(text):
    """Turn html doc text into markdown suitable for annotation comments."""
    result = text or ''

    for tag, (markdown, wrap_both_sides) in INLINE_TAGS.items():
        closing = markdown if wrap_both_sides else ''
        result = re.sub(
            rf'<{tag}>(.*?)</{tag}>',
            lambda m, md=markdown, cl=closing: md + m.group(1) + cl,
            result,
            flags=re.DOTALL,
        )

    result = re_any_tag.sub('', result)
    return html.unescape(result)


def make_comment(text, tab='---'):
    text = decode_text(text)
    lines = text.split('\n') if text else ['']
    return '\n'.join(tab + line for line in lines)


def make_header(generator_name, api_name, api_version, title, description):
    lines = [
        '--[[',
        f'  Generated with {generator_name}',
        f'  {api_name} {api_version}',
        '',
        f'  {decode_text(title)}',
    ]
    if description and description != title:
        lines.append('')
        lines.append(make_comment(description, '  '))
    lines.append('--]]')
    return '\n'.join(lines)


def make_disabled_diagnostics(disabled_diagnostics):
    lines = ['---@meta']
    lines.extend(f'---@diagnostic disable: {d}' for d in disabled_diagnostics)
    return '\n'.join(lines)


def make_param_description(description):
    result = decode_text(description).lstrip()
    return result.replace('\n', '\n---')


class AnnotationWriter:
    """Renders field and alias declarations and saves namespace files."""

    def __init__(self, api_folder):
        self.api_folder = Path(api_folder)

    def field_declaration(self, name, type_name, description=''):
        lines = []
        if description:
            lines.append(make_comment(description))
        lines.append(f'---@field {name} {type_name}')
        return '\n'.join(lines)

    def alias_declaration(self, full_name, members):
        lines = [f'---@alias {full_name}']
        lines.extend(f'---| `{member}`' for member in members)
        return '\n'.join(lines)

    def prepare_folder(self):
        shutil.rmtree(self.api_folder, ignore_errors=True)
        self.api_folder.mkdir(parents=True, exist_ok=True)

    def path_for(self, namespace):
        return self.api_folder / f'{namespace}.lua'

    def save(self, namespace, content):
        path = self.path_for(namespace)
        path.write_text(content, encoding='utf-8')
        return path
