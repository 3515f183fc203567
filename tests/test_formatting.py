import unittest
import tempfile
import shutil
from pathlib import Path

from annotation_compiler.formatting import (
    AnnotationWriter,
    decode_text,
    make_comment,
    make_disabled_diagnostics,
    make_header,
    make_param_description,
)


class TestDecodeText(unittest.TestCase):

    def test_inline_tags(self):
        self.assertEqual(decode_text('<code>gui.PROP_SCALE</code>'), '`gui.PROP_SCALE`')
        self.assertEqual(decode_text('<b>bold</b> and <strong>strong</strong>'), '**bold** and **strong**')
        self.assertEqual(decode_text('<em>a</em><i>b</i>'), '*a**b*')
        self.assertEqual(decode_text('<li>first</li>'), '- first')

    def test_remaining_tags_are_stripped(self):
        self.assertEqual(decode_text('<ul><li>one</li></ul><br/>'), '- one')
        self.assertEqual(decode_text('<a href="x">link</a>'), 'link')

    def test_entities(self):
        self.assertEqual(decode_text('a &lt; b &amp;&amp; c'), 'a < b && c')

    def test_empty(self):
        self.assertEqual(decode_text(None), '')
        self.assertEqual(decode_text(''), '')


class TestComments(unittest.TestCase):

    def test_make_comment(self):
        self.assertEqual(make_comment('line one\nline two'), '---line one\n---line two')
        self.assertEqual(make_comment(''), '---')
        self.assertEqual(make_comment('text', '  '), '  text')

    def test_param_description(self):
        self.assertEqual(make_param_description('  mode\n<li>a</li>'), 'mode\n---- a')

    def test_header_skips_duplicate_description(self):
        header = make_header('annotation-compiler', 'Scripting API', '1.2.0', 'GUI API', 'GUI API')
        self.assertEqual(header, '\n'.join([
            '--[[',
            '  Generated with annotation-compiler',
            '  Scripting API 1.2.0',
            '',
            '  GUI API',
            '--]]',
        ]))

    def test_header_with_description(self):
        header = make_header('annotation-compiler', 'Scripting API', '1.2.0', 'GUI API', 'GUI <b>core</b>')
        self.assertIn('\n\n  GUI **core**\n--]]', header)

    def test_disabled_diagnostics(self):
        self.assertEqual(
            make_disabled_diagnostics(['lowercase-global', 'missing-return']),
            '---@meta\n---@diagnostic disable: lowercase-global\n---@diagnostic disable: missing-return',
        )


class TestAnnotationWriter(unittest.TestCase):

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.writer = AnnotationWriter(self.temp_dir / 'api')

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_field_declaration(self):
        self.assertEqual(self.writer.field_declaration('PROP_SCALE', 'string'), '---@field PROP_SCALE string')
        self.assertEqual(
            self.writer.field_declaration('PROP_SCALE', 'integer', 'scale property'),
            '---scale property\n---@field PROP_SCALE integer',
        )

    def test_alias_declaration(self):
        self.assertEqual(
            self.writer.alias_declaration('colors.RGB', ['colors.RGB_BLUE', 'colors.RGB_RED']),
            '---@alias colors.RGB\n---| `colors.RGB_BLUE`\n---| `colors.RGB_RED`',
        )

    def test_prepare_and_save(self):
        stale = self.temp_dir / 'api' / 'stale.lua'
        stale.parent.mkdir(parents=True)
        stale.write_text('old')
        self.writer.prepare_folder()
        self.assertFalse(stale.exists())

        path = self.writer.save('foo.bar', 'content')
        self.assertEqual(path, self.temp_dir / 'api' / 'foo.bar.lua')
        self.assertEqual(path.read_text(encoding='utf-8'), 'content')


if __name__ == '__main__':
    unittest.main()
