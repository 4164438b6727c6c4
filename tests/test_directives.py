"""
# Xilize: test_directives.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `directives.py`.
"""

import io
import os
import tempfile
import unittest

from xilize.core import create_master_scope, xilize_blocks
from xilize.directives import process_definition_value
from xilize.documents import DocumentScope
from xilize.reporting import Reporter


def translate(text, definitions=None):
    stream = io.StringIO()
    master_scope = create_master_scope(reporter=Reporter(stream), definitions=definitions)
    return xilize_blocks(text, master_scope), stream


def create_document_scope(path=None):
    stream = io.StringIO()
    master_scope = create_master_scope(reporter=Reporter(stream))
    return DocumentScope(master_scope, path), stream


class TestDefinitions(unittest.TestCase):
    def test_define(self):
        self.assertEqual(translate('define. name World\n\np. Hello ${name}')[0], '<p>Hello World</p>\n\n')
        self.assertEqual(
            translate('define. first 1\nsecond ${first}2\n\nkm. ${first}${second}')[0],
            '112\n\n',
        )
        self.assertEqual(
            translate('define. greeting\nHello\nthere\n\np. ${greeting}')[0],
            '<p>Hello<br />\nthere</p>\n\n',
        )

    def test_define_append_and_literal(self):
        self.assertEqual(
            translate('define. css a.css\n\ndefadd. css &{literal: b.css}\n\nkm. ${css}')[0],
            'a.css b.css\n\n',
        )
        self.assertEqual(translate('define. raw &{literal:${not}}\n\nkm. ${raw}')[0], '${not}\n\n')

    def test_undefine(self):
        self.assertEqual(translate('define. x 1\n\nundef. x\n\nkm. [${x}]')[0], '[${x}]\n\n')

    def test_definition_warnings(self):
        html, stream = translate('define.\n\ndefine. single\n\nundef.\n\ndefine. a 1\nlonely')
        self.assertEqual(html, '')
        self.assertEqual(
            stream.getvalue(),
            'warning: `<string>`, line 1: nothing to define\n'
            'warning: `<string>`, line 3: key without value\n'
            'warning: `<string>`, line 5: nothing to undefine\n'
            'warning: `<string>`, line 8: key and value required\n'
        )

    def test_process_definition_value(self):
        scope, _ = create_document_scope()
        scope.define('k', 'v')
        self.assertEqual(process_definition_value(scope, '${k}-&{1 + 1}'), 'v-2')
        self.assertEqual(process_definition_value(scope, '&{literal:${k}}'), '${k}')

    def test_body_and_xilize(self):
        scope, _ = create_document_scope()
        scope.translate_fragment('body(home).')
        self.assertEqual(scope.value('_BodyTagAttributes_'), ' class="home"')

        scope, _ = create_document_scope()
        scope.translate_fragment('xilize(main). title Home')
        self.assertEqual(scope.value('title'), 'Home')
        self.assertEqual(scope.value('_BodyTagAttributes_'), ' class="main"')


class TestAbbreviations(unittest.TestCase):
    def test_abbreviation_line(self):
        self.assertEqual(
            translate('[xil] http://xilize.sourceforge.net\n\np. "Xilize":xil')[0],
            '<p><a href="http://xilize.sourceforge.net">Xilize</a></p>\n\n',
        )

    def test_abbreviation_signature(self):
        html, stream = translate('abbreviation. [ab] http://a.org\nbad line\n\np. "A":ab')
        self.assertEqual(html, '<p><a href="http://a.org">A</a></p>\n\n')
        self.assertEqual(stream.getvalue(), 'warning: `<string>`, line 2: skipping malformed URL abbreviation\n')


class TestCustomSignatures(unittest.TestCase):
    def test_custom_signature(self):
        self.assertEqual(
            translate("signature. shout\n'<p>' + text.upper() + '</p>'\n\nshout. hello")[0],
            '<p>HELLO</p>\n\n',
        )

    def test_custom_signature_indented_code(self):
        self.assertEqual(
            translate(
                'signature. box\n'
                '    result = \'<div class="box">\' + text + \'</div>\'\n'
                '    result\n'
                '\n'
                'box. hi'
            )[0],
            '<div class="box">hi</div>\n\n',
        )

    def test_custom_signature_bad_names(self):
        html, stream = translate('signature. shout2\ncode')
        self.assertEqual(html, '')
        self.assertEqual(
            stream.getvalue(),
            'error: `<string>`, line 1: custom signature name may contain only letters\n'
            'error: `<string>`, line 1: custom signature ignored\n'
        )

        _, stream = translate('signature. lonely')
        self.assertEqual(stream.getvalue(), 'error: `<string>`, line 1: signature must have at least two lines\n')

    def test_custom_signature_failure(self):
        html, stream = translate('signature. broken\n1/0\n\nbroken. x')
        self.assertEqual(html, '\n\n')
        self.assertEqual(
            stream.getvalue(),
            'error: `<string>`, line 4: custom signature translation failed: '
            'ZeroDivisionError: division by zero (`<string>`, line 2)\n'
        )

        reporter = Reporter(io.StringIO())
        xilize_blocks('signature. broken\n1/0\n\nbroken. x', create_master_scope(reporter=reporter))
        self.assertEqual(reporter.error_count, 1)

    def test_custom_signature_override(self):
        html, stream = translate('signature. p\n"custom"\n\np. x')
        self.assertEqual(html, 'custom\n\n')
        self.assertEqual(
            stream.getvalue(),
            'warning: `<string>`, line 1: signature override: p is also native signature\n',
        )


class TestConditionals(unittest.TestCase):
    def test_if_else(self):
        self.assertEqual(translate('if. 1 == 1 {{\np. yes\n\nelse. {{\np. no\n}}\n}}')[0], '<p>yes</p>\n\n')
        self.assertEqual(translate('if. 1 == 2 {{\np. yes\n\nelse. {{\np. no\n}}\n}}')[0], '<p>no</p>\n\n')
        self.assertEqual(translate('if. False {{\np. hidden\n}}')[0], '\n')
        self.assertEqual(translate('if. "yes" {{\np. shown\n}}')[0], '<p>shown</p>\n\n')

    def test_if_key_condition(self):
        text = 'if. scope.is_defined("draft") {{\np. Draft\n}}'
        self.assertEqual(translate(text, {'draft': 'yes'})[0], '<p>Draft</p>\n\n')
        self.assertEqual(translate(text)[0], '\n')

    def test_if_failures(self):
        html, stream = translate('if. undefined_name {{\np. x\n}}')
        self.assertEqual(html, '\n')
        self.assertTrue(stream.getvalue().startswith('error: `<string>`, line 1: NameError:'))

        html, stream = translate('if. True')
        self.assertEqual(html, '\n')
        self.assertEqual(
            stream.getvalue(),
            'error: `<string>`, line 1: child blocks required (used when condition is true)\n',
        )

    def test_ifdef_leaf(self):
        self.assertEqual(translate('ifdef. draft p. Draft copy', {'draft': 'yes'})[0], '<p>Draft copy</p>\n\n')
        self.assertEqual(translate('ifdef. draft p. Draft copy')[0], '\n')
        self.assertEqual(translate('ifndef. draft p. Final')[0], '<p>Final</p>\n\n')
        self.assertEqual(translate('ifdef.   draft p. Spaced', {'draft': 'yes'})[0], '<p>Spaced</p>\n\n')

        html, stream = translate('ifdef. draft')
        self.assertEqual(html, '\n')
        self.assertEqual(stream.getvalue(), 'error: `<string>`, line 1: must have key and text for true condition\n')

    def test_ifdef_parent(self):
        text = 'ifdef. draft {{\np. a\n}}'
        self.assertEqual(translate(text, {'draft': 'yes'})[0], '<p>a</p>\n\n')
        self.assertEqual(translate(text)[0], '\n')
        self.assertEqual(translate('ifndef. draft {{\np. b\n}}')[0], '<p>b</p>\n\n')


class TestIncludes(unittest.TestCase):
    def test_include(self):
        with tempfile.TemporaryDirectory() as directory:
            with open(os.path.join(directory, 'inc.xil'), 'w', encoding='utf-8') as include_file:
                include_file.write('define. who Included\n\np. from include\n')

            scope, stream = create_document_scope(os.path.join(directory, 'main.xil'))
            html = scope.translate_fragment('define. name inc\n\ninclude. ${name}.xil\n\np. ${who}')

        self.assertEqual(html, '<p>from include</p>\n\n<p>Included</p>\n\n')
        self.assertEqual(stream.getvalue(), '')

    def test_include_missing_file(self):
        with tempfile.TemporaryDirectory() as directory:
            scope, stream = create_document_scope(os.path.join(directory, 'main.xil'))
            html = scope.translate_fragment('include. nope.xil\n\np. after')

        self.assertEqual(html, '<p>after</p>\n\n')
        self.assertIn('error reading include file', stream.getvalue())

        _, stream = translate('include.')
        self.assertEqual(stream.getvalue(), 'warning: `<string>`, line 1: nothing to include\n')

    def test_include_raw(self):
        with tempfile.TemporaryDirectory() as directory:
            with open(os.path.join(directory, 'raw.html'), 'w', encoding='utf-8') as raw_file:
                raw_file.write('<b>raw</b>')

            scope, _ = create_document_scope(os.path.join(directory, 'main.xil'))
            html = scope.translate_fragment('includeRaw. raw.html')

        self.assertEqual(html, '<b>raw</b>\n\n')


if __name__ == '__main__':
    unittest.main()
