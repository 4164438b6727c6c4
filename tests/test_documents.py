"""
# Xilize: test_documents.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `documents.py`.
"""

import io
import os
import tempfile
import unittest

from xilize.core import create_master_scope
from xilize.documents import DocumentScope
from xilize.exceptions import XilizeException
from xilize.reporting import Reporter

NO_PROLOG_OR_EPILOG = {'prolog': 'false', 'epilog': 'false'}


def create_document_scope(path=None, definitions=None):
    stream = io.StringIO()
    master_scope = create_master_scope(reporter=Reporter(stream), definitions=definitions)
    return DocumentScope(master_scope, path), stream


def write_file(directory, name, text):
    with open(os.path.join(directory, name), 'w', encoding='utf-8') as file:
        file.write(text)


class TestDocumentScope(unittest.TestCase):
    def test_natural_document(self):
        scope, stream = create_document_scope()
        self.assertEqual(
            scope.translate_document('My Page\n\nSome text.'),
            '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Strict//EN" '
            '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-strict.dtd">\n'
            '<html xmlns="http://www.w3.org/1999/xhtml">\n'
            '<head>\n'
            '  <meta http-equiv="Content-Type" content="text/html; charset=utf-8" />\n'
            '  <title>My Page</title>\n'
            '</head>\n'
            '<body>\n'
            '\n'
            '<h1>My Page</h1>\n'
            '\n'
            '<p>Some text.</p>\n'
            '\n'
            '</body>\n'
            '</html>\n'
            '\n',
        )
        self.assertEqual(stream.getvalue(), 'info: `<string>`: translating\n')
        self.assertEqual(scope.value('_NaturalLabel_'), 'My Page')

    def test_prolog_and_epilog_suppressed(self):
        scope, _ = create_document_scope(definitions=NO_PROLOG_OR_EPILOG)
        self.assertEqual(scope.translate_document('p. only'), '\n\n<p>only</p>\n\n\n\n')

    def test_natural_heading_skips_signed_blocks(self):
        scope, _ = create_document_scope(definitions=NO_PROLOG_OR_EPILOG)
        self.assertEqual(
            scope.translate_document('p. Signed\n\nHeading text\n\nBody text'),
            '\n\n<p>Signed</p>\n\n<h1>Heading text</h1>\n\n<p>Body text</p>\n\n\n\n',
        )

    def test_natural_mode_off(self):
        scope, _ = create_document_scope(definitions={**NO_PROLOG_OR_EPILOG, '_Natural_': 'false'})
        self.assertEqual(scope.translate_document('Just text'), '\n\n<p>Just text</p>\n\n\n\n')
        self.assertFalse(scope.is_defined('_NaturalLabel_'))

    def test_explicit_title_wins(self):
        scope, _ = create_document_scope(definitions={'title': 'Explicit'})
        html = scope.translate_document('Natural heading')
        self.assertIn('  <title>Explicit</title>\n', html)
        self.assertIn('<h1>Natural heading</h1>\n', html)

    def test_head_elements(self):
        scope, _ = create_document_scope(
            definitions={
                'css': 'a.css b.css',
                'keywords': 'markup, xhtml',
                'cssPreferred': 'Main main.css',
                'favicon': 'favicon.ico',
            },
        )
        html = scope.translate_document('body(home).\n\np. x')
        self.assertIn('  <meta name="keywords" content="markup, xhtml" />\n', html)
        self.assertIn('  <link href="a.css" rel="stylesheet" type="text/css" />\n', html)
        self.assertIn('  <link href="b.css" rel="stylesheet" type="text/css" />\n', html)
        self.assertIn('  <link href="main.css" title="Main" rel="stylesheet" type="text/css" />\n', html)
        self.assertIn('  <link rel="shortcut icon" href="favicon.ico" />\n', html)
        self.assertIn('<body class="home">\n', html)

    def test_unknown_doctype(self):
        scope, stream = create_document_scope(definitions={'doctype': 'weird'})
        html = scope.translate_document('p. x')
        self.assertTrue(html.startswith('<html xmlns="http://www.w3.org/1999/xhtml">\n'))
        self.assertIn('unknown doctype `weird`', stream.getvalue())

    def test_custom_prolog_and_epilog(self):
        scope, _ = create_document_scope(
            definitions={'customProlog': '<html><body>', 'customEpilog': '</body></html>'},
        )
        self.assertEqual(
            scope.translate_document('p. x'),
            '<html><body>\n\n<p>x</p>\n\n</body></html>\n\n',
        )

    def test_halted_environment(self):
        scope, _ = create_document_scope()
        scope.environment.halt()
        with self.assertRaises(XilizeException) as context:
            scope.translate_document('p. x')
        self.assertEqual(context.exception.exit_code, 4)

    def test_translate_fragment(self):
        scope, stream = create_document_scope()
        self.assertEqual(scope.translate_fragment('Plain\n\nh2. Sub'), '<p>Plain</p>\n\n<h2>Sub</h2>\n\n')
        self.assertEqual(stream.getvalue(), '')


class TestDocumentFiles(unittest.TestCase):
    def test_output_path(self):
        scope, _ = create_document_scope(os.path.join('docs', 'page.xil'))
        self.assertEqual(scope.output_path(), os.path.join('docs', 'page.html'))
        self.assertEqual(scope.directory, 'docs')
        self.assertEqual(scope.resolve_path('inc.xil'), os.path.join('docs', 'inc.xil'))

        scope, _ = create_document_scope(os.path.join('docs', 'page.xil'), {'_OutputExtension_': 'htm'})
        self.assertEqual(scope.output_path(), os.path.join('docs', 'page.htm'))

        scope, _ = create_document_scope()
        self.assertEqual(scope.directory, os.curdir)

    def test_file_keys(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, 'page.xil')
            scope, stream = create_document_scope(path, NO_PROLOG_OR_EPILOG)
            html = scope.translate_document('p. ${_FileNameXil_} to ${_FileNameHtml_}')

            self.assertEqual(html, '\n\n<p>page.xil to page.html</p>\n\n\n\n')
            self.assertEqual(scope.value('_FilePathXil_'), os.path.abspath(path).replace(os.sep, '/'))
            self.assertEqual(scope.value('_FileNameOutput_'), 'page.html')
            self.assertEqual(stream.getvalue(), f'info: `{path}`: translating\n')

    def test_natural_includes(self):
        with tempfile.TemporaryDirectory() as directory:
            write_file(directory, 'header.xil', 'p. header\n')
            write_file(directory, 'footer.xil', 'p. footer\n')

            scope, stream = create_document_scope(
                os.path.join(directory, 'page.xil'),
                {**NO_PROLOG_OR_EPILOG, 'headerinc': 'header.xil', 'footerinc': 'footer.xil'},
            )
            html = scope.translate_document('Title\n\nbody')

        self.assertEqual(
            html,
            '\n\n<p>header</p>\n\n<h1>Title</h1>\n\n<p>body</p>\n\n<p>footer</p>\n\n\n\n',
        )
        self.assertNotIn('error', stream.getvalue())

    def test_read_include(self):
        with tempfile.TemporaryDirectory() as directory:
            write_file(directory, 'inc.xil', 'define. shared yes\n\np. one\n\np. two\n')

            scope, _ = create_document_scope(os.path.join(directory, 'main.xil'))
            blocks = scope.read_include('inc.xil')

            self.assertEqual(len(blocks), 2)
            self.assertEqual(scope.value('shared'), 'yes')
            self.assertIsNone(scope.read_include('missing.xil', 3))


if __name__ == '__main__':
    unittest.main()
