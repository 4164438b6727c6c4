"""
# Xilize: test_signatures.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `signatures.py`.
"""

import io
import unittest

from xilize.core import create_master_scope, xilize_blocks
from xilize.reporting import Reporter


def translate(text, definitions=None):
    stream = io.StringIO()
    master_scope = create_master_scope(reporter=Reporter(stream), definitions=definitions)
    return xilize_blocks(text, master_scope), stream


class TestSignatures(unittest.TestCase):
    def test_paragraphs(self):
        self.assertEqual(translate('p. Hello')[0], '<p>Hello</p>\n\n')
        self.assertEqual(translate('p(intro). Hello')[0], '<p class="intro">Hello</p>\n\n')
        self.assertEqual(translate('Hello world')[0], '<p>Hello world</p>\n\n')
        self.assertEqual(translate('one\n\ntwo')[0], '<p>one</p>\n\n<p>two</p>\n\n')

    def test_paragraph_with_children(self):
        html, stream = translate('p. Lead {{\nchild\n}}')
        self.assertEqual(html, '<p>Lead</p>\n<p>child</p>\n\n')
        self.assertEqual(
            stream.getvalue(),
            "error: `<string>`, line 1: 'p' signature should not have child blocks\n",
        )

    def test_unsigned_container(self):
        self.assertEqual(translate('{{\none\n\ntwo\n}}')[0], '<p>one</p>\n<p>two</p>\n\n')

    def test_headings(self):
        self.assertEqual(translate('h1(#top). Title')[0], '<h1 id="top">Title</h1>\n\n')
        self.assertEqual(translate('h6. *Small*')[0], '<h6><strong>Small</strong></h6>\n\n')

    def test_horizontal_rule_and_fixed_tags(self):
        self.assertEqual(translate('hr.')[0], '<hr />\n\n')
        self.assertEqual(translate('hr(thin).')[0], '<hr class="thin" />\n\n')
        self.assertEqual(
            translate('divStart(box).\n\np. in\n\ndivEnd.')[0],
            '<div class="box">\n\n<p>in</p>\n\n</div>\n\n',
        )

    def test_division(self):
        self.assertEqual(
            translate('div(box). {{\none\n\ntwo\n}}')[0],
            '<div class="box">\n<p>one</p>\n<p>two</p>\n</div>\n\n',
        )

        html, stream = translate('div. empty')
        self.assertEqual(html, '\n\n')
        self.assertEqual(stream.getvalue(), "error: `<string>`, line 1: 'div' requires child blocks\n")

    def test_blockquotes(self):
        self.assertEqual(translate('bq. Quote')[0], '<blockquote><p>Quote</p></blockquote>\n\n')
        self.assertEqual(
            translate('bq(q). {{\none\n}}')[0],
            '<blockquote class="q">\n<p>one</p>\n</blockquote>\n\n',
        )
        self.assertEqual(
            translate('bqo. {{\none\n}}')[0],
            '<blockquote>\n<p>one</p>\n</blockquote>\n\n',
        )

    def test_preformatted(self):
        self.assertEqual(
            translate('pre. line one\n  x < y')[0],
            '<pre>line one\n  x &lt; y\n</pre>\n\n',
        )
        self.assertEqual(translate('prex. *not* <b>')[0], '<pre>*not* &lt;b&gt;\n</pre>\n\n')
        self.assertEqual(translate('bc. x')[0], '<pre><code>x\n</code></pre>\n\n')
        self.assertEqual(translate('bcx. <x>')[0], '<pre><code>&lt;x&gt;\n</code></pre>\n\n')

    def test_preformatted_extended(self):
        self.assertEqual(
            translate('pre.. first\n\nsecond\n\np. after')[0],
            '<pre>first\n\nsecond\n</pre>\n\n<p>after</p>\n\n',
        )

    def test_preformatted_wrapping(self):
        html, _ = translate('pre. aaa bbb ccc', {'_PreStringWrap_': '7'})
        self.assertEqual(html, '<pre>aaa bbb\nccc\n</pre>\n\n')

    def test_extended_paragraph(self):
        self.assertEqual(
            translate('p(x).. one\n\ntwo')[0],
            '<p class="x">one</p>\n<p class="x">two</p>\n\n',
        )

    def test_comments(self):
        self.assertEqual(translate('xilcom. secret\n\np. shown')[0], '\n<p>shown</p>\n\n')
        self.assertEqual(
            translate('xmlcom. note & ${k}', {'k': 'v'})[0],
            '<!-- note &amp; v\n -->\n\n',
        )

    def test_keys_and_macros_and_inline_markup_only(self):
        self.assertEqual(translate('km. ${k} *x*', {'k': 'v'})[0], 'v *x*\n\n')
        self.assertEqual(translate('imo. *x*')[0], '<strong>x</strong>\n\n')
        self.assertEqual(translate('raw. <b>as is</b>')[0], '<b>as is</b>\n\n')

    def test_clear(self):
        self.assertEqual(translate('clear.')[0], '<div style="clear:both" ></div>\n\n')
        self.assertEqual(translate('clear>.')[0], '<div style="clear:right" ></div>\n\n')

        html, stream = translate('clear=.')
        self.assertEqual(html, '\n\n')
        self.assertIn("only '>' and '<' are valid signature modifiers here", stream.getvalue())

    def test_javascript(self):
        self.assertEqual(
            translate('javascript. alert(1);')[0],
            '<script type="text/javascript">\n<!-- \nalert(1);\n// -->\n</script>\n\n',
        )

    def test_footnotes(self):
        self.assertEqual(
            translate('fn1. The note.')[0],
            '<p class="fn_note" id="fn1"><a class="fn_anchor" href="#fnmk1">1</a> The note.</p>\n\n',
        )
        self.assertEqual(
            translate('fn2.. First\n\nSecond')[0],
            '<p class="fn_note" id="fn2"><a class="fn_anchor" href="#fnmk2">2</a> First</p>\n'
            '<p class="fn_note">Second</p>\n\n',
        )
        self.assertEqual(
            translate('fn3. Old style.', {'_FootnoteStyle_': 'classic'})[0],
            '<p class="fn_note" id="fn3"><sup><a class="fn_anchor" href="#fnmk3">3</a> </sup>Old style.</p>\n\n',
        )

    def test_table_of_contents(self):
        self.assertEqual(
            translate('toc. 2\n\nh2. Alpha\n\nh3. Beta')[0],
            '<ul class="toc">\n'
            '  <li><a href="#xil_1">Alpha</a>\n'
            '    <ul>\n'
            '      <li><a href="#xil_2">Beta</a></li>\n'
            '    </ul>\n'
            '  </li>\n'
            '</ul>\n\n'
            '<h2 id="xil_1">Alpha</h2>\n\n'
            '<h3 id="xil_2">Beta</h3>\n\n',
        )

    def test_table_of_contents_entries(self):
        self.assertEqual(
            translate('toc(contents). 2 2 #\n\nh2. Intro &{toc:Start}\n\nh2(#two). Second&{tocEntry:Other}\n\nh3. Deep')[0],
            '<ol class="contents">\n'
            '  <li><a href="#xil_1">Start</a></li>\n'
            '  <li><a href="#two">Other</a></li>\n'
            '</ol>\n\n'
            '<h2 id="xil_1">Intro Start</h2>\n\n'
            '<h2 id="two">Second</h2>\n\n'
            '<h3>Deep</h3>\n\n',
        )

    def test_table_of_contents_empty(self):
        html, stream = translate('toc.')
        self.assertEqual(html, '\n\n')
        self.assertEqual(stream.getvalue(), 'warning: `<string>`, line 1: TOC is empty\n')


if __name__ == '__main__':
    unittest.main()
