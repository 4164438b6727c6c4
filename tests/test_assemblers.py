"""
# Xilize: test_assemblers.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `assemblers.py`.
"""

import io
import unittest

from xilize.assemblers import BlockAssembler
from xilize.blocks import Block
from xilize.core import create_master_scope
from xilize.readers import BlockReader
from xilize.reporting import Reporter
from xilize.scopes import Scope


def assemble(text):
    stream = io.StringIO()
    scope = Scope(create_master_scope(reporter=Reporter(stream)))
    raw_blocks = list(BlockReader(scope, text))
    root = BlockAssembler(scope, raw_blocks).assemble(Block(scope))
    return root, stream


class TestAssemblers(unittest.TestCase):
    def test_block_assembler_nesting(self):
        root, stream = assemble('div. {{\none\n\nbq. {{\ntwo\n}}\n}}\nafter')
        division, after = root.children
        self.assertEqual(division.signature.name, 'div')
        self.assertEqual(after.lines, ['after'])
        self.assertIsNone(after.children)

        one, blockquote = division.children
        self.assertEqual(one.lines, ['one'])
        self.assertEqual(blockquote.signature.name, 'bq')
        self.assertEqual([child.lines for child in blockquote.children], [['two']])
        self.assertEqual(stream.getvalue(), '')

    def test_block_assembler_unmatched_end_block(self):
        root, stream = assemble('one\n}}')
        self.assertEqual(len(root.children), 1)
        self.assertEqual(
            stream.getvalue(),
            'warning: `<string>`, line 2: end block without matching start block\n',
        )

    def test_block_assembler_unclosed_start_block(self):
        root, stream = assemble('div. {{\none')
        self.assertEqual(len(root.children), 1)
        self.assertEqual(len(root.children[0].children), 1)
        self.assertEqual(stream.getvalue(), 'warning: `<string>`: 1 more start blocks than end blocks\n')

    def test_block_assembler_extended_block(self):
        root, _ = assemble('p(x).. one\n\ntwo\n\nthree\n\nh2. four')
        paragraph, heading = root.children
        self.assertEqual(heading.signature.name, 'h2')

        self.assertEqual([child.lines for child in paragraph.children], [['two'], ['three']])
        for child in paragraph.children:
            self.assertEqual(child.signature.name, 'p')
            self.assertEqual(child.signature.tag_attributes(), ' class="x"')
            self.assertIsNot(child.signature, paragraph.signature)

    def test_block_assembler_extension_stops_at_start_block(self):
        root, _ = assemble('p.. one\n\ntwo {{\nx\n}}')
        paragraph, two = root.children
        self.assertIsNone(paragraph.children)
        self.assertEqual(two.lines, ['two'])
        self.assertEqual([child.lines for child in two.children], [['x']])


if __name__ == '__main__':
    unittest.main()
