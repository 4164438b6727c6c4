"""
# Xilize: assemblers.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Assembly of raw blocks into a parse tree.
"""

from xilize.blocks import Block
from xilize.scopes import Scope


class BlockAssembler:
    """
    Single forward pass over the raw blocks, with a stack of open parents.

    - An end block closes the innermost open start block.
    - A start block is attached to the current parent and becomes the current parent.
    - An extended block is attached to the current parent, and then claims every immediately following
      unsigned block (that is neither a start block nor an end block) as a child,
      each child getting its own copy of the extended block's signature.
    - Any other block is attached to the current parent.

    Mismatched start and end blocks are warned about; assembly never fails.
    """
    _scope: Scope
    _raw_blocks: list[Block]
    _index: int

    def __init__(self, scope: Scope, raw_blocks: list[Block]):
        self._scope = scope
        self._raw_blocks = raw_blocks
        self._index = 0

    def assemble(self, root: Block) -> Block:
        open_parents = [root]

        while self._index < len(self._raw_blocks):
            block = self._raw_blocks[self._index]
            self._index += 1

            if block.is_end_block:
                if len(open_parents) > 1:
                    open_parents.pop()
                else:
                    block.scope.warning('end block without matching start block', block.line_number)
                continue

            open_parents[-1].add_child(block)

            if block.is_start_block:
                open_parents.append(block)
            elif block.is_extended:
                self._extend(block)

        unclosed_count = len(open_parents) - 1
        if unclosed_count > 0:
            self._scope.warning(f'{unclosed_count} more start blocks than end blocks')

        return root

    def _extend(self, extended_block: Block):
        while self._index < len(self._raw_blocks):
            block = self._raw_blocks[self._index]
            if block.is_signed or block.is_start_block or block.is_end_block:
                break

            block.signature = extended_block.signature.replicate()
            extended_block.add_child(block)
            self._index += 1
