"""
# Xilize: blocks.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Blocks, the nodes of the parse tree.
"""

from typing import Optional

from xilize.exceptions import EvaluationException, XilizeException
from xilize.scopes import Scope
from xilize.utilities import wrap_line


class Block:
    """
    A block of source lines together with its signature.

    Raw blocks come out of the tokenizer flagged as start, end, extended or signed;
    the assembler then arranges them into a tree.
    The four phases `exec_`, `translate`, `translate_last` and `write`
    dispatch to the block's signature.
    """
    _scope: Scope
    _signature: Optional['Signature']
    _lines: list[str]
    _line_numbers: list[int]
    _children: Optional[list['Block']]
    _line_number: int
    _trailing_blank_line_count: int
    _is_extended: bool
    _is_start_block: bool
    _is_end_block: bool
    _is_signed: bool
    _writes_children: bool
    _translation: Optional[str]

    def __init__(self, scope: Scope, line_number: int = -1, signature: Optional['Signature'] = None):
        self._scope = scope
        self._signature = signature
        self._lines = []
        self._line_numbers = []
        self._children = None
        self._line_number = line_number
        self._trailing_blank_line_count = 0
        self._is_extended = False
        self._is_start_block = False
        self._is_end_block = False
        self._is_signed = signature is not None
        self._writes_children = True
        self._translation = ''

    def __str__(self) -> str:
        if self._is_end_block:
            return f'[end block:{self._trailing_blank_line_count}]'

        signature_name = '' if self._signature is None else str(self._signature)
        dots = '..' if self._is_extended else '.'
        description = f'{signature_name}{dots} [lines={len(self._lines)}:{self._trailing_blank_line_count}]'
        if len(self._lines) > 0:
            first_line = self._lines[0]
            if len(first_line) < 30:
                description += f' {first_line}'
            else:
                description += f' {first_line[:30]}...'
        if self._is_start_block:
            description += ' [start block]'

        return description

    @staticmethod
    def create_end_block(scope: Scope, line_number: int) -> 'Block':
        block = Block(scope, line_number)
        block._is_end_block = True
        return block

    @staticmethod
    def create_static(scope: Scope, text: str) -> 'Block':
        """
        Create a block whose translation is fixed text.
        """
        block = Block(scope)
        block._translation = text
        return block

    ################################
    # Properties
    ################################

    @property
    def scope(self) -> Scope:
        return self._scope

    @property
    def signature(self) -> Optional['Signature']:
        return self._signature

    @signature.setter
    def signature(self, value: 'Signature'):
        self._signature = value

    @property
    def lines(self) -> list[str]:
        return self._lines

    @property
    def line_numbers(self) -> list[int]:
        return self._line_numbers

    @property
    def children(self) -> Optional[list['Block']]:
        return self._children

    @children.setter
    def children(self, value: Optional[list['Block']]):
        self._children = value

    @property
    def is_parent(self) -> bool:
        return self._children is not None

    @property
    def line_number(self) -> int:
        return self._line_number

    @property
    def trailing_blank_line_count(self) -> int:
        return self._trailing_blank_line_count

    @trailing_blank_line_count.setter
    def trailing_blank_line_count(self, value: int):
        self._trailing_blank_line_count = value

    @property
    def is_extended(self) -> bool:
        return self._is_extended

    @is_extended.setter
    def is_extended(self, value: bool):
        self._is_extended = value

    @property
    def is_start_block(self) -> bool:
        return self._is_start_block

    @is_start_block.setter
    def is_start_block(self, value: bool):
        self._is_start_block = value

    @property
    def is_end_block(self) -> bool:
        return self._is_end_block

    @property
    def is_signed(self) -> bool:
        return self._is_signed

    @is_signed.setter
    def is_signed(self, value: bool):
        self._is_signed = value

    @property
    def writes_children(self) -> bool:
        return self._writes_children

    @writes_children.setter
    def writes_children(self, value: bool):
        self._writes_children = value

    @property
    def translation(self) -> Optional[str]:
        return self._translation

    @translation.setter
    def translation(self, value: Optional[str]):
        self._translation = value

    ################################
    # Lines
    ################################

    def add_line(self, line: str, line_number: Optional[int] = None):
        if line_number is None:
            line_number = self._line_number + len(self._lines)

        self._lines.append(line)
        self._line_numbers.append(line_number)

    def set_line(self, index: int, line: str):
        self._lines[index] = line

    def remove_line(self, index: int):
        del self._lines[index]
        del self._line_numbers[index]

    def line_number_of(self, line: str) -> int:
        try:
            return self._line_numbers[self._lines.index(line)]
        except ValueError:
            return self._line_number

    def lines_as_string(self, start: int = 0, trim: bool = False) -> str:
        """
        Join the lines from index `start`, without a newline after the last.
        """
        lines = self._lines[start:]
        if trim:
            lines = [line.strip() for line in lines]

        return '\n'.join(lines)

    def wrap_lines(self, width: int) -> str:
        """
        Join the lines (and those of any children) with every line terminated by a newline.

        Lines longer than a positive `width` are wrapped.
        Children count as continuation text,
        so trailing blank lines are kept everywhere except after the last child.
        """
        if self._children is None:
            return self._wrap_own_lines(width, adds_trailing_blank_lines=False)

        text = self._wrap_own_lines(width, adds_trailing_blank_lines=True)
        for index, child in enumerate(self._children):
            is_last_child = index == len(self._children) - 1
            text += child._wrap_own_lines(width, adds_trailing_blank_lines=not is_last_child)

        return text

    def _wrap_own_lines(self, width: int, adds_trailing_blank_lines: bool) -> str:
        text = ''
        for line in self._lines:
            for wrapped_line in wrap_line(line, width):
                text += f'{wrapped_line}\n'

        if adds_trailing_blank_lines:
            text += '\n' * self._trailing_blank_line_count

        return text

    ################################
    # Tree
    ################################

    def add_child(self, block: 'Block'):
        if self._children is None:
            self._children = []

        self._children.append(block)

    def wrap_children(self, prelude: str, coda: str):
        """
        Frame the children between two pieces of fixed text.

        Empty pieces are omitted.
        """
        if self._children is None:
            self._children = []

        if prelude != '':
            self._children.insert(0, Block.create_static(self._scope, prelude))
        if coda != '':
            self._children.append(Block.create_static(self._scope, coda))

    def detach(self) -> 'Block':
        """
        Create a childless twin of this block, sharing its signature.
        """
        twin = Block(self._scope, self._line_number, self._signature)
        twin._lines = list(self._lines)
        twin._line_numbers = list(self._line_numbers)
        twin._trailing_blank_line_count = self._trailing_blank_line_count
        twin._is_signed = self._is_signed

        return twin

    ################################
    # Phases
    ################################

    def exec_(self):
        """
        Execute directives, pre-order depth-first.
        """
        if self._signature is not None:
            self._signature.exec_(self._scope, self)

        if self._children is not None:
            for child in list(self._children):
                child.exec_()

    def translate(self):
        if self._signature is None:
            return

        if self._is_extended and self._children is not None and not self._signature.merges_extension:
            self._translate_extension()
            return

        try:
            self._translation = self._signature.translate(self._scope, self)
        except XilizeException as exception:
            self.report_failure(exception)
            self._translation = ''

    def _translate_extension(self):
        twin = self.detach()
        twin.translate()
        for child in self._children:
            child.translate()

        self._children.insert(0, twin)
        self._translation = None

    def translate_children(self):
        if self._children is None:
            return

        for child in self._children:
            child.translate()

    def translate_last(self):
        """
        Translate what could not be translated before all other blocks were, children included.
        """
        if self._translation is not None or self._signature is None:
            return

        try:
            self._translation = self._signature.translate_last(self._scope, self)
        except XilizeException as exception:
            self.report_failure(exception)
            self._translation = ''

        if self._translation is None and self._children is not None:
            for child in self._children:
                child.translate_last()

    def write(self) -> str:
        if self._signature is not None and self._signature.writes:
            return self._signature.write(self._scope, self)

        if self._writes_children and self._children is not None:
            return ''.join(child.write() for child in self._children)

        if self._translation is not None:
            return f'{self._translation}\n'

        return ''

    def report_failure(self, exception: XilizeException):
        line_number = self._line_number
        if isinstance(exception, EvaluationException) and exception.line_number is not None:
            line_number = exception.line_number

        self._scope.error(str(exception), line_number)
