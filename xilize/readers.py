"""
# Xilize: readers.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Block tokenizer and signature resolution.
"""

import re
from typing import Iterable, Iterator, Optional, Union

from xilize.blocks import Block
from xilize.modifiers import MODIFIERS_REGEX
from xilize.scopes import Scope
from xilize.signatures import FootnoteSignature
from xilize.utilities import normalise_line

SIGNATURE_PATTERN_COMPILED = re.compile(
    rf'''
        ^ \s*
        (?P<name> \w+ )
        (?P<modifiers> {MODIFIERS_REGEX} )
        (?P<dots> \.\. | \. )
        (?: $ | [ ] (?P<text> .* ) )
        $
    ''',
    flags=re.VERBOSE,
)
SYMBOL_SIGNATURE_PATTERN_COMPILED = re.compile(
    rf'''
        ^ [ ]*
        (?P<modifiers> {MODIFIERS_REGEX} )
        (?P<symbol> \*+ | [#]+ | \| )
        (?: {MODIFIERS_REGEX} )
        (?: [ ]* $ | [ ] .* $ )
    ''',
    flags=re.VERBOSE,
)
ABBREVIATION_PATTERN_COMPILED = re.compile(
    r'^ [ ]* \[ (?P<abbreviation> \w [a-zA-Z0-9_.-]+ ) \] [ ]* (?P<url> \S+ ) $',
    flags=re.VERBOSE,
)

_FOOTNOTE_NAME_PATTERN_COMPILED = re.compile(r'fn (?P<number> [0-9]+ )', flags=re.VERBOSE)
_DIGITS_PATTERN_COMPILED = re.compile('[0-9]+')


def is_abbreviation_line(line: str) -> bool:
    return ABBREVIATION_PATTERN_COMPILED.match(line) is not None


def _sign_named(scope: Scope, block: Block, first_line: str) -> bool:
    signature_match = SIGNATURE_PATTERN_COMPILED.match(first_line)
    if signature_match is None:
        return False

    name = signature_match.group('name')
    modifier_text = signature_match.group('modifiers')
    dots = signature_match.group('dots')

    if _DIGITS_PATTERN_COMPILED.fullmatch(name):
        return False

    footnote_match = _FOOTNOTE_NAME_PATTERN_COMPILED.fullmatch(name)
    if footnote_match is not None:
        signature = FootnoteSignature(footnote_match.group('number')).instantiate(modifier_text)
    else:
        template = scope.lookup_signature(name)
        if template is None:
            if not scope.is_defined('_NoWarnOnLooksLikeSig_'):
                scope.warning(f'"{name}{modifier_text}{dots}" looks like a signature', block.line_number)
            return False
        signature = template.instantiate(modifier_text)

    text = signature_match.group('text')
    if text is not None:
        block.add_line(text, block.line_number)

    block.signature = signature
    block.is_extended = dots == '..'
    return True


def _sign_symbol(scope: Scope, block: Block, first_line: str) -> bool:
    symbol_match = SYMBOL_SIGNATURE_PATTERN_COMPILED.match(first_line)
    if symbol_match is None:
        return False

    if symbol_match.group('symbol') == '|':
        signature_name = 'table'
    else:
        signature_name = 'list'

    template = scope.lookup_signature(signature_name)
    if template is None:
        return False

    block.add_line(symbol_match.group(), block.line_number)
    block.signature = template.instantiate()
    return True


def _sign_abbreviation(scope: Scope, block: Block, first_line: str) -> bool:
    if not is_abbreviation_line(first_line):
        return False

    template = scope.lookup_signature('abbreviation')
    if template is None:
        return False

    block.add_line(first_line, block.line_number)
    block.signature = template.instantiate()
    return True


def create_raw_block(scope: Scope, line_number: int, first_line: str) -> Block:
    """
    Create a raw block from its first line, resolving its signature.

    The syntaxes tried, first match wins, are:
    1. named signature `name«modifiers».` or `name«modifiers»..` (extended), with optional trailing text
    2. symbol shorthand, `*` or `#` for a list, `|` for a table
    3. URL abbreviation `[abbreviation] url`
    A block matching none of these is unsigned,
    and gets the signature named by `_UnsignedBlockSigName_`.
    """
    block = Block(scope, line_number)

    if (
        _sign_named(scope, block, first_line)
        or _sign_symbol(scope, block, first_line)
        or _sign_abbreviation(scope, block, first_line)
    ):
        block.is_signed = True
        return block

    block.signature = scope.get_signature(scope.value('_UnsignedBlockSigName_'))
    block.add_line(first_line, line_number)
    block.is_signed = False
    return block


def morph_block(block: Block, first_line: str):
    """
    Re-resolve a block as though its first line were `first_line`, then execute its new signature.
    """
    morphed_block = create_raw_block(block.scope, block.line_number, first_line)

    block.signature = morphed_block.signature
    block.is_signed = morphed_block.is_signed
    if len(block.lines) > 0:
        block.remove_line(0)
    for index, line in enumerate(morphed_block.lines):
        block.lines.insert(index, line)
        block.line_numbers.insert(index, morphed_block.line_numbers[index])

    block.signature.exec_(block.scope, block)


class BlockReader:
    """
    Tokenizer turning source text into a forward-only sequence of raw blocks.

    Lines are normalised (trailing whitespace stripped, tabs expanded) and comment lines skipped.
    A block ends at a blank line, at an end-marker line (which becomes an end block of its own),
    or at a line ending in the start marker (which becomes the block's last line).
    The number of blank lines following a block is recorded on the block.
    """
    _BLANK_LINE_PATTERN_COMPILED = re.compile(' *')
    _LINE_TERMINATOR_PATTERN_COMPILED = re.compile(r'\r\n|\r|\n')

    _scope: Scope
    _source_lines: Iterator[str]
    _line_number: int
    _pushed_back_line: Optional[str]
    _comment_pattern: re.Pattern
    _start_pattern: re.Pattern
    _end_pattern: re.Pattern
    _tab_replacement: str

    def __init__(self, scope: Scope, source: Union[str, Iterable[str]]):
        self._scope = scope
        if isinstance(source, str):
            source = BlockReader._split_lines(source)
        self._source_lines = iter(source)
        self._line_number = 0
        self._pushed_back_line = None

        self._comment_pattern = re.compile(r'\s*' + re.escape(scope.value('_LineCommentString_')) + '.*')
        self._start_pattern = re.compile('(?P<prefix>.*?) *' + re.escape(scope.value('_BlockStartString_')))
        self._end_pattern = re.compile(' *' + re.escape(scope.value('_BlockEndString_')))

        spaces_per_tab = 1
        if scope.is_defined('_SpacesPerTab_'):
            try:
                spaces_per_tab = int(scope.value('_SpacesPerTab_'))
            except ValueError:
                scope.warning('_SpacesPerTab_ key is set to something that is not a number')
        self._tab_replacement = ' ' * spaces_per_tab

    @staticmethod
    def _split_lines(text: str) -> list[str]:
        """
        Split text into lines at CR LF, CR and LF only, without an empty line after a final terminator.
        """
        lines = re.split(pattern=BlockReader._LINE_TERMINATOR_PATTERN_COMPILED, string=text)
        if lines[-1] == '':
            lines.pop()

        return lines

    def __iter__(self) -> Iterator[Block]:
        while True:
            block = self.read_raw_block()
            if block is None:
                return
            yield block

    @property
    def line_number(self) -> int:
        if self._pushed_back_line is None:
            return self._line_number

        return self._line_number - 1

    def _next_line(self) -> Optional[str]:
        if self._pushed_back_line is not None:
            line = self._pushed_back_line
            self._pushed_back_line = None
            return line

        while True:
            line = next(self._source_lines, None)
            if line is None:
                return None
            self._line_number += 1
            if not self._comment_pattern.fullmatch(line):
                break

        return normalise_line(line, self._tab_replacement)

    def _push_back(self, line: str):
        self._pushed_back_line = line

    def _is_blank(self, line: str) -> bool:
        return BlockReader._BLANK_LINE_PATTERN_COMPILED.fullmatch(line) is not None

    def read_raw_block(self) -> Optional[Block]:
        while True:
            line = self._next_line()
            if line is None:
                return None
            if not self._is_blank(line):
                break

        if self._end_pattern.fullmatch(line):
            return Block.create_end_block(self._scope, self.line_number)

        start_match = self._start_pattern.fullmatch(line)
        if start_match is not None:
            block = create_raw_block(self._scope, self.line_number, start_match.group('prefix'))
            block.is_start_block = True
            block.trailing_blank_line_count = self._count_blank_lines()
            return block

        block = create_raw_block(self._scope, self.line_number, line)

        line = self._next_line()
        while line is not None and not self._is_blank(line):
            if self._end_pattern.fullmatch(line):
                break

            start_match = self._start_pattern.fullmatch(line)
            if start_match is not None:
                block.add_line(start_match.group('prefix'), self.line_number)
                block.is_start_block = True
                block.trailing_blank_line_count = self._count_blank_lines()
                return block

            block.add_line(line, self.line_number)
            line = self._next_line()

        if line is not None:
            self._push_back(line)

        block.trailing_blank_line_count = self._count_blank_lines()
        return block

    def _count_blank_lines(self) -> int:
        count = 0
        while True:
            line = self._next_line()
            if line is None:
                return count
            if not self._is_blank(line):
                self._push_back(line)
                return count
            count += 1
