"""
# Xilize: structures.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Structural signatures: lists, tables and definition lists.
"""

import re
from typing import Optional

from xilize import inline
from xilize.bases import Signature
from xilize.blocks import Block
from xilize.exceptions import TranslationException
from xilize.modifiers import CellModifiers, ColumnModifiers, MODIFIERS_REGEX, Modifiers, TableModifiers
from xilize.scopes import Scope
from xilize.utilities import none_to_empty_string


def _indent(level: int) -> str:
    return '  ' * level


class _ListItem:
    _modifiers: Optional[Modifiers]
    _html: str
    _sublist: Optional['_List']

    def __init__(self, modifiers: Optional[Modifiers] = None, html: str = ''):
        self._modifiers = modifiers
        self._html = html
        self._sublist = None

    @property
    def sublist(self) -> Optional['_List']:
        return self._sublist

    @sublist.setter
    def sublist(self, value: '_List'):
        self._sublist = value

    def write(self, level: int) -> str:
        attributes = '' if self._modifiers is None else self._modifiers.tag_attributes()
        html = f'{_indent(level)}<li{attributes}>{self._html}'
        if self._sublist is not None:
            html += '\n' + self._sublist.write(level + 1) + _indent(level)

        return html + '</li>\n'


class _List:
    _level: int
    _type: str
    _modifiers: Optional[Modifiers]
    _items: list[_ListItem]

    def __init__(self, level: int, type_: str, modifiers: Optional[Modifiers] = None):
        self._level = level
        self._type = type_
        self._modifiers = modifiers
        self._items = []

    @property
    def level(self) -> int:
        return self._level

    @property
    def items(self) -> list[_ListItem]:
        return self._items

    def add_item(self, item: _ListItem):
        self._items.append(item)

    def add_sublist(self, sublist: '_List'):
        if len(self._items) == 0:
            self._items.append(_ListItem())

        self._items[-1].sublist = sublist

    def write(self, level: int) -> str:
        tag_name = 'ol' if self._type == '#' else 'ul'
        attributes = '' if self._modifiers is None else self._modifiers.tag_attributes()

        html = f'{_indent(level)}<{tag_name}{attributes}>\n'
        for item in self._items:
            html += item.write(level + 1)
        html += f'{_indent(level)}</{tag_name}>\n'

        return html


class ListSignature(Signature):
    """
    Nested unordered (`*`) and ordered (`#`) lists, one item per line.

    The depth of an item is the length of its run of symbols.
    Modifiers before the symbols apply to a newly opened list,
    and modifiers right after the symbols (followed by a space) apply to the item.
    Skipped depths are filled with implied lists and empty items.
    """
    _ITEM_PATTERN_COMPILED = re.compile(
        rf'''
            [ ]*
            (?P<list_modifiers> {MODIFIERS_REGEX} )
            (?P<symbols> [*#]+ )
            (?: (?P<item_modifiers> {MODIFIERS_REGEX} ) [ ] )?
            [ ]*
            (?P<text> .* )
        ''',
        flags=re.VERBOSE,
    )

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        block.writes_children = False

        head = _List(0, '!')
        stack = [head]

        for index, line in enumerate(block.lines):
            line_number = block.line_numbers[index]
            item_match = ListSignature._ITEM_PATTERN_COMPILED.fullmatch(line)
            if item_match is None:
                scope.error('problem with list signature', line_number)
                continue

            list_modifiers = Modifiers(item_match.group('list_modifiers'))
            symbols = item_match.group('symbols')
            level = len(symbols)
            type_ = symbols[0]
            item_modifiers = Modifiers(item_match.group('item_modifiers'))
            item = _ListItem(item_modifiers, inline.markup(scope, item_match.group('text'), line_number))

            if stack[-1].level == level:
                stack[-1].add_item(item)
            elif stack[-1].level > level:
                while stack[-1].level > level:
                    stack.pop()
                stack[-1].add_item(item)
            else:
                for implied_level in range(stack[-1].level + 1, level):
                    implied_list = _List(implied_level, type_)
                    stack[-1].add_sublist(implied_list)
                    stack.append(implied_list)

                new_list = _List(level, type_, list_modifiers)
                new_list.add_item(item)
                stack[-1].add_sublist(new_list)
                stack.append(new_list)

        if len(head.items) == 0 or head.items[0].sublist is None:
            return ''

        return head.items[0].sublist.write(0).rstrip('\n')


class TableSignature(Signature):
    """
    Tables, from `|` row lines or from child blocks.

    Header rows (with the `_` modifier) before the first body row go into `<thead>`,
    those after it into `<tfoot>`.
    An optional leading `&{columns: ... }` section gives column groups and columns.
    """
    modifiers_class = TableModifiers

    _ROW_PATTERN_COMPILED = re.compile(
        rf'^ [ ]* (?P<modifiers> {MODIFIERS_REGEX} ) (?P<cells> \| .* ) $',
        flags=re.VERBOSE,
    )
    _CELL_PATTERN_COMPILED = re.compile(
        rf'\| (?: (?P<modifiers> {MODIFIERS_REGEX} ) [ ] )? [ ]* (?P<content> [^|]* )',
        flags=re.VERBOSE,
    )
    _COLUMNS_END_PATTERN_COMPILED = re.compile(r' *\} *')
    _WIDTH_REGEX = r'[0-9]+ [*%]? | \*'
    _WIDTH_PATTERN_COMPILED = re.compile(_WIDTH_REGEX, flags=re.VERBOSE)
    _TRAILING_WIDTH_PATTERN_COMPILED = re.compile(rf'[ ]+ (?P<width> {_WIDTH_REGEX} ) \Z', flags=re.VERBOSE)

    _header_rows: list[str]
    _body_rows: list[str]
    _footer_rows: list[str]
    _is_header_closed: bool

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        self._header_rows = []
        self._body_rows = []
        self._footer_rows = []
        self._is_header_closed = False

        block.writes_children = False
        html = f'<table{self.tag_attributes()}>{self._build_column_groups(block)}\n'

        if block.children is not None:
            for child in block.children:
                if child.children is not None:
                    self._add_child_row(scope, child)
                elif len(child.lines) > 0:
                    self._add_row(scope, child, child.lines[0], child.line_number)
        else:
            for index, line in enumerate(block.lines):
                self._add_row(scope, block, line, block.line_numbers[index])

        for tag_name, rows in (('thead', self._header_rows), ('tfoot', self._footer_rows), ('tbody', self._body_rows)):
            if len(rows) > 0:
                html += f'<{tag_name}>\n' + ''.join(rows) + f'</{tag_name}>\n'

        return html + '</table>'

    def _file_row(self, modifiers: Modifiers, row_html: str):
        if modifiers.is_header:
            if self._is_header_closed:
                self._footer_rows.append(row_html)
            else:
                self._header_rows.append(row_html)
        else:
            self._is_header_closed = True
            self._body_rows.append(row_html)

    def _add_row(self, scope: Scope, block: Block, line: str, line_number: int):
        row_match = TableSignature._ROW_PATTERN_COMPILED.match(line)
        if row_match is None:
            scope.warning('expecting a table row', line_number)
            return

        modifiers = Modifiers(row_match.group('modifiers'))
        cells = row_match.group('cells')
        if cells.endswith('|'):
            cells = cells[:-1]

        row_html = f'  <tr{modifiers.tag_attributes()}>\n'
        for cell_match in TableSignature._CELL_PATTERN_COMPILED.finditer(cells):
            cell_modifiers = CellModifiers(cell_match.group('modifiers'))
            tag_name = 'th' if modifiers.is_header or cell_modifiers.is_header else 'td'
            content = inline.markup(scope, cell_match.group('content').strip(), line_number)
            row_html += f'    <{tag_name}{cell_modifiers.tag_attributes()}>{content}</{tag_name}>\n'
        row_html += '  </tr>\n'

        self._file_row(modifiers, row_html)

    def _add_child_row(self, scope: Scope, row_block: Block):
        modifiers = row_block.signature.modifiers

        row_html = f'  <tr{modifiers.tag_attributes()}>\n'
        for cell_block in row_block.children:
            row_html += self._build_child_cell(scope, cell_block, modifiers.is_header)
        row_html += '  </tr>\n'

        self._file_row(modifiers, row_html)

    def _build_child_cell(self, scope: Scope, cell_block: Block, is_header_row: bool) -> str:
        cell_signature = cell_block.signature
        tag_name = 'th' if is_header_row or cell_signature.modifiers.is_header else 'td'

        html = f'    <{tag_name}{cell_signature.tag_attributes()}>\n'
        if cell_block.children is None:
            if not cell_block.is_signed or cell_signature.name == 'cell':
                cell_block.signature = scope.get_signature('imo')
            cell_block.translate()
            html += f'{none_to_empty_string(cell_block.translation)}\n'
        else:
            for child in cell_block.children:
                child.translate()
                html += f'{none_to_empty_string(child.translation)}\n'
        html += f'    </{tag_name}>\n'

        return html

    def _build_column_groups(self, block: Block) -> str:
        if len(block.lines) == 0 or not block.lines[0].startswith('&{columns:'):
            return ''

        block.remove_line(0)
        html = ''
        while len(block.lines) > 0:
            text = block.lines[0]
            block.remove_line(0)

            if TableSignature._COLUMNS_END_PATTERN_COMPILED.fullmatch(text):
                break

            bar_index = text.find('|')
            if bar_index == -1:
                html += f'\n<colgroup{TableSignature._build_column_attributes(text)} />'
                continue

            html += f'\n<colgroup{TableSignature._build_column_attributes(text[:bar_index])}>\n'
            for column_text in text[bar_index + 1:].split('|'):
                html += f'  <col{TableSignature._build_column_attributes(column_text)} />\n'
            html += '</colgroup>'

        return html

    @staticmethod
    def _build_column_attributes(text: str) -> str:
        text = text.strip()
        if text == '':
            return ''

        if TableSignature._WIDTH_PATTERN_COMPILED.fullmatch(text):
            return ColumnModifiers(None, text).tag_attributes()

        width_match = TableSignature._TRAILING_WIDTH_PATTERN_COMPILED.search(text)
        if width_match is None:
            return ColumnModifiers(text).tag_attributes()

        modifier_text = text[:width_match.start()].strip()
        return ColumnModifiers(modifier_text, width_match.group('width')).tag_attributes()


class RowSignature(Signature):
    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        raise TranslationException('"row." is only meaningful as table child block')


class CellSignature(Signature):
    modifiers_class = CellModifiers

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        raise TranslationException('"cell." is only meaningful as table-row child block')


class DefinitionListSignature(Signature):
    """
    Definition lists, one `term : term : definition ; definition` entry per line.
    """
    _TERM_SEPARATOR_PATTERN_COMPILED = re.compile(r'\s+:\s+')
    _DEFINITION_SEPARATOR_PATTERN_COMPILED = re.compile(r'\s+;\s+')

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        html = f'<dl{self.tag_attributes()}>\n'

        for index, line in enumerate(block.lines):
            line_number = block.line_numbers[index]
            parts = re.split(pattern=DefinitionListSignature._TERM_SEPARATOR_PATTERN_COMPILED, string=line)
            if len(parts) < 2:
                raise TranslationException('too few parts in definition list')

            for term in parts[:-1]:
                html += f'  <dt>{inline.markup(scope, term, line_number)}</dt>\n'

            definitions = re.split(pattern=DefinitionListSignature._DEFINITION_SEPARATOR_PATTERN_COMPILED, string=parts[-1])
            for definition in definitions:
                html += f'    <dd>{inline.markup(scope, definition, line_number)}</dd>\n'

        return html + '</dl>'
