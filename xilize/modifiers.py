"""
# Xilize: modifiers.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Parsing of signature modifiers into tag attributes.

Modifiers are written between a signature name and its terminating period,
e.g. `p(intro#first){color:red}[fr]<(.`, and are also allowed in list items, table rows and cells,
images and spans. The mini-language is:
````
(class#id)          class and/or id (commas in the class become spaces)
{{attributes}}      arbitrary tag attributes, passed through verbatim
{style}             inline style
[lang]              language
( and )             one em of left and right padding per parenthesis
<> < > =            justify, left, right, center
- ^ ~               vertical middle, top, bottom
_                   header (table rows and cells)
\\N /N               column span and row span (table cells)
````
"""

import re
from typing import Optional

CLASS_ID_REGEX = r'\( (?: \w | [#,-] )+ \)'
ARBITRARY_ATTRIBUTES_REGEX = r'\{\{ [^}\t\n\r\f\v]+ \}\}'
STYLE_REGEX = r'\{ [^}\t\n\r\f\v]+ \}'
LANGUAGE_REGEX = r'\[ [a-zA-Z0-9-]+ \]'
COLUMN_SPAN_REGEX = r'\\ [0-9]+'
ROW_SPAN_REGEX = r'/ [0-9]+'
SYMBOLS_REGEX = r'_ | - | \^ | ~ | > | < | = | \(+ | \)+'

MODIFIERS_REGEX = (
    '(?: '
    + ' | '.join([
        CLASS_ID_REGEX,
        STYLE_REGEX,
        LANGUAGE_REGEX,
        ARBITRARY_ATTRIBUTES_REGEX,
        COLUMN_SPAN_REGEX,
        ROW_SPAN_REGEX,
        SYMBOLS_REGEX,
    ])
    + ' )*'
)
"""
Regex for a (possibly empty) modifier string, for use with `re.VERBOSE`.
"""

_CLASS_ID_PATTERN_COMPILED = re.compile(r'\( (?P<class_id> (?: \w | [#,-] )+ ) \)', flags=re.ASCII | re.VERBOSE)
_ARBITRARY_ATTRIBUTES_PATTERN_COMPILED = re.compile(r'\{\{ (?P<attributes> [^}\t\n\r\f\v]+ ) \}\}', flags=re.VERBOSE)
_STYLE_PATTERN_COMPILED = re.compile(r'\{ (?P<style> [^}\t\n\r\f\v]+ ) \}', flags=re.VERBOSE)
_LANGUAGE_PATTERN_COMPILED = re.compile(r'\[ (?P<language> [a-zA-Z0-9-]+ ) \]', flags=re.VERBOSE)
_COLUMN_SPAN_PATTERN_COMPILED = re.compile(r'\\ (?P<span> [0-9]+ )', flags=re.VERBOSE)
_ROW_SPAN_PATTERN_COMPILED = re.compile(r'/ (?P<span> [0-9]+ )', flags=re.VERBOSE)

_HORIZONTAL_ALIGNMENT_FROM_SYMBOL = {
    '<>': 'justify',
    '<': 'left',
    '>': 'right',
    '=': 'center',
}
_VERTICAL_ALIGNMENT_FROM_SYMBOL = {
    '-': 'middle',
    '^': 'top',
    '~': 'bottom',
}


def _remove_span(string: str, match: re.Match) -> str:
    return string[:match.start()] + string[match.end():]


def _remove_first(string: str, substring: str) -> tuple[str, bool]:
    index = string.find(substring)
    if index == -1:
        return string, False

    return string[:index] + string[index + len(substring):], True


class Modifiers:
    """
    Modifiers for an ordinary block element.

    Each construct is consumed from the modifier string in a fixed order:
    class/id, arbitrary attributes, style, language, padding, horizontal alignment,
    vertical alignment, header.
    Subclasses vary how alignment and padding render into the style attribute.
    """
    _text: str
    _css_class: str
    _id: str
    _language: str
    _style: str
    _arbitrary_attributes: str
    _left_padding: int
    _right_padding: int
    _horizontal_alignment: Optional[str]
    _vertical_alignment: Optional[str]
    _is_header: bool
    _column_span: str
    _row_span: str
    _has_changed: bool

    def __init__(self, text: Optional[str] = None):
        self._text = '' if text is None else text.strip()
        self._css_class = ''
        self._id = ''
        self._language = ''
        self._style = ''
        self._arbitrary_attributes = ''
        self._left_padding = 0
        self._right_padding = 0
        self._horizontal_alignment = None
        self._vertical_alignment = None
        self._is_header = False
        self._column_span = ''
        self._row_span = ''
        self._has_changed = False

        if self._text != '':
            remaining = self._parse(self._text)
            self._parse_spans(remaining)

    def __str__(self) -> str:
        return self._text

    @property
    def css_class(self) -> str:
        return self._css_class

    @property
    def id_(self) -> str:
        return self._id

    @property
    def language(self) -> str:
        return self._language

    @property
    def style(self) -> str:
        return self._style

    @property
    def arbitrary_attributes(self) -> str:
        return self._arbitrary_attributes

    @property
    def left_padding(self) -> int:
        return self._left_padding

    @property
    def right_padding(self) -> int:
        return self._right_padding

    @property
    def horizontal_alignment(self) -> Optional[str]:
        return self._horizontal_alignment

    @property
    def vertical_alignment(self) -> Optional[str]:
        return self._vertical_alignment

    @property
    def is_header(self) -> bool:
        return self._is_header

    @property
    def column_span(self) -> str:
        return self._column_span

    @property
    def row_span(self) -> str:
        return self._row_span

    def has_id(self) -> bool:
        return self._id != ''

    def set_id(self, id_: str):
        self._id = id_
        self._has_changed = True

    def set_default_id(self, id_: str):
        if self._id == '':
            self.set_id(id_)

    def add_css_class(self, css_class: str):
        if self._css_class == '':
            self._css_class = css_class
        else:
            self._css_class = f'{self._css_class} {css_class}'
        self._has_changed = True

    def set_default_css_class(self, css_class: str):
        if self._css_class == '':
            self._css_class = css_class
            self._has_changed = True

    def _parse(self, remaining: str) -> str:
        if '(' in remaining:
            class_id_match = _CLASS_ID_PATTERN_COMPILED.search(remaining)
            if class_id_match is not None:
                class_id = class_id_match.group('class_id')
                self._css_class, _, self._id = class_id.partition('#')
                remaining = _remove_span(remaining, class_id_match)
        if remaining == '':
            return remaining

        if '{{' in remaining:
            arbitrary_attributes_match = _ARBITRARY_ATTRIBUTES_PATTERN_COMPILED.search(remaining)
            if arbitrary_attributes_match is not None:
                self._arbitrary_attributes = arbitrary_attributes_match.group('attributes')
                remaining = _remove_span(remaining, arbitrary_attributes_match)
        if remaining == '':
            return remaining

        if '{' in remaining:
            style_match = _STYLE_PATTERN_COMPILED.search(remaining)
            if style_match is not None:
                style = style_match.group('style')
                if not style.endswith(';'):
                    style = f'{style};'
                self._style = style
                remaining = _remove_span(remaining, style_match)
        if remaining == '':
            return remaining

        if '[' in remaining:
            language_match = _LANGUAGE_PATTERN_COMPILED.search(remaining)
            if language_match is not None:
                self._language = language_match.group('language')
                remaining = _remove_span(remaining, language_match)
        if remaining == '':
            return remaining

        self._left_padding = remaining.count('(')
        self._right_padding = remaining.count(')')
        remaining = remaining.replace('(', '').replace(')', '')
        if remaining == '':
            return remaining

        for symbol, alignment in _HORIZONTAL_ALIGNMENT_FROM_SYMBOL.items():
            remaining, is_found = _remove_first(remaining, symbol)
            if is_found:
                self._horizontal_alignment = alignment

        for symbol, alignment in _VERTICAL_ALIGNMENT_FROM_SYMBOL.items():
            remaining, is_found = _remove_first(remaining, symbol)
            if is_found:
                self._vertical_alignment = alignment

        remaining, self._is_header = _remove_first(remaining, '_')

        return remaining

    def _parse_spans(self, remaining: str):
        pass

    def tag_attributes(self) -> str:
        """
        Render the modifiers as a tag attribute sequence (with leading spaces).
        """
        if self._text == '' and not self._has_changed:
            return ''

        attributes = ''
        if self._css_class != '':
            attributes += f' class="{self._css_class.replace(",", " ")}"'
        if self._id != '':
            attributes += f' id="{self._id}"'
        if self._language != '':
            attributes += f' lang="{self._language}"'

        attributes += self._span_attributes()

        style = self._style + self._symbol_style_declarations()
        if style != '':
            attributes += f' style="{style}"'

        if self._arbitrary_attributes != '':
            attributes += f' {self._arbitrary_attributes}'

        return attributes

    def _symbol_style_declarations(self) -> str:
        declarations = ''
        if self._horizontal_alignment is not None:
            declarations += f'text-align:{self._horizontal_alignment};'
        if self._vertical_alignment is not None:
            declarations += f'vertical-align:{self._vertical_alignment};'

        return declarations + self._padding_declarations('padding')

    def _padding_declarations(self, property_name: str) -> str:
        declarations = ''
        if self._left_padding > 0:
            declarations += f'{property_name}-left:{self._left_padding}em;'
        if self._right_padding > 0:
            declarations += f'{property_name}-right:{self._right_padding}em;'

        return declarations

    def _span_attributes(self) -> str:
        return ''


class ImageModifiers(Modifiers):
    """
    Modifiers for an image, where left and right alignment float the image.
    """
    _VERTICAL_DECLARATION_FROM_ALIGNMENT = {
        'top': 'vertical-align:text-top;',
        'middle': 'vertical-align:middle;',
        'bottom': 'vertical-align:text-bottom;',
    }

    def _symbol_style_declarations(self) -> str:
        declarations = ''
        if self._horizontal_alignment in ('left', 'right'):
            declarations += f'float:{self._horizontal_alignment};'
        if self._vertical_alignment is not None:
            declarations += ImageModifiers._VERTICAL_DECLARATION_FROM_ALIGNMENT[self._vertical_alignment]

        return declarations + self._padding_declarations('padding')


class TableModifiers(Modifiers):
    """
    Modifiers for a table.

    A left- or right-aligned table with padding floats, the padding becoming margins;
    a centred table gets automatic side margins.
    """
    def _symbol_style_declarations(self) -> str:
        is_floated = (
            self._horizontal_alignment in ('left', 'right')
            and (self._left_padding > 0 or self._right_padding > 0)
        )
        if is_floated:
            declarations = f'float:{self._horizontal_alignment};'
            declarations += self._padding_declarations('margin')
            if self._vertical_alignment is not None:
                declarations += f'vertical-align:{self._vertical_alignment};'
            return declarations

        declarations = super()._symbol_style_declarations()
        if self._horizontal_alignment == 'center':
            declarations += 'margin-right:auto;margin-left:auto;'

        return declarations


class CellModifiers(Modifiers):
    """
    Modifiers for a table cell, which also accept `\\N` (column span) and `/N` (row span).
    """
    def _parse_spans(self, remaining: str):
        column_span_match = _COLUMN_SPAN_PATTERN_COMPILED.search(remaining)
        if column_span_match is not None:
            self._column_span = column_span_match.group('span')
            remaining = _remove_span(remaining, column_span_match)

        row_span_match = _ROW_SPAN_PATTERN_COMPILED.search(remaining)
        if row_span_match is not None:
            self._row_span = row_span_match.group('span')

    def _span_attributes(self) -> str:
        attributes = ''
        if self._row_span != '':
            attributes += f' rowspan="{self._row_span}"'
        if self._column_span != '':
            attributes += f' colspan="{self._column_span}"'

        return attributes


class ColumnModifiers(CellModifiers):
    """
    Modifiers for a `<colgroup>` or `<col>` element, with an optional width.
    """
    _width: str

    def __init__(self, text: Optional[str] = None, width: Optional[str] = None):
        super().__init__(text)
        self._width = '' if width is None else width
        self._has_changed = True

    @property
    def width(self) -> str:
        return self._width

    def _span_attributes(self) -> str:
        attributes = ''
        if self._column_span != '':
            attributes += f' span="{self._column_span}"'
        if self._width != '':
            attributes += f' width="{self._width}"'

        return attributes
