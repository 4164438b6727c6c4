"""
# Xilize: signatures.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Standard content signatures.
"""

import copy
import re
from typing import Optional

from xilize import inline
from xilize.bases import ParentSignature, Signature
from xilize.blocks import Block
from xilize.catalogs import CatalogEntry, CatalogListener
from xilize.constants import XHTML_DOCTYPE_FROM_NAME
from xilize.exceptions import EvaluationException, TranslationException
from xilize.scopes import Scope


def _prepend_translation(block: Block, translation: str) -> None:
    block.translate_children()
    block.wrap_children(translation, '')


class AnonymousSignature(Signature):
    """
    Signature of unsigned blocks.

    Translation is delegated to the signature named by `_UnsignedBlockSigSubstitute_`.
    An unsigned start block with no text of its own is a bare container for its children.
    """
    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        if block.children is not None and all(line.strip() == '' for line in block.lines):
            block.translate_children()
            return None

        if scope.is_defined('_UnsignedBlockSigSubstitute_'):
            substitute = scope.lookup_signature(scope.value('_UnsignedBlockSigSubstitute_'))
            if substitute is not None and substitute.name != self.name:
                return substitute.instantiate().translate(scope, block)

            scope.warning('_UnsignedBlockSigSubstitute_ is not defined', block.line_number)

        return f'<p>{block.lines_as_string()}</p>'


class ParagraphSignature(Signature):
    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        paragraph = f'<p{self.tag_attributes()}>{inline.markup_block(scope, block)}</p>'
        if block.children is None:
            return paragraph

        scope.error("'p' signature should not have child blocks", block.line_number)
        _prepend_translation(block, paragraph)
        return None


class CommentSignature(Signature):
    """
    Source comment, producing no output at all.
    """
    merges_extension = True

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        block.writes_children = False
        return None


class XmlCommentSignature(Signature):
    merges_extension = True

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        block.writes_children = False
        content = inline.markup_keys_and_macros_escaped(scope, block.wrap_lines(0), block.line_number)
        return f'<!-- {content} -->'


class HeadingSignature(Signature):
    """
    Heading `h1` to `h6`, registered in the document catalog.

    A heading is given a unique id when some catalog listener (e.g. a TOC) wants it
    and no id was supplied in the modifiers.
    The catalog text is the heading's markup, unless overridden:
    - `&{toc:text}` makes `text` the catalog text, and leaves `text` in the heading;
    - `&{tocEntry:text}` makes `text` the catalog text, and removes it from the heading.
    """
    _TOC_PATTERN_COMPILED = re.compile(r'(?P<opening> &\{toc (?P<entry> Entry )? : ) (?P<text> [^}]+ ) \}', flags=re.VERBOSE)

    _level: int

    def __init__(self, level: int):
        super().__init__(f'h{level}')
        self._level = level

    @property
    def level(self) -> int:
        return self._level

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        if block.children is not None:
            scope.error('child blocks not allowed here, ignoring them', block.line_number)
            block.writes_children = False

        if scope.has_catalog_listener(CatalogEntry('', '', self._level)) and not self.modifiers.has_id():
            self.modifiers.set_id(scope.unique_id())

        text = block.lines_as_string()
        toc_match = HeadingSignature._TOC_PATTERN_COMPILED.search(text)
        if toc_match is None:
            translation = inline.markup(scope, text, block.line_number)
            catalog_text = translation
        else:
            catalog_text = inline.markup(scope, toc_match.group('text'), block.line_number)
            if toc_match.group('entry') is None:
                text = text[:toc_match.start()] + toc_match.group('text') + text[toc_match.end():]
            else:
                text = text[:toc_match.start()] + text[toc_match.end():]
            translation = inline.markup(scope, text, block.line_number)

        scope.register_catalog_entry(CatalogEntry(self.modifiers.id_, catalog_text, self._level))
        return f'<{self.name}{self.tag_attributes()}>{translation}</{self.name}>'


class HorizontalRuleSignature(Signature):
    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        return f'<hr{self.tag_attributes()} />'


class FixedSignature(Signature):
    """
    Signature translating to fixed tags, ignoring the block's content.
    """
    _tags: str

    def __init__(self, name: str, tags: str):
        super().__init__(name)
        self._tags = tags

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        return self.insert_attributes(self._tags)


class BlockquoteSignature(ParentSignature):
    """
    Blockquote, whose own text (when it has no children) goes in a paragraph.
    """
    def __init__(self, name: str = 'bq'):
        super().__init__(name, '<blockquote><p>', '</p></blockquote>')

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        if block.children is None:
            return super().translate(scope, block)

        block.translate_children()
        block.wrap_children(self.insert_attributes('<blockquote>'), '</blockquote>')
        return None


class PreSignature(Signature):
    """
    Preformatted text, keeping line ends and indentation.

    Extensions are merged into the block, so that blank lines are kept.
    Lines longer than `_PreStringWrap_` columns (when positive) are wrapped.
    """
    merges_extension = True

    _start_tags: str
    _end_tags: str

    def __init__(self, name: str, start_tags: str, end_tags: str):
        super().__init__(name)
        self._start_tags = start_tags
        self._end_tags = end_tags

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        block.writes_children = False

        wrap_width = 0
        if scope.is_defined('_PreStringWrap_'):
            try:
                wrap_width = int(scope.value('_PreStringWrap_'))
            except ValueError:
                scope.warning('_PreStringWrap_ key is set to something that is not a number', block.line_number)

        content = self.mark_up_content(scope, block.wrap_lines(wrap_width), block.line_number)
        return self.insert_attributes(self._start_tags) + content + self._end_tags

    def mark_up_content(self, scope: Scope, text: str, line_number: int) -> str:
        return inline.markup_keep_line_ends(scope, text, line_number)


class PrexSignature(PreSignature):
    """
    Preformatted text that is escaped but otherwise left alone.
    """
    def mark_up_content(self, scope: Scope, text: str, line_number: int) -> str:
        return inline.escape(text)


class KeysAndMacrosSignature(Signature):
    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        translation = inline.markup_keys_and_macros(scope, block.lines_as_string(), block.line_number)
        if block.children is None:
            return translation

        for child in block.children:
            child.signature = self.instantiate()
        _prepend_translation(block, translation)
        return None


class InlineMarkupOnlySignature(Signature):
    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        translation = inline.markup_block(scope, block)
        if block.children is None:
            return translation

        for child in block.children:
            child.signature = self.instantiate()
        _prepend_translation(block, translation)
        return None


class ClearSignature(Signature):
    _SIDE_FROM_MODIFIER_TEXT = {
        '': 'both',
        '>': 'right',
        '<': 'left',
    }

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        modifier_text = str(self.modifiers)
        if modifier_text not in ClearSignature._SIDE_FROM_MODIFIER_TEXT:
            raise TranslationException("only '>' and '<' are valid signature modifiers here")

        side = ClearSignature._SIDE_FROM_MODIFIER_TEXT[modifier_text]
        return f'<div style="clear:{side}" ></div>'


class JavascriptSignature(Signature):
    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        return f'<script type="text/javascript">\n<!-- \n{block.lines_as_string()}\n// -->\n</script>'


class PrologSignature(Signature):
    """
    The document head, up to and including the `<body>` start tag, built from keys.

    `customProlog` replaces the whole prolog, and a false `prolog` key suppresses it.
    """
    _XHTML_START = '<html xmlns="http://www.w3.org/1999/xhtml">\n<head>\n'

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        if scope.is_defined('customProlog'):
            return scope.value('customProlog')

        if not scope.is_value_true('prolog'):
            return ''

        doctype = scope.value('doctype')
        html = XHTML_DOCTYPE_FROM_NAME.get(doctype, '')
        if html == '' and doctype != '':
            scope.warning(f'unknown doctype `{doctype}`', block.line_number)

        html += PrologSignature._XHTML_START
        html += PrologSignature._build_head_elements(scope)
        html += '</head>\n'
        html += f'<body{scope.value("_BodyTagAttributes_")}>'

        return html

    @staticmethod
    def _build_head_elements(scope: Scope) -> str:
        html = ''

        if scope.is_defined('charset'):
            html += f'  <meta http-equiv="Content-Type" content="text/html; charset={scope.value("charset")}" />\n'
        if scope.is_defined('keywords'):
            html += f'  <meta name="keywords" content="{scope.value("keywords")}" />\n'
        if scope.is_defined('title'):
            html += f'  <title>{scope.value("title")}</title>\n'
        if scope.is_defined('css'):
            for css_file in scope.value('css').split():
                html += f'  <link href="{css_file}" rel="stylesheet" type="text/css" />\n'
        if scope.is_defined('cssPreferred'):
            html += PrologSignature._build_titled_stylesheets(scope.value('cssPreferred'), 'stylesheet')
        if scope.is_defined('cssAlternate'):
            html += PrologSignature._build_titled_stylesheets(scope.value('cssAlternate'), 'alternate stylesheet')
        if scope.is_defined('favicon'):
            html += f'  <link rel="shortcut icon" href="{scope.value("favicon")}" />\n'
        if scope.is_defined('style'):
            html += f'  <style type="text/css">\n{scope.value("style")}\n  </style>\n'
        if scope.is_defined('script'):
            html += f'<script type="text/javascript">\n<!-- \n{scope.value("script")}\n\n// -->\n</script>\n'
        if scope.is_defined('headElementAdd'):
            html += scope.value('headElementAdd') + '\n'
        if scope.is_defined('headAppend'):
            html += scope.value('headAppend') + '\n'

        return html

    @staticmethod
    def _build_titled_stylesheets(value: str, rel: str) -> str:
        """
        Build stylesheet links from lines `title file` (or just `file`).
        """
        html = ''
        for line in value.split('\n'):
            parts = line.split()
            if len(parts) == 0:
                continue

            if len(parts) == 1:
                title = ''
                css_file = parts[0]
            else:
                title = parts[0]
                css_file = parts[1]
            html += f'  <link href="{css_file}" title="{title}" rel="{rel}" type="text/css" />\n'

        return html


class EpilogSignature(Signature):
    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        if scope.is_defined('customEpilog'):
            return scope.value('customEpilog')

        if not scope.is_value_true('epilog'):
            return ''

        return '</body>\n</html>'


class TocSignature(Signature, CatalogListener):
    """
    Table of contents, collected from the catalog entries of later headings.

    The block's text is `[min [max [*|#]]]` (defaults 1, 6 and `*`).
    Entries deeper than `max` are ignored,
    and the first entry shallower than `min` closes the TOC to further entries.
    The list is rendered in the translate-last phase, once every heading has been seen.
    """
    _LEVELS_PATTERN_COMPILED = re.compile(
        r'[ ]* (?: (?P<min_level> [0-9] ) (?: [ ]+ (?P<max_level> [0-9] ) (?: [ ]+ (?P<list_type> [*#] ) )? )? )? [ ]*',
        flags=re.VERBOSE,
    )

    _min_level: int
    _max_level: int
    _list_type: str
    _is_open: bool
    _entries: list[str]

    def __init__(self, name: str = 'toc'):
        super().__init__(name)
        self._min_level = 1
        self._max_level = 6
        self._list_type = '*'
        self._is_open = True
        self._entries = []

    @property
    def entries(self) -> list[str]:
        return self._entries

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        self._entries = []
        self._is_open = True
        scope.add_catalog_listener(self)

        levels_match = TocSignature._LEVELS_PATTERN_COMPILED.fullmatch(block.lines_as_string())
        if levels_match is None:
            scope.error('invalid TOC levels, using defaults', block.line_number)
            return None

        if levels_match.group('min_level') is not None:
            self._min_level = int(levels_match.group('min_level'))
        if levels_match.group('max_level') is not None:
            self._max_level = int(levels_match.group('max_level'))
        if levels_match.group('list_type') is not None:
            self._list_type = levels_match.group('list_type')

        return None

    def translate_last(self, scope: Scope, block: Block) -> Optional[str]:
        if len(self._entries) == 0:
            scope.warning('TOC is empty', block.line_number)
            return ''

        list_block = Block(scope, block.line_number, scope.get_signature('list'))
        for index, entry in enumerate(self._entries):
            list_block.add_line(entry, block.line_number + index)
        list_block.translate()

        self.modifiers.set_default_css_class('toc')
        return self.insert_attributes(list_block.translation or '')

    def _is_interesting(self, level: int) -> bool:
        if not self._is_open:
            return False

        if level < self._min_level:
            self._is_open = False
            return False

        return level <= self._max_level

    def has_interest(self, entry: CatalogEntry) -> bool:
        return self._is_interesting(entry.level)

    def receive_entry(self, entry: CatalogEntry):
        if not self._is_interesting(entry.level):
            return

        symbols = self._list_type * (entry.level - self._min_level + 1)
        self._entries.append(f'{symbols} <a href="#{entry.id_}">{entry.text}</a>')


class FootnoteSignature(Signature):
    """
    Footnote `fnN`, rendered as a paragraph with id `fnN`, class `fn_note`,
    and a back anchor to the footnote mark.

    A footnote with children puts the anchor in its first child.
    Blocks absorbed by an extended footnote are continuation paragraphs (no anchor and no id).
    """
    _number: str
    _is_continuation: bool

    def __init__(self, number: str):
        super().__init__('footnote')
        self._number = number
        self._is_continuation = False

    def __str__(self) -> str:
        return f'fn{self._number}{self.modifiers}'

    @property
    def number(self) -> str:
        return self._number

    def replicate(self) -> 'FootnoteSignature':
        instance = super().replicate()
        instance._is_continuation = True
        return instance

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        if block.children is not None:
            self._fix_up(scope, block.children[0])
            block.translate_children()
            return None

        self._fix_up(scope, block)
        return block.signature.translate(scope, block)

    def _fix_up(self, scope: Scope, block: Block):
        modifiers = copy.copy(self.modifiers)
        modifiers.add_css_class('fn_note')

        if not self._is_continuation:
            anchor = f'<a class="fn_anchor" href="#fnmk{self._number}">{self._number}</a> '
            if scope.value('_FootnoteStyle_') != 'modern':
                anchor = f'<sup>{anchor}</sup>'
            modifiers.set_id(f'fn{self._number}')
            if len(block.lines) == 0:
                block.add_line(anchor)
            else:
                block.set_line(0, anchor + block.lines[0])

        paragraph_signature = scope.get_signature('p')
        paragraph_signature.modifiers = modifiers
        block.signature = paragraph_signature


class CustomSignature(Signature):
    """
    User-defined signature whose translation is the result of script code.

    The code sees `signature`, `scope`, `block`, and `text` (the block's lines).
    """
    _code: str
    _code_line_number: int
    _owner_source: str

    def __init__(self, name: str, code: str, code_line_number: int, owner_source: str):
        super().__init__(name)
        self._code = code
        self._code_line_number = code_line_number
        self._owner_source = owner_source

    @property
    def code(self) -> str:
        return self._code

    @property
    def owner_source(self) -> str:
        return self._owner_source

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        evaluator = scope.evaluator
        evaluator.bind('signature', self)
        evaluator.bind('scope', scope)
        evaluator.bind('block', block)
        evaluator.bind('text', block.lines_as_string())

        try:
            return evaluator.evaluate(self._code, self._owner_source, self._code_line_number)
        except EvaluationException as exception:
            line_number = exception.line_number
            if line_number is None:
                line_number = self._code_line_number
            raise TranslationException(
                f'custom signature translation failed: {exception} (`{self._owner_source}`, line {line_number})'
            ) from exception
