"""
# Xilize: inline.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Inline markup: the ordered rewrite passes applied to the text of a block.

The passes, in order:
1. keys `${name}`
2. macros `&{name: text}` and `&{code}`
3. literals `==literal==`, code `@code@`, and existing markup, all protected by placeholders
4. links, images and image links (URLs may be abbreviations)
5. escaping of `&`, `<` and `>`, existing entity references excepted
6. phrases (span `%text%` and the symmetric markers such as `_em_` and `*strong*`)
7. footnote marks `[n]`
8. acronyms
9. character entities (dashes, trademark, registered, copyright)
10. restoration of placeholders
11. line breaks, unless line ends are being kept
"""

import re
from typing import Optional

from xilize.constants import HTML_TAG_NAMES, MACRO_ERROR_TOKEN, PHRASE_TAG_NAME_FROM_MARKER
from xilize.exceptions import EvaluationException
from xilize.modifiers import ImageModifiers, Modifiers
from xilize.placeholders import PlaceholderMaster
from xilize.scopes import Scope
from xilize.utilities import break_lines, escape_attribute_value_html, replace_unkind_characters

MARKER = PlaceholderMaster.MARKER

PHRASE_TERMINATOR_REGEX = rf'(?= $ | < | ` | {MARKER} | \s | [.,;:!?] (?: \s | $ ) )'
PHRASE_PREFIX_REGEX = rf'(?P<prefix> ^ | \s | > | ` | {MARKER} )'
PHRASE_CONTENT_REGEX = r'(?P<content> \S{1,2} | [^\s_+*-] .+? \S )'

_CLASS_REGEX = r'\( \w*? (?: [#] \w+ )? \)'
_ATTRIBUTES_REGEX = r'\{\{ [^{}\t\n\r\f\v]+ \}\}'
_STYLE_REGEX = r'\{ [^}\t\n\r\f\v]+ \}'
_IMAGE_SYMBOLS_REGEX = r'- | \^ | ~ | < | > | \(+ | \)+'
_ESCAPED_SYMBOLS_REGEX = r'- | \^ | ~ | &lt; | &gt; | \(+ | \)+'

IMAGE_MODIFIERS_REGEX = (
    rf'(?: (?P<modifiers> (?: {_IMAGE_SYMBOLS_REGEX} | {_CLASS_REGEX} | {_ATTRIBUTES_REGEX} | {_STYLE_REGEX} )+ ) [ ] )?'
)
SPAN_MODIFIERS_REGEX = (
    rf'(?: (?P<modifiers> (?: {_ESCAPED_SYMBOLS_REGEX} | {_CLASS_REGEX} | {_ATTRIBUTES_REGEX} | {_STYLE_REGEX} )+ ) [ ] )?'
)

_LINK_PREFIX_REGEX = rf'(?P<prefix> ^ | [\s>`] | {MARKER} )'
_URL_REGEX = r'(?P<url> \S+? )'
_LINK_URL_REGEX = r'(?P<link_url> \S+? )'


def _parenthetical_regex(group_name: str) -> str:
    return rf'(?: [ ]* \( (?P<{group_name}> [^)\n]+? ) \) )?'


_HTML_TAG_NAME_REGEX = '|'.join(
    [tag_name.upper() for tag_name in HTML_TAG_NAMES]
    + list(HTML_TAG_NAMES)
)
_HTML_ELEMENT_REGEX = (
    rf'<(?:{_HTML_TAG_NAME_REGEX})(?:\s+\S+\s*?=\s*?".*?")*(?:\s*?/?)>'
    rf'|</(?:{_HTML_TAG_NAME_REGEX})\s*?>'
)
_EXISTING_MARKUP_ELEMENT_REGEX = rf'(?:{_HTML_ELEMENT_REGEX}|<!--\s.*?\s-->|<\?xml.*?\?>|<!DOCTYPE\s.*?>)'


class InlinePipeline:
    """
    One run of the inline-markup rewrite passes over one piece of text.

    Every run has its own placeholder table,
    so that runs are independent of one another (and may even nest, as macros can).
    """
    _KEY_PATTERN_COMPILED = re.compile(
        r'\$\{ (?P<key> [a-zA-Z_] [a-zA-Z0-9_.-]* ) \}',
        flags=re.VERBOSE,
    )
    _MACRO_PATTERN_COMPILED = re.compile(
        r'&\{ (?: [ ]* (?P<name> \w+ ) [ ]* : )? (?P<code> [^}]+ ) \}',
        flags=re.VERBOSE,
    )
    _LITERAL_PATTERN_COMPILED = re.compile(
        rf'(?P<prefix> ^ | \s ) == (?P<content> \S | \S .*? \S ) == {PHRASE_TERMINATOR_REGEX}',
        flags=re.DOTALL | re.MULTILINE | re.VERBOSE,
    )
    _LITERAL_EMBEDDED_PATTERN_COMPILED = re.compile(
        r'\[ == (?P<content> \S | \S .*? \S ) == \]',
        flags=re.DOTALL | re.VERBOSE,
    )
    _CODE_PATTERN_COMPILED = re.compile(
        rf'(?P<prefix> ^ | \s ) @ (?P<content> \S{{1,2}} | \S [^@]+? \S ) @ {PHRASE_TERMINATOR_REGEX}',
        flags=re.DOTALL | re.VERBOSE,
    )
    _CODE_EMBEDDED_PATTERN_COMPILED = re.compile(
        r'\[ @ (?P<content> .+? ) @ \]',
        flags=re.DOTALL | re.VERBOSE,
    )
    _EXISTING_MARKUP_PATTERN_COMPILED = re.compile(
        rf'{_EXISTING_MARKUP_ELEMENT_REGEX}(?:\s*{_EXISTING_MARKUP_ELEMENT_REGEX})*'
    )
    _LINK_EMBEDDED_PATTERN_COMPILED = re.compile(
        rf'\[ " (?P<text> [^(]+? ) {_parenthetical_regex("title")} " : {_URL_REGEX} \]',
        flags=re.DOTALL | re.MULTILINE | re.VERBOSE,
    )
    _LINK_PATTERN_COMPILED = re.compile(
        rf'{_LINK_PREFIX_REGEX} " (?P<text> [^("]+? ) {_parenthetical_regex("title")} " : {_URL_REGEX}'
        rf' {PHRASE_TERMINATOR_REGEX}',
        flags=re.DOTALL | re.MULTILINE | re.VERBOSE,
    )
    _IMAGE_EMBEDDED_PATTERN_COMPILED = re.compile(
        rf'\[ ! {IMAGE_MODIFIERS_REGEX} {_URL_REGEX} {_parenthetical_regex("alt")} ! \]',
        flags=re.DOTALL | re.MULTILINE | re.VERBOSE,
    )
    _IMAGE_PATTERN_COMPILED = re.compile(
        rf'{_LINK_PREFIX_REGEX} ! {IMAGE_MODIFIERS_REGEX} {_URL_REGEX} {_parenthetical_regex("alt")} !'
        rf' {PHRASE_TERMINATOR_REGEX}',
        flags=re.DOTALL | re.MULTILINE | re.VERBOSE,
    )
    _IMAGE_LINK_EMBEDDED_PATTERN_COMPILED = re.compile(
        rf'\[ ! {IMAGE_MODIFIERS_REGEX} {_URL_REGEX} {_parenthetical_regex("alt")} ! : {_LINK_URL_REGEX} \]',
        flags=re.DOTALL | re.MULTILINE | re.VERBOSE,
    )
    _IMAGE_LINK_PATTERN_COMPILED = re.compile(
        rf'{_LINK_PREFIX_REGEX} ! {IMAGE_MODIFIERS_REGEX} {_URL_REGEX} {_parenthetical_regex("alt")} !'
        rf' : {_LINK_URL_REGEX} {PHRASE_TERMINATOR_REGEX}',
        flags=re.DOTALL | re.MULTILINE | re.VERBOSE,
    )
    _ENTITY_REFERENCE_PATTERN_COMPILED = re.compile(
        r'& (?: [a-zA-Z][a-zA-Z0-9]{1,7} | [#] [0-9]{2,7} | [#] [xX] [0-9a-fA-F]{2,6} ) ;',
        flags=re.VERBOSE,
    )
    _SPAN_PATTERN_COMPILED = re.compile(
        rf'{PHRASE_PREFIX_REGEX} % {SPAN_MODIFIERS_REGEX} {PHRASE_CONTENT_REGEX} % {PHRASE_TERMINATOR_REGEX}',
        flags=re.DOTALL | re.MULTILINE | re.VERBOSE,
    )
    _SPAN_EMBEDDED_PATTERN_COMPILED = re.compile(
        rf'\[ % {SPAN_MODIFIERS_REGEX} (?P<content> \S{{1,2}} | [^\s_+*-] .+? ) % \]',
        flags=re.DOTALL | re.MULTILINE | re.VERBOSE,
    )
    _PHRASE_PATTERNS_COMPILED = [
        (
            re.compile(
                rf'\[ {re.escape(marker)} (?P<content> \S{{1,2}} | \S .+? \S ) {re.escape(marker)} \]',
                flags=re.DOTALL | re.MULTILINE | re.VERBOSE,
            ),
            re.compile(
                rf'{PHRASE_PREFIX_REGEX} {re.escape(marker)} {PHRASE_CONTENT_REGEX} {re.escape(marker)}'
                rf' {PHRASE_TERMINATOR_REGEX}',
                flags=re.DOTALL | re.MULTILINE | re.VERBOSE,
            ),
            marker,
            tag_name,
        )
        for marker, tag_name in PHRASE_TAG_NAME_FROM_MARKER.items()
    ]
    _FOOTNOTE_MARK_PATTERN_COMPILED = re.compile(r'\[ (?P<number> [0-9]+ ) \]', flags=re.VERBOSE)
    _ACRONYM_PATTERN_COMPILED = re.compile(
        r'\b (?P<acronym> [A-Z] [A-Z0-9]{2,} ) \( (?P<title> [^)]+? ) \)',
        flags=re.VERBOSE,
    )
    _ACRONYM_LIKE_PATTERN_COMPILED = re.compile(
        r'(?P<prefix> \s | ^ ) (?P<acronym> [A-Z] [A-Z0-9]{2,} ) \b',
        flags=re.VERBOSE,
    )
    _CHARACTER_ENTITY_SUBSTITUTIONS = [
        (re.compile(r'(\s?)--(\s?)'), r'\1&#8212;\2'),
        (re.compile(r'\s-\s'), ' &#8211; '),
        (re.compile(r'\b( )?\((?:tm|TM)\)'), r'\1&#8482;'),
        (re.compile(r'\b( )?\([rR]\)'), r'\1&#174;'),
        (re.compile(r'(?:\A|\b)( )?\([cC]\)( )?(?:\b|\Z)'), r'\1&#169;\2'),
    ]

    _scope: Scope
    _line_number: Optional[int]
    _keeps_line_ends: bool
    _placeholder_master: PlaceholderMaster

    def __init__(self, scope: Scope, line_number: Optional[int] = None, keeps_line_ends: bool = False):
        self._scope = scope
        self._line_number = line_number
        self._keeps_line_ends = keeps_line_ends
        self._placeholder_master = PlaceholderMaster()

    def translate(self, text: str) -> str:
        text = self._placeholder_master.replace_marker_occurrences(text)

        text = self.substitute_keys(text)
        text = self.evaluate_macros(text)
        text = self._protect_macro_error_tokens(text)
        text = self._protect_literals_and_code(text)
        text = self._protect_existing_markup(text)
        text = self._apply_links_and_images(text)
        text = self._protect_existing_markup(text)
        text = self._escape_unkind_characters(text)
        text = self._apply_phrases(text)
        text = self._protect_existing_markup(text)
        text = self._apply_character_entities(text)
        text = self._placeholder_master.unprotect(text)

        if not self._keeps_line_ends:
            text = break_lines(text)

        return text

    def translate_keys_and_macros(self, text: str) -> str:
        text = self.substitute_keys(text)
        text = self.evaluate_macros(text)
        return text

    ################################
    # Keys and macros
    ################################

    def substitute_keys(self, text: str) -> str:
        if '${' not in text:
            return text

        return re.sub(
            pattern=InlinePipeline._KEY_PATTERN_COMPILED,
            repl=self._key_substitute_function,
            string=text,
        )

    def _key_substitute_function(self, match: re.Match) -> str:
        key = match.group('key')
        if self._scope.is_defined(key):
            return self._scope.value(key)

        return match.group()

    def evaluate_macros(self, text: str) -> str:
        if '&{' not in text:
            return text

        return re.sub(
            pattern=InlinePipeline._MACRO_PATTERN_COMPILED,
            repl=self._macro_substitute_function,
            string=text,
        )

    def _macro_substitute_function(self, match: re.Match) -> str:
        name = match.group('name')
        code = match.group('code')

        evaluator = self._scope.evaluator
        evaluator.bind('scope', self._scope)
        if name is not None:
            evaluator.bind('text', code)
            code = f'{name}(text)'

        line_number = 1 if self._line_number is None else self._line_number
        try:
            return evaluator.evaluate(code, self._scope.source, line_number)
        except EvaluationException as exception:
            error_line_number = exception.line_number
            if error_line_number is None:
                error_line_number = self._line_number
            self._scope.error(f'macro error: {exception}', error_line_number)
            return MACRO_ERROR_TOKEN

    ################################
    # Protected content
    ################################

    def _protect_macro_error_tokens(self, text: str) -> str:
        if MACRO_ERROR_TOKEN not in text:
            return text

        return text.replace(MACRO_ERROR_TOKEN, self._placeholder_master.protect(MACRO_ERROR_TOKEN))

    def _protect_literals_and_code(self, text: str) -> str:
        if '==' in text:
            text = re.sub(
                pattern=InlinePipeline._LITERAL_PATTERN_COMPILED,
                repl=lambda match: match.group('prefix') + self._placeholder_master.protect(match.group('content')),
                string=text,
            )
        if '[==' in text:
            text = re.sub(
                pattern=InlinePipeline._LITERAL_EMBEDDED_PATTERN_COMPILED,
                repl=lambda match: self._placeholder_master.protect(match.group('content')),
                string=text,
            )
        if '@' in text:
            text = re.sub(
                pattern=InlinePipeline._CODE_PATTERN_COMPILED,
                repl=lambda match: match.group('prefix') + self._protect_code(match.group('content')),
                string=text,
            )
        if '[@' in text:
            text = re.sub(
                pattern=InlinePipeline._CODE_EMBEDDED_PATTERN_COMPILED,
                repl=lambda match: self._protect_code(match.group('content')),
                string=text,
            )

        return text

    def _protect_code(self, code: str) -> str:
        code_html = f'<code>{replace_unkind_characters(code)}</code>'
        if not self._keeps_line_ends:
            code_html = code_html.replace('\n', '<br />')

        return self._placeholder_master.protect(code_html)

    def _protect_existing_markup(self, text: str) -> str:
        if '<' not in text:
            return text

        return re.sub(
            pattern=InlinePipeline._EXISTING_MARKUP_PATTERN_COMPILED,
            repl=lambda match: self._placeholder_master.protect(match.group()),
            string=text,
        )

    ################################
    # Links and images
    ################################

    def _apply_links_and_images(self, text: str) -> str:
        if '"' in text:
            if '["' in text:
                text = re.sub(
                    pattern=InlinePipeline._LINK_EMBEDDED_PATTERN_COMPILED,
                    repl=self._link_substitute_function,
                    string=text,
                )
            text = re.sub(
                pattern=InlinePipeline._LINK_PATTERN_COMPILED,
                repl=self._link_substitute_function,
                string=text,
            )

        if '!' in text:
            if '[!' in text:
                text = re.sub(
                    pattern=InlinePipeline._IMAGE_EMBEDDED_PATTERN_COMPILED,
                    repl=self._image_substitute_function,
                    string=text,
                )
            text = re.sub(
                pattern=InlinePipeline._IMAGE_PATTERN_COMPILED,
                repl=self._image_substitute_function,
                string=text,
            )
            if '[!' in text:
                text = re.sub(
                    pattern=InlinePipeline._IMAGE_LINK_EMBEDDED_PATTERN_COMPILED,
                    repl=self._image_link_substitute_function,
                    string=text,
                )
            text = re.sub(
                pattern=InlinePipeline._IMAGE_LINK_PATTERN_COMPILED,
                repl=self._image_link_substitute_function,
                string=text,
            )

        return text

    def _resolve_url(self, url: str) -> str:
        resolved_url = self._scope.lookup_url(url)
        if resolved_url is None:
            return url

        return resolved_url

    @staticmethod
    def _extract_prefix(match: re.Match) -> str:
        if 'prefix' in match.groupdict() and match.group('prefix') is not None:
            return match.group('prefix')

        return ''

    def _link_substitute_function(self, match: re.Match) -> str:
        prefix = InlinePipeline._extract_prefix(match)
        url = self._resolve_url(match.group('url'))

        title = match.group('title')
        if title is None:
            title_attribute = ''
        else:
            title_attribute = f' title="{escape_attribute_value_html(title)}"'

        return f'{prefix}<a href="{url}"{title_attribute}>{match.group("text")}</a>'

    def _build_image_tag(self, match: re.Match) -> str:
        url = self._resolve_url(match.group('url'))

        alt = match.group('alt')
        if alt is None:
            alt_attributes = ''
        else:
            alt = escape_attribute_value_html(alt)
            alt_attributes = f' alt="{alt}" title="{alt}"'

        modifier_text = match.group('modifiers')
        if modifier_text is None:
            modifier_attributes = ''
        else:
            modifier_attributes = ImageModifiers(modifier_text).tag_attributes()

        return f'<img src="{url}"{alt_attributes}{modifier_attributes} />'

    def _image_substitute_function(self, match: re.Match) -> str:
        return InlinePipeline._extract_prefix(match) + self._build_image_tag(match)

    def _image_link_substitute_function(self, match: re.Match) -> str:
        prefix = InlinePipeline._extract_prefix(match)
        link_url = self._resolve_url(match.group('link_url'))

        return f'{prefix}<a href="{link_url}">{self._build_image_tag(match)}</a>'

    ################################
    # Escaping
    ################################

    def _escape_unkind_characters(self, text: str) -> str:
        if '&' in text:
            text = re.sub(
                pattern=InlinePipeline._ENTITY_REFERENCE_PATTERN_COMPILED,
                repl=lambda match: self._placeholder_master.protect(match.group()),
                string=text,
            )

        return replace_unkind_characters(text)

    ################################
    # Phrases
    ################################

    def _apply_phrases(self, text: str) -> str:
        if len(text) < 3:
            return text

        if '%' in text:
            text = re.sub(
                pattern=InlinePipeline._SPAN_PATTERN_COMPILED,
                repl=InlinePipeline._span_substitute_function,
                string=text,
            )
            if '[%' in text:
                text = re.sub(
                    pattern=InlinePipeline._SPAN_EMBEDDED_PATTERN_COMPILED,
                    repl=InlinePipeline._span_substitute_function,
                    string=text,
                )

        for embedded_pattern, bare_pattern, marker, tag_name in InlinePipeline._PHRASE_PATTERNS_COMPILED:
            if marker not in text:
                continue

            if f'[{marker}' in text:
                text = re.sub(
                    pattern=embedded_pattern,
                    repl=f'<{tag_name}>\\g<content></{tag_name}>',
                    string=text,
                )
            text = re.sub(
                pattern=bare_pattern,
                repl=f'\\g<prefix><{tag_name}>\\g<content></{tag_name}>',
                string=text,
            )

        text = self._apply_footnote_marks(text)
        text = self._apply_acronyms(text)

        return text

    @staticmethod
    def _span_substitute_function(match: re.Match) -> str:
        prefix = InlinePipeline._extract_prefix(match)

        modifier_text = match.group('modifiers')
        if modifier_text is None:
            modifier_attributes = ''
        else:
            modifier_text = modifier_text.replace('&gt;', '>').replace('&lt;', '<')
            modifier_attributes = Modifiers(modifier_text).tag_attributes()

        return f'{prefix}<span{modifier_attributes}>{match.group("content")}</span>'

    def _apply_footnote_marks(self, text: str) -> str:
        if '[' not in text:
            return text

        mark = (
            '<a class="fn_mark" id="fnmk\\g<number>" href="#fn\\g<number>">\\g<number></a>'
        )
        if self._scope.value('_FootnoteStyle_') != 'modern':
            mark = f'<sup>{mark}</sup>'

        return re.sub(
            pattern=InlinePipeline._FOOTNOTE_MARK_PATTERN_COMPILED,
            repl=mark,
            string=text,
        )

    def _apply_acronyms(self, text: str) -> str:
        text = re.sub(
            pattern=InlinePipeline._ACRONYM_PATTERN_COMPILED,
            repl=lambda match: self._placeholder_master.protect(
                f'<acronym title="{match.group("title")}">'
                f'<span class="caps">{match.group("acronym")}</span>'
                f'</acronym>'
            ),
            string=text,
        )
        text = re.sub(
            pattern=InlinePipeline._ACRONYM_LIKE_PATTERN_COMPILED,
            repl='\\g<prefix><span class="caps">\\g<acronym></span>',
            string=text,
        )

        return text

    ################################
    # Character entities
    ################################

    @staticmethod
    def _apply_character_entities(text: str) -> str:
        for pattern, replacement in InlinePipeline._CHARACTER_ENTITY_SUBSTITUTIONS:
            text = re.sub(pattern=pattern, repl=replacement, string=text)

        return text


def markup(scope: Scope, text: str, line_number: Optional[int] = None) -> str:
    """
    Apply the full inline markup to a string, converting newlines to line breaks.
    """
    return InlinePipeline(scope, line_number).translate(text)


def markup_block(scope: Scope, block) -> str:
    """
    Apply the full inline markup to the (trimmed) lines of a block.
    """
    return InlinePipeline(scope, block.line_number).translate(block.lines_as_string(trim=True))


def markup_keep_line_ends(scope: Scope, text: str, line_number: Optional[int] = None) -> str:
    """
    Apply the full inline markup to a string, keeping its line ends and leading whitespace.
    """
    return InlinePipeline(scope, line_number, keeps_line_ends=True).translate(text)


def markup_keys_and_macros(scope: Scope, text: str, line_number: Optional[int] = None) -> str:
    return InlinePipeline(scope, line_number).translate_keys_and_macros(text)


def markup_keys_and_macros_escaped(scope: Scope, text: str, line_number: Optional[int] = None) -> str:
    return replace_unkind_characters(markup_keys_and_macros(scope, text, line_number))


def escape(text: str) -> str:
    return replace_unkind_characters(text)
