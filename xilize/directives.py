"""
# Xilize: directives.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Directives: key definitions, URL abbreviations, includes, custom signatures, and conditionals.
"""

import re
from typing import Any, Optional

from xilize import inline
from xilize.bases import Directive, Signature
from xilize.blocks import Block
from xilize.documents import DocumentScope, read_text_file
from xilize.exceptions import EvaluationException, TranslationException
from xilize.readers import ABBREVIATION_PATTERN_COMPILED, morph_block
from xilize.scopes import Scope
from xilize.signatures import CustomSignature
from xilize.utilities import de_indent, is_true_value

_LITERAL_OPENING = '&{literal:'


def process_definition_value(scope: Scope, value: str, line_number: Optional[int] = None) -> str:
    """
    Process the value of a key definition.

    A value of the form `&{literal:text}` is taken to be `text` verbatim;
    any other value has its keys and macros substituted.
    """
    if value.startswith(_LITERAL_OPENING) and value.endswith('}'):
        return value[len(_LITERAL_OPENING):-1]

    return inline.markup_keys_and_macros(scope, value, line_number)


class DefineDirective(Directive):
    """
    Key definitions, in one of two forms:
    - `key` alone on the first line, with the remaining lines as its value;
    - one `key value` pair per line.
    """
    _SINGLE_TOKEN_PATTERN_COMPILED = re.compile(r'\S+')

    _appends: bool

    def __init__(self, name: str = 'define', appends: bool = False):
        super().__init__(name)
        self._appends = appends

    def exec_(self, scope: Scope, block: Block):
        if len(block.lines) == 0:
            scope.warning('nothing to define', block.line_number)
            return

        if DefineDirective._SINGLE_TOKEN_PATTERN_COMPILED.fullmatch(block.lines[0]):
            if len(block.lines) < 2:
                scope.warning('key without value', block.line_number)
                return

            self._define(scope, block.lines[0], block.lines_as_string(1), block.line_numbers[1])
            return

        for index, line in enumerate(block.lines):
            line_number = block.line_numbers[index]
            parts = line.split(maxsplit=1)
            if len(parts) < 2:
                scope.warning('key and value required', line_number)
                continue

            self._define(scope, parts[0], parts[1], line_number)

    def _define(self, scope: Scope, key: str, value: str, line_number: int):
        value = process_definition_value(scope, value, line_number)
        if self._appends:
            scope.define_append(key, value)
        else:
            scope.define(key, value)


class UndefineDirective(Directive):
    def exec_(self, scope: Scope, block: Block):
        keys = block.lines_as_string(trim=True).split()
        if len(keys) == 0:
            scope.warning('nothing to undefine', block.line_number)
            return

        for key in keys:
            scope.undefine(key)


class AbbreviationDirective(Directive):
    """
    URL abbreviations, one `[abbreviation] url` per line.
    """
    def exec_(self, scope: Scope, block: Block):
        for index, line in enumerate(block.lines):
            abbreviation_match = ABBREVIATION_PATTERN_COMPILED.match(line)
            if abbreviation_match is None:
                scope.warning('skipping malformed URL abbreviation', block.line_numbers[index])
                continue

            scope.add_abbreviation(abbreviation_match.group('abbreviation'), abbreviation_match.group('url'))


class IncludeDirective(Directive):
    """
    Splice in the blocks of other files, named (after key and macro substitution)
    relative to the including file.

    The included blocks become children of the directive's block.
    """
    _has_included: bool

    def __init__(self, name: str = 'include'):
        super().__init__(name)
        self._has_included = False

    def exec_(self, scope: Scope, block: Block):
        if self._has_included:
            return
        self._has_included = True

        if not isinstance(scope, DocumentScope):
            scope.warning('file scope required', block.line_number)
            return

        names = inline.markup_keys_and_macros(scope, block.lines_as_string(trim=True), block.line_number).split()
        if len(names) == 0:
            scope.warning('nothing to include', block.line_number)
            return

        for name in names:
            included_blocks = scope.read_include(name, block.line_number)
            if included_blocks is None:
                continue

            for included_block in included_blocks:
                block.add_child(included_block)


class IncludeRawSignature(Signature):
    """
    Insert other files verbatim.
    """
    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        if not isinstance(scope, DocumentScope):
            scope.warning('file scope required', block.line_number)
            return ''

        names = block.lines_as_string(trim=True).split()
        if len(names) == 0:
            scope.warning('nothing to include', block.line_number)
            return ''

        text = ''
        for name in names:
            try:
                text += read_text_file(scope.resolve_path(name))
            except OSError as os_error:
                scope.error(f'file read failed: {os_error}', block.line_number)

        return text


class SignatureDirective(Directive):
    """
    Custom signature: the first line is the name (letters only), and the remaining lines are script code.
    """
    _NAME_PATTERN_COMPILED = re.compile('[A-Za-z]+')

    def exec_(self, scope: Scope, block: Block):
        if len(block.lines) < 2:
            scope.error('signature must have at least two lines', block.line_number)
            return

        name = inline.markup_keys_and_macros(scope, block.lines[0], block.line_number).strip()
        if name == '':
            message = 'custom signature name missing'
        elif not SignatureDirective._NAME_PATTERN_COMPILED.fullmatch(name):
            message = 'custom signature name may contain only letters'
        else:
            code = de_indent(block.lines_as_string(1))
            signature = CustomSignature(name, code, block.line_numbers[1], scope.source)
            scope.register_signature(signature, is_custom=True, line_number=block.line_number)
            return

        scope.error(message, block.line_number)
        scope.error('custom signature ignored', block.line_number)


class BodyDirective(Directive):
    """
    Set the attributes of the `<body>` start tag from the modifiers.
    """
    def exec_(self, scope: Scope, block: Block):
        scope.define('_BodyTagAttributes_', self.tag_attributes())


class XilizeDirective(DefineDirective):
    """
    Key definitions, plus the attributes of the `<body>` start tag.
    """
    def __init__(self, name: str = 'xilize'):
        super().__init__(name)

    def exec_(self, scope: Scope, block: Block):
        if len(block.lines) > 0:
            super().exec_(scope, block)
        scope.define('_BodyTagAttributes_', self.tag_attributes())


def _is_true_result(value: Any) -> bool:
    if isinstance(value, str):
        return is_true_value(value)

    return bool(value)


class IfSignature(Signature):
    """
    Conditional: the block's text is a condition evaluated by the script evaluator.

    When true, the children are kept (less a trailing `else.` child);
    when false, the children are replaced by those of a trailing `else.` child, or removed.
    """
    def exec_(self, scope: Scope, block: Block):
        if block.children is None:
            scope.error('child blocks required (used when condition is true)', block.line_number)
            return

        evaluator = scope.evaluator
        evaluator.bind('scope', scope)
        try:
            is_true = _is_true_result(evaluator.evaluate_value(block.lines_as_string(), scope.source, block.line_number))
        except EvaluationException as exception:
            block.report_failure(exception)
            block.children = None
            return

        last_child = block.children[-1]
        has_else = last_child.signature is not None and last_child.signature.name == 'else'
        if is_true:
            if has_else:
                block.children.pop()
        elif has_else:
            block.children = last_child.children
        else:
            block.children = None

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        block.translate_children()
        return None


class ElseSignature(Signature):
    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        raise TranslationException('"else." is only meaningful as the last child of an \'if.\' block')


class DefinedConditionSignature(Signature):
    """
    Key-test shorthands `ifdef` and `ifndef`.

    Without children, `ifdef. key text` becomes the block `text` when the key is defined.
    With children, `ifdef. key` becomes the conditional `if. scope.is_defined("key")`.
    """
    _KEY_AND_TEXT_PATTERN_COMPILED = re.compile(r'[ ]* (?P<key> \S+ ) [ ]+ (?P<text> .* )', flags=re.VERBOSE)

    _negates: bool

    def __init__(self, name: str, negates: bool):
        super().__init__(name)
        self._negates = negates

    def exec_(self, scope: Scope, block: Block):
        if block.children is None:
            line = block.lines[0] if len(block.lines) > 0 else ''
            key_and_text_match = DefinedConditionSignature._KEY_AND_TEXT_PATTERN_COMPILED.fullmatch(line)
            if key_and_text_match is None:
                scope.error('must have key and text for true condition', block.line_number)
                return

            if scope.is_defined(key_and_text_match.group('key')) != self._negates:
                morph_block(block, key_and_text_match.group('text'))
            return

        negation = 'not ' if self._negates else ''
        key = block.lines_as_string(trim=True)
        morph_block(block, f'if. {negation}scope.is_defined({key!r})')

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        block.translate_children()
        return None
