"""
# Xilize: core.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Core conversion logic.

Xilize source is a sequence of blocks separated by blank lines.
A block's first line may carry a signature, `name«modifiers». text`,
which decides how the block is translated to XHTML;
blocks between a line ending in `{{` and a line `}}` are the children of the former.
"""

from typing import Optional

from xilize import inline
from xilize.bases import ParentSignature, Signature
from xilize.catalogs import Catalog
from xilize.constants import DEFAULT_VALUE_FROM_KEY
from xilize.directives import (
    AbbreviationDirective,
    BodyDirective,
    DefineDirective,
    DefinedConditionSignature,
    ElseSignature,
    IfSignature,
    IncludeDirective,
    IncludeRawSignature,
    SignatureDirective,
    UndefineDirective,
    XilizeDirective,
)
from xilize.documents import DocumentScope
from xilize.evaluators import ScriptEvaluator
from xilize.reporting import Reporter
from xilize.scopes import Environment, Scope
from xilize.signatures import (
    AnonymousSignature,
    BlockquoteSignature,
    ClearSignature,
    CommentSignature,
    EpilogSignature,
    FixedSignature,
    HeadingSignature,
    HorizontalRuleSignature,
    InlineMarkupOnlySignature,
    JavascriptSignature,
    KeysAndMacrosSignature,
    ParagraphSignature,
    PreSignature,
    PrexSignature,
    PrologSignature,
    TocSignature,
    XmlCommentSignature,
)
from xilize.structures import CellSignature, DefinitionListSignature, ListSignature, RowSignature, TableSignature


def create_standard_signatures(unsigned_block_signature_name: str) -> list[Signature]:
    return [
        AnonymousSignature(unsigned_block_signature_name),
        ParagraphSignature('p'),
        Signature('raw'),
        CommentSignature('xilcom'),
        XmlCommentSignature('xmlcom'),
        *[HeadingSignature(level) for level in range(1, 7)],
        HorizontalRuleSignature('hr'),
        ParentSignature('div', '<div>', '</div>', children_required=True),
        FixedSignature('divStart', '<div>'),
        FixedSignature('divEnd', '</div>'),
        ParentSignature('block', '', '', children_required=True),
        ParentSignature('bqo', '<blockquote>', '</blockquote>'),
        BlockquoteSignature('bq'),
        PreSignature('pre', '<pre>', '</pre>'),
        PrexSignature('prex', '<pre>', '</pre>'),
        PreSignature('bc', '<pre><code>', '</code></pre>'),
        PrexSignature('bcx', '<pre><code>', '</code></pre>'),
        KeysAndMacrosSignature('km'),
        InlineMarkupOnlySignature('imo'),
        IfSignature('if'),
        ElseSignature('else'),
        DefinedConditionSignature('ifdef', negates=False),
        DefinedConditionSignature('ifndef', negates=True),
        TableSignature('table'),
        RowSignature('row'),
        CellSignature('cell'),
        ListSignature('list'),
        DefinitionListSignature('dl'),
        ClearSignature('clear'),
        JavascriptSignature('javascript'),
        PrologSignature('prolog'),
        EpilogSignature('epilog'),
        TocSignature('toc'),
        DefineDirective('define'),
        DefineDirective('defadd', appends=True),
        UndefineDirective('undef'),
        AbbreviationDirective('abbreviation'),
        IncludeDirective('include'),
        IncludeRawSignature('includeRaw'),
        SignatureDirective('signature'),
        BodyDirective('body'),
        XilizeDirective('xilize'),
    ]


def add_standard_signatures(scope: Scope):
    for signature in create_standard_signatures(scope.value('_UnsignedBlockSigName_')):
        scope.register_signature(signature)


def create_master_scope(
    reporter: Optional[Reporter] = None,
    evaluator: Optional[ScriptEvaluator] = None,
    definitions: Optional[dict[str, str]] = None,
) -> Scope:
    """
    Create the root of a scope chain: default keys, the standard signatures, and a catalog.

    `definitions` (e.g. from the command line) override the default keys.
    """
    master_scope = Scope(environment=Environment(reporter, evaluator), source='master')
    master_scope.define_all(DEFAULT_VALUE_FROM_KEY)
    if definitions is not None:
        master_scope.define_all(definitions)

    master_scope.catalog = Catalog(master_scope.value('_IdPrefix_'))
    add_standard_signatures(master_scope)

    return master_scope


def xilize_blocks(text: str, scope: Optional[Scope] = None) -> str:
    """
    Translate Xilize blocks to XHTML, without prolog, epilog or natural mode.
    """
    if scope is None:
        scope = create_master_scope()

    return DocumentScope(scope).translate_fragment(text)


def xilize_phrase(text: str, scope: Optional[Scope] = None) -> str:
    """
    Apply inline markup to a phrase.
    """
    if scope is None:
        scope = create_master_scope()

    return inline.markup(scope, text)


def xilize_document(text: str, file_name: Optional[str] = None, scope: Optional[Scope] = None) -> str:
    """
    Translate a Xilize document to XHTML.
    """
    if scope is None:
        scope = create_master_scope()

    return DocumentScope(scope, file_name).translate_document(text)
