"""
# Xilize: documents.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Document scopes: reading, assembling and translating one unit of source.
"""

import os
from typing import Iterable, Optional, Union

from xilize import inline
from xilize.assemblers import BlockAssembler
from xilize.blocks import Block
from xilize.catalogs import Catalog
from xilize.constants import SOURCE_DESCRIPTION_FOR_STRINGS, USER_HALT_EXIT_CODE, XIL_FILE_EXTENSION
from xilize.exceptions import XilizeException
from xilize.readers import BlockReader
from xilize.scopes import Scope


def read_text_file(path: str) -> str:
    with open(path, 'r', encoding='utf-8') as file:
        return file.read()


class DocumentScope(Scope):
    """
    Scope of one document (a source file or a string), with its own catalog.

    The document catalog forwards entries to the nearest ancestor catalog,
    and its unique ids are `_IdPrefix_` plus a running count.
    """
    _path: Optional[str]
    _raw_blocks: list[Block]

    def __init__(self, parent: Scope, path: Optional[str] = None):
        source = SOURCE_DESCRIPTION_FOR_STRINGS if path is None else path
        super().__init__(parent, source=source)
        self._path = path
        self._raw_blocks = []
        self._catalog = Catalog(self.value('_IdPrefix_'), parent.catalog)

    @property
    def path(self) -> Optional[str]:
        return self._path

    @property
    def directory(self) -> str:
        if self._path is None:
            return os.curdir

        return os.path.dirname(self._path)

    @property
    def raw_blocks(self) -> list[Block]:
        return self._raw_blocks

    def resolve_path(self, name: str) -> str:
        return os.path.join(self.directory, name)

    ################################
    # Reading
    ################################

    def read_raw_blocks(self, source: Union[str, Iterable[str]]):
        """
        Read raw blocks, appending them to this document's list.

        Immediate directives at top level (outside any open start block) are executed on the spot,
        and are only kept when executing them gave them children (e.g. included blocks).
        """
        depth = 0
        for block in BlockReader(self, source):
            if self.is_value_true('_DebugReportRawBlocks_'):
                self.report(str(block), block.line_number)

            if block.is_end_block:
                if depth > 0:
                    depth -= 1
            elif block.is_start_block:
                depth += 1
            elif depth == 0 and block.signature.immediate and not block.is_extended:
                block.signature.exec_(self, block)
                if block.children is None:
                    continue

            self._raw_blocks.append(block)

    def read_include(self, name: str, line_number: Optional[int] = None) -> Optional[list[Block]]:
        """
        Read and assemble the blocks of a file, relative to this document's directory.

        Keys, URL abbreviations and signatures defined by the file take effect in this document.
        Returns the top-level blocks of the file, or None if there are none (or on read failure).
        """
        path = self.resolve_path(name)
        try:
            text = read_text_file(path)
        except OSError as os_error:
            self.error(f'error reading include file: {os_error}', line_number)
            return None

        include_scope = IncludeScope(self, path)
        include_scope.read_raw_blocks(text)
        root = BlockAssembler(include_scope, include_scope.raw_blocks).assemble(Block(include_scope))

        return root.children

    def _include_from_key(self, key: str):
        if not self.is_defined(key):
            return

        include_block = Block(self, 0, self.get_signature('include'))
        include_block.add_line(self.value(key), 0)
        include_block.signature.exec_(self, include_block)
        if include_block.children is not None:
            self._raw_blocks.append(include_block)

    ################################
    # Translation
    ################################

    def _assemble(self) -> Block:
        root = Block(self)
        return BlockAssembler(self, self._raw_blocks).assemble(root)

    @staticmethod
    def _translate_and_write(blocks: list[Block]) -> str:
        for block in blocks:
            block.translate()

        for block in blocks:
            block.translate_last()

        return ''.join(f'{block.write()}\n' for block in blocks)

    def translate_fragment(self, source: Union[str, Iterable[str]]) -> str:
        """
        Translate blocks of source without natural mode, prolog or epilog.
        """
        self.read_raw_blocks(source)
        root = self._assemble()
        blocks = root.children or []

        for block in blocks:
            block.exec_()

        return DocumentScope._translate_and_write(blocks)

    def translate_document(self, source: Union[str, Iterable[str]]) -> str:
        """
        Translate a whole document, adding the prolog and epilog.

        In natural mode (`_Natural_` true), the blocks of the files named by `commoninc` and `headerinc`
        come before those of the document, and those of `footerinc` after.
        The first unsigned block of the document itself becomes the natural heading
        (signature `_NaturalSig_`), and its markup defines `_NaturalLabel_` and the default `title`.
        """
        if self.environment.is_halted:
            raise XilizeException('user interrupt', USER_HALT_EXIT_CODE)

        self.report('translating')

        if self._path is not None:
            self.define('_FilePathXil_', os.path.abspath(self._path).replace(os.sep, '/'))
            self.define('_FileNameXil_', os.path.basename(self._path))

        try:
            is_natural = self.is_value_true('_Natural_')
            if is_natural:
                self._include_from_key('commoninc')
                self._include_from_key('headerinc')
            document_start = len(self._raw_blocks)

            self.read_raw_blocks(source)
            document_end = len(self._raw_blocks)

            if is_natural:
                self._include_from_key('footerinc')
                self._apply_natural_heading(self._raw_blocks[document_start:document_end])

            root = self._assemble()
            for block in root.children or []:
                block.exec_()

            blocks = [Block(self, 0, self.get_signature('prolog'))]
            blocks.extend(root.children or [])
            blocks.append(Block(self, 0, self.get_signature('epilog')))

            self._define_output_keys()

            return DocumentScope._translate_and_write(blocks)
        except XilizeException as exception:
            self.error(str(exception))
            raise

    def _apply_natural_heading(self, blocks: list[Block]):
        for block in blocks:
            if block.is_signed or block.is_start_block or block.is_end_block:
                continue

            label = inline.markup(self, block.lines_as_string(), block.line_number)
            self.define('_NaturalLabel_', label)
            self.define_default('title', label)
            block.signature = self.get_signature(self.value('_NaturalSig_'))
            return

    def _define_output_keys(self):
        if self._path is None:
            return

        output_path = self.output_path()
        output_path_normalised = os.path.abspath(output_path).replace(os.sep, '/')
        output_name = os.path.basename(output_path)

        self.define('_FilePathHtml_', output_path_normalised)
        self.define('_FilePathOutput_', output_path_normalised)
        self.define('_FileNameHtml_', output_name)
        self.define('_FileNameOutput_', output_name)

    def output_path(self) -> str:
        """
        Path of the output file: the source path with its `.xil` extension replaced.
        """
        path = self._path if self._path is not None else SOURCE_DESCRIPTION_FOR_STRINGS
        if path.endswith(XIL_FILE_EXTENSION):
            path = path[:-len(XIL_FILE_EXTENSION)]

        return f'{path}.{self.value("_OutputExtension_")}'


class IncludeScope(DocumentScope):
    """
    Scope of an included file.

    It shares the keys, URL abbreviations, signatures and catalog of the including scope,
    but has its own source (for diagnostics) and its own list of raw blocks.
    """
    def __init__(self, parent: DocumentScope, path: str):
        super().__init__(parent, path)
        self._value_from_key = parent._value_from_key
        self._url_from_abbreviation = parent._url_from_abbreviation
        self._signature_from_name = parent._signature_from_name
        self._custom_source_from_name = parent._custom_source_from_name
        self._catalog = parent.catalog
