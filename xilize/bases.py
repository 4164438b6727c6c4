"""
# Xilize: bases.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Base classes for signatures.
"""

import copy
from typing import Optional

from xilize import inline
from xilize.blocks import Block
from xilize.exceptions import TranslationException
from xilize.modifiers import Modifiers
from xilize.scopes import Scope


class Signature:
    """
    Base class for a signature.

    A registered signature is a template: every signed block gets its own instance
    (with its own modifiers) via `instantiate(...)`, so instances never share state.
    The default translation passes the block's lines through unchanged.
    """
    modifiers_class = Modifiers
    merges_extension = False
    writes = False
    immediate = False

    _name: str
    _modifiers: Modifiers

    def __init__(self, name: str):
        self._name = name
        self._modifiers = self.modifiers_class()

    def __str__(self) -> str:
        if self.immediate:
            return f'[{self._name}]'

        return f'{self._name}{self._modifiers}'

    @property
    def name(self) -> str:
        return self._name

    @property
    def modifiers(self) -> Modifiers:
        return self._modifiers

    @modifiers.setter
    def modifiers(self, value: Modifiers):
        self._modifiers = value

    def instantiate(self, modifier_text: str = '') -> 'Signature':
        instance = copy.copy(self)
        instance._modifiers = self.modifiers_class(modifier_text)
        return instance

    def replicate(self) -> 'Signature':
        instance = copy.copy(self)
        instance._modifiers = copy.copy(self._modifiers)
        return instance

    def tag_attributes(self) -> str:
        return self._modifiers.tag_attributes()

    def insert_attributes(self, tag_string: str) -> str:
        """
        Insert the tag attributes into the first tag of `tag_string`.
        """
        if not tag_string.startswith('<'):
            return tag_string

        index = tag_string.find('>')
        if index == -1:
            return tag_string

        if tag_string[index - 1] == '/':
            index -= 1
            if tag_string[index - 1] == ' ':
                index -= 1

        attributes = self.tag_attributes()
        if attributes == '':
            return tag_string

        return tag_string[:index] + attributes + tag_string[index:]

    def exec_(self, scope: Scope, block: Block):
        pass

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        return block.lines_as_string()

    def translate_last(self, scope: Scope, block: Block) -> Optional[str]:
        return None

    def write(self, scope: Scope, block: Block) -> str:
        return ''


class ParentSignature(Signature):
    """
    Signature that frames its children with fixed start and end tags.

    Without children, the block's own lines are marked up and framed instead,
    unless children are required.
    """
    _start_tags: str
    _end_tags: str
    _children_required: bool

    def __init__(self, name: str, start_tags: str, end_tags: str, children_required: bool = False):
        super().__init__(name)
        self._start_tags = start_tags
        self._end_tags = end_tags
        self._children_required = children_required

    @property
    def start_tags(self) -> str:
        return self._start_tags

    @property
    def end_tags(self) -> str:
        return self._end_tags

    @property
    def children_required(self) -> bool:
        return self._children_required

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        if block.children is None:
            if self._children_required:
                raise TranslationException(f"'{self._name}' requires child blocks")

            start_tags = self.insert_attributes(self._start_tags)
            return start_tags + inline.markup_block(scope, block) + self._end_tags

        block.translate_children()
        block.wrap_children(self.insert_attributes(self._start_tags), self._end_tags)
        return None


class Directive(Signature):
    """
    Signature that acts during the exec phase and produces no output of its own.

    Immediate directives execute as soon as the tokenizer reads them
    (when read at top level, outside any open start block),
    so that later blocks see their effect.
    """
    immediate = True

    def translate(self, scope: Scope, block: Block) -> Optional[str]:
        block.translate_children()
        return None
