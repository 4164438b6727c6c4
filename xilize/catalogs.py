"""
# Xilize: catalogs.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Document catalogs (collections of headings and the like, e.g. for a table of contents).
"""

import abc
from typing import NamedTuple, Optional


class CatalogEntry(NamedTuple):
    id_: str
    text: str
    level: int
    extra: str = ''


class CatalogListener(abc.ABC):
    """
    Collector of catalog entries.
    """
    @abc.abstractmethod
    def has_interest(self, entry: CatalogEntry) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def receive_entry(self, entry: CatalogEntry):
        raise NotImplementedError


class Catalog(CatalogListener):
    """
    Per-document catalog.

    A catalog forwards entries to its listeners in registration order.
    A catalog created with a parent catalog is itself a listener of that parent's listeners,
    so that collectors further up the scope chain observe descendant entries in document order.
    """
    _listeners: list[CatalogListener]
    _id_prefix: str
    _id_count: int

    def __init__(self, id_prefix: str, parent: Optional['Catalog'] = None):
        self._listeners = []
        self._id_prefix = id_prefix
        self._id_count = 0

        if parent is not None:
            self.add_listener(parent)

    @property
    def listeners(self) -> tuple[CatalogListener, ...]:
        return tuple(self._listeners)

    def add_listener(self, listener: CatalogListener):
        self._listeners.append(listener)

    def remove_listener(self, listener: CatalogListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def has_listener(self, entry: CatalogEntry) -> bool:
        return any(listener.has_interest(entry) for listener in self._listeners)

    def register(self, entry: CatalogEntry):
        for listener in self._listeners:
            listener.receive_entry(entry)

    def unique_id(self) -> str:
        self._id_count += 1
        return f'{self._id_prefix}{self._id_count}'

    def has_interest(self, entry: CatalogEntry) -> bool:
        return self.has_listener(entry)

    def receive_entry(self, entry: CatalogEntry):
        self.register(entry)
