"""Thread-safe in-memory artist store."""
from __future__ import annotations

from threading import Lock
from typing import Iterable, List, Optional

from . import utils
from .models import Artist, Result


class ArtistStore:
    """Ordered artist collection plus its id allocator behind a single lock.

    Every public operation holds the lock for its full duration, so any two
    concurrent calls behave as if they ran one after the other. Records are
    copied on the way in and on the way out; callers never hold a reference
    to the stored objects.
    """

    def __init__(self, seed: Optional[Iterable[Artist]] = None) -> None:
        self._lock = Lock()
        self._items: List[Artist] = []
        self._next_id = 1
        if seed is not None:
            self.initialize(seed)

    def initialize(self, seed: Iterable[Artist]) -> None:
        """Replace the collection wholesale and reset the allocator."""

        items = [artist.copy() for artist in seed]
        with self._lock:
            self._items = items
            self._next_id = max((artist.id for artist in items), default=0) + 1

    def list(self, name_filter: Optional[str] = None) -> List[Artist]:
        needle = utils.fold_name(name_filter) if name_filter else ""
        with self._lock:
            return [
                artist.copy()
                for artist in self._items
                if not needle or needle in utils.fold_name(artist.name)
            ]

    def insert(self, artist: Artist) -> Artist:
        """Store ``artist`` under the next id, ignoring any id it carries."""

        with self._lock:
            stored = artist.with_id(self._next_id)
            self._next_id += 1
            self._items.append(stored)
            return stored.copy()

    def get(self, artist_id: int) -> Result[Artist]:
        with self._lock:
            index = self._index_of(artist_id)
            if index is None:
                return Result.not_found()
            return Result.ok(self._items[index].copy())

    def replace(self, artist_id: int, artist: Artist) -> Result[Artist]:
        """Overwrite every field but the id of the record at ``artist_id``."""

        with self._lock:
            index = self._index_of(artist_id)
            if index is None:
                return Result.not_found()
            stored = self._items[index]
            stored.overwrite_from(artist)
            return Result.ok(stored.copy())

    def delete(self, artist_id: int) -> Result[None]:
        with self._lock:
            index = self._index_of(artist_id)
            if index is None:
                return Result.not_found()
            del self._items[index]
            return Result.ok()

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    # Callers must hold the lock.
    def _index_of(self, artist_id: int) -> Optional[int]:
        for index, artist in enumerate(self._items):
            if artist.id == artist_id:
                return index
        return None
