"""
Process-local cache for the three list responses.

Each collection owns one slot. Slots never expire; they are cleared when a
write to the collection commits. Populates are tagged with the generation
they started under and are dropped if an invalidation happened meanwhile,
so an in-flight read can never resurrect pre-write data.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)

Listing = tuple[dict, ...]


class Collection(str, Enum):
    PROJECTS = "projects"
    RESOURCES = "resources"
    POSTS = "posts"


@dataclass
class CacheSlot:
    value: Optional[Listing] = None
    generation: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class ListingCache:
    """Generation-tagged memoization of full listings, one slot per collection."""

    def __init__(self):
        self._slots = {collection: CacheSlot() for collection in Collection}

    def get(self, collection: Collection) -> Optional[Listing]:
        slot = self._slots[Collection(collection)]
        with slot.lock:
            return slot.value

    def generation(self, collection: Collection) -> int:
        slot = self._slots[Collection(collection)]
        with slot.lock:
            return slot.generation

    def set(
        self,
        collection: Collection,
        listing: Sequence[dict],
        generation: Optional[int] = None,
    ) -> bool:
        """
        Store a listing. Returns False when the populate is stale, i.e. it
        was computed under a generation that has since been invalidated.
        """
        collection = Collection(collection)
        slot = self._slots[collection]
        frozen = tuple(listing)
        with slot.lock:
            if generation is not None and generation != slot.generation:
                logger.debug(
                    "Discarding stale %s listing (gen %s, current %s)",
                    collection.value,
                    generation,
                    slot.generation,
                )
                return False
            slot.value = frozen
            return True

    def invalidate(self, collection: Collection) -> None:
        slot = self._slots[Collection(collection)]
        with slot.lock:
            slot.value = None
            slot.generation += 1

    def get_or_load(
        self, collection: Collection, loader: Callable[[], Sequence[dict]]
    ) -> Listing:
        """
        Return the cached listing, or call ``loader`` and cache its result.

        The loader runs outside the slot lock; its result is only stored if
        no invalidation happened while it was running.
        """
        collection = Collection(collection)
        slot = self._slots[collection]
        with slot.lock:
            if slot.value is not None:
                return slot.value
            started_under = slot.generation
        listing = tuple(loader())
        self.set(collection, listing, generation=started_under)
        return listing

    def reset(self) -> None:
        """Clear every slot (useful in tests)."""
        for collection in Collection:
            self.invalidate(collection)
