"""
Process-wide store of catalog data.

Each slot has its own lock and is swapped on its own. A reader running
during a sync can therefore see a fresh card map next to a stale set map;
that window is accepted, not prevented.
"""

import logging
from threading import Lock
from typing import Any

from draftdestiny.models.card import BanlistsMap, CardinfoMap, CardsetsMap, CatalogSlot

logger = logging.getLogger(__name__)


class ReferenceCache:
    """Lock-guarded catalog maps, one lock per CatalogSlot."""

    def __init__(self) -> None:
        self._slots: dict[CatalogSlot, dict[Any, Any]] = {slot: {} for slot in CatalogSlot}
        self._locks: dict[CatalogSlot, Lock] = {slot: Lock() for slot in CatalogSlot}

    def read_slot(self, slot: CatalogSlot) -> dict[Any, Any]:
        """
        Current map of a slot.

        The map is replaced, never mutated, by swap_slot, so the returned
        reference stays consistent after the lock is released. Callers must
        not mutate it.
        """
        with self._locks[slot]:
            return self._slots[slot]

    def swap_slot(self, slot: CatalogSlot, value: dict[Any, Any]) -> dict[Any, Any]:
        """Replace a slot's map and return the previous one."""
        with self._locks[slot]:
            previous = self._slots[slot]
            self._slots[slot] = value
        logger.debug("Swapped %s slot (%d entries)", slot.value, len(value))
        return previous

    @property
    def cardinfo(self) -> CardinfoMap:
        return self.read_slot(CatalogSlot.CARDINFO)

    @property
    def cardsets(self) -> CardsetsMap:
        return self.read_slot(CatalogSlot.CARDSETS)

    @property
    def banlists(self) -> BanlistsMap:
        return self.read_slot(CatalogSlot.BANLISTS)

    def is_empty(self) -> bool:
        return all(not self.read_slot(slot) for slot in CatalogSlot)


_cache: ReferenceCache | None = None


def get_reference_cache() -> ReferenceCache:
    """Shared cache for callers that don't inject their own."""
    global _cache
    if _cache is None:
        _cache = ReferenceCache()
    return _cache


def reset_reference_cache() -> None:
    """Drop the shared cache (for testing)."""
    global _cache
    _cache = None
