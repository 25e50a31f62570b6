from threading import Thread

from draftdestiny.models.card import Banlist, CatalogSlot
from draftdestiny.services.reference_cache import (
    ReferenceCache,
    get_reference_cache,
    reset_reference_cache,
)


class TestReferenceCache:
    def test_starts_empty(self) -> None:
        cache = ReferenceCache()

        assert cache.is_empty()
        assert cache.cardinfo == {}

    def test_swap_replaces_only_that_slot(self) -> None:
        cache = ReferenceCache()
        banlists = {"List": Banlist(name="List")}

        cache.swap_slot(CatalogSlot.BANLISTS, banlists)

        assert cache.banlists is banlists
        assert cache.cardsets == {}
        assert not cache.is_empty()

    def test_swap_returns_previous(self) -> None:
        cache = ReferenceCache()
        first: dict = {"a": 1}
        cache.swap_slot(CatalogSlot.CARDSETS, first)

        previous = cache.swap_slot(CatalogSlot.CARDSETS, {})

        assert previous is first

    def test_concurrent_swaps_leave_a_complete_map(self) -> None:
        cache = ReferenceCache()
        maps = [{i: i} for i in range(50)]

        threads = [
            Thread(target=cache.swap_slot, args=(CatalogSlot.CARDINFO, m)) for m in maps
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert any(cache.cardinfo is m for m in maps)


class TestSharedCache:
    def test_shared_instance_is_reused(self) -> None:
        assert get_reference_cache() is get_reference_cache()

    def test_reset_creates_new_instance(self) -> None:
        first = get_reference_cache()

        reset_reference_cache()

        assert get_reference_cache() is not first
