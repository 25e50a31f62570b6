"""Tests for catalog synchronization."""

from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
import respx

from draftdestiny.config import Settings
from draftdestiny.models.card import Banlist, Card, CardSet, CatalogSlot
from draftdestiny.models.failure import CorruptDataError, PayloadDecodeError
from draftdestiny.services.reference_cache import ReferenceCache
from draftdestiny.services.synchronizer import Synchronizer, UpdateStatus
from draftdestiny.storage.catalog import CatalogStore, decode_cardsets


@pytest.fixture
def cache() -> ReferenceCache:
    return ReferenceCache()


@pytest.fixture
def store(test_settings: Settings) -> CatalogStore:
    return CatalogStore(test_settings.external_dir)


@pytest.fixture
def synchronizer(
    cache: ReferenceCache, store: CatalogStore, test_settings: Settings
) -> Synchronizer:
    return Synchronizer(cache, store=store, settings=test_settings)


@pytest.fixture
def mock_sources(
    test_settings: Settings,
    cardinfo_payload: str,
    cardsets_payload: str,
    banlists_text: str,
    version_payload: str,
):
    """Route all four source URLs to fixture payloads."""
    with respx.mock(assert_all_called=False) as router:
        router.get(test_settings.cardinfo_url, name="cardinfo").mock(
            return_value=httpx.Response(200, text=cardinfo_payload)
        )
        router.get(test_settings.cardsets_url, name="cardsets").mock(
            return_value=httpx.Response(200, text=cardsets_payload)
        )
        router.get(test_settings.banlists_url, name="banlists").mock(
            return_value=httpx.Response(200, text=banlists_text)
        )
        router.get(test_settings.vercheck_url, name="vercheck").mock(
            return_value=httpx.Response(200, text=version_payload)
        )
        yield router


def slot_files(store: CatalogStore) -> dict[CatalogSlot, Path]:
    return {slot: store.path_for(slot) for slot in CatalogSlot}


def populate(cache: ReferenceCache) -> dict[CatalogSlot, dict]:
    """Fill every slot with a distinct map and return them."""
    previous: dict[CatalogSlot, dict] = {
        CatalogSlot.CARDINFO: {
            99: Card(
                id=99,
                name="Old Card",
                card_type="Normal Monster",
                description="",
                race="Dragon",
            )
        },
        CatalogSlot.CARDSETS: {
            "Old Set": CardSet(name="Old Set", code="OLD", num_of_cards=1, card_ids=[99])
        },
        CatalogSlot.BANLISTS: {"Old List": Banlist(name="Old List")},
    }
    for slot, data in previous.items():
        cache.swap_slot(slot, data)
    return previous


def assert_slots_unchanged(cache: ReferenceCache, previous: dict[CatalogSlot, dict]) -> None:
    for slot, data in previous.items():
        assert cache.read_slot(slot) is data


class TestUpdate:
    def test_complete_update(
        self, synchronizer: Synchronizer, cache: ReferenceCache, store: CatalogStore, mock_sources
    ) -> None:
        status = synchronizer.update()

        assert status is UpdateStatus.COMPLETE
        assert set(cache.cardinfo) == {1, 2, 3, 4}
        assert cache.cardsets["Set A"].card_ids == [1, 2]
        assert cache.banlists["2024.4 TCG"].restrictions == {2: 0, 1: 1}
        assert all(path.exists() for path in slot_files(store).values())

    def test_persisted_slots_match_cache(
        self, synchronizer: Synchronizer, cache: ReferenceCache, store: CatalogStore, mock_sources
    ) -> None:
        synchronizer.update()

        assert decode_cardsets(store.read(CatalogSlot.CARDSETS)) == cache.cardsets

    def test_fetches_sequentially_in_order(
        self, synchronizer: Synchronizer, test_settings: Settings, mock_sources
    ) -> None:
        synchronizer.update()

        urls = [str(call.request.url) for call in mock_sources.calls]
        assert urls == [
            test_settings.banlists_url,
            test_settings.cardinfo_url,
            test_settings.cardsets_url,
        ]

    def test_fetch_failure_changes_nothing(
        self,
        synchronizer: Synchronizer,
        cache: ReferenceCache,
        store: CatalogStore,
        test_settings: Settings,
        mock_sources,
    ) -> None:
        previous = populate(cache)
        store.write(CatalogSlot.BANLISTS, b"old")
        mock_sources.routes["cardsets"].mock(return_value=httpx.Response(500))

        status = synchronizer.update()

        assert status is UpdateStatus.FAILED
        assert_slots_unchanged(cache, previous)
        assert store.read(CatalogSlot.BANLISTS) == b"old"
        assert not store.path_for(CatalogSlot.CARDINFO).exists()

    def test_transport_error_is_failed(
        self,
        synchronizer: Synchronizer,
        cache: ReferenceCache,
        test_settings: Settings,
        mock_sources,
    ) -> None:
        previous = populate(cache)
        mock_sources.routes["banlists"].mock(
            side_effect=httpx.ConnectError("Network error")
        )

        assert synchronizer.update() is UpdateStatus.FAILED
        assert_slots_unchanged(cache, previous)

    def test_persist_failure_is_incomplete_but_cached(
        self, synchronizer: Synchronizer, cache: ReferenceCache, store: CatalogStore, mock_sources
    ) -> None:
        real_write = store.write

        def failing_write(slot: CatalogSlot, data: bytes) -> None:
            if slot is CatalogSlot.CARDINFO:
                raise OSError("disk full")
            real_write(slot, data)

        with patch.object(store, "write", side_effect=failing_write):
            status = synchronizer.update()

        assert status is UpdateStatus.INCOMPLETE
        assert set(cache.cardinfo) == {1, 2, 3, 4}
        assert store.path_for(CatalogSlot.CARDSETS).exists()
        assert not store.path_for(CatalogSlot.CARDINFO).exists()

    def test_malformed_payload_raises(
        self,
        synchronizer: Synchronizer,
        cache: ReferenceCache,
        store: CatalogStore,
        test_settings: Settings,
        mock_sources,
    ) -> None:
        mock_sources.routes["cardinfo"].mock(
            return_value=httpx.Response(200, text="<html>maintenance</html>")
        )

        with pytest.raises(PayloadDecodeError):
            synchronizer.update()

        assert cache.is_empty()
        assert not any(path.exists() for path in slot_files(store).values())

    def test_uses_injected_client(
        self, cache: ReferenceCache, store: CatalogStore, test_settings: Settings, mock_sources
    ) -> None:
        with httpx.Client() as client:
            synchronizer = Synchronizer(cache, store=store, settings=test_settings, client=client)

            assert synchronizer.update() is UpdateStatus.COMPLETE


class TestLoadLocalData:
    def test_loads_persisted_data(
        self,
        synchronizer: Synchronizer,
        store: CatalogStore,
        test_settings: Settings,
        mock_sources,
    ) -> None:
        synchronizer.update()
        fresh_cache = ReferenceCache()
        offline = Synchronizer(fresh_cache, store=store, settings=test_settings)
        calls_before = len(mock_sources.calls)

        status = offline.load_local_data()

        assert status is UpdateStatus.COMPLETE
        assert fresh_cache.cardsets["Set B"].card_ids == [3]
        assert len(mock_sources.calls) == calls_before

    def test_missing_slot_triggers_update_and_stores_version(
        self, synchronizer: Synchronizer, cache: ReferenceCache, store: CatalogStore, mock_sources
    ) -> None:
        status = synchronizer.load_local_data()

        assert status is UpdateStatus.COMPLETE
        assert set(cache.cardinfo) == {1, 2, 3, 4}
        assert store.read_version() == "114.37"

    def test_failed_repair_does_not_store_version(
        self,
        synchronizer: Synchronizer,
        store: CatalogStore,
        test_settings: Settings,
        mock_sources,
    ) -> None:
        mock_sources.routes["cardinfo"].mock(return_value=httpx.Response(503))

        status = synchronizer.load_local_data()

        assert status is UpdateStatus.FAILED
        assert store.read_version() is None

    def test_version_fetch_failure_is_not_fatal(
        self,
        synchronizer: Synchronizer,
        store: CatalogStore,
        test_settings: Settings,
        mock_sources,
    ) -> None:
        mock_sources.routes["vercheck"].mock(return_value=httpx.Response(500))

        assert synchronizer.load_local_data() is UpdateStatus.COMPLETE
        assert store.read_version() is None

    def test_corrupt_slot_raises(
        self, synchronizer: Synchronizer, store: CatalogStore, mock_sources
    ) -> None:
        synchronizer.update()
        store.write(CatalogSlot.CARDSETS, b"\x01\x02\x03")

        with pytest.raises(CorruptDataError):
            synchronizer.load_local_data()


class TestVersionCheck:
    def test_new_version_when_no_marker(self, synchronizer: Synchronizer, mock_sources) -> None:
        assert synchronizer.update_version() == "114.37"

    def test_no_new_version_when_marker_matches(
        self, synchronizer: Synchronizer, mock_sources
    ) -> None:
        synchronizer.save_version("114.37")

        assert synchronizer.update_version() is None
