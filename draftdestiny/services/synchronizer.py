"""
Reference data synchronizer.

Fetches card info, card sets and ban lists, normalizes them, persists each
map to its own slot and publishes the maps into a ReferenceCache.

Outcome rules:
- Any fetch failure: nothing is persisted or cached, status FAILED.
- Any slot write failure: the cache is still updated, status INCOMPLETE.
  The session keeps working with fresh data that is not yet durable.
- Otherwise: status COMPLETE.

Fetches are blocking, sequential and have no timeout. There is no retry; a
failed sync must be invoked again by the caller.
"""

import logging
from dataclasses import dataclass
from enum import Enum

import httpx

from draftdestiny.config import Settings, settings as default_settings
from draftdestiny.models.card import (
    BanlistsMap,
    CardinfoMap,
    CardsetsMap,
    CardSetMap,
    CatalogSlot,
)
from draftdestiny.models.failure import PayloadDecodeError
from draftdestiny.parsers import banlists, cardinfo, cardsets, vercheck
from draftdestiny.services.reference_cache import ReferenceCache
from draftdestiny.storage.catalog import (
    CatalogStore,
    decode_banlists,
    decode_cardinfo,
    decode_cardsets,
    encode_banlists,
    encode_cardinfo,
    encode_cardsets,
)

logger = logging.getLogger(__name__)


class UpdateStatus(str, Enum):
    """Result of a synchronization."""

    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    FAILED = "failed"


@dataclass
class Responses:
    """Raw text of the three catalog sources."""

    banlists: str
    cardinfo: str
    cardsets: str


class Synchronizer:
    """
    Keeps the local catalog mirror and a ReferenceCache up to date.

    Args:
        cache: Cache the normalized maps are published into
        store: Persisted slots. Defaults to the configured external directory.
        settings: Source URLs and user agent
        client: Optional httpx client for connection reuse
    """

    def __init__(
        self,
        cache: ReferenceCache,
        store: CatalogStore | None = None,
        settings: Settings | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.cache = cache
        self.settings = settings or default_settings
        self.store = store or CatalogStore(self.settings.external_dir)
        self.client = client

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def get_response(self, url: str) -> str:
        """
        GET a URL and return the body as text.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
        """
        if self.client:
            response = self.client.get(url)
        else:
            response = httpx.get(
                url,
                headers={"User-Agent": self.settings.user_agent},
                follow_redirects=True,
                timeout=None,
            )

        response.raise_for_status()
        return response.text

    def get_data(self) -> Responses | None:
        """Fetch all three sources in order; None if any of them fails."""
        sources = {
            CatalogSlot.BANLISTS: self.settings.banlists_url,
            CatalogSlot.CARDINFO: self.settings.cardinfo_url,
            CatalogSlot.CARDSETS: self.settings.cardsets_url,
        }
        texts: dict[CatalogSlot, str] = {}

        for slot, url in sources.items():
            try:
                texts[slot] = self.get_response(url)
            except httpx.HTTPError as e:
                logger.warning(
                    "CATALOG_FETCH_FAILED",
                    extra={"slot": slot.value, "url": url, "error": str(e)},
                )
                return None

        return Responses(
            banlists=texts[CatalogSlot.BANLISTS],
            cardinfo=texts[CatalogSlot.CARDINFO],
            cardsets=texts[CatalogSlot.CARDSETS],
        )

    # -------------------------------------------------------------------------
    # Synchronization
    # -------------------------------------------------------------------------

    def update(self) -> UpdateStatus:
        """
        Fetch, normalize, persist and cache all catalog data.

        Raises:
            PayloadDecodeError: If a fetched payload is malformed
        """
        data = self.get_data()
        if data is None:
            logger.error("Catalog update failed: could not fetch all sources")
            return UpdateStatus.FAILED

        parsed_banlists = banlists.parse(banlists.strip_comments(data.banlists))

        card_set_map: CardSetMap = {}
        parsed_cardinfo = cardinfo.parse(data.cardinfo, card_set_map)
        parsed_cardsets = cardsets.parse(data.cardsets, card_set_map)

        encoded = {
            CatalogSlot.BANLISTS: encode_banlists(parsed_banlists),
            CatalogSlot.CARDINFO: encode_cardinfo(parsed_cardinfo),
            CatalogSlot.CARDSETS: encode_cardsets(parsed_cardsets),
        }
        failed_slots: list[CatalogSlot] = []
        for slot, payload in encoded.items():
            try:
                self.store.write(slot, payload)
            except OSError as e:
                logger.error(
                    "CATALOG_PERSIST_FAILED",
                    extra={"slot": slot.value, "error": str(e)},
                )
                failed_slots.append(slot)

        self.update_cache(parsed_banlists, parsed_cardinfo, parsed_cardsets)

        if failed_slots:
            logger.warning(
                "Catalog update incomplete: %s not persisted",
                ", ".join(slot.value for slot in failed_slots),
            )
            return UpdateStatus.INCOMPLETE

        logger.info(
            "Catalog updated: %d cards, %d sets, %d ban lists",
            len(parsed_cardinfo),
            len(parsed_cardsets),
            len(parsed_banlists),
        )
        return UpdateStatus.COMPLETE

    def load_local_data(self) -> UpdateStatus:
        """
        Load persisted catalog data into the cache.

        If any slot cannot be read, runs update() instead and, when that
        completes, stores the current upstream version so the data is not
        downloaded again right away.

        Returns:
            COMPLETE when local data was loaded, otherwise the update status

        Raises:
            CorruptDataError: If a persisted slot cannot be decoded
        """
        raw: dict[CatalogSlot, bytes] = {}
        for slot in CatalogSlot:
            try:
                raw[slot] = self.store.read(slot)
            except OSError as e:
                logger.info("Local %s data unavailable (%s), updating", slot.value, e)
                return self._repair()

        self.update_cache(
            decode_banlists(raw[CatalogSlot.BANLISTS]),
            decode_cardinfo(raw[CatalogSlot.CARDINFO]),
            decode_cardsets(raw[CatalogSlot.CARDSETS]),
        )
        logger.info("Loaded catalog from %s", self.store.directory)
        return UpdateStatus.COMPLETE

    def _repair(self) -> UpdateStatus:
        status = self.update()
        if status is not UpdateStatus.COMPLETE:
            return status

        try:
            self.save_version(self.fetch_version())
        except (httpx.HTTPError, OSError, PayloadDecodeError) as e:
            logger.warning("Could not store catalog version marker: %s", e)
        return status

    def update_cache(
        self,
        banlists_map: BanlistsMap,
        cardinfo_map: CardinfoMap,
        cardsets_map: CardsetsMap,
    ) -> None:
        """Publish the three maps, each slot swapped on its own."""
        self.cache.swap_slot(CatalogSlot.BANLISTS, banlists_map)
        self.cache.swap_slot(CatalogSlot.CARDINFO, cardinfo_map)
        self.cache.swap_slot(CatalogSlot.CARDSETS, cardsets_map)

    # -------------------------------------------------------------------------
    # Version check
    # -------------------------------------------------------------------------

    def fetch_version(self) -> str:
        """
        Current upstream database version.

        Raises:
            httpx.HTTPError: If the request fails
            PayloadDecodeError: If the response is malformed
        """
        return vercheck.parse(self.get_response(self.settings.vercheck_url))

    def update_version(self) -> str | None:
        """
        Upstream version if it differs from the stored marker, else None.

        Raises:
            httpx.HTTPError: If the request fails
            PayloadDecodeError: If the version payload is malformed
            CorruptDataError: If the stored version marker cannot be read
        """
        return vercheck.new_update_version_available(
            self.fetch_version(), self.store.read_version()
        )

    def save_version(self, version: str) -> None:
        self.store.write_version(version)
