"""
Persisted catalog slots.

Each of the three catalog maps lives in its own file and is written and read
independently. Nothing here makes the three writes atomic as a group.
"""

import json
import logging
from pathlib import Path

from draftdestiny.config import settings
from draftdestiny.models.card import (
    Banlist,
    BanlistsMap,
    Card,
    CardinfoMap,
    CardSet,
    CardsetsMap,
    CatalogSlot,
)
from draftdestiny.models.failure import CorruptDataError
from draftdestiny.storage.codec import BinaryReader, BinaryWriter

logger = logging.getLogger(__name__)

VERSION_FILE = "version.json"


# =============================================================================
# SLOT ENCODING
# =============================================================================


def _write_card(w: BinaryWriter, card: Card) -> None:
    w.u32(card.id)
    w.string(card.name)
    w.string(card.card_type)
    w.string(card.description)
    w.string(card.race)
    w.option(card.atk, w.i32)
    w.option(card.def_, w.i32)
    w.option(card.level, w.u8)
    w.option(card.attribute, w.string)
    w.option(card.archetype, w.string)
    w.option(card.pend_scale, w.u8)
    w.option(card.link_rating, w.u8)


def _read_card(r: BinaryReader) -> Card:
    return Card(
        id=r.u32(),
        name=r.string(),
        card_type=r.string(),
        description=r.string(),
        race=r.string(),
        atk=r.option(r.i32),
        def_=r.option(r.i32),
        level=r.option(r.u8),
        attribute=r.option(r.string),
        archetype=r.option(r.string),
        pend_scale=r.option(r.u8),
        link_rating=r.option(r.u8),
    )


def encode_cardinfo(cardinfo: CardinfoMap) -> bytes:
    w = BinaryWriter()
    w.map(cardinfo, w.u32, lambda card: _write_card(w, card))
    return w.getvalue()


def decode_cardinfo(data: bytes) -> CardinfoMap:
    r = BinaryReader(data, what="cardinfo")
    cardinfo = r.map(r.u32, lambda: _read_card(r))
    r.finish()
    return cardinfo


def _write_card_set(w: BinaryWriter, card_set: CardSet) -> None:
    w.string(card_set.name)
    w.string(card_set.code)
    w.u32(card_set.num_of_cards)
    w.option(card_set.tcg_date, w.string)
    w.seq(card_set.card_ids, w.u32)


def _read_card_set(r: BinaryReader) -> CardSet:
    return CardSet(
        name=r.string(),
        code=r.string(),
        num_of_cards=r.u32(),
        tcg_date=r.option(r.string),
        card_ids=r.seq(r.u32),
    )


def encode_cardsets(cardsets: CardsetsMap) -> bytes:
    w = BinaryWriter()
    w.map(cardsets, w.string, lambda card_set: _write_card_set(w, card_set))
    return w.getvalue()


def decode_cardsets(data: bytes) -> CardsetsMap:
    r = BinaryReader(data, what="cardsets")
    cardsets = r.map(r.string, lambda: _read_card_set(r))
    r.finish()
    return cardsets


def _write_banlist(w: BinaryWriter, banlist: Banlist) -> None:
    w.string(banlist.name)
    w.map(banlist.restrictions, w.u32, w.i32)


def _read_banlist(r: BinaryReader) -> Banlist:
    return Banlist(name=r.string(), restrictions=r.map(r.u32, r.i32))


def encode_banlists(banlists: BanlistsMap) -> bytes:
    w = BinaryWriter()
    w.map(banlists, w.string, lambda banlist: _write_banlist(w, banlist))
    return w.getvalue()


def decode_banlists(data: bytes) -> BanlistsMap:
    r = BinaryReader(data, what="banlists")
    banlists = r.map(r.string, lambda: _read_banlist(r))
    r.finish()
    return banlists


# =============================================================================
# STORE
# =============================================================================


class CatalogStore:
    """
    File-backed slots under the external data directory.

    read/write raise OSError on I/O failure; callers decide what a failure
    means for the sync as a whole.
    """

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory if directory is not None else settings.external_dir

    def path_for(self, slot: CatalogSlot) -> Path:
        return self.directory / f"{slot.value}.bin"

    @property
    def version_path(self) -> Path:
        return self.directory / VERSION_FILE

    def ensure(self) -> None:
        """Create the data directory if missing."""
        self.directory.mkdir(parents=True, exist_ok=True)

    def read(self, slot: CatalogSlot) -> bytes:
        return self.path_for(slot).read_bytes()

    def write(self, slot: CatalogSlot, data: bytes) -> None:
        self.ensure()
        self.path_for(slot).write_bytes(data)
        logger.debug("Wrote %d bytes to %s slot", len(data), slot.value)

    def read_version(self) -> str | None:
        """Stored database version marker, or None if there is none."""
        try:
            with open(self.version_path, encoding="utf-8") as f:
                stored = json.load(f)
        except FileNotFoundError:
            return None
        except json.JSONDecodeError as e:
            raise CorruptDataError("version marker", str(e)) from e

        version = stored.get("database_version") if isinstance(stored, dict) else None
        return str(version) if version is not None else None

    def write_version(self, version: str) -> None:
        self.ensure()
        with open(self.version_path, "w", encoding="utf-8") as f:
            json.dump({"database_version": version}, f)
