"""
A user's owned-card collection.

Cards are a multiset keyed by CollectionCard. Quantities are always positive:
an entry whose quantity would drop to zero is deleted.

Mutation goes through add_change / undo_change only. Every applied change is
pushed to the front of the journal, so the journal reads most-recent-first
and undo pops from the front.

A Collection has no internal locking. Callers sharing one instance between
threads must serialize access themselves.
"""

import logging
from collections import deque
from copy import deepcopy
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from pathlib import Path

from draftdestiny.config import LAST_CHANGED_FORMAT, settings
from draftdestiny.models.change import Change, ChangeKind, CollectionCard
from draftdestiny.models.draft_settings import DraftSettings
from draftdestiny.models.failure import CollectionNotFoundError, EmptyJournalError
from draftdestiny.models.meta_data import Action, MetaData
from draftdestiny.storage.codec import BinaryReader, BinaryWriter
from draftdestiny.storage.records import (
    read_action,
    read_card,
    read_change,
    read_meta_data,
    write_action,
    write_card,
    write_change,
    write_meta_data,
)

logger = logging.getLogger(__name__)


def _collections_dir(directory: Path | None) -> Path:
    return directory if directory is not None else settings.collections_dir


def _read_file(name: str, directory: Path | None) -> bytes:
    path = _collections_dir(directory) / name
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        raise CollectionNotFoundError(name) from e


@dataclass
class Collection:
    """
    A user's card collection with its change history.

    Attributes:
        meta_data: Name, description, draft configuration, last save time
        cards: Owned quantity per card, always > 0
        changes: Applied changes, most recent first
        tags: Tag name -> cards carrying the tag
        actions: Append-only log of draft events
    """

    meta_data: MetaData = field(default_factory=MetaData)
    cards: dict[CollectionCard, int] = field(default_factory=dict)
    changes: deque[Change] = field(default_factory=deque)
    tags: dict[str, set[CollectionCard]] = field(default_factory=dict)
    actions: list[Action] = field(default_factory=list)

    # -------------------------------------------------------------------------
    # Construction and persistence
    # -------------------------------------------------------------------------

    @staticmethod
    def builder() -> "CollectionBuilder":
        return CollectionBuilder()

    @staticmethod
    def get_names(directory: Path | None = None) -> list[str]:
        """
        Names of all locally saved collections.

        Returns an empty list if the collections directory cannot be read.
        """
        path = _collections_dir(directory)
        try:
            return sorted(entry.name for entry in path.iterdir() if entry.is_file())
        except OSError as e:
            logger.debug("Cannot list collections in %s: %s", path, e)
            return []

    @classmethod
    def from_name(cls, name: str, directory: Path | None = None) -> "Collection":
        """
        Load a saved collection.

        Raises:
            CollectionNotFoundError: If nothing is saved under `name`
            CorruptDataError: If the file cannot be decoded
        """
        return cls.from_bytes(_read_file(name, directory), what=f"collection '{name}'")

    @staticmethod
    def get_metadata_from(name: str, directory: Path | None = None) -> MetaData:
        """
        Read only the metadata of a saved collection.

        Decodes the leading metadata record and ignores the rest of the file.

        Raises:
            CollectionNotFoundError: If nothing is saved under `name`
            CorruptDataError: If the metadata cannot be decoded
        """
        reader = BinaryReader(_read_file(name, directory), what=f"collection '{name}'")
        return read_meta_data(reader)

    def save(self, name: str, directory: Path | None = None) -> Path:
        """
        Stamp the current time into the metadata and write the collection.

        The in-memory metadata is only stamped once the file is written.
        OSError propagates; there is no retry.
        """
        meta_data = replace(
            self.meta_data,
            last_changed=datetime.now(UTC).strftime(LAST_CHANGED_FORMAT),
        )
        data = replace(self, meta_data=meta_data).to_bytes()
        path = _collections_dir(directory) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        self.meta_data = meta_data
        logger.info("Saved collection %s to %s", name, path)
        return path

    @staticmethod
    def delete(name: str, directory: Path | None = None) -> None:
        path = _collections_dir(directory) / name
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise CollectionNotFoundError(name) from e
        logger.info("Deleted collection %s", name)

    def to_bytes(self) -> bytes:
        w = BinaryWriter()
        write_meta_data(w, self.meta_data)
        w.map(self.cards, lambda card: write_card(w, card), w.u32)
        w.seq(self.changes, lambda change: write_change(w, change))
        w.map(
            self.tags,
            w.string,
            lambda tagged: w.seq(
                sorted(tagged, key=lambda card: card.id), lambda card: write_card(w, card)
            ),
        )
        w.seq(self.actions, lambda action: write_action(w, action))
        return w.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes, what: str = "collection") -> "Collection":
        r = BinaryReader(data, what=what)
        collection = cls(
            meta_data=read_meta_data(r),
            cards=r.map(lambda: read_card(r), r.u32),
            changes=deque(r.seq(lambda: read_change(r))),
            tags={
                tag: set(cards)
                for tag, cards in r.map(r.string, lambda: r.seq(lambda: read_card(r))).items()
            },
            actions=r.seq(lambda: read_action(r)),
        )
        r.finish()
        return collection

    # -------------------------------------------------------------------------
    # Changes
    # -------------------------------------------------------------------------

    def add_change(self, change: Change) -> None:
        """
        Apply a change to the owned cards and record it in the journal.

        A NONE change is ignored and not journaled. The journal keeps its own
        copy of the card list, so later edits by the caller do not alter undo.
        """
        if self._apply(change):
            content = replace(change.content, cards=list(change.content.cards))
            self.changes.appendleft(replace(change, content=content))

    def undo_change(self) -> Change:
        """
        Remove the most recent change and apply its inverse.

        This is a structural inverse, not a replay of history: undoing a
        REMOVE adds its cards back even if some of them were not owned when
        the removal happened.

        Returns:
            The change that was undone

        Raises:
            EmptyJournalError: If there is no change to undo
        """
        if not self.changes:
            raise EmptyJournalError()

        change = self.changes.popleft()
        self._apply(change.inverse())
        return change

    def _apply(self, change: Change) -> bool:
        if change.kind is ChangeKind.ADD:
            self._add_cards(change.content.cards)
        elif change.kind is ChangeKind.REMOVE:
            self._remove_cards(change.content.cards)
        else:
            return False
        return True

    def _add_cards(self, cards: list[CollectionCard]) -> None:
        for card in cards:
            self.cards[card] = self.cards.get(card, 0) + 1

    def _remove_cards(self, cards: list[CollectionCard]) -> None:
        for card in cards:
            quantity = self.cards.get(card)
            if quantity is None:
                # Removing an absent card is a no-op
                continue
            if quantity <= 1:
                del self.cards[card]
            else:
                self.cards[card] = quantity - 1

    # -------------------------------------------------------------------------
    # Queries, tags and actions
    # -------------------------------------------------------------------------

    def get_quantity(self, card: CollectionCard) -> int:
        return self.cards.get(card, 0)

    def total_cards(self) -> int:
        return sum(self.cards.values())

    def unique_cards(self) -> int:
        return len(self.cards)

    def tag_card(self, tag: str, card: CollectionCard) -> None:
        self.tags.setdefault(tag, set()).add(card)

    def untag_card(self, tag: str, card: CollectionCard) -> None:
        tagged = self.tags.get(tag)
        if tagged is None:
            return
        tagged.discard(card)
        if not tagged:
            del self.tags[tag]

    def cards_with_tag(self, tag: str) -> set[CollectionCard]:
        return set(self.tags.get(tag, ()))

    def record_action(self, action: Action) -> None:
        self.actions.append(action)


class CollectionBuilder:
    """Fluent configuration for a new collection, before its first save."""

    def __init__(self) -> None:
        self._meta_data = MetaData()
        self._cards: dict[CollectionCard, int] = {}

    def name(self, name: str) -> "CollectionBuilder":
        self._meta_data.name = name
        return self

    def description(self, description: str) -> "CollectionBuilder":
        self._meta_data.description = description
        return self

    def draft_settings(self, draft_settings: DraftSettings) -> "CollectionBuilder":
        self._meta_data.draft_settings = draft_settings
        return self

    def cards(self, cards: dict[CollectionCard, int]) -> "CollectionBuilder":
        """Starting quantities. These are not journaled and cannot be undone."""
        self._cards = {card: qty for card, qty in cards.items() if qty > 0}
        return self

    def build(self) -> Collection:
        meta_data = replace(
            self._meta_data, draft_settings=deepcopy(self._meta_data.draft_settings)
        )
        return Collection(meta_data=meta_data, cards=dict(self._cards))
