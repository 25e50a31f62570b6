"""
Reversible collection mutations.

A Change is a tagged union over ChangeKind. ADD and REMOVE carry the cards
they touch; NONE is only what a default-constructed Change holds before real
content is assigned, and is never applied or journaled.
"""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class CollectionCard:
    """
    Key of the owned-card multiset.

    Only the card id is stored so saved collections stay readable when the
    catalog Card record changes shape.
    """

    id: int


@dataclass
class ChangeContent:
    """
    Payload of a Change.

    Attributes:
        cards: Cards to change, one entry per copy
        date: When the change was executed
        round: Draft round the change was executed in, if any
    """

    cards: list[CollectionCard] = field(default_factory=list)
    date: str = ""
    round: int | None = None


class ChangeKind(int, Enum):
    NONE = 0
    ADD = 1
    REMOVE = 2


@dataclass
class Change:
    """A modification applied to a Collection."""

    kind: ChangeKind = ChangeKind.NONE
    content: ChangeContent = field(default_factory=ChangeContent)

    @classmethod
    def add(cls, content: ChangeContent) -> "Change":
        return cls(kind=ChangeKind.ADD, content=content)

    @classmethod
    def remove(cls, content: ChangeContent) -> "Change":
        return cls(kind=ChangeKind.REMOVE, content=content)

    def is_none(self) -> bool:
        return self.kind is ChangeKind.NONE

    def inverse(self) -> "Change":
        """Structural inverse: ADD <-> REMOVE over the same content."""
        if self.kind is ChangeKind.ADD:
            return Change.remove(self.content)
        if self.kind is ChangeKind.REMOVE:
            return Change.add(self.content)
        return Change()
