from dataclasses import dataclass, field
from enum import Enum

from draftdestiny.models.draft_settings import DraftSettings


@dataclass
class MetaData:
    """
    Descriptive part of a collection.

    Stored first in a saved collection so it can be read on its own, e.g. for
    listing collections without loading their contents.

    Attributes:
        name: Display name
        description: Free text shown alongside the name
        last_changed: UTC timestamp of the last save (LAST_CHANGED_FORMAT)
        draft_settings: Draft the collection was created for
    """

    name: str = ""
    description: str = ""
    last_changed: str = ""
    draft_settings: DraftSettings = field(default_factory=DraftSettings)


class ActionKind(int, Enum):
    DRAFT_STARTED = 0
    ROUND_COMPLETED = 1
    DRAFT_FINISHED = 2
    NOTE = 3


@dataclass
class Action:
    """Entry of a collection's append-only action log."""

    kind: ActionKind
    date: str
    round: int | None = None
    note: str = ""
