from draftdestiny.models.card import (
    Banlist,
    BanlistsMap,
    Card,
    CardinfoMap,
    CardSet,
    CardsetsMap,
    CardSetMap,
    CatalogSlot,
)
from draftdestiny.models.change import Change, ChangeContent, ChangeKind, CollectionCard
from draftdestiny.models.draft_settings import (
    BattlePackSettings,
    ChoiceSettings,
    DraftMode,
    DraftSettings,
    SetRotation,
)
from draftdestiny.models.failure import (
    CollectionNotFoundError,
    CorruptDataError,
    EmptyJournalError,
    FailureKind,
    KnownError,
    PayloadDecodeError,
)
from draftdestiny.models.meta_data import Action, ActionKind, MetaData

__all__ = [
    "Action",
    "ActionKind",
    "Banlist",
    "BanlistsMap",
    "BattlePackSettings",
    "Card",
    "CardSet",
    "CardSetMap",
    "CardinfoMap",
    "CardsetsMap",
    "CatalogSlot",
    "Change",
    "ChangeContent",
    "ChangeKind",
    "ChoiceSettings",
    "CollectionCard",
    "CollectionNotFoundError",
    "CorruptDataError",
    "DraftMode",
    "DraftSettings",
    "EmptyJournalError",
    "FailureKind",
    "KnownError",
    "MetaData",
    "PayloadDecodeError",
    "SetRotation",
]
