"""
Wire encoding of the records a saved collection is made of.

Each record has a write_* function taking a BinaryWriter and a read_*
function taking a BinaryReader. Tagged unions are written as a u32 variant
tag followed by the variant's payload, if it has one.
"""

from enum import Enum
from typing import TypeVar

from draftdestiny.models.change import Change, ChangeContent, ChangeKind, CollectionCard
from draftdestiny.models.draft_settings import (
    BattlePackSettings,
    ChoiceSettings,
    DraftMode,
    DraftSettings,
    SetRotation,
)
from draftdestiny.models.meta_data import Action, ActionKind, MetaData
from draftdestiny.storage.codec import BinaryReader, BinaryWriter

E = TypeVar("E", bound=Enum)


def _read_variant(r: BinaryReader, enum_type: type[E]) -> E:
    tag = r.u32()
    try:
        return enum_type(tag)
    except ValueError as e:
        raise r.corrupt(f"invalid {enum_type.__name__} tag {tag}") from e


# =============================================================================
# CARDS AND CHANGES
# =============================================================================


def write_card(w: BinaryWriter, card: CollectionCard) -> None:
    w.u32(card.id)


def read_card(r: BinaryReader) -> CollectionCard:
    return CollectionCard(id=r.u32())


def write_change(w: BinaryWriter, change: Change) -> None:
    w.u32(change.kind.value)
    if change.is_none():
        return
    content = change.content
    w.seq(content.cards, lambda card: write_card(w, card))
    w.string(content.date)
    w.option(content.round, w.u16)


def read_change(r: BinaryReader) -> Change:
    kind = _read_variant(r, ChangeKind)
    if kind is ChangeKind.NONE:
        return Change()
    content = ChangeContent(
        cards=r.seq(lambda: read_card(r)),
        date=r.string(),
        round=r.option(r.u16),
    )
    return Change(kind=kind, content=content)


# =============================================================================
# DRAFT SETTINGS
# =============================================================================


def _write_rotation(w: BinaryWriter, rotation: SetRotation) -> None:
    w.option(rotation.rounds, w.u64)


def _write_choice(w: BinaryWriter, choice: ChoiceSettings) -> None:
    w.u64(choice.rounds_num)
    w.u64(choice.choices_num)
    w.u64(choice.selections_num)
    w.u64(choice.cards_num)
    w.seq(choice.sets, lambda group: w.seq(group, w.string))
    _write_rotation(w, choice.rotate)
    w.boolean(choice.allow_undo)


def _read_choice(r: BinaryReader) -> ChoiceSettings:
    return ChoiceSettings(
        rounds_num=r.u64(),
        choices_num=r.u64(),
        selections_num=r.u64(),
        cards_num=r.u64(),
        sets=r.seq(lambda: r.seq(r.string)),
        rotate=SetRotation(rounds=r.option(r.u64)),
        allow_undo=r.boolean(),
    )


def _write_battle_pack(w: BinaryWriter, battle_pack: BattlePackSettings) -> None:
    w.u64(battle_pack.rounds_num)
    w.u64(battle_pack.packs_num)
    w.u64(battle_pack.cards_num)
    w.seq(battle_pack.sets, w.string)
    w.boolean(battle_pack.allow_undo)


def _read_battle_pack(r: BinaryReader) -> BattlePackSettings:
    return BattlePackSettings(
        rounds_num=r.u64(),
        packs_num=r.u64(),
        cards_num=r.u64(),
        sets=r.seq(r.string),
        allow_undo=r.boolean(),
    )


def write_draft_settings(w: BinaryWriter, draft: DraftSettings) -> None:
    w.u32(draft.mode.value)
    if draft.mode is DraftMode.BATTLE_PACK:
        _write_battle_pack(w, draft.battle_pack or BattlePackSettings())
    elif draft.mode is DraftMode.CHOICE:
        _write_choice(w, draft.choice or ChoiceSettings())


def read_draft_settings(r: BinaryReader) -> DraftSettings:
    mode = _read_variant(r, DraftMode)
    if mode is DraftMode.BATTLE_PACK:
        return DraftSettings.battle_pack_draft(_read_battle_pack(r))
    if mode is DraftMode.CHOICE:
        return DraftSettings.choice_draft(_read_choice(r))
    return DraftSettings()


# =============================================================================
# METADATA AND ACTIONS
# =============================================================================


def write_meta_data(w: BinaryWriter, meta: MetaData) -> None:
    w.string(meta.name)
    w.string(meta.description)
    w.string(meta.last_changed)
    write_draft_settings(w, meta.draft_settings)


def read_meta_data(r: BinaryReader) -> MetaData:
    return MetaData(
        name=r.string(),
        description=r.string(),
        last_changed=r.string(),
        draft_settings=read_draft_settings(r),
    )


def write_action(w: BinaryWriter, action: Action) -> None:
    w.u32(action.kind.value)
    w.string(action.date)
    w.option(action.round, w.u16)
    w.string(action.note)


def read_action(r: BinaryReader) -> Action:
    return Action(
        kind=_read_variant(r, ActionKind),
        date=r.string(),
        round=r.option(r.u16),
        note=r.string(),
    )
