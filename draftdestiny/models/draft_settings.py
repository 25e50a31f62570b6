from dataclasses import dataclass, field
from enum import Enum


@dataclass
class SetRotation:
    """
    Whether the set pool rotates during a draft.

    rounds is None when rotation is disabled, otherwise the number of rounds
    after which the next set group becomes active.
    """

    rounds: int | None = None

    @property
    def enabled(self) -> bool:
        return self.rounds is not None


@dataclass
class ChoiceSettings:
    """Draft where each round offers `choices_num` groups to pick from."""

    rounds_num: int = 0
    choices_num: int = 0
    selections_num: int = 0
    cards_num: int = 0
    sets: list[list[str]] = field(default_factory=list)
    rotate: SetRotation = field(default_factory=SetRotation)
    allow_undo: bool = False


@dataclass
class BattlePackSettings:
    """Draft where each round opens `packs_num` packs from fixed sets."""

    rounds_num: int = 0
    packs_num: int = 0
    cards_num: int = 0
    sets: list[str] = field(default_factory=list)
    allow_undo: bool = False


class DraftMode(int, Enum):
    NONE = 0
    BATTLE_PACK = 1
    CHOICE = 2


@dataclass
class DraftSettings:
    """Draft configuration stored in a collection's metadata."""

    mode: DraftMode = DraftMode.NONE
    battle_pack: BattlePackSettings | None = None
    choice: ChoiceSettings | None = None

    @classmethod
    def battle_pack_draft(cls, battle_pack: BattlePackSettings) -> "DraftSettings":
        return cls(mode=DraftMode.BATTLE_PACK, battle_pack=battle_pack)

    @classmethod
    def choice_draft(cls, choice: ChoiceSettings) -> "DraftSettings":
        return cls(mode=DraftMode.CHOICE, choice=choice)

    def allows_undo(self) -> bool:
        if self.mode is DraftMode.BATTLE_PACK and self.battle_pack is not None:
            return self.battle_pack.allow_undo
        if self.mode is DraftMode.CHOICE and self.choice is not None:
            return self.choice.allow_undo
        return True
