from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class Card:
    """
    A catalog entry, normalized from YGOPRODECK card info.

    Attributes:
        id: Passcode of the card
        name: Card name
        card_type: Frame type as listed upstream (e.g., "Effect Monster", "Spell Card")
        description: Card text
        atk: Attack, monsters only
        def_: Defense, absent for Link monsters and non-monsters
        level: Level or rank, monsters only
        race: Monster type, or the spell/trap property (e.g., "Dragon", "Quick-Play")
        attribute: Monster attribute (e.g., "LIGHT")
        archetype: Archetype the card belongs to, if any
        pend_scale: Pendulum scale, Pendulum monsters only
        link_rating: Link rating, Link monsters only
    """

    id: int
    name: str
    card_type: str
    description: str
    race: str
    atk: int | None = None
    def_: int | None = None
    level: int | None = None
    attribute: str | None = None
    archetype: str | None = None
    pend_scale: int | None = None
    link_rating: int | None = None


@dataclass
class CardSet:
    """
    A product (booster, structure deck, ...) annotated with known card ids.

    card_ids is empty when the card payload listed no card in this set.
    """

    name: str
    code: str
    num_of_cards: int
    tcg_date: str | None = None
    card_ids: list[int] = field(default_factory=list)


@dataclass
class Banlist:
    """A named ban list: card id -> allowed copies (0 forbidden .. 3 unlimited)."""

    name: str
    restrictions: dict[int, int] = field(default_factory=dict)

    def limit_of(self, card_id: int) -> int:
        """Allowed copies of a card; unlisted cards are unlimited."""
        return self.restrictions.get(card_id, 3)


# Set name -> card ids in first-seen order, no duplicates
CardSetMap = dict[str, list[int]]

CardinfoMap = dict[int, Card]
CardsetsMap = dict[str, CardSet]
BanlistsMap = dict[str, Banlist]


class CatalogSlot(str, Enum):
    """One independently persisted and cached unit of catalog data."""

    CARDINFO = "cardinfo"
    CARDSETS = "cardsets"
    BANLISTS = "banlists"
