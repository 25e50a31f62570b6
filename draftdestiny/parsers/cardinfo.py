"""
YGOPRODECK card info normalizer.

Turns the cardinfo.php document into Card records keyed by id and, in the
same pass, records which cards each set contains.

API docs: https://ygoprodeck.com/api-guide/
"""

from pydantic import BaseModel, Field, ValidationError

from draftdestiny.models.card import Card, CardinfoMap, CardSetMap
from draftdestiny.models.failure import PayloadDecodeError


class YGOPDCardSet(BaseModel):
    """One printing of a card, as listed upstream."""

    set_name: str
    set_code: str
    set_rarity: str


class YGOPDCard(BaseModel):
    """One card record from the API. Unknown fields are ignored."""

    id: int
    name: str
    type: str
    desc: str
    race: str
    atk: int | None = None
    def_: int | None = Field(default=None, alias="def")
    level: int | None = None
    attribute: str | None = None
    archetype: str | None = None
    scale: int | None = None
    linkval: int | None = None
    card_sets: list[YGOPDCardSet] | None = None


class YGOPDData(BaseModel):
    data: list[YGOPDCard]


def parse(cardinfo: str, card_set_map: CardSetMap) -> CardinfoMap:
    """
    Normalize a cardinfo payload.

    Args:
        cardinfo: Raw JSON text of the cardinfo.php response
        card_set_map: Set name -> card ids, extended in place. A card id is
            appended to a set at most once, in the order cards are first seen.

    Returns:
        Dict mapping card ids to Card records

    Raises:
        PayloadDecodeError: If the payload does not match the upstream schema
    """
    try:
        document = YGOPDData.model_validate_json(cardinfo)
    except ValidationError as e:
        raise PayloadDecodeError("cardinfo", str(e)) from e

    cards: CardinfoMap = {}

    for raw in document.data:
        cards[raw.id] = Card(
            id=raw.id,
            name=raw.name,
            card_type=raw.type,
            description=raw.desc,
            race=raw.race,
            atk=raw.atk,
            def_=raw.def_,
            level=raw.level,
            attribute=raw.attribute,
            archetype=raw.archetype,
            pend_scale=raw.scale,
            link_rating=raw.linkval,
        )

        for card_set in raw.card_sets or ():
            ids = card_set_map.setdefault(card_set.set_name, [])
            # Same set listed twice on one card (different rarities)
            if raw.id not in ids:
                ids.append(raw.id)

    return cards
