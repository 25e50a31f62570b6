"""
YGOPRODECK card set cross-referencer.

Parses cardsets.php and annotates every set with the card ids the cardinfo
pass found for it.
"""

from pydantic import BaseModel, TypeAdapter, ValidationError

from draftdestiny.models.card import CardSet, CardsetsMap, CardSetMap
from draftdestiny.models.failure import PayloadDecodeError


class YGOPDSet(BaseModel):
    """One set record from the API."""

    set_name: str
    set_code: str
    num_of_cards: int
    tcg_date: str | None = None


_SETS_ADAPTER = TypeAdapter(list[YGOPDSet])


def parse(cardsets: str, card_set_map: CardSetMap) -> CardsetsMap:
    """
    Normalize a cardsets payload.

    Args:
        cardsets: Raw JSON text of the cardsets.php response
        card_set_map: Set name -> card ids, as built by cardinfo.parse

    Returns:
        Dict mapping set names to CardSet records. Sets without an index
        entry get an empty card_ids list.

    Raises:
        PayloadDecodeError: If the payload does not match the upstream schema
    """
    try:
        raw_sets = _SETS_ADAPTER.validate_json(cardsets)
    except ValidationError as e:
        raise PayloadDecodeError("cardsets", str(e)) from e

    return {
        raw.set_name: CardSet(
            name=raw.set_name,
            code=raw.set_code,
            num_of_cards=raw.num_of_cards,
            tcg_date=raw.tcg_date,
            card_ids=list(card_set_map.get(raw.set_name, ())),
        )
        for raw in raw_sets
    }
