"""
Ban list normalizer for the lflist.conf format.

Layout after comment lines are stripped:

    !2024.4 TCG
    14558127 0 --Ash Blossom & Joyous Spring
    23434538 1 --Maxx "C"

A `!` line opens a new ban list; every following `<id> <limit>` line belongs
to it until the next header. Anything after the limit is free text.
"""

from draftdestiny.config import BANLIST_COMMENT_MARKER
from draftdestiny.models.card import Banlist, BanlistsMap
from draftdestiny.models.failure import PayloadDecodeError


def strip_comments(text: str) -> str:
    """Drop every line that starts with the comment marker."""
    return "".join(
        line
        for line in text.splitlines(keepends=True)
        if not line.startswith(BANLIST_COMMENT_MARKER)
    )


def parse(text: str) -> BanlistsMap:
    """
    Parse ban lists, keyed by name in document order.

    Raises:
        PayloadDecodeError: On a restriction outside any ban list or a
            restriction whose id or limit is not an integer
    """
    banlists: BanlistsMap = {}
    current: Banlist | None = None

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith("!"):
            name = line[1:].strip()
            current = banlists.setdefault(name, Banlist(name=name))
            continue

        if current is None:
            raise PayloadDecodeError("banlists", f"line {lineno}: restriction before any header")

        fields = line.split(maxsplit=2)
        if len(fields) < 2:
            raise PayloadDecodeError("banlists", f"line {lineno}: expected '<id> <limit>'")
        try:
            card_id, limit = int(fields[0]), int(fields[1])
        except ValueError as e:
            raise PayloadDecodeError("banlists", f"line {lineno}: {line!r}") from e

        current.restrictions[card_id] = limit

    return banlists
