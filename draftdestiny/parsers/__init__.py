from draftdestiny.parsers import banlists, cardinfo, cardsets, vercheck

__all__ = [
    "banlists",
    "cardinfo",
    "cardsets",
    "vercheck",
]
