"""
DraftDestiny services.

Catalog synchronization and the shared reference cache.
"""

from draftdestiny.services.reference_cache import (
    ReferenceCache,
    get_reference_cache,
    reset_reference_cache,
)
from draftdestiny.services.synchronizer import Responses, Synchronizer, UpdateStatus

__all__ = [
    "ReferenceCache",
    "Responses",
    "Synchronizer",
    "UpdateStatus",
    "get_reference_cache",
    "reset_reference_cache",
]
