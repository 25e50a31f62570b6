"""YGOPRODECK database version check (checkDBVer.php)."""

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from draftdestiny.models.failure import PayloadDecodeError


class YGOPDVersion(BaseModel):
    # The version has been served both as a string and as a number
    model_config = ConfigDict(coerce_numbers_to_str=True)

    database_version: str
    last_update: str | None = None


_VERSION_ADAPTER = TypeAdapter(list[YGOPDVersion])


def parse(text: str) -> str:
    """
    Extract the database version token.

    Raises:
        PayloadDecodeError: If the payload is malformed or empty
    """
    try:
        entries = _VERSION_ADAPTER.validate_json(text)
    except ValidationError as e:
        raise PayloadDecodeError("version", str(e)) from e

    if not entries:
        raise PayloadDecodeError("version", "empty version list")
    return entries[0].database_version


def new_update_version_available(remote: str, local: str | None) -> str | None:
    """Return the remote token if it differs from the stored one, else None."""
    return remote if remote != local else None
