from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "DraftDestiny"
    debug: bool = False

    # Root for everything persisted locally. Resolving a per-OS location is
    # left to the front end, which can override this via DATA_DIR.
    data_dir: Path = Path(__file__).parent.parent / "data"

    cardinfo_url: str = "https://db.ygoprodeck.com/api/v7/cardinfo.php"
    cardsets_url: str = "https://db.ygoprodeck.com/api/v7/cardsets.php"
    banlists_url: str = (
        "https://raw.githubusercontent.com/ProjectIgnis/LFLists/master/TCG.lflist.conf"
    )
    vercheck_url: str = "https://db.ygoprodeck.com/api/v7/checkDBVer.php"

    user_agent: str = "DraftDestiny/1.0"

    @property
    def external_dir(self) -> Path:
        """Directory holding the mirrored catalog slots."""
        return self.data_dir / "external"

    @property
    def collections_dir(self) -> Path:
        """Directory holding one file per saved collection."""
        return self.data_dir / "user" / "collections"


settings = Settings()


# =============================================================================
# WIRE FORMAT
# =============================================================================

# Format of MetaData.last_changed, always UTC
LAST_CHANGED_FORMAT = "%Y-%m-%d %H:%M:%S"

# Lines starting with this marker are dropped from ban-list text before parsing
BANLIST_COMMENT_MARKER = "#"
