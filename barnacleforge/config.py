from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process settings loaded from environment (prefix BARNACLEFORGE_)."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="BARNACLEFORGE_")

    debug: bool = False

    # Game tables (rarity ranges, modifiers) live here, not in the environment
    config_path: Path = Path("config.json")

    # Root under which deck folders and standalone .card files are written
    output_dir: Path = Path(".")

    template_name: str = "Deck_Template.json"

    # Template replay cannot re-prompt, so a failing slot is retried this many
    # times (new power rolls) before it is skipped
    replay_attempts: int = Field(default=8, ge=1)

    # Seed for power rolls; None draws from system entropy
    seed: int | None = None


settings = Settings()


# =============================================================================
# GAME CONSTANTS
# =============================================================================

# Priority starts here and is only ever reduced
MAX_PRIORITY = 11

# Column width for prompt menus
PADDING = 36

CARD_EXTENSION = ".card"
DECK_EXTENSION = ".deck"
