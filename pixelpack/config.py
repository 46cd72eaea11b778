from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="PIXELPACK_")

    app_name: str = "PixelPack"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///./pixelpack.db"

    # Wallet balance for a new or reset game
    starting_gold: int = 100

    # Debounce windows for durable writes, per namespace
    config_debounce_seconds: float = 1.0
    progress_debounce_seconds: float = 0.5

    # Maximum number of instances selectable for battle
    battle_deck_limit: int = 10

    # Seed for the engine's random source (None = system entropy)
    random_seed: int | None = None


settings = Settings()


# =============================================================================
# PERSISTENCE LAYOUT
# =============================================================================

CONFIG_NAMESPACE = "config"
PROGRESS_NAMESPACE = "progress"

# Every namespace holds a single record under this key
MAIN_KEY = "main"
