from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "ComicVault"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite+aiosqlite:///./comicvault.db"

    # Comic Vine (provider A)
    comic_vine_api_key: str = ""
    comic_vine_base_url: str = "https://comicvine.gamespot.com/api"
    # When True, each issue's own cover is fetched with a detail request
    comic_vine_fetch_issue_covers: bool = True

    # Metron (provider B)
    metron_base_url: str = "https://metron.cloud/api"
    metron_origin: str = "https://metron.cloud"
    metron_username: str = ""
    metron_password: str = ""

    guia_base_url: str = "http://www.guiadosquadrinhos.com"

    catalog_page_size: int = 20
    http_timeout: float = 15.0
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

    cover_storage_dir: str = "./covers"
    cover_public_base_url: str = "/covers"

    default_publisher: str = "Desconhecido"


settings = Settings()


# =============================================================================
# COLLECTION LIMITS
# =============================================================================

# Condition rating bounds (inclusive)
MIN_CONDITION_RATING = 1
MAX_CONDITION_RATING = 5

# Placeholder colors for issues without cover art
COVER_COLORS = (
    "bg-red-500",
    "bg-blue-500",
    "bg-green-500",
    "bg-yellow-500",
    "bg-purple-500",
    "bg-pink-500",
    "bg-orange-500",
    "bg-teal-500",
)
