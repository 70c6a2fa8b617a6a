from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # -------------------------------------------------------------------------
    # OPENDOTA API
    # -------------------------------------------------------------------------
    OPENDOTA_BASE_URL: str = "https://api.opendota.com/api"
    OPENDOTA_API_KEY: str | None = None
    HTTP_TIMEOUT_SECONDS: float = 15.0
    USER_AGENT: str = "Dota2Leaderboard/1.0"

    # -------------------------------------------------------------------------
    # DATABASE
    # -------------------------------------------------------------------------
    DATABASE_URL: str = "sqlite:///data/player_cache.db"
    STORE_STEAM_ID: bool = True  # keep the denormalized steam_id column populated

    # -------------------------------------------------------------------------
    # REDIS (celery broker + result backend)
    # -------------------------------------------------------------------------
    REDIS_URL: str = "redis://localhost:6379/0"

    # -------------------------------------------------------------------------
    # PUSH SYNC
    # -------------------------------------------------------------------------
    SYNC_API_KEY: str = "dev-key"

    # -------------------------------------------------------------------------
    # CRAWLER
    # -------------------------------------------------------------------------
    CRAWL_DELAY_MS: int = 500          # pause between roster entries
    FETCH_CONCURRENCY: int = 3         # concurrent upstream requests per entry
    RECENT_MATCHES_LIMIT: int = 5
    CRAWL_INTERVAL_MINUTES: int = 60
    ROSTER_PATH: str = "data/roster.json"
    SEED_PATH: str = "data/seed_players.json"

    # -------------------------------------------------------------------------
    # HEALTH
    # -------------------------------------------------------------------------
    STALE_THRESHOLD_MINUTES: int = 120

    # -------------------------------------------------------------------------
    # LOGGING
    # -------------------------------------------------------------------------
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


# Single instance imported across the entire project
settings = Settings()
