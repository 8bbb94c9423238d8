from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    # Application
    app_name: str = "Fugazzi"
    debug: bool = False
    api_version: str = "v1"
    log_level: str = "INFO"

    # Database (single balance key)
    database_url: str = "sqlite+aiosqlite:///./fugazzi.db"
    balance_key: str = "gameBalance"
    max_sessions: int = 1000

    # Round economy
    starting_balance: int = 200
    round_size: int = 7
    random_seed: Optional[int] = None  # None = free-running randomness

    # Live transaction feed
    feed_enabled: bool = True
    feed_seed_count: int = 10
    feed_max_records: int = 20
    feed_min_interval_ms: int = 4000
    feed_max_interval_ms: int = 7000
    feed_extra_delay_chance: float = 0.2
    feed_extra_min_ms: int = 2000
    feed_extra_max_ms: int = 4000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
