from pathlib import Path

from pydantic_settings import BaseSettings

DATA_DIR = Path.home() / ".pomoplus"


class Settings(BaseSettings):
    DATABASE_URL: str = f"sqlite+aiosqlite:///{DATA_DIR / 'pomoplus.db'}"

    # Timer defaults, overridden by persisted configuration
    DEFAULT_WORK_SECONDS: int = 25 * 60
    DEFAULT_BREAK_SECONDS: int = 5 * 60
    MIN_DURATION_MINUTES: int = 1
    MAX_WORK_MINUTES: int = 120
    MAX_BREAK_MINUTES: int = 60
    DEFAULT_TAGS: list[str] = ["Work", "Study"]

    TICK_INTERVAL_SECONDS: float = 1.0
    WRITE_RETRY_DELAYS: list[float] = [1.0, 2.0, 4.0]

    # Statistics
    TIMEZONE: str = ""  # empty = local time of the process
    WEEKLY_DAYS: int = 7
    MONTHLY_MONTHS: int = 6
    HEATMAP_MONTHS: int = 6

    # Observability
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: str = ""

    ENVIRONMENT: str = "development"

    model_config = {"env_file": ".env", "env_prefix": "POMOPLUS_", "extra": "ignore"}


settings = Settings()
