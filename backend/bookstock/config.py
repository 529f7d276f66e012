from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Database (sqlite+aiosqlite by default, postgresql+asyncpg for hosted Postgres)
    database_url: str = "sqlite+aiosqlite:///./bookstock.db"
    echo_sql: bool = False

    # Dashboard
    low_stock_threshold: int = 50
    activity_feed_limit: int = 10
    chart_category_limit: int = 10
    activity_time_offset_hours: float = 0.0  # applied to stored timestamps before "time ago"

    # Dashboard client / poller
    api_base_url: str = "http://localhost:8000"
    poll_interval_seconds: float = 60.0
    request_timeout_seconds: float = 10.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
