"""Bank Client API — configuration loaded from environment."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, loaded from .env or environment variables."""

    # ── Database ──────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./bank_clients.db"
    seed_demo_data: bool = True

    # ── CORS ──────────────────────────────────────────────
    cors_origins: list[str] = ["http://localhost:4200"]

    # ── App ───────────────────────────────────────────────
    app_name: str = "Bank Client API"
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton settings instance
settings = Settings()
