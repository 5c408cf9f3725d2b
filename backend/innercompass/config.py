"""Application configuration using pydantic-settings."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_project_root() -> Path:
    """
    Find the project root directory.
    Works whether running from backend/ or project root.
    """
    cwd = Path.cwd()
    if cwd.name == "backend" and (cwd.parent / "pyproject.toml").exists():
        return cwd.parent
    return cwd


def resolve_database_path(db_url: str, project_root: Path) -> str:
    """
    Resolve the database URL to use an absolute path.
    Handles relative paths correctly regardless of working directory.
    """
    if db_url.startswith("sqlite") and ":memory:" not in db_url:
        # Format: sqlite+aiosqlite:///path or sqlite:///path
        prefix_end = db_url.find(":///") + 4
        prefix = db_url[:prefix_end]
        path = db_url[prefix_end:]

        if not path.startswith("/"):
            clean_path = path.removeprefix("./")
            absolute_path = project_root / clean_path
            return f"{prefix}{absolute_path}"

    return db_url


_project_root = get_project_root()

_env_file = _project_root / ".env"
if not _env_file.exists():
    _env_file = Path(".env")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_env_file),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Language model service
    # "openai" talks to any OpenAI-compatible endpoint (Moonshot by default)
    llm_provider: Literal["openai", "anthropic"] = "openai"
    llm_api_key: str = ""
    llm_base_url: str = "https://api.moonshot.cn/v1"
    anthropic_api_key: str = ""
    model_coach: str = "moonshot-v1-8k"
    coach_temperature: float = 0.7
    coach_timeout_seconds: float = 30.0
    coach_max_tokens: int = 2000

    # Database - stored at project root ./data/
    database_url: str = f"sqlite+aiosqlite:///{_project_root}/data/innercompass.db"

    # Auth
    auth_secret_key: str = "change-me-in-production"
    auth_algorithm: str = "HS256"
    auth_token_ttl_minutes: int = 60 * 24 * 7
    min_password_length: int = 6

    # Conversation limits
    max_user_message_chars: int = 4000

    # Holistic report is regenerated on every view unless this is on
    report_cache_enabled: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    def __init__(self, **data):
        super().__init__(**data)
        resolved_db = resolve_database_path(self.database_url, _project_root)
        object.__setattr__(self, "database_url", resolved_db)


settings = Settings()
