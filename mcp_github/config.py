"""Configuration for the MCP GitHub server."""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Load .env from project root (one level above mcp_github/)
# ---------------------------------------------------------------------------
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

if _ENV_FILE.exists():
    load_dotenv(_ENV_FILE, override=False)


class Settings(BaseSettings):
    """Settings for the MCP GitHub server."""

    github_api_base: str = Field(default="https://api.github.com")
    github_api_version: str = Field(default="2022-11-28")
    user_agent: str = Field(default="mcp-github/1.0.0")
    request_timeout: float = Field(default=30.0)

    per_page: int = Field(default=100, ge=1, le=100)
    max_pages: Optional[int] = Field(default=None, ge=1)

    batch_size: int = Field(default=10, ge=1)
    batch_delay_ms: int = Field(default=100, ge=0)
    batch_backoff: Literal["fixed", "exponential"] = Field(default="fixed")

    credential_source: Literal["gh-cli", "env"] = Field(default="gh-cli")
    gh_path: str = Field(default="gh")
    gh_hostname: str = Field(default="github.com")
    github_token: str = Field(default="")

    mcp_server_host: str = Field(default="127.0.0.1")
    mcp_server_port: int = Field(default=3003)
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()


settings = get_settings()
