"""Configuration for the figma-mcp server via environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from .errors import InvalidFigmaTokenError


class Settings(BaseSettings):
    """Server configuration loaded from environment variables or a .env file."""

    # Figma API
    figma_access_token: str = ""
    figma_api_url: str = "https://api.figma.com/v1"
    # Per-call timeout (seconds) for upstream requests.
    request_timeout: float = 30.0

    # Server
    # When PORT is set the server speaks HTTP + SSE instead of stdio.
    port: int | None = None
    host: str = "localhost"
    sse_path: str = "/events"
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "extra": "ignore",
    }

    def require_token(self) -> str:
        """Return the access token, raising if it was not configured."""
        token = self.figma_access_token.strip()
        if not token:
            raise InvalidFigmaTokenError()
        return token


def token_hint(token: str) -> str:
    """Short, non-reversible prefix of *token* suitable for logs."""
    if not token:
        return "<missing>"
    return f"{token[: min(8, len(token) // 2)]}..."


settings = Settings()
