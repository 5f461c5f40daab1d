# =============================================================================
# core/config.py  -  Runtime settings
# =============================================================================
#
# All configuration comes from environment variables (a .env file is loaded
# by the entry points with python-dotenv before this runs).  Explicit keyword
# overrides win over the environment, which is how a hosting platform passes
# the Hugging Face token in as server configuration.
#
#   HF_TOKEN               Hugging Face credential (generate-image only)
#   TOOLBOX_HTTP_TIMEOUT   seconds per outbound call        (default 10)
#   TOOLBOX_USER_AGENT     sent to Nominatim                (MCP-Geocode-Tool/1.0)
#   TOOLBOX_LOG_LEVEL      logging level                    (INFO)
#   MCP_TRANSPORT          "stdio" or "http"                (stdio)
#   MCP_HOST / MCP_PORT    bind address for "http"          (127.0.0.1 / 8000)
# =============================================================================

import os
from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_USER_AGENT = "MCP-Geocode-Tool/1.0"
TRANSPORTS = ("stdio", "http")


@dataclass(frozen=True)
class Settings:
    """Immutable server configuration."""

    hf_token: Optional[str] = None
    http_timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def image_generation_enabled(self) -> bool:
        return bool(self.hf_token)

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Build settings from the environment, then apply explicit overrides.

        Overrides whose value is None are ignored, so
        ``Settings.from_env(hf_token=config.get("hfToken"))`` falls back to
        ``HF_TOKEN`` when the caller supplied nothing.

        Raises:
            ValueError: A numeric variable cannot be parsed, or the transport
                is not one of TRANSPORTS.
        """
        env = os.environ
        settings = cls(
            hf_token=env.get("HF_TOKEN") or None,
            http_timeout=_parse_float("TOOLBOX_HTTP_TIMEOUT", env.get("TOOLBOX_HTTP_TIMEOUT"), 10.0),
            user_agent=env.get("TOOLBOX_USER_AGENT", DEFAULT_USER_AGENT),
            log_level=env.get("TOOLBOX_LOG_LEVEL", "INFO").upper(),
            transport=env.get("MCP_TRANSPORT", "stdio").lower(),
            host=env.get("MCP_HOST", "127.0.0.1"),
            port=_parse_int("MCP_PORT", env.get("MCP_PORT"), 8000),
        )
        settings = replace(settings, **{k: v for k, v in overrides.items() if v is not None})

        if settings.transport not in TRANSPORTS:
            raise ValueError(
                f"MCP_TRANSPORT must be one of {TRANSPORTS}, got {settings.transport!r}"
            )
        if settings.http_timeout <= 0:
            raise ValueError("TOOLBOX_HTTP_TIMEOUT must be positive")
        return settings


def _parse_float(name: str, raw: Optional[str], default: float) -> float:
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _parse_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
