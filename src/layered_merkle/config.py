"""
Runtime Configuration

Settings are read from environment variables, with a .env file in the
working directory loaded first when present.

Variables:
- MERKLE_HASHER: combine function name used by the CLI and API (sha256)
- MERKLE_API_HOST / MERKLE_API_PORT: REST API bind address (127.0.0.1:8000)
- MERKLE_API_URL: base URL used by the HTTP client
- MERKLE_LOG_LEVEL: logging level name (INFO)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_HASHER = "sha256"
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8000
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration values."""
    hasher: str = DEFAULT_HASHER
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT
    api_url: str = f"http://{DEFAULT_API_HOST}:{DEFAULT_API_PORT}"
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ValueError: If MERKLE_API_PORT is not a valid port number
        """
        env = os.environ if environ is None else environ

        host = env.get("MERKLE_API_HOST", DEFAULT_API_HOST)
        raw_port = env.get("MERKLE_API_PORT", str(DEFAULT_API_PORT))
        try:
            port = int(raw_port)
        except ValueError:
            raise ValueError(f"MERKLE_API_PORT must be an integer, got {raw_port!r}") from None
        if not 0 < port < 65536:
            raise ValueError(f"MERKLE_API_PORT out of range: {port}")

        return cls(
            hasher=env.get("MERKLE_HASHER", DEFAULT_HASHER),
            api_host=host,
            api_port=port,
            api_url=env.get("MERKLE_API_URL", f"http://{host}:{port}"),
            log_level=get_log_level(env),
        )


def get_log_level(environ: Optional[Mapping[str, str]] = None) -> str:
    """Logging level name from MERKLE_LOG_LEVEL, without parsing any other setting."""
    env = os.environ if environ is None else environ
    return env.get("MERKLE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def get_settings() -> Settings:
    return Settings.from_env()
