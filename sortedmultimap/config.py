"""Runtime configuration — env-driven.

Centralized settings using pydantic-settings. Reads from a .env file and
SORTEDMULTIMAP_* environment variables.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class MultimapSettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export SORTEDMULTIMAP_LOG_LEVEL=DEBUG
        export SORTEDMULTIMAP_VERIFY_PAYLOAD_HASH=false

    Or via .env file::

        SORTEDMULTIMAP_DEFAULT_VALUE_COMPARATOR=casefold
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SORTEDMULTIMAP_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Codec
    verify_payload_hash: bool = True

    # Registry names used by the CLI when building a multimap
    default_key_comparator: str = "natural"
    default_value_comparator: str = "natural"

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


# Module-level singleton — import as `from sortedmultimap.config import settings`
settings = MultimapSettings()
