# SPDX-License-Identifier: MIT
# Copyright (c) 2026 didregistry Contributors

"""Core configuration - centralized config for the didregistry package.

All environment-based configuration should flow through this module.

Usage:
    from didregistry.core.config import get_config
    config = get_config()

    owner = config.owner
    log_level = config.log_level
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CoreSettings(BaseSettings):
    """Core configuration settings for the registry.

    Settings can be configured via environment variables with the
    DIDREGISTRY_ prefix, or from a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # REGISTRY SETTINGS
    # ==========================================================================

    owner: str | None = Field(
        default=None,
        description="Principal authorized to verify claims and identities",
        validation_alias="DIDREGISTRY_OWNER",
    )
    state_file: str = Field(
        default=str(Path.home() / ".didregistry" / "state.json"),
        description="Path of the JSON state file used by the CLI",
        validation_alias="DIDREGISTRY_STATE_FILE",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="DIDREGISTRY_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
        validation_alias="DIDREGISTRY_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
        validation_alias="DIDREGISTRY_LOG_FILE",
    )

    @property
    def state_path(self) -> Path:
        """State file as an expanded path."""
        return Path(self.state_file).expanduser()


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: CoreSettings | None = None


def get_config() -> CoreSettings:
    """Get the global configuration instance.

    Returns:
        The singleton CoreSettings instance.
    """
    global _config
    if _config is None:
        _config = CoreSettings()
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
