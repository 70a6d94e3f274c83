# === NAVMAP v1 ===
# {
#   "module": "SubmissionFlow.settings",
#   "purpose": "Environment-driven settings for the triplestore client and file storage",
#   "sections": [
#     {"id": "storesettings", "name": "StoreSettings", "anchor": "class-storesettings", "kind": "class"},
#     {"id": "get-settings", "name": "get_settings", "anchor": "function-get-settings", "kind": "function"},
#     {"id": "reset-settings-cache", "name": "reset_settings_cache", "anchor": "function-reset-settings-cache", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Environment-driven settings for the triplestore client.

Values are read once from ``SUBMISSION_FLOW_*`` environment variables (the
endpoint also honours the conventional ``MU_SPARQL_ENDPOINT``) and frozen.
Use :func:`get_settings` for the process-wide instance and
:func:`reset_settings_cache` in tests after patching the environment.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

__all__ = ["StoreSettings", "get_settings", "reset_settings_cache"]

logger = logging.getLogger(__name__)

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class StoreSettings(BaseSettings):
    """Connection and storage settings shared by all entity managers."""

    sparql_endpoint: str = Field(
        default="http://database:8890/sparql",
        validation_alias=AliasChoices(
            "SUBMISSION_FLOW_SPARQL_ENDPOINT", "MU_SPARQL_ENDPOINT"
        ),
        description="SPARQL endpoint used for queries",
    )
    update_endpoint: Optional[str] = Field(
        default=None, description="SPARQL endpoint used for updates (defaults to sparql_endpoint)"
    )
    sudo: bool = Field(default=True, description="Send the mu-auth-sudo header on every call")
    timeout_seconds: Optional[float] = Field(
        default=None, gt=0, description="Per-request timeout; None waits indefinitely"
    )
    username: Optional[str] = Field(default=None, description="Basic auth user for the store")
    password: Optional[SecretStr] = Field(default=None, description="Basic auth password")
    share_directory: str = Field(
        default="/share/", description="Mount point where physical file contents live"
    )
    share_scheme: str = Field(
        default="share://", description="URI scheme replacing share_directory in file IRIs"
    )
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Optional[Path] = Field(default=None, description="Directory for JSONL log files")

    model_config = SettingsConfigDict(
        env_prefix="SUBMISSION_FLOW_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    @field_validator("sparql_endpoint", "update_endpoint")
    @classmethod
    def validate_endpoint(cls, v: Optional[str]) -> Optional[str]:
        """Require an absolute http(s) endpoint."""
        if v is None:
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"SPARQL endpoint must be an http(s) URL, got '{v}'")
        return v

    @field_validator("share_directory")
    @classmethod
    def validate_share_directory(cls, v: str) -> str:
        if not v.endswith("/"):
            raise ValueError("share_directory must end with '/'")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = str(v).upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_VALID_LOG_LEVELS)}")
        return upper

    @property
    def effective_update_endpoint(self) -> str:
        return self.update_endpoint or self.sparql_endpoint


@lru_cache(maxsize=1)
def get_settings() -> StoreSettings:
    """Return the process-wide settings, loading them from the environment once.

    Raises:
        ConfigurationError: If the environment holds invalid values.
    """
    try:
        settings = StoreSettings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid submission flow settings: {exc}") from exc
    logger.debug(
        "Settings loaded",
        extra={"stage": "config", "sparql_endpoint": settings.sparql_endpoint},
    )
    return settings


def reset_settings_cache() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
