"""
VaultLock Configuration — validated settings for the timeout machinery.

Reads settings from environment variables:
    VAULT_TIMEOUT_CHECK_INTERVAL = <seconds between periodic checks>
    VAULT_TIMEOUT_USER_KEY = <request key holding the authenticated user id>
    VAULT_TIMEOUT_RECORD_ACTIVITY = <true|false>
"""
import os
import logging

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger("navigator.vaultlock")

_TRUE_VALUES = ("1", "true", "yes", "on")


class VaultTimeoutConfig(BaseModel):
    """Validated vault timeout configuration."""

    check_interval: float = Field(default=10.0, gt=0)
    user_key: str = Field(default="user_id")
    record_activity: bool = Field(default=True)

    @field_validator("user_key")
    @classmethod
    def validate_user_key(cls, v: str) -> str:
        """Reject an empty request key."""
        if not v:
            raise ValueError("user_key cannot be empty")
        return v

    @classmethod
    def from_env(cls) -> "VaultTimeoutConfig":
        """Create VaultTimeoutConfig by loading values from environment.

        Returns:
            Populated VaultTimeoutConfig instance.
        """
        values: dict = {}
        interval = os.environ.get("VAULT_TIMEOUT_CHECK_INTERVAL")
        if interval is not None:
            values["check_interval"] = interval
        user_key = os.environ.get("VAULT_TIMEOUT_USER_KEY")
        if user_key is not None:
            values["user_key"] = user_key
        record = os.environ.get("VAULT_TIMEOUT_RECORD_ACTIVITY")
        if record is not None:
            values["record_activity"] = record.strip().lower() in _TRUE_VALUES
        config = cls(**values)
        logger.debug(
            "Vault timeout config: interval=%ss user_key=%s record_activity=%s",
            config.check_interval, config.user_key, config.record_activity,
        )
        return config
