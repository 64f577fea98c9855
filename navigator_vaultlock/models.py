"""Value types shared by the vault timeout service and its collaborators."""
from enum import Enum
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, Field


class TimeoutAction(str, Enum):
    """What happens to an account once its vault timeout elapses."""

    LOCK = "lock"
    LOG_OUT = "logOut"


class PolicyType(str, Enum):
    """Organization policy kinds consulted by the timeout service."""

    MAXIMUM_VAULT_TIMEOUT = "maximumVaultTimeout"


class Policy(BaseModel):
    """Organization-supplied policy. Read-only input."""

    type: PolicyType
    organization_id: Optional[str] = None
    enabled: bool = True
    data: dict[str, Any] = Field(default_factory=dict)


class PinLockStatus(NamedTuple):
    """Presence of the two independent PIN-unlock artifacts."""

    protected_pin: bool
    pin_protected_key: bool

    @property
    def any(self) -> bool:
        return self.protected_pin or self.pin_protected_key
