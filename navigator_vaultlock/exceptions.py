"""VaultLock exceptions."""
from typing import Optional


class VaultLockError(RuntimeError):
    """A lock transition could not clear all key material.

    The account must not be reported as safely locked when this is raised.
    """

    def __init__(self, message: str, user_id: Optional[str] = None):
        super().__init__(message)
        self.user_id = user_id
