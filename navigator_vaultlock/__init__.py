"""Navigator VaultLock — vault lock lifecycle for multi-account clients.

Security Note (Threat Model):
    A biometric soft lock keeps decrypted key material resident in process
    memory while reporting the vault as locked. Only a hard lock (or a
    logout) purges keys and caches.
"""

from .version import __version__
from .conf import VaultTimeoutConfig
from .exceptions import VaultLockError
from .messaging import Broadcaster
from .models import PinLockStatus, Policy, PolicyType, TimeoutAction
from .policy import resolve_effective_timeout
from .service import VaultTimeoutService
from .session import LockSession
from .timer import VaultTimeoutTimer

__all__ = [
    "__version__",
    "Broadcaster",
    "LockSession",
    "PinLockStatus",
    "Policy",
    "PolicyType",
    "TimeoutAction",
    "VaultLockError",
    "VaultTimeoutConfig",
    "VaultTimeoutService",
    "VaultTimeoutTimer",
    "resolve_effective_timeout",
]
