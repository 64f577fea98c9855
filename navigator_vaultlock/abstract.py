"""
Collaborator interfaces consumed by the vault timeout service.

The service never owns persisted state, key material, caches or platform
signals; hosts inject objects satisfying these protocols. Every ``user_id``
argument defaults to ``None``, meaning "the active account".
"""
from typing import Any, Optional, Protocol, runtime_checkable

from .models import Policy, PolicyType


@runtime_checkable
class StateService(Protocol):
    """Per-account persisted state accessor."""

    async def get_account_ids(self) -> list[str]:
        """Return a snapshot of every known account id."""

    async def get_active_user_id(self) -> Optional[str]: ...

    async def set_active_user_id(self, user_id: Optional[str]) -> None: ...

    async def is_authenticated(self, user_id: Optional[str] = None) -> bool: ...

    async def get_last_active_time(self, user_id: Optional[str] = None) -> Optional[int]: ...

    async def set_last_active_time(
        self, value: Optional[int], user_id: Optional[str] = None
    ) -> None: ...

    async def get_vault_timeout(self, user_id: Optional[str] = None) -> Optional[int]: ...

    async def set_vault_timeout(
        self, value: Optional[int], user_id: Optional[str] = None
    ) -> None: ...

    async def get_vault_timeout_action(self, user_id: Optional[str] = None) -> Optional[str]: ...

    async def set_vault_timeout_action(
        self, value: Optional[str], user_id: Optional[str] = None
    ) -> None: ...

    async def get_biometric_unlock(self, user_id: Optional[str] = None) -> Optional[bool]: ...

    async def get_protected_pin(self, user_id: Optional[str] = None) -> Optional[str]: ...

    async def set_protected_pin(
        self, value: Optional[str], user_id: Optional[str] = None
    ) -> None: ...

    async def get_pin_protected(self, user_id: Optional[str] = None) -> Optional[Any]: ...

    async def set_pin_protected(
        self, value: Optional[Any], user_id: Optional[str] = None
    ) -> None: ...


@runtime_checkable
class PolicyService(Protocol):
    """Organization policy accessor."""

    async def policy_applies_to_user(
        self, policy_type: PolicyType, user_id: Optional[str] = None
    ) -> bool: ...

    async def get_all(
        self, policy_type: PolicyType, user_id: Optional[str] = None
    ) -> list[Policy]: ...


@runtime_checkable
class CryptoService(Protocol):
    """Key material holder.

    ``clear_*`` calls with ``memory_only=True`` drop resident keys and leave
    persisted (protected) copies in place, so PIN or biometric unlock keeps
    working after a lock. ``memory_only=False`` purges both.
    ``all_accounts=True`` applies a clear to every account instead of
    ``user_id``.
    """

    async def has_key(self, user_id: Optional[str] = None) -> bool: ...

    async def clear_key(
        self, user_id: Optional[str] = None, all_accounts: bool = False
    ) -> None: ...

    async def clear_org_keys(
        self,
        memory_only: bool = False,
        user_id: Optional[str] = None,
        all_accounts: bool = False,
    ) -> None: ...

    async def clear_key_pair(
        self,
        memory_only: bool = False,
        user_id: Optional[str] = None,
        all_accounts: bool = False,
    ) -> None: ...

    async def clear_enc_key(
        self,
        memory_only: bool = False,
        user_id: Optional[str] = None,
        all_accounts: bool = False,
    ) -> None: ...

    async def toggle_key(self) -> None:
        """Re-evaluate whether the key is retained after a timeout change."""


@runtime_checkable
class TokenService(Protocol):
    async def toggle_tokens(self) -> None:
        """Re-evaluate whether tokens are retained after a timeout change."""


@runtime_checkable
class KeyConnectorService(Protocol):
    async def get_uses_key_connector(self, user_id: Optional[str] = None) -> bool: ...


@runtime_checkable
class FolderService(Protocol):
    def clear_cache(self) -> None: ...


@runtime_checkable
class CipherService(Protocol):
    async def clear_cache(self) -> None: ...


@runtime_checkable
class CollectionService(Protocol):
    def clear_cache(self) -> None: ...


@runtime_checkable
class SearchService(Protocol):
    def clear_index(self) -> None: ...


@runtime_checkable
class PlatformUtilsService(Protocol):
    """Signals owned by the host platform."""

    def is_view_open(self) -> bool:
        """True while a protected view is on screen; suppresses auto-lock."""

    def get_active_time(self) -> int:
        """Monotonic active-time reading, in milliseconds."""


@runtime_checkable
class MessagingService(Protocol):
    def send(self, command: str, data: Any = None) -> None: ...
