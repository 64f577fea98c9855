"""
VaultTimeoutService — decide when vaults lock, and perform the transition.

Provides the public API for the vault lock lifecycle:
- ``check_vault_timeout()`` — evaluate every known account and act on it
- ``should_lock(user_id)`` — timeout evaluation for a single account
- ``lock(allow_soft_lock, user_initiated, user_id)`` — soft or hard lock
- ``log_out(user_id)`` — delegate session termination to the host
- ``is_locked(user_id)`` — key absence, or an active biometric soft lock
- ``get_vault_timeout(user_id)`` — configured timeout clamped by policy

Security Note:
    Never log key material, PINs or protected keys. Only log user ids,
    actions and timeout values.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Optional, Union

from .abstract import (
    CipherService,
    CollectionService,
    CryptoService,
    FolderService,
    KeyConnectorService,
    MessagingService,
    PlatformUtilsService,
    PolicyService,
    SearchService,
    StateService,
    TokenService,
)
from .exceptions import VaultLockError
from .models import PinLockStatus, PolicyType, TimeoutAction
from .policy import MINUTES_KEY, get_policy_int, resolve_effective_timeout
from .session import LockSession

logger = logging.getLogger("navigator.vaultlock")

LockedCallback = Callable[[bool], None]
LoggedOutCallback = Callable[[bool, Optional[str]], Awaitable[None]]

_MS_PER_MINUTE = 60000


class VaultTimeoutService:
    """Lock/logout controller for every account known to the state service.

    Collaborators are injected; ``locked_callback`` and
    ``logged_out_callback`` are optional host reactions, fired only when set.
    """

    def __init__(
        self,
        crypto_service: CryptoService,
        state_service: StateService,
        platform_utils_service: PlatformUtilsService,
        folder_service: FolderService,
        cipher_service: CipherService,
        collection_service: CollectionService,
        search_service: SearchService,
        messaging_service: MessagingService,
        token_service: TokenService,
        policy_service: PolicyService,
        key_connector_service: KeyConnectorService,
        locked_callback: Optional[LockedCallback] = None,
        logged_out_callback: Optional[LoggedOutCallback] = None,
        session: Optional[LockSession] = None,
    ):
        self._crypto = crypto_service
        self._state = state_service
        self._platform = platform_utils_service
        self._folders = folder_service
        self._ciphers = cipher_service
        self._collections = collection_service
        self._search = search_service
        self._messaging = messaging_service
        self._tokens = token_service
        self._policies = policy_service
        self._key_connector = key_connector_service
        self._locked_callback = locked_callback
        self._logged_out_callback = logged_out_callback
        self._session = session or LockSession()

    @property
    def session(self) -> LockSession:
        return self._session

    def on_locked(self, callback: Optional[LockedCallback]) -> None:
        """Register (or remove, with None) the locked callback."""
        self._locked_callback = callback

    def on_logged_out(self, callback: Optional[LoggedOutCallback]) -> None:
        """Register (or remove, with None) the logged-out callback."""
        self._logged_out_callback = callback

    # ------------------------------------------------------------------
    # Lock-state query
    # ------------------------------------------------------------------

    async def is_locked(self, user_id: Optional[str] = None) -> bool:
        """True if no key is resident, or a biometric soft lock is active."""
        has_key = await self._crypto.has_key(user_id)
        if has_key:
            account_id = await self._account_id(user_id)
            if (
                account_id is not None
                and self._session.is_biometric_locked(account_id)
                and await self.is_biometric_lock_set(user_id)
            ):
                return True
        return not has_key

    async def is_pin_lock_set(self, user_id: Optional[str] = None) -> PinLockStatus:
        protected_pin = await self._state.get_protected_pin(user_id)
        pin_protected_key = await self._state.get_pin_protected(user_id)
        return PinLockStatus(protected_pin is not None, pin_protected_key is not None)

    async def is_biometric_lock_set(self, user_id: Optional[str] = None) -> bool:
        biometric_lock = await self._state.get_biometric_unlock(user_id)
        return bool(biometric_lock)

    # ------------------------------------------------------------------
    # Effective timeout
    # ------------------------------------------------------------------

    async def get_vault_timeout(self, user_id: Optional[str] = None) -> Optional[int]:
        """Return the configured timeout clamped by the max-timeout policy.

        The clamped value is written back to state when it differs, since
        other collaborators read the persisted value directly. Policy
        applicability is re-evaluated on every call.
        """
        vault_timeout = await self._state.get_vault_timeout(user_id)
        policy_type = PolicyType.MAXIMUM_VAULT_TIMEOUT
        if not await self._policies.policy_applies_to_user(policy_type, user_id):
            return vault_timeout

        policies = await self._policies.get_all(policy_type, user_id)
        if not policies:
            return vault_timeout
        policy_timeout = get_policy_int(policies[0], MINUTES_KEY)
        if policy_timeout is None:
            return vault_timeout

        timeout = resolve_effective_timeout(vault_timeout, policy_timeout)
        if timeout != vault_timeout:
            logger.debug(
                "Vault timeout for user=%s clamped by policy: %s -> %s",
                user_id, vault_timeout, timeout,
            )
            await self._state.set_vault_timeout(timeout, user_id)
        return timeout

    # ------------------------------------------------------------------
    # Timeout evaluation
    # ------------------------------------------------------------------

    async def check_vault_timeout(self) -> None:
        """Lock or log out every account whose timeout has elapsed.

        No-op while the platform reports a protected view as open. A
        failing account does not stop the pass; the first failure is raised
        once every account has been evaluated.
        """
        if self._platform.is_view_open():
            logger.debug("Protected view open, skipping vault timeout check")
            return

        errors: list[Exception] = []
        for user_id in list(await self._state.get_account_ids()):
            if user_id is None:
                continue
            try:
                if await self.should_lock(user_id):
                    await self._execute_timeout_action(user_id)
            except Exception as err:
                logger.error("Vault timeout action failed for user=%s: %s", user_id, err)
                errors.append(err)
        if errors:
            raise errors[0]

    async def should_lock(self, user_id: str) -> bool:
        if not await self._state.is_authenticated(user_id):
            return False
        if await self.is_locked(user_id):
            return False
        timeout_minutes = await self.get_vault_timeout(user_id)
        if timeout_minutes is None or timeout_minutes < 0:
            return False
        last_active = await self._state.get_last_active_time(user_id)
        if last_active is None:
            return False
        elapsed_ms = self._platform.get_active_time() - last_active
        return elapsed_ms >= timeout_minutes * _MS_PER_MINUTE

    async def _execute_timeout_action(self, user_id: str) -> None:
        action = await self._state.get_vault_timeout_action(user_id)
        logger.info("Vault timeout elapsed for user=%s, action=%s", user_id, action)
        if action == TimeoutAction.LOG_OUT:
            await self.log_out(user_id)
        else:
            await self.lock(allow_soft_lock=False, user_initiated=False, user_id=user_id)

    # ------------------------------------------------------------------
    # Lock / logout
    # ------------------------------------------------------------------

    async def _account_id(self, user_id: Optional[str]) -> Optional[str]:
        """Resolve ``None`` to the active account id (None if there is none)."""
        if user_id is not None:
            return user_id
        return await self._state.get_active_user_id()

    async def lock(
        self,
        allow_soft_lock: bool = False,
        user_initiated: bool = False,
        user_id: Optional[str] = None,
        all_accounts: bool = False,
    ) -> None:
        """Lock an account (the active one when ``user_id`` is None).

        With ``all_accounts`` the key material of every account is cleared
        and no soft lock is applied; ``user_id`` still selects the account
        whose authentication and key-connector rules gate the lock.

        Raises:
            VaultLockError: If any key could not be cleared. Caches are left
                untouched and no ``locked`` event is emitted in that case.
        """
        account_id = await self._account_id(user_id)
        if account_id is None:
            logger.debug("No active account, nothing to lock")
            return
        async with self._session.account_lock(account_id):
            await self._lock(allow_soft_lock, user_initiated, user_id, account_id, all_accounts)

    async def _lock(
        self,
        allow_soft_lock: bool,
        user_initiated: bool,
        user_id: Optional[str],
        account_id: str,
        all_accounts: bool,
    ) -> None:
        if not await self._state.is_authenticated(user_id):
            return

        if await self._key_connector.get_uses_key_connector(user_id):
            pin_set = await self.is_pin_lock_set(user_id)
            if not pin_set.any and not await self.is_biometric_lock_set(user_id):
                # nothing can unlock a key-connector vault locally
                logger.info(
                    "Key connector user=%s has no PIN or biometric unlock, logging out",
                    user_id,
                )
                await self._log_out(user_id)
                return

        if allow_soft_lock and not all_accounts and await self.is_biometric_lock_set(user_id):
            self._session.set_biometric_locked(account_id, True)
            logger.info("Vault soft-locked (biometric) for user=%s", user_id)
            self._notify_locked(user_initiated)
            return

        is_active = all_accounts or account_id == await self._state.get_active_user_id()
        if is_active:
            self._search.clear_index()

        results = await asyncio.gather(
            self._crypto.clear_key(user_id=user_id, all_accounts=all_accounts),
            self._crypto.clear_org_keys(True, user_id=user_id, all_accounts=all_accounts),
            self._crypto.clear_key_pair(True, user_id=user_id, all_accounts=all_accounts),
            self._crypto.clear_enc_key(True, user_id=user_id, all_accounts=all_accounts),
            return_exceptions=True,
        )
        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            logger.error(
                "Failed to clear key material for user=%s (%d of %d clears failed)",
                user_id, len(errors), len(results),
            )
            raise VaultLockError(
                f"Unable to clear key material: {errors[0]}", user_id=account_id,
            ) from errors[0]

        self._folders.clear_cache()
        await self._ciphers.clear_cache()
        self._collections.clear_cache()
        self._search.clear_index()
        if all_accounts:
            self._session.clear_biometric_locked()
        else:
            self._session.set_biometric_locked(account_id, False)
        logger.info(
            "Vault locked for user=%s (user_initiated=%s, all_accounts=%s)",
            account_id, user_initiated, all_accounts,
        )
        self._notify_locked(user_initiated)

    def _notify_locked(self, user_initiated: bool) -> None:
        self._messaging.send("locked", user_initiated)
        if self._locked_callback is not None:
            self._locked_callback(user_initiated)

    async def log_out(self, user_id: Optional[str] = None) -> None:
        """Hand session termination to the registered logout callback."""
        account_id = await self._account_id(user_id)
        if account_id is None:
            logger.debug("No active account, nothing to log out")
            return
        async with self._session.account_lock(account_id):
            await self._log_out(user_id)

    async def _log_out(self, user_id: Optional[str]) -> None:
        if self._logged_out_callback is None:
            return
        logger.info("Logging out user=%s", user_id)
        await self._logged_out_callback(False, user_id)

    # ------------------------------------------------------------------
    # Configuration & PIN material
    # ------------------------------------------------------------------

    async def set_vault_timeout_options(
        self,
        timeout: Optional[int],
        action: Union[TimeoutAction, str],
    ) -> None:
        """Persist timeout and action for the active account.

        Raises:
            ValueError: If ``action`` is not a known timeout action.
        """
        action = TimeoutAction(action)
        previous = await self._state.get_vault_timeout_action()
        await self._state.set_vault_timeout(timeout)
        await self._state.set_vault_timeout_action(action.value)
        await self._crypto.toggle_key()
        await self._tokens.toggle_tokens()
        logger.debug("Vault timeout options set: timeout=%s action=%s", timeout, action.value)
        if previous != action.value:
            self._messaging.send("vaultTimeoutActionChanged", action.value)

    async def clear(self, user_id: Optional[str] = None) -> None:
        """Erase stored PIN-unlock material; keys and caches are untouched."""
        await self._state.set_pin_protected(None, user_id)
        await self._state.set_protected_pin(None, user_id)

    # ------------------------------------------------------------------
    # Activity & unlock
    # ------------------------------------------------------------------

    async def record_activity(self, user_id: Optional[str] = None) -> None:
        """Stamp the account's last-active time with the platform clock."""
        await self._state.set_last_active_time(self._platform.get_active_time(), user_id)

    async def mark_unlocked(self, user_id: Optional[str] = None) -> None:
        """Lift a biometric soft lock after the host has unlocked the vault."""
        account_id = await self._account_id(user_id)
        if account_id is not None:
            self._session.set_biometric_locked(account_id, False)
        logger.info("Vault unlocked for user=%s", user_id)
        self._messaging.send("unlocked", user_id)
