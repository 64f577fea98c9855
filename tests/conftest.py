"""
Shared fixtures: in-memory fakes of every vault timeout collaborator.
"""
from typing import Any, Optional

import pytest

from navigator_vaultlock import Broadcaster, Policy, PolicyType, VaultTimeoutService

MINUTE_MS = 60000


class FakeState:
    """Per-account state kept in plain dicts."""

    def __init__(self):
        self.accounts: dict[str, dict[str, Any]] = {}
        self.active_user_id: Optional[str] = None

    def add_account(self, user_id: str, **fields) -> dict:
        account = {
            "authenticated": True,
            "last_active": None,
            "vault_timeout": None,
            "vault_timeout_action": None,
            "biometric_unlock": None,
            "protected_pin": None,
            "pin_protected": None,
        }
        account.update(fields)
        self.accounts[user_id] = account
        if self.active_user_id is None:
            self.active_user_id = user_id
        return account

    def _account(self, user_id):
        return self.accounts[user_id or self.active_user_id]

    async def get_account_ids(self):
        return list(self.accounts.keys())

    async def get_active_user_id(self):
        return self.active_user_id

    async def set_active_user_id(self, user_id):
        self.active_user_id = user_id

    async def is_authenticated(self, user_id=None):
        key = user_id or self.active_user_id
        return key in self.accounts and self.accounts[key]["authenticated"]

    async def get_last_active_time(self, user_id=None):
        return self._account(user_id)["last_active"]

    async def set_last_active_time(self, value, user_id=None):
        self._account(user_id)["last_active"] = value

    async def get_vault_timeout(self, user_id=None):
        return self._account(user_id)["vault_timeout"]

    async def set_vault_timeout(self, value, user_id=None):
        self._account(user_id)["vault_timeout"] = value

    async def get_vault_timeout_action(self, user_id=None):
        return self._account(user_id)["vault_timeout_action"]

    async def set_vault_timeout_action(self, value, user_id=None):
        self._account(user_id)["vault_timeout_action"] = value

    async def get_biometric_unlock(self, user_id=None):
        return self._account(user_id)["biometric_unlock"]

    async def get_protected_pin(self, user_id=None):
        return self._account(user_id)["protected_pin"]

    async def set_protected_pin(self, value, user_id=None):
        self._account(user_id)["protected_pin"] = value

    async def get_pin_protected(self, user_id=None):
        return self._account(user_id)["pin_protected"]

    async def set_pin_protected(self, value, user_id=None):
        self._account(user_id)["pin_protected"] = value


class FakePolicies:
    def __init__(self):
        self.minutes: Optional[Any] = None

    async def policy_applies_to_user(self, policy_type, user_id=None):
        return self.minutes is not None

    async def get_all(self, policy_type, user_id=None):
        if self.minutes is None:
            return []
        return [Policy(type=PolicyType.MAXIMUM_VAULT_TIMEOUT, data={"minutes": self.minutes})]


class FakeCrypto:
    def __init__(self, state: FakeState):
        self._state = state
        self.keys: set[str] = set()
        self.calls: list[tuple] = []
        self.fail_on: Optional[str] = None
        self.fail_for: Optional[str] = None
        self.toggled = 0

    def _resolve(self, user_id):
        return user_id or self._state.active_user_id

    async def has_key(self, user_id=None):
        return self._resolve(user_id) in self.keys

    async def _clear(self, name, user_id, memory_only=None, all_accounts=False):
        self.calls.append((name, user_id, memory_only, all_accounts))
        if self.fail_on == name and self.fail_for in (None, user_id):
            raise OSError(f"{name} failed")

    async def clear_key(self, user_id=None, all_accounts=False):
        await self._clear("clear_key", user_id, all_accounts=all_accounts)
        if all_accounts:
            self.keys.clear()
        else:
            self.keys.discard(self._resolve(user_id))

    async def clear_org_keys(self, memory_only=False, user_id=None, all_accounts=False):
        await self._clear("clear_org_keys", user_id, memory_only, all_accounts)

    async def clear_key_pair(self, memory_only=False, user_id=None, all_accounts=False):
        await self._clear("clear_key_pair", user_id, memory_only, all_accounts)

    async def clear_enc_key(self, memory_only=False, user_id=None, all_accounts=False):
        await self._clear("clear_enc_key", user_id, memory_only, all_accounts)

    async def toggle_key(self):
        self.toggled += 1


class FakeTokens:
    def __init__(self):
        self.toggled = 0

    async def toggle_tokens(self):
        self.toggled += 1


class FakeKeyConnector:
    def __init__(self):
        self.users: set[str] = set()

    async def get_uses_key_connector(self, user_id=None):
        return user_id in self.users


class Recorder:
    """Stands in for every cache collaborator, recording call order."""

    def __init__(self):
        self.calls: list[str] = []


class FakeFolders:
    def __init__(self, recorder: Recorder):
        self._recorder = recorder

    def clear_cache(self):
        self._recorder.calls.append("folders")


class FakeCiphers:
    def __init__(self, recorder: Recorder):
        self._recorder = recorder

    async def clear_cache(self):
        self._recorder.calls.append("ciphers")


class FakeCollections:
    def __init__(self, recorder: Recorder):
        self._recorder = recorder

    def clear_cache(self):
        self._recorder.calls.append("collections")


class FakeSearch:
    def __init__(self, recorder: Recorder):
        self._recorder = recorder

    def clear_index(self):
        self._recorder.calls.append("search")


class FakePlatform:
    def __init__(self):
        self.view_open = False
        self.now = 100 * MINUTE_MS

    def is_view_open(self):
        return self.view_open

    def get_active_time(self):
        return self.now


class Env:
    """Bundle of fakes plus the service wired to them."""

    def __init__(self):
        self.state = FakeState()
        self.policies = FakePolicies()
        self.crypto = FakeCrypto(self.state)
        self.tokens = FakeTokens()
        self.key_connector = FakeKeyConnector()
        self.recorder = Recorder()
        self.platform = FakePlatform()
        self.messages: list[tuple[str, Any]] = []
        self.locked: list[bool] = []
        self.logouts: list[tuple[bool, Optional[str]]] = []
        self.broadcaster = Broadcaster()
        self.broadcaster.subscribe(
            "test", lambda command, data: self.messages.append((command, data))
        )

        async def logged_out(user_initiated, user_id):
            self.logouts.append((user_initiated, user_id))

        self.service = VaultTimeoutService(
            crypto_service=self.crypto,
            state_service=self.state,
            platform_utils_service=self.platform,
            folder_service=FakeFolders(self.recorder),
            cipher_service=FakeCiphers(self.recorder),
            collection_service=FakeCollections(self.recorder),
            search_service=FakeSearch(self.recorder),
            messaging_service=self.broadcaster,
            token_service=self.tokens,
            policy_service=self.policies,
            key_connector_service=self.key_connector,
            locked_callback=self.locked.append,
            logged_out_callback=logged_out,
        )

    def unlocked_account(self, user_id: str, **fields) -> dict:
        """Add an authenticated account holding a resident key."""
        account = self.state.add_account(user_id, **fields)
        self.crypto.keys.add(user_id)
        return account


@pytest.fixture
def env():
    return Env()


@pytest.fixture
def service(env):
    return env.service
