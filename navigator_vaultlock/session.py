"""
LockSession — in-memory state owned by the vault timeout service.

Holds the per-account biometric-locked flags (never persisted), and one
``asyncio.Lock`` per account so lock and logout transitions for the same
account never overlap.
"""
import asyncio
import contextlib
import threading
from collections.abc import AsyncIterator


class _AccountMutex:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.holders = 0


class LockSession:
    """Transient lock state for one process."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._biometric_locked: set[str] = set()
        self._account_locks: dict[str, _AccountMutex] = {}

    def is_biometric_locked(self, user_id: str) -> bool:
        with self._guard:
            return user_id in self._biometric_locked

    def set_biometric_locked(self, user_id: str, value: bool) -> None:
        with self._guard:
            if value:
                self._biometric_locked.add(user_id)
            else:
                self._biometric_locked.discard(user_id)

    def clear_biometric_locked(self) -> None:
        """Lift every soft lock, after all accounts were hard-locked."""
        with self._guard:
            self._biometric_locked.clear()

    @property
    def biometric_locked_accounts(self) -> list[str]:
        with self._guard:
            return sorted(self._biometric_locked)

    @property
    def tracked_accounts(self) -> list[str]:
        """Accounts currently holding or waiting on their mutex."""
        with self._guard:
            return list(self._account_locks.keys())

    @contextlib.asynccontextmanager
    async def account_lock(self, user_id: str) -> AsyncIterator[None]:
        """Serialize transitions of ``user_id``.

        The mutex is dropped once no coroutine holds or waits on it.
        """
        with self._guard:
            mutex = self._account_locks.get(user_id)
            if mutex is None:
                mutex = self._account_locks[user_id] = _AccountMutex()
            mutex.holders += 1
        try:
            async with mutex.lock:
                yield
        finally:
            with self._guard:
                mutex.holders -= 1
                if mutex.holders == 0 and self._account_locks.get(user_id) is mutex:
                    del self._account_locks[user_id]
