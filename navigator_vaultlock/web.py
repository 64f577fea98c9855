"""
aiohttp integration for the vault timeout service.

``setup_vault_timeout(app, service)`` starts the periodic timeout check with
the application and records activity for every request that carries an
authenticated user id (``request[config.user_key]``).
"""
import logging
from typing import Optional

from aiohttp import web

from .conf import VaultTimeoutConfig
from .service import VaultTimeoutService
from .timer import VaultTimeoutTimer

logger = logging.getLogger("navigator.vaultlock")

VAULT_TIMEOUT_SERVICE = web.AppKey("vault_timeout_service", VaultTimeoutService)
VAULT_TIMEOUT_TIMER = web.AppKey("vault_timeout_timer", VaultTimeoutTimer)
VAULT_TIMEOUT_CONFIG = web.AppKey("vault_timeout_config", VaultTimeoutConfig)


async def _start_timer(app: web.Application) -> None:
    await app[VAULT_TIMEOUT_TIMER].start()


async def _stop_timer(app: web.Application) -> None:
    await app[VAULT_TIMEOUT_TIMER].stop()


@web.middleware
async def vault_activity_middleware(request: web.Request, handler):
    """Stamp last-active time for the request's user before handling it."""
    config = request.app[VAULT_TIMEOUT_CONFIG]
    if config.record_activity:
        user_id = request.get(config.user_key)
        if user_id is not None:
            await request.app[VAULT_TIMEOUT_SERVICE].record_activity(str(user_id))
    return await handler(request)


def setup_vault_timeout(
    app: web.Application,
    service: VaultTimeoutService,
    config: Optional[VaultTimeoutConfig] = None,
) -> VaultTimeoutTimer:
    """Wire the service into an aiohttp application.

    Args:
        app: Application to configure (before it is frozen).
        service: Configured vault timeout service.
        config: Optional settings; loaded from environment when omitted.

    Returns:
        The timer started on application startup.
    """
    config = config or VaultTimeoutConfig.from_env()
    timer = VaultTimeoutTimer(service, interval=config.check_interval)
    app[VAULT_TIMEOUT_SERVICE] = service
    app[VAULT_TIMEOUT_TIMER] = timer
    app[VAULT_TIMEOUT_CONFIG] = config
    app.on_startup.append(_start_timer)
    app.on_cleanup.append(_stop_timer)
    app.middlewares.append(vault_activity_middleware)
    logger.info("Vault timeout wired into application (interval=%ss)", config.check_interval)
    return timer
