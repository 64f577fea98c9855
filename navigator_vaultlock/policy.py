"""
Effective vault timeout — clamp a configured timeout by an org policy.

A negative or absent timeout means "never lock automatically". That setting
is only honored while no maximum-vault-timeout policy applies; once a policy
applies, the effective value never exceeds the policy ceiling.
"""
from typing import Optional

from .models import Policy

MINUTES_KEY = "minutes"


def get_policy_int(policy: Policy, key: str) -> Optional[int]:
    """Return ``policy.data[key]`` as int, or None if missing or not numeric."""
    value = policy.data.get(key)
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def resolve_effective_timeout(
    configured: Optional[int],
    policy_minutes: Optional[int],
) -> Optional[int]:
    """Clamp a configured timeout (minutes) by the policy maximum.

    Args:
        configured: User-configured timeout; None or negative means "never".
        policy_minutes: Policy ceiling, or None when no policy applies.

    Returns:
        The effective timeout in minutes.
    """
    if policy_minutes is None:
        return configured
    if configured is None:
        timeout = policy_minutes
    else:
        timeout = min(configured, policy_minutes)
    if timeout < 0:
        timeout = policy_minutes
    return timeout
