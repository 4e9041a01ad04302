"""
Soft daily quotas.

``can_call`` and ``increment`` are separate: callers check, then
increment, then call the provider. Two concurrent requests can both pass the
check at ``cap - 1``, so the effective cap may be exceeded by a small margin.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from databases import Database

from ..storage.repositories import UsageRepository
from .config import DEFAULT_USAGE_LIMITS, Provider, UsageLimits

logger = logging.getLogger(__name__)


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _column(provider: Provider) -> str:
    return f"{Provider(provider).value}_calls"


async def can_call(
    provider: Provider,
    db: Database,
    limits: UsageLimits = DEFAULT_USAGE_LIMITS,
) -> bool:
    """True while today's counter for ``provider`` is below its cap."""
    usage = await UsageRepository(db).get_or_create(_today())
    used = usage[_column(provider)]
    limit = limits.limit_for(provider)
    if used >= limit:
        logger.info("Daily %s quota exhausted (%d/%d)", Provider(provider).value, used, limit)
        return False
    return True


async def increment(provider: Provider, db: Database) -> None:
    await UsageRepository(db).increment(_today(), _column(provider))


async def get_usage_summary(
    db: Database,
    limits: UsageLimits = DEFAULT_USAGE_LIMITS,
) -> dict[str, dict[str, int]]:
    usage = await UsageRepository(db).get_or_create(_today())
    return {
        p.value: {"used": usage[_column(p)], "limit": limits.limit_for(p)}
        for p in Provider
    }
