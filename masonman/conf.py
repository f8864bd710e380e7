"""
Masonman configuration.

Usage in settings.py:
    MASONMAN = {
        "SLAB_BONUSES": ((200, 500), (500, 1500), (1000, 4000)),
        "SLAB_BONUS_STARTS": date(2025, 1, 1),
        "REFERRAL_MILESTONE_BAGS": 200,
        "REFERRAL_BONUS_POINTS": 1000,
    }
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from django.conf import settings


@dataclass
class MasonmanSettings:
    """Masonman configuration settings."""

    # Slab bonus schedule: (cumulative bag threshold, bonus points)
    SLAB_BONUSES: tuple = ((200, 500), (500, 1500), (1000, 4000))

    # Slab campaign window on purchase date (inclusive, None = open)
    SLAB_BONUS_STARTS: date | None = None
    SLAB_BONUS_ENDS: date | None = None

    # Referral bonus paid to the referrer when the referee crosses the milestone
    REFERRAL_MILESTONE_BAGS: int = 200
    REFERRAL_BONUS_POINTS: int = 1000

    # Default page size for ledger history
    LEDGER_HISTORY_LIMIT: int = 50


def get_masonman_settings() -> MasonmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "MASONMAN", {})
    return MasonmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_masonman_settings(), name)


masonman_settings = _LazySettings()
