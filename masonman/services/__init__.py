"""Masonman services.

- ledger: append-only entries and the balance projection
- bag_lift: purchase credit approval workflow
- redemption: reward fulfillment workflow
"""

from masonman.services import ledger
from masonman.services import bag_lift
from masonman.services import redemption

__all__ = ["ledger", "bag_lift", "redemption"]
