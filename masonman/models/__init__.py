"""Masonman models.

- Mason: account holder and balance projection
- LedgerEntry: append-only point movements
- BagLift: purchase credit request (pending → approved/rejected)
- Reward: catalog item with finite stock
- RewardRedemption: points-for-reward order (placed → … → delivered)
"""

from masonman.models.mason import Mason
from masonman.models.ledger import LedgerEntry, SourceType
from masonman.models.bag_lift import BagLift, BagLiftStatus
from masonman.models.reward import Reward
from masonman.models.redemption import RewardRedemption, RedemptionStatus

__all__ = [
    # Account holder
    "Mason",
    # Ledger
    "LedgerEntry",
    "SourceType",
    # Purchase credit
    "BagLift",
    "BagLiftStatus",
    # Rewards
    "Reward",
    "RewardRedemption",
    "RedemptionStatus",
]
