"""
Django Masonman - Mason loyalty ledger and reward fulfillment.

Usage:
    from masonman import LoyaltyService, MasonmanError

    result = LoyaltyService.transition_purchase_credit(bag_lift_id, "approved", actor="42")
    result.ledger_entries  # primary credit, slab bonus, referral bonus

    try:
        LoyaltyService.transition_redemption(redemption_id, "approved")
    except MasonmanError as e:
        if e.code == "INSUFFICIENT_STOCK":
            ...
"""


def __getattr__(name):
    if name == "LoyaltyService":
        from masonman.service import LoyaltyService

        return LoyaltyService
    if name == "MasonmanError":
        from masonman.exceptions import MasonmanError

        return MasonmanError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["LoyaltyService", "MasonmanError"]
__version__ = "0.1.0"
