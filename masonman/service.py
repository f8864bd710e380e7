"""
Masonman public API.

CORE (workflows):
    LoyaltyService.transition_purchase_credit(id, status) - BagLift approval
    LoyaltyService.transition_redemption(id, status)      - Reward fulfillment

CONVENIENCE (ledger):
    LoyaltyService.get_balance(code)  - Current points
    LoyaltyService.get_entries(code)  - Ledger history
    LoyaltyService.adjust(code, pts)  - Manual correction
"""

from masonman.models import LedgerEntry
from masonman.services import bag_lift as bag_lift_service
from masonman.services import ledger as ledger_service
from masonman.services import redemption as redemption_service
from masonman.services.bag_lift import BagLiftTransitionResult
from masonman.services.redemption import RedemptionTransitionResult


class LoyaltyService:
    """
    Masonman public API.

    Uses @classmethod for extensibility. Callers are expected to have
    authenticated the actor and checked tenant scope already.
    """

    # ======================================================================
    # CORE API
    # ======================================================================

    @classmethod
    def transition_purchase_credit(
        cls,
        bag_lift_id,
        target_status: str,
        memo: str = "",
        actor: str = "",
    ) -> BagLiftTransitionResult:
        """
        Approve or reject a bag lift.

        Raises:
            MasonmanError: NOT_FOUND, INVALID_TRANSITION, TRANSACTION_FAILED
        """
        return bag_lift_service.transition(bag_lift_id, target_status, memo=memo, actor=actor)

    @classmethod
    def transition_redemption(
        cls,
        redemption_id,
        target_status: str,
        fulfillment_notes: str = "",
        actor: str = "",
    ) -> RedemptionTransitionResult:
        """
        Advance or reject a reward redemption.

        Raises:
            MasonmanError: NOT_FOUND, INVALID_TRANSITION, INSUFFICIENT_STOCK,
                TRANSACTION_FAILED
        """
        return redemption_service.transition(
            redemption_id,
            target_status,
            fulfillment_notes=fulfillment_notes,
            actor=actor,
        )

    # ======================================================================
    # CONVENIENCE
    # ======================================================================

    @classmethod
    def get_balance(cls, mason_code: str) -> int:
        return ledger_service.get_balance(mason_code)

    @classmethod
    def get_entries(cls, mason_code: str, limit: int | None = None) -> list[LedgerEntry]:
        return ledger_service.get_entries(mason_code, limit=limit)

    @classmethod
    def adjust(
        cls,
        mason_code: str,
        points: int,
        memo: str,
        created_by: str = "",
    ) -> LedgerEntry:
        """Manual ledger correction in its own transaction."""
        return ledger_service.adjust(mason_code, points, memo, created_by=created_by)
