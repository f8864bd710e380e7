"""
Masonman transition tables.

Each workflow is a table from (current status, requested status) to the
ordered effects the executor must apply in one transaction. Anything not
in a table is an invalid transition, including same-status requests.

BagLift:
    pending  → approved   CREDIT_LIFT, SLAB_BONUS, REFERRAL_BONUS
    pending  → rejected   (status only)
    approved → rejected   REVERSE_LIFT

RewardRedemption:
    placed   → approved   RESERVE_STOCK
    placed   → rejected   REFUND_POINTS
    approved → rejected   REFUND_POINTS, RESTOCK
    approved → shipped    (status only)
    shipped  → delivered  (status only)
"""

import enum
from dataclasses import dataclass

from masonman.exceptions import MasonmanError
from masonman.models import BagLiftStatus, RedemptionStatus


class Effect(enum.Enum):
    """Side effects a transition asks the executor to apply."""

    CREDIT_LIFT = "credit_lift"
    SLAB_BONUS = "slab_bonus"
    REFERRAL_BONUS = "referral_bonus"
    REVERSE_LIFT = "reverse_lift"
    RESERVE_STOCK = "reserve_stock"
    REFUND_POINTS = "refund_points"
    RESTOCK = "restock"


@dataclass(frozen=True)
class TransitionPlan:
    """Result of planning a transition."""

    source: str
    target: str
    effects: tuple[Effect, ...] = ()

    @property
    def touches_ledger(self) -> bool:
        return any(
            e in (Effect.CREDIT_LIFT, Effect.REVERSE_LIFT, Effect.REFUND_POINTS)
            for e in self.effects
        )


BAG_LIFT_TRANSITIONS: dict[tuple[str, str], tuple[Effect, ...]] = {
    (BagLiftStatus.PENDING, BagLiftStatus.APPROVED): (
        Effect.CREDIT_LIFT,
        Effect.SLAB_BONUS,
        Effect.REFERRAL_BONUS,
    ),
    (BagLiftStatus.PENDING, BagLiftStatus.REJECTED): (),
    (BagLiftStatus.APPROVED, BagLiftStatus.REJECTED): (Effect.REVERSE_LIFT,),
}

REDEMPTION_TRANSITIONS: dict[tuple[str, str], tuple[Effect, ...]] = {
    (RedemptionStatus.PLACED, RedemptionStatus.APPROVED): (Effect.RESERVE_STOCK,),
    (RedemptionStatus.PLACED, RedemptionStatus.REJECTED): (Effect.REFUND_POINTS,),
    (RedemptionStatus.APPROVED, RedemptionStatus.REJECTED): (
        Effect.REFUND_POINTS,
        Effect.RESTOCK,
    ),
    (RedemptionStatus.APPROVED, RedemptionStatus.SHIPPED): (),
    (RedemptionStatus.SHIPPED, RedemptionStatus.DELIVERED): (),
}


def _plan(table, current: str, target: str, entity: str) -> TransitionPlan:
    effects = table.get((current, target))
    if effects is None:
        raise MasonmanError(
            "INVALID_TRANSITION",
            message=f"Cannot move {entity} from '{current}' to '{target}'.",
            current=str(current),
            requested=str(target),
        )
    return TransitionPlan(source=str(current), target=str(target), effects=effects)


def plan_bag_lift(current: str, target: str) -> TransitionPlan:
    """
    Plan a BagLift transition.

    Raises:
        MasonmanError: INVALID_TRANSITION if the move is not in the table
    """
    return _plan(BAG_LIFT_TRANSITIONS, current, target, "bag lift")


def plan_redemption(current: str, target: str) -> TransitionPlan:
    """
    Plan a RewardRedemption transition.

    Raises:
        MasonmanError: INVALID_TRANSITION if the move is not in the table
    """
    return _plan(REDEMPTION_TRANSITIONS, current, target, "redemption")


def allowed_targets(table, current: str) -> list[str]:
    """Statuses reachable in one step from current."""
    return [str(target) for source, target in table if source == current]


def is_terminal(table, current: str) -> bool:
    return not allowed_targets(table, current)
