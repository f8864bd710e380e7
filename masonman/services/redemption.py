"""RewardRedemption fulfillment workflow.

Points were debited when the order was placed; stock is only taken on
approval. Rejection refunds the points, and restocks if stock was taken.
Each call is one transaction.
"""

import logging
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from masonman.exceptions import MasonmanError
from masonman.models import (
    LedgerEntry,
    RedemptionStatus,
    Reward,
    RewardRedemption,
    SourceType,
)
from masonman.services import ledger
from masonman.signals import redemption_transitioned
from masonman.transitions import Effect, TransitionPlan, plan_redemption

logger = logging.getLogger(__name__)


@dataclass
class RedemptionTransitionResult:
    """Outcome of a committed redemption transition."""

    redemption: RewardRedemption
    previous_status: str
    new_status: str
    ledger_entries: list[LedgerEntry] = field(default_factory=list)


def transition(
    redemption_id,
    target_status: str,
    fulfillment_notes: str = "",
    actor: str = "",
) -> RedemptionTransitionResult:
    """
    Move a RewardRedemption to target_status.

    Stock is re-checked under a row lock on the reward at approval time,
    so two approvals competing for the last units cannot both succeed.

    Args:
        redemption_id: RewardRedemption primary key
        target_status: approved, rejected, shipped or delivered
        fulfillment_notes: Optional note appended to the order and refund memo
        actor: Authenticated operator, recorded on ledger entries

    Returns:
        RedemptionTransitionResult

    Raises:
        MasonmanError: NOT_FOUND, INVALID_TRANSITION, INSUFFICIENT_STOCK,
            TRANSACTION_FAILED
    """
    try:
        with transaction.atomic():
            redemption = _lock_redemption(redemption_id)
            plan = plan_redemption(redemption.status, target_status)
            entries = _execute(redemption, plan, fulfillment_notes, actor)
    except DatabaseError as exc:
        logger.warning(
            "Redemption %s → %s failed, rolled back: %s", redemption_id, target_status, exc
        )
        raise MasonmanError(
            "TRANSACTION_FAILED",
            redemption_id=str(redemption_id),
            requested=str(target_status),
        ) from exc

    logger.info(
        "Redemption %s %s → %s by %s",
        redemption.pk,
        plan.source,
        plan.target,
        actor or "-",
    )
    redemption_transitioned.send(
        sender=RewardRedemption,
        instance=redemption,
        source=plan.source,
        target=plan.target,
        ledger_entries=entries,
    )
    return RedemptionTransitionResult(
        redemption=redemption,
        previous_status=plan.source,
        new_status=plan.target,
        ledger_entries=entries,
    )


def _lock_redemption(redemption_id) -> RewardRedemption:
    try:
        return RewardRedemption.objects.select_for_update().get(pk=redemption_id)
    except (RewardRedemption.DoesNotExist, ValidationError, ValueError):
        raise MasonmanError("NOT_FOUND", entity="redemption", id=str(redemption_id))


def _lock_reward(reward_id: int) -> Reward:
    try:
        return Reward.objects.select_for_update().get(pk=reward_id)
    except Reward.DoesNotExist:
        raise MasonmanError("NOT_FOUND", entity="reward", id=reward_id)


def _execute(
    redemption: RewardRedemption,
    plan: TransitionPlan,
    notes: str,
    actor: str,
) -> list[LedgerEntry]:
    entries: list[LedgerEntry] = []
    ref = str(redemption.pk)[:8]

    if Effect.RESERVE_STOCK in plan.effects:
        reward = _lock_reward(redemption.reward_id)
        if reward.stock < redemption.quantity:
            logger.warning(
                "Redemption %s: insufficient stock for reward %s (%d < %d)",
                redemption.pk,
                reward.pk,
                reward.stock,
                redemption.quantity,
            )
            raise MasonmanError(
                "INSUFFICIENT_STOCK",
                message=(
                    f"Insufficient stock. Available: {reward.stock}, "
                    f"Required: {redemption.quantity}"
                ),
                reward_id=reward.pk,
                available=reward.stock,
                requested=redemption.quantity,
            )
        reward.stock -= redemption.quantity
        reward.save(update_fields=["stock", "updated_at"])

    if Effect.REFUND_POINTS in plan.effects:
        mason = ledger.lock_mason(redemption.mason_id)
        if plan.source == RedemptionStatus.APPROVED:
            base = f"Refund: approved order {ref} cancelled"
        else:
            base = f"Refund: order {ref} rejected"
        entries.append(
            ledger.append(
                mason,
                SourceType.ADJUSTMENT,
                redemption.pk,
                redemption.points_debited,
                f"{base}. {notes}" if notes else base,
                created_by=actor,
            )
        )

    if Effect.RESTOCK in plan.effects:
        reward = _lock_reward(redemption.reward_id)
        reward.stock += redemption.quantity
        reward.save(update_fields=["stock", "updated_at"])

    redemption.status = plan.target
    update_fields = ["status", "updated_at"]
    if notes:
        redemption.fulfillment_notes = (
            f"{redemption.fulfillment_notes}\n{notes}" if redemption.fulfillment_notes else notes
        )
        update_fields.append("fulfillment_notes")
    redemption.save(update_fields=update_fields)

    return entries
