"""BagLift approval workflow.

pending → approved credits the lift and any slab/referral bonus,
approved → rejected reverses the primary credit only, pending → rejected
changes nothing but the status. Each call is one transaction.
"""

import logging
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from masonman.conf import masonman_settings
from masonman.exceptions import MasonmanError
from masonman.models import BagLift, LedgerEntry, SourceType
from masonman.policy import crossed_thresholds, extra_bonus_points, referral_bonus_trigger
from masonman.services import ledger
from masonman.signals import bag_lift_transitioned
from masonman.transitions import Effect, TransitionPlan, plan_bag_lift

logger = logging.getLogger(__name__)


@dataclass
class BagLiftTransitionResult:
    """Outcome of a committed BagLift transition."""

    bag_lift: BagLift
    previous_status: str
    new_status: str
    ledger_entries: list[LedgerEntry] = field(default_factory=list)


def transition(
    bag_lift_id,
    target_status: str,
    memo: str = "",
    actor: str = "",
) -> BagLiftTransitionResult:
    """
    Move a BagLift to target_status.

    The BagLift row is locked before its status is checked, so concurrent
    approvals of the same lift serialize and the loser sees
    INVALID_TRANSITION instead of crediting twice.

    Args:
        bag_lift_id: BagLift primary key (UUID or its string form)
        target_status: "approved" or "rejected"
        memo: Optional note stored on the lift and in ledger memos
        actor: Authenticated reviewer, recorded in approved_by/created_by

    Returns:
        BagLiftTransitionResult with the ledger entries written

    Raises:
        MasonmanError: NOT_FOUND, INVALID_TRANSITION, TRANSACTION_FAILED
    """
    try:
        with transaction.atomic():
            bag_lift = _lock_bag_lift(bag_lift_id)
            plan = plan_bag_lift(bag_lift.status, target_status)
            entries = _execute(bag_lift, plan, memo, actor)
    except DatabaseError as exc:
        logger.warning(
            "BagLift %s → %s failed, rolled back: %s", bag_lift_id, target_status, exc
        )
        raise MasonmanError(
            "TRANSACTION_FAILED",
            bag_lift_id=str(bag_lift_id),
            requested=str(target_status),
        ) from exc

    logger.info(
        "BagLift %s %s → %s by %s (%d ledger entries)",
        bag_lift.pk,
        plan.source,
        plan.target,
        actor or "-",
        len(entries),
    )
    bag_lift_transitioned.send(
        sender=BagLift,
        instance=bag_lift,
        source=plan.source,
        target=plan.target,
        ledger_entries=entries,
    )
    return BagLiftTransitionResult(
        bag_lift=bag_lift,
        previous_status=plan.source,
        new_status=plan.target,
        ledger_entries=entries,
    )


def _lock_bag_lift(bag_lift_id) -> BagLift:
    try:
        return BagLift.objects.select_for_update().get(pk=bag_lift_id)
    except (BagLift.DoesNotExist, ValidationError, ValueError):
        raise MasonmanError("NOT_FOUND", entity="bag_lift", id=str(bag_lift_id))


def _execute(
    bag_lift: BagLift,
    plan: TransitionPlan,
    memo: str,
    actor: str,
) -> list[LedgerEntry]:
    entries: list[LedgerEntry] = []
    ref = str(bag_lift.pk)[:8]

    if Effect.CREDIT_LIFT in plan.effects:
        mason = ledger.lock_mason(bag_lift.mason_id)
        # Snapshot under the lock; bonuses are judged on volume before this lift
        bags_before = mason.bags_lifted

        entries.append(
            ledger.append(
                mason,
                SourceType.BAG_LIFT,
                bag_lift.pk,
                bag_lift.points_credited,
                _memo(f"Bag lift {ref}: {bag_lift.bag_count} bags approved", memo),
                created_by=actor,
            )
        )
        mason.bags_lifted = bags_before + bag_lift.bag_count
        mason.save(update_fields=["bags_lifted", "updated_at"])

        if Effect.SLAB_BONUS in plan.effects:
            bonus = extra_bonus_points(bags_before, bag_lift.bag_count, bag_lift.purchase_date)
            if bonus > 0:
                thresholds = crossed_thresholds(
                    bags_before,
                    bag_lift.bag_count,
                    [t for t, _ in masonman_settings.SLAB_BONUSES],
                )
                entries.append(
                    ledger.append(
                        mason,
                        SourceType.ADJUSTMENT,
                        None,
                        bonus,
                        f"Slab bonus: crossed {', '.join(map(str, thresholds))} bags (lift {ref})",
                        created_by=actor,
                    )
                )

        if Effect.REFERRAL_BONUS in plan.effects and mason.referred_by_id:
            referral = referral_bonus_trigger(bags_before, bag_lift.bag_count)
            if referral > 0:
                referrer = ledger.lock_mason(mason.referred_by_id)
                entries.append(
                    ledger.append(
                        referrer,
                        SourceType.REFERRAL_BONUS,
                        bag_lift.pk,
                        referral,
                        f"Referral bonus: {mason.code} reached "
                        f"{masonman_settings.REFERRAL_MILESTONE_BAGS} bags (lift {ref})",
                        created_by=actor,
                    )
                )

    if Effect.REVERSE_LIFT in plan.effects:
        # Slab and referral bonuses already paid are left in place
        mason = ledger.lock_mason(bag_lift.mason_id)
        entries.append(
            ledger.append(
                mason,
                SourceType.ADJUSTMENT,
                bag_lift.pk,
                -bag_lift.points_credited,
                _memo(f"Reversal: bag lift {ref} rejected after approval", memo),
                created_by=actor,
            )
        )
        mason.bags_lifted -= bag_lift.bag_count
        mason.save(update_fields=["bags_lifted", "updated_at"])

    # approved_by/approved_at hold the reviewer of the latest decision
    bag_lift.status = plan.target
    bag_lift.approved_by = actor
    bag_lift.approved_at = timezone.now()
    update_fields = ["status", "approved_by", "approved_at", "updated_at"]
    if memo:
        bag_lift.memo = memo[:255]
        update_fields.append("memo")
    bag_lift.save(update_fields=update_fields)

    return entries


def _memo(base: str, note: str) -> str:
    return f"{base}. {note}" if note else base
