"""Ledger service - append-only point movements and the balance projection.

append() is the only writer of Mason.points_balance. It never opens its own
transaction: callers hold transaction.atomic() and a row lock on the mason,
so the entry and the balance change commit or roll back together.
"""

import logging
from dataclasses import dataclass

from django.db import DatabaseError, transaction
from django.db.models import Sum

from masonman.conf import masonman_settings
from masonman.exceptions import MasonmanError
from masonman.models import LedgerEntry, Mason, SourceType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceDrift:
    """A mason whose stored balance disagrees with the ledger."""

    mason_code: str
    stored_balance: int
    ledger_total: int

    @property
    def difference(self) -> int:
        return self.stored_balance - self.ledger_total


def append(
    mason: Mason,
    source_type: str,
    source_id: str | None,
    points: int,
    memo: str,
    created_by: str = "",
) -> LedgerEntry:
    """
    Append a ledger entry and move the mason's balance by the same amount.

    MUST be called inside transaction.atomic() with ``mason`` fetched via
    select_for_update(). A balance that would drop below zero is refused by
    the database check constraint, which aborts the enclosing transaction.

    Args:
        mason: Locked Mason instance
        source_type: One of SourceType
        source_id: Originating BagLift/RewardRedemption id, or None
        points: Signed delta
        memo: Free-text reason
        created_by: Actor recorded for audit

    Returns:
        Created LedgerEntry

    Raises:
        MasonmanError: INVALID_SOURCE_TYPE for unknown source types
    """
    if source_type not in SourceType.values:
        raise MasonmanError("INVALID_SOURCE_TYPE", source_type=source_type)

    mason.points_balance += points
    mason.save(update_fields=["points_balance", "updated_at"])

    return LedgerEntry.objects.create(
        mason=mason,
        source_type=source_type,
        source_id=str(source_id) if source_id is not None else None,
        points=points,
        balance_after=mason.points_balance,
        memo=memo[:255],
        created_by=created_by,
    )


def lock_mason(mason_id: int) -> Mason:
    """
    Fetch a mason with a row-level lock.

    MUST be called inside transaction.atomic().
    """
    try:
        return Mason.objects.select_for_update().get(pk=mason_id)
    except Mason.DoesNotExist:
        raise MasonmanError("NOT_FOUND", entity="mason", id=mason_id)


def adjust(
    mason_code: str,
    points: int,
    memo: str,
    created_by: str = "",
) -> LedgerEntry:
    """
    Manual balance correction (admin/support use).

    Runs in its own transaction. Negative adjustments that would overdraw
    the balance fail with TRANSACTION_FAILED and change nothing.

    Raises:
        MasonmanError: NOT_FOUND, INVALID_POINTS, TRANSACTION_FAILED
    """
    if isinstance(points, bool) or not isinstance(points, int) or points == 0:
        raise MasonmanError("INVALID_POINTS", points=points)

    try:
        with transaction.atomic():
            try:
                mason = Mason.objects.select_for_update().get(code=mason_code, is_active=True)
            except Mason.DoesNotExist:
                raise MasonmanError("NOT_FOUND", entity="mason", mason_code=mason_code)
            entry = append(
                mason,
                SourceType.ADJUSTMENT,
                None,
                points,
                memo,
                created_by=created_by,
            )
    except DatabaseError as exc:
        logger.warning("Adjustment of %s pts for %s failed: %s", points, mason_code, exc)
        raise MasonmanError("TRANSACTION_FAILED", mason_code=mason_code) from exc

    logger.info("Adjusted %s by %+d pts (%s)", mason_code, points, memo)
    return entry


def get_balance(mason_code: str) -> int:
    """Current points balance. Raises NOT_FOUND for unknown masons."""
    try:
        return Mason.objects.values_list("points_balance", flat=True).get(code=mason_code)
    except Mason.DoesNotExist:
        raise MasonmanError("NOT_FOUND", entity="mason", mason_code=mason_code)


def get_entries(mason_code: str, limit: int | None = None) -> list[LedgerEntry]:
    """Ledger history for a mason, most recent first."""
    if limit is None:
        limit = masonman_settings.LEDGER_HISTORY_LIMIT
    return list(LedgerEntry.objects.filter(mason__code=mason_code)[:limit])


def ledger_total(mason: Mason) -> int:
    """Sum of the mason's ledger entries (0 if none)."""
    return LedgerEntry.objects.filter(mason=mason).aggregate(total=Sum("points"))["total"] or 0


def find_drift() -> list[BalanceDrift]:
    """Masons whose stored balance differs from their ledger total."""
    masons = Mason.objects.annotate(ledger_sum=Sum("ledger_entries__points")).order_by("code")
    drift = []
    for mason in masons:
        total = mason.ledger_sum or 0
        if mason.points_balance != total:
            drift.append(
                BalanceDrift(
                    mason_code=mason.code,
                    stored_balance=mason.points_balance,
                    ledger_total=total,
                )
            )
    return drift
