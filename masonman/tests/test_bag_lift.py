"""
Tests for the BagLift approval workflow:
- Approval credits the lift, slab bonus and referral bonus atomically
- Rejection after approval reverses the primary credit only
- Invalid transitions change nothing
"""

import uuid
from datetime import date

import pytest
from django.test import override_settings

from masonman.exceptions import MasonmanError
from masonman.models import BagLift, BagLiftStatus, LedgerEntry, Mason, SourceType
from masonman.service import LoyaltyService
from masonman.services import bag_lift as bag_lift_service
from masonman.services import ledger
from masonman.signals import bag_lift_transitioned
from masonman.tests.helpers import assert_balance_matches_ledger


pytestmark = pytest.mark.django_db


def _entries_for(mason):
    return list(LedgerEntry.objects.filter(mason=mason).order_by("id"))


# ═══════════════════════════════════════════════════════════════════
# pending → approved
# ═══════════════════════════════════════════════════════════════════


class TestApprove:
    def test_credits_lift(self, mason, make_bag_lift):
        bag_lift = make_bag_lift(mason, bag_count=50, points_credited=100)

        result = bag_lift_service.transition(bag_lift.pk, "approved", actor="42")

        assert result.previous_status == BagLiftStatus.PENDING
        assert result.new_status == BagLiftStatus.APPROVED
        assert len(result.ledger_entries) == 1
        entry = result.ledger_entries[0]
        assert entry.source_type == SourceType.BAG_LIFT
        assert entry.source_id == str(bag_lift.pk)
        assert entry.points == 100
        assert entry.created_by == "42"

        mason.refresh_from_db()
        assert mason.points_balance == 1100
        assert mason.bags_lifted == 50
        assert_balance_matches_ledger(mason)

    def test_records_approver(self, mason, make_bag_lift):
        bag_lift = make_bag_lift(mason)

        bag_lift_service.transition(bag_lift.pk, "approved", memo="Invoice checked", actor="7")

        bag_lift.refresh_from_db()
        assert bag_lift.status == BagLiftStatus.APPROVED
        assert bag_lift.approved_by == "7"
        assert bag_lift.approved_at is not None
        assert bag_lift.memo == "Invoice checked"
        entry = LedgerEntry.objects.get(source_type=SourceType.BAG_LIFT, source_id=str(bag_lift.pk))
        assert entry.memo.endswith("Invoice checked")

    def test_accepts_string_id(self, mason, make_bag_lift):
        bag_lift = make_bag_lift(mason)

        result = bag_lift_service.transition(str(bag_lift.pk), "approved")

        assert result.bag_lift.pk == bag_lift.pk

    def test_slab_and_referral_bonus(self, referred_mason, referrer, make_bag_lift):
        """180 + 50 crosses 200: lift + slab for the mason, referral for the referrer."""
        bag_lift = make_bag_lift(referred_mason, bag_count=50, points_credited=100)

        result = LoyaltyService.transition_purchase_credit(bag_lift.pk, "approved")

        primary, slab, referral = result.ledger_entries
        assert (primary.source_type, primary.points) == (SourceType.BAG_LIFT, 100)
        assert (slab.source_type, slab.source_id, slab.points) == (SourceType.ADJUSTMENT, None, 500)
        assert "200" in slab.memo
        assert referral.source_type == SourceType.REFERRAL_BONUS
        assert referral.source_id == str(bag_lift.pk)
        assert referral.points == 1000
        assert referral.mason_id == referrer.pk
        assert "MSN-002" in referral.memo

        referred_mason.refresh_from_db()
        referrer.refresh_from_db()
        assert referred_mason.points_balance == 600
        assert referred_mason.bags_lifted == 230
        assert referrer.points_balance == 1000
        assert_balance_matches_ledger(referred_mason)
        assert_balance_matches_ledger(referrer)

    def test_no_referrer_means_no_referral_bonus(self, mason, make_bag_lift):
        Mason.objects.filter(pk=mason.pk).update(bags_lifted=180)
        bag_lift = make_bag_lift(mason, bag_count=50)

        result = bag_lift_service.transition(bag_lift.pk, "approved")

        assert [e.source_type for e in result.ledger_entries] == [
            SourceType.BAG_LIFT,
            SourceType.ADJUSTMENT,
        ]
        assert not LedgerEntry.objects.filter(source_type=SourceType.REFERRAL_BONUS).exists()

    def test_referral_paid_once(self, referred_mason, referrer, make_bag_lift):
        first = make_bag_lift(referred_mason, bag_count=50)
        second = make_bag_lift(referred_mason, bag_count=300, points_credited=600)

        bag_lift_service.transition(first.pk, "approved")
        result = bag_lift_service.transition(second.pk, "approved")

        # 230 + 300 crosses the 500 slab only
        assert [(e.source_type, e.points) for e in result.ledger_entries] == [
            (SourceType.BAG_LIFT, 600),
            (SourceType.ADJUSTMENT, 1500),
        ]
        referrer.refresh_from_db()
        assert referrer.points_balance == 1000
        assert LedgerEntry.objects.filter(source_type=SourceType.REFERRAL_BONUS).count() == 1

    def test_crossing_several_slabs_in_one_lift(self, referred_mason, make_bag_lift):
        bag_lift = make_bag_lift(referred_mason, bag_count=900, points_credited=1800)

        result = bag_lift_service.transition(bag_lift.pk, "approved")

        slab = result.ledger_entries[1]
        assert slab.points == 500 + 1500 + 4000
        assert "200, 500, 1000" in slab.memo

    @override_settings(MASONMAN={"SLAB_BONUS_STARTS": date(2025, 7, 1)})
    def test_purchase_outside_slab_window(self, referred_mason, referrer, make_bag_lift):
        bag_lift = make_bag_lift(referred_mason, purchase_date=date(2025, 6, 1))

        result = bag_lift_service.transition(bag_lift.pk, "approved")

        assert [e.source_type for e in result.ledger_entries] == [
            SourceType.BAG_LIFT,
            SourceType.REFERRAL_BONUS,
        ]

    def test_double_approve_refused(self, mason, make_bag_lift):
        bag_lift = make_bag_lift(mason)
        bag_lift_service.transition(bag_lift.pk, "approved")
        entries_before = _entries_for(mason)

        with pytest.raises(MasonmanError) as exc_info:
            bag_lift_service.transition(bag_lift.pk, "approved")

        assert exc_info.value.code == "INVALID_TRANSITION"
        assert exc_info.value.data == {"current": "approved", "requested": "approved"}
        assert _entries_for(mason) == entries_before
        mason.refresh_from_db()
        assert mason.points_balance == 1100
        assert mason.bags_lifted == 50

    def test_signal_sent(self, mason, make_bag_lift):
        bag_lift = make_bag_lift(mason)
        received = []

        def receiver(sender, **kwargs):
            received.append((sender, kwargs))

        bag_lift_transitioned.connect(receiver)
        try:
            bag_lift_service.transition(bag_lift.pk, "approved")
        finally:
            bag_lift_transitioned.disconnect(receiver)

        assert len(received) == 1
        sender, kwargs = received[0]
        assert sender is BagLift
        assert kwargs["instance"].pk == bag_lift.pk
        assert kwargs["source"] == "pending"
        assert kwargs["target"] == "approved"
        assert len(kwargs["ledger_entries"]) == 1

    def test_no_signal_on_refusal(self, mason, make_bag_lift):
        bag_lift = make_bag_lift(mason, status=BagLiftStatus.REJECTED)
        received = []

        def receiver(sender, **kwargs):
            received.append(kwargs)

        bag_lift_transitioned.connect(receiver)
        try:
            with pytest.raises(MasonmanError):
                bag_lift_service.transition(bag_lift.pk, "approved")
        finally:
            bag_lift_transitioned.disconnect(receiver)

        assert received == []


# ═══════════════════════════════════════════════════════════════════
# Rejection
# ═══════════════════════════════════════════════════════════════════


class TestReject:
    def test_reject_pending_is_status_only(self, mason, make_bag_lift):
        bag_lift = make_bag_lift(mason)
        entries_before = _entries_for(mason)

        result = bag_lift_service.transition(bag_lift.pk, "rejected")

        assert result.ledger_entries == []
        assert result.bag_lift.status == BagLiftStatus.REJECTED
        assert _entries_for(mason) == entries_before
        mason.refresh_from_db()
        assert mason.points_balance == 1000
        assert mason.bags_lifted == 0

    def test_reject_pending_records_reviewer(self, mason, make_bag_lift):
        bag_lift = make_bag_lift(mason)

        bag_lift_service.transition(bag_lift.pk, "rejected", actor="9")

        bag_lift.refresh_from_db()
        assert bag_lift.approved_by == "9"
        assert bag_lift.approved_at is not None

    def test_reject_after_approve_records_rejecting_reviewer(self, mason, make_bag_lift):
        bag_lift = make_bag_lift(mason)
        bag_lift_service.transition(bag_lift.pk, "approved", actor="7")
        bag_lift.refresh_from_db()
        approved_at = bag_lift.approved_at

        bag_lift_service.transition(bag_lift.pk, "rejected", actor="8")

        bag_lift.refresh_from_db()
        assert bag_lift.approved_by == "8"
        assert bag_lift.approved_at >= approved_at
        reversal = LedgerEntry.objects.get(
            source_type=SourceType.ADJUSTMENT, source_id=str(bag_lift.pk)
        )
        assert reversal.created_by == "8"

    def test_reject_after_approve_reverses_credit(self, mason, make_bag_lift):
        bag_lift = make_bag_lift(mason, bag_count=50, points_credited=100)
        bag_lift_service.transition(bag_lift.pk, "approved")

        result = bag_lift_service.transition(bag_lift.pk, "rejected", memo="Fake invoice")

        (reversal,) = result.ledger_entries
        assert reversal.source_type == SourceType.ADJUSTMENT
        assert reversal.source_id == str(bag_lift.pk)
        assert reversal.points == -100
        assert "Fake invoice" in reversal.memo

        mason.refresh_from_db()
        assert mason.points_balance == 1000
        assert mason.bags_lifted == 0
        assert_balance_matches_ledger(mason)

    def test_reversal_keeps_bonuses(self, referred_mason, referrer, make_bag_lift):
        """Only the primary credit is reversed; slab and referral bonuses stay."""
        bag_lift = make_bag_lift(referred_mason, bag_count=50, points_credited=100)
        bag_lift_service.transition(bag_lift.pk, "approved")

        bag_lift_service.transition(bag_lift.pk, "rejected")

        referred_mason.refresh_from_db()
        referrer.refresh_from_db()
        assert referred_mason.points_balance == 500
        assert referred_mason.bags_lifted == 180
        assert referrer.points_balance == 1000
        assert_balance_matches_ledger(referred_mason)
        assert_balance_matches_ledger(referrer)

    def test_reversal_that_would_overdraw_fails(self, mason, make_bag_lift):
        bag_lift = make_bag_lift(mason, bag_count=50, points_credited=100)
        bag_lift_service.transition(bag_lift.pk, "approved")
        ledger.adjust(mason.code, -1100, "Spent everything")
        entries_before = _entries_for(mason)

        with pytest.raises(MasonmanError) as exc_info:
            bag_lift_service.transition(bag_lift.pk, "rejected")

        assert exc_info.value.code == "TRANSACTION_FAILED"
        bag_lift.refresh_from_db()
        assert bag_lift.status == BagLiftStatus.APPROVED
        mason.refresh_from_db()
        assert mason.points_balance == 0
        assert mason.bags_lifted == 50
        assert _entries_for(mason) == entries_before

    @pytest.mark.parametrize("target", ["approved", "rejected", "pending"])
    def test_rejected_is_terminal(self, mason, make_bag_lift, target):
        bag_lift = make_bag_lift(mason)
        bag_lift_service.transition(bag_lift.pk, "rejected")

        with pytest.raises(MasonmanError, match="INVALID_TRANSITION"):
            bag_lift_service.transition(bag_lift.pk, target)

    def test_approved_back_to_pending_refused(self, mason, make_bag_lift):
        bag_lift = make_bag_lift(mason)
        bag_lift_service.transition(bag_lift.pk, "approved")

        with pytest.raises(MasonmanError) as exc_info:
            bag_lift_service.transition(bag_lift.pk, "pending")

        assert exc_info.value.code == "INVALID_TRANSITION"
        bag_lift.refresh_from_db()
        assert bag_lift.status == BagLiftStatus.APPROVED


# ═══════════════════════════════════════════════════════════════════
# Lookup failures
# ═══════════════════════════════════════════════════════════════════


class TestNotFound:
    @pytest.mark.parametrize("bag_lift_id", [uuid.uuid4(), "nope"])
    def test_unknown_bag_lift(self, db, bag_lift_id):
        with pytest.raises(MasonmanError) as exc_info:
            bag_lift_service.transition(bag_lift_id, "approved")

        assert exc_info.value.code == "NOT_FOUND"
        assert exc_info.value.data["entity"] == "bag_lift"
