"""Pytest fixtures for Masonman tests."""

from datetime import date

import pytest
from django.db import transaction

from masonman.models import (
    BagLift,
    Mason,
    Reward,
    RewardRedemption,
    SourceType,
)
from masonman.services import ledger


@pytest.fixture
def referrer(db):
    """Mason who introduced other masons."""
    return Mason.objects.create(code="MSN-REF", name="Ramesh Kumar")


@pytest.fixture
def mason(db):
    """Mason with an opening balance of 1000 points and no lifts."""
    m = Mason.objects.create(code="MSN-001", name="Suresh Yadav")
    ledger.adjust(m.code, 1000, "Opening balance")
    m.refresh_from_db()
    return m


@pytest.fixture
def referred_mason(db, referrer):
    """Referred mason sitting at 180 lifetime bags."""
    return Mason.objects.create(
        code="MSN-002",
        name="Anil Verma",
        bags_lifted=180,
        referred_by=referrer,
    )


@pytest.fixture
def make_bag_lift(db):
    """Factory for pending bag lifts."""

    def _make(mason, bag_count=50, points_credited=100, **kwargs):
        kwargs.setdefault("purchase_date", date(2025, 6, 1))
        return BagLift.objects.create(
            mason=mason,
            bag_count=bag_count,
            points_credited=points_credited,
            **kwargs,
        )

    return _make


@pytest.fixture
def reward(db):
    """Reward with 10 units in stock."""
    return Reward.objects.create(
        name="Trowel Set",
        point_cost=100,
        stock=10,
        total_available_quantity=10,
    )


@pytest.fixture
def place_redemption(db):
    """
    Factory for placed redemptions.

    Debits the points the way order placement does before the order
    reaches this app.
    """

    def _place(mason, reward, quantity=1):
        points = reward.point_cost * quantity
        with transaction.atomic():
            locked = Mason.objects.select_for_update().get(pk=mason.pk)
            ledger.append(locked, SourceType.ADJUSTMENT, None, -points, "Redemption placed")
        return RewardRedemption.objects.create(
            mason=mason,
            reward=reward,
            quantity=quantity,
            points_debited=points,
            delivery_name=mason.name,
            delivery_phone="9876543210",
            delivery_address="12 MG Road, Lucknow",
        )

    return _place
