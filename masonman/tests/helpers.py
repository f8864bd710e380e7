"""Shared assertions for Masonman tests."""

from masonman.models import Mason
from masonman.services import ledger


def assert_balance_matches_ledger(mason: Mason) -> None:
    """Stored balance equals the sum of the mason's ledger entries."""
    mason.refresh_from_db()
    assert mason.points_balance == ledger.ledger_total(mason)
