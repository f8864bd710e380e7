"""
Masonman signals - public event API.

Emitted signals (after the transition's transaction block completes):
- bag_lift_transitioned: Emitted by services.bag_lift.transition()
- redemption_transitioned: Emitted by services.redemption.transition()
"""

from django.dispatch import Signal

# sender=BagLift, instance, source, target, ledger_entries
bag_lift_transitioned = Signal()
# sender=RewardRedemption, instance, source, target, ledger_entries
redemption_transitioned = Signal()
