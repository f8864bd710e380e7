"""
Masonman bonus policy - pure calculations.

Slab bonus: extra points when a mason's cumulative bag volume crosses one
or more slab thresholds because of a single lift.

Referral bonus: one-time points for the referrer when the referee's
cumulative volume crosses the referral milestone.

Both work on the volume as it stood immediately before the lift, so the
check only reflects the delta contributed by that lift. Neither function
touches the database; the approval workflow decides when to call them.
"""

from datetime import date

from masonman.conf import masonman_settings


def _validate_volume(old_cumulative_bags: int, this_lift_bags: int) -> None:
    if old_cumulative_bags < 0:
        raise ValueError(f"old_cumulative_bags must be >= 0, got {old_cumulative_bags}")
    if this_lift_bags <= 0:
        raise ValueError(f"this_lift_bags must be > 0, got {this_lift_bags}")


def crosses(old_cumulative_bags: int, this_lift_bags: int, threshold: int) -> bool:
    """True when ``old < threshold <= old + this``."""
    return old_cumulative_bags < threshold <= old_cumulative_bags + this_lift_bags


def crossed_thresholds(
    old_cumulative_bags: int,
    this_lift_bags: int,
    thresholds,
) -> list[int]:
    """Thresholds crossed by this lift, ascending."""
    _validate_volume(old_cumulative_bags, this_lift_bags)
    return sorted(
        t for t in thresholds if crosses(old_cumulative_bags, this_lift_bags, t)
    )


def in_slab_window(
    purchase_date: date,
    starts: date | None = None,
    ends: date | None = None,
) -> bool:
    """Whether purchase_date falls in the slab campaign window (inclusive)."""
    if starts is not None and purchase_date < starts:
        return False
    if ends is not None and purchase_date > ends:
        return False
    return True


def extra_bonus_points(
    old_cumulative_bags: int,
    this_lift_bags: int,
    purchase_date: date,
    slabs=None,
    window: tuple[date | None, date | None] | None = None,
) -> int:
    """
    Slab bonus earned by a single lift.

    Args:
        old_cumulative_bags: Mason's bags_lifted before this lift
        this_lift_bags: Bags in this lift
        purchase_date: Date of the purchase (checked against the campaign window)
        slabs: Iterable of (threshold, points); defaults to SLAB_BONUSES
        window: (starts, ends); defaults to SLAB_BONUS_STARTS/SLAB_BONUS_ENDS

    Returns:
        Sum of points for every slab crossed, 0 if none or out of window.

    Raises:
        ValueError: If volumes are out of range
    """
    _validate_volume(old_cumulative_bags, this_lift_bags)

    if slabs is None:
        slabs = masonman_settings.SLAB_BONUSES
    if window is None:
        window = (masonman_settings.SLAB_BONUS_STARTS, masonman_settings.SLAB_BONUS_ENDS)

    if not in_slab_window(purchase_date, *window):
        return 0

    return sum(
        points
        for threshold, points in slabs
        if crosses(old_cumulative_bags, this_lift_bags, threshold)
    )


def referral_bonus_trigger(
    old_cumulative_bags: int,
    this_lift_bags: int,
    milestone: int | None = None,
    points: int | None = None,
) -> int:
    """
    Referral bonus owed to the referrer for this lift.

    Returns REFERRAL_BONUS_POINTS when the lift carries the referee across
    REFERRAL_MILESTONE_BAGS, otherwise 0. Payable to the referrer only.
    """
    _validate_volume(old_cumulative_bags, this_lift_bags)

    if milestone is None:
        milestone = masonman_settings.REFERRAL_MILESTONE_BAGS
    if points is None:
        points = masonman_settings.REFERRAL_BONUS_POINTS

    if crosses(old_cumulative_bags, this_lift_bags, milestone):
        return max(0, points)
    return 0
