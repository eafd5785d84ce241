"""
Elimination (weaning) volume policy.

Volume steps down by a fixed decrement every `group_days` local calendar
days counted from the elimination start. Group 0 is the anchor group and
always holds the baseline. For later groups a recorded volume below the
glide path rebases the block to that (volume, group) point; a recorded
volume at or above the glide path is clamped down to it.

Expected volumes are measured from the block's current rebase point:
    expected = max(0, baseline - max(0, group - current_group) * decrement)
Groups at or before the rebase point therefore read the baseline itself.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from services import timezone_service


@dataclass(frozen=True)
class VolumeDecision:
    """Outcome of applying the policy to one entry"""

    volume: float
    group: int
    rebase: bool = False


def days_between(start: datetime, end: datetime, zone: str = "UTC") -> int:
    """
    Whole local calendar days from `start` to `end`.

    Both instants are floored to local midnight in `zone` first, so two
    instants on the same local day give 0 whatever their times of day.
    """
    return (
        timezone_service.local_date(end, zone) - timezone_service.local_date(start, zone)
    ).days


def group_number(days_since_start: int, group_days: int) -> int:
    """Index of the `group_days`-long bucket containing `days_since_start`"""
    return days_since_start // group_days


def expected_volume(baseline: float, group: int, decrement: float) -> float:
    """Volume `group` steps below `baseline`, never negative"""
    return max(0.0, baseline - group * decrement)


def glide_volume(
    baseline: float, current_group: int, group: int, decrement: float
) -> float:
    """Expected volume for `group` measured from the rebase point `current_group`"""
    return expected_volume(baseline, max(0, group - current_group), decrement)


def resolve_volume(
    recorded: Optional[float],
    baseline: float,
    current_group: int,
    group: int,
    decrement: float,
) -> VolumeDecision:
    """
    Decide what volume to store for an entry in `group`.

    Args:
        recorded: Volume supplied by the caller or already stored; None when
            nothing has been recorded
        baseline: Block baseline volume
        current_group: Group the baseline is anchored at
        group: Group of the entry being resolved (>= 0)
        decrement: Ounces removed per group

    Returns:
        VolumeDecision; `rebase` is set when the block's baseline and current
        group must move to (`volume`, `group`)
    """
    if group == 0:
        return VolumeDecision(volume=baseline, group=0)

    expected = glide_volume(baseline, current_group, group, decrement)
    if recorded is not None and recorded < expected:
        return VolumeDecision(volume=recorded, group=group, rebase=True)
    return VolumeDecision(volume=expected, group=group)
