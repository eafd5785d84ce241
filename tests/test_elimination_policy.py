"""
Tests for the pure elimination volume policy.
"""

from datetime import datetime, timezone

import pytest

from services import elimination_policy as policy

UTC = timezone.utc


# =============================================================================
# DAYS BETWEEN
# =============================================================================


def test_days_between_same_day_is_zero_regardless_of_time():
    start = datetime(2024, 1, 8, 23, 50, tzinfo=UTC)
    end = datetime(2024, 1, 8, 0, 5, tzinfo=UTC)
    assert policy.days_between(start, end) == 0


def test_days_between_counts_calendar_days_not_hours():
    start = datetime(2024, 1, 8, 23, 59, tzinfo=UTC)
    end = datetime(2024, 1, 9, 0, 1, tzinfo=UTC)
    assert policy.days_between(start, end) == 1


def test_days_between_floors_in_the_given_zone():
    start = datetime(2024, 1, 10, 3, 0, tzinfo=UTC)  # Jan 9 22:00 in New York
    end = datetime(2024, 1, 10, 5, 0, tzinfo=UTC)  # Jan 10 00:00 in New York

    assert policy.days_between(start, end, "UTC") == 0
    assert policy.days_between(start, end, "America/New_York") == 1


def test_days_between_is_negative_before_start():
    start = datetime(2024, 1, 8, 12, 0, tzinfo=UTC)
    end = datetime(2024, 1, 6, 12, 0, tzinfo=UTC)
    assert policy.days_between(start, end) == -2


# =============================================================================
# GROUPS AND EXPECTED VOLUME
# =============================================================================


@pytest.mark.parametrize(
    "days,expected_group", [(0, 0), (2, 0), (3, 1), (5, 1), (6, 2), (7, 2), (12, 4)]
)
def test_group_number_buckets_by_group_days(days, expected_group):
    assert policy.group_number(days, 3) == expected_group


def test_expected_volume_steps_down_and_floors_at_zero():
    assert policy.expected_volume(4.0, 0, 0.5) == 4.0
    assert policy.expected_volume(4.0, 2, 0.5) == 3.0
    assert policy.expected_volume(4.0, 20, 0.5) == 0.0


def test_glide_volume_is_relative_to_rebase_point():
    # rebased to 2.0 oz at group 2: group 4 is two steps further down
    assert policy.glide_volume(2.0, 2, 4, 0.5) == 1.0
    # groups at or before the rebase point hold the baseline
    assert policy.glide_volume(2.0, 2, 1, 0.5) == 2.0


# =============================================================================
# REBASE / CLAMP DECISIONS
# =============================================================================


def test_group_zero_always_returns_baseline():
    """Recorded values never change the anchor group, whether higher or lower"""
    low = policy.resolve_volume(1.0, 4.0, 0, 0, 0.5)
    high = policy.resolve_volume(9.0, 4.0, 0, 0, 0.5)

    assert low == policy.VolumeDecision(volume=4.0, group=0, rebase=False)
    assert high == policy.VolumeDecision(volume=4.0, group=0, rebase=False)


def test_lower_recorded_volume_rebases():
    decision = policy.resolve_volume(2.0, 4.0, 0, 2, 0.5)

    assert decision.rebase is True
    assert decision.volume == 2.0
    assert decision.group == 2


def test_higher_recorded_volume_is_clamped_to_glide_path():
    decision = policy.resolve_volume(3.8, 4.0, 0, 2, 0.5)

    assert decision.rebase is False
    assert decision.volume == 3.0


def test_equal_recorded_volume_does_not_rebase():
    decision = policy.resolve_volume(3.0, 4.0, 0, 2, 0.5)
    assert decision == policy.VolumeDecision(volume=3.0, group=2, rebase=False)


def test_unrecorded_volume_reads_glide_path():
    decision = policy.resolve_volume(None, 4.0, 0, 1, 0.5)
    assert decision == policy.VolumeDecision(volume=3.5, group=1, rebase=False)
