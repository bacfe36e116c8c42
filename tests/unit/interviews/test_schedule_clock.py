"""
Tests for interview round start time calculation.
"""

import pytest
from datetime import datetime, timezone

from api.services.interviews.clock import ScheduleClock
from api.services.interviews.config import AutoScheduleConfig


def utc(year, month, day, hour=0, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


# 2025-01-15 is a Wednesday
WEDNESDAY = utc(2025, 1, 15, 9, 0)
THURSDAY = utc(2025, 1, 16, 9, 0)


class TestScheduleGeneration:
    """Start instants for consecutive rounds."""

    def test_two_rounds_with_default_config(self):
        instants = ScheduleClock().generate(WEDNESDAY, AutoScheduleConfig(), 2)

        assert instants == [utc(2025, 1, 16, 10, 0), utc(2025, 1, 17, 10, 0)]

    def test_round_count_matches(self):
        instants = ScheduleClock().generate(WEDNESDAY, AutoScheduleConfig(), 5)
        assert len(instants) == 5

    def test_zero_rounds(self):
        assert ScheduleClock().generate(WEDNESDAY, AutoScheduleConfig(), 0) == []

    def test_saturday_moves_to_monday(self):
        instants = ScheduleClock().generate(WEDNESDAY, AutoScheduleConfig(), 3)

        assert instants[2] == utc(2025, 1, 20, 10, 0)
        assert instants[2].weekday() == 0

    def test_weekend_rounds_collapse_onto_monday(self):
        """Skipping the weekend does not re-space the rounds that follow."""
        instants = ScheduleClock().generate(THURSDAY, AutoScheduleConfig(), 3)

        assert instants == [
            utc(2025, 1, 17, 10, 0),
            utc(2025, 1, 20, 10, 0),
            utc(2025, 1, 20, 10, 0),
        ]

    def test_every_instant_is_weekday_at_start_time(self):
        config = AutoScheduleConfig(default_start_time="14:30", interval_between_rounds_hours=13)
        instants = ScheduleClock().generate(utc(2025, 1, 17, 22, 45, 12), config, 8)

        for instant in instants:
            assert instant.weekday() < 5
            assert (instant.hour, instant.minute, instant.second, instant.microsecond) == (14, 30, 0, 0)

    def test_zero_delay_keeps_same_day(self):
        """The start time replaces the time of day even if it is earlier than now."""
        config = AutoScheduleConfig(scheduling_delay_hours=0)
        instants = ScheduleClock().generate(utc(2025, 1, 15, 15, 0), config, 1)

        assert instants == [utc(2025, 1, 15, 10, 0)]

    def test_timezone_is_not_applied(self):
        utc_config = AutoScheduleConfig(timezone="UTC")
        ny_config = AutoScheduleConfig(timezone="America/New_York")

        clock = ScheduleClock()
        assert clock.generate(WEDNESDAY, utc_config, 3) == clock.generate(WEDNESDAY, ny_config, 3)

    @pytest.mark.parametrize("interval,expected_days", [
        (24, [16, 17]),
        (48, [16, 20]),  # second round would be Saturday
        (72, [16, 20]),  # second round would be Sunday
    ])
    def test_interval_between_rounds(self, interval, expected_days):
        config = AutoScheduleConfig(interval_between_rounds_hours=interval)
        instants = ScheduleClock().generate(WEDNESDAY, config, 2)

        assert [instant.day for instant in instants] == expected_days


class TestClockNow:
    def test_injected_now(self):
        clock = ScheduleClock(now=lambda: WEDNESDAY)
        assert clock.now() == WEDNESDAY

    def test_default_now_is_utc(self):
        assert ScheduleClock().now().tzinfo is not None
