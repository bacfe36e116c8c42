"""Schedule time calculation for auto-scheduled interview rounds."""

from datetime import datetime
from typing import Callable, Optional

from api.services.interviews.config import AutoScheduleConfig
from core.utils import datetime as dt_utils


class ScheduleClock:
    """
    Pure calculator for interview round start times.

    The configured timezone is carried as metadata only and is never applied
    to the arithmetic. Weekend skipping moves a round to Monday without
    re-checking the spacing to the previous round.
    """

    def __init__(self, now: Optional[Callable[[], datetime]] = None):
        self._now = now or dt_utils.now

    def now(self) -> datetime:
        return self._now()

    def generate(
        self,
        base_instant: datetime,
        config: AutoScheduleConfig,
        round_count: int,
    ) -> list[datetime]:
        """
        Compute one start instant per round.

        Args:
            base_instant: Moment scheduling was triggered
            config: Campaign auto-schedule configuration
            round_count: Number of rounds to schedule

        Returns:
            Instants in round order, each on a weekday at the configured
            start time
        """
        if round_count <= 0:
            return []

        start = dt_utils.add_hours(base_instant, config.scheduling_delay_hours)
        clock_time = config.start_clock_time

        instants = []
        for i in range(round_count):
            scheduled = dt_utils.add_hours(start, config.interval_between_rounds_hours * i)
            scheduled = dt_utils.at_clock_time(scheduled, clock_time)
            scheduled = dt_utils.roll_to_weekday(scheduled)
            instants.append(scheduled)
        return instants
