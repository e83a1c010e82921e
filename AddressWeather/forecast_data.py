"""Forecast domain model - pure data structures independent of any API."""
import copy
from dataclasses import dataclass, field
from typing import List, Optional, Sequence


@dataclass
class DailyForecast:
    """High/low temperatures for one calendar day."""
    date: str  # ISO date, e.g. "2024-09-19"
    max_temperature: float
    min_temperature: float


@dataclass
class ForecastSnapshot:
    """Current temperature plus the multi-day outlook for one location."""
    current_temperature: float
    daily: List[DailyForecast] = field(default_factory=list)  # chronological

    @classmethod
    def from_series(
        cls,
        current_temperature: float,
        dates: Sequence[str],
        maxes: Sequence[float],
        mins: Sequence[float],
    ) -> "ForecastSnapshot":
        """
        Build a snapshot from parallel date/max/min sequences.

        Raises:
            ValueError: If the sequences differ in length
        """
        if not len(dates) == len(maxes) == len(mins):
            raise ValueError(
                f"Daily series length mismatch: {len(dates)} dates, "
                f"{len(maxes)} maxes, {len(mins)} mins"
            )
        daily = [
            DailyForecast(date=d, max_temperature=float(hi), min_temperature=float(lo))
            for d, hi, lo in zip(dates, maxes, mins)
        ]
        return cls(current_temperature=float(current_temperature), daily=daily)

    @property
    def dates(self) -> List[str]:
        return [day.date for day in self.daily]

    @property
    def max_temperatures(self) -> List[float]:
        return [day.max_temperature for day in self.daily]

    @property
    def min_temperatures(self) -> List[float]:
        return [day.min_temperature for day in self.daily]

    @property
    def today(self) -> Optional[DailyForecast]:
        """First day of the series, or None if the upstream sent no days."""
        return self.daily[0] if self.daily else None

    def copy(self) -> "ForecastSnapshot":
        """Return an independent deep copy."""
        return copy.deepcopy(self)
