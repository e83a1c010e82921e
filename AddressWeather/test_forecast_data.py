"""Tests for forecast_data module."""
import pytest
from forecast_data import DailyForecast, ForecastSnapshot


def test_snapshot_from_series():
    """Test building a snapshot from parallel series."""
    snapshot = ForecastSnapshot.from_series(
        78.6,
        ["2024-09-19", "2024-09-20"],
        [97.6, 95.1],
        [75.8, 74.2],
    )

    assert snapshot.current_temperature == 78.6
    assert snapshot.daily == [
        DailyForecast(date="2024-09-19", max_temperature=97.6, min_temperature=75.8),
        DailyForecast(date="2024-09-20", max_temperature=95.1, min_temperature=74.2),
    ]
    assert snapshot.dates == ["2024-09-19", "2024-09-20"]
    assert snapshot.max_temperatures == [97.6, 95.1]
    assert snapshot.min_temperatures == [75.8, 74.2]


def test_snapshot_from_series_length_mismatch():
    """Test that unequal series are rejected."""
    with pytest.raises(ValueError) as exc_info:
        ForecastSnapshot.from_series(70.0, ["2024-09-19"], [90.0, 91.0], [60.0])

    assert "length mismatch" in str(exc_info.value)


def test_snapshot_today():
    """Test today() returns the first day, or None for an empty series."""
    snapshot = ForecastSnapshot.from_series(70.0, ["2024-09-19", "2024-09-20"], [90.0, 91.0], [60.0, 61.0])
    assert snapshot.today.date == "2024-09-19"

    assert ForecastSnapshot(current_temperature=70.0).today is None


def test_snapshot_copy_is_independent():
    """Test that mutating a copy leaves the original untouched."""
    original = ForecastSnapshot.from_series(70.0, ["2024-09-19"], [90.0], [60.0])
    clone = original.copy()

    clone.current_temperature = 10.0
    clone.daily[0].max_temperature = 0.0
    clone.daily.append(DailyForecast(date="2024-09-20", max_temperature=1.0, min_temperature=0.0))

    assert original.current_temperature == 70.0
    assert original.daily[0].max_temperature == 90.0
    assert len(original.daily) == 1
    assert clone != original
