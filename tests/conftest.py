"""Shared test fixtures for the unbonding tracker."""

from pathlib import Path

import pytest

from unbonding.config import AggregatorSettings, AppSettings, ChartSettings, LcdSettings
from unbonding.models import UnbondingEntry


@pytest.fixture
def aggregator_settings(tmp_path: Path) -> AggregatorSettings:
    """AggregatorSettings writing the snapshot into a temp directory."""
    return AggregatorSettings(
        validator_page_limit=300,
        unbonding_page_limit=1000,
        follow_pagination=True,
        snapshot_path=str(tmp_path / "unbonding.json"),
    )


@pytest.fixture
def chart_settings(tmp_path: Path) -> ChartSettings:
    """ChartSettings writing the image into a temp directory, bucketing in UTC."""
    return ChartSettings(output_path=str(tmp_path / "chart.png"), timezone="UTC")


@pytest.fixture
def app_settings(
    aggregator_settings: AggregatorSettings, chart_settings: ChartSettings
) -> AppSettings:
    """Return AppSettings with test defaults (temp paths, fake LCD URL)."""
    return AppSettings(
        log_level="DEBUG",
        lcd=LcdSettings(url="https://lcd.test", timeout_seconds=5.0),
        aggregator=aggregator_settings,
        chart=chart_settings,
    )


@pytest.fixture
def sample_ledger() -> dict[str, list[UnbondingEntry]]:
    """Two validators completing on the same UTC day at different times."""
    return {
        "ValA": [
            UnbondingEntry(completion_time="2024-01-02T00:00:00Z", balance="5000000"),
        ],
        "ValB": [
            UnbondingEntry(completion_time="2024-01-02T12:00:00Z", balance="3000000"),
        ],
    }
