"""Tests for shared models and timestamp parsing."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from unbonding.models import ChartSeries, UnbondingEntry, parse_completion_time


class TestParseCompletionTime:
    """Tests for RFC 3339 parsing of chain timestamps."""

    def test_zulu_suffix(self) -> None:
        assert parse_completion_time("2024-01-02T03:04:05Z") == datetime(
            2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc
        )

    def test_nanoseconds_truncated_to_microseconds(self) -> None:
        parsed = parse_completion_time("2024-01-23T11:45:17.451960577Z")
        assert parsed.microsecond == 451960

    def test_short_fraction_padded(self) -> None:
        assert parse_completion_time("2024-01-02T00:00:00.5Z").microsecond == 500000

    def test_offset_converted_to_utc(self) -> None:
        parsed = parse_completion_time("2024-01-02T01:00:00+02:00")
        assert parsed == datetime(2024, 1, 1, 23, 0, tzinfo=timezone.utc)

    def test_missing_offset_assumed_utc(self) -> None:
        assert parse_completion_time("2024-01-02T00:00:00").tzinfo == timezone.utc

    @pytest.mark.parametrize(
        "value",
        ["", "yesterday", "2024-01-02", "2024-13-45T00:00:00Z", "٢٠٢٤-01-02T00:00:00Z"],
    )
    def test_invalid_raises(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_completion_time(value)


class TestUnbondingEntry:
    """Tests for entry validation and accessors."""

    def test_amount_beyond_int64(self) -> None:
        huge = str(2**70)
        entry = UnbondingEntry(completion_time="2024-01-02T00:00:00Z", balance=huge)
        assert entry.amount == 2**70

    def test_extra_fields_ignored(self) -> None:
        entry = UnbondingEntry.model_validate(
            {
                "creation_height": "123",
                "completion_time": "2024-01-02T00:00:00Z",
                "initial_balance": "10",
                "balance": "10",
            }
        )
        assert entry.model_dump() == {
            "completion_time": "2024-01-02T00:00:00Z",
            "balance": "10",
        }

    @pytest.mark.parametrize("balance", ["-5", "1.5", "abc", "", "²", "١٢", "1 000"])
    def test_non_integer_balance_rejected(self, balance: str) -> None:
        with pytest.raises(ValidationError):
            UnbondingEntry(completion_time="2024-01-02T00:00:00Z", balance=balance)

    def test_bad_completion_time_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UnbondingEntry(completion_time="not-a-date", balance="1")


class TestChartSeries:
    def test_items_pairs_labels_and_values(self) -> None:
        series = ChartSeries(labels=["01/02", "01/03"], values=[8.0, 1.5], total=9.5)
        assert series.items() == [("01/02", 8.0), ("01/03", 1.5)]
        assert len(series) == 2

    def test_empty_defaults(self) -> None:
        series = ChartSeries()
        assert len(series) == 0
        assert series.total == 0.0
