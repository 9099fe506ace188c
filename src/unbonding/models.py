"""Shared data models for the unbonding tracker.

CRITICAL: Accounting balances are Python ints parsed from decimal strings.
Never use float for on-chain amounts; floats only appear on the chart path,
after balances have been scaled to display units.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator

# Cosmos timestamps carry nanoseconds; datetime only holds microseconds.
_TIMESTAMP_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<tz>Z|[+-]\d{2}:\d{2})?$",
    re.ASCII,
)

_BALANCE_RE = re.compile(r"[0-9]+")


def parse_completion_time(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware datetime.

    Fractional seconds beyond microseconds are truncated. A timestamp
    without an offset is taken as UTC.

    Raises:
        ValueError: If the value is not an RFC 3339 timestamp.
    """
    match = _TIMESTAMP_RE.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid completion_time: {value!r}")

    text = match["base"]
    if match["fraction"]:
        text += "." + match["fraction"][:6].ljust(6, "0")
    tz = match["tz"]
    if tz is None or tz == "Z":
        tz = "+00:00"

    return datetime.fromisoformat(text + tz).astimezone(timezone.utc)


class UnbondingEntry(BaseModel):
    """One in-flight unbonding record, exactly as persisted in the snapshot.

    balance is kept as the chain's decimal string (base units) so values
    above the 64-bit range survive the JSON round trip untouched.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    completion_time: str
    balance: str

    @field_validator("balance")
    @classmethod
    def _check_balance(cls, value: str) -> str:
        if not _BALANCE_RE.fullmatch(value):
            raise ValueError(f"balance must be a non-negative integer string, got {value!r}")
        return value

    @field_validator("completion_time")
    @classmethod
    def _check_completion_time(cls, value: str) -> str:
        parse_completion_time(value)
        return value

    @property
    def amount(self) -> int:
        """Balance in base units as an arbitrary-precision int."""
        return int(self.balance)

    @property
    def completes_at(self) -> datetime:
        """Completion time as an aware UTC datetime."""
        return parse_completion_time(self.completion_time)


# moniker -> entries, in pagination order
Ledger = dict[str, list[UnbondingEntry]]


@dataclass
class Validator:
    """A validator descriptor from the staking module."""

    operator_address: str
    moniker: str


@dataclass
class ValidatorUnbonding:
    """Per-validator summary of unbonding balances.

    total is in base units; display_total is floor-divided into display units.
    """

    moniker: str
    total: int
    display_total: int
    entry_count: int


@dataclass
class AggregationResult:
    """Outcome of one aggregation run."""

    ledger: Ledger
    summaries: list[ValidatorUnbonding] = field(default_factory=list)
    grand_total: int = 0  # base units
    display_total: int = 0  # floor(grand_total / 10**exponent)
    validator_count: int = 0  # validators queried, including those without entries


@dataclass
class ChartSeries:
    """Chart-ready single series: one (label, value) pair per date, ascending.

    total is the sum of values and is the only figure used for both the
    log summary and the chart subtitle.
    """

    labels: list[str] = field(default_factory=list)
    values: list[float] = field(default_factory=list)
    total: float = 0.0

    def __len__(self) -> int:
        return len(self.labels)

    def items(self) -> list[tuple[str, float]]:
        """Return the series as (label, value) pairs."""
        return list(zip(self.labels, self.values))
