"""Custom exceptions for the unbonding tracker.

All aggregation, snapshot and chart exceptions live here
to avoid circular imports between modules.
"""


class UnbondingError(Exception):
    """Base exception for all unbonding tracker errors."""


class QueryError(UnbondingError):
    """Raised when the staking query service is unreachable or returns a malformed response."""


class AggregationError(UnbondingError):
    """Raised when fetching or summing unbonding entries fails.

    The underlying error is always attached as ``__cause__``.
    """


class SnapshotMissingError(UnbondingError):
    """Raised when the snapshot file does not exist."""


class SnapshotFormatError(UnbondingError):
    """Raised when the snapshot file does not parse into a validator ledger."""


class ChartRenderError(UnbondingError):
    """Raised when the chart image cannot be rendered or written."""
