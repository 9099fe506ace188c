"""Turns a ledger snapshot into a per-day chart series.

Validator identity and time of day are discarded: every entry lands in
the bucket of its completion date in the display timezone. Values on this
path are floats in display units -- the exact accounting total lives in
the aggregator, not here.
"""

import asyncio
from datetime import date, tzinfo
from zoneinfo import ZoneInfo

from unbonding.chart.render import ChartStyle, format_total_label, render
from unbonding.config import ChartSettings
from unbonding.logging import get_logger
from unbonding.models import ChartSeries, Ledger
from unbonding.snapshot import SnapshotStore

logger = get_logger(__name__)

# ISO date string -> display-unit balances completing that day
DateBuckets = dict[str, list[float]]


def bucket_by_date(
    ledger: Ledger, tz: tzinfo, exponent: int = 6
) -> DateBuckets:
    """Group every ledger entry by its completion date in ``tz``.

    Keys are ISO dates ("2024-01-02"); values keep ledger order.
    """
    scale = 10**exponent
    buckets: DateBuckets = {}

    for entries in ledger.values():
        for entry in entries:
            day = entry.completes_at.astimezone(tz).date().isoformat()
            buckets.setdefault(day, []).append(entry.amount / scale)

    return buckets


def to_chart_series(buckets: DateBuckets) -> ChartSeries:
    """Sort buckets chronologically and sum each into one series value.

    Sorting compares real dates, then formats "MM/DD" labels.
    """
    ordered = sorted(buckets.items(), key=lambda item: date.fromisoformat(item[0]))

    labels = [date.fromisoformat(day).strftime("%m/%d") for day, _ in ordered]
    values = [sum(balances) for _, balances in ordered]

    return ChartSeries(labels=labels, values=values, total=sum(values))


class ChartBuilder:
    """Loads the snapshot, builds the series and renders the chart image.

    Usage:
        builder = ChartBuilder(store, settings, denom="SCRT")
        series = await builder.build()
    """

    def __init__(
        self,
        store: SnapshotStore,
        settings: ChartSettings,
        denom: str = "SCRT",
        exponent: int = 6,
    ) -> None:
        self._store = store
        self._settings = settings
        self._denom = denom
        self._exponent = exponent
        self._tz = ZoneInfo(settings.timezone)

    def load_snapshot(self) -> Ledger:
        """Read the ledger written by the aggregator."""
        return self._store.load()

    def build_series(self, ledger: Ledger) -> ChartSeries:
        buckets = bucket_by_date(ledger, self._tz, self._exponent)
        return to_chart_series(buckets)

    async def build(self) -> ChartSeries:
        """Run the full chart pass: load, bucket, sort, render.

        Raises:
            SnapshotMissingError: If no snapshot exists.
            SnapshotFormatError: If the snapshot cannot be parsed.
            ChartRenderError: If the image cannot be produced.
        """
        ledger = await asyncio.to_thread(self.load_snapshot)
        series = self.build_series(ledger)
        total_label = format_total_label(series.total, self._denom)

        logger.info(
            "chart_series_built",
            days=len(series),
            total=total_label,
        )

        style = ChartStyle.from_settings(self._settings)
        await asyncio.to_thread(
            render, series, total_label, self._settings.output_path, style
        )
        return series
