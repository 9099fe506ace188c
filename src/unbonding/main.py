"""Entry point for the unbonding tracker.

Runs the two passes strictly in sequence:
1. UnbondingAggregator -- query the LCD and commit the ledger snapshot
2. ChartBuilder -- read the snapshot and render the per-day chart

Any UnbondingError aborts the run with exit status 1.
"""

import asyncio
import sys
import time

from unbonding.aggregator import UnbondingAggregator
from unbonding.chain.client import StakingQueryClient
from unbonding.chain.lcd_client import LcdStakingClient
from unbonding.chart.builder import ChartBuilder
from unbonding.config import AppSettings
from unbonding.exceptions import UnbondingError
from unbonding.logging import bind_run_context, get_logger, setup_logging
from unbonding.models import AggregationResult, ChartSeries
from unbonding.snapshot import SnapshotStore


async def run(
    settings: AppSettings, client: StakingQueryClient | None = None
) -> tuple[AggregationResult, ChartSeries]:
    """Aggregate unbonding entries, then chart them.

    Args:
        settings: Application-wide settings.
        client: Optional pre-built query client; defaults to an LcdStakingClient.

    Returns:
        The aggregation result and the rendered chart series.
    """
    logger = get_logger("unbonding.main")
    start_time = time.monotonic()

    store = SnapshotStore(settings.aggregator.snapshot_path)
    client = client or LcdStakingClient(
        settings.lcd, follow_pagination=settings.aggregator.follow_pagination
    )

    await client.connect()
    try:
        aggregator = UnbondingAggregator(client, store, settings.aggregator)
        result = await aggregator.aggregate()
    finally:
        await client.close()

    builder = ChartBuilder(
        store,
        settings.chart,
        denom=settings.aggregator.denom,
        exponent=settings.aggregator.display_exponent,
    )
    series = await builder.build()

    logger.info(
        "run_complete",
        total_time_seconds=round(time.monotonic() - start_time, 2),
    )
    return result, series


def main() -> None:
    """Synchronous entry point."""
    settings = AppSettings()
    setup_logging(settings.log_level, settings.log_format)
    bind_run_context(settings.lcd.url, settings.aggregator.snapshot_path)
    logger = get_logger("unbonding.main")

    try:
        asyncio.run(run(settings))
    except UnbondingError as e:
        logger.error(
            "run_failed",
            error_type=type(e).__name__,
            error=str(e),
            cause=repr(e.__cause__) if e.__cause__ else None,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
