"""Unbonding aggregation pipeline.

Queries the validator set, then each validator's unbonding delegations
one at a time, builds the moniker -> entries ledger, sums balances in
base units and commits the ledger to the snapshot store.

CRITICAL: Balance sums are exact ints. The snapshot write is the single
commit point -- nothing is written unless every validator was processed.
"""

import asyncio
import time

from unbonding.chain.client import StakingQueryClient
from unbonding.config import AggregatorSettings
from unbonding.exceptions import AggregationError
from unbonding.logging import get_logger
from unbonding.models import (
    AggregationResult,
    Ledger,
    UnbondingEntry,
    Validator,
    ValidatorUnbonding,
)
from unbonding.snapshot import SnapshotStore

logger = get_logger(__name__)


def sum_balances(entries: list[UnbondingEntry]) -> int:
    """Sum entry balances as arbitrary-precision ints (base units)."""
    return sum((entry.amount for entry in entries), 0)


def to_display_units(amount: int, exponent: int) -> int:
    """Floor a base-unit amount into whole display units (e.g. uscrt -> SCRT)."""
    return amount // 10**exponent


def ledger_key(ledger: Ledger, validator: Validator) -> str:
    """Return the ledger key for a validator.

    Monikers are not unique; a repeated moniker is qualified with the
    operator address so neither validator's entries are overwritten.
    """
    if validator.moniker not in ledger:
        return validator.moniker
    return f"{validator.moniker} [{validator.operator_address}]"


class UnbondingAggregator:
    """Builds and persists the per-validator unbonding ledger.

    Usage:
        aggregator = UnbondingAggregator(client, store, settings)
        result = await aggregator.aggregate()
    """

    def __init__(
        self,
        client: StakingQueryClient,
        store: SnapshotStore,
        settings: AggregatorSettings,
    ) -> None:
        self._client = client
        self._store = store
        self._settings = settings

    async def fetch_validators(self) -> list[Validator]:
        """Fetch the validator set in query order."""
        validators = await self._client.list_validators(
            self._settings.validator_page_limit,
            status=self._settings.validator_status,
        )
        logger.info("validators_fetched", count=len(validators))
        return validators

    async def fetch_unbonding_entries_for(
        self, validator_address: str
    ) -> list[UnbondingEntry]:
        """Fetch the flat unbonding entry list for one validator."""
        return await self._client.list_unbonding_entries(
            validator_address, self._settings.unbonding_page_limit
        )

    async def build_ledger(self, validators: list[Validator]) -> Ledger:
        """Query validators strictly in order; omit those without entries."""
        ledger: Ledger = {}

        for i, validator in enumerate(validators, 1):
            entries = await self.fetch_unbonding_entries_for(
                validator.operator_address
            )
            logger.debug(
                "validator_queried",
                moniker=validator.moniker,
                progress=f"{i}/{len(validators)}",
                entries=len(entries),
            )
            if entries:
                ledger[ledger_key(ledger, validator)] = entries

        return ledger

    def summarize(self, ledger: Ledger, validator_count: int) -> AggregationResult:
        """Sum balances per validator and overall, in base units."""
        exponent = self._settings.display_exponent
        summaries = []
        grand_total = 0

        for moniker, entries in ledger.items():
            total = sum_balances(entries)
            grand_total += total
            summaries.append(
                ValidatorUnbonding(
                    moniker=moniker,
                    total=total,
                    display_total=to_display_units(total, exponent),
                    entry_count=len(entries),
                )
            )

        return AggregationResult(
            ledger=ledger,
            summaries=summaries,
            grand_total=grand_total,
            display_total=to_display_units(grand_total, exponent),
            validator_count=validator_count,
        )

    async def aggregate(self) -> AggregationResult:
        """Run the full aggregation and commit the snapshot.

        Raises:
            AggregationError: If fetching or summing fails. The snapshot is
                left untouched in that case.
        """
        start_time = time.monotonic()

        try:
            validators = await self.fetch_validators()
            ledger = await self.build_ledger(validators)
            result = self.summarize(ledger, len(validators))
        except Exception as e:
            logger.error("aggregation_failed", error=str(e))
            raise AggregationError(f"Unbonding aggregation failed: {e}") from e

        self._report(result)

        await asyncio.to_thread(self._store.write, result.ledger)

        logger.info(
            "aggregation_complete",
            duration_seconds=round(time.monotonic() - start_time, 2),
        )
        return result

    def _report(self, result: AggregationResult) -> None:
        denom = self._settings.denom
        for summary in result.summaries:
            logger.info(
                "validator_unbonding",
                moniker=summary.moniker,
                balance=f"{summary.display_total:,}",
                denom=denom,
                unbonding_responses=summary.entry_count,
            )
        logger.info(
            "total_unbonding",
            total=f"{result.display_total:,}",
            denom=denom,
            validators=result.validator_count,
        )
