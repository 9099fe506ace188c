"""Abstract staking query interface.

Defines the contract the aggregator depends on. LCD-specific details
(URL layout, pagination keys, nested response groups) stay in the
concrete implementation.
"""

from abc import ABC, abstractmethod

from unbonding.models import UnbondingEntry, Validator


class StakingQueryClient(ABC):
    """Abstract base class for read-only staking query clients.

    All query methods are idempotent and safe to call repeatedly.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Open the underlying transport."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying transport."""
        ...

    @abstractmethod
    async def list_validators(
        self, page_limit: int, status: str | None = None
    ) -> list[Validator]:
        """Return the validator set in query order.

        Args:
            page_limit: Maximum number of validators requested per page.
            status: Optional bond status filter (e.g. "BOND_STATUS_BONDED").

        Raises:
            QueryError: If the service is unreachable or the response is malformed.
        """
        ...

    @abstractmethod
    async def list_unbonding_entries(
        self, validator_address: str, page_limit: int
    ) -> list[UnbondingEntry]:
        """Return every unbonding entry delegated away from a validator.

        The result is flat: per-delegator response groups are merged in
        query order. May be empty.

        Raises:
            QueryError: If the service is unreachable or the response is malformed.
        """
        ...
