"""Cosmos LCD staking client implementation via httpx async.

Wraps an httpx.AsyncClient pointed at a Cosmos SDK REST gateway. Handles
page-key pagination and flattens the nested unbonding response groups
into a single entry list per validator.

LCD pagination contract:
- request:  pagination.limit=N, pagination.key=<next_key from previous page>
- response: {"pagination": {"next_key": "<base64>" | null, "total": "..."}}
"""

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from unbonding.chain.client import StakingQueryClient
from unbonding.config import LcdSettings
from unbonding.exceptions import QueryError
from unbonding.logging import get_logger
from unbonding.models import UnbondingEntry, Validator

logger = get_logger(__name__)

T = TypeVar("T")

VALIDATORS_PATH = "/cosmos/staking/v1beta1/validators"
UNBONDING_PATH = "/cosmos/staking/v1beta1/validators/{address}/unbonding_delegations"


class LcdStakingClient(StakingQueryClient):
    """Concrete staking query client for a Cosmos LCD endpoint."""

    def __init__(
        self,
        settings: LcdSettings,
        follow_pagination: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._follow_pagination = follow_pagination
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the shared HTTP client."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self._settings.url,
            timeout=self._settings.timeout_seconds,
            transport=self._transport,
        )
        logger.info("lcd_client_initialized", url=self._settings.url)

    async def close(self) -> None:
        """Close the shared HTTP client."""
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        logger.info("lcd_client_closed")

    async def __aenter__(self) -> "LcdStakingClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def list_validators(
        self, page_limit: int, status: str | None = None
    ) -> list[Validator]:
        """Fetch the validator set, following page keys if enabled."""
        params: dict[str, Any] = {}
        if status:
            params["status"] = status

        validators = await self._fetch_paginated(
            VALIDATORS_PATH, params, page_limit, self._parse_validators
        )
        logger.debug("fetched_validators", count=len(validators))
        return validators

    async def list_unbonding_entries(
        self, validator_address: str, page_limit: int
    ) -> list[UnbondingEntry]:
        """Fetch and flatten all unbonding entries for one validator."""
        path = UNBONDING_PATH.format(address=validator_address)
        entries = await self._fetch_paginated(
            path, {}, page_limit, self._parse_unbonding_entries
        )
        logger.debug(
            "fetched_unbonding_entries",
            validator=validator_address,
            count=len(entries),
        )
        return entries

    # ──────────────────────────────────────────────
    # Pagination
    # ──────────────────────────────────────────────

    async def _fetch_paginated(
        self,
        path: str,
        params: dict[str, Any],
        page_limit: int,
        parse_page: Callable[[dict], list[T]],
    ) -> list[T]:
        """Walk FORWARD through pages until next_key is empty.

        With follow_pagination disabled only the first page is read.
        """
        results: list[T] = []
        page_key: str | None = None
        seen_keys: set[str] = set()

        while True:
            page_params = {**params, "pagination.limit": str(page_limit)}
            if page_key:
                page_params["pagination.key"] = page_key

            payload = await self._get_json(path, page_params)
            results.extend(parse_page(payload))

            if not self._follow_pagination:
                break

            pagination = payload.get("pagination") or {}
            if not isinstance(pagination, dict):
                raise QueryError(f"LCD response for {path} has a non-object 'pagination'")
            page_key = pagination.get("next_key")
            if not page_key:
                break
            if not isinstance(page_key, str):
                raise QueryError(f"LCD response for {path} has a non-string next_key")
            if page_key in seen_keys:
                raise QueryError(f"LCD returned a repeated page key for {path}")
            seen_keys.add(page_key)

        return results

    async def _get_json(self, path: str, params: dict[str, Any]) -> dict:
        """GET a path and decode the JSON object body.

        Transport failures, HTTP error statuses and non-object bodies all
        surface as QueryError with the original exception chained.
        """
        if self._client is None:
            raise QueryError("LCD client is not connected; call connect() first")

        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise QueryError(
                f"LCD request {path} failed with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise QueryError(f"LCD request {path} failed: {e}") from e
        except ValueError as e:
            raise QueryError(f"LCD response for {path} is not valid JSON") from e

        if not isinstance(payload, dict):
            raise QueryError(f"LCD response for {path} is not a JSON object")
        return payload

    # ──────────────────────────────────────────────
    # Response parsing
    # ──────────────────────────────────────────────

    @staticmethod
    def _parse_validators(payload: dict) -> list[Validator]:
        raw_validators = payload.get("validators")
        if not isinstance(raw_validators, list):
            raise QueryError("LCD validators response has no 'validators' list")

        validators = []
        for raw in raw_validators:
            try:
                address = raw["operator_address"]
                moniker = (raw.get("description") or {}).get("moniker") or ""
            except (KeyError, TypeError, AttributeError) as e:
                raise QueryError(f"Malformed validator record: {raw!r}") from e
            validators.append(Validator(operator_address=address, moniker=moniker))
        return validators

    @staticmethod
    def _parse_unbonding_entries(payload: dict) -> list[UnbondingEntry]:
        groups = payload.get("unbonding_responses")
        if groups is None:
            return []
        if not isinstance(groups, list):
            raise QueryError("LCD unbonding response has a non-list 'unbonding_responses'")

        entries = []
        for group in groups:
            try:
                raw_entries = group.get("entries") or []
                entries.extend(UnbondingEntry.model_validate(raw) for raw in raw_entries)
            except (ValidationError, AttributeError, TypeError) as e:
                raise QueryError(f"Malformed unbonding entry: {e}") from e
        return entries
