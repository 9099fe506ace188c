"""Staking query layer -- Cosmos LCD integration via httpx."""

from unbonding.chain.client import StakingQueryClient
from unbonding.chain.lcd_client import LcdStakingClient

__all__ = ["LcdStakingClient", "StakingQueryClient"]
