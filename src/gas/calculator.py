"""
Gas calculator.

Estimates EIP-1559 fees from recent block history and gas limits through
``eth_estimateGas``. Fee estimation never fails: when history cannot be used
it falls back to the configured default gas level.
"""

import logging
import math
from fractions import Fraction
from typing import Any, Dict, List, Optional

from src.config import ONE_GWEI, parse_gas_level

from .fee_history import FeeHistorySampler
from .models import Eip1559GasFees, FeeHistoryBlock, to_int

logger = logging.getLogger(__name__)

# Maximum base fee increase from one block to the next
BASE_FEE_MAX_CHANGE = Fraction(9, 8)
# Blocks of base fee growth covered by the estimate
BASE_FEE_HEADROOM_BLOCKS = 2

MIN_ELIGIBLE_GAS_USED_RATIO = 0.1
MAX_ELIGIBLE_GAS_USED_RATIO = 0.9

FEE_HISTORY_BLOCKS = 10
FEE_HISTORY_PERCENTILE = 10


def max_base_fee(next_block_fee: int, blocks: int = BASE_FEE_HEADROOM_BLOCKS) -> int:
    """Base fee after ``blocks`` consecutive maximal increases, rounded up."""
    return math.ceil(next_block_fee * BASE_FEE_MAX_CHANGE ** blocks)


def is_eligible(block: FeeHistoryBlock) -> bool:
    """Blocks that are neither almost empty nor almost full."""
    return (
        block.gas_used_ratio is not None
        and MIN_ELIGIBLE_GAS_USED_RATIO <= block.gas_used_ratio <= MAX_ELIGIBLE_GAS_USED_RATIO
    )


def median_reward(blocks: List[FeeHistoryBlock], default: int = ONE_GWEI) -> int:
    """Lower median of the first reward sample of each eligible block."""
    rewards = sorted(block.rewards[0] for block in blocks if is_eligible(block) and block.rewards)
    if not rewards:
        return default
    return rewards[len(rewards) // 2]


class GasCalculator:
    """Gas price, gas limit and EIP-1559 fee estimates for one chain."""

    def __init__(
        self,
        transport,
        default_gas_level: str,
        chain_id: int = 1,
        block_count: int = FEE_HISTORY_BLOCKS,
        reward_percentile: float = FEE_HISTORY_PERCENTILE,
    ):
        """
        Initialize the calculator.

        Args:
            transport: Object exposing ``request(method, params, chain_id)``
            default_gas_level: 0x-prefixed hex fallback gas level in wei
            chain_id: Chain whose fee history is sampled
            block_count: Number of recent blocks to sample
            reward_percentile: Priority fee percentile sampled per block

        Raises:
            ConfigError: If ``default_gas_level`` is not a 0x-prefixed hex string
        """
        self.transport = transport
        self.default_gas_level = hex(parse_gas_level(default_gas_level))
        self.chain_id = chain_id
        self.block_count = block_count
        self.reward_percentile = reward_percentile
        self.fee_history = FeeHistorySampler(transport)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @classmethod
    def from_config(cls, config, transport, chain_id: Optional[int] = None) -> "GasCalculator":
        gas = config.gas
        return cls(
            transport,
            gas.DEFAULT_GAS_LEVEL,
            chain_id=chain_id if chain_id is not None else gas.DEFAULT_CHAIN_ID,
            block_count=gas.FEE_HISTORY_BLOCKS,
            reward_percentile=gas.FEE_HISTORY_PERCENTILE,
        )

    def get_gas_price(self, raw_tx: Optional[Dict[str, Any]] = None) -> str:
        return self.default_gas_level

    async def get_gas_estimate(self, raw_tx: Dict[str, Any]) -> str:
        """
        Estimate the gas limit of a transaction.

        Args:
            raw_tx: Transaction fields; ``chainId`` selects the target chain

        Returns:
            Hex-encoded gas limit

        Raises:
            RpcError: The node rejected the simulation, with its error payload
        """
        chain_id = to_int(raw_tx["chainId"]) if raw_tx.get("chainId") is not None else self.chain_id
        return await self.transport.request("eth_estimateGas", [raw_tx], chain_id)

    async def get_fee_per_gas(self) -> Eip1559GasFees:
        """
        Estimate EIP-1559 fees from recent blocks.

        The max base fee covers two full blocks, each raising the base fee by
        12.5%. The priority fee is the lower median of the sampled rewards of
        blocks that were neither almost empty nor almost full.
        """
        try:
            blocks = await self.fee_history.get_fee_history(
                self.block_count, [self.reward_percentile], self.chain_id
            )

            next_block_fee = blocks[-1].base_fee  # base fee for next block
            calculated_fee = max_base_fee(next_block_fee)
            priority_fee = median_reward(blocks)

            return Eip1559GasFees.from_values(calculated_fee, priority_fee)
        except Exception as e:
            default_gas = self.default_fees()
            self.logger.warning(
                f"could not load fee history, using default {default_gas.to_dict()}: {e}"
            )
            return default_gas

    def default_fees(self) -> Eip1559GasFees:
        return Eip1559GasFees.from_values(int(self.default_gas_level, 16), ONE_GWEI)
