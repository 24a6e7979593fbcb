"""
Fee history sampling via ``eth_feeHistory``.
"""

import logging
from typing import Any, Dict, List, Sequence, Union

from src.batchers.errors import ValidationError

from .models import FeeHistoryBlock, to_int

logger = logging.getLogger(__name__)


def shape_fee_history(fee_history: Dict[str, Any]) -> List[FeeHistoryBlock]:
    """
    Turn an ``eth_feeHistory`` response into one FeeHistoryBlock per base fee.

    ``baseFeePerGas`` holds one more entry than the other arrays: the last
    entry is the base fee of the upcoming block, which has no gas-used ratio
    and no reward samples yet.

    Raises:
        ValidationError: If the response is not a fee history
    """
    if not isinstance(fee_history, dict) or "baseFeePerGas" not in fee_history:
        raise ValidationError(f"Malformed fee history: {fee_history!r}")

    base_fees = fee_history["baseFeePerGas"] or []
    gas_used_ratios = fee_history.get("gasUsedRatio") or []
    rewards = fee_history.get("reward") or []

    blocks = []
    for i, base_fee in enumerate(base_fees):
        blocks.append(
            FeeHistoryBlock(
                base_fee=to_int(base_fee),
                gas_used_ratio=float(gas_used_ratios[i]) if i < len(gas_used_ratios) else None,
                rewards=[to_int(reward) for reward in (rewards[i] if i < len(rewards) else None) or []],
            )
        )

    return blocks


class FeeHistorySampler:
    """Requests recent block fee data from a chain."""

    def __init__(self, transport):
        self.transport = transport

    async def get_fee_history(
        self,
        block_count: int,
        reward_percentiles: Sequence[float],
        chain_id: int,
        newest_block: Union[str, int] = "latest",
    ) -> List[FeeHistoryBlock]:
        """
        Fetch and shape the fee history of the last ``block_count`` blocks.

        Args:
            block_count: Number of blocks to sample
            reward_percentiles: Priority fee percentiles sampled per block
            chain_id: Chain to query
            newest_block: Newest block of the range

        Returns:
            Blocks oldest first, ending with the upcoming block
        """
        fee_history = await self.transport.request(
            "eth_feeHistory",
            [hex(block_count), newest_block, list(reward_percentiles)],
            chain_id,
        )
        blocks = shape_fee_history(fee_history)
        logger.debug(f"Loaded fee history for {len(blocks)} blocks on chain {chain_id}")
        return blocks
