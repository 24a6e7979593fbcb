"""
ERC-20 token balance aggregation across chains.

Each chain's tokens are read either through one Multicall3 batch or, on
chains without Multicall3, with one ``eth_call`` per token. A failing token
or chain never fails the whole lookup; its balance is reported as zero.
"""

import asyncio
import logging
from enum import Enum
from typing import List, Optional, Sequence

from eth_abi import decode
from hexbytes import HexBytes
from web3 import Web3

from src.batchers import BatchCall, MulticallBatcher, MulticallSupport, encode_function_call
from src.batchers.errors import ValidationError

from .grouping import group_by_chain
from .models import ZERO_BALANCE, TokenBalance, TokenDefinition, create_balance

logger = logging.getLogger(__name__)

BALANCE_OF_SIGNATURE = "balanceOf(address)"


class BalanceStrategy(Enum):
    """How a chain's token balances are read."""

    MULTICALL = "multicall"
    CONTRACT_CALLS = "contract_calls"


def encode_balance_of(owner: str) -> bytes:
    """Call data for ``balanceOf(owner)``."""
    return encode_function_call(BALANCE_OF_SIGNATURE, ["address"], [owner])


def validate_address(address: str) -> str:
    """
    Normalize an account address to its checksum form.

    Raises:
        ValidationError: If the address is malformed
    """
    if not isinstance(address, str) or not Web3.is_address(address):
        raise ValidationError(f"Invalid address: {address!r}")
    return Web3.to_checksum_address(address)


class TokenBalanceAggregator:
    """
    Reads token balances for one owner across many chains.

    Chains are processed concurrently; within a chain the strategy is chosen
    once from the multicall capability of that chain.
    """

    def __init__(
        self,
        transport,
        batcher: MulticallBatcher,
        multicall_support: MulticallSupport,
        max_concurrency: Optional[int] = None,
    ):
        """
        Initialize the aggregator.

        Args:
            transport: Object exposing ``request(method, params, chain_id)``
            batcher: Batch caller used on multicall chains
            multicall_support: Capability oracle deciding the strategy per chain
            max_concurrency: Cap on concurrent per-token calls, None for no cap
        """
        self.transport = transport
        self.batcher = batcher
        self.multicall_support = multicall_support
        self._semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def strategy_for(self, chain_id: int) -> BalanceStrategy:
        if self.multicall_support.supports_chain(chain_id):
            return BalanceStrategy.MULTICALL
        return BalanceStrategy.CONTRACT_CALLS

    async def get_token_balances(
        self, owner: str, tokens: Sequence[TokenDefinition]
    ) -> List[TokenBalance]:
        """
        Get balances of ``owner`` for every token.

        Args:
            owner: Account address
            tokens: Token definitions, possibly spanning several chains

        Returns:
            One TokenBalance per token, grouped by chain in first-seen order

        Raises:
            ValidationError: If ``owner`` is not a valid address
        """
        owner = validate_address(owner)
        tokens_by_chain = group_by_chain(tokens)

        chain_balances = await asyncio.gather(
            *(
                self._get_chain_balances(owner, chain_id, chain_tokens)
                for chain_id, chain_tokens in tokens_by_chain.items()
            )
        )

        return [balance for balances in chain_balances for balance in balances]

    async def _get_chain_balances(
        self, owner: str, chain_id: int, tokens: List[TokenDefinition]
    ) -> List[TokenBalance]:
        strategy = self.strategy_for(chain_id)
        self.logger.debug(
            f"Loading {len(tokens)} token balances on chain {chain_id} via {strategy.value}"
        )

        if strategy is BalanceStrategy.MULTICALL:
            return await self.get_balances_from_multicall(owner, chain_id, tokens)
        return await self.get_balances_from_contracts(owner, tokens)

    async def get_balances_from_multicall(
        self, owner: str, chain_id: int, tokens: List[TokenDefinition]
    ) -> List[TokenBalance]:
        """Read all balances on one chain in a single batch."""
        calls = [self._balance_call(owner, token) for token in tokens]

        try:
            results = await self.batcher.batch_call(chain_id, calls)
        except Exception as e:
            self.logger.warning(
                f"Multicall failed on chain {chain_id}, falling back to contract calls: {e}"
            )
            return await self.get_balances_from_contracts(owner, tokens)

        balances = []
        for token, result in zip(tokens, results):
            if result.success:
                balance = result.values[0]
            else:
                self.logger.warning(
                    f"Could not load balance for token {token.address} on chain {chain_id}"
                )
                balance = create_balance(ZERO_BALANCE, token.decimals)
            balances.append(TokenBalance.from_token(token, balance))

        return balances

    async def get_balances_from_contracts(
        self, owner: str, tokens: List[TokenDefinition]
    ) -> List[TokenBalance]:
        """Read each balance with its own eth_call, concurrently."""
        raw_balances = await asyncio.gather(
            *(self._get_token_balance(owner, token) for token in tokens)
        )
        return [
            TokenBalance.from_token(token, create_balance(raw_balance, token.decimals))
            for token, raw_balance in zip(tokens, raw_balances)
        ]

    def _balance_call(self, owner: str, token: TokenDefinition) -> BatchCall:
        return BatchCall(
            target=token.address,
            call_data=encode_balance_of(owner),
            output_types=["uint256"],
            decoders=[lambda value, decimals=token.decimals: create_balance(value, decimals)],
        )

    async def _get_token_balance(self, owner: str, token: TokenDefinition) -> str:
        """Raw hex balance of one token, ``0x0`` when it cannot be loaded."""
        try:
            if self._semaphore:
                async with self._semaphore:
                    response = await self._call_balance_of(owner, token)
            else:
                response = await self._call_balance_of(owner, token)

            (value,) = decode(["uint256"], bytes(HexBytes(response)))
            return hex(value)
        except Exception as e:
            self.logger.warning(
                f"could not load balance for token with address {token.address}: {e}"
            )
            return ZERO_BALANCE

    async def _call_balance_of(self, owner: str, token: TokenDefinition):
        call_data = HexBytes(encode_balance_of(owner)).to_0x_hex()
        return await self.transport.request(
            "eth_call",
            [{"to": token.address, "value": "0x0", "data": call_data}, "latest"],
            token.chain_id,
        )
