"""
Balance service facade.

Composes the token aggregator and the native currency fetcher behind the two
public balance operations.
"""

import logging
from typing import List, Optional, Sequence

from src.batchers import BatchConfig, MulticallBatcher, MulticallSupport
from src.config import ConfigManager, get_config
from src.core.rpc import RpcTransport

from .models import CurrencyBalance, TokenBalance, TokenDefinition
from .native import NativeCurrencyBalanceFetcher
from .tokens import TokenBalanceAggregator

logger = logging.getLogger(__name__)


class BalanceService:
    """Currency and token balances for a wallet across chains."""

    def __init__(
        self,
        token_aggregator: TokenBalanceAggregator,
        currency_fetcher: NativeCurrencyBalanceFetcher,
    ):
        self.token_aggregator = token_aggregator
        self.currency_fetcher = currency_fetcher

    @classmethod
    def from_config(
        cls,
        config: Optional[ConfigManager] = None,
        transport: Optional[RpcTransport] = None,
    ) -> "BalanceService":
        """
        Build a service wired from configuration.

        Args:
            config: Configuration manager (defaults to the global one)
            transport: Transport to reuse (defaults to a new RpcTransport)
        """
        config = config or get_config()
        chains = config.chains
        transport = transport or RpcTransport(chains)

        batcher = MulticallBatcher(
            transport,
            BatchConfig(
                batch_size=chains.MULTICALL_BATCH_SIZE,
                max_retries=max(chains.MAX_RETRY_ATTEMPTS, 1),
                retry_delay=chains.RETRY_DELAY_SECONDS,
            ),
            multicall_address=chains.MULTICALL3_ADDRESS,
        )
        token_aggregator = TokenBalanceAggregator(
            transport,
            batcher,
            MulticallSupport(chains.MULTICALL_CHAIN_IDS),
            max_concurrency=chains.MAX_CONCURRENCY or None,
        )
        currency_fetcher = NativeCurrencyBalanceFetcher(
            transport,
            native_decimals=chains.NATIVE_CURRENCY_DECIMALS,
            native_decimals_by_chain=chains.NATIVE_DECIMALS_BY_CHAIN,
        )

        logger.debug(f"Balance service created with {token_aggregator.multicall_support}")
        return cls(token_aggregator, currency_fetcher)

    async def get_currency_balances(
        self, address: str, chain_ids: Sequence[int]
    ) -> List[CurrencyBalance]:
        """Native balance of ``address`` on each chain, in input order."""
        return await self.currency_fetcher.get_currency_balances(address, chain_ids)

    async def get_token_balances(
        self, owner: str, tokens: Sequence[TokenDefinition]
    ) -> List[TokenBalance]:
        """Balances of ``owner`` for every token, grouped by chain."""
        return await self.token_aggregator.get_token_balances(owner, tokens)
