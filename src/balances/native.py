"""
Native currency balance lookups.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from src.core.rpc import to_hex_chain_id

from .models import ZERO_BALANCE, CurrencyBalance, create_balance

logger = logging.getLogger(__name__)

# TODO: do all native currencies have 18 decimals? Override per chain until confirmed.
NATIVE_CURRENCY_DECIMALS = 18


class NativeCurrencyBalanceFetcher:
    """Fetches the native coin balance of an address on many chains."""

    def __init__(
        self,
        transport,
        native_decimals: int = NATIVE_CURRENCY_DECIMALS,
        native_decimals_by_chain: Optional[Dict[int, int]] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            transport: Object exposing ``request(method, params, chain_id)``
            native_decimals: Precision assumed for every native currency
            native_decimals_by_chain: Per-chain precision overrides
        """
        self.transport = transport
        self.native_decimals = native_decimals
        self.native_decimals_by_chain = dict(native_decimals_by_chain or {})
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def decimals_for(self, chain_id: int) -> int:
        return self.native_decimals_by_chain.get(chain_id, self.native_decimals)

    async def get_currency_balances(
        self, address: str, chain_ids: Sequence[int]
    ) -> List[CurrencyBalance]:
        """
        Get the native balance of ``address`` on each chain.

        The result has one entry per chain, in input order; chains that fail
        report a zero balance.
        """
        return list(
            await asyncio.gather(
                *(self.get_currency_balance(address, chain_id) for chain_id in chain_ids)
            )
        )

    async def get_currency_balance(self, address: str, chain_id: int) -> CurrencyBalance:
        decimals = self.decimals_for(chain_id)
        try:
            raw_balance = await self.transport.request(
                "eth_getBalance", [address, "latest"], chain_id
            )
            return CurrencyBalance.from_balance(chain_id, create_balance(raw_balance, decimals))
        except Exception as e:
            self.logger.error(
                f"error loading native currency balance for chain id: "
                f"{chain_id} ({to_hex_chain_id(chain_id)}): {e}"
            )
            return CurrencyBalance.from_balance(chain_id, create_balance(ZERO_BALANCE, decimals))
