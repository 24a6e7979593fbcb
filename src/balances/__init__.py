"""
Wallet balance lookups across EVM chains.

Example:
    from src.balances import BalanceService, TokenDefinition

    service = BalanceService.from_config()
    currency = await service.get_currency_balances(address, [1, 10])
    tokens = await service.get_token_balances(address, [
        TokenDefinition(chain_id=1, address=usdc, decimals=6, symbol="USDC"),
    ])
"""

from .grouping import group_by_chain, relevant_balances
from .models import (
    ZERO_BALANCE,
    Balance,
    CurrencyBalance,
    TokenBalance,
    TokenDefinition,
    create_balance,
)
from .native import NATIVE_CURRENCY_DECIMALS, NativeCurrencyBalanceFetcher
from .service import BalanceService
from .tokens import BalanceStrategy, TokenBalanceAggregator

__all__ = [
    "ZERO_BALANCE",
    "Balance",
    "CurrencyBalance",
    "TokenBalance",
    "TokenDefinition",
    "create_balance",
    "group_by_chain",
    "relevant_balances",
    "NATIVE_CURRENCY_DECIMALS",
    "NativeCurrencyBalanceFetcher",
    "BalanceService",
    "BalanceStrategy",
    "TokenBalanceAggregator",
]
