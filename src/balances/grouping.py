"""
Helpers for arranging token collections.
"""

from typing import Dict, Iterable, List

from .models import TokenBalance, TokenDefinition


def group_by_chain(tokens: Iterable[TokenDefinition]) -> Dict[int, List[TokenDefinition]]:
    """
    Partition tokens by chain ID.

    Chains are keyed in the order their first token appears and tokens keep
    their relative input order within a chain.
    """
    grouped: Dict[int, List[TokenDefinition]] = {}
    for token in tokens:
        grouped.setdefault(token.chain_id, []).append(token)
    return grouped


def relevant_balances(
    balances: List[TokenBalance], token_balances: Iterable[TokenBalance]
) -> List[TokenBalance]:
    """Return ``balances`` extended with the token balances that are non-zero."""
    return [*balances, *(token for token in token_balances if token.raw > 0)]
