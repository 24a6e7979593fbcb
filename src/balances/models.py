"""
Data models for wallet balances.
"""

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Union

ZERO_BALANCE = "0x0"


@dataclass(frozen=True)
class Balance:
    """Raw balance (hex, authoritative) and its derived display value."""

    balance: str
    display_balance: str

    @property
    def raw(self) -> int:
        return int(self.balance, 16)


def to_display_balance(raw_balance: int, decimals: int) -> str:
    """
    Render ``raw_balance / 10**decimals`` as a plain decimal string.

    The result never uses exponent notation and carries no trailing zeros,
    e.g. ``10**18`` with 18 decimals renders as ``"1"``.
    """
    # Built from a string so the value is exact regardless of context precision
    text = format(Decimal(f"{raw_balance}E-{decimals}"), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def create_balance(raw_balance: Union[str, int], decimals: int) -> Balance:
    """
    Build a Balance from a raw amount.

    Args:
        raw_balance: Hex string (``0x``-prefixed) or integer amount
        decimals: Decimal precision of the asset

    Returns:
        Balance with a hex raw value and a display value

    Raises:
        ValueError: On negative amounts or precision
    """
    value = int(raw_balance, 16) if isinstance(raw_balance, str) else int(raw_balance)
    if value < 0:
        raise ValueError(f"Balance must not be negative, got: {raw_balance}")
    if decimals < 0:
        raise ValueError(f"Decimals must not be negative, got: {decimals}")

    return Balance(balance=hex(value), display_balance=to_display_balance(value, decimals))


@dataclass(frozen=True)
class TokenDefinition:
    """A token supplied by the token registry. Never mutated here."""

    chain_id: int
    address: str
    decimals: int
    symbol: str = ""
    name: str = ""
    logo_uri: Optional[str] = None

    def __post_init__(self):
        if self.decimals < 0:
            raise ValueError(f"Token {self.address} has negative decimals: {self.decimals}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenDefinition":
        """Build a definition from token-list style keys."""
        return cls(
            chain_id=int(data.get("chainId", data.get("chain_id"))),
            address=data["address"],
            decimals=int(data["decimals"]),
            symbol=data.get("symbol", ""),
            name=data.get("name", ""),
            logo_uri=data.get("logoURI") or data.get("logoUri") or data.get("logo_uri"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chainId": self.chain_id,
            "address": self.address,
            "decimals": self.decimals,
            "symbol": self.symbol,
            "name": self.name,
            "logoUri": self.logo_uri,
        }


@dataclass(frozen=True)
class TokenBalance(TokenDefinition):
    """A token definition enriched with its observed balance."""

    balance: str = ZERO_BALANCE
    display_balance: str = "0"

    @classmethod
    def from_token(cls, token: TokenDefinition, balance: Balance) -> "TokenBalance":
        return cls(
            chain_id=token.chain_id,
            address=token.address,
            decimals=token.decimals,
            symbol=token.symbol,
            name=token.name,
            logo_uri=token.logo_uri,
            balance=balance.balance,
            display_balance=balance.display_balance,
        )

    @property
    def raw(self) -> int:
        return int(self.balance, 16)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(balance=self.balance, displayBalance=self.display_balance)
        return data


@dataclass(frozen=True)
class CurrencyBalance:
    """Native currency balance on one chain."""

    chain_id: int
    balance: str
    display_balance: str

    @classmethod
    def from_balance(cls, chain_id: int, balance: Balance) -> "CurrencyBalance":
        return cls(chain_id=chain_id, **asdict(balance))

    @property
    def raw(self) -> int:
        return int(self.balance, 16)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chainId": self.chain_id,
            "balance": self.balance,
            "displayBalance": self.display_balance,
        }
