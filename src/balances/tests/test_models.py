"""Tests for balance models and display formatting."""

import pytest

from src.balances.models import (
    CurrencyBalance,
    TokenBalance,
    TokenDefinition,
    create_balance,
)


class TestCreateBalance:

    @pytest.mark.parametrize("raw,decimals,display", [
        ("0xde0b6b3a7640000", 18, "1"),
        ("0x0", 18, "0"),
        ("0x0", 0, "0"),
        ("0xf4240", 6, "1"),
        ("0x1", 18, "0.000000000000000001"),
        ("0x1bc16d674ec80000", 18, "2"),
        ("0x14d1120d7b160000", 18, "1.5"),
        ("0x64", 0, "100"),
        ("0x3e8", 2, "10"),
    ])
    def test_display_balance(self, raw, decimals, display):
        assert create_balance(raw, decimals).display_balance == display

    def test_raw_balance_is_hex(self):
        balance = create_balance(10**18, 18)
        assert balance.balance == "0xde0b6b3a7640000"
        assert balance.raw == 10**18

    def test_max_uint256_is_exact(self):
        value = 2**256 - 1
        balance = create_balance(hex(value), 18)
        whole, fraction = balance.display_balance.split(".")
        assert int(whole + fraction.ljust(18, "0")) == value

    def test_negative_balance_rejected(self):
        with pytest.raises(ValueError, match="negative"):
            create_balance(-1, 18)

    def test_negative_decimals_rejected(self):
        with pytest.raises(ValueError, match="negative"):
            create_balance("0x1", -1)


class TestTokenModels:

    def test_from_dict_accepts_token_list_keys(self):
        token = TokenDefinition.from_dict({
            "chainId": 137,
            "address": "0x" + "ab" * 20,
            "decimals": 6,
            "symbol": "USDC",
            "name": "USD Coin",
            "logoURI": "https://example.com/usdc.png",
        })

        assert token.chain_id == 137
        assert token.decimals == 6
        assert token.logo_uri == "https://example.com/usdc.png"

    def test_token_balance_keeps_definition(self):
        token = TokenDefinition(chain_id=1, address="0x" + "ab" * 20, decimals=6, symbol="USDC")

        token_balance = TokenBalance.from_token(token, create_balance("0xf4240", 6))

        assert token_balance.chain_id == token.chain_id
        assert token_balance.address == token.address
        assert token_balance.symbol == "USDC"
        assert token_balance.display_balance == "1"
        assert token_balance.to_dict()["balance"] == "0xf4240"
        assert token_balance.to_dict()["displayBalance"] == "1"

    def test_token_definition_is_immutable(self):
        token = TokenDefinition(chain_id=1, address="0x" + "ab" * 20, decimals=6)
        with pytest.raises(AttributeError):
            token.decimals = 8

    def test_negative_token_decimals_rejected(self):
        with pytest.raises(ValueError):
            TokenDefinition(chain_id=1, address="0x" + "ab" * 20, decimals=-1)

    def test_currency_balance_to_dict(self):
        balance = CurrencyBalance.from_balance(10, create_balance("0xde0b6b3a7640000", 18))
        assert balance.to_dict() == {
            "chainId": 10,
            "balance": "0xde0b6b3a7640000",
            "displayBalance": "1",
        }
