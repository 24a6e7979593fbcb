"""Shared fixtures for balance tests."""
from unittest.mock import AsyncMock

import pytest

from src.balances.models import TokenDefinition

OWNER = "0x" + "11" * 20


@pytest.fixture
def owner():
    return OWNER


@pytest.fixture
def transport():
    """Transport double exposing request(method, params, chain_id)."""
    transport = AsyncMock()
    transport.request = AsyncMock()
    return transport


@pytest.fixture
def tokens():
    """Tokens on three chains, interleaved."""
    return [
        TokenDefinition(chain_id=1, address="0x" + "a1" * 20, decimals=6, symbol="USDC"),
        TokenDefinition(chain_id=10, address="0x" + "b1" * 20, decimals=18, symbol="OP"),
        TokenDefinition(chain_id=1, address="0x" + "a2" * 20, decimals=18, symbol="DAI"),
        TokenDefinition(chain_id=250, address="0x" + "c1" * 20, decimals=8, symbol="WBTC"),
        TokenDefinition(chain_id=10, address="0x" + "b2" * 20, decimals=6, symbol="USDT"),
    ]
