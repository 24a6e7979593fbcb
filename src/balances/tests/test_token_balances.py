"""Tests for token balance aggregation."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from eth_abi import encode
from hexbytes import HexBytes

from src.balances.models import TokenDefinition, create_balance
from src.balances.tokens import (
    BalanceStrategy,
    TokenBalanceAggregator,
    encode_balance_of,
)
from src.batchers import (
    BatchConfig,
    BatchError,
    CallResult,
    MulticallBatcher,
    MulticallSupport,
    NetworkError,
    RpcError,
    ValidationError,
)


def encoded_uint(value):
    """A balanceOf eth_call result."""
    return HexBytes(encode(["uint256"], [value])).to_0x_hex()


def succeeded(value, decimals):
    return CallResult(success=True, values=[create_balance(value, decimals)])


def route_calls(responses):
    """Transport side effect answering eth_call by target address."""

    async def request(method, params, chain_id):
        assert method == "eth_call"
        response = responses[params[0]["to"]]
        if isinstance(response, Exception):
            raise response
        return response

    return request


class TestTokenBalanceAggregator:
    """Test cases for TokenBalanceAggregator."""

    @pytest.fixture
    def batcher(self):
        batcher = AsyncMock()
        batcher.batch_call = AsyncMock()
        return batcher

    @pytest.fixture
    def aggregator(self, transport, batcher):
        return TokenBalanceAggregator(transport, batcher, MulticallSupport([1, 10]))

    def test_strategy_per_chain(self, aggregator):
        assert aggregator.strategy_for(1) is BalanceStrategy.MULTICALL
        assert aggregator.strategy_for(250) is BalanceStrategy.CONTRACT_CALLS

    @pytest.mark.asyncio
    async def test_results_follow_chain_groups_and_input_order(
        self, aggregator, transport, batcher, owner, tokens
    ):
        async def batch_call(chain_id, calls):
            if chain_id == 1:
                return [succeeded(1_000_000, 6), succeeded(10**18, 18)]
            return [succeeded(2 * 10**18, 18), succeeded(5_000_000, 6)]

        batcher.batch_call.side_effect = batch_call
        transport.request.side_effect = route_calls({tokens[3].address: encoded_uint(10**8)})

        balances = await aggregator.get_token_balances(owner, tokens)

        assert [(b.chain_id, b.address) for b in balances] == [
            (1, tokens[0].address),
            (1, tokens[2].address),
            (10, tokens[1].address),
            (10, tokens[4].address),
            (250, tokens[3].address),
        ]
        assert [b.display_balance for b in balances] == ["1", "1", "2", "5", "1"]
        assert {(b.chain_id, b.address) for b in balances} == {
            (t.chain_id, t.address) for t in tokens
        }

    @pytest.mark.asyncio
    async def test_failed_batched_call_yields_zero_for_that_token_only(
        self, aggregator, batcher, owner, tokens
    ):
        chain_tokens = [tokens[0], tokens[2]]
        batcher.batch_call.return_value = [
            CallResult(success=False),
            succeeded(3 * 10**18, 18),
        ]

        balances = await aggregator.get_token_balances(owner, chain_tokens)

        assert balances[0].balance == "0x0"
        assert balances[0].display_balance == "0"
        assert balances[0].decimals == 6
        assert balances[1].display_balance == "3"

    @pytest.mark.asyncio
    async def test_batched_calls_encode_balance_of_owner(
        self, aggregator, batcher, owner, tokens
    ):
        batcher.batch_call.return_value = [succeeded(0, 6), succeeded(0, 18)]

        await aggregator.get_token_balances(owner, [tokens[0], tokens[2]])

        chain_id, calls = batcher.batch_call.call_args.args
        assert chain_id == 1
        assert [call.target for call in calls] == [tokens[0].address, tokens[2].address]
        assert all(call.call_data == encode_balance_of(owner) for call in calls)
        assert calls[0].decoders[0](1_500_000).display_balance == "1.5"

    @pytest.mark.asyncio
    async def test_unsupported_chain_never_uses_batcher(
        self, aggregator, transport, batcher, owner, tokens
    ):
        transport.request.side_effect = route_calls({tokens[3].address: encoded_uint(42)})

        balances = await aggregator.get_token_balances(owner, [tokens[3]])

        batcher.batch_call.assert_not_awaited()
        assert balances[0].balance == hex(42)

    @pytest.mark.asyncio
    async def test_contract_call_failures_are_isolated(self, transport, batcher, owner, tokens):
        aggregator = TokenBalanceAggregator(transport, batcher, MulticallSupport([]))
        transport.request.side_effect = route_calls({
            tokens[0].address: NetworkError("connection refused"),
            tokens[1].address: encoded_uint(7 * 10**18),
            tokens[2].address: "0x",
            tokens[3].address: RpcError("eth_call", {"code": 3, "message": "execution reverted"}),
            tokens[4].address: None,
        })

        balances = await aggregator.get_token_balances(owner, tokens)

        by_symbol = {b.symbol: b for b in balances}
        assert by_symbol["OP"].display_balance == "7"
        for symbol in ("USDC", "DAI", "WBTC", "USDT"):
            assert by_symbol[symbol].balance == "0x0"
        batcher.batch_call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_contract_call_request_shape(self, transport, batcher, owner, tokens):
        aggregator = TokenBalanceAggregator(transport, batcher, MulticallSupport([]))
        transport.request.return_value = encoded_uint(1)

        await aggregator.get_token_balances(owner, [tokens[3]])

        method, params, chain_id = transport.request.call_args.args
        assert method == "eth_call"
        assert chain_id == 250
        assert params[0]["to"] == tokens[3].address
        assert params[0]["value"] == "0x0"
        assert params[0]["data"] == HexBytes(encode_balance_of(owner)).to_0x_hex()
        assert params[1] == "latest"

    @pytest.mark.asyncio
    async def test_batch_failure_falls_back_to_contract_calls(
        self, aggregator, transport, batcher, owner, tokens
    ):
        batcher.batch_call.side_effect = BatchError("multicall unavailable")
        transport.request.side_effect = route_calls({
            tokens[0].address: encoded_uint(2_000_000),
            tokens[2].address: NetworkError("timeout"),
        })

        balances = await aggregator.get_token_balances(owner, [tokens[0], tokens[2]])

        assert [b.display_balance for b in balances] == ["2", "0"]

    @pytest.mark.asyncio
    async def test_malformed_token_address_falls_back_without_retry(
        self, transport, owner, tokens
    ):
        malformed = TokenDefinition(chain_id=1, address="0xnot-an-address", decimals=18)
        batcher = MulticallBatcher(transport, BatchConfig(max_retries=3, retry_delay=1.0))
        aggregator = TokenBalanceAggregator(transport, batcher, MulticallSupport([1]))
        transport.request.side_effect = route_calls({
            tokens[0].address: encoded_uint(5_000_000),
            malformed.address: RpcError("eth_call", {"code": -32602, "message": "invalid argument"}, 1),
        })

        with patch("src.batchers.base.asyncio.sleep", new=AsyncMock()) as mock_sleep:
            balances = await aggregator.get_token_balances(owner, [tokens[0], malformed])

        assert [b.display_balance for b in balances] == ["5", "0"]
        mock_sleep.assert_not_awaited()
        assert transport.request.await_count == 2

    @pytest.mark.asyncio
    async def test_invalid_owner_is_rejected(self, aggregator, transport, batcher, tokens):
        with pytest.raises(ValidationError):
            await aggregator.get_token_balances("not-an-address", tokens)

        transport.request.assert_not_awaited()
        batcher.batch_call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_tokens(self, aggregator, owner):
        assert await aggregator.get_token_balances(owner, []) == []

    @pytest.mark.asyncio
    async def test_concurrency_cap(self, transport, batcher, owner, tokens):
        aggregator = TokenBalanceAggregator(
            transport, batcher, MulticallSupport([]), max_concurrency=2
        )
        in_flight = 0
        peak = 0

        async def request(method, params, chain_id):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0)
            in_flight -= 1
            return encoded_uint(1)

        transport.request.side_effect = request

        balances = await aggregator.get_token_balances(owner, tokens)

        assert len(balances) == len(tokens)
        assert peak <= 2


class TestTokenBalancesThroughMulticall:
    """Aggregator wired to a real MulticallBatcher."""

    @pytest.mark.asyncio
    async def test_multicall_round_trip(self, transport, owner, tokens):
        batcher = MulticallBatcher(transport, BatchConfig(retry_delay=0))
        aggregator = TokenBalanceAggregator(transport, batcher, MulticallSupport([1]))
        transport.request.return_value = HexBytes(
            encode(
                ["(bool,bytes)[]"],
                [[(True, encode(["uint256"], [2_500_000])), (False, b"")]],
            )
        ).to_0x_hex()

        balances = await aggregator.get_token_balances(owner, [tokens[0], tokens[2]])

        assert transport.request.await_count == 1
        assert balances[0].display_balance == "2.5"
        assert balances[0].balance == hex(2_500_000)
        assert balances[1].balance == "0x0"
