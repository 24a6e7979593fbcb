"""
Multicall3 batch caller.

Executes many read-only contract calls in one ``eth_call`` to the Multicall3
``aggregate3`` function, with ``allowFailure`` set on every call so a single
reverting target does not fail the whole batch.
"""

from typing import Iterable, List, Optional

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector
from hexbytes import HexBytes

from src.config.chains import MULTICALL3_ADDRESS

from .base import BaseBatcher, BatchCall, BatchConfig, CallResult
from .errors import BatchError, ValidationError

AGGREGATE3_SELECTOR = function_signature_to_4byte_selector(
    "aggregate3((address,bool,bytes)[])"
)


class MulticallSupport:
    """Answers whether Multicall3 can be used on a chain."""

    def __init__(self, chain_ids: Iterable[int]):
        self.chain_ids = frozenset(chain_ids)

    def supports_chain(self, chain_id: int) -> bool:
        return chain_id in self.chain_ids

    def __repr__(self) -> str:
        return f"MulticallSupport(chain_ids={sorted(self.chain_ids)})"


class MulticallBatcher(BaseBatcher):
    """
    Batch caller backed by the Multicall3 contract.

    Calls are sent in chunks of ``config.batch_size``; results come back in
    the same order as the calls.
    """

    def __init__(
        self,
        transport,
        config: Optional[BatchConfig] = None,
        multicall_address: str = MULTICALL3_ADDRESS,
    ):
        """
        Initialize the multicall batcher.

        Args:
            transport: Object exposing ``request(method, params, chain_id)``
            config: Batch configuration
            multicall_address: Multicall3 deployment address
        """
        super().__init__(transport, config)
        self.multicall_address = multicall_address

    async def batch_call(self, chain_id: int, calls: List[BatchCall]) -> List[CallResult]:
        """
        Execute calls on a chain through Multicall3.

        Args:
            chain_id: Chain to call
            calls: Calls to execute

        Returns:
            One CallResult per call, in call order

        Raises:
            BatchError: A chunk could not be executed after retries
        """
        if not calls:
            return []

        chunks = self._chunk_calls(calls)
        self.logger.debug(
            f"Executing {len(calls)} calls on chain {chain_id} in {len(chunks)} chunk(s)"
        )

        results: List[CallResult] = []
        for i, chunk in enumerate(chunks):
            try:
                raw_response = await self._retry_operation(
                    self._aggregate, chain_id, chunk
                )
                results.extend(self._decode_response(raw_response, chunk))
            except BatchError:
                raise
            except Exception as e:
                raise BatchError(
                    f"Multicall chunk {i + 1}/{len(chunks)} failed on chain {chain_id}: {e}"
                ) from e

        return results

    def _prepare_call_data(self, calls: List[BatchCall]) -> str:
        """
        Encode an aggregate3 call for the given calls.

        Raises:
            ValidationError: A call cannot be ABI-encoded, e.g. a malformed target
        """
        encoded_calls = [(call.target, True, call.call_data) for call in calls]
        try:
            encoded_args = encode(["(address,bool,bytes)[]"], [encoded_calls])
        except Exception as e:
            raise ValidationError(f"Cannot encode multicall batch: {e}") from e
        return HexBytes(AGGREGATE3_SELECTOR + encoded_args).to_0x_hex()

    async def _aggregate(self, chain_id: int, calls: List[BatchCall]) -> bytes:
        """Send one aggregate3 eth_call and return the raw response bytes."""
        call_data = self._prepare_call_data(calls)
        response = await self.transport.request(
            "eth_call",
            [{"to": self.multicall_address, "data": call_data}, "latest"],
            chain_id,
        )
        return bytes(HexBytes(response))

    def _decode_response(self, raw_response: bytes, calls: List[BatchCall]) -> List[CallResult]:
        """
        Decode an aggregate3 response into per-call results.

        Args:
            raw_response: Raw bytes returned by eth_call
            calls: Calls in the same order they were encoded

        Returns:
            One CallResult per call
        """
        try:
            (call_results,) = decode(["(bool,bytes)[]"], raw_response)
        except Exception as e:
            raise BatchError(f"Failed to decode multicall response: {e}") from e

        if len(call_results) != len(calls):
            raise BatchError(
                f"Multicall returned {len(call_results)} results for {len(calls)} calls"
            )

        return [
            self._decode_call_result(call, success, return_data)
            for call, (success, return_data) in zip(calls, call_results)
        ]

    def _decode_call_result(self, call: BatchCall, success: bool, return_data: bytes) -> CallResult:
        if not success:
            return CallResult(success=False)

        try:
            values = list(decode(call.output_types, return_data))
            if call.decoders:
                values = [
                    decoder(value) for decoder, value in zip(call.decoders, values)
                ]
            return CallResult(success=True, values=values)
        except Exception as e:
            self.logger.debug(f"Could not decode result from {call.target}: {e}")
            return CallResult(success=False)
