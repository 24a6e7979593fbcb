"""
JSON-RPC transport shared by the balance and gas services.

Requests are routed to a node per chain ID through ``web3.AsyncWeb3``
providers, which are created lazily from the chain configuration.
"""

import logging
from typing import Any, Dict, List, Optional

import aiohttp
from web3 import AsyncWeb3
from web3.types import RPCEndpoint

from src.batchers.errors import (
    NetworkError,
    RateLimitError,
    RpcError,
    ValidationError,
    rpc_error_from_payload,
)
from src.config import ChainConfig

logger = logging.getLogger(__name__)


def to_hex_chain_id(chain_id: int) -> str:
    """Render a chain ID the way nodes report it (``eth_chainId``)."""
    return hex(chain_id)


def parse_retry_after(headers) -> Optional[float]:
    """Seconds from a ``Retry-After`` header, None when absent or given as a date."""
    value = headers.get("Retry-After") if headers else None
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


class RpcTransport:
    """
    Request/response transport to EVM nodes, one provider per chain.

    Methods raise ``RpcError`` when the node returns an error member,
    ``RateLimitError`` on HTTP 429 and ``NetworkError`` when the request
    itself fails.
    """

    def __init__(
        self,
        chains: Optional[ChainConfig] = None,
        providers: Optional[Dict[int, AsyncWeb3]] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the transport.

        Args:
            chains: Chain configuration supplying RPC URLs
            providers: Pre-built AsyncWeb3 instances keyed by chain ID
            timeout: Per-request timeout in seconds
        """
        self.chains = chains or ChainConfig()
        self.timeout = timeout if timeout is not None else self.chains.RPC_TIMEOUT_SECONDS
        self._web3_by_chain: Dict[int, AsyncWeb3] = dict(providers or {})
        self._request_id = 0
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def get_web3(self, chain_id: int) -> AsyncWeb3:
        """Return the AsyncWeb3 instance for a chain, creating it on first use."""
        if chain_id not in self._web3_by_chain:
            rpc_url = self.chains.get_rpc_url(chain_id)
            if not rpc_url:
                raise ValidationError(f"No RPC URL configured for chain {chain_id}")

            self.logger.debug(f"Creating provider for chain {chain_id}: {rpc_url}")
            self._web3_by_chain[chain_id] = AsyncWeb3(
                AsyncWeb3.AsyncHTTPProvider(
                    rpc_url,
                    request_kwargs={"timeout": aiohttp.ClientTimeout(total=self.timeout)},
                )
            )

        return self._web3_by_chain[chain_id]

    async def request(self, method: str, params: List[Any], chain_id: int) -> Any:
        """
        Send a JSON-RPC request to a chain and return its result.

        Args:
            method: JSON-RPC method name (e.g. ``eth_call``)
            params: Positional parameters
            chain_id: Target chain

        Returns:
            The ``result`` member of the response

        Raises:
            RpcError: The node answered with an error payload
            RateLimitError: The node rejected the request with HTTP 429
            NetworkError: The request could not be completed
            ValidationError: The chain has no RPC URL configured
        """
        web3 = self.get_web3(chain_id)
        self._request_id += 1

        self.logger.debug(
            f"RPC request #{self._request_id} {method} on chain {to_hex_chain_id(chain_id)}"
        )

        try:
            response = await web3.provider.make_request(RPCEndpoint(method), params)
        except aiohttp.ClientResponseError as e:
            if e.status == 429:
                raise RateLimitError(
                    f"{method} request to chain {chain_id} was rate limited: {e}",
                    retry_after=parse_retry_after(e.headers),
                ) from e
            raise NetworkError(f"{method} request to chain {chain_id} failed: {e}") from e
        except Exception as e:
            raise NetworkError(f"{method} request to chain {chain_id} failed: {e}") from e

        if not isinstance(response, dict):
            raise RpcError(method, {"message": f"malformed response: {response!r}"}, chain_id)

        if response.get("error") is not None:
            raise rpc_error_from_payload(method, response["error"], chain_id)

        return response.get("result")

    async def close(self):
        """Disconnect all providers created by this transport."""
        for chain_id, web3 in self._web3_by_chain.items():
            try:
                await web3.provider.disconnect()
            except Exception as e:
                self.logger.warning(f"Failed to disconnect provider for chain {chain_id}: {e}")
        self._web3_by_chain.clear()
