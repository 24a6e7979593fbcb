"""
Base classes for blockchain batch calling.

This module provides abstract interfaces for executing many read-only
contract calls against one chain in as few RPC round trips as possible.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector

from .errors import ErrorHandler

logger = logging.getLogger(__name__)


@dataclass
class BatchCall:
    """One encoded read call plus the decoders applied to its return values."""

    target: str
    call_data: bytes
    output_types: List[str] = field(default_factory=lambda: ["uint256"])
    decoders: List[Callable[[Any], Any]] = field(default_factory=list)


@dataclass
class CallResult:
    """Outcome of a single call inside a batch."""

    success: bool
    values: Optional[List[Any]] = None

    @property
    def failed(self) -> bool:
        """Check if the call failed."""
        return not self.success


@dataclass
class BatchConfig:
    """Configuration for batch operations."""

    batch_size: int = 500
    max_retries: int = 3
    retry_delay: float = 1.0


def encode_function_call(signature: str, arg_types: Sequence[str], args: Sequence[Any]) -> bytes:
    """
    Encode call data for a contract function.

    Args:
        signature: Canonical signature, e.g. ``balanceOf(address)``
        arg_types: ABI types of the arguments
        args: Argument values

    Returns:
        4-byte selector followed by the ABI-encoded arguments
    """
    return function_signature_to_4byte_selector(signature) + encode(list(arg_types), list(args))


class BaseBatcher(ABC):
    """
    Abstract base class for blockchain batch operations.

    Provides chunking and retry handling shared by concrete batchers.
    """

    def __init__(self, transport, config: Optional[BatchConfig] = None):
        self.transport = transport
        self.config = config or BatchConfig()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.error_handler = ErrorHandler(self.logger)

    @abstractmethod
    async def batch_call(self, chain_id: int, calls: List[BatchCall]) -> List[CallResult]:
        """
        Execute the calls against one chain.

        Args:
            chain_id: Chain to call
            calls: Calls to execute

        Returns:
            One CallResult per call, in call order
        """
        pass

    def _chunk_calls(self, calls: List[BatchCall]) -> List[List[BatchCall]]:
        """Split calls into chunks based on batch_size."""
        chunk_size = max(self.config.batch_size, 1)
        return [calls[i : i + chunk_size] for i in range(0, len(calls), chunk_size)]

    async def _retry_operation(self, operation, *args, **kwargs) -> Any:
        """Retry an operation with exponential backoff and intelligent error handling."""
        last_error = None

        for attempt in range(self.config.max_retries):
            try:
                return await operation(*args, **kwargs)
            except Exception as e:
                last_error = e

                self.error_handler.log_error(
                    e,
                    {
                        "attempt": attempt + 1,
                        "max_retries": self.config.max_retries,
                        "operation": operation.__name__
                        if hasattr(operation, "__name__")
                        else str(operation),
                    },
                )

                if not self.error_handler.should_retry(
                    e, attempt, self.config.max_retries
                ):
                    self.logger.info(f"Not retrying error: {e}")
                    raise

                if attempt == self.config.max_retries - 1:
                    raise

                delay = self.error_handler.get_retry_delay(
                    e, attempt, self.config.retry_delay
                )
                self.logger.info(
                    f"Retrying in {delay}s... (attempt {attempt + 1}/{self.config.max_retries})"
                )
                await asyncio.sleep(delay)

        if last_error:
            raise last_error
