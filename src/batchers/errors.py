"""
Error handling utilities for RPC and batch calling operations.

This module provides specialized exception classes and error handling
utilities used by the transport, the multicall batcher and the balance
services.
"""

from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)


class BatchError(Exception):
    """Base exception for batch operations."""
    pass


class RateLimitError(BatchError):
    """Raised when rate limit is hit."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class NetworkError(BatchError):
    """Raised when network-related errors occur."""
    pass


class ContractError(BatchError):
    """Raised when contract-related errors occur."""
    pass


class ValidationError(BatchError):
    """Raised when input validation fails."""
    pass


class RpcError(BatchError):
    """
    Raised when a node answers a JSON-RPC request with an error member.

    The node's error payload is kept unchanged on ``error``.
    """

    def __init__(self, method: str, error: Any, chain_id: Optional[int] = None):
        self.method = method
        self.error = error
        self.chain_id = chain_id
        message = error.get("message", error) if isinstance(error, dict) else error
        super().__init__(f"{method} failed on chain {chain_id}: {message}")

    @property
    def code(self) -> Optional[int]:
        """JSON-RPC error code, when the node supplied one."""
        if isinstance(self.error, dict):
            return self.error.get("code")
        return None


class RpcRateLimitError(RpcError, RateLimitError):
    """Node error payload reporting that the request rate was exceeded."""
    pass


class RpcContractError(RpcError, ContractError):
    """Node error payload reporting that the call reverted."""
    pass


# EIP-1474 "limit exceeded" and providers echoing the HTTP status
RATE_LIMIT_RPC_CODES = (-32005, 429)
# Reverts carrying revert data
REVERT_RPC_CODES = (3,)


def rpc_error_from_payload(method: str, error: Any, chain_id: Optional[int] = None) -> RpcError:
    """
    Build the RpcError matching a node's error payload.

    Rate limit and revert payloads map to subclasses so that retry handling
    can tell them apart; the payload itself is kept unchanged.
    """
    code = error.get("code") if isinstance(error, dict) else None
    message = str(error.get("message", "") if isinstance(error, dict) else error).lower()

    if code in RATE_LIMIT_RPC_CODES or "rate limit" in message or "too many requests" in message:
        return RpcRateLimitError(method, error, chain_id)
    if code in REVERT_RPC_CODES or "execution reverted" in message:
        return RpcContractError(method, error, chain_id)
    return RpcError(method, error, chain_id)


class ErrorHandler:
    """
    Centralized error handling for batch operations.

    Provides classification, logging, and recovery strategies
    for various types of errors encountered during batch calls.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def classify_error(self, error: Exception) -> str:
        """
        Classify an error into a category for appropriate handling.

        Args:
            error: Exception to classify

        Returns:
            Error category string
        """
        if isinstance(error, RateLimitError):
            return 'rate_limit'
        if isinstance(error, ValidationError):
            return 'validation'
        if isinstance(error, ContractError):
            return 'contract'

        error_str = str(error).lower()

        # Rate limiting errors
        if any(keyword in error_str for keyword in ['rate limit', 'too many requests', '429']):
            return 'rate_limit'

        # Network connectivity errors
        if isinstance(error, NetworkError) or any(
            keyword in error_str for keyword in ['connection', 'timeout', 'network', 'dns']
        ):
            return 'network'

        # Contract execution errors
        if any(keyword in error_str for keyword in ['revert', 'execution reverted', 'out of gas']):
            return 'contract'

        # Validation errors
        if any(keyword in error_str for keyword in ['invalid', 'bad request', '400']):
            return 'validation'

        return 'unknown'

    def should_retry(self, error: Exception, attempt: int, max_retries: int) -> bool:
        """
        Determine if an error should trigger a retry.

        Args:
            error: Exception that occurred
            attempt: Current attempt number (0-based)
            max_retries: Maximum number of retries allowed

        Returns:
            True if operation should be retried
        """
        if attempt >= max_retries:
            return False

        error_category = self.classify_error(error)

        # Retry network and rate limit errors
        if error_category in ['network', 'rate_limit', 'unknown']:
            return True

        # Validation and contract errors are deterministic
        return False

    def get_retry_delay(self, error: Exception, attempt: int, base: float = 1.0) -> float:
        """
        Calculate appropriate retry delay based on error type and attempt.

        Args:
            error: Exception that occurred
            attempt: Current attempt number (0-based)
            base: Delay of the first retry in seconds

        Returns:
            Delay in seconds before retry
        """
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            return error.retry_after

        error_category = self.classify_error(error)

        # Base exponential backoff
        base_delay = min(base * 2 ** attempt, 60)  # Cap at 60 seconds

        # Rate limit errors get longer delays
        if error_category == 'rate_limit':
            return base_delay * 2

        # Network errors get standard backoff
        if error_category == 'network':
            return base_delay

        # Unknown errors get conservative delay
        return base_delay * 1.5

    def log_error(self, error: Exception, context: Dict[str, Any]):
        """
        Log error with appropriate level and context.

        Args:
            error: Exception to log
            context: Additional context for logging
        """
        error_category = self.classify_error(error)

        log_data = {
            'error_type': type(error).__name__,
            'error_category': error_category,
            'error_message': str(error),
            **context
        }

        # Log validation errors as warnings
        if error_category == 'validation':
            self.logger.warning("Validation error occurred", extra=log_data)
        # Log contract errors as errors
        elif error_category == 'contract':
            self.logger.error("Contract execution failed", extra=log_data)
        # Log rate limit as info (expected)
        elif error_category == 'rate_limit':
            self.logger.info("Rate limit encountered", extra=log_data)
        # Everything else as warning
        else:
            self.logger.warning("Batch operation error", extra=log_data)
