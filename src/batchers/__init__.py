"""
Blockchain batch calling utilities.

This package provides batched read calls through Multicall3, reducing the
number of RPC round trips needed to read many contracts on one chain.
"""

from .base import BaseBatcher, BatchCall, BatchConfig, CallResult, encode_function_call
from .errors import (
    BatchError,
    ContractError,
    ErrorHandler,
    NetworkError,
    RateLimitError,
    RpcContractError,
    RpcError,
    RpcRateLimitError,
    ValidationError,
    rpc_error_from_payload,
)
from .multicall import MULTICALL3_ADDRESS, MulticallBatcher, MulticallSupport

__all__ = [
    'BaseBatcher',
    'BatchCall',
    'BatchConfig',
    'CallResult',
    'encode_function_call',
    'BatchError',
    'ContractError',
    'ErrorHandler',
    'NetworkError',
    'RateLimitError',
    'RpcContractError',
    'RpcError',
    'RpcRateLimitError',
    'ValidationError',
    'rpc_error_from_payload',
    'MULTICALL3_ADDRESS',
    'MulticallBatcher',
    'MulticallSupport',
]
