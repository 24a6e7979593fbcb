"""
JSON-RPC transport to EVM nodes.
"""

from .transport import RpcTransport, to_hex_chain_id

__all__ = ["RpcTransport", "to_hex_chain_id"]
