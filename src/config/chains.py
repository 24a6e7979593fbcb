"""
Chain-specific configuration for balance lookups.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .base import BaseConfig

# Multicall3 is deployed at the same address on every chain listed here
MULTICALL3_ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"
MULTICALL3_DEFAULT_CHAIN_IDS = [1, 10, 56, 100, 137, 250, 8453, 42161, 43114, 11155111]


@dataclass
class ChainConfig(BaseConfig):
    """Chain-specific configuration for different EVM networks."""

    # Chain-specific RPC URLs
    ETHEREUM_RPC_URL: str = BaseConfig.get_env(
        "ETHEREUM_RPC_URL", "https://eth.llamarpc.com"
    )
    OPTIMISM_RPC_URL: str = BaseConfig.get_env(
        "OPTIMISM_RPC_URL", "https://mainnet.optimism.io"
    )
    POLYGON_RPC_URL: str = BaseConfig.get_env(
        "POLYGON_RPC_URL", "https://polygon-rpc.com"
    )
    BASE_RPC_URL: str = BaseConfig.get_env("BASE_RPC_URL", "https://mainnet.base.org")
    ARBITRUM_RPC_URL: str = BaseConfig.get_env(
        "ARBITRUM_RPC_URL", "https://arb1.arbitrum.io/rpc"
    )
    SEPOLIA_RPC_URL: str = BaseConfig.get_env(
        "SEPOLIA_RPC_URL", "https://rpc.sepolia.org"
    )

    # Chain IDs
    ETHEREUM_CHAIN_ID: int = 1
    OPTIMISM_CHAIN_ID: int = 10
    POLYGON_CHAIN_ID: int = 137
    BASE_CHAIN_ID: int = 8453
    ARBITRUM_CHAIN_ID: int = 42161
    SEPOLIA_CHAIN_ID: int = 11155111

    # Batched calls
    MULTICALL3_ADDRESS: str = BaseConfig.get_env(
        "MULTICALL3_ADDRESS", MULTICALL3_ADDRESS
    )
    MULTICALL_CHAIN_IDS: List[int] = field(
        default_factory=lambda: BaseConfig.get_env_int_list(
            "MULTICALL_CHAIN_IDS", MULTICALL3_DEFAULT_CHAIN_IDS
        )
    )
    MULTICALL_BATCH_SIZE: int = BaseConfig.get_env_int("MULTICALL_BATCH_SIZE", 500)

    # Request settings
    MAX_RETRY_ATTEMPTS: int = BaseConfig.get_env_int("MAX_RETRY_ATTEMPTS", 3)
    RETRY_DELAY_SECONDS: float = BaseConfig.get_env_float("RETRY_DELAY_SECONDS", 1.0)
    RPC_TIMEOUT_SECONDS: float = BaseConfig.get_env_float("RPC_TIMEOUT_SECONDS", 30.0)
    MAX_CONCURRENCY: int = BaseConfig.get_env_int("MAX_CONCURRENCY", 0)  # 0 = unbounded

    # Assumed for every native currency unless overridden per chain
    NATIVE_CURRENCY_DECIMALS: int = BaseConfig.get_env_int("NATIVE_CURRENCY_DECIMALS", 18)
    NATIVE_DECIMALS_BY_CHAIN: Dict[int, int] = field(default_factory=dict)

    @property
    def supported_chains(self) -> Dict[str, Dict]:
        """Get configuration for all supported chains."""
        return {
            "ethereum": {
                "chain_id": self.ETHEREUM_CHAIN_ID,
                "rpc_url": self.ETHEREUM_RPC_URL,
                "native_token": "ETH",
            },
            "optimism": {
                "chain_id": self.OPTIMISM_CHAIN_ID,
                "rpc_url": self.OPTIMISM_RPC_URL,
                "native_token": "ETH",
            },
            "polygon": {
                "chain_id": self.POLYGON_CHAIN_ID,
                "rpc_url": self.POLYGON_RPC_URL,
                "native_token": "POL",
            },
            "base": {
                "chain_id": self.BASE_CHAIN_ID,
                "rpc_url": self.BASE_RPC_URL,
                "native_token": "ETH",
            },
            "arbitrum": {
                "chain_id": self.ARBITRUM_CHAIN_ID,
                "rpc_url": self.ARBITRUM_RPC_URL,
                "native_token": "ETH",
            },
            "sepolia": {
                "chain_id": self.SEPOLIA_CHAIN_ID,
                "rpc_url": self.SEPOLIA_RPC_URL,
                "native_token": "ETH",
            },
        }

    @property
    def rpc_urls(self) -> Dict[int, str]:
        """RPC URLs keyed by chain ID."""
        return {
            chain["chain_id"]: chain["rpc_url"]
            for chain in self.supported_chains.values()
            if chain["rpc_url"]
        }

    def get_rpc_url(self, chain_id: int) -> Optional[str]:
        """Get RPC URL for a chain ID."""
        return self.rpc_urls.get(chain_id)
