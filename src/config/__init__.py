"""
Configuration management for wallet balance and gas fee lookups.

Use get_config() to access all configuration settings.

Example:
    from src.config import get_config

    config = get_config()

    # Access chain settings
    ethereum_rpc = config.chains.get_rpc_url(1)
    supports_batching = 10 in config.chains.MULTICALL_CHAIN_IDS

    # Access gas settings
    default_gas = config.gas.DEFAULT_GAS_LEVEL
"""

from .base import BaseConfig, ConfigError
from .chains import ChainConfig
from .gas import GasConfig, ONE_GWEI, parse_gas_level
from .manager import ConfigManager, get_config, reload_config

__all__ = [
    "BaseConfig",
    "ConfigError",
    "ChainConfig",
    "GasConfig",
    "ONE_GWEI",
    "parse_gas_level",
    "ConfigManager",
    "get_config",
    "reload_config",
]
