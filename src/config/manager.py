"""
Configuration manager for wallet balances and gas estimation.

Groups the base, chain and gas settings behind one object that is built and
validated once per process.
"""

import logging
from typing import Dict, Any
from .base import BaseConfig, ConfigError
from .chains import ChainConfig
from .gas import GasConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Chain, gas and base settings for the balance and gas services.

    Settings are read from the environment when the manager is created.
    """

    def __init__(self, environment: str = None):
        """
        Initialize the configuration manager.

        Args:
            environment: Override the environment (local, dev, test, staging, production)
        """
        self._environment = environment
        self._base_config = None
        self._chain_config = None
        self._gas_config = None
        self._initialize_configs()

    def _initialize_configs(self):
        try:
            self._base_config = BaseConfig()
            if self._environment:
                self._base_config.ENVIRONMENT = self._environment

            self._chain_config = ChainConfig()
            self._gas_config = GasConfig()

            logger.info(f"Configuration initialized for environment: {self.environment}")

        except Exception as e:
            logger.error(f"Failed to initialize configuration: {e}")
            raise ConfigError(f"Configuration initialization failed: {e}")

    @property
    def environment(self) -> str:
        """Get current environment."""
        return self._base_config.ENVIRONMENT

    @property
    def base(self) -> BaseConfig:
        """Get base configuration."""
        return self._base_config

    @property
    def chains(self) -> ChainConfig:
        """Get chain configuration."""
        return self._chain_config

    @property
    def gas(self) -> GasConfig:
        """Get gas configuration."""
        return self._gas_config

    def validate_configuration(self) -> bool:
        """
        Check that balances can be looked up with the loaded settings.

        Returns:
            True if all configurations are valid

        Raises:
            ConfigError: If any configuration is invalid
        """
        try:
            if not self.chains.rpc_urls:
                raise ConfigError("No chains configured")

            if self.chains.MULTICALL_BATCH_SIZE < 1:
                raise ConfigError("MULTICALL_BATCH_SIZE must be at least 1")

            for chain_id in self.chains.MULTICALL_CHAIN_IDS:
                if self.chains.get_rpc_url(chain_id) is None:
                    logger.warning(f"Multicall enabled for chain {chain_id} without an RPC URL")

            logger.info("Configuration validation successful")
            return True

        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            raise ConfigError(f"Configuration validation failed: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """Settings of every section, keyed by section name."""
        return {
            "environment": self.environment,
            "base": self.base.to_dict() if self.base else {},
            "chains": self.chains.to_dict() if self.chains else {},
            "gas": self.gas.to_dict() if self.gas else {},
        }

    def __repr__(self) -> str:
        return f"ConfigManager(environment={self.environment})"


# Global configuration manager instance
_config_manager = None


def get_config(environment: str = None, force_reload: bool = False) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        environment: Override environment
        force_reload: Force reload of configuration

    Returns:
        ConfigManager instance
    """
    global _config_manager

    if _config_manager is None or force_reload:
        _config_manager = ConfigManager(environment=environment)
        _config_manager.validate_configuration()

    return _config_manager


def reload_config(environment: str = None) -> ConfigManager:
    """
    Reload the global configuration manager.

    Args:
        environment: Override environment

    Returns:
        New ConfigManager instance
    """
    return get_config(environment=environment, force_reload=True)
