"""
Gas fee estimation settings.
"""

from dataclasses import dataclass

from .base import BaseConfig, ConfigError

ONE_GWEI = 10**9


def parse_gas_level(value: str) -> int:
    """
    Parse a gas level given as a ``0x``-prefixed hex quantity of wei.

    Raises:
        ConfigError: If the value is not a ``0x``-prefixed hex string
    """
    if not isinstance(value, str) or not value.lower().startswith("0x"):
        raise ConfigError(f"Gas level must be a 0x-prefixed hex string, got: {value!r}")
    try:
        return int(value, 16)
    except ValueError:
        raise ConfigError(f"Gas level must be a 0x-prefixed hex string, got: {value!r}")


@dataclass
class GasConfig(BaseConfig):
    """Defaults used by the gas calculator."""

    # Hex-encoded wei, returned by get_gas_price and used as the fallback base fee
    DEFAULT_GAS_LEVEL: str = BaseConfig.get_env("DEFAULT_GAS_LEVEL", hex(ONE_GWEI))
    DEFAULT_CHAIN_ID: int = BaseConfig.get_env_int("DEFAULT_CHAIN_ID", 1)

    FEE_HISTORY_BLOCKS: int = BaseConfig.get_env_int("FEE_HISTORY_BLOCKS", 10)
    FEE_HISTORY_PERCENTILE: float = BaseConfig.get_env_float("FEE_HISTORY_PERCENTILE", 10.0)

    def _validate_config(self):
        super()._validate_config()
        try:
            self.DEFAULT_GAS_LEVEL = hex(parse_gas_level(self.DEFAULT_GAS_LEVEL))
        except ConfigError as e:
            raise ConfigError(f"DEFAULT_GAS_LEVEL is invalid: {e}") from e
        if self.FEE_HISTORY_BLOCKS < 1:
            raise ConfigError("FEE_HISTORY_BLOCKS must be at least 1")
        if not 0 <= self.FEE_HISTORY_PERCENTILE <= 100:
            raise ConfigError("FEE_HISTORY_PERCENTILE must be within [0, 100]")
