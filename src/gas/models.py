"""
Data models for gas fee estimation.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


def to_int(value: Union[str, int]) -> int:
    """Parse a quantity given as a ``0x`` hex string, a decimal string or an int."""
    if isinstance(value, int):
        return value
    if value.lower().startswith("0x"):
        return int(value, 16)
    return int(value)


@dataclass
class FeeHistoryBlock:
    """One block of ``eth_feeHistory`` data."""

    base_fee: int
    gas_used_ratio: Optional[float] = None
    rewards: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class Eip1559GasFees:
    """EIP-1559 fee fields, hex-encoded."""

    max_base_fee_per_gas: str
    max_priority_fee_per_gas: str
    max_fee_per_gas: str

    @classmethod
    def from_values(cls, max_base_fee: int, max_priority_fee: int) -> "Eip1559GasFees":
        return cls(
            max_base_fee_per_gas=hex(max_base_fee),
            max_priority_fee_per_gas=hex(max_priority_fee),
            max_fee_per_gas=hex(max_base_fee + max_priority_fee),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "maxBaseFeePerGas": self.max_base_fee_per_gas,
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
            "maxFeePerGas": self.max_fee_per_gas,
        }
