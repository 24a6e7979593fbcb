"""
Gas price, gas limit and EIP-1559 fee estimation.
"""

from .calculator import GasCalculator, max_base_fee, median_reward
from .fee_history import FeeHistorySampler, shape_fee_history
from .models import Eip1559GasFees, FeeHistoryBlock

__all__ = [
    "GasCalculator",
    "max_base_fee",
    "median_reward",
    "FeeHistorySampler",
    "shape_fee_history",
    "Eip1559GasFees",
    "FeeHistoryBlock",
]
