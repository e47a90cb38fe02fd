"""
Expected Value Method (EVM) averaging of repeated measurements.
"""

import logging

from .average import AvgResult, average
from .config import DEFAULT_CONFIG, EVMConfig
from .density import asymmetric_density, density_expressions, symmetric_density
from .evm_engine import EVMAsymmetricResult, EVMResult, evm, evm_asymmetric
from .report import EVMReport, recommended_error
from .validation import InvalidInputError

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AvgResult",
    "DEFAULT_CONFIG",
    "EVMAsymmetricResult",
    "EVMConfig",
    "EVMReport",
    "EVMResult",
    "InvalidInputError",
    "asymmetric_density",
    "average",
    "density_expressions",
    "evm",
    "evm_asymmetric",
    "recommended_error",
    "symmetric_density",
]
