"""
Conventional inverse-variance weighted average, kept as a baseline for
comparison with the EVM result.
"""

import logging
from dataclasses import dataclass

import numpy as np

from .validation import validate_measurements


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvgResult:
    """Unweighted mean, weighted mean (w = 1/σ²) and its standard error."""
    unweighted: float
    weighted: float
    std_error: float

    def summary_dict(self) -> dict:
        return {
            "unweighted": self.unweighted,
            "weighted": self.weighted,
            "std_error": self.std_error,
        }


def average(values, sigmas) -> AvgResult:
    """
    Unweighted and inverse-variance weighted average.

    The standard error of the weighted mean is estimated from the sample
    scatter and the effective number of measurements

        b  = (Σ wᵢ)² / Σ wᵢ²
        se = sqrt( s² / b )

    where s² is the Bessel-corrected sample variance about the unweighted
    mean. A single measurement returns its value and sigma unchanged.

    Raises
    ------
    InvalidInputError
        Same input contract as ``evm``.
    """
    x, sig = validate_measurements(values, sigmas, names=("sigmas",))
    n = len(x)

    if n == 1:
        return AvgResult(unweighted=float(x[0]), weighted=float(x[0]),
                         std_error=float(sig[0]))

    w = 1.0 / sig**2
    sw = w.sum()

    avg_u = x.sum() / n
    avg_w = np.sum(x * w) / sw

    ss = np.sum((x - avg_u)**2) / (n - 1)
    b = sw**2 / np.sum(w**2)
    se = np.sqrt(ss / b)

    logger.debug("Weighted average over %d measurements: %.6g ± %.3g", n, avg_w, se)
    return AvgResult(unweighted=float(avg_u), weighted=float(avg_w),
                     std_error=float(se))
