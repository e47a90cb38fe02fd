"""
╔══════════════════════════════════════════════════════════════════════╗
║  EVM Engine — Expected Value Method Averaging                        ║
║  For Repeated Measurements                                           ║
║                                                                      ║
║  Supports:                                                           ║
║    • Robust weights from the mean probability density of the data    ║
║    • Internal (precision) and external (scatter) uncertainty         ║
║    • Asymmetric uncertainties via a piecewise Gaussian kernel        ║
║    • Goodness-of-fit confidence level                                ║
║                                                                      ║
║  Reference: Birch, M., Singh, B., 2014, Nuclear Data Sheets 120, 106 ║
╚══════════════════════════════════════════════════════════════════════╝
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.special import erf

from .config import DEFAULT_CONFIG, EVMConfig
from .density import asymmetric_density, symmetric_density
from .validation import validate_measurements


logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════
# §1  DATA STRUCTURES
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EVMResult:
    """EVM average of measurements with symmetric uncertainties."""
    mean: float
    internal_error: float
    external_error: float
    weights: np.ndarray
    confidence_level: float = float('nan')

    def summary_dict(self) -> dict:
        return {
            "mean": self.mean,
            "internal_error": self.internal_error,
            "external_error": self.external_error,
            "weights": self.weights.tolist(),
            "confidence_level": self.confidence_level,
        }


@dataclass(frozen=True)
class EVMAsymmetricResult:
    """
    EVM average of measurements with asymmetric uncertainties.

    ``lower_error`` and ``upper_error`` are the reported uncertainties:
    per direction, the larger of the internal and the external component.
    """
    mean: float
    lower_error: float
    upper_error: float
    internal_lower: float
    internal_upper: float
    external_error: float
    weights: np.ndarray
    confidence_level: float = float('nan')

    def summary_dict(self) -> dict:
        return {
            "mean": self.mean,
            "lower_error": self.lower_error,
            "upper_error": self.upper_error,
            "internal_lower": self.internal_lower,
            "internal_upper": self.internal_upper,
            "external_error": self.external_error,
            "weights": self.weights.tolist(),
            "confidence_level": self.confidence_level,
        }


def _frozen(weights: np.ndarray) -> np.ndarray:
    weights = np.array(weights, dtype=float)
    weights.setflags(write=False)
    return weights


# ═══════════════════════════════════════════════════════════════════════
# §2  WEIGHT ENGINE
# ═══════════════════════════════════════════════════════════════════════

def mean_density(values: np.ndarray, kernel, widths: tuple,
                 block_size: int = DEFAULT_CONFIG.block_size) -> np.ndarray:
    """
    Mean probability density M_i of the data set at each measurement.

        M_i = (1/n) Σⱼ kernel(xᵢ; xⱼ, widthsⱼ)

    Every measurement j contributes its own kernel centred on xⱼ with its
    own width(s), so the matrix is not symmetric in general and is
    evaluated densely, ``block_size`` rows at a time.

    Parameters
    ----------
    values : np.ndarray
        Measured values x.
    kernel : callable
        ``kernel(x, center, *widths)`` broadcasting over arrays.
    widths : tuple of np.ndarray
        Per-measurement width arrays passed to the kernel.
    """
    n = len(values)
    M = np.empty(n)
    centers = values[np.newaxis, :]
    cols = tuple(w[np.newaxis, :] for w in widths)

    for start in range(0, n, block_size):
        stop = min(start + block_size, n)
        rows = values[start:stop, np.newaxis]
        M[start:stop] = kernel(rows, centers, *cols).sum(axis=1)

    return M / n


def normalized_weights(M: np.ndarray) -> np.ndarray:
    """weight_i = M_i / Σ M_k"""
    return M / M.sum()


# ═══════════════════════════════════════════════════════════════════════
# §3  MOMENT ENGINE
# ═══════════════════════════════════════════════════════════════════════

def weighted_mean(weights: np.ndarray, values: np.ndarray) -> float:
    return float(np.sum(weights * values))


def internal_uncertainty(weights: np.ndarray, errors: np.ndarray) -> float:
    """Propagated precision: sqrt(Σ wᵢ² σᵢ²)."""
    return float(np.sqrt(np.sum(weights**2 * errors**2)))


def external_uncertainty(weights: np.ndarray, values: np.ndarray,
                         mean: float) -> float:
    """
    Weighted scatter about the mean: sqrt(Σ wᵢ (xᵢ − x̄)²).

    No Bessel correction; the weights already set the effective sample size.
    """
    return float(np.sqrt(np.sum(weights * (values - mean)**2)))


def combine_directional(internal: float, external: float) -> float:
    """sqrt(max(internal², external²)) for one direction."""
    return float(np.sqrt(max(internal**2, external**2)))


# ═══════════════════════════════════════════════════════════════════════
# §4  CONFIDENCE ESTIMATOR
# ═══════════════════════════════════════════════════════════════════════

def confidence_level(values: np.ndarray, M: np.ndarray, mean: float,
                     threshold: float = DEFAULT_CONFIG.degenerate_threshold) -> float:
    """
    Goodness-of-fit of the data against the EVM density model.

    Observed counts below / at-or-above the mean are compared with the
    counts expected from the mean density totals M. The two-bin statistic

        Q = Σ (observed − expected)² / expected

    is converted with 1 − erf(sqrt(Q/2)). Returns NaN when an expected
    count falls below ``threshold``.

    Low values point to outliers or underestimated errors; values above
    about 0.95 can mean overestimated errors or too few points.
    """
    n = len(values)
    below = values < mean
    n_low = int(np.count_nonzero(below))
    n_high = n - n_low

    p_low = float(M[below].sum() / M.sum())
    p_high = 1.0 - p_low

    expected_low = n * p_low
    expected_high = n * p_high
    if expected_low < threshold or expected_high < threshold:
        logger.debug(
            "Confidence undefined: expected counts %.3g / %.3g below threshold %.3g",
            expected_low, expected_high, threshold
        )
        return float('nan')

    Q = ((n_low - expected_low)**2 / expected_low
         + (n_high - expected_high)**2 / expected_high)
    level = 1.0 - erf(np.sqrt(Q / 2.0))
    return float(np.clip(level, 0.0, 1.0))


# ═══════════════════════════════════════════════════════════════════════
# §5  ENTRY POINTS
# ═══════════════════════════════════════════════════════════════════════

def evm(values, errors, compute_confidence: bool = True,
        config: Optional[EVMConfig] = None) -> EVMResult:
    """
    EVM average of measurements with symmetric uncertainties.

    Parameters
    ----------
    values : array-like
        Measured values.
    errors : array-like
        Standard uncertainties, strictly positive.
    compute_confidence : bool
        If False, the confidence pass is skipped and the level is NaN.
    config : EVMConfig, optional
        Engine settings; ``DEFAULT_CONFIG`` if omitted.

    Raises
    ------
    InvalidInputError
        If the arrays are malformed (see ``validation``).
    """
    config = config or DEFAULT_CONFIG
    x, err = validate_measurements(values, errors)
    n = len(x)

    if n == 1:
        e = float(err[0])
        return EVMResult(mean=float(x[0]), internal_error=e, external_error=e,
                         weights=_frozen([1.0]))

    M = mean_density(x, symmetric_density, (err,), config.block_size)
    w = normalized_weights(M)

    xb = weighted_mean(w, x)
    se_int = internal_uncertainty(w, err)
    se_ext = external_uncertainty(w, x, xb)

    conf = float('nan')
    if compute_confidence:
        conf = confidence_level(x, M, xb, config.degenerate_threshold)

    logger.debug("EVM over %d measurements: mean=%.6g int=%.3g ext=%.3g conf=%.3g",
                 n, xb, se_int, se_ext, conf)

    return EVMResult(mean=xb, internal_error=se_int, external_error=se_ext,
                     weights=_frozen(w), confidence_level=conf)


def evm_asymmetric(values, lower_errors, upper_errors,
                   compute_confidence: bool = True,
                   config: Optional[EVMConfig] = None) -> EVMAsymmetricResult:
    """
    EVM average of measurements with asymmetric uncertainties.

    Each measurement contributes a piecewise Gaussian with width
    ``lower_errors[j]`` below its value and ``upper_errors[j]`` above.
    The external uncertainty is symmetric; the reported lower/upper
    uncertainties never understate either the internal component in that
    direction or the external one.

    The confidence level uses the same two-bin statistic as ``evm``.
    """
    config = config or DEFAULT_CONFIG
    x, lo, hi = validate_measurements(values, lower_errors, upper_errors,
                                      names=("lower_errors", "upper_errors"))
    n = len(x)

    if n == 1:
        l, u = float(lo[0]), float(hi[0])
        return EVMAsymmetricResult(
            mean=float(x[0]), lower_error=l, upper_error=u,
            internal_lower=l, internal_upper=u, external_error=0.0,
            weights=_frozen([1.0])
        )

    M = mean_density(x, asymmetric_density, (lo, hi), config.block_size)
    w = normalized_weights(M)

    xb = weighted_mean(w, x)
    int_lo = internal_uncertainty(w, lo)
    int_hi = internal_uncertainty(w, hi)
    se_ext = external_uncertainty(w, x, xb)

    conf = float('nan')
    if compute_confidence:
        conf = confidence_level(x, M, xb, config.degenerate_threshold)

    logger.debug("Asymmetric EVM over %d measurements: mean=%.6g -%.3g/+%.3g ext=%.3g",
                 n, xb, int_lo, int_hi, se_ext)

    return EVMAsymmetricResult(
        mean=xb,
        lower_error=combine_directional(int_lo, se_ext),
        upper_error=combine_directional(int_hi, se_ext),
        internal_lower=int_lo,
        internal_upper=int_hi,
        external_error=se_ext,
        weights=_frozen(w),
        confidence_level=conf,
    )
