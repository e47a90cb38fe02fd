"""
Probability density kernels used to build the EVM mean density.

Both kernels broadcast over numpy arrays, so the engine can evaluate a
whole block of the pairwise density matrix in one call.
"""

import numpy as np
import sympy as sp


# Model equations, in sympy-parseable form (used by reports and tests)
SYMMETRIC_FORMULA = "1/(sqrt(2*pi)*sigma) * exp(-(x - mu)**2 / (2*sigma**2))"
ASYMMETRIC_NORM_FORMULA = "sqrt(2/(pi*(sigma_l + sigma_u)**2))"

_SQRT_2PI = np.sqrt(2.0 * np.pi)


def _as_output(res):
    """Return a plain float for 0-d results, the array otherwise."""
    if np.ndim(res) == 0:
        return float(res)
    return res


def symmetric_density(x, center, sigma):
    """
    Gaussian density N(center, sigma²) evaluated at x.

    sigma must be strictly positive; this is not re-checked here.
    """
    x = np.asarray(x, dtype=float)
    res = np.exp(-(x - center)**2 / (2.0 * sigma**2)) / (_SQRT_2PI * sigma)
    return _as_output(res)


def asymmetric_density(x, center, lower, upper):
    """
    Piecewise Gaussian with different widths below and above the centre.

    Parameters
    ----------
    x : float or array
        Evaluation point(s).
    center : float or array
        Peak position μ.
    lower : float or array
        Width used for x ≤ μ.
    upper : float or array
        Width used for x > μ.

    The normalisation sqrt(2 / (π (lower + upper)²)) makes the density
    integrate to one. It is continuous at μ but its derivative jumps there.
    """
    x = np.asarray(x, dtype=float)
    lower = np.asarray(lower, dtype=float)
    upper = np.asarray(upper, dtype=float)
    norm = np.sqrt(2.0 / (np.pi * (lower + upper)**2))
    width = np.where(x <= center, lower, upper)
    res = norm * np.exp(-(x - center)**2 / (2.0 * width**2))
    return _as_output(res)


def density_expressions() -> dict:
    """
    Symbolic forms of both kernels.

    Returns a dict with keys ``"symmetric"`` and ``"asymmetric"`` mapping
    to sympy expressions in the symbols x, mu, sigma, sigma_l, sigma_u.
    """
    names = ("x", "mu", "sigma", "sigma_l", "sigma_u")
    syms = {k: sp.Symbol(k, real=True) for k in names}
    for k in ("sigma", "sigma_l", "sigma_u"):
        syms[k] = sp.Symbol(k, positive=True)

    x, mu = syms["x"], syms["mu"]
    symmetric = sp.sympify(SYMMETRIC_FORMULA, locals=syms)
    norm = sp.sympify(ASYMMETRIC_NORM_FORMULA, locals=syms)
    asymmetric = sp.Piecewise(
        (norm * sp.exp(-(x - mu)**2 / (2 * syms["sigma_l"]**2)), x <= mu),
        (norm * sp.exp(-(x - mu)**2 / (2 * syms["sigma_u"]**2)), True),
    )
    return {"symmetric": symmetric, "asymmetric": asymmetric}
