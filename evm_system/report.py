"""
Text reports for EVM and weighted-average results.
"""

from typing import Optional

import numpy as np
import sympy as sp

from .average import AvgResult
from .config import DEFAULT_CONFIG, EVMConfig
from .density import density_expressions
from .evm_engine import EVMAsymmetricResult, EVMResult


def recommended_error(result: EVMResult) -> float:
    """
    Uncertainty to quote with a symmetric EVM mean: the larger of the
    internal and the external component.
    """
    return max(result.internal_error, result.external_error)


def _round_pair(value: float, U: float, sig_figs: int):
    """Round U to ``sig_figs`` significant figures and value to match."""
    if not np.isfinite(U) or U <= 0:
        return value, U
    magnitude = np.floor(np.log10(abs(U)))
    round_to = int(sig_figs - 1 - magnitude)
    return round(value, round_to), round(U, round_to)


class EVMReport:
    """Generates formatted summary reports for EVM analyses."""

    @staticmethod
    def _hline(width=72):
        return "─" * width

    @staticmethod
    def _dline(width=72):
        return "═" * width

    @staticmethod
    def _boxed(text: str, width: int) -> list:
        inner = width - 6
        return [
            "  ┌" + "─" * inner + "┐",
            f"  │ {text:<{inner - 2}} │",
            "  └" + "─" * inner + "┘",
        ]

    @classmethod
    def generate(cls, result, values, errors=None, upper_errors=None,
                 title: str = "", config: Optional[EVMConfig] = None) -> str:
        """
        Generate a full report for a symmetric or asymmetric EVM result.

        Parameters
        ----------
        result : EVMResult or EVMAsymmetricResult
            Output of ``evm`` or ``evm_asymmetric``.
        values : array-like
            The measurements the result was computed from.
        errors : array-like, optional
            Symmetric errors, or the lower errors for an asymmetric result.
        upper_errors : array-like, optional
            Upper errors for an asymmetric result.
        """
        config = config or DEFAULT_CONFIG
        w = config.report_width
        asym = isinstance(result, EVMAsymmetricResult)
        values = np.asarray(values, dtype=float)

        lines = []

        # ── Header ──
        lines.append(cls._dline(w))
        kind = "ASYMMETRIC " if asym else ""
        lines.append(f"  {title or f'{kind}EVM AVERAGE OF {len(values)} MEASUREMENTS'}")
        lines.append(cls._dline(w))
        lines.append("")

        # ── Density Kernel ──
        lines.append("  DENSITY KERNEL")
        lines.append(cls._hline(w))
        expr = density_expressions()["asymmetric" if asym else "symmetric"]
        for row in sp.pretty(expr, use_unicode=True, num_columns=w - 4).splitlines():
            lines.append(f"    {row}")
        lines.append("")

        # ── Input Measurements ──
        lines.append("  INPUT MEASUREMENTS")
        lines.append(cls._hline(w))
        lines.append(f"  {'#':<4} {'Value':<14} {'Uncertainty':<20} {'Weight':<10} ")
        lines.append("  " + "-" * (w - 4))
        for i, (x_i, w_i) in enumerate(zip(values, result.weights)):
            if errors is None:
                unc = ""
            elif asym and upper_errors is not None:
                unc = f"+{upper_errors[i]:.4g} -{errors[i]:.4g}"
            else:
                unc = f"± {errors[i]:.4g}"
            bar = "█" * int(w_i * 20)
            lines.append(f"  {i + 1:<4} {x_i:<14.6g} {unc:<20} {w_i:<10.4f} {bar}")
        lines.append("")

        # ── Results ──
        lines.append("  RESULTS")
        lines.append(cls._dline(w))
        lines.append(f"    EVM mean:              {result.mean:.6g}")
        if asym:
            lines.append(f"    Internal lower:        {result.internal_lower:.4g}")
            lines.append(f"    Internal upper:        {result.internal_upper:.4g}")
            lines.append(f"    External:              {result.external_error:.4g}")
            lines.append(f"    Reported lower:        {result.lower_error:.4g}")
            lines.append(f"    Reported upper:        {result.upper_error:.4g}")
        else:
            lines.append(f"    Internal uncertainty:  {result.internal_error:.4g}")
            lines.append(f"    External uncertainty:  {result.external_error:.4g}")
        lines.append(f"    Confidence level:      {cls._format_confidence(result.confidence_level)}")
        lines.append("")
        lines.append(cls._hline(w))

        sig = config.significant_figures
        if asym:
            U = min(result.lower_error, result.upper_error)
            val_r, _ = _round_pair(result.mean, U, sig)
            _, lo_r = _round_pair(result.mean, result.lower_error, sig)
            _, hi_r = _round_pair(result.mean, result.upper_error, sig)
            lines.extend(cls._boxed(f"x = {val_r} +{hi_r} -{lo_r}", w))
        else:
            val_r, U_r = _round_pair(result.mean, recommended_error(result), sig)
            lines.extend(cls._boxed(f"x = {val_r} ± {U_r}", w))
        lines.append(cls._dline(w))

        return "\n".join(lines)

    @classmethod
    def comparison(cls, evm_result: EVMResult, avg_result: AvgResult,
                   config: Optional[EVMConfig] = None) -> str:
        """Side-by-side summary of the EVM and weighted-average estimates."""
        config = config or DEFAULT_CONFIG
        w = config.report_width
        lines = [
            cls._dline(w),
            "  EVM vs. WEIGHTED AVERAGE",
            cls._dline(w),
            f"    Unweighted mean:   {avg_result.unweighted:.6g}",
            f"    Weighted mean:     {avg_result.weighted:.6g} ± {avg_result.std_error:.4g}",
            f"    EVM mean:          {evm_result.mean:.6g} ± {recommended_error(evm_result):.4g}",
            f"    Difference:        {evm_result.mean - avg_result.weighted:+.4g}",
            cls._dline(w),
        ]
        return "\n".join(lines)

    @classmethod
    def input_summary(cls, values, errors) -> str:
        """Quick listing of the measurements."""
        values = np.asarray(values, dtype=float)
        lines = [f"  {len(values)} measurements"]
        for i, (x_i, e_i) in enumerate(zip(values, errors)):
            lines.append(f"    ├─ {i + 1}: {x_i:.6g} ± {e_i:.4g}")
        return "\n".join(lines)

    @staticmethod
    def _format_confidence(level: float) -> str:
        if np.isnan(level):
            return "not computed"
        return f"{level * 100:.1f}%"
