"""
Tunable constants for the EVM engine and its report generator.

A single frozen ``EVMConfig`` is passed explicitly to the entry points;
``DEFAULT_CONFIG`` is used when none is given.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class EVMConfig:
    """
    Parameters
    ----------
    degenerate_threshold : float
        Smallest expected bin count (n·p) for which the confidence
        statistic is computed. Below it the confidence is NaN.
    block_size : int
        Number of rows of the pairwise density matrix evaluated at once.
        Memory use of the weight computation is ``block_size × n`` floats.
    report_width : int
        Line width of text reports.
    significant_figures : int
        Significant figures kept when rounding the reported uncertainty.
    """
    degenerate_threshold: float = 1e-10
    block_size: int = 1024
    report_width: int = 72
    significant_figures: int = 2

    def __post_init__(self):
        if not self.degenerate_threshold > 0:
            raise ValueError("degenerate_threshold must be positive.")
        if self.block_size < 1:
            raise ValueError("block_size must be at least 1.")
        if self.report_width < 40:
            raise ValueError("report_width must be at least 40 characters.")
        if self.significant_figures < 1:
            raise ValueError("significant_figures must be at least 1.")


DEFAULT_CONFIG = EVMConfig()
