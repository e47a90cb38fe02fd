"""
Tests for the asymmetric EVM engine.
"""

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from evm_system import EVMAsymmetricResult, evm, evm_asymmetric


class TestAsymmetricBasic:
    """Shape and invariants of the asymmetric result."""

    DATA = [10.0, 10.2, 10.1, 9.9]
    LOWER = [0.2, 0.3, 0.2, 0.2]
    UPPER = [0.3, 0.4, 0.3, 0.3]

    def test_result_fields(self):
        result = evm_asymmetric(self.DATA, self.LOWER, self.UPPER)
        assert isinstance(result, EVMAsymmetricResult)
        assert 9.9 < result.mean < 10.2
        assert result.lower_error > 0
        assert result.upper_error > 0
        assert result.internal_lower > 0
        assert result.internal_upper > 0
        assert result.external_error >= 0
        assert len(result.weights) == len(self.DATA)
        assert np.all(result.weights >= 0)
        assert result.weights.sum() == pytest.approx(1.0, abs=1e-9)
        assert 0 <= result.confidence_level <= 1

    def test_reported_errors_take_larger_component(self):
        result = evm_asymmetric(self.DATA, self.LOWER, self.UPPER)
        assert result.lower_error == pytest.approx(
            math.sqrt(max(result.internal_lower**2, result.external_error**2)))
        assert result.upper_error == pytest.approx(
            math.sqrt(max(result.internal_upper**2, result.external_error**2)))

    def test_single_measurement(self):
        result = evm_asymmetric([5.0], [0.3], [0.5])
        assert result.mean == 5.0
        assert result.lower_error == 0.3
        assert result.upper_error == 0.5
        assert result.internal_lower == 0.3
        assert result.internal_upper == 0.5
        assert result.external_error == 0.0
        assert result.weights.tolist() == [1.0]

    def test_skip_confidence(self):
        result = evm_asymmetric(self.DATA, self.LOWER, self.UPPER,
                                compute_confidence=False)
        assert math.isnan(result.confidence_level)

    def test_summary_dict(self):
        d = evm_asymmetric(self.DATA, self.LOWER, self.UPPER).summary_dict()
        assert d["lower_error"] > 0
        assert len(d["weights"]) == 4


class TestAsymmetryPreservation:
    """Direction-dependent errors survive into the result."""

    def test_upper_larger_than_lower(self):
        result = evm_asymmetric([10.0, 10.1, 10.2], [0.1] * 3, [1.0] * 3)
        assert result.upper_error > result.lower_error
        assert result.internal_upper > result.internal_lower

    def test_scatter_floors_both_directions(self):
        result = evm_asymmetric([8.0, 10.0, 12.0], [0.1] * 3, [0.2] * 3)
        assert result.lower_error == pytest.approx(result.external_error)
        assert result.upper_error == pytest.approx(result.external_error)

    def test_wide_upper_tail_pulls_weight(self):
        # Wide upper tails of low points reach the high point, not vice versa
        result = evm_asymmetric([0.0, 0.0, 2.0], [0.1] * 3, [2.0] * 3)
        mirrored = evm_asymmetric([0.0, 0.0, 2.0], [2.0] * 3, [0.1] * 3)
        assert result.weights[2] > mirrored.weights[2]


class TestSymmetricEquivalence:
    """Equal lower/upper errors reduce to the symmetric method."""

    def test_matches_symmetric_evm(self):
        data = [10.0, 10.2, 10.1, 10.3]
        errors = [0.2, 0.2, 0.2, 0.2]
        sym = evm(data, errors)
        asym = evm_asymmetric(data, errors, errors)
        assert asym.mean == pytest.approx(sym.mean, abs=1e-10)
        assert_allclose(asym.weights, sym.weights, atol=1e-10)
        assert asym.lower_error == pytest.approx(asym.upper_error, abs=1e-6)

    def test_matches_with_mixed_errors(self):
        data = [1.0, 2.0, 3.0, 4.0]
        errors = [0.1, 0.2, 0.3, 0.4]
        sym = evm(data, errors)
        asym = evm_asymmetric(data, errors, errors)
        assert asym.mean == pytest.approx(sym.mean, abs=1e-10)
        assert asym.internal_lower == pytest.approx(sym.internal_error, abs=1e-10)
        assert asym.external_error == pytest.approx(sym.external_error, abs=1e-10)
        assert asym.confidence_level == pytest.approx(sym.confidence_level, abs=1e-10)
