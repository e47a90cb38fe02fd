"""
Tests for the inverse-variance weighted average baseline.
"""

import pytest

from evm_system import AvgResult, average


class TestAverage:
    """Unweighted mean, weighted mean and standard error."""

    def test_equal_sigmas(self):
        result = average([10.0, 10.2, 10.1, 10.3], [0.2] * 4)
        assert isinstance(result, AvgResult)
        assert result.unweighted == pytest.approx(10.15)
        assert result.weighted == pytest.approx(10.15)
        assert result.std_error > 0

    def test_single_measurement(self):
        result = average([5.0], [0.5])
        assert result.unweighted == 5.0
        assert result.weighted == 5.0
        assert result.std_error == 0.5

    def test_legacy_four_points(self):
        result = average([1.0, 2.0, 3.0, 4.0], [0.1, 0.2, 0.3, 0.4])
        assert result.unweighted == pytest.approx(2.5, abs=1e-14)
        assert result.weighted == pytest.approx(1.4634146341463417, abs=1e-14)
        assert result.std_error == pytest.approx(0.941876146945452, abs=1e-14)

    def test_precise_measurement_pulls_weighted_mean(self):
        result = average([10.0, 12.0], [0.1, 1.0])
        assert result.weighted < result.unweighted
        assert 10.0 < result.weighted < 10.5

    def test_summary_dict(self):
        assert average([1.0, 2.0], [1.0, 1.0]).summary_dict() == {
            "unweighted": 1.5, "weighted": 1.5,
            "std_error": pytest.approx(0.5),
        }
