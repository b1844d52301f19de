"""Tests for Wilson score confidence."""

import pytest

from domain_knowledge.confidence import wilson_lower_bound


class TestWilsonLowerBound:
    """Test the conservative confidence estimate."""

    def test_no_samples_is_zero(self):
        assert wilson_lower_bound(0, 0) == 0.0

    def test_only_successes_high_but_not_certain(self):
        """10 successes should be trusted, but not fully."""
        confidence = wilson_lower_bound(10, 0)
        assert 0.7 < confidence < 1.0

    def test_many_successes_stay_below_one(self):
        assert 0.7 < wilson_lower_bound(1000, 0) < 1.0

    def test_only_failures_very_low(self):
        assert wilson_lower_bound(0, 10) < 0.1
        assert wilson_lower_bound(0, 1) >= 0.0

    def test_single_success_is_not_trusted(self):
        """One observation is far from enough evidence."""
        assert wilson_lower_bound(1, 0) == pytest.approx(0.2065, abs=1e-3)

    def test_mixed_results(self):
        """80% over 10 samples gives a lower bound around 0.49."""
        confidence = wilson_lower_bound(8, 2)
        assert 0.4 < confidence < 0.9
        assert confidence == pytest.approx(0.4902, abs=1e-3)

    def test_more_samples_same_ratio_increase_confidence(self):
        assert wilson_lower_bound(4, 1) < wilson_lower_bound(40, 10)
        assert wilson_lower_bound(40, 10) < wilson_lower_bound(400, 100)

    def test_increase_is_strict_for_growing_n(self):
        values = [wilson_lower_bound(3 * k, k) for k in range(1, 30)]
        assert all(a < b for a, b in zip(values, values[1:]))
        assert values[-1] < 0.75

    def test_deterministic(self):
        assert wilson_lower_bound(7, 3) == wilson_lower_bound(7, 3)

    def test_custom_z(self):
        """A narrower interval (smaller z) gives a higher lower bound."""
        assert wilson_lower_bound(8, 2, z=1.0) > wilson_lower_bound(8, 2, z=1.96)

    def test_negative_counts_rejected(self):
        with pytest.raises(ValueError):
            wilson_lower_bound(-1, 3)
