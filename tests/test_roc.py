"""
Tests for the trapezoidal AUROC.
"""

import math
import unittest
import sys
from pathlib import Path

import numpy as np

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from config import DEFAULT_CUTOFFS
from evaluation.metrics import classify
from evaluation.roc import RocPoint, auroc, sort_points


def curve(scores, labels):
    """ROC points from the strictest cutoff to the most lenient."""
    points = []
    for cutoff in sorted(DEFAULT_CUTOFFS, reverse=True):
        counts = classify(scores, cutoff, labels)
        points.append(RocPoint(counts.false_positive_rate, counts.true_positive_rate, cutoff))
    return points


class TestAuroc(unittest.TestCase):
    def test_diagonal(self):
        points = [RocPoint(0.0, 0.0), RocPoint(0.5, 0.5), RocPoint(1.0, 1.0)]
        self.assertAlmostEqual(auroc(points), 0.5)

    def test_points_are_sorted_by_fpr(self):
        points = [RocPoint(1.0, 1.0), RocPoint(0.0, 0.0), RocPoint(0.0, 1.0)]
        # (0,0) keeps its place before (0,1) only if the sort is stable
        self.assertEqual(sort_points(points)[0], RocPoint(0.0, 0.0))
        self.assertAlmostEqual(auroc(points), 1.0)

    def test_partial_curve_is_not_extrapolated(self):
        points = [RocPoint(0.0, 0.0), RocPoint(0.5, 1.0)]
        self.assertAlmostEqual(auroc(points), 0.25)

    def test_single_point(self):
        self.assertEqual(auroc([RocPoint(0.3, 0.7)]), 0.0)

    def test_nan_propagates(self):
        points = [RocPoint(0.0, 0.0), RocPoint(0.5, float("nan")), RocPoint(1.0, 1.0)]
        self.assertTrue(math.isnan(auroc(points)))

    def test_perfect_separation(self):
        labels = [1] * 10 + [0] * 10
        scores = [1.0] * 10 + [0.0] * 10
        self.assertAlmostEqual(auroc(curve(scores, labels)), 1.0, places=9)

    def test_random_scores_near_half(self):
        rng = np.random.RandomState(0)
        n = 10000
        labels = rng.randint(0, 2, size=n)
        scores = rng.uniform(0.0, 1.0, size=n)
        value = auroc(curve(scores, labels))
        self.assertAlmostEqual(value, 0.5, delta=0.03)


if __name__ == '__main__':
    unittest.main()
