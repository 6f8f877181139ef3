"""
Tests for confusion counts and the cutoff decision rule.
"""

import math
import unittest
import sys
import warnings
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from evaluation.metrics import ConfusionCounts, classify, threshold_predictions
from evaluation.errors import UndefinedRateError


class TestClassify(unittest.TestCase):
    def test_counts_sum_to_test_size(self):
        predictions = [0.9, 0.8, 0.3, 0.6, 0.1, 0.5, 0.0, 1.0]
        observed = [1, 0, 1, 0, 0, 1, 0, 1]
        for cutoff in [0.0, 0.25, 0.5, 0.75, 1.0]:
            counts = classify(predictions, cutoff, observed)
            self.assertEqual(counts.total, len(observed))

    def test_cutoff_half(self):
        counts = classify([0.9, 0.5, 0.49, 0.2], 0.5, [1, 0, 1, 0])
        self.assertEqual(counts, ConfusionCounts(
            true_positive=1, true_negative=1, false_positive=1, false_negative=1
        ))

    def test_prediction_equal_to_cutoff_is_positive(self):
        counts = classify([0.3], 0.3, [1])
        self.assertEqual(counts.true_positive, 1)

    def test_cutoff_one_classifies_certain_prediction_negative(self):
        """At cutoff 1.0 a score of exactly 1.0 is still a Warning."""
        counts = classify([1.0], 1.0, [1])
        self.assertEqual(counts.true_positive, 0)
        self.assertEqual(counts.false_negative, 1)

        counts = classify([1.0, 1.0], 1.0, [0, 0])
        self.assertEqual(counts.false_positive, 0)
        self.assertEqual(counts.true_negative, 2)

    def test_certain_prediction_positive_below_cutoff_one(self):
        counts = classify([1.0], 0.9, [1])
        self.assertEqual(counts.true_positive, 1)

    def test_cutoff_zero_classifies_everything_positive(self):
        decisions = threshold_predictions([0.0, 0.2, 1.0], 0.0)
        self.assertEqual(decisions.tolist(), [1, 1, 1])

    def test_length_mismatch(self):
        with self.assertRaises(ValueError):
            classify([0.1, 0.2], 0.5, [1])


class TestRates(unittest.TestCase):
    def test_rates(self):
        counts = ConfusionCounts(true_positive=3, true_negative=4, false_positive=1, false_negative=2)
        self.assertAlmostEqual(counts.true_positive_rate, 3 / 5)
        self.assertAlmostEqual(counts.false_positive_rate, 1 / 5)
        self.assertAlmostEqual(counts.error_rate, 3 / 10)

    def test_tpr_undefined_without_positives(self):
        counts = classify([0.2, 0.7], 0.5, [0, 0])
        with self.assertWarns(UndefinedRateError):
            tpr = counts.true_positive_rate
        self.assertTrue(math.isnan(tpr))

    def test_fpr_undefined_without_negatives(self):
        counts = classify([0.2, 0.7], 0.5, [1, 1])
        with self.assertWarns(UndefinedRateError):
            fpr = counts.false_positive_rate
        self.assertTrue(math.isnan(fpr))

    def test_undefined_rate_does_not_raise(self):
        counts = ConfusionCounts(0, 0, 0, 0)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UndefinedRateError)
            self.assertTrue(math.isnan(counts.true_positive_rate))
            self.assertTrue(math.isnan(counts.error_rate))


if __name__ == '__main__':
    unittest.main()
