"""
Tests for the two-classifier study driver.
"""

import unittest
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from main import run_study, make_demo_examples


class TestRunStudy(unittest.TestCase):
    def test_demo_study(self):
        examples = make_demo_examples(n=200, seed=7)
        study = run_study(examples, n_folds=5, neighbors=5, seed=7)

        knn, tree = study["sweeps"]
        self.assertEqual(knn.adapter_name, "nearest_neighbor_k5")
        self.assertEqual(tree.adapter_name, "decision_tree")
        self.assertEqual(len(knn.error_rates_at_half), 5)
        self.assertEqual(len(tree.roc_points), 11)

        comparison = study["comparison"]
        self.assertAlmostEqual(comparison.mean_diff, knn.mean_error_rate - tree.mean_error_rate)
        self.assertGreaterEqual(comparison.p_value, 0.0)
        self.assertLessEqual(comparison.p_value, 1.0)

    def test_demo_examples_reproducible(self):
        self.assertEqual(make_demo_examples(n=50, seed=1), make_demo_examples(n=50, seed=1))


if __name__ == '__main__':
    unittest.main()
