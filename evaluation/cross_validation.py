"""
Cross-Validated Threshold Sweep
===============================

This module implements k-fold cross-validation of a classifier adapter
across a sweep of decision cutoffs.

Features:
1. Seeded, reproducible fold assignment (explicit seed, no global state)
2. One model per fold, re-thresholded for every cutoff
3. Fold-averaged ROC points and per-fold error rates at cutoff 0.5
4. Optional thread pool across folds
5. Abort-on-failure: a failing fold fails the whole sweep
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from config import (
    RANDOM_SEED, DEFAULT_CV_FOLDS, DEFAULT_CUTOFFS, CANONICAL_CUTOFF,
    CV_RESULTS_DIR, ensure_directories,
)
from data.example import Example, labels_of
from evaluation.errors import (
    InvalidPartitionError, AdapterTrainingError, AdapterPredictionError,
)
from evaluation.metrics import ConfusionCounts, classify
from evaluation.roc import RocPoint, auroc
from evaluation.statistical_tests import summarize_error_rates
from models.classifier import ClassifierAdapter

logger = logging.getLogger(__name__)


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class FoldResult:
    """Predictions and per-cutoff counts from a single CV fold."""
    fold_idx: int
    n_train: int
    n_test: int
    probabilities: List[float]
    ground_truth: List[int]
    counts: Dict[float, ConfusionCounts] = field(default_factory=dict)
    error_rate: float = float("nan")


@dataclass
class SweepResult:
    """Aggregated threshold-sweep results for one classifier."""
    adapter_name: str
    n_folds: int
    seed: int
    cutoffs: List[float]
    roc_points: List[RocPoint]
    error_rates_at_half: List[float]
    fold_results: List[FoldResult] = field(default_factory=list)

    @property
    def auroc(self) -> float:
        return auroc(self.roc_points)

    @property
    def error_summary(self) -> Dict[str, Any]:
        return summarize_error_rates(self.error_rates_at_half)

    @property
    def mean_error_rate(self) -> float:
        return self.error_summary["mean"]

    @property
    def std_error_rate(self) -> float:
        return self.error_summary["std"]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        summary = self.error_summary
        return {
            "adapter": self.adapter_name,
            "n_folds": self.n_folds,
            "seed": self.seed,
            "cutoffs": self.cutoffs,
            "auroc": self.auroc,
            "mean_error_rate": summary["mean"],
            "std_error_rate": summary["std"],
            "error_rate_ci": list(summary["ci"]),
            "error_rates_at_half": self.error_rates_at_half,
            "roc_points": [p.to_dict() for p in self.roc_points],
            "per_fold_counts": [
                {
                    "fold": fr.fold_idx,
                    "n_test": fr.n_test,
                    "counts": {str(c): cc.to_dict() for c, cc in fr.counts.items()},
                }
                for fr in self.fold_results
            ],
        }

    def summary_string(self) -> str:
        """Generate summary string with mean ± std."""
        summary = self.error_summary
        ci = summary["ci"]
        lines = [
            f"Threshold Sweep: {self.adapter_name} ({self.n_folds}-fold, seed={self.seed})",
            "=" * 50,
            f"  {'error rate @0.5':20s}: {summary['mean']:.4f} ± {summary['std']:.4f} "
            f"(95% CI: [{ci[0]:.4f}, {ci[1]:.4f}])",
            f"  {'AUROC':20s}: {self.auroc:.4f}",
            "  ROC points (cutoff: FPR, TPR):",
        ]
        for point in self.roc_points:
            lines.append(f"    {point.cutoff:.2f}: {point.false_positive_rate:.4f}, "
                         f"{point.true_positive_rate:.4f}")
        return "\n".join(lines)


# =============================================================================
# DATASET SPLITTER
# =============================================================================

def partition(examples: Sequence[Example], k: int, seed: int) -> List[List[Example]]:
    """
    Shuffle examples with a seeded permutation and cut k equal folds.

    Each fold holds len(examples) // k examples; the trailing remainder of
    the shuffled sequence is dropped so every fold has the same size.

    Args:
        examples: Labeled examples
        k: Number of folds (>= 2)
        seed: Seed of the permutation

    Returns:
        List of k folds

    Raises:
        InvalidPartitionError: If k < 2 or len(examples) < k
    """
    if k < 2:
        raise InvalidPartitionError(f"Need at least 2 folds, got {k}")
    if len(examples) < k:
        raise InvalidPartitionError(
            f"Cannot split {len(examples)} examples into {k} folds"
        )

    rng = np.random.RandomState(seed)
    order = rng.permutation(len(examples))
    fold_size = len(examples) // k

    n_dropped = len(examples) - fold_size * k
    if n_dropped:
        logger.info(f"Dropping {n_dropped} trailing example(s) to keep {k} equal folds")

    return [
        [examples[i] for i in order[fold_idx * fold_size:(fold_idx + 1) * fold_size]]
        for fold_idx in range(k)
    ]


def train_test_split(
    folds: Sequence[Sequence[Example]],
    fold_idx: int
) -> Tuple[List[Example], List[Example]]:
    """Training set = every fold except `fold_idx`; test set = fold `fold_idx`."""
    train = [ex for i, fold in enumerate(folds) if i != fold_idx for ex in fold]
    return train, list(folds[fold_idx])


class KFoldSplitter:
    """
    K-Fold cross-validator over Example records.

    Provides train/test example lists for K-fold cross-validation using
    a fixed seed.
    """

    def __init__(self, n_splits: int = DEFAULT_CV_FOLDS, random_state: int = RANDOM_SEED):
        """
        Initialize splitter.

        Args:
            n_splits: Number of folds
            random_state: Random seed for reproducibility
        """
        self.n_splits = n_splits
        self.random_state = random_state

    def split(self, examples: Sequence[Example]) -> Iterator[Tuple[List[Example], List[Example]]]:
        """
        Generate train/test splits.

        Yields:
            Tuple of (training_set, test_set) for each fold
        """
        folds = partition(examples, self.n_splits, self.random_state)
        for fold_idx in range(self.n_splits):
            yield train_test_split(folds, fold_idx)

    def get_n_splits(self) -> int:
        """Return the number of splits."""
        return self.n_splits


# =============================================================================
# THRESHOLD SWEEP EVALUATOR
# =============================================================================

class ThresholdSweepEvaluator:
    """
    Cross-validation of one classifier adapter over a cutoff sweep.

    The model trained on a fold does not depend on the cutoff, so each
    fold is trained and predicted once and its probability vector is
    re-thresholded for every cutoff.
    """

    def __init__(
        self,
        n_folds: int = DEFAULT_CV_FOLDS,
        random_state: int = RANDOM_SEED,
        cutoffs: Sequence[float] = DEFAULT_CUTOFFS,
        n_jobs: int = 1,
        save_results: bool = False,
        output_dir: Optional[Path] = None
    ):
        """
        Initialize evaluator.

        Args:
            n_folds: Number of CV folds
            random_state: Seed of the fold permutation
            cutoffs: Decision cutoffs to sweep, each in [0, 1]
            n_jobs: Worker threads for per-fold train/predict
            save_results: Whether to save results to disk
            output_dir: Results directory (default: results/cv_results)
        """
        if not cutoffs:
            raise ValueError("At least one cutoff is required")
        bad = [c for c in cutoffs if not 0.0 <= c <= 1.0]
        if bad:
            raise ValueError(f"Cutoffs must lie in [0, 1], got {bad}")
        if n_jobs < 1:
            raise ValueError(f"n_jobs must be at least 1, got {n_jobs}")

        self.n_folds = n_folds
        self.random_state = random_state
        # Strictest cutoff first so ROC points run from (0, 0) to (1, 1)
        self.cutoffs = sorted((float(c) for c in cutoffs), reverse=True)
        self.n_jobs = n_jobs
        self.save_results = save_results
        self.output_dir = output_dir

    def evaluate(
        self,
        examples: Sequence[Example],
        adapter: ClassifierAdapter,
        experiment_name: Optional[str] = None
    ) -> SweepResult:
        """
        Run the sweep.

        Args:
            examples: Labeled examples
            adapter: Classifier under evaluation
            experiment_name: Name for saving results (default: adapter name)

        Returns:
            SweepResult with ROC points and per-fold error rates at 0.5

        Raises:
            InvalidPartitionError: If the examples cannot be split
            AdapterTrainingError / AdapterPredictionError: If any fold fails
        """
        folds = partition(examples, self.n_folds, self.random_state)

        logger.info(f"Starting {self.n_folds}-fold sweep of {adapter.name} "
                    f"over {len(self.cutoffs)} cutoffs "
                    f"({len(folds[0])} examples per fold)")

        fold_indices = range(self.n_folds)
        if self.n_jobs > 1:
            with ThreadPoolExecutor(max_workers=self.n_jobs) as executor:
                fold_results = list(executor.map(
                    lambda idx: self._run_fold(adapter, folds, idx), fold_indices
                ))
        else:
            fold_results = [self._run_fold(adapter, folds, idx) for idx in fold_indices]

        roc_points = [self._roc_point(cutoff, fold_results) for cutoff in self.cutoffs]
        error_rates = [fr.error_rate for fr in fold_results]

        result = SweepResult(
            adapter_name=adapter.name,
            n_folds=self.n_folds,
            seed=self.random_state,
            cutoffs=list(self.cutoffs),
            roc_points=roc_points,
            error_rates_at_half=error_rates,
            fold_results=fold_results,
        )

        if self.save_results:
            self._save_results(result, experiment_name or adapter.name)

        logger.info(f"Sweep complete:\n{result.summary_string()}")

        return result

    def _run_fold(
        self,
        adapter: ClassifierAdapter,
        folds: List[List[Example]],
        fold_idx: int
    ) -> FoldResult:
        """Train, predict and threshold one fold."""
        train, test = train_test_split(folds, fold_idx)
        ground_truth = labels_of(test)

        try:
            model = adapter.train(train)
        except Exception as e:
            logger.error(f"Training failed for fold {fold_idx}: {e}")
            raise AdapterTrainingError(adapter.name, fold_idx, str(e)) from e

        try:
            probabilities = np.asarray(adapter.predict(model, test), dtype=float)
        except Exception as e:
            logger.error(f"Prediction failed for fold {fold_idx}: {e}")
            raise AdapterPredictionError(adapter.name, fold_idx, str(e)) from e

        if probabilities.shape != (len(test),):
            raise AdapterPredictionError(
                adapter.name, fold_idx,
                f"expected {len(test)} probabilities, got shape {probabilities.shape}"
            )
        if np.any((probabilities < 0.0) | (probabilities > 1.0)) or np.isnan(probabilities).any():
            raise AdapterPredictionError(
                adapter.name, fold_idx, "probabilities must lie in [0, 1]"
            )

        counts = {cutoff: classify(probabilities, cutoff, ground_truth)
                  for cutoff in self.cutoffs}
        at_half = counts.get(CANONICAL_CUTOFF) or classify(
            probabilities, CANONICAL_CUTOFF, ground_truth
        )

        logger.info(f"  Fold {fold_idx + 1}/{self.n_folds}: "
                    f"train={len(train)}, test={len(test)}, "
                    f"error@{CANONICAL_CUTOFF}={at_half.error_rate:.4f}")

        return FoldResult(
            fold_idx=fold_idx,
            n_train=len(train),
            n_test=len(test),
            probabilities=probabilities.tolist(),
            ground_truth=ground_truth.tolist(),
            counts=counts,
            error_rate=at_half.error_rate,
        )

    def _roc_point(self, cutoff: float, fold_results: List[FoldResult]) -> RocPoint:
        """Fold-average TPR and FPR at one cutoff; NaN folds make the mean NaN."""
        tpr = np.array([fr.counts[cutoff].true_positive_rate for fr in fold_results])
        fpr = np.array([fr.counts[cutoff].false_positive_rate for fr in fold_results])

        n_undefined = int(np.sum(np.isnan(tpr) | np.isnan(fpr)))
        if n_undefined:
            logger.warning(f"Cutoff {cutoff:.2f}: {n_undefined} fold(s) with an "
                           f"undefined rate; ROC point is NaN")

        return RocPoint(
            false_positive_rate=float(np.mean(fpr)),
            true_positive_rate=float(np.mean(tpr)),
            cutoff=cutoff,
        )

    def _save_results(self, result: SweepResult, experiment_name: str) -> Path:
        """Save sweep results to disk."""
        if self.output_dir is None:
            ensure_directories()
            output_dir = CV_RESULTS_DIR
        else:
            output_dir = Path(self.output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)

        output_path = output_dir / f"{experiment_name}.json"
        with open(output_path, "w") as f:
            json.dump(result.to_dict(), f, indent=2)

        summary_path = output_dir / f"{experiment_name}_summary.txt"
        with open(summary_path, "w") as f:
            f.write(result.summary_string())

        logger.info(f"Sweep results saved to {output_path}")
        return output_path


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def evaluate(
    examples: Sequence[Example],
    k: int,
    seed: int,
    cutoffs: Sequence[float],
    adapter: ClassifierAdapter,
    n_jobs: int = 1
) -> SweepResult:
    """
    Functional entry point for a single threshold sweep.

    Returns:
        SweepResult; `roc_points` and `error_rates_at_half` carry the
        sweep's two outputs
    """
    evaluator = ThresholdSweepEvaluator(
        n_folds=k,
        random_state=seed,
        cutoffs=cutoffs,
        n_jobs=n_jobs,
    )
    return evaluator.evaluate(examples, adapter)

