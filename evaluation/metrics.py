"""
Confusion Matrix Metrics
========================

Turns probability-of-citation predictions into hard decisions at a
cutoff and counts the four outcomes:

- True Positive:  predicted Citation, observed Citation
- True Negative:  predicted Warning,  observed Warning
- False Positive: predicted Citation, observed Warning
- False Negative: predicted Warning,  observed Citation

Derived rates:
- TPR (sensitivity) = TP / (TP + FN)
- FPR (1 - specificity) = FP / (FP + TN)
- Error rate = 1 - (TP + TN) / total

DECISION RULE:
A prediction p is a Warning when p < cutoff, and also when p == 1 and
cutoff == 1. At the top of the sweep even a certain prediction is
classified negative, which pins the curve to (0, 0).
"""

import warnings
from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np

from config import CITATION
from evaluation.errors import UndefinedRateError


@dataclass(frozen=True)
class ConfusionCounts:
    """Outcome counts for one (fold, cutoff) combination."""
    true_positive: int
    true_negative: int
    false_positive: int
    false_negative: int

    @property
    def total(self) -> int:
        return self.true_positive + self.true_negative + self.false_positive + self.false_negative

    @property
    def true_positive_rate(self) -> float:
        return _rate(self.true_positive, self.true_positive + self.false_negative, "TPR")

    @property
    def false_positive_rate(self) -> float:
        return _rate(self.false_positive, self.false_positive + self.true_negative, "FPR")

    @property
    def accuracy(self) -> float:
        if self.total == 0:
            return float("nan")
        return (self.true_positive + self.true_negative) / self.total

    @property
    def error_rate(self) -> float:
        return 1.0 - self.accuracy

    def to_dict(self) -> Dict[str, int]:
        return {
            "true_positive": self.true_positive,
            "true_negative": self.true_negative,
            "false_positive": self.false_positive,
            "false_negative": self.false_negative,
        }


def _rate(numerator: int, denominator: int, name: str) -> float:
    if denominator == 0:
        warnings.warn(
            f"{name} undefined: no observed examples in its denominator",
            UndefinedRateError,
            stacklevel=3,
        )
        return float("nan")
    return numerator / denominator


def threshold_predictions(predictions: Sequence[float], cutoff: float) -> np.ndarray:
    """
    Hard 0/1 decisions for a vector of probabilities.

    Args:
        predictions: Probability of citation per example
        cutoff: Decision threshold in [0, 1]

    Returns:
        Integer array, 1 for Citation and 0 for Warning
    """
    probs = np.asarray(predictions, dtype=float)
    negative = (probs < cutoff) | ((probs == 1.0) & (cutoff == 1.0))
    return (~negative).astype(int)


def classify(
    predictions: Sequence[float],
    cutoff: float,
    observed: Sequence[int]
) -> ConfusionCounts:
    """
    Build confusion counts for predictions thresholded at `cutoff`.

    Args:
        predictions: Probability of citation per example
        cutoff: Decision threshold
        observed: Observed labels (1 = Citation, 0 = Warning)

    Returns:
        ConfusionCounts summing to len(observed)
    """
    observed = np.asarray(observed, dtype=int)
    if len(predictions) != len(observed):
        raise ValueError(
            f"Got {len(predictions)} predictions for {len(observed)} observed labels"
        )

    predicted_positive = threshold_predictions(predictions, cutoff) == CITATION
    observed_positive = observed == CITATION

    return ConfusionCounts(
        true_positive=int(np.sum(predicted_positive & observed_positive)),
        true_negative=int(np.sum(~predicted_positive & ~observed_positive)),
        false_positive=int(np.sum(predicted_positive & ~observed_positive)),
        false_negative=int(np.sum(~predicted_positive & observed_positive)),
    )
