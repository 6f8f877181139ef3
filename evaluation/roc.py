"""
ROC Curve Summary
=================

One ROC point per cutoff, each the fold-average of (FPR, TPR). The area
under the curve is integrated with the trapezoidal rule over the points
sorted by FPR. Nothing is extrapolated: if the points do not span
FPR 0..1 the result covers only the observed part of the curve.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class RocPoint:
    """Fold-averaged operating point for one cutoff."""
    false_positive_rate: float
    true_positive_rate: float
    cutoff: Optional[float] = None

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "cutoff": self.cutoff,
            "false_positive_rate": self.false_positive_rate,
            "true_positive_rate": self.true_positive_rate,
        }


def sort_points(points: Sequence[RocPoint]) -> list:
    """Stable sort by FPR; ties keep their input order."""
    return sorted(points, key=lambda p: p.false_positive_rate)


def auroc(points: Sequence[RocPoint]) -> float:
    """
    Area under the ROC curve.

    Args:
        points: ROC points in curve order (strictest cutoff first)

    Returns:
        Trapezoidal integral of TPR over FPR; NaN if any coordinate is
        NaN, 0.0 with fewer than two points
    """
    if len(points) < 2:
        return 0.0

    fpr = np.array([p.false_positive_rate for p in points], dtype=float)
    tpr = np.array([p.true_positive_rate for p in points], dtype=float)
    if np.isnan(fpr).any() or np.isnan(tpr).any():
        return float("nan")

    ordered = sort_points(points)
    fpr = np.array([p.false_positive_rate for p in ordered], dtype=float)
    tpr = np.array([p.true_positive_rate for p in ordered], dtype=float)

    return float(np.sum(np.diff(fpr) * (tpr[1:] + tpr[:-1]) / 2.0))
