"""
Example Records
===============

A labeled example is one traffic stop reduced to the numeric features
the classifiers consume (month, day of month, hour of day, speed
differential) and a binary outcome (Citation = 1, Warning = 0).
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from config import CITATION, WARNING, CLASS_NAMES


@dataclass(frozen=True)
class Example:
    """Immutable feature vector plus binary label."""
    features: Tuple[float, ...]
    label: int

    def __post_init__(self):
        # Normalise to a tuple of floats so records stay hashable and frozen
        object.__setattr__(self, "features", tuple(float(v) for v in self.features))
        if self.label not in (CITATION, WARNING):
            raise ValueError(f"Label must be {CITATION} or {WARNING}, got {self.label!r}")

    @property
    def is_positive(self) -> bool:
        return self.label == CITATION

    @property
    def label_name(self) -> str:
        return CLASS_NAMES[self.label]


def examples_to_arrays(examples: Sequence[Example]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Stack examples into a feature matrix and label vector.

    Args:
        examples: Sequence of Example records with equal-length features

    Returns:
        Tuple of (X, y) with shapes (n, n_features) and (n,)
    """
    if not examples:
        return np.empty((0, 0), dtype=float), np.empty(0, dtype=int)

    X = np.array([ex.features for ex in examples], dtype=float)
    y = np.array([ex.label for ex in examples], dtype=int)
    return X, y


def labels_of(examples: Sequence[Example]) -> np.ndarray:
    """Label vector of a sequence of examples."""
    return np.array([ex.label for ex in examples], dtype=int)
