"""
Baseline Adapters
=================

Trivial classifiers behind the same train/predict contract:

1. MajorityClassAdapter: constant probability equal to the training
   citation share
2. RandomScoreAdapter: uniform random scores, seeded per training call

These answer: "Does a real classifier outperform trivial solutions?"
A random scorer should land near AUROC 0.5.
"""

import logging
from collections import Counter
from typing import Any, Dict, Sequence

import numpy as np

from config import CITATION, RANDOM_SEED
from data.example import Example, labels_of
from models.classifier import ClassifierAdapter

logger = logging.getLogger(__name__)


class MajorityClassAdapter(ClassifierAdapter):
    """
    Always scores the training citation share.

    Any useful model must outperform this to be considered non-trivial.
    """

    name = "majority_class"
    description = "Constant score equal to the training citation share"

    def train(self, training_set: Sequence[Example]) -> float:
        y = labels_of(training_set)
        if len(y) == 0:
            raise ValueError("Cannot train on an empty training set")
        counts = Counter(y.tolist())
        citation_share = counts[CITATION] / len(y)
        logger.debug(f"MajorityClassAdapter: citation share={citation_share:.3f}")
        return citation_share

    def predict(self, model: float, test_set: Sequence[Example]) -> np.ndarray:
        return np.full(len(test_set), model, dtype=float)


class RandomScoreAdapter(ClassifierAdapter):
    """Uniform random scores in [0, 1], independent of the features."""

    name = "random_score"
    description = "Uniform random probability of citation"

    def __init__(self, seed: int = RANDOM_SEED):
        self.seed = seed

    def train(self, training_set: Sequence[Example]) -> Any:
        # Seed depends on the training examples so each fold draws its own scores
        return np.random.RandomState((self.seed + hash(tuple(training_set))) % (2 ** 32))

    def predict(self, model: np.random.RandomState, test_set: Sequence[Example]) -> np.ndarray:
        return model.uniform(0.0, 1.0, size=len(test_set))

    def get_params(self) -> Dict[str, Any]:
        return {"seed": self.seed}
