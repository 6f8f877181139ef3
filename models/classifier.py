"""
Classifier Adapters
===================

A uniform train/predict contract so the sweep evaluator never needs to
know which algorithm it is evaluating:

    model = adapter.train(training_set)           # List[Example] -> opaque model
    probs = adapter.predict(model, test_set)      # -> probability of Citation

Two adapters wrap scikit-learn estimators:

1. NearestNeighborAdapter:
   - Stores the training set
   - For each test stop, finds the k closest training stops under
     unweighted Euclidean distance over the raw features
   - Probability of citation = citing neighbours / k

2. DecisionTreeAdapter:
   - Greedy recursive partitioning on Gini impurity
   - Probability of citation = share of citations in the test stop's leaf

Adding a classifier means subclassing ClassifierAdapter; the evaluator
does not change.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

import numpy as np
from sklearn.neighbors import KNeighborsClassifier
from sklearn.tree import DecisionTreeClassifier

from config import (
    CITATION, RANDOM_SEED, DEFAULT_NEIGHBORS, DISTANCE_METRIC,
    TREE_CRITERION, TREE_MAX_DEPTH, TREE_MIN_SAMPLES_SPLIT, TREE_MIN_SAMPLES_LEAF,
)
from data.example import Example, examples_to_arrays

logger = logging.getLogger(__name__)


class ClassifierAdapter(ABC):
    """Abstract train/predict contract for binary stop-outcome classifiers."""

    name: str = "abstract_classifier"
    description: str = "Abstract classifier adapter"

    @abstractmethod
    def train(self, training_set: Sequence[Example]) -> Any:
        """Fit on a training set and return the trained model."""
        pass

    @abstractmethod
    def predict(self, model: Any, test_set: Sequence[Example]) -> np.ndarray:
        """Probability of citation for every example in the test set."""
        pass

    def get_params(self) -> Dict[str, Any]:
        return {}

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self.get_params().items())
        return f"{type(self).__name__}({params})"


class SklearnAdapter(ClassifierAdapter):
    """Shared plumbing for adapters backed by a scikit-learn estimator."""

    @abstractmethod
    def build_estimator(self):
        """Return a fresh, unfitted estimator."""
        pass

    def train(self, training_set: Sequence[Example]):
        if not training_set:
            raise ValueError("Cannot train on an empty training set")
        X, y = examples_to_arrays(training_set)
        estimator = self.build_estimator()
        estimator.fit(X, y)
        logger.debug(f"{self.name}: fitted on {len(y)} examples "
                     f"({int(np.sum(y == CITATION))} citations)")
        return estimator

    def predict(self, model, test_set: Sequence[Example]) -> np.ndarray:
        if not test_set:
            return np.empty(0, dtype=float)
        X, _ = examples_to_arrays(test_set)
        return positive_class_probability(model, X)


def positive_class_probability(estimator, X: np.ndarray) -> np.ndarray:
    """
    Citation column of predict_proba.

    A model fitted on a single class has no citation column; its
    probability of citation is constant 1.0 or 0.0.
    """
    classes = list(estimator.classes_)
    if CITATION not in classes:
        return np.zeros(len(X), dtype=float)
    if len(classes) == 1:
        return np.ones(len(X), dtype=float)
    proba = estimator.predict_proba(X)
    return proba[:, classes.index(CITATION)].astype(float)


# =============================================================================
# NEAREST NEIGHBOR
# =============================================================================

class NearestNeighborAdapter(SklearnAdapter):
    """k-nearest-neighbour vote with uniform weights."""

    name = "nearest_neighbor"
    description = "k-nearest-neighbour majority vote over unscaled features"

    def __init__(self, k: int = DEFAULT_NEIGHBORS, metric: str = DISTANCE_METRIC):
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")
        self.k = k
        self.metric = metric
        self.name = f"nearest_neighbor_k{k}"

    def build_estimator(self):
        return KNeighborsClassifier(
            n_neighbors=self.k,
            weights="uniform",
            metric=self.metric,
        )

    def get_params(self) -> Dict[str, Any]:
        return {"k": self.k, "metric": self.metric}


# =============================================================================
# DECISION TREE
# =============================================================================

class DecisionTreeAdapter(SklearnAdapter):
    """Impurity-reduction decision tree; leaf citation share as probability."""

    name = "decision_tree"
    description = "Greedy decision tree on Gini impurity"

    def __init__(
        self,
        criterion: str = TREE_CRITERION,
        max_depth: Optional[int] = TREE_MAX_DEPTH,
        min_samples_split: int = TREE_MIN_SAMPLES_SPLIT,
        min_samples_leaf: int = TREE_MIN_SAMPLES_LEAF,
        random_state: int = RANDOM_SEED
    ):
        self.criterion = criterion
        self.max_depth = max_depth
        self.min_samples_split = min_samples_split
        self.min_samples_leaf = min_samples_leaf
        self.random_state = random_state

    def build_estimator(self):
        return DecisionTreeClassifier(
            criterion=self.criterion,
            max_depth=self.max_depth,
            min_samples_split=self.min_samples_split,
            min_samples_leaf=self.min_samples_leaf,
            random_state=self.random_state,
        )

    def get_params(self) -> Dict[str, Any]:
        return {
            "criterion": self.criterion,
            "max_depth": self.max_depth,
            "min_samples_split": self.min_samples_split,
            "min_samples_leaf": self.min_samples_leaf,
            "random_state": self.random_state,
        }
