"""
Models Module
=============

Classifier adapters exposing a uniform train/predict contract.

- NearestNeighborAdapter: k-nearest-neighbour vote
- DecisionTreeAdapter: Gini decision tree
- MajorityClassAdapter / RandomScoreAdapter: trivial baselines
"""

from .classifier import (
    ClassifierAdapter,
    SklearnAdapter,
    NearestNeighborAdapter,
    DecisionTreeAdapter,
    positive_class_probability,
)
from .baselines import MajorityClassAdapter, RandomScoreAdapter

__all__ = [
    'ClassifierAdapter',
    'SklearnAdapter',
    'NearestNeighborAdapter',
    'DecisionTreeAdapter',
    'positive_class_probability',
    'MajorityClassAdapter',
    'RandomScoreAdapter',
]
