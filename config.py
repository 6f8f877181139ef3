"""
Central Configuration for Traffic Stop Outcome Evaluation
=========================================================

This module provides a single source of truth for all configuration
parameters, including random seeds for reproducibility.
"""

from pathlib import Path
from typing import Dict, Any

import numpy as np

# =============================================================================
# REPRODUCIBILITY
# =============================================================================

RANDOM_SEED = 42  # Fixed seed for reproducibility

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.absolute()
DATA_DIR = PROJECT_ROOT / "data"
RESULTS_DIR = PROJECT_ROOT / "results"
CV_RESULTS_DIR = RESULTS_DIR / "cv_results"

# =============================================================================
# EVALUATION PARAMETERS
# =============================================================================

DEFAULT_CV_FOLDS = 10
SIGNIFICANCE_LEVEL = 0.05  # Alpha for statistical tests

# Cutoff sweep: 11 evenly spaced values 0.0, 0.1, ..., 1.0
DEFAULT_CUTOFFS = tuple(float(c) for c in np.round(np.linspace(0.0, 1.0, 11), 1))
CANONICAL_CUTOFF = 0.5  # Native decision threshold of both classifiers

# =============================================================================
# CLASSIFIER SETTINGS
# =============================================================================

DEFAULT_NEIGHBORS = 5
DISTANCE_METRIC = "euclidean"

# Mirrors the usual recursive-partitioning defaults (minsplit=20, minbucket=7)
TREE_CRITERION = "gini"
TREE_MAX_DEPTH = None
TREE_MIN_SAMPLES_SPLIT = 20
TREE_MIN_SAMPLES_LEAF = 7

# =============================================================================
# CLASS INFORMATION
# =============================================================================

CITATION = 1
WARNING = 0
CLASS_NAMES = {WARNING: "Warning", CITATION: "Citation"}
POSITIVE_CLASS = CITATION  # Citation is the positive class

# =============================================================================
# STOP RECORDS
# =============================================================================

# Source column names in the raw stop export
STOP_COLUMNS = {
    "date": "Date Of Stop",
    "time": "Time Of Stop",
    "description": "Description",
    "violation_type": "Violation Type",
}

STOP_DATE_FORMAT = "%m/%d/%Y"
STOP_TIME_FORMAT = "%H:%M:%S"

FEATURE_NAMES = ("month", "day", "hour", "speed_differential")
LABEL_NAME = "citation"

# Rows outside these bounds are treated as extraction noise
MAX_SPEED_DIFFERENTIAL = 500
MIN_POSTED_LIMIT = 0


def ensure_directories():
    """Create necessary directories if they don't exist."""
    for directory in [RESULTS_DIR, CV_RESULTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


def get_config() -> Dict[str, Any]:
    """Get all configuration as a dictionary."""
    return {
        "random_seed": RANDOM_SEED,
        "cv_folds": DEFAULT_CV_FOLDS,
        "cutoffs": list(DEFAULT_CUTOFFS),
        "canonical_cutoff": CANONICAL_CUTOFF,
        "significance_level": SIGNIFICANCE_LEVEL,
        "neighbors": DEFAULT_NEIGHBORS,
        "distance_metric": DISTANCE_METRIC,
        "tree": {
            "criterion": TREE_CRITERION,
            "max_depth": TREE_MAX_DEPTH,
            "min_samples_split": TREE_MIN_SAMPLES_SPLIT,
            "min_samples_leaf": TREE_MIN_SAMPLES_LEAF,
        },
        "class_names": CLASS_NAMES,
        "positive_class": POSITIVE_CLASS,
        "features": list(FEATURE_NAMES),
    }
