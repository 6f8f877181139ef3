"""
Evaluation Module
=================

Cross-validated evaluation of binary stop-outcome classifiers.

Provides:
- Seeded k-fold partitioning
- Confusion counts and TPR/FPR at a cutoff
- Threshold sweep with fold-averaged ROC points
- AUROC by the trapezoidal rule
- Two-sample comparison of per-fold error rates
- Result tables and files
"""

from .errors import (
    EvaluationError,
    InvalidPartitionError,
    AdapterError,
    AdapterTrainingError,
    AdapterPredictionError,
    UndefinedRateError,
    InsufficientSampleError,
)

from .metrics import (
    ConfusionCounts,
    classify,
    threshold_predictions,
)

from .roc import (
    RocPoint,
    auroc,
    sort_points,
)

from .statistical_tests import (
    TestResult,
    ComparisonResult,
    compare,
    paired_ttest,
    cohens_d,
    interpret_effect_size,
    summarize_error_rates,
    generate_comparison_report,
)

from .cross_validation import (
    FoldResult,
    SweepResult,
    KFoldSplitter,
    ThresholdSweepEvaluator,
    partition,
    train_test_split,
    evaluate,
)

from .results_generator import (
    TableConfig,
    ResultsGenerator,
    generate_summary_statistics,
)

__all__ = [
    # Errors
    'EvaluationError',
    'InvalidPartitionError',
    'AdapterError',
    'AdapterTrainingError',
    'AdapterPredictionError',
    'UndefinedRateError',
    'InsufficientSampleError',

    # Confusion counts
    'ConfusionCounts',
    'classify',
    'threshold_predictions',

    # ROC
    'RocPoint',
    'auroc',
    'sort_points',

    # Statistical tests
    'TestResult',
    'ComparisonResult',
    'compare',
    'paired_ttest',
    'cohens_d',
    'interpret_effect_size',
    'summarize_error_rates',
    'generate_comparison_report',

    # Cross-validation
    'FoldResult',
    'SweepResult',
    'KFoldSplitter',
    'ThresholdSweepEvaluator',
    'partition',
    'train_test_split',
    'evaluate',

    # Results generator
    'TableConfig',
    'ResultsGenerator',
    'generate_summary_statistics',
]
