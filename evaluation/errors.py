"""
Evaluation Errors
=================

Failures surfaced by the evaluation engine. Fold-level classifier
failures abort a whole sweep; undefined rates are reported as warnings
and carried forward as NaN.
"""

from typing import Optional


class EvaluationError(Exception):
    """Base class for evaluation failures."""


class InvalidPartitionError(EvaluationError, ValueError):
    """Fold count below 2 or fewer examples than folds."""


class AdapterError(EvaluationError):
    """A wrapped classifier failed on one fold."""

    stage = "run"

    def __init__(self, adapter_name: str, fold_idx: Optional[int] = None, reason: str = ""):
        self.adapter_name = adapter_name
        self.fold_idx = fold_idx
        self.reason = reason
        where = f" on fold {fold_idx}" if fold_idx is not None else ""
        super().__init__(f"{adapter_name} failed to {self.stage}{where}: {reason}")


class AdapterTrainingError(AdapterError):
    stage = "train"


class AdapterPredictionError(AdapterError):
    stage = "predict"


class UndefinedRateError(RuntimeWarning):
    """
    TPR or FPR with a zero denominator.

    Issued through warnings.warn rather than raised: the rate becomes NaN
    and propagates into fold averages.
    """


class InsufficientSampleError(EvaluationError, ValueError):
    """Fewer than two values in a sample given to the comparator."""
