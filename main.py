#!/usr/bin/env python3
"""
Traffic Stop Outcome Classifier Study
=====================================

Predicts whether a traffic stop ends in a Citation or a Warning and
evaluates two classifiers with cross-validation:

    stop export (CSV)
          │
          ▼
    ┌──────────────┐     ┌──────────────────┐
    │ stops_loader │────▶│   exploration    │  class balance, rates by hour/month
    └──────┬───────┘     └──────────────────┘
           │ List[Example]
           ▼
    ┌──────────────────────────────┐
    │   ThresholdSweepEvaluator    │  k folds × 11 cutoffs
    │  ┌────────────┐ ┌──────────┐ │
    │  │ k-NN       │ │ tree     │ │
    │  └────────────┘ └──────────┘ │
    └──────┬───────────────┬───────┘
           │ ROC points    │ per-fold error rates @0.5
           ▼               ▼
        AUROC          Welch t-test (k-NN vs tree)

Usage:
    python main.py --data stops.csv              Run the study on a stop export
    python main.py --data stops.csv --folds 5    Use 5-fold cross-validation
    python main.py --demo                        Run on synthetic stops
    python main.py --data stops.csv --jobs 4     Train folds on 4 threads
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from config import (
    RANDOM_SEED, DEFAULT_CV_FOLDS, DEFAULT_NEIGHBORS, DEFAULT_CUTOFFS,
    CITATION, WARNING,
)
from data.example import Example
from data.exploration import summarize_stops
from data.stops_loader import StopDataError, load_stops, clean_stops, build_examples
from evaluation.cross_validation import ThresholdSweepEvaluator, SweepResult
from evaluation.errors import EvaluationError
from evaluation.results_generator import ResultsGenerator
from evaluation.statistical_tests import compare, generate_comparison_report
from models.classifier import NearestNeighborAdapter, DecisionTreeAdapter

logger = logging.getLogger(__name__)


def run_study(
    examples: Sequence[Example],
    n_folds: int = DEFAULT_CV_FOLDS,
    neighbors: int = DEFAULT_NEIGHBORS,
    seed: int = RANDOM_SEED,
    cutoffs: Sequence[float] = DEFAULT_CUTOFFS,
    n_jobs: int = 1
) -> Dict[str, Any]:
    """
    Sweep both classifiers over the same folds and compare their error rates.

    Returns:
        Dict with "sweeps" (nearest neighbour first, then tree) and
        "comparison" (mean_diff = kNN - tree)
    """
    evaluator = ThresholdSweepEvaluator(
        n_folds=n_folds,
        random_state=seed,
        cutoffs=cutoffs,
        n_jobs=n_jobs,
    )

    adapters = [NearestNeighborAdapter(k=neighbors), DecisionTreeAdapter(random_state=seed)]
    sweeps: List[SweepResult] = [evaluator.evaluate(examples, adapter) for adapter in adapters]

    comparison = compare(
        sweeps[0].error_rates_at_half,
        sweeps[1].error_rates_at_half,
        model_a_name=sweeps[0].adapter_name,
        model_b_name=sweeps[1].adapter_name,
    )

    return {"sweeps": sweeps, "comparison": comparison}


def make_demo_examples(n: int = 400, seed: int = RANDOM_SEED) -> List[Example]:
    """
    Synthetic stops: citations skew towards larger speed differentials
    and late-night hours.
    """
    rng = np.random.RandomState(seed)
    examples = []
    for _ in range(n):
        label = CITATION if rng.uniform() < 0.4 else WARNING
        month = rng.randint(1, 13)
        day = rng.randint(1, 29)
        if label == CITATION:
            hour = rng.choice([0, 1, 2, 3, 22, 23]) if rng.uniform() < 0.5 else rng.randint(0, 24)
            differential = max(1.0, rng.normal(22, 8))
        else:
            hour = rng.randint(0, 24)
            differential = max(1.0, rng.normal(12, 6))
        examples.append(Example(features=(month, day, hour, round(differential)), label=label))
    return examples


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Cross-validated Citation/Warning classifier study",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py --data stops.csv               Run on a stop export
    python main.py --demo                         Synthetic demonstration
    python main.py --data stops.csv --no-save     Log results only
    python main.py --data stops.csv --output r.json  Also dump a single JSON
        """
    )

    parser.add_argument(
        "--data",
        type=str,
        default=None,
        help="Path to the stop export (CSV)"
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run on synthetic stops"
    )
    parser.add_argument(
        "--folds",
        type=int,
        default=DEFAULT_CV_FOLDS,
        help="Number of cross-validation folds"
    )
    parser.add_argument(
        "--neighbors",
        type=int,
        default=DEFAULT_NEIGHBORS,
        help="k for the nearest-neighbour classifier"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=RANDOM_SEED,
        help="Seed of the fold permutation"
    )
    parser.add_argument(
        "--jobs",
        type=int,
        default=1,
        help="Threads for per-fold training"
    )
    parser.add_argument(
        "--results-dir",
        type=str,
        default=None,
        help="Directory for result files (default: results/)"
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Save combined results to this JSON file"
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Do not write result files"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Minimal output"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not args.demo and not args.data:
        parser.error("either --data or --demo is required")

    exploration: Optional[Dict[str, Any]] = None
    if args.demo:
        examples = make_demo_examples(seed=args.seed)
    else:
        try:
            cleaned = clean_stops(load_stops(args.data))
        except (FileNotFoundError, StopDataError) as e:
            logger.error(f"Could not load stop data: {e}")
            sys.exit(1)
        exploration = summarize_stops(cleaned)
        examples = build_examples(cleaned)

    try:
        study = run_study(
            examples,
            n_folds=args.folds,
            neighbors=args.neighbors,
            seed=args.seed,
            n_jobs=args.jobs,
        )
    except EvaluationError as e:
        logger.error(f"Evaluation failed: {e}")
        sys.exit(1)

    sweeps, comparison = study["sweeps"], study["comparison"]
    for sweep in sweeps:
        print(sweep.summary_string())
        print()
    print(generate_comparison_report(comparison))

    if not args.no_save:
        generator = ResultsGenerator(Path(args.results_dir) if args.results_dir else None)
        generator.generate_all(sweeps, comparison, exploration)

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "sweeps": [s.to_dict() for s in sweeps],
                "comparison": comparison.to_dict(),
                "exploration": exploration,
            }, f, indent=2, default=str)
        print(f"\nResults saved to {args.output}")


if __name__ == "__main__":
    main()
