"""
Exploratory Analysis of Cleaned Stops
=====================================

Descriptive statistics computed before any model is trained:
class balance, citation rate by hour and month, and how the speed
differential differs between citations and warnings.
"""

import logging
from typing import Any, Dict

import pandas as pd
from scipy import stats

from config import LABEL_NAME, CLASS_NAMES, CITATION, WARNING

logger = logging.getLogger(__name__)


def citation_rate_by(cleaned: pd.DataFrame, column: str) -> Dict[int, float]:
    """Fraction of stops ending in a citation for each value of `column`."""
    rates = cleaned.groupby(column)[LABEL_NAME].mean()
    return {int(key): float(value) for key, value in rates.items()}


def speed_differential_by_outcome(cleaned: pd.DataFrame) -> Dict[str, Dict[str, float]]:
    """count/mean/std/min/median/max of the speed differential per outcome."""
    described = cleaned.groupby(LABEL_NAME)["speed_differential"].describe()
    summary = {}
    for label, row in described.iterrows():
        summary[CLASS_NAMES[int(label)]] = {
            "count": int(row["count"]),
            "mean": float(row["mean"]),
            "std": float(row["std"]) if pd.notna(row["std"]) else float("nan"),
            "min": float(row["min"]),
            "median": float(row["50%"]),
            "max": float(row["max"]),
        }
    return summary


def summarize_stops(cleaned: pd.DataFrame) -> Dict[str, Any]:
    """
    Summarise a cleaned stop table.

    Args:
        cleaned: Output of data.stops_loader.clean_stops

    Returns:
        Dict with counts, class balance, citation rates by hour/month,
        speed-differential description per outcome, and a Welch t-test
        of the speed differential between citations and warnings
    """
    n_rows = len(cleaned)
    n_citations = int((cleaned[LABEL_NAME] == CITATION).sum())

    summary: Dict[str, Any] = {
        "n_stops": n_rows,
        "n_citations": n_citations,
        "n_warnings": n_rows - n_citations,
        "citation_share": n_citations / n_rows if n_rows else float("nan"),
        "citation_rate_by_hour": citation_rate_by(cleaned, "hour"),
        "citation_rate_by_month": citation_rate_by(cleaned, "month"),
        "speed_differential": speed_differential_by_outcome(cleaned),
    }

    cited = cleaned.loc[cleaned[LABEL_NAME] == CITATION, "speed_differential"]
    warned = cleaned.loc[cleaned[LABEL_NAME] == WARNING, "speed_differential"]
    if len(cited) > 1 and len(warned) > 1:
        statistic, p_value = stats.ttest_ind(cited, warned, equal_var=False)
        summary["speed_differential_test"] = {
            "test_name": "Welch t-test",
            "mean_diff": float(cited.mean() - warned.mean()),
            "statistic": float(statistic),
            "p_value": float(p_value),
        }

    logger.info(f"Exploration: {n_rows:,} stops, "
                f"{summary['citation_share']:.1%} citations")
    return summary
