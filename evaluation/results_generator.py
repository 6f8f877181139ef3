"""
Results Generator

Generates formatted tables and files from threshold-sweep results.
Outputs in multiple formats: Markdown, CSV (ROC points for plotting),
JSON, and console.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from config import RESULTS_DIR, SIGNIFICANCE_LEVEL, get_config

logger = logging.getLogger(__name__)


@dataclass
class TableConfig:
    """Configuration for generating result tables."""
    title: str
    precision: int = 4
    highlight_best: bool = True


class ResultsGenerator:
    """
    Generates formatted results from a classifier study.

    Produces:
    - Markdown summary table (mean/std error rate, AUROC per classifier)
    - CSV of ROC points, one row per (classifier, cutoff)
    - JSON with every sweep, the comparison and the exploration summary
    """

    def __init__(self, output_dir: Optional[Path] = None):
        """
        Initialize results generator.

        Args:
            output_dir: Directory for output files (default: results/)
        """
        self.output_dir = Path(output_dir) if output_dir else RESULTS_DIR
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def generate_all(
        self,
        sweeps: Sequence[Any],
        comparison: Optional[Any] = None,
        exploration: Optional[Dict[str, Any]] = None
    ) -> Dict[str, str]:
        """
        Generate all result formats.

        Args:
            sweeps: SweepResult objects, one per classifier
            comparison: ComparisonResult for the two classifiers (optional)
            exploration: Output of data.exploration.summarize_stops (optional)

        Returns:
            Dict mapping format name to file path
        """
        generated = {
            "summary_markdown": str(self.generate_summary_markdown(sweeps, comparison)),
            "roc_csv": str(self.generate_roc_csv(sweeps)),
            "all_json": str(self.save_json(sweeps, comparison, exploration)),
        }
        logger.info(f"Results written to {self.output_dir}")
        return generated

    @staticmethod
    def summary_frame(sweeps: Sequence[Any]) -> pd.DataFrame:
        """One row per classifier: mean/std error rate at 0.5 and AUROC."""
        rows = []
        for sweep in sweeps:
            summary = sweep.error_summary
            rows.append({
                "classifier": sweep.adapter_name,
                "folds": sweep.n_folds,
                "mean_error_rate": summary["mean"],
                "std_error_rate": summary["std"],
                "ci_lower": summary["ci"][0],
                "ci_upper": summary["ci"][1],
                "auroc": sweep.auroc,
            })
        return pd.DataFrame(rows)

    @staticmethod
    def roc_frame(sweeps: Sequence[Any]) -> pd.DataFrame:
        """Long-format ROC points for an external plotting layer."""
        rows = []
        for sweep in sweeps:
            for point in sweep.roc_points:
                rows.append({"classifier": sweep.adapter_name, **point.to_dict()})
        return pd.DataFrame(rows, columns=["classifier", "cutoff",
                                           "false_positive_rate", "true_positive_rate"])

    def generate_summary_markdown(
        self,
        sweeps: Sequence[Any],
        comparison: Optional[Any] = None,
        config: Optional[TableConfig] = None
    ) -> Path:
        """
        Generate markdown table comparing the classifiers.

        Returns:
            Path to generated markdown file
        """
        config = config or TableConfig(title="Classifier Comparison")
        frame = self.summary_frame(sweeps)
        p = config.precision

        lines = [
            f"# {config.title}",
            "",
            f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "",
            "| Classifier | Error rate (mean ± std) | 95% CI | AUROC |",
            "|---|---|---|---|",
        ]

        best_error = frame["mean_error_rate"].min() if config.highlight_best and len(frame) else None
        for _, row in frame.iterrows():
            error_cell = f"{row['mean_error_rate']:.{p}f} ± {row['std_error_rate']:.{p}f}"
            if best_error is not None and row["mean_error_rate"] == best_error:
                error_cell = f"**{error_cell}**"
            lines.append(
                f"| {row['classifier']} | {error_cell} | "
                f"[{row['ci_lower']:.{p}f}, {row['ci_upper']:.{p}f}] | {row['auroc']:.{p}f} |"
            )

        if comparison is not None:
            lines.extend([
                "",
                "## Error-rate comparison",
                "",
                f"- {comparison.model_a_name} − {comparison.model_b_name}: "
                f"{comparison.mean_diff:+.{p}f}",
                f"- {comparison.test_name}: t = {comparison.statistic:.{p}f}, "
                f"p = {comparison.p_value:.{p}f} "
                f"({'significant' if comparison.significant else 'not significant'} "
                f"at α = {SIGNIFICANCE_LEVEL})",
            ])

        output_path = self.output_dir / "classifier_comparison.md"
        output_path.write_text("\n".join(lines) + "\n")
        return output_path

    def generate_roc_csv(self, sweeps: Sequence[Any]) -> Path:
        output_path = self.output_dir / "roc_points.csv"
        self.roc_frame(sweeps).to_csv(output_path, index=False)
        return output_path

    def save_json(
        self,
        sweeps: Sequence[Any],
        comparison: Optional[Any] = None,
        exploration: Optional[Dict[str, Any]] = None,
        filename: str = "all_results.json"
    ) -> Path:
        payload: Dict[str, Any] = {
            "generated": datetime.now().isoformat(),
            "config": get_config(),
            "sweeps": [sweep.to_dict() for sweep in sweeps],
        }
        if comparison is not None:
            payload["comparison"] = comparison.to_dict()
        if exploration is not None:
            payload["exploration"] = exploration

        output_path = self.output_dir / filename
        with open(output_path, "w") as f:
            json.dump(payload, f, indent=2, default=str)
        return output_path


def generate_summary_statistics(sweeps: Sequence[Any]) -> List[Dict[str, Any]]:
    """Per-classifier summary rows as plain dicts."""
    return ResultsGenerator.summary_frame(sweeps).to_dict(orient="records")
