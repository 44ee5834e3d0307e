"""
Figures for evaluation reports.

Uses Agg backend for CI/headless compatibility.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use('Agg')  # Headless backend for CI
import matplotlib.pyplot as plt
import numpy as np
from sklearn.metrics import ConfusionMatrixDisplay

from ..evaluation import EvaluationReport
from ..utils import get_logger, json_log

log = get_logger(__name__)

FIGURE_DPI = 150


def _save_figure(fig: plt.Figure, path: Path) -> Path:
    """Save figure with consistent settings."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=FIGURE_DPI, bbox_inches='tight', facecolor='white')
    plt.close(fig)
    log.info(json_log('plots.saved', component='reports', path=str(path)))
    return path


def plot_confusion_matrix(
    report: EvaluationReport,
    output_path: str | Path,
    title: str = 'Confusion Matrix',
) -> Path:
    """Render the report's confusion matrix (integer counts) to a PNG."""
    fig, ax = plt.subplots(figsize=(5, 4))
    display = ConfusionMatrixDisplay(
        confusion_matrix=np.asarray(report.confusion_matrix),
        display_labels=[str(cls) for cls in report.classes],
    )
    display.plot(ax=ax, cmap='Blues', values_format='d', colorbar=False)
    ax.set_title(f'{title} (accuracy {report.accuracy:.2f})')
    return _save_figure(fig, Path(output_path))
