"""Console rendering of evaluation reports."""

from __future__ import annotations

import pandas as pd

from .metrics import EvaluationReport


def format_confusion_matrix(report: EvaluationReport) -> str:
    names = [str(cls) for cls in report.classes]
    frame = pd.DataFrame(report.confusion_matrix, index=names, columns=names)
    frame.index.name = 'true \\ pred'
    return frame.to_string()


def format_report(report: EvaluationReport) -> str:
    """Render accuracy, sklearn's classification report and the confusion matrix."""
    return '\n'.join(
        [
            f'Accuracy: {report.accuracy:.2f}',
            '',
            'Classification report:',
            report.classification_report.rstrip('\n'),
            '',
            'Confusion matrix (rows = true, columns = predicted):',
            format_confusion_matrix(report),
        ]
    )
