"""Evaluation metrics and report rendering."""

from .formatting import format_confusion_matrix, format_report
from .metrics import ClassMetrics, EvaluationReport, evaluate, save_report

__all__ = [
    'ClassMetrics',
    'EvaluationReport',
    'evaluate',
    'save_report',
    'format_confusion_matrix',
    'format_report',
]
