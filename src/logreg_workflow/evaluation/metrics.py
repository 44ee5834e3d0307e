"""
Evaluation metrics for predicted vs. true labels.

All per-class numbers come from scikit-learn with an explicit, fixed class
ordering so the confusion matrix layout is stable:

- rows of the confusion matrix are true classes, columns are predicted classes
- macro average = unweighted mean over classes
- weighted average = mean weighted by per-class support
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    classification_report,
    confusion_matrix,
    precision_recall_fscore_support,
)

from ..errors import EvaluationError
from ..utils import get_logger, json_log

log = get_logger(__name__)


@dataclass(frozen=True)
class ClassMetrics:
    precision: float
    recall: float
    f1_score: float
    support: int


@dataclass(frozen=True)
class EvaluationReport:
    """Read-only summary derived from (true labels, predicted labels)."""

    accuracy: float
    classes: tuple[Any, ...]
    per_class: dict[Any, ClassMetrics]
    macro_avg: ClassMetrics
    weighted_avg: ClassMetrics
    confusion_matrix: list[list[int]] = field(default_factory=list)
    n_samples: int = 0
    classification_report: str = ''

    def to_dict(self) -> dict[str, Any]:
        return {
            'accuracy': self.accuracy,
            'n_samples': self.n_samples,
            'classes': [str(cls) for cls in self.classes],
            'per_class': {str(cls): asdict(m) for cls, m in self.per_class.items()},
            'macro_avg': asdict(self.macro_avg),
            'weighted_avg': asdict(self.weighted_avg),
            'confusion_matrix': self.confusion_matrix,
            'classification_report': self.classification_report,
        }


def _to_list(values: Iterable[Any]) -> list[Any]:
    return [v.item() if isinstance(v, np.generic) else v for v in values]


def _sorted_classes(labels: set[Any]) -> tuple[Any, ...]:
    try:
        return tuple(sorted(labels))
    except TypeError:
        return tuple(sorted(labels, key=str))


def evaluate(
    y_true: Iterable[Any],
    y_pred: Iterable[Any],
    classes: Sequence[Any] | None = None,
) -> EvaluationReport:
    """
    Compare predicted labels with true labels.

    Args:
        y_true: True labels.
        y_pred: Predicted labels, aligned positionally with ``y_true``.
        classes: Fixed order of the two classes. Defaults to the sorted pair
            of labels seen in either sequence.

    Returns:
        EvaluationReport with accuracy, per-class metrics, averages, the 2x2
        confusion matrix and sklearn's text classification report.

    Raises:
        EvaluationError: If the sequences are empty, differ in length, do not
            resolve to exactly two classes, or contain labels outside
            ``classes``.
    """
    true_list = _to_list(y_true)
    pred_list = _to_list(y_pred)

    if len(true_list) != len(pred_list):
        raise EvaluationError(
            f'Label sequences differ in length: {len(true_list)} true vs '
            f'{len(pred_list)} predicted'
        )
    if not true_list:
        raise EvaluationError('Cannot evaluate empty label sequences')

    observed = set(true_list) | set(pred_list)
    if classes is None:
        if len(observed) > 2:
            raise EvaluationError(
                f'Expected a binary problem, found {len(observed)} labels: '
                f'{sorted(map(str, observed))}'
            )
        if len(observed) < 2:
            raise EvaluationError(
                f'Only one label ({next(iter(observed))!s}) was seen; pass classes=[...] '
                'with both classes to fix the confusion-matrix layout'
            )
        class_order = _sorted_classes(observed)
    else:
        class_order = tuple(classes)
        if len(set(class_order)) != 2 or len(class_order) != 2:
            raise EvaluationError(
                f'Expected exactly two distinct classes, got {[str(cls) for cls in class_order]}'
            )
        unknown = observed - set(class_order)
        if unknown:
            raise EvaluationError(
                f'Labels {sorted(map(str, unknown))} are not in the known classes '
                f'{[str(cls) for cls in class_order]}'
            )

    labels = list(class_order)
    accuracy = float(accuracy_score(true_list, pred_list))
    precision, recall, f1, support = precision_recall_fscore_support(
        true_list, pred_list, labels=labels, zero_division=0
    )
    per_class = {
        cls: ClassMetrics(
            precision=float(precision[idx]),
            recall=float(recall[idx]),
            f1_score=float(f1[idx]),
            support=int(support[idx]),
        )
        for idx, cls in enumerate(class_order)
    }

    averages = {}
    for average in ('macro', 'weighted'):
        avg_p, avg_r, avg_f1, _ = precision_recall_fscore_support(
            true_list, pred_list, labels=labels, average=average, zero_division=0
        )
        averages[average] = ClassMetrics(
            precision=float(avg_p),
            recall=float(avg_r),
            f1_score=float(avg_f1),
            support=len(true_list),
        )

    cm = confusion_matrix(true_list, pred_list, labels=labels)
    report_text = classification_report(
        true_list,
        pred_list,
        labels=labels,
        target_names=[str(cls) for cls in class_order],
        digits=2,
        zero_division=0,
    )

    report = EvaluationReport(
        accuracy=accuracy,
        classes=class_order,
        per_class=per_class,
        macro_avg=averages['macro'],
        weighted_avg=averages['weighted'],
        confusion_matrix=cm.astype(int).tolist(),
        n_samples=len(true_list),
        classification_report=report_text,
    )

    log.info(
        json_log(
            'evaluate.completed',
            component='evaluation',
            n_samples=report.n_samples,
            accuracy=round(accuracy, 4),
            macro_f1=round(report.macro_avg.f1_score, 4),
        )
    )
    return report


def save_report(report: EvaluationReport, path: str | Path) -> Path:
    """Write the report as JSON."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(report.to_dict(), indent=2, ensure_ascii=False),
        encoding='utf-8',
    )
    log.info(json_log('evaluate.report_saved', component='evaluation', path=str(output_path)))
    return output_path
