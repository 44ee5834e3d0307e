"""
Forward pass of the training workflow.

1. Load the labeled dataset
2. Stratified train/test split
3. Fit LogReg on TRAIN only
4. Predict TEST labels
5. Evaluate predictions
6. Optionally persist model, JSON report and confusion-matrix plot

Each stage runs exactly once; failures propagate as ``WorkflowError``
subclasses naming the stage. Non-convergence is the only recoverable case.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from ..config import WorkflowConfig
from ..data import DatasetSplit, load_dataset, split_dataset
from ..errors import EvaluationError, WorkflowError
from ..evaluation import EvaluationReport, evaluate, save_report
from ..models.logreg import FittedModel, load_model, predict_labels, save_model, train_classifier
from ..reports import plot_confusion_matrix
from ..utils import get_logger, json_log

log = get_logger(__name__)


@dataclass(frozen=True)
class WorkflowResult:
    split: DatasetSplit
    model: FittedModel
    predictions: np.ndarray
    report: EvaluationReport
    model_path: Path | None = None
    report_path: Path | None = None
    plot_path: Path | None = None


def match_classes(
    configured: Sequence[Any] | None,
    model_classes: Sequence[Any],
) -> tuple[Any, ...]:
    """
    Map a configured class order onto the model's own label values.

    YAML may give ``[0, 1]`` or ``['0', '1']`` for labels pandas read as
    integers; entries are matched by their ``str()`` form.

    Raises:
        EvaluationError: If a configured class is not a class the model knows.
    """
    if not configured:
        return tuple(model_classes)

    by_name = {str(cls): cls for cls in model_classes}
    unknown = [str(cls) for cls in configured if str(cls) not in by_name]
    if unknown:
        raise EvaluationError(
            f'Configured classes {unknown} are not among the trained classes '
            f'{sorted(by_name)}'
        )
    return tuple(by_name[str(cls)] for cls in configured)


def run_workflow(config: WorkflowConfig) -> WorkflowResult:
    """Run load -> split -> train -> predict -> evaluate -> persist once."""
    log.info(json_log('workflow.start', component='workflow', data=str(config.data.path)))

    try:
        dataset = load_dataset(
            config.data.path,
            label_column=config.data.label_column,
            feature_columns=config.data.feature_columns,
        )
        split = split_dataset(
            dataset,
            test_size=config.split.test_size,
            random_state=config.split.random_state,
            stratify=config.split.stratify,
        )
        model = train_classifier(split.x_train, split.y_train, config.classifier)
        predictions = predict_labels(model, split.x_test)
        classes = match_classes(config.data.classes, model.classes)
        report = evaluate(split.y_test, predictions, classes=classes)

        artifacts = config.artifacts
        model_path = save_model(model, artifacts.model_path) if artifacts.model_path else None
        report_path = save_report(report, artifacts.report_path) if artifacts.report_path else None
        plot_path = (
            plot_confusion_matrix(report, artifacts.confusion_matrix_plot)
            if artifacts.confusion_matrix_plot
            else None
        )
    except WorkflowError as exc:
        log.error(
            json_log('workflow.failed', component='workflow', stage=exc.stage, error=str(exc))
        )
        raise

    log.info(
        json_log(
            'workflow.completed',
            component='workflow',
            accuracy=round(report.accuracy, 4),
            converged=model.converged,
            model_path=str(model_path) if model_path else None,
        )
    )
    return WorkflowResult(
        split=split,
        model=model,
        predictions=predictions,
        report=report,
        model_path=model_path,
        report_path=report_path,
        plot_path=plot_path,
    )


def evaluate_saved_model(
    model_path: str | Path,
    data_path: str | Path,
    label_column: str = 'label',
    classes: Sequence[Any] | None = None,
) -> EvaluationReport:
    """Reload a persisted model and evaluate it on a labeled CSV without retraining."""
    model = load_model(model_path)
    dataset = load_dataset(
        data_path,
        label_column=label_column,
        feature_columns=model.feature_columns,
    )
    predictions = predict_labels(model, dataset.features)
    return evaluate(dataset.labels, predictions, classes=match_classes(classes, model.classes))
