"""End-to-end tests for the forward workflow."""

from __future__ import annotations

import json

import numpy as np
import pandas as pd
import pytest

from logreg_workflow.config import (
    ArtifactConfig,
    ClassifierConfig,
    DataConfig,
    SplitConfig,
    WorkflowConfig,
    load_workflow_config,
)
from logreg_workflow.errors import EvaluationError, StratificationError
from logreg_workflow.models.logreg import load_model, predict_labels
from logreg_workflow.pipeline import evaluate_saved_model, match_classes, run_workflow


@pytest.fixture
def config(tmp_path, labeled_frame) -> WorkflowConfig:
    data_path = tmp_path / 'dataset.csv'
    labeled_frame.to_csv(data_path, index=False)
    return WorkflowConfig(
        data=DataConfig(path=data_path, label_column='label', classes=('A', 'B')),
        split=SplitConfig(test_size=0.2, random_state=42),
        classifier=ClassifierConfig(scale_features=True),
        artifacts=ArtifactConfig(
            model_path=tmp_path / 'artifacts' / 'logreg.joblib',
            report_path=tmp_path / 'artifacts' / 'metrics_test.json',
            confusion_matrix_plot=tmp_path / 'artifacts' / 'confusion_matrix.png',
        ),
    )


def test_run_workflow_end_to_end(config):
    result = run_workflow(config)

    assert len(result.split.x_test) == 20
    assert abs(result.split.test_class_counts['A'] - 12) <= 1
    assert abs(result.split.test_class_counts['B'] - 8) <= 1
    assert len(result.predictions) == 20

    report = result.report
    matrix = np.asarray(report.confusion_matrix)
    assert matrix.shape == (2, 2)
    assert matrix.sum() == 20
    assert np.trace(matrix) / 20 == pytest.approx(report.accuracy)
    assert report.accuracy == pytest.approx(
        np.mean(result.predictions == result.split.y_test.to_numpy())
    )

    assert result.model_path.exists()
    assert result.plot_path.exists()
    saved = json.loads(result.report_path.read_text(encoding='utf-8'))
    assert saved['accuracy'] == pytest.approx(report.accuracy)


def test_reloaded_model_reproduces_predictions(config):
    result = run_workflow(config)

    restored = load_model(result.model_path)

    np.testing.assert_array_equal(
        predict_labels(restored, result.split.x_test), result.predictions
    )


def test_evaluate_saved_model_without_retraining(tmp_path, config):
    result = run_workflow(config)
    test_csv = tmp_path / 'test.csv'
    result.split.x_test.assign(label=result.split.y_test).to_csv(test_csv, index=False)

    report = evaluate_saved_model(result.model_path, test_csv, label_column='label')

    assert report.accuracy == pytest.approx(result.report.accuracy)
    assert report.confusion_matrix == result.report.confusion_matrix


def test_run_workflow_is_deterministic(config):
    first = run_workflow(config)
    second = run_workflow(config)

    assert list(first.split.x_test.index) == list(second.split.x_test.index)
    np.testing.assert_array_equal(first.predictions, second.predictions)


def test_run_workflow_stops_at_split_stage(tmp_path):
    data_path = tmp_path / 'one_class.csv'
    pd.DataFrame({'x': range(20), 'label': ['A'] * 20}).to_csv(data_path, index=False)
    cfg = WorkflowConfig(data=DataConfig(path=data_path))

    with pytest.raises(StratificationError) as exc_info:
        run_workflow(cfg)
    assert exc_info.value.stage == 'split'


def test_run_workflow_with_integer_labels(tmp_path, labeled_frame):
    data_path = tmp_path / 'dataset.csv'
    labeled_frame.assign(label=labeled_frame['label'].map({'A': 0, 'B': 1})).to_csv(
        data_path, index=False
    )
    config_path = tmp_path / 'workflow.yaml'
    config_path.write_text(
        f'data:\n  path: {data_path}\n  classes: [0, 1]\nclassifier:\n  scale_features: true\n',
        encoding='utf-8',
    )

    result = run_workflow(load_workflow_config(config_path))

    assert result.report.classes == (0, 1)
    assert set(result.report.per_class) == {0, 1}
    assert np.asarray(result.report.confusion_matrix).sum() == 20


def test_integer_labels_with_reversed_class_order(tmp_path, labeled_frame):
    data_path = tmp_path / 'dataset.csv'
    labeled_frame.assign(label=labeled_frame['label'].map({'A': 0, 'B': 1})).to_csv(
        data_path, index=False
    )
    cfg = WorkflowConfig(data=DataConfig(path=data_path, classes=(1, 0)))

    result = run_workflow(cfg)

    assert result.report.classes == (1, 0)
    assert result.report.confusion_matrix[0][0] + result.report.confusion_matrix[0][1] == (
        result.split.test_class_counts[1]
    )


def test_match_classes_maps_string_entries_to_model_labels():
    assert match_classes(['1', '0'], (0, 1)) == (1, 0)
    assert match_classes([0, 1], (0, 1)) == (0, 1)
    assert match_classes(None, ('A', 'B')) == ('A', 'B')


def test_match_classes_rejects_unknown_class():
    with pytest.raises(EvaluationError, match=r"\['C'\] are not among the trained classes"):
        match_classes(['A', 'C'], ('A', 'B'))
