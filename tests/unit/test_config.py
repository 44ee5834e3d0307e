from __future__ import annotations

from pathlib import Path

import pytest

from logreg_workflow.config import ClassifierConfig, load_workflow_config


def _write(tmp_path: Path, text: str) -> Path:
    config_path = tmp_path / 'configs' / 'workflow.yaml'
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(text, encoding='utf-8')
    return config_path


def test_load_workflow_config_resolves_relative_paths(tmp_path):
    config_path = _write(
        tmp_path,
        """
data:
  path: ../data/dataset.csv
  label_column: outcome
  feature_columns: [age, income]
  classes: [A, B]
split:
  test_size: 0.25
  random_state: 7
classifier:
  max_iter: 500
  C: 0.5
  scale_features: true
artifacts:
  model_path: ../artifacts/logreg.joblib
""",
    )

    cfg = load_workflow_config(config_path)

    assert cfg.data.path == (tmp_path / 'data' / 'dataset.csv').resolve()
    assert cfg.data.label_column == 'outcome'
    assert cfg.data.feature_columns == ('age', 'income')
    assert cfg.data.classes == ('A', 'B')
    assert cfg.split.test_size == 0.25
    assert cfg.split.random_state == 7
    assert cfg.split.stratify is True
    assert cfg.classifier.max_iter == 500
    assert cfg.classifier.C == 0.5
    assert cfg.classifier.scale_features is True
    assert cfg.artifacts.model_path == (tmp_path / 'artifacts' / 'logreg.joblib').resolve()
    assert cfg.artifacts.report_path is None


def test_load_workflow_config_keeps_numeric_classes(tmp_path):
    config_path = _write(tmp_path, 'data:\n  path: d.csv\n  classes: [0, 1]\n')

    cfg = load_workflow_config(config_path)

    assert cfg.data.classes == (0, 1)
    assert all(isinstance(cls, int) for cls in cfg.data.classes)


def test_load_workflow_config_defaults(tmp_path):
    config_path = _write(tmp_path, 'data:\n  path: dataset.csv\n')

    cfg = load_workflow_config(config_path)

    assert cfg.data.label_column == 'label'
    assert cfg.data.feature_columns is None
    assert cfg.split.test_size == 0.2
    assert cfg.split.random_state == 42
    assert cfg.classifier == ClassifierConfig()
    assert cfg.artifacts.model_path is None


def test_load_workflow_config_requires_data_path(tmp_path):
    config_path = _write(tmp_path, 'split:\n  test_size: 0.2\n')

    with pytest.raises(ValueError, match='data.path must be set'):
        load_workflow_config(config_path)


def test_load_workflow_config_rejects_bad_test_size(tmp_path):
    config_path = _write(tmp_path, 'data:\n  path: d.csv\nsplit:\n  test_size: 1.5\n')

    with pytest.raises(ValueError, match='split.test_size'):
        load_workflow_config(config_path)


def test_load_workflow_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match='Config file not found'):
        load_workflow_config(tmp_path / 'nope.yaml')
