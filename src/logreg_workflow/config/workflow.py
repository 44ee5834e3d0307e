"""Config models and loaders for the training workflow."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class DataConfig:
    path: Path
    label_column: str = 'label'
    feature_columns: tuple[str, ...] | None = None
    classes: tuple[Any, ...] | None = None


@dataclass(frozen=True)
class SplitConfig:
    test_size: float = 0.2
    random_state: int = 42
    stratify: bool = True


@dataclass(frozen=True)
class ClassifierConfig:
    """Hyperparameters for the logistic-regression step.

    ``max_iter`` is raised well above scikit-learn's default of 100 so that
    unscaled tabular features converge without warnings.
    """

    max_iter: int = 1000
    C: float = 1.0
    solver: str = 'lbfgs'
    class_weight: str | None = None
    scale_features: bool = False
    random_state: int | None = 42

    def to_params(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ArtifactConfig:
    model_path: Path | None = None
    report_path: Path | None = None
    confusion_matrix_plot: Path | None = None


@dataclass(frozen=True)
class WorkflowConfig:
    data: DataConfig
    split: SplitConfig = field(default_factory=SplitConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    artifacts: ArtifactConfig = field(default_factory=ArtifactConfig)


def load_workflow_config(config_path: str | Path) -> WorkflowConfig:
    """Load a workflow config YAML file."""
    cfg_path = Path(config_path).expanduser().resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f'Config file not found: {cfg_path}')

    with cfg_path.open('r', encoding='utf-8') as fh:
        data = yaml.safe_load(fh) or {}

    base_dir = cfg_path.parent

    data_section = data.get('data') or {}
    split_section = data.get('split') or {}
    classifier_section = data.get('classifier') or {}
    artifacts_section = data.get('artifacts') or {}

    data_path = data_section.get('path')
    if not data_path:
        raise ValueError('data.path must be set in workflow config')

    feature_columns = data_section.get('feature_columns')
    classes = data_section.get('classes')
    data_cfg = DataConfig(
        path=_resolve_path(base_dir, data_path),
        label_column=str(data_section.get('label_column', 'label')),
        feature_columns=_ensure_tuple(feature_columns) if feature_columns else None,
        classes=tuple(classes) if classes else None,
    )

    split = SplitConfig(
        test_size=float(split_section.get('test_size', 0.2)),
        random_state=int(split_section.get('random_state', 42)),
        stratify=bool(split_section.get('stratify', True)),
    )
    if not 0.0 < split.test_size < 1.0:
        raise ValueError(f'split.test_size must be in (0, 1), got {split.test_size}')

    random_state = classifier_section.get('random_state', 42)
    classifier = ClassifierConfig(
        max_iter=int(classifier_section.get('max_iter', 1000)),
        C=float(classifier_section.get('C', 1.0)),
        solver=str(classifier_section.get('solver', 'lbfgs')),
        class_weight=classifier_section.get('class_weight'),
        scale_features=bool(classifier_section.get('scale_features', False)),
        random_state=int(random_state) if random_state is not None else None,
    )
    if classifier.max_iter < 1:
        raise ValueError(f'classifier.max_iter must be positive, got {classifier.max_iter}')

    artifacts = ArtifactConfig(
        model_path=_resolve_optional_path(base_dir, artifacts_section.get('model_path')),
        report_path=_resolve_optional_path(base_dir, artifacts_section.get('report_path')),
        confusion_matrix_plot=_resolve_optional_path(
            base_dir,
            artifacts_section.get('confusion_matrix_plot'),
        ),
    )

    return WorkflowConfig(
        data=data_cfg,
        split=split,
        classifier=classifier,
        artifacts=artifacts,
    )


def _resolve_path(base: Path, value: str | Path) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (base / path).resolve()
    return path


def _resolve_optional_path(base: Path, value: str | Path | None) -> Path | None:
    if value is None:
        return None
    return _resolve_path(base, value)


def _ensure_tuple(items: Iterable[str] | None) -> tuple[str, ...]:
    if not items:
        return tuple()
    return tuple(str(item) for item in items)
