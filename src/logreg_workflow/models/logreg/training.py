from __future__ import annotations

import time
import warnings
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import numpy as np
import pandas as pd
from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from ...config import ClassifierConfig
from ...errors import DatasetError, StratificationError
from ...utils import get_logger, json_log

log = get_logger(__name__)


@dataclass(frozen=True)
class FittedModel:
    """A fitted classifier plus the schema it was trained on.

    Instances are produced once by :func:`train_classifier` and only read
    afterwards; the pipeline is never refit in place.
    """

    pipeline: Pipeline
    feature_columns: tuple[str, ...]
    classes: tuple[Any, ...]
    converged: bool = True
    n_iter: int = 0
    params: dict[str, Any] = field(default_factory=dict)
    trained_at: str = ''

    @property
    def n_features(self) -> int:
        return len(self.feature_columns)


def build_pipeline(config: ClassifierConfig) -> Pipeline:
    """Build the sklearn pipeline for a classifier config."""
    steps: list[tuple[str, Any]] = []
    if config.scale_features:
        steps.append(('scaler', StandardScaler()))
    steps.append(
        (
            'logreg',
            LogisticRegression(
                max_iter=config.max_iter,
                C=config.C,
                solver=config.solver,
                class_weight=config.class_weight,
                random_state=config.random_state,
            ),
        )
    )
    return Pipeline(steps)


def _as_python(value: Any) -> Any:
    return value.item() if isinstance(value, np.generic) else value


def train_classifier(
    x_train: pd.DataFrame,
    y_train: pd.Series,
    config: ClassifierConfig | None = None,
) -> FittedModel:
    """
    Fit a logistic-regression classifier on the training subset.

    Exhausting ``max_iter`` without converging is not fatal: the warning is
    logged and re-emitted as a ``ConvergenceWarning`` and the partially
    optimized model is returned with ``converged=False``.

    Args:
        x_train: Numeric training features, one column per feature
        y_train: Training labels aligned with ``x_train``
        config: Classifier hyperparameters (defaults to ``ClassifierConfig()``)

    Returns:
        FittedModel wrapping the fitted pipeline
    """
    config = config or ClassifierConfig()

    if len(x_train) != len(y_train):
        raise DatasetError(
            f'Training features ({len(x_train)} rows) and labels ({len(y_train)} rows) '
            'differ in length',
            stage='train',
        )
    n_classes = pd.Series(y_train).nunique()
    if n_classes < 2:
        raise StratificationError(
            f'Training labels need at least two classes, found {n_classes}',
            stage='train',
        )

    if isinstance(x_train, pd.DataFrame):
        feature_columns = tuple(str(col) for col in x_train.columns)
    else:
        x_train = np.asarray(x_train)
        feature_columns = tuple(f'x{idx}' for idx in range(x_train.shape[1]))
        x_train = pd.DataFrame(x_train, columns=list(feature_columns))

    pipeline = build_pipeline(config)

    log.info(
        json_log(
            'train.start',
            component='training',
            rows=int(len(x_train)),
            features=len(feature_columns),
            **config.to_params(),
        )
    )
    start_time = time.perf_counter()

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter('always', ConvergenceWarning)
        pipeline.fit(x_train, y_train)

    convergence_warnings = []
    for warning in caught:
        if issubclass(warning.category, ConvergenceWarning):
            convergence_warnings.append(warning)
        else:
            warnings.warn_explicit(
                warning.message, warning.category, warning.filename, warning.lineno
            )

    logreg = pipeline.named_steps['logreg']
    n_iter = int(np.max(logreg.n_iter_))
    converged = not convergence_warnings
    if not converged:
        message = (
            f'Solver {config.solver!r} did not converge within max_iter={config.max_iter}; '
            'returning the best model found'
        )
        log.warning(
            json_log(
                'train.not_converged',
                component='training',
                max_iter=config.max_iter,
                n_iter=n_iter,
            )
        )
        warnings.warn(message, ConvergenceWarning, stacklevel=2)

    model = FittedModel(
        pipeline=pipeline,
        feature_columns=feature_columns,
        classes=tuple(_as_python(cls) for cls in pipeline.classes_),
        converged=converged,
        n_iter=n_iter,
        params=config.to_params(),
        trained_at=datetime.now(UTC).isoformat(),
    )

    log.info(
        json_log(
            'train.completed',
            component='training',
            converged=converged,
            n_iter=n_iter,
            classes=[str(cls) for cls in model.classes],
            training_time_seconds=round(time.perf_counter() - start_time, 4),
        )
    )
    return model
