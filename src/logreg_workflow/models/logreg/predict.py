"""Apply a fitted model to held-out features."""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

from ...errors import SchemaMismatchError
from ...utils import get_logger, json_log
from .training import FittedModel

log = get_logger(__name__)


def align_features(model: FittedModel, features: Any) -> pd.DataFrame:
    """
    Return ``features`` as a DataFrame in the model's training column order.

    DataFrames must carry exactly the training columns (any order). Arrays
    must have the same number of columns.

    Raises:
        SchemaMismatchError: If the columns do not match the training schema.
    """
    expected = list(model.feature_columns)

    if isinstance(features, pd.DataFrame):
        actual = [str(col) for col in features.columns]
        missing = [col for col in expected if col not in actual]
        unexpected = [col for col in actual if col not in expected]
        if missing or unexpected or len(actual) != len(expected):
            raise SchemaMismatchError(
                f'Feature schema does not match training schema: '
                f'missing={missing}, unexpected={unexpected}, '
                f'expected {len(expected)} column(s), got {len(actual)}'
            )
        aligned = features.copy()
        aligned.columns = actual
        return aligned[expected]

    array = np.asarray(features)
    if array.ndim != 2 or array.shape[1] != len(expected):
        shape = array.shape
        raise SchemaMismatchError(
            f'Feature array shape {shape} does not match training schema of '
            f'{len(expected)} column(s)'
        )
    return pd.DataFrame(array, columns=expected)


def select_features(model: FittedModel, frame: pd.DataFrame) -> pd.DataFrame:
    """Pick the training columns out of a wider table (e.g. one that still has labels)."""
    columns = [str(col) for col in frame.columns]
    missing = [col for col in model.feature_columns if col not in columns]
    if missing:
        raise SchemaMismatchError(f'Input is missing training feature column(s): {missing}')
    renamed = frame.set_axis(columns, axis=1)
    return renamed[list(model.feature_columns)]


def predict_labels(model: FittedModel, features: Any) -> np.ndarray:
    """Predict one label per input row, in input order."""
    aligned = align_features(model, features)
    predictions = model.pipeline.predict(aligned)
    log.info(
        json_log(
            'predict.completed',
            component='predict',
            rows=int(len(aligned)),
        )
    )
    return predictions


def predict_proba(model: FittedModel, features: Any) -> pd.DataFrame:
    """Return per-class probabilities, one column per class in ``model.classes``."""
    aligned = align_features(model, features)
    proba = model.pipeline.predict_proba(aligned)
    return pd.DataFrame(proba, columns=list(model.classes), index=aligned.index)
