"""Unit tests for schema-checked prediction."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from logreg_workflow.config import ClassifierConfig
from logreg_workflow.errors import SchemaMismatchError
from logreg_workflow.models.logreg import (
    predict_labels,
    predict_proba,
    select_features,
    train_classifier,
)


@pytest.fixture
def fitted(labeled_frame):
    x = labeled_frame.drop(columns=['label'])
    y = labeled_frame['label']
    return train_classifier(x, y, ClassifierConfig(scale_features=True)), x


def test_predict_labels_one_per_row_in_order(fitted) -> None:
    model, x = fitted

    predictions = predict_labels(model, x)
    reversed_predictions = predict_labels(model, x.iloc[::-1])

    assert len(predictions) == len(x)
    assert set(predictions) <= {'A', 'B'}
    assert list(reversed_predictions) == list(predictions[::-1])


def test_predict_labels_realigns_column_order(fitted) -> None:
    model, x = fitted

    shuffled = x[['visits', 'age', 'income']]

    np.testing.assert_array_equal(predict_labels(model, shuffled), predict_labels(model, x))


def test_predict_labels_accepts_matching_array(fitted) -> None:
    model, x = fitted

    np.testing.assert_array_equal(predict_labels(model, x.to_numpy()), predict_labels(model, x))


def test_predict_labels_missing_column(fitted) -> None:
    model, x = fitted

    with pytest.raises(SchemaMismatchError, match=r"missing=\['visits'\]") as exc_info:
        predict_labels(model, x.drop(columns=['visits']))
    assert exc_info.value.stage == 'predict'


def test_predict_labels_unexpected_column(fitted) -> None:
    model, x = fitted

    with pytest.raises(SchemaMismatchError, match=r"unexpected=\['height'\]"):
        predict_labels(model, x.assign(height=1.8))


def test_predict_labels_wrong_array_width(fitted) -> None:
    model, x = fitted

    with pytest.raises(SchemaMismatchError, match='3 column'):
        predict_labels(model, x.to_numpy()[:, :2])


def test_predict_proba_columns_match_classes(fitted) -> None:
    model, x = fitted

    proba = predict_proba(model, x)

    assert list(proba.columns) == ['A', 'B']
    assert len(proba) == len(x)
    np.testing.assert_allclose(proba.sum(axis=1).to_numpy(), 1.0)


def test_select_features_drops_extra_columns(fitted, labeled_frame) -> None:
    model, _ = fitted

    selected = select_features(model, labeled_frame)

    assert list(selected.columns) == ['age', 'income', 'visits']


def test_select_features_reports_missing_columns(fitted) -> None:
    model, _ = fitted

    with pytest.raises(SchemaMismatchError, match='missing training feature'):
        select_features(model, pd.DataFrame({'age': [30.0]}))
