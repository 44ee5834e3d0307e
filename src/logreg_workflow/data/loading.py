"""Load labeled tabular datasets and check they are ready for training."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from ..errors import DatasetError
from ..utils import get_logger, json_log

log = get_logger(__name__)


@dataclass(frozen=True)
class LabeledDataset:
    """Numeric feature table plus one label per row."""

    features: pd.DataFrame
    labels: pd.Series
    label_column: str
    feature_columns: tuple[str, ...]

    @property
    def n_rows(self) -> int:
        return int(len(self.labels))

    @property
    def class_counts(self) -> dict[object, int]:
        counts = self.labels.value_counts(sort=False)
        return {label: int(counts[label]) for label in sorted(counts.index, key=str)}


def dataset_from_frame(
    df: pd.DataFrame,
    label_column: str,
    feature_columns: Sequence[str] | None = None,
) -> LabeledDataset:
    """Validate an in-memory table and separate features from labels."""
    if label_column not in df.columns:
        raise DatasetError(f"Label column '{label_column}' not found in dataset")
    if df.empty:
        raise DatasetError('Dataset has no rows')

    labels = df[label_column]
    n_missing = int(labels.isna().sum())
    if n_missing:
        raise DatasetError(f"Label column '{label_column}' has {n_missing} missing value(s)")

    if feature_columns is None:
        columns = [col for col in df.columns if col != label_column]
    else:
        columns = list(feature_columns)
        missing = [col for col in columns if col not in df.columns]
        if missing:
            raise DatasetError(f'Feature columns not found in dataset: {missing}')
        if label_column in columns:
            raise DatasetError(f"Label column '{label_column}' cannot also be a feature")

    if not columns:
        raise DatasetError('Dataset has no feature columns')

    non_numeric = [col for col in columns if not pd.api.types.is_numeric_dtype(df[col])]
    if non_numeric:
        raise DatasetError(
            f'Feature columns must be numeric (encode them upstream): {non_numeric}'
        )

    features = df[columns]
    null_columns = [col for col in columns if features[col].isna().any()]
    if null_columns:
        raise DatasetError(f'Feature columns contain missing values: {null_columns}')

    return LabeledDataset(
        features=features,
        labels=labels,
        label_column=label_column,
        feature_columns=tuple(str(col) for col in columns),
    )


def read_table(csv_path: str | Path, stage: str = 'load') -> pd.DataFrame:
    """Read a CSV, turning missing, empty or malformed files into ``DatasetError``."""
    path = Path(csv_path)
    if not path.exists():
        raise DatasetError(f'Dataset file not found: {path}', stage=stage)

    try:
        return pd.read_csv(path)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        log.error(
            json_log('load.failed', component='data.loading', input=str(path), error=str(exc))
        )
        raise DatasetError(f'Failed to read dataset {path}: {exc}', stage=stage) from exc


def load_dataset(
    csv_path: str | Path,
    label_column: str,
    feature_columns: Sequence[str] | None = None,
) -> LabeledDataset:
    """Read a labeled CSV and validate it for the workflow."""
    path = Path(csv_path)
    df = read_table(path)
    dataset = dataset_from_frame(df, label_column=label_column, feature_columns=feature_columns)

    log.info(
        json_log(
            'load.completed',
            component='data.loading',
            input=str(path),
            rows=dataset.n_rows,
            features=len(dataset.feature_columns),
            class_counts={str(k): v for k, v in dataset.class_counts.items()},
        )
    )
    return dataset
