"""Dataset splitting utilities."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import pandas as pd
from sklearn.model_selection import train_test_split

from ..errors import StratificationError
from ..utils import get_logger, json_log
from .loading import LabeledDataset

log = get_logger(__name__)


@dataclass(frozen=True)
class DatasetSplit:
    """Train/test partition of a labeled dataset.

    Unpacks in scikit-learn order: ``x_train, x_test, y_train, y_test``.
    """

    x_train: pd.DataFrame
    x_test: pd.DataFrame
    y_train: pd.Series
    y_test: pd.Series

    def __iter__(self) -> Iterator[pd.DataFrame | pd.Series]:
        return iter((self.x_train, self.x_test, self.y_train, self.y_test))

    @property
    def train_class_counts(self) -> dict[object, int]:
        return _class_counts(self.y_train)

    @property
    def test_class_counts(self) -> dict[object, int]:
        return _class_counts(self.y_test)


def _class_counts(labels: pd.Series) -> dict[object, int]:
    counts = labels.value_counts(sort=False)
    return {label: int(counts[label]) for label in sorted(counts.index, key=str)}


def _check_stratifiable(labels: pd.Series, test_size: float) -> None:
    counts = labels.value_counts()
    n_classes = len(counts)
    if n_classes < 2:
        raise StratificationError(
            f'Stratified split needs at least two classes, found {n_classes}: '
            f'{sorted(map(str, counts.index))}'
        )

    too_small = {str(label): int(n) for label, n in counts.items() if n < 2}
    if too_small:
        raise StratificationError(
            f'Classes need at least 2 members to stratify; too small: {too_small}'
        )

    n_rows = len(labels)
    n_test = math.ceil(test_size * n_rows)
    n_train = n_rows - n_test
    if n_test < n_classes or n_train < n_classes:
        raise StratificationError(
            f'test_size={test_size} on {n_rows} rows gives {n_train} train / {n_test} test '
            f'rows; each partition needs at least {n_classes} rows (one per class)'
        )


def split_dataset(
    dataset: LabeledDataset,
    test_size: float = 0.2,
    random_state: int = 42,
    stratify: bool = True,
) -> DatasetSplit:
    """Split a dataset into train/test subsets, preserving class proportions."""
    if not 0.0 < test_size < 1.0:
        raise StratificationError(f'test_size must be in (0, 1), got {test_size}')

    labels = dataset.labels
    if stratify:
        _check_stratifiable(labels, test_size)

    log.info(
        json_log(
            'split.start',
            component='data.split',
            rows=dataset.n_rows,
            test_size=test_size,
            random_state=random_state,
            stratify=stratify,
        )
    )

    try:
        x_train, x_test, y_train, y_test = train_test_split(
            dataset.features,
            labels,
            test_size=test_size,
            stratify=labels if stratify else None,
            random_state=random_state,
        )
    except ValueError as exc:
        log.error(json_log('split.failed', component='data.split', error=str(exc)))
        raise StratificationError(f'Split failed: {exc}') from exc

    split = DatasetSplit(x_train=x_train, x_test=x_test, y_train=y_train, y_test=y_test)

    log.info(
        json_log(
            'split.completed',
            component='data.split',
            train_rows=int(len(x_train)),
            test_rows=int(len(x_test)),
            train_class_counts={str(k): v for k, v in split.train_class_counts.items()},
            test_class_counts={str(k): v for k, v in split.test_class_counts.items()},
        )
    )
    return split


def write_split(
    split: DatasetSplit,
    output_dir: str | Path,
    label_column: str,
) -> tuple[Path, Path]:
    """Save a split as ``train/train.csv`` and ``test/test.csv``."""
    output_base = Path(output_dir)
    train_path = output_base / 'train' / 'train.csv'
    test_path = output_base / 'test' / 'test.csv'

    for path in (train_path, test_path):
        path.parent.mkdir(parents=True, exist_ok=True)

    split.x_train.assign(**{label_column: split.y_train}).to_csv(train_path, index=False)
    split.x_test.assign(**{label_column: split.y_test}).to_csv(test_path, index=False)

    log.info(
        json_log(
            'split.written',
            component='data.split',
            output_dir=str(output_base),
            train=str(train_path),
            test=str(test_path),
        )
    )
    return train_path, test_path
