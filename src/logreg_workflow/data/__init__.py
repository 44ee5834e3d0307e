"""Data loading and splitting for logreg_workflow."""

from .loading import LabeledDataset, dataset_from_frame, load_dataset, read_table
from .split import DatasetSplit, split_dataset, write_split

__all__ = [
    'LabeledDataset',
    'dataset_from_frame',
    'load_dataset',
    'read_table',
    'DatasetSplit',
    'split_dataset',
    'write_split',
]
