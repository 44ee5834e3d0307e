"""Train, evaluate and persist a binary logistic-regression classifier."""

from .errors import (
    DatasetError,
    EvaluationError,
    ModelLoadError,
    ModelSaveError,
    SchemaMismatchError,
    StratificationError,
    WorkflowError,
)

__version__ = '0.1.0'

__all__ = [
    'DatasetError',
    'EvaluationError',
    'ModelLoadError',
    'ModelSaveError',
    'SchemaMismatchError',
    'StratificationError',
    'WorkflowError',
    '__version__',
]
