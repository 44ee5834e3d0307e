"""Exception hierarchy for the workflow stages.

Every error carries the name of the stage that detected it so callers (and
the CLI) can report where the forward pass stopped.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base class for failures raised by a workflow stage."""

    stage = 'workflow'

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class DatasetError(WorkflowError, ValueError):
    """Raised when the labeled dataset is unusable."""

    stage = 'load'


class StratificationError(WorkflowError, ValueError):
    """Raised when classes are too few or too small to stratify."""

    stage = 'split'


class SchemaMismatchError(WorkflowError, ValueError):
    """Raised when prediction features differ from the training schema."""

    stage = 'predict'


class EvaluationError(WorkflowError, ValueError):
    """Raised when true and predicted labels cannot be compared."""

    stage = 'evaluate'


class ModelSaveError(WorkflowError, RuntimeError):
    """Raised when a model artifact cannot be written."""

    stage = 'persist'


class ModelLoadError(WorkflowError, RuntimeError):
    """Raised when a model artifact is missing, unreadable or corrupt."""

    stage = 'persist'
