"""Configuration utilities for logreg_workflow."""

from .workflow import (
    ArtifactConfig,
    ClassifierConfig,
    DataConfig,
    SplitConfig,
    WorkflowConfig,
    load_workflow_config,
)

__all__ = [
    'ArtifactConfig',
    'ClassifierConfig',
    'DataConfig',
    'SplitConfig',
    'WorkflowConfig',
    'load_workflow_config',
]
