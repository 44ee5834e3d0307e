"""Pipeline helpers."""

from .workflow import WorkflowResult, evaluate_saved_model, match_classes, run_workflow

__all__ = ['WorkflowResult', 'evaluate_saved_model', 'match_classes', 'run_workflow']
