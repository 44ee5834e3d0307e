"""Model implementations for logreg_workflow."""

from . import logreg

__all__ = ['logreg']
