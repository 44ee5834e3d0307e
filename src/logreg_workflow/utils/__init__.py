"""Shared utilities for logreg_workflow."""

from .logging import get_logger, json_log, resolve_level

__all__ = ['get_logger', 'json_log', 'resolve_level']
