"""Logistic Regression model implementation.

This package contains:
- training.py: pipeline construction and fitting (optional scaling + LogReg)
- predict.py: schema-checked label and probability prediction
- persistence.py: single-file joblib save/load
"""

from .persistence import load_model, read_metadata, save_model
from .predict import align_features, predict_labels, predict_proba, select_features
from .training import FittedModel, build_pipeline, train_classifier

__all__ = [
    'FittedModel',
    'build_pipeline',
    'train_classifier',
    'align_features',
    'predict_labels',
    'predict_proba',
    'select_features',
    'load_model',
    'read_metadata',
    'save_model',
]
