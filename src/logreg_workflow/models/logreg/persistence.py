"""Model persistence: save a fitted model to one file and load it back."""

from __future__ import annotations

import os
import platform
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import joblib
import sklearn

from ...errors import ModelLoadError, ModelSaveError
from ...utils import get_logger, json_log
from .training import FittedModel

log = get_logger(__name__)

ARTIFACT_FORMAT = 'logreg-workflow'
FORMAT_VERSION = 1


def _build_metadata(model: FittedModel) -> dict[str, Any]:
    return {
        'saved_at': datetime.now(UTC).isoformat(),
        'trained_at': model.trained_at,
        'python_version': platform.python_version(),
        'sklearn_version': sklearn.__version__,
        'feature_columns': list(model.feature_columns),
        'classes': list(model.classes),
        'converged': model.converged,
        'n_iter': model.n_iter,
        'classifier_params': dict(model.params),
    }


def save_model(model: FittedModel, path: str | Path) -> Path:
    """
    Serialize a fitted model to ``path``.

    The artifact is written to a temporary sibling file and moved into place
    with ``os.replace``, so concurrent readers see either the old file or the
    complete new one.

    Args:
        model: Fitted model to persist.
        path: Destination file (parent directories are created).

    Returns:
        The resolved destination path.

    Raises:
        ModelSaveError: If the destination cannot be written.
    """
    if not isinstance(model, FittedModel):
        raise ModelSaveError(f'Expected a FittedModel, got {type(model).__name__}')

    target = Path(path).expanduser()
    envelope = {
        'format': ARTIFACT_FORMAT,
        'format_version': FORMAT_VERSION,
        'metadata': _build_metadata(model),
        'model': model,
    }

    tmp_name: str | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=target.parent,
            prefix=f'.{target.name}.',
            suffix='.tmp',
            delete=False,
        ) as fh:
            tmp_name = fh.name
        joblib.dump(envelope, tmp_name, compress=3)
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as exc:
        log.error(
            json_log('persist.save_failed', component='persistence', path=str(target), error=str(exc))
        )
        raise ModelSaveError(f'Failed to save model to {target}: {exc}') from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    log.info(
        json_log(
            'persist.saved',
            component='persistence',
            path=str(target),
            format_version=FORMAT_VERSION,
        )
    )
    return target


def _read_envelope(path: str | Path) -> tuple[Path, dict[str, Any]]:
    source = Path(path).expanduser()
    if not source.exists():
        raise ModelLoadError(f'Model file not found: {source}')
    if not source.is_file():
        raise ModelLoadError(f'Model path is not a file: {source}')

    try:
        envelope = joblib.load(source)
    except Exception as exc:
        log.error(
            json_log('persist.load_failed', component='persistence', path=str(source), error=str(exc))
        )
        raise ModelLoadError(f'Failed to load model from {source}: {exc}') from exc

    if not isinstance(envelope, dict) or envelope.get('format') != ARTIFACT_FORMAT:
        raise ModelLoadError(f'Unrecognized model artifact format: {source}')

    version = envelope.get('format_version')
    if version != FORMAT_VERSION:
        raise ModelLoadError(
            f'Unsupported model artifact version {version!r} (expected {FORMAT_VERSION}): {source}'
        )
    return source, envelope


def load_model(path: str | Path) -> FittedModel:
    """
    Load a model written by :func:`save_model`.

    Raises:
        ModelLoadError: If the file is missing, unreadable, corrupt or not a
            model artifact of a supported version.
    """
    source, envelope = _read_envelope(path)

    model = envelope.get('model')
    if not isinstance(model, FittedModel):
        raise ModelLoadError(f'Model artifact does not contain a fitted model: {source}')

    metadata = envelope.get('metadata') or {}
    saved_sklearn = metadata.get('sklearn_version')
    if saved_sklearn and saved_sklearn != sklearn.__version__:
        log.warning(
            json_log(
                'persist.version_mismatch',
                component='persistence',
                saved_sklearn_version=saved_sklearn,
                sklearn_version=sklearn.__version__,
            )
        )

    log.info(
        json_log(
            'persist.loaded',
            component='persistence',
            path=str(source),
            features=model.n_features,
            classes=[str(cls) for cls in model.classes],
        )
    )
    return model


def read_metadata(path: str | Path) -> dict[str, Any]:
    """Return the metadata stored alongside a saved model."""
    _, envelope = _read_envelope(path)
    return dict(envelope.get('metadata') or {})
