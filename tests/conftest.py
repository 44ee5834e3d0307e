from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pandas as pd
import pytest


def _make_labeled_frame(n_a: int = 60, n_b: int = 40, seed: int = 0) -> pd.DataFrame:
    """Two overlapping Gaussian blobs labeled "A" and "B"."""
    rng = np.random.default_rng(seed)
    frame = pd.DataFrame(
        {
            'age': np.concatenate([rng.normal(35, 5, n_a), rng.normal(45, 5, n_b)]),
            'income': np.concatenate([rng.normal(1.0, 0.5, n_a), rng.normal(2.0, 0.5, n_b)]),
            'visits': np.concatenate([rng.poisson(3, n_a), rng.poisson(6, n_b)]),
            'label': ['A'] * n_a + ['B'] * n_b,
        }
    )
    return frame.sample(frac=1.0, random_state=seed).reset_index(drop=True)


@pytest.fixture
def make_labeled_frame() -> Callable[..., pd.DataFrame]:
    return _make_labeled_frame


@pytest.fixture
def labeled_frame() -> pd.DataFrame:
    return _make_labeled_frame()
