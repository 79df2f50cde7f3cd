"""
Pytest configuration and shared fixtures for sparsemat tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from sparsemat import config
from sparsemat.sparse import (
    IndexListMatrix,
    CRSMatrix,
    RowVecMatrix,
    from_dense,
)


ENGINES = [IndexListMatrix, CRSMatrix, RowVecMatrix]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore default configuration after every test."""
    yield
    config.reset()


@pytest.fixture(params=ENGINES, ids=lambda e: e.__name__)
def engine(request):
    """Every storage engine class."""
    return request.param


@pytest.fixture(params=[IndexListMatrix, CRSMatrix], ids=lambda e: e.__name__)
def column_engine(request):
    """Engines offering a column view."""
    return request.param


def build_example1(engine):
    """3x3 matrix assembled through add_to / get_mut / set.

    Rows in storage order:
        row 0: (1, 4.2), (2, 0.12), (0, 7.12)
        row 1: (2, 4.12), (1, 2.24)
        row 2: (2, 2.12)
    """
    mat = engine()
    mat.add_to(0, 1, 4.2)
    mat.add_to(1, 2, 4.12)
    mat.add_to(2, 2, 2.12)
    mat.add_to(1, 1, 1.12)
    ref = mat.get_mut(1, 1)
    ref += 1.12
    ref = mat.get_mut(0, 2)
    ref += 0.12
    mat.get_mut(0, 0).value = 8.12
    mat.set(0, 0, 7.12)
    return mat


@pytest.fixture
def example1(engine):
    """Example matrix built with each engine."""
    return build_example1(engine)


@pytest.fixture
def example2_linked():
    """4x4 linked matrix with rows inserted out of order."""
    mat = IndexListMatrix.with_capacity(3)
    mat.add_to(0, 1, 4.2)
    mat.add_to(2, 2, 2.12)
    mat.add_to(1, 2, 4.12)
    mat.add_to(3, 2, 1.12)
    mat.add_to(3, 3, 5.12)
    return mat


@pytest.fixture
def spd_dense():
    """Small symmetric positive-definite system."""
    return np.array([
        [4.0, 1.0, 0.0],
        [1.0, 3.0, 1.0],
        [0.0, 1.0, 2.0],
    ])


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(42)


# =============================================================================
# Helper Functions
# =============================================================================

def random_dense(rng, shape, density=0.4):
    """Random dense array with the bottom-right cell set.

    The corner entry fixes the derived shape of the sparse matrix built
    from it.
    """
    arr = rng.random(shape)
    arr[rng.random(shape) > density] = 0.0
    arr[-1, -1] = 1.0
    return arr


def dense_of(mat, shape):
    """Dense copy of ``mat`` padded to ``shape``."""
    out = np.zeros(shape)
    for i, j, val in mat.iter():
        out[i, j] = val
    return out


def assert_vec_close(vec, expected, rtol=1e-10, atol=1e-12):
    """Compare a DenseVec against a sequence."""
    np.testing.assert_allclose(vec.to_numpy(), np.asarray(expected, dtype=float), rtol=rtol, atol=atol)


def build_from_dense(arr, engine):
    """Sparse matrix of ``engine`` holding the non-zeros of ``arr``."""
    return from_dense(arr, engine=engine)
