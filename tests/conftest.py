"""
Test configuration and fixtures for PaletteForge tests.
"""
import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from main import app


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from paletteforge.utils.metrics import reset_metrics
    reset_metrics()


def _encode_png(rgb: np.ndarray) -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(rgb).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def encode_png():
    """Encode an (H, W, 3|4) uint8 array as PNG bytes."""
    return _encode_png


@pytest.fixture
def uniform_image() -> np.ndarray:
    """10x10 image filled with (10, 20, 30)."""
    img = np.zeros((10, 10, 3), dtype=np.uint8)
    img[:, :] = (10, 20, 30)
    return img


@pytest.fixture
def halves_image() -> np.ndarray:
    """40x40 image, left half black, right half white."""
    img = np.zeros((40, 40, 3), dtype=np.uint8)
    img[:, 20:] = (255, 255, 255)
    return img
