"""
Shared fixtures for the asset compression pipeline tests.
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from pipeline_configs import BrotliConfig, CompressionConfig, GzipConfig

COMPRESSIBLE = b"function hello() { return 'hello world'; }\n" * 64


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    tmp_dir = Path(tempfile.mkdtemp())
    yield tmp_dir
    shutil.rmtree(tmp_dir, ignore_errors=True)


@pytest.fixture
def write_file(temp_dir):
    """Write ``content`` to ``temp_dir / relative`` and return the absolute path string."""
    def _write(relative: str, content: bytes) -> str:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return str(path)
    return _write


@pytest.fixture
def compressible_bytes():
    return COMPRESSIBLE


@pytest.fixture
def random_bytes():
    """Incompressible payload: neither codec gets it below its original size"""
    return os.urandom(4096)


@pytest.fixture
def fast_config():
    """Real codecs with cheap settings"""
    return CompressionConfig(
        gzip=GzipConfig(numiterations=1),
        brotli=BrotliConfig(quality=5, lgwin=22),
    )
