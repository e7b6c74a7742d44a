"""
Shared pytest fixtures and configuration for all tests.
"""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Add src directory to path so imports work without an install
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from globalnode.codecs import Base64Codec, reset_default_codec  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_default_codec() -> Generator[None, None, None]:
    """Keep the cached default codec from leaking settings between tests."""
    reset_default_codec()
    yield
    reset_default_codec()


@pytest.fixture
def codec() -> Base64Codec:
    return Base64Codec()
