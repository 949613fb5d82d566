"""
Pytest configuration and shared fixtures for Coinhash tests.
"""

import random
import tempfile
from pathlib import Path
from typing import Generator, List

import pytest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def random_chunks() -> List[bytes]:
    """
    Split seeded random data into fixed-size chunks.

    The last chunk is shorter than the others, so the chunk count is odd
    and the tree has unbalanced levels.

    Returns:
        List of 21 byte chunks (20 full chunks of 1024 bytes plus a remainder)
    """
    rng = random.Random(20260101)
    data = bytes(rng.getrandbits(8) for _ in range(20 * 1024 + 300))
    chunk_size = 1024
    return [data[i:i + chunk_size] for i in range(0, len(data), chunk_size)]
