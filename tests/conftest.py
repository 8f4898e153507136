import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture(params=[
    "abacabad",
    "aaaa",
    "ab",
    "The quick brown fox jumps over the lazy dog. " * 5,
    b"\x00\x01\x02\x03\x04\x05" * 3 + b"\xff",
    bytes(range(256)),
])
def message(request):
    """Sample messages covering single, small and byte-sized alphabets."""
    return request.param


@pytest.fixture()
def sample_file(tmp_path: Path):
    """Write a small binary message to disk and return its path."""
    path = tmp_path / "message.bin"
    path.write_bytes(b"mississippi river\n")
    return path
