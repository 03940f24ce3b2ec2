import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

from chunkmap.manifest.model import FileChunkReferences, FileGroupRecord  # noqa: E402

from helpers import make_container, refs  # noqa: E402


@pytest.fixture
def example_record() -> FileGroupRecord:
    """One container with chunks c0/c1 (keys w0/w1) referenced by file f1."""
    return FileGroupRecord(
        file_chunk_references=(FileChunkReferences(file_signature=b"f1", chunk_references=refs((0, 0), (0, 1))),),
        containers=(make_container(b"w0", b"w1"),),
    )
