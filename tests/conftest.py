"""Sample files shared by the reverse reader tests."""

from __future__ import annotations

from pathlib import Path

import pytest


SAMPLES = {
    "empty_file": b"",
    "one_line_file": b"ABCD",
    "multi_line_file": b"ABCDEF\nGHIJK\nLMNOPQRST\nUVWXYZ",
    "blank_line_file": b"ABCD\n\nXYZ\n\n\n",
}


@pytest.fixture
def samples(tmp_path: Path) -> dict[str, Path]:
    """Write every sample file into a fresh directory."""
    paths = {}
    for name, content in SAMPLES.items():
        p = tmp_path / name
        p.write_bytes(content)
        paths[name] = p
    return paths
