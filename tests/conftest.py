"""Shared fixtures for syncignore tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def sync_tree(tmp_path: Path) -> Path:
    """Create a small synchronization root.

    Structure::

        root/
        ├── build/
        │   └── out.o
        ├── docs/
        │   ├── build/
        │   │   └── index.html
        │   └── guide.md
        ├── src/
        │   ├── __pycache__/
        │   │   └── app.cpython-313.pyc
        │   ├── app.py
        │   ├── app.pyc
        │   └── keep.pyc
        └── README.md
    """
    (tmp_path / "build").mkdir()
    (tmp_path / "build" / "out.o").write_bytes(b"\x00")
    (tmp_path / "docs" / "build").mkdir(parents=True)
    (tmp_path / "docs" / "build" / "index.html").write_text("html")
    (tmp_path / "docs" / "guide.md").write_text("guide")
    (tmp_path / "src" / "__pycache__").mkdir(parents=True)
    (tmp_path / "src" / "__pycache__" / "app.cpython-313.pyc").write_bytes(b"\x00")
    (tmp_path / "src" / "app.py").write_text("app")
    (tmp_path / "src" / "app.pyc").write_bytes(b"\x00")
    (tmp_path / "src" / "keep.pyc").write_bytes(b"\x00")
    (tmp_path / "README.md").write_text("readme")
    return tmp_path
