import sys
from pathlib import Path

import pytest

# Ensure src package is importable without installation
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from license_audit.types import Category, Mapping  # noqa: E402


@pytest.fixture
def go_mapping() -> Mapping:
    return Mapping(software=Category.from_lists([".go"], ["MIT"]))


@pytest.fixture
def make_tree(tmp_path: Path):
    def _make(*relative_paths: str) -> Path:
        for relative in relative_paths:
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("content\n")
        return tmp_path

    return _make
