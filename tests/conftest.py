"""
Pytest configuration for local imports and artwork fixtures.
"""

# Standard Library
import os
import pathlib
import sys

# PIP3 modules
import PIL.Image
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
@pytest.fixture
def make_image_file(tmp_path: pathlib.Path):
	"""
	Factory fixture: make_image_file(name, width, height, color) -> PNG path.
	"""
	def _make(name: str, width: int, height: int, color: str = "red") -> pathlib.Path:
		path = tmp_path / name
		image = PIL.Image.new("RGB", (width, height), color)
		image.save(path, format="PNG")
		return path
	return _make
