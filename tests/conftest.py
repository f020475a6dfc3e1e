from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from vanity.config import SitePaths, VanityConfig
from vanity.readings.frontmatter import write_reading


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's VANITY_* settings out of the suite."""
    for key in list(os.environ):
        if key.startswith("VANITY_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    root.mkdir()
    return root


@pytest.fixture
def site_paths(site_root: Path) -> SitePaths:
    return VanityConfig().site_paths(site_root)


@pytest.fixture
def readings_dir(site_paths: SitePaths) -> Path:
    site_paths.readings_dir.mkdir(parents=True)
    return site_paths.readings_dir


@pytest.fixture
def images_dir(site_paths: SitePaths) -> Path:
    return site_paths.images_dir


@pytest.fixture
def write_reading_file(readings_dir: Path) -> Callable[..., Path]:
    """Write ``<readings_dir>/<filename>`` with the given frontmatter fields."""

    def _write(filename: str, body: str = "", **frontmatter: Any) -> Path:
        frontmatter.setdefault("title", "Untitled")
        frontmatter.setdefault("author", "Anonymous")
        frontmatter.setdefault("finished", None)
        path = readings_dir / filename
        write_reading(path, frontmatter, body)
        return path

    return _write


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """Create a real image file with Pillow."""

    def _make(name: str = "cover.png", size: tuple[int, int] = (800, 1000), mode: str = "RGB") -> Path:
        path = tmp_path / "source-images" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        color: Any = (200, 30, 30) if mode == "RGB" else (200, 30, 30, 128)
        formats = {".jpg": "JPEG", ".jpeg": "JPEG", ".gif": "GIF", ".webp": "WEBP"}
        fmt = formats.get(path.suffix.lower(), "PNG")
        Image.new(mode, size, color).save(path, format=fmt)
        return path

    return _make
