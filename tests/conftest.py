from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image


def make_image_bytes(
    size: tuple[int, int],
    fmt: str = "JPEG",
    *,
    mode: str = "RGB",
    noise: bool = False,
    **save_kwargs,
) -> bytes:
    """Build an image in memory. Noise images compress badly, flat ones compress well."""

    if noise:
        channels = [Image.effect_noise(size, 80) for _ in range(len(mode) if mode in ("RGB", "RGBA") else 1)]
        if mode in ("RGB", "RGBA"):
            img = Image.merge(mode, channels)
        else:
            img = channels[0].convert(mode)
    else:
        color = (40, 120, 200, 255)[: len(mode)] if mode in ("RGB", "RGBA") else 128
        img = Image.new(mode, size, color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt, **save_kwargs)
    return buffer.getvalue()


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    return make_image_bytes


@pytest.fixture
def write_image(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str, data: bytes) -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def home_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home
