import os
import stat
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from badge_forge.errors import EncodeError
from badge_forge.renderer.encoder import OUTPUT_MODE, write_png
from badge_forge.renderer.quantize import PaletteImage, build_palette


def _image() -> PaletteImage:
    indices = np.zeros((6, 6), dtype=np.uint8)
    indices[1:5, 1:5] = 2
    indices[2:4, 2:4] = 1
    return PaletteImage(indices=indices, palette=build_palette((255, 0, 0), (0, 0, 255)))


def test_writes_indexed_png_with_transparent_index_zero(tmp_path: Path) -> None:
    path = write_png(_image(), tmp_path / "badge.png")
    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.mode == "P"
        assert img.getpixel((0, 0)) == 0
        assert img.getpixel((2, 2)) == 1
        rgba = img.convert("RGBA")
    assert rgba.getpixel((0, 0)) == (0, 0, 0, 0)
    assert rgba.getpixel((2, 2)) == (255, 0, 0, 255)
    assert rgba.getpixel((1, 1)) == (0, 0, 255, 255)


def test_output_is_byte_identical_across_writes(tmp_path: Path) -> None:
    a = write_png(_image(), tmp_path / "a.png")
    b = write_png(_image(), tmp_path / "b.png")
    assert a.read_bytes() == b.read_bytes()


def test_no_temporary_files_left_behind(tmp_path: Path) -> None:
    write_png(_image(), tmp_path / "badge.png")
    assert os.listdir(tmp_path) == ["badge.png"]


def test_missing_directory_raises_encode_error(tmp_path: Path) -> None:
    with pytest.raises(EncodeError):
        write_png(_image(), tmp_path / "missing" / "badge.png")
    assert not (tmp_path / "missing").exists()


def test_existing_file_is_replaced(tmp_path: Path) -> None:
    target = tmp_path / "badge.png"
    target.write_bytes(b"stale")
    write_png(_image(), target)
    assert target.read_bytes().startswith(b"\x89PNG")


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_output_mode_follows_umask_like_a_plain_file(tmp_path: Path) -> None:
    badge = write_png(_image(), tmp_path / "badge.png")
    plain = tmp_path / "plain.bin"
    with open(plain, "wb") as fh:
        fh.write(b"x")
    assert stat.S_IMODE(badge.stat().st_mode) == stat.S_IMODE(plain.stat().st_mode)


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_replaced_file_gets_fresh_mode(tmp_path: Path) -> None:
    target = tmp_path / "badge.png"
    target.write_bytes(b"stale")
    os.chmod(target, 0o600)
    write_png(_image(), target)
    assert stat.S_IMODE(target.stat().st_mode) == OUTPUT_MODE
