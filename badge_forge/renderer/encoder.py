"""PNG encoding of indexed images."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from badge_forge.config import DEFAULT_COMPRESS_LEVEL
from badge_forge.errors import EncodeError
from badge_forge.renderer.quantize import PaletteImage

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# mkstemp creates 0600 files; outputs get the usual 0666 minus the umask.
OUTPUT_MODE = 0o666 & ~_current_umask()


def write_png(
    image: PaletteImage,
    path: PathLike,
    compress_level: int = DEFAULT_COMPRESS_LEVEL,
) -> Path:
    """Encode ``image`` as an indexed PNG at ``path``.

    The file is first written next to its destination and then renamed over
    it, so readers (and re-runs that scan the directory) never see a partial
    file.

    Raises:
        EncodeError: If the image cannot be written.
    """
    target = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
    except OSError as exc:
        raise EncodeError(f"Failed to write {target}: {exc}") from exc
    try:
        with os.fdopen(fd, "wb") as fh:
            image.to_image().save(
                fh,
                format="PNG",
                compress_level=compress_level,
                transparency=image.transparency,
            )
        os.chmod(tmp_name, OUTPUT_MODE)
        os.replace(tmp_name, target)
    except OSError as exc:
        _discard(tmp_name)
        raise EncodeError(f"Failed to write {target}: {exc}") from exc
    except BaseException:
        _discard(tmp_name)
        raise
    logger.debug("Wrote %s", target)
    return target


def _discard(tmp_name: str) -> None:
    try:
        os.unlink(tmp_name)
    except FileNotFoundError:
        pass
