"""Case-insensitive asset lookup and bitmap decoding."""

import logging
import os
from typing import Dict, Optional

from PIL import Image, UnidentifiedImageError
from pyrsistent import pmap
from pyrsistent.typing import PMap

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".png"


class AssetIndex:
    """Maps lower-cased file basenames under ``root`` to their real paths.

    Icon tables name assets loosely ("Shield", "shield.PNG"); lookups ignore
    case and add ``.png`` when the name carries no extension. When two files
    share a basename the first one found in sorted walk order wins.
    """

    root: str
    paths: PMap[str, str]

    def __init__(self, root: str, paths: PMap[str, str]):
        self.root = root
        self.paths = paths

    @classmethod
    def scan(cls, root: str) -> "AssetIndex":
        found: Dict[str, str] = {}
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            for filename in sorted(filenames):
                found.setdefault(filename.lower(), os.path.join(dirpath, filename))
        logger.debug("Indexed %d asset files under %s", len(found), root)
        return cls(root, pmap(found))

    def resolve(self, name: str) -> Optional[str]:
        name = os.path.basename(name.strip())
        if not name:
            return None
        if not os.path.splitext(name)[1]:
            name += DEFAULT_EXTENSION
        return self.paths.get(name.lower())

    def load_bitmap(self, name: str) -> Optional[Image.Image]:
        """Decode ``name`` to RGBA, or ``None`` if it is missing or unreadable."""
        path = self.resolve(name)
        if path is None:
            logger.warning("Asset not found: %r", name)
            return None
        return load_bitmap_file(path)


def load_bitmap_file(path: str) -> Optional[Image.Image]:
    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        logger.warning("Cannot decode %s: %s", path, exc)
        return None
