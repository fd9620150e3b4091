"""CSV table parsing for the color and icon catalogs.

Both tables start with a header row. The first column is a free-form name used
only for human reference; a row's position (0-based, header excluded) is its
public index.

``badge_colors.csv``::

    name,R,G,B,layer        # layer 0 = primary, 1 = secondary

``badge_icons.csv``::

    name,icon,outline,layer # layer 0 = symbol, 1 = border; outline optional

Any problem here raises :class:`~badge_forge.errors.CatalogError`: a run never
starts from a partially understood table.
"""

import csv
import itertools
import logging
import os
from typing import Iterable, List, Optional, Sequence, Tuple

from badge_forge.catalog import ColorRow, IconRow
from badge_forge.errors import CatalogError
from badge_forge.types import Affinity, Layer

logger = logging.getLogger(__name__)

COLOR_TABLE = os.path.join("csv", "badge_colors.csv")
ICON_TABLE = os.path.join("csv", "badge_icons.csv")

COLOR_COLUMNS = 5
ICON_COLUMNS = 4


def _read_rows(path: str) -> Tuple[List[List[str]], List[int]]:
    """Data rows of a table and the file line each one starts on."""
    rows: List[List[str]] = []
    lines: List[int] = []
    try:
        with open(path, newline="", encoding="utf-8-sig") as fh:
            reader = csv.reader(fh)
            next(reader, None)  # header
            start = reader.line_num + 1
            for row in reader:
                # Blank lines are ignored.
                if any(cell.strip() for cell in row):
                    rows.append(row)
                    lines.append(start)
                start = reader.line_num + 1
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise CatalogError(f"Cannot read table {path}: {exc}") from exc
    return rows, lines


def _int_cell(value: str, path: str, line: int, column: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise CatalogError(
            f"{path}:{line}: column {column!r} is not an integer: {value!r}"
        ) from None


def _check_width(row: Sequence[str], expected: int, path: str, line: int) -> None:
    if len(row) < expected:
        raise CatalogError(
            f"{path}:{line}: expected {expected} columns, got {len(row)}"
        )


def parse_color_rows(
    rows: Iterable[Sequence[str]],
    path: str = "<colors>",
    lines: Optional[Iterable[int]] = None,
) -> List[ColorRow]:
    """Decode color data rows (header already stripped).

    ``lines`` gives each row's line number for error messages; by default rows
    are assumed to follow the header directly.
    """
    out: List[ColorRow] = []
    for line, row in zip(itertools.count(2) if lines is None else lines, rows):
        _check_width(row, COLOR_COLUMNS, path, line)
        r, g, b = (
            _int_cell(row[i], path, line, name) for i, name in ((1, "R"), (2, "G"), (3, "B"))
        )
        for name, channel in (("R", r), ("G", g), ("B", b)):
            if not 0 <= channel <= 255:
                raise CatalogError(f"{path}:{line}: {name}={channel} outside [0, 255]")
        code = _int_cell(row[4], path, line, "layer")
        try:
            affinity = Affinity.from_code(code)
        except ValueError as exc:
            raise CatalogError(f"{path}:{line}: {exc}") from None
        out.append(ColorRow(r=r, g=g, b=b, affinity=affinity))
    return out


def parse_icon_rows(
    rows: Iterable[Sequence[str]],
    path: str = "<icons>",
    lines: Optional[Iterable[int]] = None,
) -> List[IconRow]:
    """Decode icon data rows (header already stripped); see :func:`parse_color_rows`."""
    out: List[IconRow] = []
    for line, row in zip(itertools.count(2) if lines is None else lines, rows):
        _check_width(row, ICON_COLUMNS, path, line)
        code = _int_cell(row[3], path, line, "layer")
        try:
            layer = Layer.from_code(code)
        except ValueError as exc:
            raise CatalogError(f"{path}:{line}: {exc}") from None
        out.append(IconRow(icon=row[1].strip(), outline=row[2].strip(), layer=layer))
    return out


def load_color_table(asset_root: str) -> List[ColorRow]:
    path = os.path.join(asset_root, COLOR_TABLE)
    data, lines = _read_rows(path)
    rows = parse_color_rows(data, path, lines)
    logger.debug("Loaded %d colors from %s", len(rows), path)
    return rows


def load_icon_table(asset_root: str) -> List[IconRow]:
    path = os.path.join(asset_root, ICON_TABLE)
    data, lines = _read_rows(path)
    rows = parse_icon_rows(data, path, lines)
    logger.debug("Loaded %d icons from %s", len(rows), path)
    return rows
