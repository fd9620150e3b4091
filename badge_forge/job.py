"""Render jobs and single-job spec parsing."""

from dataclasses import dataclass

from badge_forge.catalog import AssetCatalog
from badge_forge.errors import JobSpecError
from badge_forge.types import ColorIndex, IconIndex, Layer

JOB_SPEC_USAGE = "SYMBOL_BORDER_COLOR1_COLOR2 (e.g. 0_3_1_7)"


@dataclass(frozen=True)
class RenderJob:
    """Four indices that fully identify one badge."""

    symbol_index: IconIndex
    border_index: IconIndex
    color1_index: ColorIndex
    color2_index: ColorIndex

    @property
    def filename(self) -> str:
        """Canonical output name, a pure function of the four indices."""
        return (
            f"{self.symbol_index}-{self.border_index}-"
            f"{self.color1_index}-{self.color2_index}.png"
        )


def parse_job_spec(spec: str, catalog: AssetCatalog) -> RenderJob:
    """Parse ``"S_B_C1_C2"`` into a job validated against ``catalog``.

    Colors only need to exist; their affinity is not enforced so a single badge
    can be previewed with any pair. Icons must exist and sit in the right slot.

    Raises:
        JobSpecError: On wrong arity, non-integer parts, out-of-range indices,
            or an icon used in the wrong slot.
    """
    parts = spec.strip().split("_")
    if len(parts) != 4:
        raise JobSpecError(f"Expected 4 indices, got {len(parts)}: {spec!r}")
    try:
        symbol, border, color1, color2 = (int(p) for p in parts)
    except ValueError:
        raise JobSpecError(f"Indices must be integers: {spec!r}") from None

    for name, index, limit in (
        ("symbol", symbol, len(catalog.icons)),
        ("border", border, len(catalog.icons)),
        ("color1", color1, len(catalog.colors)),
        ("color2", color2, len(catalog.colors)),
    ):
        if not 0 <= index < limit:
            raise JobSpecError(f"{name} index {index} out of range [0, {limit})")

    if catalog.icons[symbol].layer != Layer.SYMBOL:
        raise JobSpecError(f"Icon {symbol} is not a symbol icon")
    if catalog.icons[border].layer != Layer.BORDER:
        raise JobSpecError(f"Icon {border} is not a border icon")

    return RenderJob(symbol, border, color1, color2)
