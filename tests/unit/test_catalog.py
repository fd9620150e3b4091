import pytest
from PIL import Image

from badge_forge.catalog import ColorRow, IconRow, build_catalog
from badge_forge.config import RenderConfig
from badge_forge.types import Affinity, Layer
from tests.test_utils import CANVAS, make_catalog, make_config, solid_bitmap


def test_indices_are_table_positions() -> None:
    catalog = make_catalog(symbols=2, borders=2)
    assert [c.index for c in catalog.colors] == [0, 1, 2, 3]
    assert [i.index for i in catalog.icons] == [0, 1, 2, 3]


def test_partitions_by_affinity_and_layer() -> None:
    catalog = make_catalog(symbols=2, borders=1)
    assert [c.index for c in catalog.primary_colors()] == [0, 1]
    assert [c.index for c in catalog.secondary_colors()] == [2, 3]
    assert [i.index for i in catalog.symbol_icons()] == [0, 1]
    assert [i.index for i in catalog.border_icons()] == [2]


def test_masks_are_canvas_sized() -> None:
    catalog = make_catalog()
    symbol, border = catalog.icons
    for mask in (symbol.alpha_mask, border.alpha_mask, border.outline_mask):
        assert isinstance(mask, Image.Image)
        assert mask.mode == "L"
        assert mask.size == (CANVAS, CANVAS)
    assert symbol.outline_mask is None


def test_symbol_mask_has_symbol_scale_baked_in() -> None:
    config = make_config()
    bitmaps = {"full": solid_bitmap((CANVAS, CANVAS))}
    catalog = build_catalog(
        [],
        [IconRow("full", "", Layer.SYMBOL), IconRow("full", "", Layer.BORDER)],
        bitmaps.get,
        config,
    )
    symbol, border = catalog.icons
    assert symbol.alpha_mask is not None and border.alpha_mask is not None
    # floor(16 * 0.7) = 11, offset (16 - 11) // 2 = 2
    assert symbol.alpha_mask.getbbox() == (2, 2, 13, 13)
    assert border.alpha_mask.getbbox() == (0, 0, CANVAS, CANVAS)


def test_missing_bitmap_leaves_mask_absent() -> None:
    catalog = build_catalog(
        [ColorRow(1, 2, 3, Affinity.PRIMARY)],
        [IconRow("ghost", "", Layer.SYMBOL), IconRow("ghost", "nothing", Layer.BORDER)],
        lambda name: None,
        make_config(),
    )
    assert all(i.alpha_mask is None and i.outline_mask is None for i in catalog.icons)


def test_colors_expose_rgb_and_rgba() -> None:
    color = make_catalog().color(2)
    assert color.rgb == (0, 0, 255)
    assert color.rgba == (0, 0, 255, 255)
    assert color.affinity == Affinity.SECONDARY


@pytest.mark.parametrize("index", [-1, 4, 100])
def test_color_lookup_out_of_range(index: int) -> None:
    with pytest.raises(IndexError):
        make_catalog().color(index)


@pytest.mark.parametrize("index", [-1, 2])
def test_icon_lookup_out_of_range(index: int) -> None:
    with pytest.raises(IndexError):
        make_catalog().icon(index)


def test_catalog_is_immutable() -> None:
    catalog = make_catalog()
    with pytest.raises(Exception):
        catalog.colors = catalog.colors  # type: ignore[misc]
    with pytest.raises(TypeError):
        catalog.colors[0] = catalog.colors[1]  # type: ignore[index]


@pytest.mark.parametrize(
    "overrides",
    [
        {"canvas_size": 0},
        {"symbol_scale": 0.0},
        {"border_scale": 1.5},
        {"workers": 0},
        {"queue_factor": 0},
        {"progress_every": 0},
        {"compress_level": 10},
    ],
)
def test_invalid_config_rejected(overrides: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        RenderConfig(**overrides)  # type: ignore[arg-type]


def test_queue_size_scales_with_workers() -> None:
    assert RenderConfig(workers=3, queue_factor=2).queue_size == 6
