import logging

import pytest

from campusmap_lib.errors import UnknownBuildingError
from campusmap_lib.log_utils import RichLogFormatter
from campusmap_lib.map_parser import MapParser
from campusmap_lib.rendering.overlay import MapOverlay
from campusmap_lib.schema import Cell

STYLE = "<S>"
RESET = "<R>"

MAP_LINES = [
    "............",
    ".[01].[02]..",
    ".[  ].[  ]..",
    "............",
]
ORIGINAL = "\n".join(MAP_LINES) + "\n"


@pytest.fixture
def overlay():
    parsed = MapParser().parse(MAP_LINES)
    return MapOverlay(parsed.grid, parsed.borders, reset_token=RESET)


def test_render_without_paint_is_identity(overlay):
    assert overlay.render() == ORIGINAL
    overlay.clear_all()
    assert overlay.render() == ORIGINAL


def test_paint_decorates_only_selected_building(overlay):
    overlay.paint([1], STYLE)
    assert overlay.render() == (
        "............\n"
        ".<S>[01]<R>.[02]..\n"
        ".<S>[  ]<R>.[  ]..\n"
        "............\n"
    )


def test_paint_every_open_and_close_bracket(overlay):
    overlay.paint([1, 2], STYLE)
    text = overlay.render()
    assert text.count(STYLE + "[") == 4
    assert text.count("]" + RESET) == 4
    assert text.replace(STYLE, "").replace(RESET, "") == ORIGINAL


def test_clear_all_removes_stale_highlighting(overlay):
    overlay.paint([2], STYLE)
    overlay.clear_all()
    overlay.paint([1], STYLE)
    assert ".[02]" in overlay.render()
    assert overlay.render().count(STYLE) == 2


def test_unknown_id_leaves_overlay_untouched(overlay):
    overlay.paint([1], STYLE)
    before = overlay.render()
    with pytest.raises(UnknownBuildingError):
        overlay.paint([2, 9], STYLE)
    assert overlay.render() == before
    with pytest.raises(UnknownBuildingError):
        overlay.highlight([9], STYLE)
    assert overlay.render() == before


def test_highlight_replaces_previous_paint(overlay):
    overlay.paint([1], STYLE)
    text = overlay.highlight([2], STYLE)
    assert text == overlay.render()
    assert ".[01]." in text
    assert "<S>[02]<R>" in text


def test_highlight_nothing_renders_original(overlay):
    overlay.paint([1, 2], STYLE)
    assert overlay.highlight([], STYLE) == ORIGINAL


def test_cell_style_side_depends_on_character():
    open_cell, close_cell = Cell("["), Cell("]")
    open_cell.set_style(STYLE, RESET)
    close_cell.set_style(STYLE, RESET)
    assert (open_cell.prefix, open_cell.suffix) == (STYLE, "")
    assert (close_cell.prefix, close_cell.suffix) == ("", RESET)
    assert open_cell.render() == "<S>["
    close_cell.clear()
    assert close_cell.render() == "]"


def test_highlight_logs_rendered_map_verbatim(overlay, caplog):
    with caplog.at_level(logging.DEBUG, logger="campusmap.render"):
        text = overlay.highlight([1], STYLE)
    raw = [r for r in caplog.records if getattr(r, "raw", False)]
    assert len(raw) == 1
    assert raw[0].getMessage() == text
    assert RichLogFormatter().format(raw[0]) == text
