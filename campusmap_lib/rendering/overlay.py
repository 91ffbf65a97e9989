# --- campusmap_lib/rendering/overlay.py ---
import logging
from typing import Iterable, List

from campusmap_lib.map_parser import BorderTable, Coord, Grid
from .constants import RESET

log = logging.getLogger("campusmap.render")


class MapOverlay:
    """Highlights buildings on the campus map without touching its characters.

    Decorations live in each cell's prefix/suffix. The map text itself is
    never modified, so clearing the overlay always restores the original map.
    """

    def __init__(self, grid: Grid, borders: BorderTable, reset_token: str = RESET):
        self.grid = grid
        self.borders = borders
        self.reset_token = reset_token

    def _resolve(self, ids: Iterable[int]) -> List[Coord]:
        # Raises UnknownBuildingError for ids that are not on the map.
        return [coord for bid in ids for coord in self.borders[bid]]

    def _apply(self, coords: List[Coord], style: str):
        for r, c in coords:
            self.grid[r][c].set_style(style, self.reset_token)
        log.debug("Painted %d border cells.", len(coords))

    def clear_all(self):
        for row in self.grid:
            for cell in row:
                cell.clear()

    def paint(self, ids: Iterable[int], style: str):
        """
        Outlines each building in `ids` with `style`.

        All ids are resolved before any cell is touched, so an unknown id
        leaves the overlay exactly as it was.
        """
        self._apply(self._resolve(ids), style)

    def render(self) -> str:
        return "".join(cell.render() for row in self.grid for cell in row)

    def highlight(self, ids: Iterable[int], style: str) -> str:
        """Clears the overlay, paints `ids` and returns the rendered map."""
        coords = self._resolve(ids)
        self.clear_all()
        self._apply(coords, style)
        text = self.render()
        log.debug("%s", text, extra={"raw": True})
        return text
