# --- campusmap_lib/map_parser.py ---
import logging
import string
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from shapely.geometry import Point, Polygon, box
from shapely.ops import unary_union

from .errors import ParseError, UnknownBuildingError
from .schema import BuildingRecord, Cell

log = logging.getLogger("campusmap.parse")

OPEN_TAG = "["
CLOSE_TAG = "]"
LINE_END = "\n"

Coord = Tuple[int, int]
Grid = List[List[Cell]]


def _is_digit(ch: str) -> bool:
    return ch in string.digits


class BorderTable:
    """Maps a building id to the (row, col) cells outlining its footprint.

    Each spanned row contributes two coordinates: the opening bracket cell and
    the closing bracket cell. Ids that are not on the map have no entry, and
    looking them up raises instead of yielding an empty list.
    """

    def __init__(self, borders: Optional[Dict[int, List[Coord]]] = None):
        self._borders: Dict[int, List[Coord]] = dict(borders or {})

    def __getitem__(self, bid: int) -> List[Coord]:
        try:
            return list(self._borders[bid])
        except KeyError:
            raise UnknownBuildingError(bid) from None

    def __contains__(self, bid) -> bool:
        return bid in self._borders

    def __iter__(self) -> Iterator[int]:
        return iter(self._borders)

    def __len__(self) -> int:
        return len(self._borders)

    def ids(self) -> List[int]:
        return sorted(self._borders)

    def rows(self, bid: int) -> List[int]:
        """Returns the map rows a building spans, top to bottom."""
        return sorted({r for r, _ in self[bid]})


@dataclass
class ParsedMap:
    """The parsed campus map: cell grid, border table and footprints."""

    grid: Grid
    borders: BorderTable
    footprints: Dict[int, Polygon] = field(default_factory=dict)

    @property
    def height(self) -> int:
        return len(self.grid)

    @property
    def width(self) -> int:
        """Number of cells per row, including the trailing line-end cell."""
        return len(self.grid[0]) if self.grid else 0

    def locate(self, row: int, col: int) -> Optional[int]:
        """Returns the id of the building whose footprint covers a cell."""
        center = Point(col + 0.5, row + 0.5)
        for bid, footprint in self.footprints.items():
            if footprint.contains(center):
                return bid
        return None


def build_grid(lines: Iterable[str]) -> Grid:
    """
    Converts raw map lines into a rectangular grid of cells.

    Every row gets an extra trailing cell holding the line break, so rendering
    the grid reproduces the original line structure.
    """
    rows = [line.rstrip("\r\n") for line in lines]
    if not rows:
        raise ParseError("Map is empty")
    width = len(rows[0])
    for line_no, row in enumerate(rows, start=1):
        if len(row) != width:
            raise ParseError(
                f"Map rows must all be {width} characters wide, got {len(row)}",
                line_no=line_no,
            )
    return [[Cell(ch) for ch in row] + [Cell(LINE_END)] for row in rows]


class MapParser:
    """Derives building border cells and footprints from a campus map.

    A building is a box of rows that each start with '[' and end with ']'. The
    first row carries the two-digit id right after '['; the rows below either
    repeat the same id or hold any non-digit after their '['.
    """

    def __init__(self, buildings: Optional[Mapping[int, BuildingRecord]] = None):
        self.buildings = buildings

    def parse(self, lines: Iterable[str]) -> ParsedMap:
        grid = build_grid(lines)
        borders, footprints = self._build_border_table(grid)

        if self.buildings is not None:
            untagged = sorted(set(self.buildings) - set(borders))
            if untagged:
                log.info("Buildings not drawn on the map: %s", untagged)

        log.info(
            "Parsed %dx%d map with %d buildings.",
            len(grid),
            len(grid[0]) - 1,
            len(borders),
        )
        return ParsedMap(grid, BorderTable(borders), footprints)

    def _build_border_table(
        self, grid: Grid
    ) -> Tuple[Dict[int, List[Coord]], Dict[int, Polygon]]:
        borders: Dict[int, List[Coord]] = {}
        footprints: Dict[int, Polygon] = {}
        # (row, first interior col) -> closing bracket col of a claimed span.
        claimed: Dict[Coord, int] = {}
        width = len(grid[0])

        for r in range(1, len(grid) - 1):
            c = 1
            while c < width:
                if (r, c) in claimed:
                    c = claimed[(r, c)] + 1
                    continue
                if not self._is_building_start(grid, r, c):
                    c += 1
                    continue

                bid = self._parse_building_id(grid, r, c)
                if bid in borders:
                    raise ParseError(
                        f"Building {bid:02d} is tagged more than once",
                        line_no=r + 1,
                        token=f"{OPEN_TAG}{bid:02d}",
                    )
                if self.buildings is not None and bid not in self.buildings:
                    raise ParseError(
                        "Map references an unknown building",
                        line_no=r + 1,
                        token=f"{OPEN_TAG}{bid:02d}",
                    )

                end_row = self._find_end_row(grid, r, c, bid)
                coords: List[Coord] = []
                spans = []
                for row in range(r, end_row + 1):
                    end_col = self._find_end_col(grid, row, c, bid)
                    coords.append((row, c - 1))
                    coords.append((row, end_col))
                    spans.append(box(c - 1, row, end_col + 1, row + 1))
                    claimed[(row, c)] = end_col

                borders[bid] = coords
                footprints[bid] = unary_union(spans)
                log.debug(
                    "Building %02d spans rows %d-%d, bounds %s",
                    bid,
                    r,
                    end_row,
                    footprints[bid].bounds,
                )
                c = claimed[(r, c)] + 1

        return borders, footprints

    def _is_building_start(self, grid: Grid, r: int, c: int) -> bool:
        return grid[r][c - 1].ch == OPEN_TAG and _is_digit(grid[r][c].ch)

    def _parse_building_id(self, grid: Grid, r: int, c: int) -> int:
        tag = "".join(cell.ch for cell in grid[r][c - 1 : c + 3])
        if c + 1 >= len(grid[r]) or not _is_digit(grid[r][c + 1].ch):
            raise ParseError("Building tag needs a two-digit id", r + 1, tag)
        if c + 2 < len(grid[r]) and _is_digit(grid[r][c + 2].ch):
            raise ParseError("Building tag has more than two digits", r + 1, tag)
        return int(grid[r][c].ch + grid[r][c + 1].ch)

    def _find_end_col(self, grid: Grid, r: int, c: int, bid: int) -> int:
        """Scans right from column c for the closing bracket on row r.

        The scan stops at the next '[': a bracket past it belongs to another
        building.
        """
        row = grid[r]
        for col in range(c, len(row)):
            if row[col].ch == CLOSE_TAG:
                return col
            if row[col].ch == OPEN_TAG:
                raise ParseError(
                    f"Building {bid:02d} runs into another '{OPEN_TAG}' "
                    f"before its closing '{CLOSE_TAG}' (column {col})",
                    line_no=r + 1,
                    token=f"{OPEN_TAG}{bid:02d}",
                )
        raise ParseError(
            f"Building {bid:02d} has no closing '{CLOSE_TAG}' on this row",
            line_no=r + 1,
            token=f"{OPEN_TAG}{bid:02d}",
        )

    def _find_end_row(self, grid: Grid, r: int, c: int, bid: int) -> int:
        """Scans down from row r while the rows below continue the building."""
        end_row = r
        while end_row + 1 < len(grid):
            below = grid[end_row + 1]
            if below[c - 1].ch != OPEN_TAG:
                break
            if _is_digit(below[c].ch):
                repeated = _is_digit(below[c + 1].ch) and (
                    int(below[c].ch + below[c + 1].ch) == bid
                )
                if not repeated:
                    break
            end_row += 1
        return end_row
