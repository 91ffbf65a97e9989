# --- campusmap_lib/campus.py ---
"""
campusmap_lib/campus.py: The Campus context object. It owns the building table,
the campus graph and the parsed map, and answers route and service queries
by highlighting buildings on the map.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import CampusMapError, InvalidArgumentError, ParseError
from .graph import Graph
from .map_parser import MapParser, ParsedMap
from .rendering.constants import PATH_STYLE, RESET, SERVICE_STYLE
from .rendering.listing import format_building_list, format_selection
from .rendering.overlay import MapOverlay
from .schema import ALL_SERVICES, BuildingRecord
from .topology import load_topology, read_lines

log = logging.getLogger("campusmap.campus")

DEFAULT_VIEW = ("default",)


class Campus:
    """Loaded campus data plus the currently highlighted view of the map."""

    def __init__(
        self,
        path_style: str = PATH_STYLE,
        service_style: str = SERVICE_STYLE,
        reset: str = RESET,
    ):
        self.path_style = path_style
        self.service_style = service_style
        self.reset = reset
        self.buildings: Dict[int, BuildingRecord] = {}
        self.graph = Graph()
        self.parsed_map: Optional[ParsedMap] = None
        self.overlay: Optional[MapOverlay] = None
        self._view: Tuple = DEFAULT_VIEW
        self._render_cache: Dict[Tuple, str] = {}

    @classmethod
    def from_files(cls, topology_path: str, map_path: str, **styles) -> "Campus":
        campus = cls(**styles)
        log.info("Reading building list from '%s'...", topology_path)
        campus.load_topology(read_lines(topology_path))
        log.info("Reading campus map from '%s'...", map_path)
        campus.load_map(read_lines(map_path))
        return campus

    def load_topology(self, lines: Iterable[str]):
        """Replaces the building table and graph. Nothing changes on error."""
        buildings, graph = load_topology(lines)
        if self.parsed_map is not None:
            unknown = sorted(set(self.parsed_map.borders) - set(buildings))
            if unknown:
                raise ParseError(
                    f"Loaded map tags buildings missing from the list: {unknown}"
                )
        self.buildings, self.graph = buildings, graph
        self._reset_cache()

    def load_map(self, lines: Iterable[str]):
        """Parses the map, checking its tags against any loaded buildings."""
        parser = MapParser(self.buildings if self.buildings else None)
        parsed = parser.parse(lines)
        self.parsed_map = parsed
        self.overlay = MapOverlay(parsed.grid, parsed.borders, self.reset)
        self._reset_cache()

    def _reset_cache(self):
        self._render_cache.clear()
        self._view = DEFAULT_VIEW
        if self.overlay is not None:
            self.overlay.clear_all()

    def _require_map(self) -> MapOverlay:
        if self.overlay is None:
            raise CampusMapError("No campus map has been loaded")
        return self.overlay

    def _show(self, view: Tuple, ids: List[int], style: str):
        # Render before switching views so a failed paint keeps the old view.
        overlay = self._require_map()
        if view not in self._render_cache:
            borders = self.parsed_map.borders
            off_map = [bid for bid in ids if bid not in borders]
            if off_map:
                log.info("Not drawn on the map, left unpainted: %s", off_map)
            drawn = [bid for bid in ids if bid in borders]
            self._render_cache[view] = overlay.highlight(drawn, style)
        else:
            log.debug("Render cache hit for %s", view)
        self._view = view

    def shortest_path(self, source: int, target: int) -> List[int]:
        """Finds the cheapest route and makes it the highlighted view."""
        path = self.graph.shortest_path(source, target)
        self._show(("path", source, target), path, self.path_style)
        log.info(
            "Route %d -> %d: %s (cost %d)",
            source,
            target,
            path,
            self.graph.path_cost(path),
        )
        return path

    def route_cost(self, path: Iterable[int]) -> int:
        return self.graph.path_cost(path)

    def select_by_service(self, mask: int) -> List[int]:
        """Selects every building offering any service in `mask`."""
        if mask < 0 or mask & ~int(ALL_SERVICES):
            raise InvalidArgumentError(f"Service mask out of range: {mask:#b}")
        selected = [
            bid for bid in sorted(self.buildings) if self.buildings[bid].has_service(mask)
        ]
        self._show(("service", int(mask)), selected, self.service_style)
        log.info("Service mask %s selects %s", format(int(mask), "03b"), selected)
        return selected

    def reset_view(self):
        self._show(DEFAULT_VIEW, [], "")

    def render(self) -> str:
        """Returns the map text of the current view."""
        if self._view not in self._render_cache:
            self.reset_view()
        return self._render_cache[self._view]

    def locate(self, row: int, col: int) -> Optional[int]:
        self._require_map()
        return self.parsed_map.locate(row, col)

    def building_listing(self) -> str:
        return format_building_list(self.buildings)

    def selection_listing(self, ids: Iterable[int], style: Optional[str] = None) -> str:
        if style is None:
            style = self.service_style
        return format_selection(ids, self.buildings, style, self.reset)
