# --- campusmap_lib/errors.py ---
from typing import Optional


class CampusMapError(Exception):
    """Base class for every error raised by campusmap_lib."""


class ParseError(CampusMapError, ValueError):
    """Raised when topology or map input is malformed. Aborts the load."""

    def __init__(
        self, message: str, line_no: Optional[int] = None, token: Optional[str] = None
    ):
        self.line_no = line_no
        self.token = token
        details = []
        if line_no is not None:
            details.append(f"line {line_no}")
        if token is not None:
            details.append(f"token {token!r}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)


class UnknownNodeError(CampusMapError, LookupError):
    """A shortest-path endpoint is not a node of the graph."""

    def __init__(self, node_id):
        self.node_id = node_id
        super().__init__(f"Unknown building id: {node_id}")


class UnknownBuildingError(CampusMapError, LookupError):
    """A building id has no tagged footprint on the map."""

    def __init__(self, building_id):
        self.building_id = building_id
        super().__init__(f"Building {building_id} does not appear on the map")


class NoPathError(CampusMapError):
    """The target cannot be reached from the source."""

    def __init__(self, source, target):
        self.source = source
        self.target = target
        super().__init__(f"No path from building {source} to building {target}")


class InvalidArgumentError(CampusMapError, ValueError):
    """An argument is out of its valid range, e.g. a negative edge cost."""
