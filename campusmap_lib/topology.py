# --- campusmap_lib/topology.py ---
"""
campusmap_lib/topology.py: Reads the building list, which doubles as the
campus topology. One building per line:

    <id> <name tokens...> $ <dining> <library> <parking> (<neighbor> <cost>)*

The three service digits fill bits 0, 1 and 2 of the service mask in the order
they are read. Each neighbor/cost pair is a directed edge from <id>.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import ParseError
from .graph import Graph
from .schema import BuildingRecord

log = logging.getLogger("campusmap.topology")

NAME_SENTINEL = "$"
SERVICE_DIGITS = 3


def read_lines(path: str) -> List[str]:
    """Reads a UTF-8 text file into a list of lines without terminators."""
    with open(path, "r", encoding="utf-8") as f:
        return f.read().splitlines()


def _parse_int(token: str, what: str, line_no: Optional[int]) -> int:
    try:
        return int(token)
    except ValueError:
        raise ParseError(f"Invalid {what}", line_no=line_no, token=token) from None


def parse_topology_line(
    line: str, line_no: Optional[int] = None
) -> Tuple[BuildingRecord, List[Tuple[int, int]]]:
    """
    Parses a single building line.

    Returns:
        The building record and its outgoing (neighbor id, cost) pairs.
    """
    tokens = line.split()
    if not tokens:
        raise ParseError("Empty building line", line_no=line_no)

    bid = _parse_int(tokens[0], "building id", line_no)
    if bid < 0:
        raise ParseError("Building id must be non-negative", line_no, tokens[0])

    try:
        sentinel = tokens.index(NAME_SENTINEL, 1)
    except ValueError:
        raise ParseError(
            f"Missing '{NAME_SENTINEL}' after building name", line_no=line_no
        ) from None
    name = " ".join(tokens[1:sentinel])
    if not name:
        raise ParseError("Building name is empty", line_no=line_no, token=tokens[0])

    service_tokens = tokens[sentinel + 1 : sentinel + 1 + SERVICE_DIGITS]
    if len(service_tokens) < SERVICE_DIGITS:
        raise ParseError(
            f"Expected {SERVICE_DIGITS} service digits after '{NAME_SENTINEL}'",
            line_no=line_no,
        )
    service_mask = 0
    for bit, token in enumerate(service_tokens):
        if token not in ("0", "1"):
            raise ParseError("Service flag must be 0 or 1", line_no, token)
        service_mask |= int(token) << bit

    edge_tokens = tokens[sentinel + 1 + SERVICE_DIGITS :]
    if len(edge_tokens) % 2:
        raise ParseError(
            "Neighbor list must be <id> <cost> pairs", line_no, edge_tokens[-1]
        )
    edges = [
        (
            _parse_int(edge_tokens[i], "neighbor id", line_no),
            _parse_int(edge_tokens[i + 1], "edge cost", line_no),
        )
        for i in range(0, len(edge_tokens), 2)
    ]
    return BuildingRecord(bid, name, service_mask), edges


def load_topology(lines: Iterable[str]) -> Tuple[Dict[int, BuildingRecord], Graph]:
    """
    Builds the building table and the campus graph from the building list.

    Raises:
        ParseError: On any malformed line, a duplicate id, or an edge to a
            building that has no line of its own.
        InvalidArgumentError: If an edge cost is negative.
    """
    buildings: Dict[int, BuildingRecord] = {}
    pending_edges: List[Tuple[int, int, int, int]] = []

    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        record, edges = parse_topology_line(line, line_no)
        if record.id in buildings:
            raise ParseError("Duplicate building id", line_no, str(record.id))
        buildings[record.id] = record
        pending_edges.extend((record.id, v, cost, line_no) for v, cost in edges)
        log.debug("Parsed %s %s", record, record.service_message)

    graph = Graph()
    for bid in buildings:
        graph.add_node(bid)
    for u, v, cost, line_no in pending_edges:
        if v not in buildings:
            raise ParseError(f"Edge from {u} to unknown building", line_no, str(v))
        graph.add_edge(u, v, cost)

    if buildings and sorted(buildings) != list(range(len(buildings))):
        log.warning("Building ids are not contiguous from 0: %s", sorted(buildings))
    log.info(
        "Loaded %d buildings and %d edges.", len(buildings), len(pending_edges)
    )
    return buildings, graph
