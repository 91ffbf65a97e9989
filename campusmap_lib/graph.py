# --- campusmap_lib/graph.py ---
import heapq
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .errors import InvalidArgumentError, NoPathError, UnknownNodeError

log = logging.getLogger("campusmap.graph")

# Predecessor recorded for the node a search starts from.
NO_PREDECESSOR = -1


@dataclass(order=True, frozen=True)
class NodeTuple:
    """A Dijkstra work-item. Ordered by accumulated cost only."""

    cost: int
    curr: int = field(compare=False)
    prev: int = field(compare=False)

    def __post_init__(self):
        if self.cost < 0:
            raise InvalidArgumentError("Cost cannot be negative.")


class Graph:
    """A directed, weighted graph stored as an adjacency map.

    `adjacency[u][v]` is the cost of the edge u -> v. An undirected campus path
    is two directed edges of equal cost (see `add_bi_edge`).
    """

    def __init__(self, graph_data: Optional[Dict[int, Dict[int, int]]] = None):
        self.adjacency: Dict[int, Dict[int, int]] = {}
        for u, neighbors in (graph_data or {}).items():
            self.add_node(u)
            for v, cost in neighbors.items():
                self.add_edge(u, v, cost)

    def __contains__(self, nid) -> bool:
        return nid in self.adjacency

    def __len__(self) -> int:
        return len(self.adjacency)

    def nodes(self) -> List[int]:
        return list(self.adjacency)

    def neighbors(self, nid: int) -> Dict[int, int]:
        if nid not in self.adjacency:
            raise UnknownNodeError(nid)
        return dict(self.adjacency[nid])

    def has_node(self, nid: int) -> bool:
        return nid in self.adjacency

    def has_edge(self, u: int, v: int) -> bool:
        return u in self.adjacency and v in self.adjacency[u]

    def edge_cost(self, u: int, v: int) -> int:
        if not self.has_edge(u, v):
            raise InvalidArgumentError(f"No edge {u} -> {v} in graph")
        return self.adjacency[u][v]

    def add_node(self, nid: int) -> bool:
        """Adds a node with no edges. Returns False if it already existed."""
        if nid in self.adjacency:
            return False
        self.adjacency[nid] = {}
        return True

    def remove_node(self, nid: int) -> bool:
        """Removes a node and every edge that starts or ends at it."""
        if nid not in self.adjacency:
            return False
        del self.adjacency[nid]
        for neighbors in self.adjacency.values():
            neighbors.pop(nid, None)
        log.debug("Removed node %d", nid)
        return True

    def add_edge(self, u: int, v: int, cost: int):
        """Inserts or overwrites the directed edge u -> v."""
        if cost < 0:
            raise InvalidArgumentError(
                f"Edge {u} -> {v} has negative cost {cost}; costs must be >= 0"
            )
        self.adjacency.setdefault(u, {})[v] = cost
        self.adjacency.setdefault(v, {})

    def add_bi_edge(self, u: int, v: int, cost: int):
        self.add_edge(u, v, cost)
        self.add_edge(v, u, cost)

    def remove_edge(self, u: int, v: int):
        if u in self.adjacency:
            self.adjacency[u].pop(v, None)

    def remove_bi_edge(self, u: int, v: int):
        self.remove_edge(u, v)
        self.remove_edge(v, u)

    def path_cost(self, path: Iterable[int]) -> int:
        """Sums the edge costs along a path of node ids."""
        path = list(path)
        return sum(self.edge_cost(u, v) for u, v in zip(path, path[1:]))

    def _incoming(self) -> Dict[int, Dict[int, int]]:
        """Builds the reverse adjacency: incoming[v][u] is the cost of u -> v."""
        incoming: Dict[int, Dict[int, int]] = {nid: {} for nid in self.adjacency}
        for u, neighbors in self.adjacency.items():
            for v, cost in neighbors.items():
                incoming[v][u] = cost
        return incoming

    def shortest_path(self, source: int, target: int) -> List[int]:
        """
        Finds the cheapest directed path from `source` to `target`.

        Dijkstra runs backward from the target over incoming edges, so the link
        recorded for each settled node is its next hop toward the target. The
        search stops once the source is settled. Among equal-cost routes the
        one returned depends on heap order and is not guaranteed.

        Args:
            source: Id of the starting building.
            target: Id of the destination building.

        Returns:
            The node ids from source to target, both inclusive.

        Raises:
            UnknownNodeError: If either endpoint is not in the graph.
            NoPathError: If the target cannot be reached from the source.
        """
        for nid in (source, target):
            if nid not in self.adjacency:
                raise UnknownNodeError(nid)

        incoming = self._incoming()
        next_hop: Dict[int, int] = {}
        heap = [NodeTuple(0, target, NO_PREDECESSOR)]

        while heap:
            node = heapq.heappop(heap)
            if node.curr in next_hop:
                continue
            next_hop[node.curr] = node.prev
            if node.curr == source:
                log.debug("Settled source %d at cost %d", source, node.cost)
                break
            for prev, cost in incoming[node.curr].items():
                if prev not in next_hop:
                    heapq.heappush(heap, NodeTuple(node.cost + cost, prev, node.curr))
        else:
            raise NoPathError(source, target)

        path = [source]
        while path[-1] != target:
            path.append(next_hop[path[-1]])
        log.debug("Shortest path %d -> %d: %s", source, target, path)
        return path

    def __str__(self) -> str:
        lines = []
        for node, neighbors in self.adjacency.items():
            edges = " ".join(f"({v},{cost})" for v, cost in neighbors.items())
            lines.append(f"{node}: {edges}".rstrip())
        return "\n".join(lines)
