"""Flow network model for transportation problems.

`FlowNetwork` is an arena: vertices live in one list and are addressed by
their integer index, edges store the indices of their endpoints. The network
is built once per distance query, solved in place (edge ``flow`` fields are
written by the solver) and then discarded.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional

from wasserstein.errors import UnbalancedMassError
from wasserstein.types import Coordinates


def manhattan(a: Coordinates, b: Coordinates) -> int:
    """Return the Manhattan distance between two grid positions."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


@dataclass(frozen=True)
class Vertex:
    """A vertex of a flow network.

    Attributes:
        index: Position of the vertex in its network's arena.
        coordinates: ``(row, col)`` used for cost computation only.
        supply: Positive for sources, negative for sinks (magnitude is the
            demand), zero for relay vertices.
    """

    index: int
    coordinates: Coordinates = (0, 0)
    supply: int = 0

    @property
    def is_source(self) -> bool:
        return self.supply > 0

    @property
    def is_sink(self) -> bool:
        return self.supply < 0


@dataclass(slots=True)
class Edge:
    """A directed edge ``left -> right`` between two arena indices.

    Attributes:
        left: Index of the tail vertex.
        right: Index of the head vertex.
        cost: Cost per unit of flow.
        flow: Units of flow assigned by the solver.
    """

    left: int
    right: int
    cost: int
    flow: int = 0


@dataclass
class FlowNetwork:
    """Vertices, edges and a global capacity bound.

    Every edge is uncapacitated apart from ``max_capacity``, which must be at
    least the total supply of the network.

    Attributes:
        max_capacity: Upper bound on flow across any single edge.
        vertices: Vertex arena, ``vertices[i].index == i``.
        edges: Edges in insertion order.
    """

    max_capacity: int
    vertices: List[Vertex] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.max_capacity <= 0:
            raise ValueError(
                f"Need a positive max_capacity on the network. Got {self.max_capacity}"
            )

    #
    # Construction
    #
    def add_vertex(self, coordinates: Coordinates = (0, 0), supply: int = 0) -> int:
        """Append a vertex and return its index."""
        index = len(self.vertices)
        self.vertices.append(Vertex(index, tuple(coordinates), int(supply)))
        return index

    def add_edge(
        self,
        left: int,
        right: int,
        cost: Optional[int] = None,
        flow: int = 0,
    ) -> int:
        """Append an edge ``left -> right`` and return its position.

        Args:
            left: Tail vertex index.
            right: Head vertex index.
            cost: Unit cost. Defaults to the Manhattan distance between the
                endpoints' coordinates.
            flow: Initial flow, normally 0.

        Raises:
            IndexError: If either index is outside the vertex arena.
            ValueError: If cost or flow is negative.
        """
        num_vertices = len(self.vertices)
        if not 0 <= left < num_vertices:
            raise IndexError(f"left index {left} is out of range {num_vertices}")
        if not 0 <= right < num_vertices:
            raise IndexError(f"right index {right} is out of range {num_vertices}")
        if cost is None:
            cost = manhattan(
                self.vertices[left].coordinates, self.vertices[right].coordinates
            )
        if cost < 0:
            raise ValueError(f"Edge cost must be non-negative, got {cost}")
        if flow < 0:
            raise ValueError(f"Edge flow must be non-negative, got {flow}")
        self.edges.append(Edge(left, right, int(cost), int(flow)))
        return len(self.edges) - 1

    def designate_supply(self, index: int, supply: int) -> None:
        """Set the supply of vertex ``index``."""
        self.vertices[index] = replace(self.vertices[index], supply=int(supply))

    def designate_demand(self, index: int, demand: int) -> None:
        """Set the demand of vertex ``index`` (stored as negative supply)."""
        self.vertices[index] = replace(self.vertices[index], supply=-int(demand))

    #
    # Queries
    #
    def __len__(self) -> int:
        return len(self.vertices)

    def sources(self) -> Iterator[Vertex]:
        return (v for v in self.vertices if v.supply > 0)

    def sinks(self) -> Iterator[Vertex]:
        return (v for v in self.vertices if v.supply < 0)

    def total_supply(self) -> int:
        return sum(v.supply for v in self.vertices if v.supply > 0)

    def total_demand(self) -> int:
        return -sum(v.supply for v in self.vertices if v.supply < 0)

    def check_balanced(self) -> None:
        """Validate that the network describes a balanced transportation problem.

        Raises:
            UnbalancedMassError: If total supply differs from total demand.
            ValueError: If ``max_capacity`` cannot carry the total supply.
        """
        supply = self.total_supply()
        demand = self.total_demand()
        if supply != demand:
            raise UnbalancedMassError(
                f"Total supply {supply} does not match total demand {demand}."
            )
        if self.max_capacity < supply:
            raise ValueError(
                f"max_capacity {self.max_capacity} is below total supply {supply}."
            )

    def outflow(self, index: int) -> int:
        return sum(e.flow for e in self.edges if e.left == index)

    def inflow(self, index: int) -> int:
        return sum(e.flow for e in self.edges if e.right == index)

    def net_outflows(self) -> List[int]:
        """Return ``outflow - inflow`` for every vertex in one pass."""
        net = [0] * len(self.vertices)
        for edge in self.edges:
            net[edge.left] += edge.flow
            net[edge.right] -= edge.flow
        return net

    def total_cost(self) -> int:
        """Return the sum of ``flow * cost`` over all edges."""
        return sum(e.flow * e.cost for e in self.edges)

    def reset_flows(self) -> None:
        """Zero the flow on every edge."""
        for edge in self.edges:
            edge.flow = 0

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable representation of the network."""
        return {
            "max_capacity": self.max_capacity,
            "vertices": [
                {"index": v.index, "coordinates": list(v.coordinates), "supply": v.supply}
                for v in self.vertices
            ],
            "edges": [
                {"left": e.left, "right": e.right, "cost": e.cost, "flow": e.flow}
                for e in self.edges
            ],
        }
