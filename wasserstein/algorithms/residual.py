"""Residual graph used by the successive-shortest-path solver.

Arcs are stored in parallel lists. Every arc is created together with its
reverse partner, so arc ``a`` and ``a ^ 1`` form a pair: pushing flow on one
adds the same residual capacity to the other. The residual capacity of the
reverse arc of a network edge is therefore the flow carried by that edge.

Two virtual vertices are appended after the network's own vertices: a
super-source with one arc to every source (capacity = supply) and a
super-sink with one arc from every sink (capacity = demand). This turns the
multi-source, multi-sink transportation problem into a single s-t problem.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from wasserstein.graph.network import FlowNetwork


class ResidualGraph:
    """Arc arena with paired forward/reverse arcs.

    Attributes:
        num_nodes: Network vertices plus the super-source and super-sink.
        source: Index of the super-source.
        sink: Index of the super-sink.
        head: Target vertex of each arc.
        cap: Remaining capacity of each arc.
        cost: Unit cost of each arc (negated on reverse arcs).
        adj: Outgoing arc ids per vertex, in insertion order.
        edge_arcs: Forward arc id for each edge of the originating network.
        supplies: Vertex supplies as seen by the solver (after clamping).
        clamped: True if any supply or cost had to be clamped.
    """

    def __init__(self, num_vertices: int) -> None:
        self.num_nodes = num_vertices + 2
        self.source = num_vertices
        self.sink = num_vertices + 1
        self.head: List[int] = []
        self.cap: List[int] = []
        self.cost: List[int] = []
        self.adj: List[List[int]] = [[] for _ in range(self.num_nodes)]
        self.edge_arcs: List[int] = []
        self.supplies: List[int] = []
        self.clamped = False

    @classmethod
    def from_network(
        cls,
        network: FlowNetwork,
        clamp: Optional[Callable[[int], int]] = None,
    ) -> "ResidualGraph":
        """Build the residual graph of ``network`` with all flows at zero."""
        residual = cls(len(network.vertices))

        for vertex in network.vertices:
            supply = residual._clamp(vertex.supply, clamp)
            residual.supplies.append(supply)

        for edge in network.edges:
            cost = residual._clamp(edge.cost, clamp)
            arc = residual.add_arc(edge.left, edge.right, network.max_capacity, cost)
            residual.edge_arcs.append(arc)

        for index, supply in enumerate(residual.supplies):
            if supply > 0:
                residual.add_arc(residual.source, index, supply, 0)
            elif supply < 0:
                residual.add_arc(index, residual.sink, -supply, 0)

        return residual

    def _clamp(self, value: int, clamp: Optional[Callable[[int], int]]) -> int:
        if clamp is None:
            return value
        clamped = clamp(value)
        if clamped != value:
            self.clamped = True
        return clamped

    def add_arc(self, u: int, v: int, capacity: int, cost: int) -> int:
        """Add arc ``u -> v`` and its zero-capacity reverse; return the forward id."""
        arc = len(self.head)
        self.head.append(v)
        self.cap.append(capacity)
        self.cost.append(cost)
        self.adj[u].append(arc)

        self.head.append(u)
        self.cap.append(0)
        self.cost.append(-cost)
        self.adj[v].append(arc + 1)
        return arc

    def tail(self, arc: int) -> int:
        return self.head[arc ^ 1]

    def push(self, arc: int, amount: int) -> None:
        """Move ``amount`` units of residual capacity from ``arc`` to its partner."""
        self.cap[arc] -= amount
        self.cap[arc ^ 1] += amount

    def flow_on(self, arc: int) -> int:
        """Return the flow carried by forward ``arc``."""
        return self.cap[arc ^ 1]

    def edge_flows(self) -> List[int]:
        """Return the flow on each network edge, in network order."""
        return [self.cap[arc ^ 1] for arc in self.edge_arcs]

    def edge_costs(self) -> List[int]:
        """Return the (possibly clamped) unit cost of each network edge."""
        return [self.cost[arc] for arc in self.edge_arcs]
