import pytest

from wasserstein.algorithms.residual import ResidualGraph
from wasserstein.algorithms.spf import resolve_path, spf


def test_residual_graph_layout(crossing):
    residual = ResidualGraph.from_network(crossing)
    # 4 network vertices + super-source + super-sink
    assert residual.num_nodes == 6
    assert residual.source == 4
    assert residual.sink == 5
    # 4 edges + 2 supply arcs + 2 demand arcs, each with a reverse partner
    assert len(residual.head) == 16
    assert residual.edge_arcs == [0, 2, 4, 6]
    assert residual.supplies == [2, 1, -2, -1]
    assert residual.edge_flows() == [0, 0, 0, 0]
    assert residual.edge_costs() == [1, 5, 3, 1]


def test_push_moves_capacity_to_partner(crossing):
    residual = ResidualGraph.from_network(crossing)
    arc = residual.edge_arcs[0]
    residual.push(arc, 2)
    assert residual.flow_on(arc) == 2
    assert residual.cap[arc] == crossing.max_capacity - 2
    assert residual.tail(arc) == 0
    assert residual.head[arc] == 2


def test_spf_from_super_source(crossing):
    residual = ResidualGraph.from_network(crossing)
    potential = [0] * residual.num_nodes
    dist, pred = spf(residual, residual.source, potential)

    assert dist[residual.source] == 0
    assert dist[0] == 0 and dist[1] == 0
    assert dist[2] == 1  # A -> C
    assert dist[3] == 1  # B -> D
    assert dist[residual.sink] == 1

    path = resolve_path(residual, pred, residual.sink)
    nodes = [residual.tail(path[0])] + [residual.head[a] for a in path]
    assert nodes[0] == residual.source
    assert nodes[-1] == residual.sink
    assert sum(residual.cost[a] for a in path) == 1


def test_spf_stops_at_destination(line1):
    residual = ResidualGraph.from_network(line1)
    potential = [0] * residual.num_nodes
    dist, _ = spf(residual, 0, potential, dst_node=1)
    assert 1 in dist
    # Vertex 2 (distance 5) is farther than the destination (distance 3)
    assert 2 not in dist


def test_spf_skips_saturated_arcs(line1):
    residual = ResidualGraph.from_network(line1)
    direct = residual.edge_arcs[2]
    residual.cap[direct] = 0
    relay = residual.edge_arcs[1]
    residual.cap[relay] = 0
    dist, _ = spf(residual, 0, [0] * residual.num_nodes)
    assert 2 not in dist


def test_spf_unknown_source():
    residual = ResidualGraph(1)
    with pytest.raises(KeyError):
        spf(residual, 10, [0, 0, 0])
