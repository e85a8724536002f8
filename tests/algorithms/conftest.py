"""Small hand-built flow networks shared by solver tests."""

import pytest

from wasserstein.graph.network import FlowNetwork


@pytest.fixture
def line1():
    # Coordinates along one axis, costs are distances:
    #
    #   S(+3)@0 ──3──► R@3 ──2──► T(-3)@5
    #      └──────────────5────────┘
    #
    # Direct and relayed routes cost the same.
    net = FlowNetwork(max_capacity=3)
    s = net.add_vertex((0, 0), 3)
    r = net.add_vertex((3, 0), 0)
    t = net.add_vertex((5, 0), -3)
    net.add_edge(s, r)
    net.add_edge(r, t)
    net.add_edge(s, t)
    return net


@pytest.fixture
def crossing():
    # Two sources, two sinks; the cheap assignment is the "uncrossed" one.
    #
    #   A(+2)@0   B(+1)@4
    #   C(-2)@1   D(-1)@5
    #
    # A->C 1, A->D 5, B->C 3, B->D 1  => optimum 2*1 + 1*1 = 3
    net = FlowNetwork(max_capacity=3)
    a = net.add_vertex((0, 0), 2)
    b = net.add_vertex((4, 0), 1)
    c = net.add_vertex((1, 0), -2)
    d = net.add_vertex((5, 0), -1)
    for src in (a, b):
        for dst in (c, d):
            net.add_edge(src, dst)
    return net


@pytest.fixture
def rerouting():
    # The first cheapest augmentation (A->C at cost 0) must later be partly
    # undone through a reverse arc to reach the global optimum.
    #
    #   A(+1)@0 ─► C(-1)@0    cost 0
    #   A       ─► D(-1)@10   cost 10
    #   B(+1)@1 ─► C          cost 1
    #   B       ─► D          cost 100 (explicit)
    #
    # Greedy A->C then B->D costs 100; optimum A->D, B->C costs 11.
    net = FlowNetwork(max_capacity=2)
    a = net.add_vertex((0, 0), 1)
    b = net.add_vertex((1, 0), 1)
    c = net.add_vertex((0, 0), -1)
    d = net.add_vertex((10, 0), -1)
    net.add_edge(a, c)
    net.add_edge(a, d)
    net.add_edge(b, c)
    net.add_edge(b, d, cost=100)
    return net


@pytest.fixture
def disconnected():
    # Supply at A has no edge towards the demand at B.
    net = FlowNetwork(max_capacity=1)
    a = net.add_vertex((0, 0), 1)
    b = net.add_vertex((1, 0), -1)
    c = net.add_vertex((2, 0), 0)
    net.add_edge(b, c)
    net.add_edge(c, a)
    return net
