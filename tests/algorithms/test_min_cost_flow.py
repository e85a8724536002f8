import logging

import pytest

from wasserstein.algorithms.min_cost_flow import solve_min_cost_flow
from wasserstein.config import SolverConfig
from wasserstein.errors import (
    InfeasibleNetworkError,
    SolverIntegrityError,
    UnbalancedMassError,
)
from wasserstein.graph.network import FlowNetwork

METHODS = ["ssp", "network_simplex"]


def _assert_conserved(net: FlowNetwork) -> None:
    for vertex in net.vertices:
        assert net.outflow(vertex.index) - net.inflow(vertex.index) == vertex.supply
    assert all(edge.flow >= 0 for edge in net.edges)


class TestMinCostFlowBasic:
    @pytest.mark.parametrize("method", METHODS)
    def test_line1(self, line1, method):
        solution = solve_min_cost_flow(line1, config=SolverConfig(method=method))
        assert solution.total_cost == 15
        assert solution.total_flow == 3
        assert line1.total_cost() == 15
        _assert_conserved(line1)

    @pytest.mark.parametrize("method", METHODS)
    def test_crossing(self, crossing, method):
        solution = solve_min_cost_flow(crossing, config=SolverConfig(method=method))
        assert solution.total_cost == 3
        flows = {(e.left, e.right): e.flow for e in crossing.edges}
        assert flows == {(0, 2): 2, (0, 3): 0, (1, 2): 0, (1, 3): 1}
        _assert_conserved(crossing)

    @pytest.mark.parametrize("method", METHODS)
    def test_rerouting_through_reverse_arc(self, rerouting, method):
        solution = solve_min_cost_flow(rerouting, config=SolverConfig(method=method))
        assert solution.total_cost == 11
        _assert_conserved(rerouting)

    def test_ssp_counts_augmentations(self, rerouting):
        solution = solve_min_cost_flow(rerouting)
        assert solution.augmentations >= 2
        assert solution.clamped is False

    def test_empty_network(self):
        net = FlowNetwork(max_capacity=1)
        net.add_vertex()
        solution = solve_min_cost_flow(net)
        assert solution.total_cost == 0
        assert solution.total_flow == 0
        assert solution.augmentations == 0


class TestMinCostFlowState:
    def test_existing_flows_are_discarded(self, crossing):
        for edge in crossing.edges:
            edge.flow = 7
        solve_min_cost_flow(crossing)
        assert crossing.total_cost() == 3

    def test_repeated_solves_are_deterministic(self, line1):
        solve_min_cost_flow(line1)
        first = [e.flow for e in line1.edges]
        solve_min_cost_flow(line1)
        assert [e.flow for e in line1.edges] == first


class TestMinCostFlowErrors:
    def test_unbalanced(self):
        net = FlowNetwork(max_capacity=5)
        a = net.add_vertex((0, 0), 3)
        b = net.add_vertex((1, 0), -2)
        net.add_edge(a, b)
        with pytest.raises(UnbalancedMassError):
            solve_min_cost_flow(net)

    @pytest.mark.parametrize("method", METHODS)
    def test_infeasible(self, disconnected, method):
        with pytest.raises(InfeasibleNetworkError):
            solve_min_cost_flow(disconnected, config=SolverConfig(method=method))

    def test_augmentation_guard(self, rerouting):
        with pytest.raises(SolverIntegrityError):
            solve_min_cost_flow(rerouting, config=SolverConfig(max_augmentations=1))

    def test_invalid_config(self, line1):
        with pytest.raises(ValueError):
            solve_min_cost_flow(line1, config=SolverConfig(method="bogus"))


class TestClamping:
    def test_cost_clamped_and_reported(self, caplog):
        net = FlowNetwork(max_capacity=1)
        a = net.add_vertex((0, 0), 1)
        b = net.add_vertex((1, 0), -1)
        net.add_edge(a, b, cost=500)

        caplog.set_level(logging.WARNING, logger="wasserstein")
        solution = solve_min_cost_flow(net, config=SolverConfig(clamp_limit=100))
        assert solution.clamped is True
        assert solution.total_cost == 100
        assert any("Clamped" in r.getMessage() for r in caplog.records)
        # The network keeps its original cost
        assert net.edges[0].cost == 500

    def test_clamping_disabled(self):
        net = FlowNetwork(max_capacity=1)
        a = net.add_vertex((0, 0), 1)
        b = net.add_vertex((1, 0), -1)
        net.add_edge(a, b, cost=500)

        config = SolverConfig(clamp_values=False, clamp_limit=100)
        solution = solve_min_cost_flow(net, config=config)
        assert solution.clamped is False
        assert solution.total_cost == 500


class TestIntegrityChecks:
    """Flows handed back by a broken backend must never be accepted."""

    @staticmethod
    def _ssp_returning(monkeypatch, total_cost, flows):
        def fake_ssp(residual, total_supply, config):
            return total_cost, list(flows), 1

        monkeypatch.setattr(
            "wasserstein.algorithms.min_cost_flow._solve_ssp", fake_ssp
        )

    def test_negative_flow(self, monkeypatch, line1):
        # line1 edges: S->R, R->T, S->T
        self._ssp_returning(monkeypatch, 7, [-1, 0, 3])
        with pytest.raises(SolverIntegrityError, match="negative flow"):
            solve_min_cost_flow(line1)

    def test_negative_flow_raised_without_integrity_checks(self, monkeypatch, line1):
        self._ssp_returning(monkeypatch, 7, [-1, 0, 3])
        config = SolverConfig(check_integrity=False)
        with pytest.raises(SolverIntegrityError, match="negative flow"):
            solve_min_cost_flow(line1, config=config)

    def test_conservation_broken(self, monkeypatch, line1):
        # All flow enters R and never leaves it
        self._ssp_returning(monkeypatch, 9, [3, 0, 0])
        with pytest.raises(SolverIntegrityError, match="net outflow"):
            solve_min_cost_flow(line1)

    def test_cost_mismatch(self, monkeypatch, line1):
        self._ssp_returning(monkeypatch, 14, [0, 0, 3])
        with pytest.raises(SolverIntegrityError, match="reported cost"):
            solve_min_cost_flow(line1)

    def test_negative_flow_from_network_simplex(self, monkeypatch, crossing):
        monkeypatch.setattr(
            "wasserstein.algorithms.min_cost_flow.network_simplex_flows",
            lambda network, clamp: (3, [2, 0, -1, 1]),
        )
        config = SolverConfig(method="network_simplex")
        with pytest.raises(SolverIntegrityError, match="negative flow"):
            solve_min_cost_flow(crossing, config=config)
