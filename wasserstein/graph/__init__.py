"""Flow network model and NetworkX conversion."""

from wasserstein.graph.network import Edge, FlowNetwork, Vertex, manhattan

__all__ = ["Edge", "FlowNetwork", "Vertex", "manhattan"]
