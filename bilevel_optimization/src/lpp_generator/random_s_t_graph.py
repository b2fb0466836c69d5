import typing as tp

import networkx as nx
import numpy as np


class RandomSTGraph:
    """
    Random directed graph with a source `s` and a sink `t` reachable from `s`.
    Each undirected edge of a Watts-Strogatz graph keeps one random orientation.
    """

    def __init__(self, n, k, p, seed: tp.Optional[int] = None):
        rng = np.random.default_rng(seed)
        graph = nx.connected_watts_strogatz_graph(n, k, p, seed=int(rng.integers(2 ** 31)))
        self.graph: nx.DiGraph = nx.DiGraph()
        self.graph.add_nodes_from(graph.nodes)
        for u, v in graph.edges:
            if rng.integers(0, 2):
                self.graph.add_edge(u, v)
            else:
                self.graph.add_edge(v, u)

        self.n_edges = len(self.graph.edges)
        self.n_nodes = len(self.graph.nodes)

        self.s = 0
        if not nx.descendants(self.graph, self.s):
            for u in list(self.graph.predecessors(self.s)):
                self.graph.remove_edge(u, self.s)
                self.graph.add_edge(self.s, u)
        self.t = int(rng.choice(sorted(nx.descendants(self.graph, self.s))))
