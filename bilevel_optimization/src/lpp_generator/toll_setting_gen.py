import logging
import typing as tp

import networkx as nx
import numpy as np

from bilevel_optimization.src.config import config
from bilevel_optimization.src.lpp_generator.random_s_t_graph import RandomSTGraph
from bilevel_optimization.src.structures.bilevel_lp import BilevelLP
from bilevel_optimization.src.structures.common import VariableType


class BilevelTollSetting:
    """
    Генератор инстансов двухуровневой задачи о потоке с платными дугами.
    Лидер выбирает плату x на n_tolls дугах в пределах бюджета sum(x) <= budget,
    последователь пускает единицу потока из s в t с минимальной стоимостью
    d.y + x.T F y, где F выбирает платные дуги.
    Лидер минимизирует базовую стоимость пути последователя d.y (cx = 0, cy = d),
    то есть платы служат только для управления маршрутом, а не для получения дохода.
    Граф задается здесь же случайным образом.
    """

    def __init__(self, n, k, n_tolls, budget=config.DEFAULT_TOLL_BUDGET, integer_tolls=False,
                 seed: tp.Optional[int] = None):
        """
        :param n: число вершин графа
        :param k: каждый узел соединяется со своими k ближайшими соседями в кольцевой топологии.
        :param n_tolls: число платных дуг
        :param budget: ограничение на сумму плат
        :param integer_tolls: целочисленные ли платы
        """
        self._logger = logging.getLogger("BilevelTollSetting")
        rng = np.random.default_rng(seed)
        rstg = RandomSTGraph(n, k, 0.1, seed=int(rng.integers(2 ** 31)))

        self._graph: nx.DiGraph = rstg.graph
        self._n_nodes, self._n_edges = rstg.n_nodes, rstg.n_edges
        self._s, self._t = rstg.s, rstg.t

        if not 0 <= n_tolls <= self._n_edges:
            raise ValueError(f"Cannot toll {n_tolls} of {self._n_edges} arcs")

        for u, v in self._graph.edges:
            self._graph[u][v]["weight"] = int(rng.integers(0, config.WEIGHT_FACTOR * n + 1))

        # кодирование ребер
        self._edge_encoder = {edge: i for i, edge in enumerate(self._graph.edges)}
        self._edge_decoder = {j: i for i, j in self._edge_encoder.items()}

        self._tolled = sorted(int(i) for i in rng.choice(self._n_edges, n_tolls, replace=False))

        self._logger.info(f"Graph with {self._n_nodes} nodes, {self._n_edges} arcs, "
                          f"s = {self._s}, t = {self._t}, tolled arcs: {self._tolled}.")
        self.lpp = self._init_lpp(budget, integer_tolls)

    def _init_lpp(self, budget, integer_tolls) -> BilevelLP:
        n, m, n_tolls = self._n_nodes, self._n_edges, len(self._tolled)

        # матрица инцидентности
        inc = np.full((n, m), 0.0)
        for (u, v), e in self._edge_encoder.items():
            inc[u, e] = 1.0
            inc[v, e] = -1.0

        rhs = np.full(n, 0.0)
        rhs[self._s] = 1.0
        rhs[self._t] = -1.0

        # равенство inc y == rhs записано парой неравенств
        big_b = np.concatenate([inc, -inc])
        b = np.concatenate([rhs, -rhs])

        d = np.full(m, 0.0)
        for (u, v), e in self._edge_encoder.items():
            d[e] = self._graph[u][v]["weight"]

        f = np.full((n_tolls, m), 0.0)
        for i, e in enumerate(self._tolled):
            f[i, e] = 1.0

        inst = BilevelLP(
            cx=np.full(n_tolls, 0.0),
            cy=d,
            G=np.full((1, n_tolls), 1.0),
            H=np.full((1, m), 0.0),
            q=[budget],
            d=d,
            A=np.full((2 * n, n_tolls), 0.0),
            B=big_b,
            b=b,
            Jx=range(1, n_tolls + 1) if integer_tolls else None,
            F=f,
        )
        for e in range(1, m + 1):
            inst.set_upper_bound(VariableType.LOWER, e, 1.0)
        return inst

    @property
    def start(self):
        return self._s

    @property
    def finish(self):
        return self._t

    @property
    def tolled_arcs(self) -> tp.List[tp.Tuple[int, int]]:
        return [self._edge_decoder[e] for e in self._tolled]

    @property
    def edge_encoder(self):
        return self._edge_encoder

    @property
    def edge_decoder(self):
        return self._edge_decoder

    def path_to_flow(self, path: tp.List[int]) -> np.ndarray:
        y = np.full(self._n_edges, 0.0)
        for u, v in zip(path, path[1:]):
            y[self._edge_encoder[u, v]] = 1.0
        return y

    def shortest_path_flow(self, tolls=None) -> np.ndarray:
        """
        Ответ последователя при заданных платах: кратчайший путь из s в t.
        """
        tolls = np.full(len(self._tolled), 0.0) if tolls is None else np.asarray(tolls, dtype=float)
        cost = {edge: self._graph[edge[0]][edge[1]]["weight"] for edge in self._graph.edges}
        for i, e in enumerate(self._tolled):
            cost[self._edge_decoder[e]] += tolls[i]
        path = nx.shortest_path(
            self._graph, self._s, self._t, weight=lambda u, v, _: cost[u, v]
        )
        return self.path_to_flow(path)
