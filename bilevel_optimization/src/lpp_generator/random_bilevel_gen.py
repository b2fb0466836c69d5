import logging
import typing as tp

import numpy as np

from bilevel_optimization.src.structures.bilevel_lp import BilevelLP
from bilevel_optimization.src.structures.common import VariableType


class RandomBilevelLP:
    """
    Generator of dense random instances of BilevelLP.
    Right-hand sides are positive, so (x, y) = (0, 0) is always feasible.
    """

    def __init__(self, nu, nl, mu, ml, n_int=0, bilinear=False, box=10.0, seed: tp.Optional[int] = None):
        """
        :param nu: число переменных верхнего уровня
        :param nl: число переменных нижнего уровня
        :param mu: число ограничений верхнего уровня
        :param ml: число ограничений нижнего уровня
        :param n_int: первые n_int переменных верхнего уровня целочисленные
        :param bilinear: заполнять ли матрицу F
        :param box: верхняя граница всех переменных
        """
        self._logger = logging.getLogger("RandomBilevelLP")
        self._rng = np.random.default_rng(seed)
        self._box = box
        self._logger.info(f"Generating instance nu={nu}, nl={nl}, mu={mu}, ml={ml}, n_int={n_int}.")
        self.lpp = self._init_lpp(nu, nl, mu, ml, n_int, bilinear)

    def _init_lpp(self, nu, nl, mu, ml, n_int, bilinear) -> BilevelLP:
        rng = self._rng
        inst = BilevelLP(
            cx=rng.integers(-10, 11, nu),
            cy=rng.integers(-10, 11, nl),
            G=rng.integers(-5, 6, (mu, nu)),
            H=rng.integers(-5, 6, (mu, nl)),
            q=rng.integers(1, 21, mu),
            d=rng.integers(-10, 11, nl),
            A=rng.integers(-5, 6, (ml, nu)),
            B=rng.integers(-5, 6, (ml, nl)),
            b=rng.integers(1, 21, ml),
            Jx=range(1, n_int + 1),
            F=rng.integers(-3, 4, (nu, nl)) if bilinear else None,
        )
        for j in range(1, nu + 1):
            inst.set_upper_bound(VariableType.UPPER, j, self._box)
        for j in range(1, nl + 1):
            inst.set_upper_bound(VariableType.LOWER, j, self._box)
        return inst
