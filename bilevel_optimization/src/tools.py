import logging

import numpy as np

from bilevel_optimization.src.config import config
from bilevel_optimization.src.structures.bilevel_lp import BilevelLP

logger = logging.getLogger("BilevelTools")


def _point(inst: BilevelLP, x, y):
    x, y = np.array(x, dtype=float), np.array(y, dtype=float)
    if x.shape != (inst.nu,) or y.shape != (inst.nl,):
        raise ValueError(f"Point of wrong size: x: {x.shape}, y: {y.shape}, expected ({inst.nu},), ({inst.nl},)")
    return x, y


def upper_objective(inst: BilevelLP, x, y) -> float:
    x, y = _point(inst, x, y)
    return float(inst.cx.dot(x) + inst.cy.dot(y))


def lower_objective(inst: BilevelLP, x, y) -> float:
    x, y = _point(inst, x, y)
    return float(inst.d.dot(y) + x.dot(inst.F).dot(y))


def is_mixed_integer(inst: BilevelLP) -> bool:
    return len(inst.Jx) != 0


def check_upper_feasible(inst: BilevelLP, x, y, eps=config.EPS) -> bool:
    """
    Checks G x + H y <= q, xl <= x <= xu and integrality of x_j, j ∈ Jx.
    """
    x, y = _point(inst, x, y)
    for j in inst.Jx:
        if not 1 <= j <= inst.nu:
            raise IndexError(f"Integer index {j} is out of range [1, {inst.nu}]")
    if not (inst.G.dot(x) + inst.H.dot(y) - inst.q <= eps).all():
        logger.debug("Upper constraints are violated.")
        return False
    if not ((x - inst.xl >= -eps).all() and (x - inst.xu <= eps).all()):
        logger.debug("Bounds of upper-level variables are violated.")
        return False
    for j in inst.Jx:
        if abs(x[j - 1] - round(x[j - 1])) > eps:
            logger.debug(f"x{j} = {x[j - 1]} is not integer.")
            return False
    return True


def check_lower_feasible(inst: BilevelLP, x, y, eps=config.EPS) -> bool:
    """
    Checks A x + B y <= b and yl <= y <= yu.
    Optimality of y for the lower level is not checked.
    """
    x, y = _point(inst, x, y)
    if not (inst.A.dot(x) + inst.B.dot(y) - inst.b <= eps).all():
        logger.debug("Lower constraints are violated.")
        return False
    if not ((y - inst.yl >= -eps).all() and (y - inst.yu <= eps).all()):
        logger.debug("Bounds of lower-level variables are violated.")
        return False
    return True


def check_feasible(inst: BilevelLP, x, y, eps=config.EPS) -> bool:
    return check_upper_feasible(inst, x, y, eps) and check_lower_feasible(inst, x, y, eps)
