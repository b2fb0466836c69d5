import numbers
import typing as tp

import numpy as np

from bilevel_optimization.src.structures.common import ArrayType, LPFloat, LPInf, VarBounds, VariableType
from bilevel_optimization.src.structures.errors import DimensionMismatch, IndexOutOfRange


def _as_vector(v, group: str) -> ArrayType:
    try:
        return np.array(v, dtype=LPFloat)
    except ValueError as e:
        raise DimensionMismatch(group, str(e)) from e


def _as_matrix(m, n_cols: int, group: str) -> ArrayType:
    try:
        a = np.array(m, dtype=LPFloat)
    except ValueError as e:
        raise DimensionMismatch(group, str(e)) from e
    # [] stands for a matrix without rows
    if a.ndim == 1 and a.size == 0:
        a = a.reshape(0, n_cols)
    return a


def _read_only(a: ArrayType) -> ArrayType:
    a.setflags(write=False)
    return a


class BilevelLP:
    """
    Bilevel linear problem of the form:

        min(cx.x + cy.y, {x, y})
          s.t.  G x + H y <= q
                xl <= x <= xu
                x_j integer for j in Jx
                y ∈ argmin{ d.y + x.T F y :
                            A x + B y <= b
                            yl <= y <= yu }

    Dimensions `nu`, `nl`, `mu`, `ml` are taken from `cx`, `cy`, `q`, `b`.
    Bounds default to [0, inf) and can be changed only with `set_lower_bound`
    and `set_upper_bound`. Indices of variables (and of `Jx`) are 1-based.
    """

    def __init__(self, cx, cy, G, H, q, d, A, B, b, Jx: tp.Optional[tp.Iterable[int]] = None, F=None):
        cx = _as_vector(cx, "Objectives")
        cy = _as_vector(cy, "Objectives")
        d = _as_vector(d, "Objectives")
        nu = cx.shape[0] if cx.ndim == 1 else -1
        nl = cy.shape[0] if cy.ndim == 1 else -1
        if nu < 0 or nl < 0 or d.ndim != 1 or d.shape[0] != nl:
            raise DimensionMismatch("Objectives", f"cx: {cx.shape}, cy: {cy.shape}, d: {d.shape}")

        b = _as_vector(b, "Lower constraints")
        A = _as_matrix(A, nu, "Lower constraints")
        B = _as_matrix(B, nl, "Lower constraints")
        ml = b.shape[0] if b.ndim == 1 else -1
        if ml < 0 or A.shape != (ml, nu) or B.shape != (ml, nl):
            raise DimensionMismatch("Lower constraints", f"A: {A.shape}, B: {B.shape}, b: {b.shape}")

        q = _as_vector(q, "Upper constraints")
        G = _as_matrix(G, nu, "Upper constraints")
        H = _as_matrix(H, nl, "Upper constraints")
        mu = q.shape[0] if q.ndim == 1 else -1
        if mu < 0 or G.shape != (mu, nu) or H.shape != (mu, nl):
            raise DimensionMismatch("Upper constraints", f"G: {G.shape}, H: {H.shape}, q: {q.shape}")

        F = np.full((nu, nl), 0.0) if F is None else _as_matrix(F, nl, "Quadratic term")
        if F.shape != (nu, nl):
            raise DimensionMismatch("Quadratic term", f"F: {F.shape}, expected {(nu, nl)}")

        self._cx: ArrayType = _read_only(cx)
        self._cy: ArrayType = _read_only(cy)
        self._G: ArrayType = _read_only(G)
        self._H: ArrayType = _read_only(H)
        self._q: ArrayType = _read_only(q)
        self._d: ArrayType = _read_only(d)
        self._A: ArrayType = _read_only(A)
        self._B: ArrayType = _read_only(B)
        self._b: ArrayType = _read_only(b)
        self._F: ArrayType = _read_only(F)

        self._nu: int = nu
        self._nl: int = nl
        self._mu: int = mu
        self._ml: int = ml

        self._xl: ArrayType = np.full(nu, 0.0)
        self._xu: ArrayType = np.full(nu, LPInf)
        self._yl: ArrayType = np.full(nl, 0.0)
        self._yu: ArrayType = np.full(nl, LPInf)

        # ∀ j ∈ Jx, x[j] is integer
        self._Jx: tp.List[int] = list(Jx) if Jx is not None else list()

    @property
    def cx(self) -> ArrayType:
        return self._cx

    @property
    def cy(self) -> ArrayType:
        return self._cy

    @property
    def G(self) -> ArrayType:
        return self._G

    @property
    def H(self) -> ArrayType:
        return self._H

    @property
    def q(self) -> ArrayType:
        return self._q

    @property
    def d(self) -> ArrayType:
        return self._d

    @property
    def A(self) -> ArrayType:
        return self._A

    @property
    def B(self) -> ArrayType:
        return self._B

    @property
    def b(self) -> ArrayType:
        return self._b

    @property
    def F(self) -> ArrayType:
        return self._F

    @property
    def nu(self) -> int:
        return self._nu

    @property
    def nl(self) -> int:
        return self._nl

    @property
    def mu(self) -> int:
        return self._mu

    @property
    def ml(self) -> int:
        return self._ml

    @property
    def xl(self) -> ArrayType:
        return self._xl.copy()

    @property
    def xu(self) -> ArrayType:
        return self._xu.copy()

    @property
    def yl(self) -> ArrayType:
        return self._yl.copy()

    @property
    def yu(self) -> ArrayType:
        return self._yu.copy()

    @property
    def Jx(self) -> tp.List[int]:
        return list(self._Jx)

    def _bound_arrays(self, var_type: VariableType) -> tp.Tuple[ArrayType, ArrayType]:
        if var_type == VariableType.LOWER:
            return self._yl, self._yu
        elif var_type == VariableType.UPPER:
            return self._xl, self._xu
        raise TypeError(f"Expected VariableType, got {var_type!r}")

    def _position(self, var_type: VariableType, j: int) -> int:
        if isinstance(j, bool) or not isinstance(j, numbers.Integral):
            raise TypeError(f"Index of a variable must be an integer, got {j!r}")
        size = self._nl if var_type == VariableType.LOWER else self._nu
        if not 1 <= j <= size:
            raise IndexOutOfRange(var_type, j, size)
        return j - 1

    def set_lower_bound(self, var_type: VariableType, j: int, v) -> None:
        """
        Set the lower bound of the `j`-th (1-based) lower- or upper-level variable.
        The new value is not compared with the upper bound.
        """
        lower, _ = self._bound_arrays(var_type)
        lower[self._position(var_type, j)] = v

    def set_upper_bound(self, var_type: VariableType, j: int, v) -> None:
        """
        Set the upper bound of the `j`-th (1-based) lower- or upper-level variable.
        The new value is not compared with the lower bound.
        """
        _, upper = self._bound_arrays(var_type)
        upper[self._position(var_type, j)] = v

    def get_bounds(self, var_type: VariableType, j: int) -> VarBounds:
        lower, upper = self._bound_arrays(var_type)
        pos = self._position(var_type, j)
        return VarBounds(lower[pos], upper[pos])

    @property
    def shape(self) -> tp.Tuple[int, int, int, int]:
        return self._nu, self._nl, self._mu, self._ml

    @property
    def to_str(self) -> str:
        def lin(coefs, name):
            return " + ".join(f"{c}*{name}{j + 1}" for j, c in enumerate(coefs) if c != 0) or "0"

        s = f"min {lin(self._cx, 'x')} + {lin(self._cy, 'y')}\n"
        for i in range(self._mu):
            s += f"\t{lin(self._G[i], 'x')} + {lin(self._H[i], 'y')} <= {self._q[i]}\n"
        for j in range(self._nu):
            kind = ", integer" if j + 1 in self._Jx else ""
            s += f"\tx{j + 1} ∈ [{self._xl[j]}, {self._xu[j]}]{kind}\n"
        s += f"\ty ∈ argmin {lin(self._d, 'y')}"
        bilinear = [(i, j) for i, j in zip(*np.nonzero(self._F))]
        if bilinear:
            s += " + " + " + ".join(f"{self._F[i, j]}*x{i + 1}*y{j + 1}" for i, j in bilinear)
        s += "\n"
        for i in range(self._ml):
            s += f"\t\t{lin(self._A[i], 'x')} + {lin(self._B[i], 'y')} <= {self._b[i]}\n"
        for j in range(self._nl):
            s += f"\t\ty{j + 1} ∈ [{self._yl[j]}, {self._yu[j]}]\n"
        return s

    def __repr__(self) -> str:
        return f"BilevelLP(nu={self._nu}, nl={self._nl}, mu={self._mu}, ml={self._ml}, Jx={self._Jx})"
