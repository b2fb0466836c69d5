from dataclasses import dataclass
from enum import Enum

import numpy as np

LPFloat = np.float64
LPInf = np.inf
ArrayType = np.ndarray


class VariableType(Enum):
    """
    Which level a variable belongs to. Selects the bound arrays
    (`xl`/`xu` or `yl`/`yu`) touched by the bound setters.
    """
    LOWER = 0
    UPPER = 1

    @property
    def to_str(self) -> str:
        return {0: "lower-level", 1: "upper-level"}[self.value]


@dataclass(frozen=True)
class VarBounds:
    lower: LPFloat
    upper: LPFloat
