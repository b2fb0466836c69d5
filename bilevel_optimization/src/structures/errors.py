from bilevel_optimization.src.structures.common import VariableType


class DimensionMismatch(ValueError):
    """
    Shapes of the supplied vectors and matrices are inconsistent.
    `group` names the checked group of inputs that failed.
    """

    def __init__(self, group: str, details: str = ""):
        self.group = group
        msg = f"Dimension mismatch: {group}"
        if details:
            msg += f" ({details})"
        super().__init__(msg)


class IndexOutOfRange(IndexError):
    def __init__(self, var_type: VariableType, index, size: int):
        self.var_type = var_type
        self.index = index
        self.size = size
        super().__init__(
            f"Index {index} is out of range [1, {size}] for {var_type.to_str} variables"
        )
