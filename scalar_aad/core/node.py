# scalar_aad/core/node.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np


class OpKind(Enum):
    """Primitive operations recorded on the tape. Neg/sub/div are derived."""
    LEAF = "leaf"
    ADD = "add"
    MUL = "mul"
    POW = "pow"
    TANH = "tanh"
    EXP = "exp"

    @property
    def arity(self) -> int:
        return ARITY[self]


ARITY = {
    OpKind.LEAF: 0,
    OpKind.ADD: 2,
    OpKind.MUL: 2,
    OpKind.POW: 1,
    OpKind.TANH: 1,
    OpKind.EXP: 1,
}


@dataclass
class Node:
    """
    One record on the tape.

    Attributes
    ----------
    value    : np.float64
        Forward (primal) value, fixed at construction.
    grad     : np.float64
        Gradient accumulator; starts at 0.0 and is only added to by the
        backward pass (or cleared by the explicit reset helpers).
    op       : OpKind
        Which rule produced this node.
    operands : Tuple[int, ...]
        Tape indices of the operand nodes, in operand order.
    exponent : Optional[np.float64]
        Fixed exponent, only for OpKind.POW.
    label    : str
        Display name for summaries and diagrams.
    """
    value: np.float64
    op: OpKind = OpKind.LEAF
    operands: Tuple[int, ...] = ()
    exponent: Optional[np.float64] = None
    label: str = ""
    grad: np.float64 = np.float64(0.0)

    def __post_init__(self):
        if len(self.operands) != self.op.arity:
            raise ValueError(
                f"{self.op.value} expects {self.op.arity} operand(s), "
                f"got {len(self.operands)}"
            )
        if (self.exponent is None) == (self.op is OpKind.POW):
            raise ValueError("exponent must be set exactly for pow nodes")

    @property
    def symbol(self) -> str:
        """Short op symbol for display ('' for leaves)."""
        if self.op is OpKind.LEAF:
            return ""
        if self.op is OpKind.POW:
            return f"**{_fmt_number(self.exponent)}"
        return _SYMBOLS[self.op]


_SYMBOLS = {
    OpKind.ADD: "+",
    OpKind.MUL: "*",
    OpKind.TANH: "tanh",
    OpKind.EXP: "exp",
}


def _fmt_number(x) -> str:
    # 2.0 -> "2", -0.5 -> "-0.5"
    x = float(x)
    return str(int(x)) if x.is_integer() else repr(x)
