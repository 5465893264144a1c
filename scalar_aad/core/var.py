# scalar_aad/core/var.py
from __future__ import annotations
import numbers
import numpy as np
from typing import Optional, Tuple

from .errors import UnsupportedOperandKind
from .node import Node, OpKind
from . import tape as tape_mod  # module access so use_tape() is honoured


def is_real_number(x) -> bool:
    """True for int/float/numpy real scalars; bools and Values are rejected."""
    return isinstance(x, numbers.Real) and not isinstance(x, (bool, np.bool_))


class Value:
    """
    Handle to one Node on a Tape.

    The node itself lives in `tape.nodes[idx]`; a Value only carries the
    reference, so two handles to the same node compare equal. `value`,
    `op`, `operands` and `exponent` are read-only. `grad` is read-only here:
    it is written by the backward pass and the reset helpers in engine.py.

    Attributes
    ----------
    tape : Tape
        Arena that owns the node.
    idx  : int
        Index of the node on `tape`.
    """

    __slots__ = ("tape", "idx")

    def __init__(self, tape, idx: int):
        self.tape = tape
        self.idx = idx

    @property
    def node(self) -> Node:
        return self.tape.nodes[self.idx]

    @property
    def value(self) -> np.float64:
        return self.node.value

    @property
    def grad(self) -> np.float64:
        return self.node.grad

    @property
    def op(self) -> OpKind:
        return self.node.op

    @property
    def operands(self) -> Tuple["Value", ...]:
        return tuple(Value(self.tape, i) for i in self.node.operands)

    @property
    def exponent(self) -> Optional[np.float64]:
        return self.node.exponent

    @property
    def label(self) -> str:
        return self.node.label

    @label.setter
    def label(self, name: str):
        self.node.label = name

    @property
    def is_leaf(self) -> bool:
        return self.node.op is OpKind.LEAF

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self.tape is other.tape and self.idx == other.idx

    def __hash__(self):
        return hash((id(self.tape), self.idx))

    def __repr__(self):
        return f"Value(data={self.value}, grad={self.grad}, op={self.op.value!r})"

    # Operator overloading: Value op Value only. Plain numbers must go
    # through leaf() first; Python raises TypeError on NotImplemented.
    def __add__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        from ..ops.arithmetic import add
        return add(self, other)

    def __sub__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __mul__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __truediv__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        from ..ops.arithmetic import div
        return div(self, other)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, exponent):
        # always dispatched, so a bad exponent raises UnsupportedOperandKind
        from ..ops.arithmetic import pow
        return pow(self, exponent)

    def tanh(self):
        from ..ops.transcendental import tanh
        return tanh(self)

    def exp(self):
        from ..ops.transcendental import exp
        return exp(self)

    def backward(self):
        """Run one backward pass seeded at this node. See engine.run_backward."""
        from .engine import run_backward
        run_backward(self)


def leaf(value, label: str = "") -> Value:
    """
    Record an input or constant on the current tape.

    Raises UnsupportedOperandKind if `value` is not a real number.
    """
    if not is_real_number(value):
        raise UnsupportedOperandKind(
            f"leaf() only accepts real numbers (int, float, numpy scalar), "
            f"but got {type(value).__name__}"
        )
    t = tape_mod.global_tape
    idx = t.push_node(op=OpKind.LEAF, value=np.float64(value), label=label)
    return Value(t, idx)
