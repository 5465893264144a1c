# scalar_aad/ops/transcendental.py
from ..core.node import OpKind
from ..core.rules import RULES
from ..core.var import Value
from .arithmetic import _check_operands

def _unary(x, kind):
    t = _check_operands(x)
    val = RULES[kind].forward(x.value)
    return Value(t, t.push_node(op=kind, value=val, operands=(x.idx,)))

def tanh(x):
    """tanh(x); d/dx = 1 - tanh(x)^2."""
    return _unary(x, OpKind.TANH)

def exp(x):
    """e^x; d/dx = e^x (the output value itself)."""
    return _unary(x, OpKind.EXP)
