# scalar_aad/ops/arithmetic.py
import numpy as np
from ..core.errors import UnsupportedOperandKind
from ..core.node import OpKind
from ..core.rules import RULES
from ..core.var import Value, is_real_number, leaf
from ..core import tape as tape_mod  # Use module access for use_tape() compatibility

def _check_operands(*xs):
    """All operands must be Values on one tape; returns that tape."""
    for x in xs:
        if not isinstance(x, Value):
            raise UnsupportedOperandKind(
                f"operands must be Value, got {type(x).__name__}; "
                f"wrap plain numbers with leaf()"
            )
    t = xs[0].tape
    if any(x.tape is not t for x in xs[1:]):
        raise UnsupportedOperandKind("operands belong to different tapes")
    return t

def _binary(x, y, kind):
    """
    Generic binary primitive:
      - computes out.value = forward(x.value, y.value)
      - pushes a Node referencing (x, y) on their tape
    """
    t = _check_operands(x, y)
    val = RULES[kind].forward(x.value, y.value)
    return Value(t, t.push_node(op=kind, value=val, operands=(x.idx, y.idx)))

def add(x, y): return _binary(x, y, OpKind.ADD)
def mul(x, y): return _binary(x, y, OpKind.MUL)

def pow(x, k):
    """
    Power with a fixed real exponent:
      out.value = x.value ** k
      ∂out/∂x   = k * x^(k-1)

    `k` must be a plain real number; a Value (or anything else) raises
    UnsupportedOperandKind. 0 ** -1 is inf, negative ** fractional is nan.
    """
    t = _check_operands(x)
    if not is_real_number(k):
        raise UnsupportedOperandKind(
            f"pow() only supports int/float exponents, got {type(k).__name__}"
        )
    k = np.float64(k)
    val = RULES[OpKind.POW].forward(x.value, k)
    return Value(t, t.push_node(op=OpKind.POW, value=val, operands=(x.idx,), exponent=k))

def _constant_like(x, c):
    """Leaf constant on the same tape as x."""
    with tape_mod.use_tape(x.tape):
        return leaf(c)

def neg(x):
    """-x, recorded as x * (-1)."""
    _check_operands(x)
    return mul(x, _constant_like(x, -1.0))

def sub(x, y):
    """x - y, recorded as x + (-y)."""
    _check_operands(x, y)
    return add(x, neg(y))

def div(x, y):
    """
    x / y, recorded as x * y**-1.
    y == 0 is not trapped: the result is ±inf or nan.
    """
    _check_operands(x, y)
    return mul(x, pow(y, -1))
