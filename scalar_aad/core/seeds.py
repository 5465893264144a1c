# scalar_aad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the graph. Each driver builds its graph on a fresh tape.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List

import numpy as np

from .errors import UnsupportedOperandKind
from .var import Value, leaf, is_real_number
from .tape import use_tape
from .engine import run_backward


def value(x: Any) -> Any:
    """Return the numeric value of a Value; pass through plain numbers unchanged."""
    return x.value if isinstance(x, Value) else x


def _as_output(y: Any) -> Value:
    """A constant output becomes a leaf (zero gradients everywhere)."""
    if isinstance(y, Value):
        return y
    if is_real_number(y):
        return leaf(y, label="y")
    raise UnsupportedOperandKind(
        f"function must return a Value or a real number, got {type(y).__name__}"
    )


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Value], Value], x0: float) -> np.float64:
    """
    Derivative of a scalar function y=f(x) at x0.
    Runs one reverse pass within a fresh, isolated tape.
    """
    with use_tape():
        x = leaf(x0, label="x")
        y = _as_output(f(x))
        run_backward(y)
        return x.grad


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Value]], Value],
          inputs: Dict[str, float]) -> Dict[str, np.float64]:
    """
    Gradient of y=f(vars) w.r.t. ALL inputs (dict form), from ONE reverse pass.

    Parameters
    ----------
    f       : function taking a dict {name: Value} and returning a Value
    inputs  : dict {name: number}

    Returns
    -------
    dict {name: gradient}  # same key order as `inputs`
    """
    with use_tape():
        xs = {k: leaf(v, label=k) for k, v in inputs.items()}
        y = _as_output(f(xs))
        run_backward(y)
        return {k: xs[k].grad for k in inputs.keys()}


def grads_list(f: Callable[[List[Value]], Value],
               x0_list: Iterable[float]) -> List[np.float64]:
    """
    Same as grads(), with positional inputs.

    Example
    -------
    f = lambda xs: xs[0] * xs[0] + xs[1] * leaf(3.0)
    grads_list(f, [2.0, 4.0]) -> [4.0, 3.0]
    """
    with use_tape():
        xs = [leaf(v, label=f"x{i}") for i, v in enumerate(x0_list)]
        y = _as_output(f(xs))
        run_backward(y)
        return [x.grad for x in xs]
