# scalar_aad/core/rules.py
"""
Forward formulas and local gradient rules, one entry per primitive OpKind.

A rule's `backward(out, operands)` reads `out.grad` as the upstream
gradient and *adds* into each operand's `grad`. When an operand appears
twice (x*x) the same Node object is passed twice and both contributions
land on it.

Floating-point corner cases are not trapped: values are np.float64, so
1/0 gives inf and inf/inf gives nan, with numpy's RuntimeWarning.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Sequence

import numpy as np

from .node import Node, OpKind


@dataclass(frozen=True)
class OpRule:
    kind: OpKind
    forward: Callable[..., np.float64]
    backward: Callable[[Node, Sequence[Node]], None]


# ----------------------------- forward ----------------------------- #
def _add_fwd(a, b):
    return a + b

def _mul_fwd(a, b):
    return a * b

def _pow_fwd(a, k):
    return a ** k

def _tanh_fwd(a):
    # (e^2x - 1) / (e^2x + 1); overflows to nan for large x
    e2 = np.exp(2.0 * a)
    return (e2 - 1.0) / (e2 + 1.0)

def _exp_fwd(a):
    return np.exp(a)


# ----------------------------- backward ---------------------------- #
def _add_bwd(out: Node, operands: Sequence[Node]):
    a, b = operands
    a.grad = a.grad + out.grad
    b.grad = b.grad + out.grad

def _mul_bwd(out: Node, operands: Sequence[Node]):
    a, b = operands
    # read both values before writing: a and b may be the same node
    av, bv = a.value, b.value
    a.grad = a.grad + bv * out.grad
    b.grad = b.grad + av * out.grad

def _pow_bwd(out: Node, operands: Sequence[Node]):
    (a,) = operands
    k = out.exponent
    a.grad = a.grad + k * a.value ** (k - 1.0) * out.grad

def _tanh_bwd(out: Node, operands: Sequence[Node]):
    (a,) = operands
    t = out.value
    a.grad = a.grad + (1.0 - t * t) * out.grad

def _exp_bwd(out: Node, operands: Sequence[Node]):
    (a,) = operands
    a.grad = a.grad + out.value * out.grad


RULES: Dict[OpKind, OpRule] = {
    OpKind.ADD:  OpRule(OpKind.ADD,  _add_fwd,  _add_bwd),
    OpKind.MUL:  OpRule(OpKind.MUL,  _mul_fwd,  _mul_bwd),
    OpKind.POW:  OpRule(OpKind.POW,  _pow_fwd,  _pow_bwd),
    OpKind.TANH: OpRule(OpKind.TANH, _tanh_fwd, _tanh_bwd),
    OpKind.EXP:  OpRule(OpKind.EXP,  _exp_fwd,  _exp_bwd),
}
