# scalar_aad/core/__init__.py

"""
Core public API for the scalar AAD package.

Exports:
    Value          : Handle to a node on a tape (value, grad, op, operands).
    leaf           : Record an input or constant on the current tape.
    Tape           : Arena owning the nodes of a graph.
    global_tape    : The default tape new leaves are recorded on.
    use_tape       : Context manager to temporarily switch the current tape.
    OpKind         : Tag of the primitive that produced a node.
    order_for      : Topological order of the graph below a root.
    run_backward   : Run a single reverse pass to accumulate gradients.
    zero_grads     : Reset gradients of everything reachable from a root.
    zero_adjoints  : Reset all gradients on a tape.
    grad, grads, grads_list, value : convenience drivers (fresh tape each call).
"""

from .errors import ScalarAADError, UnsupportedOperandKind
from .node import Node, OpKind
from .tape import Tape, global_tape, use_tape
from .var import Value, leaf
from .engine import order_for, run_backward, zero_grads, zero_adjoints
from .seeds import grad, grads, grads_list, value

__all__ = [
    "ScalarAADError", "UnsupportedOperandKind",
    "Node", "OpKind",
    "Tape", "global_tape", "use_tape",
    "Value", "leaf",
    "order_for", "run_backward", "zero_grads", "zero_adjoints",
    "grad", "grads", "grads_list", "value",
]
