# scalar_aad/core/engine.py
from __future__ import annotations
import numpy as np
from typing import List, Optional

from .errors import UnsupportedOperandKind
from .node import OpKind
from .rules import RULES
from .tape import Tape
from .var import Value
from . import tape as tape_mod


def _check_root(root):
    if not isinstance(root, Value):
        raise UnsupportedOperandKind(f"root must be a Value, got {type(root).__name__}")


def _topo_indices(tape: Tape, root: int) -> List[int]:
    """
    Post-order DFS from `root` over operand indices, with an explicit stack.

    Operands are visited in operand order before their consumer is emitted;
    a shared operand is emitted once, where it is first discovered. Every
    node therefore comes after all of its operands.
    """
    nodes = tape.nodes
    visited = {root}
    order: List[int] = []
    # (node index, position of the next operand to visit)
    stack = [(root, 0)]
    while stack:
        i, pos = stack.pop()
        operands = nodes[i].operands
        if pos < len(operands):
            stack.append((i, pos + 1))
            child = operands[pos]
            if child not in visited:
                visited.add(child)
                stack.append((child, 0))
        else:
            order.append(i)
    return order


def order_for(root: Value) -> List[Value]:
    """Topological order of every node reachable from `root`, root last."""
    _check_root(root)
    return [Value(root.tape, i) for i in _topo_indices(root.tape, root.idx)]


def run_backward(root: Value):
    """
    Run one reverse pass seeded at `root`.

    root.grad is set to 1.0; no other gradient is cleared, so a second pass
    over the same graph adds to what the first one left behind. Call
    zero_grads(root) between passes to get fresh gradients.

    Notes:
        - Nodes are processed in reverse topological order, so every
          consumer of a node has fired (and added into its grad) before
          the node's own rule runs.
        - inf/nan values propagate like any other value.
    """
    _check_root(root)
    nodes = root.tape.nodes
    order = _topo_indices(root.tape, root.idx)
    nodes[root.idx].grad = np.float64(1.0)

    for i in reversed(order):
        node = nodes[i]
        if node.op is OpKind.LEAF:
            continue
        RULES[node.op].backward(node, [nodes[j] for j in node.operands])


def zero_grads(root: Value):
    """Set grad to 0.0 on every node reachable from `root`."""
    _check_root(root)
    nodes = root.tape.nodes
    for i in _topo_indices(root.tape, root.idx):
        nodes[i].grad = np.float64(0.0)


def zero_adjoints(tape: Optional[Tape] = None):
    """Set grad to 0.0 on every node of `tape` (default: the current tape)."""
    t = tape if tape is not None else tape_mod.global_tape
    for node in t.nodes:
        node.grad = np.float64(0.0)
