# scalar_aad/core/tape.py
from __future__ import annotations
from typing import List, Optional, Tuple
from contextlib import contextmanager
from .node import Node, OpKind

class Tape:
    """
    Arena that owns every Node of a graph, in creation order.

    Operands are stored as indices into `nodes`, so a node can only refer to
    nodes recorded before it and the graph is acyclic by construction.
    Nothing is reclaimed while the tape is alive.
    """
    def __init__(self):
        self.nodes: List[Node] = []

    def __len__(self):
        return len(self.nodes)

    def reset(self):
        """Drop every node. Handles into this tape become invalid."""
        self.nodes.clear()

    def push_node(self, *, op: OpKind, value, operands: Tuple[int, ...] = (),
                  exponent=None, label: str = "") -> int:
        """
        Append a Node and return its index.
        `operands` are indices of nodes already on this tape.
        """
        n = len(self.nodes)
        for i in operands:
            if not 0 <= i < n:
                raise ValueError(f"operand index {i} is not on the tape (size {n})")
        self.nodes.append(Node(value=value, op=op, operands=tuple(operands),
                               exponent=exponent, label=label))
        return n

# Current tape for new leaves. Derived nodes go on their operands' tape.
global_tape = Tape()

@contextmanager
def use_tape(tape: Optional[Tape] = None):
    """
    Context manager to temporarily record new leaves on another tape:
        with use_tape() as t:
            x = leaf(2.0)
            y = x * x
            run_backward(y)
    """
    from . import tape as _tape_mod  # local import to avoid cycles
    prev = _tape_mod.global_tape
    try:
        _tape_mod.global_tape = tape if tape is not None else Tape()
        yield _tape_mod.global_tape
    finally:
        _tape_mod.global_tape = prev
