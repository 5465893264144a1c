# scalar_aad/draw.py
"""
Graphviz rendering of a scalar computation graph.

Each Value becomes a record node ``{ label | data | grad }``; every derived
Value also gets a small op node (``+``, ``*``, ``**2``, ``tanh`` ...) that
its operands point into.
"""
import re
from typing import List, Set, Tuple

from graphviz import Digraph

from .core.engine import order_for
from .core.var import Value


def trace(root: Value) -> Tuple[List[Value], Set[Tuple[Value, Value]]]:
    """
    Collect every node reachable from `root` and the (operand, consumer) edges.

    Edges are a set: an operand used twice by one consumer (x*x) gives a
    single edge.
    """
    nodes = order_for(root)
    edges = set()
    for v in nodes:
        for child in v.operands:
            edges.add((child, v))
    return nodes, edges


def _record_safe(label: str) -> str:
    # record labels treat | { } < > as field syntax
    return re.sub(r"[^a-zA-Z0-9_]", "", label)


def draw_dot(root: Value, format: str = "svg", rankdir: str = "LR") -> Digraph:
    """
    Build the Graphviz diagram of the graph below `root`.

    Only the DOT source is built here; `dot.render(...)` needs the Graphviz
    executables on PATH.
    """
    dot = Digraph(format=format, graph_attr={"rankdir": rankdir})

    nodes, edges = trace(root)

    for n in nodes:
        uid = f"n{n.idx}"
        label = _record_safe(n.label) or "unnamed"
        dot.node(
            name=uid,
            label="{ %s | data %.4f | grad %.4f }" % (label, n.value, n.grad),
            shape="record",
        )
        op = n.node.symbol
        if op:
            dot.node(name=uid + "_op", label=op)
            dot.edge(uid + "_op", uid)

    # operands feed the consumer's op node, not the value node itself
    for n1, n2 in sorted(edges, key=lambda e: (e[1].idx, e[0].idx)):
        dot.edge(f"n{n1.idx}", f"n{n2.idx}_op")

    return dot
