"""
Property-based tests over randomly generated DAGs.

Graphs are built from a few leaves and a list of (op, i, j) instructions
where i and j pick operands among the nodes built so far, so shared
operands (fan-out) are common.
"""

import numpy as np
import pytest
from hypothesis import HealthCheck, assume, given, settings
from hypothesis import strategies as st

from scalar_aad import OpKind, use_tape, leaf, run_backward, order_for, add, sub, mul, div, neg, pow, exp, tanh

BINARY = {"add": add, "sub": sub, "mul": mul, "div": div}
UNARY = {"neg": neg, "exp": exp, "tanh": tanh, "pow": lambda x: pow(x, 2)}

leaf_values = st.lists(
    st.floats(min_value=-1.5, max_value=1.5, allow_nan=False, allow_infinity=False),
    min_size=1, max_size=5,
)

instructions = st.lists(
    st.tuples(
        st.sampled_from(sorted(BINARY) + sorted(UNARY)),
        st.integers(min_value=0, max_value=10_000),
        st.integers(min_value=0, max_value=10_000),
    ),
    min_size=1, max_size=30,
)

property_settings = settings(
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)


def build(values, program):
    leaves = [leaf(v, label=f"x{i}") for i, v in enumerate(values)]
    built = list(leaves)
    for name, i, j in program:
        a = built[i % len(built)]
        b = built[j % len(built)]
        if name in BINARY:
            built.append(BINARY[name](a, b))
        else:
            built.append(UNARY[name](a))
    return leaves, built[-1]


def reachable(root):
    seen, stack = {root}, [root]
    while stack:
        for o in stack.pop().operands:
            if o not in seen:
                seen.add(o)
                stack.append(o)
    return seen


class TestTopologicalOrder:

    @property_settings
    @given(leaf_values, instructions)
    def test_operands_come_first_and_nodes_appear_once(self, values, program):
        with use_tape(), np.errstate(all="ignore"):
            _, root = build(values, program)
            order = order_for(root)

        pos = {v: i for i, v in enumerate(order)}
        assert len(pos) == len(order)
        assert set(order) == reachable(root)
        assert order[-1] == root
        for v in order:
            for o in v.operands:
                assert pos[o] < pos[v]


# forward-mode reference for add/mul/tanh graphs
def tangent(root, wrt):
    dots = {}
    for v in order_for(root):
        if v.is_leaf:
            dots[v] = 1.0 if v == wrt else 0.0
        elif v.op is OpKind.ADD:
            a, b = v.operands
            dots[v] = dots[a] + dots[b]
        elif v.op is OpKind.MUL:
            a, b = v.operands
            dots[v] = dots[a] * b.value + a.value * dots[b]
        else:
            (a,) = v.operands
            dots[v] = (1.0 - v.value ** 2) * dots[a]
    return dots[root]


smooth_instructions = st.lists(
    st.tuples(
        st.sampled_from(["add", "mul", "tanh"]),
        st.integers(min_value=0, max_value=10_000),
        st.integers(min_value=0, max_value=10_000),
    ),
    min_size=1, max_size=8,
)


class TestBackwardMatchesForwardMode:

    @property_settings
    @given(leaf_values, smooth_instructions)
    def test_gradients(self, values, program):
        ops = {"add": add, "mul": mul}
        with use_tape():
            leaves = [leaf(v) for v in values]
            built = list(leaves)
            for name, i, j in program:
                a, b = built[i % len(built)], built[j % len(built)]
                built.append(tanh(a) if name == "tanh" else ops[name](a, b))
            root = built[-1]
            assume(all(abs(v.value) < 10.0 for v in built))

            run_backward(root)
            for x in leaves:
                assert x.grad == pytest.approx(tangent(root, x), rel=1e-6, abs=1e-5)

    @property_settings
    @given(st.floats(min_value=-3.0, max_value=3.0, allow_nan=False))
    def test_linearity_in_upstream(self, x0):
        with use_tape():
            x = leaf(x0)
            f = tanh(mul(x, x))
            run_backward(f)
            g1 = x.grad

        with use_tape():
            x = leaf(x0)
            f = mul(tanh(mul(x, x)), leaf(2.5))
            run_backward(f)
            g2 = x.grad

        assert g2 == pytest.approx(2.5 * g1, rel=1e-12, abs=1e-300)
