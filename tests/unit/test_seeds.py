import numpy as np
import pytest

from scalar_aad import UnsupportedOperandKind, grad, grads, grads_list, leaf
from scalar_aad.core import tape as tape_mod
from scalar_aad.core.seeds import value


def test_grad_cubic():
    assert grad(lambda x: x * x * x, 2.0) == 12.0


def test_grad_tanh():
    g = grad(lambda x: x.tanh(), 0.7)
    assert g == pytest.approx(1.0 - np.tanh(0.7) ** 2)


def test_grads_dict_keeps_key_order():
    f = lambda v: v["x"] * v["y"] + v["z"].exp()
    g = grads(f, {"z": 0.0, "x": 2.0, "y": -3.0})
    assert list(g) == ["z", "x", "y"]
    assert g["x"] == -3.0
    assert g["y"] == 2.0
    assert g["z"] == 1.0


def test_grads_list():
    f = lambda xs: xs[0] * xs[0] + xs[1] * leaf(3.0)
    assert grads_list(f, [2.0, 4.0]) == [4.0, 3.0]


def test_constant_function_has_zero_gradient():
    assert grad(lambda x: 42.0, 1.5) == 0.0
    assert grads_list(lambda xs: 1, [1.0, 2.0]) == [0.0, 0.0]


def test_bad_return_type():
    with pytest.raises(UnsupportedOperandKind):
        grad(lambda x: "nope", 1.0)


def test_drivers_use_their_own_tape(tape):
    grad(lambda x: x * x, 3.0)
    assert tape_mod.global_tape is tape
    assert len(tape) == 0


def test_value_passthrough():
    assert value(leaf(2.5)) == 2.5
    assert value(7) == 7
