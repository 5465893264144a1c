"""
Neuron / Layer / MLP built from scalar Values.

Parameters are plain leaves. Since leaf values never change, a parameter
update re-creates the leaf with its new value (see `Module.assign` and
`Module.rebind`); the trainer does this once per step on a fresh tape.
"""

from functools import reduce
from typing import List, Optional, Sequence, Union

import numpy as np

from ..core.engine import zero_grads
from ..core.var import Value, leaf
from ..ops import add, mul, tanh


def as_values(xs: Sequence) -> List[Value]:
    """Explicit conversion at the layer boundary: numbers become leaves."""
    return [x if isinstance(x, Value) else leaf(x) for x in xs]


class Module:
    """Base class: anything that owns parameters."""

    def parameters(self) -> List[Value]:
        return []

    def assign(self, values: Sequence[Value]) -> None:
        """Replace the parameters, in `parameters()` order."""
        raise NotImplementedError

    def zero_grad(self) -> None:
        """Reset the gradient of every parameter to 0.0."""
        for p in self.parameters():
            zero_grads(p)

    def rebind(self) -> None:
        """Re-create every parameter as a fresh leaf on the current tape."""
        if not self.parameters():
            return
        self.assign([leaf(p.value, label=p.label) for p in self.parameters()])


class Neuron(Module):
    """tanh(sum(w_i * x_i) + b)"""

    def __init__(self, nin: int, rng: Optional[np.random.Generator] = None):
        rng = rng if rng is not None else np.random.default_rng()
        self.nin = nin
        self.w = [leaf(rng.uniform(-1.0, 1.0), label=f"w{i}") for i in range(nin)]
        self.b = leaf(rng.uniform(-1.0, 1.0), label="b")

    def __call__(self, x: Sequence) -> Value:
        x = as_values(x)
        if len(x) != self.nin:
            raise ValueError(f"Neuron expects {self.nin} inputs, got {len(x)}")
        act = reduce(add, [mul(wi, xi) for wi, xi in zip(self.w, x)])
        out = tanh(add(act, self.b))
        out.label = "out"
        return out

    def parameters(self) -> List[Value]:
        return self.w + [self.b]

    def assign(self, values: Sequence[Value]) -> None:
        values = list(values)
        if len(values) != self.nin + 1:
            raise ValueError(f"Neuron has {self.nin + 1} parameters, got {len(values)}")
        self.w = values[:self.nin]
        self.b = values[self.nin]

    def __repr__(self):
        return f"Neuron({self.nin})"


class Layer(Module):

    def __init__(self, nin: int, nout: int, rng: Optional[np.random.Generator] = None):
        self.neurons = [Neuron(nin, rng=rng) for _ in range(nout)]

    def __call__(self, x: Sequence) -> Union[Value, List[Value]]:
        x = as_values(x)
        outs = []
        for i, n in enumerate(self.neurons):
            o = n(x)
            o.label = f"n{i}_out"
            outs.append(o)
        return outs[0] if len(outs) == 1 else outs

    def parameters(self) -> List[Value]:
        return [p for n in self.neurons for p in n.parameters()]

    def assign(self, values: Sequence[Value]) -> None:
        values = list(values)
        start = 0
        for n in self.neurons:
            size = n.nin + 1
            n.assign(values[start:start + size])
            start += size
        if start != len(values):
            raise ValueError(f"Layer has {start} parameters, got {len(values)}")

    def __repr__(self):
        return f"Layer of [{', '.join(str(n) for n in self.neurons)}]"


class MLP(Module):
    """
    Multi-layer perceptron of tanh neurons.

    Example:
        >>> net = MLP(3, [4, 4, 1])
        >>> y = net([2.0, 3.0, -1.0])    # a single Value
    """

    def __init__(self, nin: int, nouts: Sequence[int], seed: Optional[int] = None):
        rng = np.random.default_rng(seed)
        sz = [nin] + list(nouts)
        self.layers = [Layer(sz[i], sz[i + 1], rng=rng) for i in range(len(nouts))]

    def __call__(self, x: Sequence) -> Union[Value, List[Value]]:
        out = list(x)
        for layer in self.layers:
            out = layer(out if isinstance(out, list) else [out])

        if isinstance(out, list):
            for i, o in enumerate(out):
                o.label = f"final_output_{i}"
        else:
            out.label = "final_output"
        return out

    def parameters(self) -> List[Value]:
        return [p for layer in self.layers for p in layer.parameters()]

    def assign(self, values: Sequence[Value]) -> None:
        values = list(values)
        start = 0
        for layer in self.layers:
            size = len(layer.parameters())
            layer.assign(values[start:start + size])
            start += size
        if start != len(values):
            raise ValueError(f"MLP has {start} parameters, got {len(values)}")

    def __repr__(self):
        return f"MLP of [{', '.join(str(layer) for layer in self.layers)}]"
