# scalar_aad/__init__.py
# Reverse-mode automatic differentiation over scalar values

from .core.errors import ScalarAADError, UnsupportedOperandKind
from .core.node import OpKind
from .core.var import Value, leaf
from .core.tape import Tape, use_tape
from .core.engine import (
    order_for,
    run_backward,
    zero_grads,
    zero_adjoints,
)
from .core.seeds import grad, grads, grads_list
from .ops import add, sub, mul, div, neg, pow, exp, tanh

__all__ = [
    # Core
    'Value',
    'leaf',
    'OpKind',
    'Tape',
    'use_tape',
    # Errors
    'ScalarAADError',
    'UnsupportedOperandKind',
    # Engine
    'order_for',
    'run_backward',
    'zero_grads',
    'zero_adjoints',
    # Drivers
    'grad',
    'grads',
    'grads_list',
    # Operations
    'add', 'sub', 'mul', 'div', 'neg', 'pow', 'exp', 'tanh',
]
