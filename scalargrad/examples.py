"""
Ready-made expressions and toy datasets used by demos, the visualizer and tests.
"""

from typing import Callable, List, NamedTuple

from scalargrad.engine import Value
from scalargrad.nn import MLP


# Expressions

def addition():
    a = Value(2.0, label='a')
    b = Value(-3.0, label='b')
    c = a + b
    c.label = 'c'
    return {'a': a, 'b': b, 'c': c}


def multiplication():
    a = Value(2.0, label='a')
    b = Value(-3.0, label='b')
    c = a * b
    c.label = 'c'
    return {'a': a, 'b': b, 'c': c}


def tanh():
    x = Value(0.5, label='x')
    y = x.tanh()
    y.label = 'y'
    return {'x': x, 'y': y}


def complex_expression():
    """L = (a*b + c) * f with a=2, b=-3, c=10, f=-2, so L = -8."""
    a = Value(2.0, label='a')
    b = Value(-3.0, label='b')
    c = Value(10.0, label='c')
    f = Value(-2.0, label='f')

    e = a * b
    e.label = 'e'
    d = e + c
    d.label = 'd'
    L = d * f
    L.label = 'L'

    return {'a': a, 'b': b, 'c': c, 'e': e, 'd': d, 'f': f, 'L': L}


def neuron():
    """A single tanh neuron, x1*w1 + x2*w2 + b, biased so that o ≈ 0.7071."""
    x1 = Value(2.0, label='x1')
    x2 = Value(0.0, label='x2')
    w1 = Value(-3.0, label='w1')
    w2 = Value(1.0, label='w2')
    b = Value(6.8813735870195432, label='b')

    x1w1 = x1 * w1
    x1w1.label = 'x1*w1'
    x2w2 = x2 * w2
    x2w2.label = 'x2*w2'
    x1w1x2w2 = x1w1 + x2w2
    x1w1x2w2.label = 'x1*w1 + x2*w2'
    n = x1w1x2w2 + b
    n.label = 'n'
    o = n.tanh()
    o.label = 'o'

    return {'x1': x1, 'x2': x2, 'w1': w1, 'w2': w2, 'b': b,
            'x1w1': x1w1, 'x2w2': x2w2, 'x1w1x2w2': x1w1x2w2, 'n': n, 'o': o}


EXPRESSIONS = {
    'addition': addition,
    'multiplication': multiplication,
    'tanh': tanh,
    'complex': complex_expression,
    'neuron': neuron,
}


# Datasets

class Dataset(NamedTuple):
    name: str
    inputs: List[List[float]]
    targets: List[float]
    create_model: Callable[..., MLP]


def simple_regression():
    """y = 2x"""
    return Dataset(
        'simple_regression',
        inputs=[[0.0], [1.0], [2.0], [3.0], [4.0]],
        targets=[0.0, 2.0, 4.0, 6.0, 8.0],
        create_model=lambda seed=None: MLP(1, [1], seed=seed),
    )


def xor():
    """XOR truth table"""
    return Dataset(
        'xor',
        inputs=[[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]],
        targets=[0.0, 1.0, 1.0, 0.0],
        create_model=lambda seed=None: MLP(2, [4, 1], seed=seed),
    )


def binary_classification():
    return Dataset(
        'binary_classification',
        inputs=[[2.0, 3.0], [3.0, -1.0], [0.5, 1.0], [1.0, 1.0]],
        targets=[1.0, -1.0, -1.0, 1.0],
        create_model=lambda seed=None: MLP(2, [3, 1], seed=seed),
    )


DATASETS = {
    'simple_regression': simple_regression,
    'xor': xor,
    'binary_classification': binary_classification,
}
