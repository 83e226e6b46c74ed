"""
Neural network building blocks for scalargrad.

This module provides classes to build neural networks out of scalar Values,
one neuron at a time.
"""

import numpy as np

from scalargrad.engine import Value
from scalargrad.errors import ShapeMismatch


def _make_rng(rng=None, seed=None):
    """Return an explicit random source; never the global numpy state."""
    if rng is not None:
        return rng
    return np.random.default_rng(seed)


class Module:
    """
    Base class for all neural network modules.

    Provides common functionality for managing parameters and gradients.
    """

    def zero_grad(self):
        """
        Reset all gradients to zero.

        Call this before each backward pass to avoid accumulating gradients
        from multiple backward passes.
        """
        for p in self.parameters():
            p.reset_grad()

    def step(self, learning_rate=0.01):
        """Gradient descent update: move every parameter against its gradient."""
        for p in self.parameters():
            p.data = p.data - learning_rate * p.grad

    def parameters(self):
        """
        Return a list of all trainable parameters (weights and biases).

        Override this in subclasses to return actual parameters.
        """
        return []

    def __call__(self, x):
        return self.forward(x)


class Neuron(Module):
    """
    A single neuron: activation(w · x + b).

    Weights and bias are drawn uniformly from [-1, 1).

    Args:
        nin: Number of inputs
        nonlin: If True, apply tanh activation (default: True)
        rng: numpy Generator used to initialize parameters
        name: Optional prefix for parameter labels

    Example:
        >>> n = Neuron(2, rng=np.random.default_rng(0))
        >>> y = n([1.0, -2.0])  # a single Value in (-1, 1)
    """

    def __init__(self, nin, nonlin=True, rng=None, name=""):
        rng = _make_rng(rng)
        self.nin = nin
        self.nonlin = nonlin
        self.w = [Value(rng.uniform(-1, 1), label=f"{name}w{i}") for i in range(nin)]
        self.b = Value(rng.uniform(-1, 1), label=f"{name}b")

    def forward(self, x):
        if len(x) != self.nin:
            raise ShapeMismatch(self.nin, len(x))

        # Weighted sum: b + w1*x1 + w2*x2 + ...
        act = self.b
        for wi, xi in zip(self.w, x):
            act = act + wi * xi

        return act.tanh() if self.nonlin else act

    def parameters(self):
        return self.w + [self.b]

    @property
    def weights(self):
        return [float(w.data) for w in self.w]

    @property
    def bias(self):
        return float(self.b.data)

    def __repr__(self):
        return f"{'Tanh' if self.nonlin else 'Linear'}Neuron({self.nin})"


class Layer(Module):
    """
    A fully-connected layer of independent neurons sharing the same inputs.

    Returns a single Value when the layer has one neuron, a list otherwise.
    """

    def __init__(self, nin, nout, nonlin=True, rng=None, name=""):
        rng = _make_rng(rng)
        self.nin = nin
        self.nout = nout
        self.neurons = [
            Neuron(nin, nonlin=nonlin, rng=rng, name=f"{name}n{i}.")
            for i in range(nout)
        ]

    def forward(self, x):
        outs = [n(x) for n in self.neurons]
        return outs[0] if len(outs) == 1 else outs

    def parameters(self):
        return [p for n in self.neurons for p in n.parameters()]

    def weight_matrix(self):
        return [n.weights for n in self.neurons]

    def biases(self):
        return [n.bias for n in self.neurons]

    def __repr__(self):
        return f"Layer({self.nin} → {self.nout})"


class MLP(Module):
    """
    Multi-Layer Perceptron: a sequence of fully-connected tanh layers.

    Args:
        nin: Number of input features
        nouts: List of output sizes for each layer
               Example: [4, 4, 1] creates 3 layers: input→4→4→1
        seed: Optional integer seed for parameter initialization
        rng: Optional numpy Generator, takes precedence over seed

    Example:
        >>> mlp = MLP(3, [4, 4, 1], seed=42)
        >>> y = mlp([2.0, 3.0, -1.0])
        >>> mlp.zero_grad()  # Reset gradients
        >>> y.backward()  # Compute gradients
        >>> mlp.step(0.05)  # Update parameters (SGD)
    """

    def __init__(self, nin, nouts, seed=None, rng=None):
        rng = _make_rng(rng, seed)
        self.nin = nin
        self.nouts = list(nouts)

        sizes = [nin] + self.nouts
        self.layers = [
            Layer(sizes[i], sizes[i + 1], rng=rng, name=f"l{i}.")
            for i in range(len(self.nouts))
        ]

    def forward(self, x):
        """Pass input through all layers sequentially."""
        for layer in self.layers:
            x = layer(x)
            if isinstance(x, Value):
                x = [x]
        return x[0] if len(x) == 1 else x

    def parameters(self):
        """Return all trainable parameters from all layers."""
        return [p for layer in self.layers for p in layer.parameters()]

    def architecture(self):
        return {
            'input': self.nin,
            'hidden': self.nouts[:-1],
            'output': self.nouts[-1],
        }

    def network_structure(self):
        """
        Describe the network layer by layer for visualization.

        Returns:
            list of dicts with 'type' ('input', 'hidden' or 'output'), 'size'
            and 'neurons'; non-input neurons also carry their 'weights' and
            'bias'.
        """
        structure = [{
            'type': 'input',
            'size': self.nin,
            'neurons': [{'id': f"input_{i}", 'type': 'input'} for i in range(self.nin)],
        }]

        for li, layer in enumerate(self.layers):
            kind = 'output' if li == len(self.layers) - 1 else 'hidden'
            structure.append({
                'type': kind,
                'size': layer.nout,
                'neurons': [
                    {
                        'id': f"layer_{li}_neuron_{ni}",
                        'type': kind,
                        'weights': neuron.weights,
                        'bias': neuron.bias,
                    }
                    for ni, neuron in enumerate(layer.neurons)
                ],
            })

        return structure

    def __repr__(self):
        layer_str = ' → '.join(str(layer) for layer in self.layers)
        return f"MLP[\n  {layer_str}\n]"
