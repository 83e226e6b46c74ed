import itertools
import logging
import numbers
from enum import Enum

import numpy as np

from scalargrad.errors import UnsupportedExponent
from scalargrad.graph import topological_order, zero_grad

logger = logging.getLogger(__name__)

# Stable handles for visualization; never reused within a process.
_ids = itertools.count()


class Op(Enum):
    """Tag identifying which backward rule produced a node."""

    NONE = ''
    ADD = '+'
    MUL = '*'
    POW = '**'
    RELU = 'ReLU'
    TANH = 'tanh'
    EXP = 'exp'


class Value:
    """
    Wraps a scalar and tracks operations for automatic differentiation.

    The Value class is the core of the autograd engine. It stores a float64
    and its gradient, and builds a computational graph by recording the
    operands and the operation that produced each new Value.

    Example:
        >>> x = Value(2.0)
        >>> y = Value(3.0)
        >>> z = x * y + x
        >>> z.backward()  # Compute gradients
        >>> print(x.grad)  # dz/dx = y + 1 = 4.0
    """

    def __init__(self, data, _children=(), _op=Op.NONE, label=""):
        """
        Initialize a Value object.

        Args:
            data: The numerical data (any real number)
            _children: Operands this Value was computed from (internal use for autograd)
            _op: Op tag of the operation that created this Value (internal)
            label: Optional label for debugging and visualization
        """
        if isinstance(data, Value) or not isinstance(data, numbers.Real):
            raise TypeError(f"Value data must be a real number, got {type(data).__name__}")

        _children = tuple(_children)
        _op = Op(_op)
        if (_op is Op.NONE) != (not _children):
            raise ValueError("leaf nodes carry no operation and interior nodes carry one")

        self._data = np.float64(data)

        # Gradient of the backward root with respect to this Value
        self.grad = 0.0

        self.label = label
        self.id = next(_ids)

        # Internal variables for building the computational graph
        self._prev = _children    # Ordered operands
        self._op = _op            # Operation that created this node
        self._exponent = None     # Constant exponent, only set for Op.POW

    @property
    def data(self):
        """The forward value. Only leaf nodes (inputs and parameters) may be reassigned."""
        return self._data

    @data.setter
    def data(self, value):
        if self._prev:
            raise AttributeError(f"can't set data on a node produced by '{self.op}'")
        self._data = np.float64(value)

    @property
    def op(self):
        """Human readable operation label, e.g. '+', '**2', 'tanh'."""
        if self._op is Op.POW:
            return f'**{self._exponent}'
        return self._op.value

    @property
    def is_leaf(self):
        return not self._prev

    @property
    def operands(self):
        """The Values this one was computed from, in operand order (empty for leaves)."""
        return self._prev

    @property
    def tag(self):
        """The Op tag selecting this node's backward rule."""
        return self._op

    def __add__(self, other):
        """
        Addition operation: supports Value + Value and Value + number.

        Example:
            >>> a = Value(2.0)
            >>> b = Value(-3.0)
            >>> c = a + b  # c.data = -1.0
        """
        other = _as_value(other)
        if other is None:
            return NotImplemented
        return Value(self.data + other.data, (self, other), Op.ADD)

    def __mul__(self, other):
        """
        Multiplication operation.

        Example:
            >>> a = Value(3.0)
            >>> b = Value(4.0)
            >>> c = a * b  # c.data = 12.0
        """
        other = _as_value(other)
        if other is None:
            return NotImplemented
        return Value(self.data * other.data, (self, other), Op.MUL)

    def __pow__(self, other):
        """
        Power operation: raises Value to a constant real power.

        Example:
            >>> x = Value(3.0)
            >>> y = x ** 2  # y.data = 9.0

        Raises:
            UnsupportedExponent: if the exponent is not a real number
        """
        if isinstance(other, Value) or not isinstance(other, numbers.Real):
            raise UnsupportedExponent(other)

        out = Value(self.data ** other, (self,), Op.POW)
        out._exponent = other
        return out

    def relu(self):
        """ReLU (Rectified Linear Unit) activation: max(0, x)"""
        return Value(np.maximum(0.0, self.data), (self,), Op.RELU)

    def tanh(self):
        """
        Hyperbolic tangent activation, squashing the input to (-1, 1).

        Example:
            >>> x = Value(0.5)
            >>> y = x.tanh()  # y.data ≈ 0.4621
        """
        return Value(np.tanh(self.data), (self,), Op.TANH)

    def exp(self):
        """Exponential: e^x"""
        return Value(np.exp(self.data), (self,), Op.EXP)

    def backward(self):
        """
        Perform backpropagation: compute gradients for all Values in the graph.

        Traverses the computational graph in reverse topological order and
        applies the chain rule, so every reachable Value receives
        d(self)/d(value). The gradients of one pass are added onto whatever
        the nodes already hold: call zero_grad() first for fresh gradients.
        Running backward twice without zeroing doubles every gradient.

        Example:
            >>> x = Value(2.0)
            >>> y = x * 3 + 1
            >>> y.backward()
            >>> print(x.grad)  # dy/dx = 3.0
        """
        topo = topological_order(self)

        # Run this pass on fresh gradients, then add the previous totals back
        totals = [v.grad for v in topo]
        for v in topo:
            v.grad = 0.0

        try:
            # Initialize gradient of output to 1 (dL/dL = 1)
            self.grad = 1.0

            # Traverse graph in reverse: apply chain rule to compute all gradients
            for v in reversed(topo):
                _apply_backward_rule(v)
        except BaseException:
            # A failed pass leaves every gradient as it was before the call
            for v, total in zip(topo, totals):
                v.grad = total
            raise

        for v, total in zip(topo, totals):
            v.grad += total

        logger.debug("backward from %r visited %d nodes", self, len(topo))

    def reset_grad(self):
        """Reset this node's own gradient to zero."""
        self.grad = 0.0

    def zero_grad(self):
        """Reset the gradient of every Value reachable from this one."""
        zero_grad(self)

    # Reverse and derived operations (use the basic operations defined above)

    def __neg__(self):
        """Negation: -x = x * -1"""
        return self * -1

    def __radd__(self, other):
        """Right addition: other + self (when other is not a Value)"""
        return self + other

    def __sub__(self, other):
        """Subtraction: a - b = a + (-b)"""
        other = _as_value(other)
        if other is None:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other):
        """Right subtraction: other - self"""
        other = _as_value(other)
        if other is None:
            return NotImplemented
        return other + (-self)

    def __rmul__(self, other):
        """Right multiplication: other * self (when other is not a Value)"""
        return self * other

    def __truediv__(self, other):
        """Division: a / b = a * b^(-1)"""
        other = _as_value(other)
        if other is None:
            return NotImplemented
        return self * other ** -1

    def __rtruediv__(self, other):
        """Right division: other / self"""
        other = _as_value(other)
        if other is None:
            return NotImplemented
        return other * self ** -1

    def __repr__(self):
        """Return a readable string representation of the Value."""
        label_str = f"'{self.label}' " if self.label else ""
        op_str = f" from {self.op}" if self._op is not Op.NONE else ""
        return f"Value({label_str}data={self.data:.4f}, grad={self.grad:.4f}{op_str})"


def _as_value(other):
    """Promote a raw number to a leaf Value; None for anything else."""
    if isinstance(other, Value):
        return other
    if isinstance(other, numbers.Real):
        return Value(other)
    return None


# Backward rules, one per Op tag. Each adds the node's gradient share onto
# its operands; gradients are only ever accumulated.

def _add_backward(out):
    # d(a+b)/da = 1, d(a+b)/db = 1
    a, b = out._prev
    a.grad += out.grad
    b.grad += out.grad


def _mul_backward(out):
    # d(a*b)/da = b, d(a*b)/db = a
    a, b = out._prev
    a.grad += b.data * out.grad
    b.grad += a.data * out.grad


def _pow_backward(out):
    # d(x^n)/dx = n * x^(n-1)
    (a,) = out._prev
    p = out._exponent
    a.grad += p * a.data ** (p - 1) * out.grad


def _relu_backward(out):
    (a,) = out._prev
    a.grad += (1.0 if out.data > 0 else 0.0) * out.grad


def _tanh_backward(out):
    # d(tanh(x))/dx = 1 - tanh(x)^2
    (a,) = out._prev
    a.grad += (1 - out.data ** 2) * out.grad


def _exp_backward(out):
    (a,) = out._prev
    a.grad += out.data * out.grad


_BACKWARD_RULES = {
    Op.ADD: _add_backward,
    Op.MUL: _mul_backward,
    Op.POW: _pow_backward,
    Op.RELU: _relu_backward,
    Op.TANH: _tanh_backward,
    Op.EXP: _exp_backward,
}


def _apply_backward_rule(node):
    """Distribute node.grad onto its operands; leaves have nothing to do."""
    rule = _BACKWARD_RULES.get(node._op)
    if rule is not None:
        rule(node)
