"""Loss functions reducing lists of predictions and targets to a single Value."""

from scalargrad.engine import Value
from scalargrad.errors import ShapeMismatch


def _pairs(predictions, targets):
    if len(predictions) != len(targets):
        raise ShapeMismatch(len(predictions), len(targets), what="targets")
    for p, t in zip(predictions, targets):
        yield (p if isinstance(p, Value) else Value(p),
               t if isinstance(t, Value) else Value(t))


def mse(predictions, targets):
    """
    Sum of squared errors: Σ (prediction - target)²

    Example:
        >>> loss = mse([Value(1.0), Value(2.0)], [0.0, 4.0])  # 1 + 4 = 5
    """
    total = Value(0.0)
    for pred, target in _pairs(predictions, targets):
        total = total + (pred - target) ** 2
    return total


def mae(predictions, targets):
    """
    Sum of absolute errors, computed as ((prediction - target)²)^0.5 so the
    whole reduction is built from differentiable engine operations.

    Note:
        The square root has no derivative at 0, so a prediction that equals
        its target exactly gets a NaN gradient (0 * inf). A gradient step
        taken from such a loss writes NaN into the parameters; prefer mse
        when exact fits are expected.
    """
    total = Value(0.0)
    for pred, target in _pairs(predictions, targets):
        total = total + ((pred - target) ** 2) ** 0.5
    return total
