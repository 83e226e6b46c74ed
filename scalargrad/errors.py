"""
Exceptions raised by scalargrad.

Every error is raised synchronously at the point where it is detected; no
operation leaves a half-built node behind.
"""


class ScalargradError(Exception):
    """Base class for all scalargrad errors."""


class ShapeMismatch(ScalargradError, ValueError):
    """Raised when the number of inputs does not match what a module expects."""

    def __init__(self, expected, got, what="inputs"):
        self.expected = expected
        self.got = got
        super().__init__(f"Expected {expected} {what}, got {got}")


class UnsupportedExponent(ScalargradError, TypeError):
    """Raised when ``**`` is given anything other than a real constant exponent."""

    def __init__(self, exponent):
        self.exponent = exponent
        super().__init__(
            f"Only supporting int/float powers, got {type(exponent).__name__}"
        )


class GraphCycle(ScalargradError, RuntimeError):
    """Raised when a node (transitively) depends on itself."""

    def __init__(self, node):
        self.node = node
        super().__init__(f"Computation graph contains a cycle through {node!r}")
