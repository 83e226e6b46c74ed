"""
Scalargrad: a minimal educational autograd engine over scalar values.

This package provides reverse-mode automatic differentiation, a small neural
network library built from it, and tools to visualize the computation graph.
"""

from scalargrad.engine import Op, Value
from scalargrad.errors import GraphCycle, ScalargradError, ShapeMismatch, UnsupportedExponent
from scalargrad.graph import snapshot, topological_order, trace
from scalargrad import nn
from scalargrad.utils import draw_dot

__version__ = "0.1.0"
__all__ = [
    "Value", "Op", "nn", "draw_dot", "trace", "snapshot", "topological_order",
    "ScalargradError", "ShapeMismatch", "UnsupportedExponent", "GraphCycle",
]
