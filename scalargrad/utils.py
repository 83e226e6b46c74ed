"""
Visualization utilities for scalargrad computational graphs.

This module lays out computational graphs and neural networks, plans the
forward/backward animation sequence, and renders both with Graphviz. It only
ever reads node data, gradients and provenance.
"""

from typing import NamedTuple

from graphviz import Digraph

from scalargrad.graph import trace

KIND_COLORS = {
    'input': '#2ecc71',
    'hidden': '#3498db',
    'intermediate': '#3498db',
    'output': '#e74c3c',
}

FORWARD_STEP_MS = 500
BACKWARD_STEP_MS = 800


def graph_levels(root):
    """
    Group the nodes reachable from root into levels (Kahn's algorithm).

    Level 0 holds the inputs (nodes with no operands); every other node sits
    one level after the last of its operands becomes available.

    Returns:
        list of lists of Values, inputs first, root in the last level
    """
    nodes, edges = trace(root)

    consumers = {v: [] for v in nodes}
    pending = {v: 0 for v in nodes}
    for src, dst in edges:
        consumers[src].append(dst)
        pending[dst] += 1

    levels = []
    current = sorted((v for v in nodes if pending[v] == 0), key=lambda v: v.id)
    while current:
        levels.append(current)
        ready = []
        for v in current:
            for consumer in consumers[v]:
                pending[consumer] -= 1
                if pending[consumer] == 0:
                    ready.append(consumer)
        current = sorted(ready, key=lambda v: v.id)

    return levels


def layout_graph(root, width=800, height=400):
    """
    Assign each node a canvas position, one column per level.

    Returns:
        dict: node id -> (x, y)
    """
    levels = graph_levels(root)
    level_width = width / (len(levels) + 1)

    positions = {}
    for li, level in enumerate(levels):
        level_height = height / (len(level) + 1)
        for ni, v in enumerate(level):
            positions[v.id] = (level_width * (li + 1), level_height * (ni + 1))
    return positions


def node_kind(node, root):
    """Classify a node as 'input', 'intermediate' or 'output' for styling."""
    if node.is_leaf:
        return 'input'
    if node is root:
        return 'output'
    return 'intermediate'


class Frame(NamedTuple):
    """One step of a forward or backward pass animation."""
    kind: str
    node: object
    delay_ms: int


def animation_schedule(root, direction='forward', step_ms=None):
    """
    Plan the order in which nodes light up when animating a pass.

    The forward pass walks the levels from the inputs to the root; the
    backward pass walks them in reverse so that gradients appear root first.

    Args:
        root: The Value whose graph is animated
        direction: 'forward' or 'backward'
        step_ms: Delay between consecutive frames (defaults to 500ms forward,
                 800ms backward)

    Returns:
        list of Frame
    """
    if direction not in ('forward', 'backward'):
        raise ValueError(f"direction must be 'forward' or 'backward', got {direction!r}")

    order = [v for level in graph_levels(root) for v in level]
    if direction == 'backward':
        order.reverse()
        step_ms = BACKWARD_STEP_MS if step_ms is None else step_ms
    else:
        step_ms = FORWARD_STEP_MS if step_ms is None else step_ms

    return [Frame(direction, v, i * step_ms) for i, v in enumerate(order)]


def draw_dot(root, format='svg', rankdir='LR'):
    """
    Visualize the computational graph of a Value object as a directed graph.

    Creates a Graphviz diagram showing:
    - Value nodes with their label, data and gradient
    - Operation nodes (+, *, tanh, etc.)
    - Edges showing data flow through the computation

    Args:
        root: A Value object (typically the loss) to visualize from
        format: Output format ('svg', 'png', 'pdf', etc.)
        rankdir: Graph direction - 'LR' (left-right) or 'TB' (top-bottom)

    Returns:
        Digraph: A graphviz Digraph object that can be rendered or displayed

    Example:
        >>> x = Value(2.0, label='x')
        >>> y = Value(-3.0, label='y')
        >>> z = x * y
        >>> z.backward()
        >>> draw_dot(z).render('computation_graph')  # Saves as SVG

    Note:
        Rendering requires the Graphviz system package; building the Digraph
        and reading its source does not.
    """
    if rankdir not in ('LR', 'TB'):
        raise ValueError("rankdir must be 'LR' (left-right) or 'TB' (top-bottom)")

    nodes, edges = trace(root)
    dot = Digraph(format=format, graph_attr={'rankdir': rankdir})

    for n in sorted(nodes, key=lambda v: v.id):
        uid = str(n.id)
        label = f'{{ {n.label} | data {n.data:.4f} | grad {n.grad:.4f} }}'
        dot.node(name=uid, label=label, shape='record',
                 color=KIND_COLORS[node_kind(n, root)])

        # If this node was created by an operation, add an operation node
        if not n.is_leaf:
            dot.node(name=uid + n.op, label=n.op)
            dot.edge(uid + n.op, uid)

    for n1, n2 in sorted(edges, key=lambda e: (e[1].id, e[0].id)):
        # Connect operand (n1) to the operation that created consumer (n2)
        dot.edge(str(n1.id), str(n2.id) + n2.op)

    return dot


def _weight_color(weight):
    """Blue for positive weights, red for negative, opacity min(|w|, 1)."""
    alpha = round(min(abs(weight), 1.0) * 255)
    rgb = '3498db' if weight > 0 else 'e74c3c'
    return f'#{rgb}{alpha:02x}'


def draw_network(model, format='svg'):
    """
    Draw an MLP as layers of neurons joined by weight-coloured edges.

    Args:
        model: An MLP (anything exposing network_structure())
        format: Output format ('svg', 'png', 'pdf', etc.)

    Returns:
        Digraph
    """
    structure = model.network_structure()
    dot = Digraph(format=format, graph_attr={'rankdir': 'LR', 'splines': 'line'})

    for layer in structure:
        for neuron in layer['neurons']:
            label = neuron['id']
            if 'bias' in neuron:
                label += f"\nb: {neuron['bias']:.2f}"
            dot.node(name=neuron['id'], label=label, shape='circle', style='filled',
                     fillcolor=KIND_COLORS[layer['type']])

    for prev, layer in zip(structure, structure[1:]):
        for target in layer['neurons']:
            for source, weight in zip(prev['neurons'], target['weights']):
                dot.edge(source['id'], target['id'], color=_weight_color(weight))

    return dot
