"""
Graph traversal for scalargrad computational graphs.

All traversals here use an explicit stack, so the depth of a graph is bounded
by memory and never by the interpreter's recursion limit. None of them mutate
the graph except zero_grad(), which only resets gradients.
"""

from typing import NamedTuple, Tuple

from scalargrad.errors import GraphCycle


def topological_order(root):
    """
    Order every node reachable from root so that each node comes after all
    of its operands (post-order depth-first search, leaves first).

    Shared sub-expressions appear exactly once. Walking the result in
    reverse visits each node only after all of its consumers.

    Args:
        root: A Value object, typically the loss

    Returns:
        list: reachable Values, operands before consumers, root last

    Raises:
        GraphCycle: if some node (transitively) depends on itself
    """
    topo = []
    visited = {root}
    on_path = {root}
    stack = [(root, iter(root.operands))]

    while stack:
        node, operands = stack[-1]
        for child in operands:
            if child in on_path:
                raise GraphCycle(child)
            if child not in visited:
                visited.add(child)
                on_path.add(child)
                stack.append((child, iter(child.operands)))
                break
        else:
            stack.pop()
            on_path.discard(node)
            topo.append(node)

    return topo


def trace(root):
    """
    Trace the computational graph starting from a root Value node.

    Args:
        root: A Value object representing the output of a computation

    Returns:
        tuple: (nodes, edges) where:
            - nodes: set of all Value objects in the graph
            - edges: set of (operand, consumer) tuples

    Example:
        >>> x = Value(2.0)
        >>> y = Value(3.0)
        >>> z = x * y + x
        >>> nodes, edges = trace(z)
        >>> len(nodes)  # x, y, x*y and z
        4
    """
    nodes, edges = {root}, set()
    stack = [root]
    while stack:
        v = stack.pop()
        for child in v.operands:
            edges.add((child, v))
            if child not in nodes:
                nodes.add(child)
                stack.append(child)
    return nodes, edges


def zero_grad(root):
    """Reset the gradient of every node reachable from root."""
    nodes, _ = trace(root)
    for v in nodes:
        v.reset_grad()


class NodeView(NamedTuple):
    """Read-only copy of one node, addressed by its position in a GraphSnapshot."""

    position: int
    id: int
    label: str
    data: float
    grad: float
    op: str
    operands: Tuple[int, ...]

    @property
    def is_leaf(self):
        return not self.operands


class GraphSnapshot(NamedTuple):
    """
    Immutable, index-addressed view of a computational graph.

    nodes are in topological order (operands first, root last) and edges are
    (operand_index, consumer_index) pairs, one per distinct pair.
    """

    nodes: Tuple[NodeView, ...]
    edges: Tuple[Tuple[int, int], ...]

    @property
    def root(self):
        return self.nodes[-1]

    def consumers(self, index):
        """Indices of the nodes that take node `index` as an operand."""
        return tuple(dst for src, dst in self.edges if src == index)


def snapshot(root):
    """Capture the graph reachable from root as a GraphSnapshot."""
    topo = topological_order(root)
    index = {v: i for i, v in enumerate(topo)}

    nodes = []
    edges = []
    for i, v in enumerate(topo):
        operands = tuple(index[child] for child in v.operands)
        nodes.append(NodeView(i, v.id, v.label, float(v.data), float(v.grad), v.op, operands))
        for j in dict.fromkeys(operands):
            edges.append((j, i))

    return GraphSnapshot(tuple(nodes), tuple(edges))
