import pytest

from scalargrad import Value
from scalargrad.examples import complex_expression
from scalargrad.nn import MLP
from scalargrad.utils import (
    _weight_color,
    animation_schedule,
    draw_dot,
    draw_network,
    graph_levels,
    layout_graph,
    node_kind,
)


def labels(levels):
    return [[v.label for v in level] for level in levels]


def test_graph_levels():
    ex = complex_expression()
    assert labels(graph_levels(ex['L'])) == [['a', 'b', 'c', 'f'], ['e'], ['d'], ['L']]


def test_graph_levels_single_leaf():
    x = Value(1.0, label='x')
    assert labels(graph_levels(x)) == [['x']]


def test_layout_graph():
    ex = complex_expression()
    positions = layout_graph(ex['L'], width=800, height=400)

    assert len(positions) == 7
    assert positions[ex['a'].id] == (160.0, 80.0)
    assert positions[ex['f'].id] == (160.0, 320.0)
    assert positions[ex['L'].id] == (640.0, 200.0)


def test_node_kind():
    ex = complex_expression()
    L = ex['L']
    assert node_kind(ex['a'], L) == 'input'
    assert node_kind(ex['d'], L) == 'intermediate'
    assert node_kind(L, L) == 'output'


def test_animation_schedule_forward_and_backward():
    ex = complex_expression()

    forward = animation_schedule(ex['L'])
    assert [f.node.label for f in forward] == ['a', 'b', 'c', 'f', 'e', 'd', 'L']
    assert [f.delay_ms for f in forward][:3] == [0, 500, 1000]
    assert all(f.kind == 'forward' for f in forward)

    backward = animation_schedule(ex['L'], direction='backward')
    assert [f.node.label for f in backward][:3] == ['L', 'd', 'e']
    assert backward[1].delay_ms == 800

    custom = animation_schedule(ex['L'], direction='backward', step_ms=100)
    assert custom[-1].delay_ms == 600


def test_animation_schedule_rejects_unknown_direction():
    with pytest.raises(ValueError):
        animation_schedule(Value(1.0), direction='sideways')


def test_draw_dot_shows_data_and_gradients():
    ex = complex_expression()
    ex['L'].backward()
    dot = draw_dot(ex['L'])
    src = dot.source

    assert 'rankdir=LR' in src
    assert 'data -8.0000' in src
    assert 'grad 1.0000' in src
    assert 'grad 6.0000' in src
    # one record per value, one op node per interior value
    assert src.count('shape=record') == 7
    assert src.count('->') == 3 + 6


def test_draw_dot_rejects_bad_rankdir():
    with pytest.raises(ValueError):
        draw_dot(Value(1.0), rankdir='RL')


def test_weight_color():
    assert _weight_color(0.5) == '#3498db80'
    assert _weight_color(-2.0) == '#e74c3cff'


def test_draw_network():
    mlp = MLP(2, [3, 1], seed=0)
    src = draw_network(mlp).source

    for name in ('input_0', 'input_1', 'layer_0_neuron_2', 'layer_1_neuron_0'):
        assert name in src
    assert src.count('->') == 2 * 3 + 3 * 1
    assert 'b: ' in src
