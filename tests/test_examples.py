import math

import pytest

from scalargrad.examples import DATASETS, EXPRESSIONS, neuron
from scalargrad.nn import MLP


@pytest.mark.parametrize("name", sorted(EXPRESSIONS))
def test_expressions_backpropagate(name):
    values = EXPRESSIONS[name]()
    root = list(values.values())[-1]
    root.backward()
    assert root.grad == 1.0


def test_neuron_example():
    ex = neuron()
    assert ex['o'].data == pytest.approx(math.sqrt(0.5), abs=1e-4)

    ex['o'].backward()
    assert ex['n'].grad == pytest.approx(0.5, abs=1e-4)
    assert ex['w1'].grad == pytest.approx(1.0, abs=1e-4)
    assert ex['x1'].grad == pytest.approx(-1.5, abs=1e-4)
    assert ex['x2'].grad == pytest.approx(0.5, abs=1e-4)
    assert ex['w2'].grad == 0.0


@pytest.mark.parametrize("name", sorted(DATASETS))
def test_datasets_fit_their_models(name):
    data = DATASETS[name]()
    model = data.create_model(seed=0)
    assert isinstance(model, MLP)
    assert len(data.inputs) == len(data.targets)
    assert all(len(x) == model.nin for x in data.inputs)
