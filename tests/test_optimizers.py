import pytest

from snakers.layers import Dense, ReLU
from snakers.optimizers import SGD, optimizer_from_dict
from snakers.tensor import Tensor


def _dense_with_grads():
    layer = Dense(2, 2)
    layer.weights = Tensor([10.0, 20.0, 30.0, 40.0], [2, 2])
    layer.biases = Tensor([5.0, 6.0], [1, 2])
    layer.d_weights = Tensor([2.0, 3.0, 4.0, 5.0], [2, 2])
    layer.d_biases = Tensor([0.5, 1.5], [1, 2])
    return layer


def test_sgd_optimizer_step():
    layer = _dense_with_grads()
    SGD(0.1).step([layer])

    assert layer.weights.tolist() == pytest.approx([9.8, 19.7, 29.6, 39.5], rel=1e-6)
    assert layer.biases.tolist() == pytest.approx([4.95, 5.85], rel=1e-6)


def test_sgd_skips_non_dense_and_layers_without_gradients():
    untouched = Dense(2, 2)
    before = untouched.weights.deep_clone()
    trained = _dense_with_grads()

    SGD(0.1).step([ReLU(), untouched, trained])

    assert untouched.weights == before
    assert trained.weights.tolist() == pytest.approx([9.8, 19.7, 29.6, 39.5], rel=1e-6)


def test_sgd_round_trip_through_dict():
    data = SGD(0.25).to_dict()
    assert data == {"type": "SGD", "learning_rate": 0.25}
    assert optimizer_from_dict(data) == SGD(0.25)


def test_optimizer_from_dict_unknown_type():
    with pytest.raises(ValueError):
        optimizer_from_dict({"type": "Adam"})


def test_optimizer_from_dict_missing_rate():
    with pytest.raises(ValueError):
        optimizer_from_dict({"type": "SGD"})