import pytest

from snakers.layers import Dense, ReLU, Softmax, layer_from_dict
from snakers.tensor import Tensor


def test_dense_forward():
    inputs = Tensor([1.0, 2.0], [1, 2])
    layer = Dense(2, 2)
    layer.weights = Tensor([10.0, 20.0, 30.0, 40.0], [2, 2])
    layer.biases = Tensor([1.0, 2.0], [1, 2])

    output = layer.forward(inputs)

    assert output.shape == (1, 2)
    assert output.tolist() == pytest.approx([71.0, 102.0], abs=1e-6)


def test_dense_forward_batch_adds_bias_to_every_row():
    layer = Dense(2, 2)
    layer.weights = Tensor([1.0, 0.0, 0.0, 1.0], [2, 2])
    layer.biases = Tensor([1.0, 2.0], [1, 2])

    output = layer.forward(Tensor([1.0, 2.0, 3.0, 4.0], [2, 2]))

    assert output.shape == (2, 2)
    assert output.tolist() == pytest.approx([2.0, 4.0, 4.0, 6.0])


def test_dense_backward():
    inputs = Tensor([1.0, 2.0], [1, 2])
    d_output = Tensor([5.0, 8.0], [1, 2])
    layer = Dense(2, 2)
    layer.weights = Tensor([10.0, 20.0, 30.0, 40.0], [2, 2])

    layer.forward(inputs)
    d_input = layer.backward(d_output)

    assert d_input.shape == (1, 2)
    assert d_input.tolist() == pytest.approx([210.0, 470.0], abs=1e-6)
    assert layer.d_weights.tolist() == pytest.approx([5.0, 8.0, 10.0, 16.0], abs=1e-6)
    assert layer.d_biases.tolist() == pytest.approx([5.0, 8.0], abs=1e-6)


def test_dense_initial_shapes():
    layer = Dense(3, 4)
    assert layer.weights.shape == (3, 4)
    assert layer.biases == Tensor.zeros([1, 4])
    assert layer.d_weights is None and layer.d_biases is None


def test_dense_backward_before_forward_raises():
    layer = Dense(2, 2)
    with pytest.raises(RuntimeError):
        layer.backward(Tensor([1.0, 1.0], [1, 2]))


def test_relu_forward():
    inputs = Tensor([-10.0, -0.5, 0.0, 0.5, 10.0], [1, 5])
    output = ReLU().forward(inputs)
    assert output.tolist() == pytest.approx([0.0, 0.0, 0.0, 0.5, 10.0], abs=1e-6)


def test_relu_backward():
    inputs = Tensor([-10.0, -0.5, 0.0, 0.5, 10.0], [1, 5])
    d_output = Tensor([1.0] * 5, [1, 5])
    layer = ReLU()

    layer.forward(inputs)
    d_input = layer.backward(d_output)

    assert d_input.tolist() == pytest.approx([0.0, 0.0, 0.0, 1.0, 1.0], abs=1e-6)


def test_relu_backward_before_forward_raises():
    with pytest.raises(RuntimeError):
        ReLU().backward(Tensor([1.0], [1, 1]))


def test_softmax_forward():
    output = Softmax().forward(Tensor([0.0, 1.0, 2.0], [1, 3]))
    values = output.tolist()

    assert all(0.0 <= v <= 1.0 for v in values)
    assert sum(values) == pytest.approx(1.0, abs=1e-6)
    assert values == pytest.approx([0.09003057, 0.24472847, 0.66524094], abs=1e-6)


def test_softmax_rows_are_independent():
    output = Softmax().forward(Tensor([0.0, 0.0, 1000.0, 1000.0], [2, 2]))
    assert output.tolist() == pytest.approx([0.5, 0.5, 0.5, 0.5])


def test_softmax_backward_passes_gradient_through():
    layer = Softmax()
    layer.forward(Tensor([0.0, 1.0], [1, 2]))
    grad = Tensor([0.25, -0.75], [1, 2])
    assert layer.backward(grad) == grad


def test_softmax_backward_before_forward_raises():
    with pytest.raises(RuntimeError):
        Softmax().backward(Tensor([1.0], [1, 1]))


def test_dense_round_trip_through_dict():
    layer = Dense(2, 3)
    layer.biases = Tensor([0.5, -1.0, 2.0], [1, 3])

    restored = layer_from_dict(layer.to_dict())

    assert isinstance(restored, Dense)
    assert restored.weights == layer.weights
    assert restored.biases == layer.biases


@pytest.mark.parametrize("cls", [ReLU, Softmax])
def test_stateless_layers_round_trip(cls):
    data = cls().to_dict()
    assert data == {"type": cls.__name__}
    assert isinstance(layer_from_dict(data), cls)


def test_layer_from_dict_unknown_type():
    with pytest.raises(ValueError):
        layer_from_dict({"type": "Conv2D"})


def test_layer_from_dict_missing_type():
    with pytest.raises(ValueError):
        layer_from_dict({})