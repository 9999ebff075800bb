import math

import pytest

from snakers.mnist import NUM_CLASSES, accuracy, load_mnist, main
from snakers.tensor import Tensor


def write_csv(path, rows):
    path.write_text("\n".join(",".join(row) for row in rows) + "\n", encoding="utf-8")
    return path


def test_load_mnist_shapes_and_one_hot(tmp_path):
    path = write_csv(
        tmp_path / "data.csv",
        [["3", "0", "255", "51"], ["7", "255", "0", "0"]],
    )
    x, y = load_mnist(path)
    assert x.shape == (2, 3)
    assert y.shape == (2, NUM_CLASSES)
    labels = y.tolist()
    assert labels[3] == 1.0
    assert labels[NUM_CLASSES + 7] == 1.0
    assert sum(labels) == 2.0
    values = x.tolist()
    assert values[0] == 0.0
    assert values[1] == 1.0
    assert all(0.0 <= v <= 1.0 for v in values)


def test_load_mnist_unparsable_pixel_is_zero(tmp_path):
    path = write_csv(tmp_path / "data.csv", [["1", "abc", "255"]])
    x, _ = load_mnist(path)
    assert x.tolist()[0] == 0.0
    assert x.tolist()[1] == 1.0


def test_load_mnist_bad_label(tmp_path):
    path = write_csv(tmp_path / "data.csv", [["x", "1", "2"]])
    with pytest.raises(ValueError):
        load_mnist(path)


def test_load_mnist_label_out_of_range(tmp_path):
    path = write_csv(tmp_path / "data.csv", [["10", "1", "2"]])
    with pytest.raises(ValueError):
        load_mnist(path)


def test_load_mnist_empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ValueError):
        load_mnist(path)


def test_accuracy_perfect_and_wrong():
    targets = Tensor([1.0, 0.0, 0.0, 1.0], (2, 2))
    assert accuracy(targets, targets) == 1.0
    flipped = Tensor([0.0, 1.0, 1.0, 0.0], (2, 2))
    assert accuracy(flipped, targets) == 0.0


def test_accuracy_shape_mismatch():
    with pytest.raises(ValueError):
        accuracy(Tensor.zeros((1, 2)), Tensor.zeros((2, 2)))


def test_accuracy_empty_is_nan():
    result = accuracy(Tensor.zeros((0, 3)), Tensor.zeros((0, 3)))
    assert math.isnan(result)
    assert str(result) == "nan"


def test_main_end_to_end(tmp_path, capsys):
    rows = [[str(i % NUM_CLASSES), "0", "128", "255", "64"] for i in range(12)]
    train = write_csv(tmp_path / "train.csv", rows)
    test = write_csv(tmp_path / "test.csv", rows[:4])
    code = main(["--train", str(train), "--test", str(test), "--epochs", "1", "--batch-size", "4"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Training samples: 12, Test samples: 4" in out
    assert "Test Accuracy:" in out


def test_main_missing_file(tmp_path, capsys):
    code = main(["--train", str(tmp_path / "absent.csv"), "--test", str(tmp_path / "absent.csv")])
    assert code == 1
    assert "Error:" in capsys.readouterr().err