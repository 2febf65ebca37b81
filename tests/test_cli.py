import io

import numpy as np

from lenet5.cli import main, testing
from lenet5.dataset import load, save
from lenet5.model import LeNet5


def _images(count, seed=0):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, (count, 28, 28), dtype=np.uint8)


def _write_idx(tmp_path, images, labels):
    image_file = tmp_path / "images"
    label_file = tmp_path / "labels"
    image_file.write_bytes(b"\x00" * 16 + np.asarray(images, dtype=np.uint8).tobytes())
    label_file.write_bytes(b"\x00" * 8 + np.asarray(labels, dtype=np.uint8).tobytes())
    return image_file, label_file


def test_testing_counts_correct_predictions():
    lenet = LeNet5.zeros(np.float64)
    labels = [0, 1, 0, 2, 0]
    out = io.StringIO()
    right = testing(lenet, _images(5), labels, out)
    assert right == labels.count(0)
    text = out.getvalue()
    assert "Sample  1: True = 0, Predicted = 0" in text
    assert "Sample  2: True = 1, Predicted = 0" in text
    assert text.count("Sample ") == 5


def test_testing_shows_at_most_ten_samples():
    lenet = LeNet5.zeros(np.float64)
    out = io.StringIO()
    right = testing(lenet, _images(12), [0] * 12, out)
    assert right == 12
    text = out.getvalue()
    assert text.count("Sample ") == 10
    assert "test:" in text


def test_main_float_model(tmp_path, capsys):
    image_file, label_file = _write_idx(tmp_path, _images(3), [0, 0, 0])
    model_file = tmp_path / "model.dat"
    save(LeNet5.zeros(np.float64), model_file)
    code = main([
        "--images", str(image_file),
        "--labels", str(label_file),
        "--model", str(model_file),
        "--count", "3",
    ])
    assert code == 0
    out = capsys.readouterr().out
    assert "3/3" in out
    assert "seconds" in out


def test_main_missing_dataset(tmp_path, capsys):
    code = main([
        "--images", str(tmp_path / "absent-images"),
        "--labels", str(tmp_path / "absent-labels"),
        "--count", "1",
    ])
    assert code == 1
    assert "Dataset File Not Find" in capsys.readouterr().out


def test_main_quantized_writes_outputs(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    image_file, label_file = _write_idx(tmp_path, _images(2, seed=5), [0, 0])
    code = main([
        "--images", str(image_file),
        "--labels", str(label_file),
        "--count", "2",
        "--quantized",
    ])
    assert code == 0
    assert (tmp_path / "weights_dump.txt").read_text().startswith(
        "=== LeNet5_quant Weights and Biases ==="
    )
    assert (tmp_path / "lenet_weights.txt").read_text().startswith(
        "--- Saving LeNet5 Weights ---"
    )
    saved = load(tmp_path / "model_quant.dat", np.int8)
    assert not saved.bias0_1.any()
    assert "/2" in capsys.readouterr().out