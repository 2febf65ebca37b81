import numpy as np
import pytest

from lenet5.model import (
    FEATURE_SHAPES,
    LAYER1,
    LAYER5,
    LENGTH_FEATURE1,
    LENGTH_FEATURE5,
    OUTPUT,
    PARAMETER_SHAPES,
    Features,
    LeNet5,
)


def _random_model(seed=0):
    rng = np.random.default_rng(seed)
    return LeNet5(
        **{name: rng.normal(size=shape) for name, shape in PARAMETER_SHAPES.items()}
    )


def test_zeros_shapes_and_values():
    model = LeNet5.zeros()
    assert model.weight5_6.shape == (LAYER5 * LENGTH_FEATURE5 * LENGTH_FEATURE5, OUTPUT)
    assert model.dtype == np.float64
    assert all(not array.any() for array in model.arrays())


def test_arrays_order():
    model = LeNet5.zeros()
    arrays = model.arrays()
    assert len(arrays) == len(PARAMETER_SHAPES)
    assert arrays[0] is model.weight0_1
    assert arrays[-1] is model.bias5_6


def test_to_bytes_length_float_and_int8():
    total = sum(int(np.prod(shape)) for shape in PARAMETER_SHAPES.values())
    assert len(LeNet5.zeros().to_bytes()) == total * 8
    assert len(LeNet5.zeros(np.int8).to_bytes()) == total


def test_bytes_round_trip_float():
    model = _random_model()
    restored = LeNet5.from_bytes(model.to_bytes())
    for original, copy in zip(model.arrays(), restored.arrays()):
        np.testing.assert_array_equal(original, copy)


def test_bytes_round_trip_int8():
    model = _random_model(3).quantize()
    restored = LeNet5.from_bytes(model.to_bytes(), np.int8)
    assert restored.dtype == np.int8
    for original, copy in zip(model.arrays(), restored.arrays()):
        np.testing.assert_array_equal(original, copy)


def test_from_bytes_wrong_length():
    data = LeNet5.zeros().to_bytes()
    with pytest.raises(ValueError):
        LeNet5.from_bytes(data[:-1])


def test_quantize_truncates_and_clips():
    model = LeNet5.zeros()
    model.weight0_1[0, 0, 0, 0] = 300.7
    model.weight0_1[0, 0, 0, 1] = -2.9
    model.bias5_6[0] = -1000.0
    quantized = model.quantize()
    assert quantized.dtype == np.int8
    assert quantized.weight0_1[0, 0, 0, 0] == 127
    assert quantized.weight0_1[0, 0, 0, 1] == -2
    assert quantized.bias5_6[0] == -128


def test_wrong_shape_rejected():
    parts = {name: np.zeros(shape) for name, shape in PARAMETER_SHAPES.items()}
    parts["bias0_1"] = np.zeros(LAYER1 + 1)
    with pytest.raises(ValueError):
        LeNet5(**parts)


def test_mixed_dtypes_rejected():
    parts = {name: np.zeros(shape) for name, shape in PARAMETER_SHAPES.items()}
    parts["bias0_1"] = np.zeros(LAYER1, dtype=np.int8)
    with pytest.raises(ValueError):
        LeNet5(**parts)


def test_features_zeros_shapes():
    features = Features.zeros()
    assert features.output.shape == (OUTPUT,)
    assert features.layer1.shape == (LAYER1, LENGTH_FEATURE1, LENGTH_FEATURE1)
    for name, shape in FEATURE_SHAPES.items():
        array = getattr(features, name)
        assert array.shape == shape
        assert not array.any()