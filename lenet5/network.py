"""Forward pass, back-propagation and training of LeNet-5."""

from __future__ import annotations

from itertools import product
from typing import Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .model import (
    ALPHA,
    IMAGE_SIZE,
    INPUT,
    LAYER1,
    LAYER2,
    LAYER3,
    LAYER4,
    LAYER5,
    LENGTH_KERNEL,
    OUTPUT,
    PADDING,
    Features,
    LeNet5,
)

_WEIGHT_SCALES = {
    "weight0_1": np.sqrt(6.0 / (LENGTH_KERNEL * LENGTH_KERNEL * (INPUT + LAYER1))),
    "weight2_3": np.sqrt(6.0 / (LENGTH_KERNEL * LENGTH_KERNEL * (LAYER2 + LAYER3))),
    "weight4_5": np.sqrt(6.0 / (LENGTH_KERNEL * LENGTH_KERNEL * (LAYER4 + LAYER5))),
    "weight5_6": np.sqrt(6.0 / (LAYER5 + OUTPUT)),
}
_BIAS_NAMES = ("bias0_1", "bias2_3", "bias4_5", "bias5_6")


def relu(x):
    """Rectified linear unit, element-wise."""
    x = np.asarray(x, dtype=np.float64)
    return x * (x > 0)


def relu_grad(y):
    """Derivative of relu expressed through its output."""
    return (np.asarray(y) > 0).astype(np.float64)


def load_input(image) -> Features:
    """Normalise a 28x28 image and place it, padded, into a fresh feature set."""
    values = np.asarray(image)
    if values.shape != (IMAGE_SIZE, IMAGE_SIZE):
        raise ValueError(f"image must be {IMAGE_SIZE}x{IMAGE_SIZE}, got {values.shape}")
    values = values.astype(np.float64)
    mean = values.mean()
    with np.errstate(divide="ignore", invalid="ignore"):
        std = np.sqrt((values * values).mean() - mean * mean)
        normalised = (values - mean) / std
    features = Features.zeros()
    features.input[0, PADDING:PADDING + IMAGE_SIZE, PADDING:PADDING + IMAGE_SIZE] = normalised
    return features


def softmax_loss(output, label: int, count: int) -> np.ndarray:
    """Error signal for the output layer given the true label."""
    output = np.asarray(output, dtype=np.float64)
    if not 1 <= count <= output.size:
        raise ValueError(f"count must be between 1 and {output.size}")
    if not 0 <= label < count:
        raise ValueError(f"label must be between 0 and {count - 1}")
    values = output[:count]
    with np.errstate(over="ignore"):
        probabilities = 1.0 / np.exp(values[None, :] - values[:, None]).sum(axis=1)
    inner = probabilities[label] - np.sum(probabilities * probabilities)
    target = np.zeros(count)
    target[label] = 1.0
    loss = np.zeros_like(output)
    loss[:count] = probabilities * (target - probabilities - inner)
    return loss


def _conv_forward(inp, weight, bias):
    kernel = weight.astype(np.float64)
    windows = sliding_window_view(inp, kernel.shape[2:], axis=(1, 2))
    total = np.einsum("xhwij,xyij->yhw", windows, kernel)
    return relu(total + bias.astype(np.float64)[:, None, None])


def _conv_backward(inp, outerror, weight):
    kernel = weight.astype(np.float64)
    height, width = outerror.shape[1:]
    inerror = np.zeros(inp.shape)
    for w0, w1 in product(range(kernel.shape[2]), range(kernel.shape[3])):
        inerror[:, w0:w0 + height, w1:w1 + width] += np.einsum(
            "yhw,xy->xhw", outerror, kernel[:, :, w0, w1]
        )
    inerror *= relu_grad(inp)
    bias_delta = outerror.sum(axis=(1, 2))
    windows = sliding_window_view(inp, (height, width), axis=(1, 2))
    weight_delta = np.einsum("xijhw,yhw->xyij", windows, outerror)
    return inerror, weight_delta, bias_delta


def _pool_blocks(inp, out_shape):
    channels, height, width = inp.shape
    out0, out1 = out_shape
    len0, len1 = height // out0, width // out1
    blocks = (
        inp[:, :out0 * len0, :out1 * len1]
        .reshape(channels, out0, len0, out1, len1)
        .transpose(0, 1, 3, 2, 4)
        .reshape(channels, out0, out1, len0 * len1)
    )
    return blocks, blocks.argmax(axis=-1), (len0, len1)


def _pool_forward(inp, out_shape):
    blocks, index, _ = _pool_blocks(inp, out_shape)
    return np.take_along_axis(blocks, index[..., None], axis=-1)[..., 0]


def _pool_backward(inp, outerror):
    channels, out0, out1 = outerror.shape
    blocks, index, (len0, len1) = _pool_blocks(inp, (out0, out1))
    spread = np.zeros(blocks.shape)
    np.put_along_axis(spread, index[..., None], outerror[..., None], axis=-1)
    inerror = np.zeros(inp.shape)
    inerror[:, :out0 * len0, :out1 * len1] = (
        spread.reshape(channels, out0, out1, len0, len1)
        .transpose(0, 1, 3, 2, 4)
        .reshape(channels, out0 * len0, out1 * len1)
    )
    return inerror


def forward(lenet: LeNet5, features: Features) -> Features:
    """Fill every layer of ``features`` from its input; returns ``features``."""
    features.layer1 = _conv_forward(features.input, lenet.weight0_1, lenet.bias0_1)
    features.layer2 = _pool_forward(features.layer1, features.layer2.shape[1:])
    features.layer3 = _conv_forward(features.layer2, lenet.weight2_3, lenet.bias2_3)
    features.layer4 = _pool_forward(features.layer3, features.layer4.shape[1:])
    features.layer5 = _conv_forward(features.layer4, lenet.weight4_5, lenet.bias4_5)
    flat = features.layer5.reshape(-1)
    features.output = relu(
        flat @ lenet.weight5_6.astype(np.float64) + lenet.bias5_6.astype(np.float64)
    )
    return features


def backward(lenet: LeNet5, deltas: LeNet5, errors: Features, features: Features) -> LeNet5:
    """Propagate ``errors.output`` back, filling ``errors`` and adding gradients to ``deltas``."""
    flat_input = features.layer5.reshape(-1)
    layer5_error = (lenet.weight5_6.astype(np.float64) @ errors.output) * relu_grad(flat_input)
    errors.layer5 = layer5_error.reshape(features.layer5.shape)
    deltas.bias5_6 += errors.output
    deltas.weight5_6 += np.outer(flat_input, errors.output)

    errors.layer4, weight_delta, bias_delta = _conv_backward(
        features.layer4, errors.layer5, lenet.weight4_5
    )
    deltas.weight4_5 += weight_delta
    deltas.bias4_5 += bias_delta

    errors.layer3 = _pool_backward(features.layer3, errors.layer4)

    errors.layer2, weight_delta, bias_delta = _conv_backward(
        features.layer2, errors.layer3, lenet.weight2_3
    )
    deltas.weight2_3 += weight_delta
    deltas.bias2_3 += bias_delta

    errors.layer1 = _pool_backward(features.layer1, errors.layer2)

    errors.input, weight_delta, bias_delta = _conv_backward(
        features.input, errors.layer1, lenet.weight0_1
    )
    deltas.weight0_1 += weight_delta
    deltas.bias0_1 += bias_delta
    return deltas


def _store(target: np.ndarray, values: np.ndarray) -> None:
    if np.issubdtype(target.dtype, np.integer):
        info = np.iinfo(target.dtype)
        values = np.clip(np.trunc(values), info.min, info.max)
    target[...] = values


def _apply(lenet: LeNet5, deltas: LeNet5, scale: float) -> None:
    for target, delta in zip(lenet.arrays(), deltas.arrays()):
        _store(target, target.astype(np.float64) + scale * delta)


def _gradients(lenet: LeNet5, image, label: int) -> LeNet5:
    features = forward(lenet, load_input(image))
    errors = Features.zeros()
    errors.output = softmax_loss(features.output, label, OUTPUT)
    return backward(lenet, LeNet5.zeros(np.float64), errors, features)


def train(lenet: LeNet5, image, label: int) -> None:
    """One gradient step on a single labelled image."""
    _apply(lenet, _gradients(lenet, image, label), ALPHA)


def train_batch(lenet: LeNet5, images: Sequence, labels: Sequence[int]) -> None:
    """One gradient step averaged over a batch of labelled images."""
    if len(images) != len(labels):
        raise ValueError("images and labels differ in length")
    if not len(images):
        raise ValueError("batch is empty")
    buffer = LeNet5.zeros(np.float64)
    for image, label in zip(images, labels):
        for total, delta in zip(buffer.arrays(), _gradients(lenet, image, int(label)).arrays()):
            total += delta
    _apply(lenet, buffer, ALPHA / len(images))


def predict(lenet: LeNet5, image, count: int = OUTPUT) -> int:
    """Index of the largest of the first ``count`` outputs."""
    if not 1 <= count <= OUTPUT:
        raise ValueError(f"count must be between 1 and {OUTPUT}")
    features = forward(lenet, load_input(image))
    return int(np.argmax(features.output[:count]))


def initial(lenet: LeNet5, rng: np.random.Generator | None = None) -> None:
    """Randomise the weights with scaled uniform values and zero the biases."""
    rng = np.random.default_rng() if rng is None else rng
    for name, scale in _WEIGHT_SCALES.items():
        target = getattr(lenet, name)
        _store(target, rng.uniform(-1.0, 1.0, target.shape) * scale)
    for name in _BIAS_NAMES:
        getattr(lenet, name)[...] = 0