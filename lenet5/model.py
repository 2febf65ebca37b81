"""LeNet-5 parameter and activation containers."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields

import numpy as np

LENGTH_KERNEL = 5

LENGTH_FEATURE0 = 32
LENGTH_FEATURE1 = LENGTH_FEATURE0 - LENGTH_KERNEL + 1
LENGTH_FEATURE2 = LENGTH_FEATURE1 >> 1
LENGTH_FEATURE3 = LENGTH_FEATURE2 - LENGTH_KERNEL + 1
LENGTH_FEATURE4 = LENGTH_FEATURE3 >> 1
LENGTH_FEATURE5 = LENGTH_FEATURE4 - LENGTH_KERNEL + 1

INPUT = 1
LAYER1 = 6
LAYER2 = 6
LAYER3 = 16
LAYER4 = 16
LAYER5 = 120
OUTPUT = 10

ALPHA = 0.5
PADDING = 2
IMAGE_SIZE = 28

PARAMETER_SHAPES: dict[str, tuple[int, ...]] = {
    "weight0_1": (INPUT, LAYER1, LENGTH_KERNEL, LENGTH_KERNEL),
    "weight2_3": (LAYER2, LAYER3, LENGTH_KERNEL, LENGTH_KERNEL),
    "weight4_5": (LAYER4, LAYER5, LENGTH_KERNEL, LENGTH_KERNEL),
    "weight5_6": (LAYER5 * LENGTH_FEATURE5 * LENGTH_FEATURE5, OUTPUT),
    "bias0_1": (LAYER1,),
    "bias2_3": (LAYER3,),
    "bias4_5": (LAYER5,),
    "bias5_6": (OUTPUT,),
}

FEATURE_SHAPES: dict[str, tuple[int, ...]] = {
    "input": (INPUT, LENGTH_FEATURE0, LENGTH_FEATURE0),
    "layer1": (LAYER1, LENGTH_FEATURE1, LENGTH_FEATURE1),
    "layer2": (LAYER2, LENGTH_FEATURE2, LENGTH_FEATURE2),
    "layer3": (LAYER3, LENGTH_FEATURE3, LENGTH_FEATURE3),
    "layer4": (LAYER4, LENGTH_FEATURE4, LENGTH_FEATURE4),
    "layer5": (LAYER5, LENGTH_FEATURE5, LENGTH_FEATURE5),
    "output": (OUTPUT,),
}

_PARAMETER_COUNT = sum(math.prod(shape) for shape in PARAMETER_SHAPES.values())


@dataclass(eq=False)
class LeNet5:
    """Weights and biases of the network, all arrays of one dtype."""

    weight0_1: np.ndarray
    weight2_3: np.ndarray
    weight4_5: np.ndarray
    weight5_6: np.ndarray
    bias0_1: np.ndarray
    bias2_3: np.ndarray
    bias4_5: np.ndarray
    bias5_6: np.ndarray

    def __post_init__(self) -> None:
        dtypes = set()
        for field in fields(self):
            array = np.asarray(getattr(self, field.name))
            expected = PARAMETER_SHAPES[field.name]
            if array.shape != expected:
                raise ValueError(
                    f"{field.name} has shape {array.shape}, expected {expected}"
                )
            setattr(self, field.name, array)
            dtypes.add(array.dtype)
        if len(dtypes) != 1:
            raise ValueError("all parameters must share one dtype")

    @classmethod
    def zeros(cls, dtype=np.float64) -> LeNet5:
        """A model with every parameter set to zero."""
        return cls(
            **{name: np.zeros(shape, dtype=dtype) for name, shape in PARAMETER_SHAPES.items()}
        )

    @property
    def dtype(self) -> np.dtype:
        return self.weight0_1.dtype

    def arrays(self) -> tuple[np.ndarray, ...]:
        """The parameter arrays in storage order."""
        return tuple(getattr(self, field.name) for field in fields(self))

    def to_bytes(self) -> bytes:
        """The raw parameter block, arrays laid out one after another."""
        return b"".join(np.ascontiguousarray(array).tobytes() for array in self.arrays())

    @classmethod
    def from_bytes(cls, data: bytes, dtype=np.float64) -> LeNet5:
        """Rebuild a model from a raw parameter block of the given dtype."""
        dtype = np.dtype(dtype)
        expected = _PARAMETER_COUNT * dtype.itemsize
        if len(data) != expected:
            raise ValueError(f"expected {expected} bytes, got {len(data)}")
        flat = np.frombuffer(data, dtype=dtype)
        parts = {}
        offset = 0
        for name, shape in PARAMETER_SHAPES.items():
            size = math.prod(shape)
            parts[name] = flat[offset:offset + size].reshape(shape).copy()
            offset += size
        return cls(**parts)

    def quantize(self) -> LeNet5:
        """An int8 copy: values truncated toward zero and clipped to the int8 range."""
        info = np.iinfo(np.int8)
        return LeNet5(
            **{
                field.name: np.clip(
                    np.trunc(getattr(self, field.name).astype(np.float64)), info.min, info.max
                ).astype(np.int8)
                for field in fields(self)
            }
        )


@dataclass(eq=False)
class Features:
    """Activations (or their errors) of every layer for one image."""

    input: np.ndarray
    layer1: np.ndarray
    layer2: np.ndarray
    layer3: np.ndarray
    layer4: np.ndarray
    layer5: np.ndarray
    output: np.ndarray

    @classmethod
    def zeros(cls) -> Features:
        """All layers filled with zeros."""
        return cls(**{name: np.zeros(shape) for name, shape in FEATURE_SHAPES.items()})