"""Reading IDX image sets and storing models on disk."""

from __future__ import annotations

import os

import numpy as np

from .model import IMAGE_SIZE, LeNet5

IMAGE_HEADER = 16
LABEL_HEADER = 8

PathLike = str | os.PathLike


def read_data(count: int, data_file: PathLike, label_file: PathLike) -> tuple[np.ndarray, np.ndarray]:
    """Read ``count`` images and labels from IDX files.

    Returns a ``(count, 28, 28)`` uint8 array and a ``(count,)`` uint8 array.
    Entries the files are too short to supply stay zero.
    """
    if count < 0:
        raise ValueError("count must not be negative")
    with open(data_file, "rb") as image_stream, open(label_file, "rb") as label_stream:
        image_stream.seek(IMAGE_HEADER)
        label_stream.seek(LABEL_HEADER)
        raw_images = image_stream.read(count * IMAGE_SIZE * IMAGE_SIZE)
        raw_labels = label_stream.read(count)
    images = np.zeros((count, IMAGE_SIZE, IMAGE_SIZE), dtype=np.uint8)
    images.reshape(-1)[: len(raw_images)] = np.frombuffer(raw_images, dtype=np.uint8)
    labels = np.zeros(count, dtype=np.uint8)
    labels[: len(raw_labels)] = np.frombuffer(raw_labels, dtype=np.uint8)
    return images, labels


def save(lenet: LeNet5, filename: PathLike) -> None:
    """Write the raw parameter block of ``lenet`` to ``filename``."""
    with open(filename, "wb") as stream:
        stream.write(lenet.to_bytes())


def load(filename: PathLike, dtype=np.float64) -> LeNet5:
    """Read a raw parameter block of the given dtype from ``filename``."""
    size = len(LeNet5.zeros(dtype).to_bytes())
    with open(filename, "rb") as stream:
        data = stream.read(size)
    return LeNet5.from_bytes(data, dtype)