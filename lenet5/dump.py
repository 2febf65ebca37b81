"""Human-readable text dumps of model parameters."""

from __future__ import annotations

import os
from collections.abc import Iterable

from .model import (
    INPUT,
    LAYER1,
    LAYER2,
    LAYER3,
    LAYER4,
    LAYER5,
    LENGTH_FEATURE5,
    OUTPUT,
    LeNet5,
)

PathLike = str | os.PathLike


def _row(values: Iterable) -> str:
    return "".join(f"{int(value)} " for value in values)


def _kernel(kernel) -> list[str]:
    return [_row(line) + "\n" for line in kernel]


def print_weights_to_file(lenet: LeNet5, filename: PathLike) -> None:
    """Write parameters grouped by output channel, as integers."""
    parts = ["=== LeNet5_quant Weights and Biases ===\n\n"]

    parts.append("[weight0_1] (Input -> C1):\n")
    for o in range(LAYER1):
        parts.append(f"Filter {o}:\n")
        parts.extend(_kernel(lenet.weight0_1[0, o]))
        parts.append("\n")

    parts.append("[bias0_1] (C1):\n")
    parts.append(_row(lenet.bias0_1) + "\n\n")

    parts.append("[weight2_3] (C2 -> C3):\n")
    for o in range(LAYER3):
        parts.append(f"Output Channel {o}:\n")
        for i in range(LAYER2):
            parts.append(f"  Input Channel {i}:\n")
            parts.extend(_kernel(lenet.weight2_3[i, o]))
            parts.append("\n")

    parts.append("[bias2_3] (C3):\n")
    parts.append(_row(lenet.bias2_3) + "\n\n")

    parts.append("[weight4_5] (C4 -> FC1):\n")
    for o in range(LAYER5):
        parts.append(f"FC Neuron {o}:\n")
        for i in range(LAYER4):
            parts.append(f"  From Map {i}:\n")
            parts.extend(_kernel(lenet.weight4_5[i, o]))
            parts.append("\n")

    parts.append("[bias4_5] (FC1):\n")
    parts.append(_row(lenet.bias4_5) + "\n\n")

    parts.append("[weight5_6] (FC1 -> Output):\n")
    flattened = LAYER5 * LENGTH_FEATURE5 * LENGTH_FEATURE5
    for o in range(OUTPUT):
        parts.append(f"Output Neuron {o}:\n")
        for i, value in enumerate(lenet.weight5_6[:flattened, o], start=1):
            parts.append(f"{int(value)} ")
            if i % 20 == 0:
                parts.append("\n")
        parts.append("\n\n")

    parts.append("[bias5_6] (Output):\n")
    parts.append(_row(lenet.bias5_6) + "\n\n")

    with open(filename, "w") as stream:
        stream.write("".join(parts))
    print(f"Weights and biases saved to {filename}")


def save_weights(lenet: LeNet5, filename: PathLike) -> None:
    """Write parameters in storage order, as integers."""
    parts = ["--- Saving LeNet5 Weights ---\n"]

    sections = (
        ("\nweight0_1 (input -> layer1):\n", lenet.weight0_1, INPUT, LAYER1),
        ("\nweight2_3 (layer2 -> layer3):\n", lenet.weight2_3, LAYER2, LAYER3),
        ("\nweight4_5 (layer4 -> layer5):\n", lenet.weight4_5, LAYER4, LAYER5),
    )
    for title, weights, inputs, outputs in sections:
        parts.append(title)
        for i in range(inputs):
            for j in range(outputs):
                parts.extend(_kernel(weights[i, j]))
                parts.append("\n")
            parts.append("\n")

    parts.append("\nweight5_6 (flattened layer5 -> output):\n")
    parts.extend(_row(line) + "\n" for line in lenet.weight5_6)

    parts.append("\nBiases:\n")
    for title, bias in (
        ("\nbias0_1 (layer1 biases):\n", lenet.bias0_1),
        ("\nbias2_3 (layer3 biases):\n", lenet.bias2_3),
        ("\nbias4_5 (layer5 biases):\n", lenet.bias4_5),
        ("\nbias5_6 (output biases):\n", lenet.bias5_6),
    ):
        parts.append(title)
        parts.append(_row(bias) + "\n")

    with open(filename, "w") as stream:
        stream.write("".join(parts))