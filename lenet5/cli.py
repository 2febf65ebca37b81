"""Command line entry point: evaluate a model on the test set."""

from __future__ import annotations

import argparse
import sys
import time
from typing import Sequence, TextIO

import numpy as np

from .dataset import load, read_data, save
from .dump import print_weights_to_file, save_weights
from .model import OUTPUT, LeNet5
from .network import initial, predict

FILE_TEST_IMAGE = "t10k-images-idx3-ubyte"
FILE_TEST_LABEL = "t10k-labels-idx1-ubyte"
MODEL_FILE = "model.dat"
QUANT_MODEL_FILE = "model_quant.dat"
WEIGHTS_DUMP_FILE = "weights_dump.txt"
WEIGHTS_FILE = "lenet_weights.txt"
COUNT_TEST = 10000
SAMPLES_SHOWN = 10


def testing(lenet: LeNet5, images, labels, out: TextIO | None = None) -> int:
    """Count correct predictions, reporting progress and the first samples."""
    out = sys.stdout if out is None else out
    total = len(images)
    right = 0
    percent = 0
    samples = []
    for i, (image, label) in enumerate(zip(images, labels)):
        predicted = predict(lenet, image, OUTPUT)
        if i < SAMPLES_SHOWN:
            samples.append((int(label), predicted))
        right += int(label) == predicted
        if i * 100 // total > percent:
            percent = i * 100 // total
            print(f"test:{percent:2d}%", file=out)
    for number, (label, predicted) in enumerate(samples, start=1):
        print(f"Sample {number:2d}: True = {label}, Predicted = {predicted}", file=out)
    return right


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="lenet5", description="Evaluate a LeNet-5 model on an IDX test set."
    )
    parser.add_argument("--images", default=FILE_TEST_IMAGE, help="IDX image file")
    parser.add_argument("--labels", default=FILE_TEST_LABEL, help="IDX label file")
    parser.add_argument("--count", type=int, default=COUNT_TEST, help="number of test images")
    parser.add_argument("--model", default=None, help="model file to load and store")
    parser.add_argument(
        "--quantized",
        action="store_true",
        help="use an int8 model, dump its weights and save it afterwards",
    )
    args = parser.parse_args(argv)
    if args.count < 1:
        parser.error("--count must be positive")

    dtype = np.int8 if args.quantized else np.float64
    model_file = args.model or (QUANT_MODEL_FILE if args.quantized else MODEL_FILE)

    try:
        images, labels = read_data(args.count, args.images, args.labels)
    except OSError:
        print(
            "ERROR!!!\nDataset File Not Find!"
            "Please Copy Dataset to the Floder Included the exe"
        )
        return 1

    try:
        lenet = load(model_file, dtype)
    except OSError:
        lenet = LeNet5.zeros(dtype)
        initial(lenet)

    if args.quantized:
        print_weights_to_file(lenet, WEIGHTS_DUMP_FILE)

    start = time.process_time()
    right = testing(lenet, images, labels)
    elapsed = time.process_time() - start
    print(f"{right}/{args.count}")
    print(f"Time: {elapsed:f} seconds")

    if args.quantized:
        save_weights(lenet, WEIGHTS_FILE)
        save(lenet, model_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())