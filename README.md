# lenet5

A LeNet-5 convolutional neural network for handwritten digit recognition on
the MNIST dataset, written with NumPy.

A 28×28 greyscale image is normalised to zero mean and unit deviation and
padded to 32×32. It then passes through a 5×5 convolution to 6 maps, a 2×2
max-pool, a 5×5 convolution to 16 maps, another 2×2 max-pool, a 5×5
convolution to 120 maps and a fully connected layer to 10 outputs. ReLU is
used after every convolution and after the output layer. Training uses a
softmax loss and plain gradient steps with a learning rate of 0.5.

Models hold either `float64` or `int8` parameters. Computation is always done
in `float64`; when an `int8` model is updated or initialised, new values are
truncated toward zero and clipped to the int8 range.

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Command line

The `lenet5` command evaluates a model on an IDX test set:

```
lenet5
```

By default it reads `t10k-images-idx3-ubyte` and `t10k-labels-idx1-ubyte`
from the working directory and classifies the first 10,000 images. If a data
file cannot be opened it prints an error and exits with status 1.

It loads the model from `model.dat` (a raw `float64` parameter block). If that
file cannot be opened, a fresh model with random weights is used instead. It
prints progress as `test:NN%`, the true and predicted digit of the first ten
samples, the number of correct answers as `right/count` and the processor time
taken.

Options:

- `--images FILE` – IDX image file (default `t10k-images-idx3-ubyte`)
- `--labels FILE` – IDX label file (default `t10k-labels-idx1-ubyte`)
- `--count N` – number of test images to read (default 10000; must be positive)
- `--model FILE` – model file to load (default `model.dat`, or
  `model_quant.dat` with `--quantized`)
- `--quantized` – use an `int8` model. Before testing, its weights are written
  as text to `weights_dump.txt`; afterwards they are written to
  `lenet_weights.txt` and the model is saved back to the model file.

## Library use

```python
import numpy as np
from lenet5.model import LeNet5
from lenet5.network import initial, train, train_batch, predict
from lenet5.dataset import read_data, save, load

images, labels = read_data(10000, "t10k-images-idx3-ubyte", "t10k-labels-idx1-ubyte")

lenet = LeNet5.zeros(np.float64)
initial(lenet, np.random.default_rng(0))

train_batch(lenet, images[:300], labels[:300])
train(lenet, images[0], labels[0])
digit = predict(lenet, images[0], 10)

save(lenet, "model.dat")
restored = load("model.dat", np.float64)
```

Modules:

- `lenet5.model` – `LeNet5` (weights and biases; `zeros`, `arrays`,
  `to_bytes`, `from_bytes`, `quantize`) and `Features` (per-layer
  activations), plus the layer size constants.
- `lenet5.network` – `relu`, `relu_grad`, `load_input`, `softmax_loss`,
  `forward`, `backward`, `train`, `train_batch`, `predict` and `initial`.
- `lenet5.dataset` – `read_data` reads IDX image and label files (entries the
  files are too short to supply stay zero); `save` and `load` write and read a
  model's raw parameter block. `load` raises `ValueError` if the file holds
  too few bytes for the given dtype.
- `lenet5.dump` – `print_weights_to_file` writes the weights grouped by output
  channel and prints a confirmation; `save_weights` writes them in storage
  order. Both write every value as an integer.
- `lenet5.cli` – `testing` and `main`, behind the `lenet5` command.

`LeNet5.quantize()` gives an `int8` copy of a model, with values truncated
toward zero and clipped to −128…127.

## What the package does not do

The `lenet5` command only evaluates a model; it does not train one. Training
is available through `train` and `train_batch` in `lenet5.network`, and a
trained model can be stored with `lenet5.dataset.save`. There is no
conversion from the text weight dumps back into a model.