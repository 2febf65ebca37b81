"""LeNet-5 network for MNIST digits: model, training, IDX data, text dumps and a test command."""

__version__ = "0.1.0"
__all__ = ["model", "network", "dataset", "dump", "cli"]