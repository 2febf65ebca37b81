[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lenet5"
version = "0.1.0"
description = "LeNet-5 convolutional network for MNIST digit recognition, with float64 and int8 weight models"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["lenet", "lenet-5", "mnist", "cnn", "neural-network", "quantization", "idx"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
lenet5 = "lenet5.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["lenet5"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
