[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "sshash"
version = "0.1.0"
description = "k-mer encoding, minimizers, Elias-Fano sequences and weight-aware permutation of unitig files"
requires-python = ">=3.10"
dependencies = []
keywords = ["k-mer", "minimizer", "bioinformatics", "elias-fano", "de-bruijn-graph", "fasta", "murmurhash"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sshash = "sshash.cli:main"

[tool.setuptools.packages.find]
include = ["sshash*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
