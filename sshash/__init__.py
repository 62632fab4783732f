"""k-mer encoding, minimizers, Elias-Fano sequences and weight-aware permutation of unitig files."""

__version__ = "0.1.0"