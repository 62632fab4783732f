# sshash

Building blocks for working with DNA k-mers (2-bit encoding, reverse
complements, MurmurHash2-based minimizers, Elias-Fano sequences) and a
command-line tool that reorders a weighted unitig file so that the k-mer
weights form fewer runs. Pure Python, no third-party dependencies.

## Installation

    pip install .

For running the tests:

    pip install ".[test]"
    pytest

## Command line

    sshash permute -i unitigs.fa -k 31 -o unitigs.permuted.fa -d tmp_dir

Options of `permute`:

- `-i` (required): input FASTA file, optionally gzip-compressed (`.gz`).
- `-k` (required): k-mer length, between 1 and 32.
- `-o`: output file; defaults to `<input>.permuted`.
- `-d`: directory for temporary files; defaults to the current directory.

The input holds pairs of lines: a header of the form

    >12 LN:i:41 ab:Z:2 2 2 2 2 2 2 2 2 2 2

whose `ab:Z:` field lists `LN - k + 1` weights, one per k-mer, followed by the
DNA sequence of length `LN`. Sequence ids are expected to be `0, 1, 2, ...` in
file order.

The tool computes a cover of the sequences by walks that join equal end
weights, writes the chosen order to `tmp.permutation` in the temporary
directory (removed afterwards), and then writes the sequences in that order,
reverse-complementing a sequence and reversing its weights where the walk
needs it. Records are sorted in memory in chunks, spilled to temporary files
in the `-d` directory and merged. Progress is logged to standard error.

Running `sshash` with no tool, or with an unknown one, prints the list of
tools and exits with status 1. Errors while reading or writing files, or in
the input format, are reported as `error: ...` with exit status 1.

## Library

- `sshash.hashing`: `murmurhash2_64(data, seed)`, `hash64(x, seed)` for a
  64-bit integer, and `kmer_hash128(x, seed)` returning two 64-bit halves.
- `sshash.kmers`: the encoding A→00, C→01, G→11, T→10;
  `string_to_uint_kmer` / `uint_kmer_to_string` (first character in the high
  bits, order-preserving), the `_no_reverse` variants (first character in the
  low bits), `reverse_complement_kmer`, `reverse_complement` for strings,
  `is_valid`, `compute_minimizer`, `compute_minimizer_pos`, `msb`, `ceil_log2`,
  `char_to_uint`, `uint_to_char` and `MAX_K` (32).
- `sshash.minimizer_enumerator.MinimizerEnumerator(k, m, seed)`: rolling
  minimizer over a stream of overlapping k-mers via
  `next(kmer, clear, reverse=False)`.
- `sshash.ef_sequence.EliasFanoSequence(values, universe)`: compressed
  non-decreasing sequence with `len()`, iteration, `iter_from`, `access`,
  `back`, `next_geq`, `prev_leq`, `locate` and `num_bits`.
- `sshash.node.Node`, `sshash.even_frequency_weights.EvenFrequencyWeights`
  and `sshash.cover.Cover(num_sequences, num_runs_weights, nodes)` with
  `compute()`, `entries()` (pairs of sequence id and sign) and
  `save(filename)` (returns the final number of runs).
- `sshash.permute`: `PermuteData`, `open_text`, `parse_weighted`,
  `parse_weighted_file`, `reverse_header` and `permute_and_write`.
- `sshash.cli`: `load_permutation`, `permute` and `main`.

Example:

```python
from sshash.kmers import (
    reverse_complement_kmer,
    string_to_uint_kmer_no_reverse,
    uint_kmer_to_string_no_reverse,
)

x = string_to_uint_kmer_no_reverse("ACTCACG", 7)
print(uint_kmer_to_string_no_reverse(reverse_complement_kmer(x, 7), 7))  # CGTGAGT
```

## What this package does not do

There is no k-mer dictionary here: the package cannot build, save, load or
query an index of k-mers, and has no tools for lookups, streaming queries,
correctness checks, benchmarks, dumps or index statistics. `permute` is the
only command. k-mers are limited to 64-bit values, so k is at most 32.