"""Reading weighted sequence files and writing them in a new order.

A weighted file holds pairs of lines: a header of the form
``>[id] LN:i:[seq_len] ab:Z:[w_1] [w_2] ...`` with ``seq_len - k + 1``
weights, followed by the DNA sequence of length ``seq_len``.
"""

import contextlib
import gzip
import heapq
import logging
import os
import re
import time
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import TextIO

from .kmers import reverse_complement
from .node import Node

_log = logging.getLogger(__name__)

GB = 1 << 30

_SEQ_ID = re.compile(r">(\d+)")


@dataclass
class PermuteData:
    """What is read from a weighted file: run count, sequence count and nodes."""

    num_runs_weights: int = 0
    num_sequences: int = 0
    nodes: list[Node] = field(default_factory=list)


def open_text(filename: str) -> TextIO:
    """Open a text file for reading, decompressing it when it ends with ``.gz``."""
    if filename.endswith(".gz"):
        return gzip.open(filename, "rt", encoding="utf-8")
    return open(filename, encoding="utf-8")


def _split_header(header: str, k: int) -> tuple[str, int, list[int]]:
    """Return (text up to the weights, sequence length, weights) of a header."""
    if not header.startswith(">"):
        raise ValueError(f"header must start with '>': {header!r}")
    space = header.find(" ")
    if space < 0:
        raise ValueError(f"malformed header: {header!r}")
    i = space + 1
    if header[i:i + 5] != "LN:i:":
        raise ValueError(f"expected 'LN:i:' in header: {header!r}")
    i += 5
    j = header.find(" ", i)
    if j < 0:
        raise ValueError(f"malformed header: {header!r}")
    try:
        seq_len = int(header[i:j])
    except ValueError:
        raise ValueError(f"invalid sequence length in header: {header!r}") from None
    i = j + 1
    if header[i:i + 5] != "ab:Z:":
        raise ValueError(f"expected 'ab:Z:' in header: {header!r}")
    i += 5
    if seq_len < k:
        raise ValueError(f"sequence length {seq_len} is shorter than k = {k}")
    num_weights = seq_len - k + 1
    tokens = header[i:].split()
    if len(tokens) < num_weights:
        raise ValueError(
            f"expected {num_weights} weights but found {len(tokens)} in header: {header!r}"
        )
    try:
        weights = [int(t) for t in tokens[:num_weights]]
    except ValueError:
        raise ValueError(f"invalid weight in header: {header!r}") from None
    return header[:i], seq_len, weights


def _pairs(lines: Iterable[str]) -> Iterator[tuple[str, str]]:
    """Yield (header, sequence) pairs of lines, without line terminators."""
    it = (line.rstrip("\n") for line in lines)
    for header in it:
        sequence = next(it, "")
        yield header, sequence


def parse_weighted(lines: Iterable[str], k: int) -> PermuteData:
    """Parse weighted records into one node per sequence and count weight runs."""
    if k <= 0:
        raise ValueError(f"k must be > 0, got {k}")
    data = PermuteData()
    num_bases = 0
    num_kmers = 0
    sum_of_weights = 0
    distinct_weights: set[int] = set()

    for header, sequence in _pairs(lines):
        if not header:
            if sequence:
                raise ValueError("sequence found without a header")
            continue
        _, seq_len, weights = _split_header(header, k)
        if len(sequence) != seq_len:
            raise ValueError(
                f"file is malformed: expected a sequence of length {seq_len} "
                f"but got one of length {len(sequence)}"
            )
        sum_of_weights += sum(weights)
        distinct_weights.update(weights)
        data.num_runs_weights += 1 + sum(a != b for a, b in zip(weights, weights[1:]))
        data.nodes.append(Node(data.num_sequences, weights[0], weights[-1]))

        data.num_sequences += 1
        num_bases += len(sequence)
        num_kmers += len(sequence) - k + 1
        if data.num_sequences % 100000 == 0:
            _log.info(
                "read %d sequences, %d bases, %d kmers", data.num_sequences, num_bases, num_kmers
            )

    _log.info("read %d sequences, %d bases, %d kmers", data.num_sequences, num_bases, num_kmers)
    _log.info("%d distinct weights", len(distinct_weights))
    _log.info("sum_of_weights %d", sum_of_weights)
    return data


def parse_weighted_file(filename: str, k: int) -> PermuteData:
    """Parse a weighted file, gzip-compressed or not."""
    _log.info("reading file '%s'...", filename)
    with open_text(filename) as f:
        return parse_weighted(f, k)


def reverse_header(header: str, k: int) -> str:
    """Return the header with its weights in reverse order, each followed by a space."""
    prefix, _, weights = _split_header(header, k)
    return prefix + "".join(f"{w} " for w in reversed(weights))


def _sequence_id(header: str) -> int:
    match = _SEQ_ID.match(header)
    if match is None:
        raise ValueError(f"header does not start with '>' and an id: {header!r}")
    return int(match.group(1))


def _read_records(f: TextIO) -> Iterator[tuple[str, str]]:
    for header, sequence in _pairs(f):
        if not header or not sequence:
            return
        yield header, sequence


def permute_and_write(
    input_filename: str,
    output_filename: str,
    tmp_dirname: str,
    permutation: Sequence[int],
    signs: Sequence[bool],
    k: int,
    limit: int = GB,
) -> int:
    """Write the records of the input in the order given by ``permutation``.

    ``permutation[i]`` is the output rank of sequence ``i``; when ``signs[i]``
    is false the sequence is reverse-complemented and its weights reversed.
    Records are sorted in memory chunks of about ``limit`` bytes, spilled to
    ``tmp_dirname`` and merged. Return the number of records written.
    """
    if len(signs) != len(permutation):
        raise ValueError(
            f"permutation has {len(permutation)} entries but signs has {len(signs)}"
        )
    num_sequences = len(permutation)

    def rank(record: tuple[str, str]) -> int:
        return permutation[_sequence_id(record[0])]

    run_identifier = str(time.time_ns())
    tmp_files: list[str] = []
    buffer: list[tuple[str, str]] = []
    buffered_bytes = 0

    def sort_and_flush() -> None:
        nonlocal buffered_bytes
        if not buffer:
            return
        buffer.sort(key=rank)
        name = os.path.join(tmp_dirname, f"sshash.tmp.run{run_identifier}.{len(tmp_files)}")
        _log.info("saving to file '%s'...", name)
        tmp_files.append(name)
        with open(name, "w", encoding="utf-8") as out:
            for header, sequence in buffer:
                out.write(f"{header}\n{sequence}\n")
        buffer.clear()
        buffered_bytes = 0

    try:
        _log.info("reading file '%s'...", input_filename)
        num_bases = 0
        with open_text(input_filename) as f:
            lines = (line.rstrip("\n") for line in f)
            for i in range(num_sequences):
                header = next(lines, None)
                sequence = next(lines, None)
                if header is None or sequence is None:
                    raise ValueError(
                        f"expected {num_sequences} sequences but the input has only {i}"
                    )
                if not signs[i]:
                    sequence = reverse_complement(sequence)
                    header = reverse_header(header, k)
                seq_bytes = len(header) + len(sequence) + 16
                if buffered_bytes + seq_bytes > limit:
                    sort_and_flush()
                buffered_bytes += seq_bytes
                buffer.append((header, sequence))
                num_bases += len(sequence)
                if i and i % 1000000 == 0:
                    _log.info("read %d sequences, %d bases", i, num_bases)
        sort_and_flush()
        _log.info("read %d sequences, %d bases", num_sequences, num_bases)
        _log.info("files to merge = %d", len(tmp_files))

        written = 0
        with contextlib.ExitStack() as stack:
            sources = [
                _read_records(stack.enter_context(open(name, encoding="utf-8")))
                for name in tmp_files
            ]
            with open(output_filename, "w", encoding="utf-8") as out:
                for header, sequence in heapq.merge(*sources, key=rank):
                    out.write(f"{header}\n{sequence}\n")
                    written += 1
                    if written % 1000000 == 0:
                        _log.info("written sequences = %d/%d", written, num_sequences)
        _log.info("written sequences = %d/%d", written, num_sequences)
        return written
    finally:
        for name in tmp_files:
            with contextlib.suppress(FileNotFoundError):
                os.remove(name)