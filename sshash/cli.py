"""Command-line entry point of the sshash tools."""

import argparse
import logging
import os
import sys
from collections.abc import Sequence

from .cover import Cover
from .kmers import MAX_K
from .permute import parse_weighted_file, permute_and_write

DEFAULT_TMP_DIRNAME = "."

_PROG = "sshash"


def load_permutation(filename: str, num_sequences: int) -> tuple[list[int], list[bool]]:
    """Read "id sign" lines written by a cover.

    Line ``i`` names the sequence that goes to output position ``i``.
    Return ``(permutation, signs)`` indexed by sequence id, where
    ``permutation[id]`` is the output position and ``signs[id]`` is False
    when the sequence must be reverse-complemented.
    """
    with open(filename, encoding="ascii") as f:
        tokens = f.read().split()
    if len(tokens) < 2 * num_sequences:
        raise ValueError(
            f"expected {num_sequences} entries in '{filename}' "
            f"but found {len(tokens) // 2}"
        )
    permutation = [0] * num_sequences
    signs = [False] * num_sequences
    pairs = zip(tokens[0::2], tokens[1::2])
    for rank, (position_token, sign_token) in zip(range(num_sequences), pairs):
        try:
            position = int(position_token)
        except ValueError:
            raise ValueError(f"invalid sequence id {position_token!r}") from None
        if not 0 <= position < num_sequences:
            raise ValueError(
                f"sequence id {position} out of range for {num_sequences} sequences"
            )
        if sign_token not in ("0", "1"):
            raise ValueError(f"invalid sign {sign_token!r}")
        permutation[position] = rank
        signs[position] = sign_token == "1"
    return permutation, signs


def _permute_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"{_PROG} permute",
        description="Permute a weighted input file to reduce the number of weight runs.",
    )
    parser.add_argument(
        "-i",
        dest="input_filename",
        required=True,
        help="FASTA file, gzip-compressed or not, without duplicate nor invalid k-mers, "
        "one DNA sequence per line, with the k-mers' weights in the headers.",
    )
    parser.add_argument(
        "-k",
        dest="k",
        type=int,
        required=True,
        help=f"K-mer length (must be <= {MAX_K}).",
    )
    parser.add_argument(
        "-o",
        dest="output_filename",
        default=None,
        help="Output file where the permuted collection will be written.",
    )
    parser.add_argument(
        "-d",
        dest="tmp_dirname",
        default=DEFAULT_TMP_DIRNAME,
        help="Temporary directory used for merging in external memory. "
        f"Default is directory '{DEFAULT_TMP_DIRNAME}'.",
    )
    return parser


def permute(argv: Sequence[str] | None = None) -> int:
    """Run the permute tool on ``argv`` (the arguments after the tool name)."""
    try:
        args = _permute_parser().parse_args(list(argv or []))
    except SystemExit:
        return 1

    k = args.k
    if k <= 0:
        print("k must be > 0", file=sys.stderr)
        return 1
    if k > MAX_K:
        print(f"k must be less <= {MAX_K} but got k = {k}", file=sys.stderr)
        return 1

    input_filename = args.input_filename
    output_filename = args.output_filename or input_filename + ".permuted"
    tmp_dirname = args.tmp_dirname
    permutation_filename = os.path.join(tmp_dirname, "tmp.permutation")

    data = parse_weighted_file(input_filename, k)
    cover = Cover(data.num_sequences, data.num_runs_weights, data.nodes)
    cover.compute()
    cover.save(permutation_filename)

    try:
        permutation, signs = load_permutation(permutation_filename, data.num_sequences)
        permute_and_write(input_filename, output_filename, tmp_dirname, permutation, signs, k)
    finally:
        if os.path.exists(permutation_filename):
            os.remove(permutation_filename)
    return 0


_TOOLS = {"permute": permute}


def _help() -> int:
    print("== SSHash: (S)parse and (S)kew (Hash)ing of k-mers =========================")
    print()
    print(f"Usage: {_PROG} <tool> ...")
    print()
    print("Available tools:")
    print("  permute            \t permute a weighted input file ")
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Dispatch to the tool named by the first argument."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        return _help()
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    tool = args[0]
    run = _TOOLS.get(tool)
    if run is None:
        print(f"Unsupported tool '{tool}'.\n")
        return _help()
    try:
        return run(args[1:])
    except (OSError, ValueError, RuntimeError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())