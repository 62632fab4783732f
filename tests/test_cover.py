import random
import re

import pytest

from sshash.cover import Cover
from sshash.node import Node


def _make_nodes(pairs):
    return [Node(id=i, front=f, back=b) for i, (f, b) in enumerate(pairs)]


def _oriented(originals, entries):
    by_id = {n.id: n for n in originals}
    path = []
    for seq_id, sign in entries:
        n = by_id[seq_id]
        path.append((n.front, n.back) if sign else (n.back, n.front))
    return path


def _breaks(path):
    return sum(1 for a, b in zip(path, path[1:]) if a[1] != b[0])


def _components(pairs):
    parent = {}

    def find(x):
        parent.setdefault(x, x)
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    for f, b in pairs:
        parent[find(f)] = find(b)
    return len({find(w) for f, b in pairs for w in (f, b)})


def _run(pairs, runs, tmp_path):
    nodes = _make_nodes(pairs)
    cover = Cover(len(nodes), runs, nodes)
    cover.compute()
    entries = cover.entries()
    final_runs = cover.save(str(tmp_path / "perm.txt"))
    return nodes, entries, final_runs


def test_path_is_joined_into_a_single_walk(tmp_path):
    pairs = [(1, 2), (2, 3), (3, 4)]
    nodes, entries, final_runs = _run(pairs, 3, tmp_path)
    assert sorted(i for i, _ in entries) == [0, 1, 2]
    assert _breaks(_oriented(nodes, entries)) == 0
    assert final_runs == 1


def test_reversed_nodes_get_negative_sign_where_needed(tmp_path):
    pairs = [(2, 1), (2, 3), (4, 3)]
    nodes, entries, final_runs = _run(pairs, 5, tmp_path)
    path = _oriented(nodes, entries)
    assert _breaks(path) == 0
    assert final_runs == 5 - 3 + 1
    # Without flipping some node the three could not link.
    assert not all(sign for _, sign in entries)


@pytest.mark.parametrize("copies", [2, 3, 4, 5])
def test_duplicate_nodes_form_one_walk(tmp_path, copies):
    pairs = [(5, 7)] * copies
    nodes, entries, final_runs = _run(pairs, copies, tmp_path)
    assert sorted(i for i, _ in entries) == list(range(copies))
    assert _breaks(_oriented(nodes, entries)) == 0
    assert final_runs == 1


def test_self_loops_are_absorbed(tmp_path):
    pairs = [(3, 3), (3, 4), (4, 4)]
    nodes, entries, final_runs = _run(pairs, 4, tmp_path)
    assert sorted(i for i, _ in entries) == [0, 1, 2]
    assert _breaks(_oriented(nodes, entries)) == 0
    assert final_runs == 4 - 3 + 1


def test_disconnected_nodes_need_separate_walks(tmp_path):
    pairs = [(1, 2), (3, 4)]
    nodes, entries, final_runs = _run(pairs, 6, tmp_path)
    walks = final_runs - 6 + 2
    assert walks == 2
    assert final_runs == 6
    assert sorted(i for i, _ in entries) == [0, 1]


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4, 5, 6, 7])
def test_random_covers_are_consistent(tmp_path, seed):
    rng = random.Random(seed)
    n = 60
    pairs = [(rng.randint(1, 6), rng.randint(1, 6)) for _ in range(n)]
    runs = n + 25
    nodes, entries, final_runs = _run(pairs, runs, tmp_path)

    assert sorted(i for i, _ in entries) == list(range(n))
    walks = final_runs - runs + n
    assert walks >= _components(pairs)
    assert walks <= n
    assert _breaks(_oriented(nodes, entries)) <= walks - 1


def test_save_writes_one_line_per_sequence(tmp_path):
    pairs = [(1, 2), (2, 2), (3, 2), (5, 1)]
    nodes = _make_nodes(pairs)
    cover = Cover(len(nodes), 10, nodes)
    cover.compute()
    path = tmp_path / "perm.txt"
    cover.save(str(path))
    lines = path.read_text().splitlines()
    assert all(re.fullmatch(r"\d+ [01]", line) for line in lines)
    parsed = [(int(a), b == "1") for a, b in (line.split() for line in lines)]
    assert parsed == cover.entries()
    assert cover.num_runs_weights == 10 - 4 + (cover.num_runs_weights - 6)


def test_input_nodes_are_not_modified():
    nodes = _make_nodes([(4, 1), (1, 2), (2, 3)])
    snapshot = [(n.id, n.front, n.back, n.sign) for n in nodes]
    cover = Cover(3, 3, nodes)
    cover.compute()
    cover.entries()
    assert [(n.id, n.front, n.back, n.sign) for n in nodes] == snapshot


def test_entries_are_repeatable():
    nodes = _make_nodes([(1, 2), (2, 3), (3, 4)])
    cover = Cover(3, 3, nodes)
    cover.compute()
    first = cover.entries()
    second = cover.entries()
    assert sorted(i for i, _ in first) == [0, 1, 2]
    assert _breaks(_oriented(nodes, first)) == 0
    assert second == first


def test_fewer_runs_than_sequences_is_rejected():
    with pytest.raises(ValueError):
        Cover(3, 2, _make_nodes([(1, 2), (2, 3), (3, 4)]))


def test_node_count_must_match():
    with pytest.raises(ValueError):
        Cover(3, 3, _make_nodes([(1, 2), (2, 3)]))


def test_compute_requires_nodes():
    cover = Cover(0, 0, [])
    with pytest.raises(ValueError):
        cover.compute()


def test_entries_before_compute_fail():
    cover = Cover(2, 2, _make_nodes([(1, 2), (2, 3)]))
    with pytest.raises(RuntimeError):
        cover.entries()