import random

import pytest

from sshash.ef_sequence import EliasFanoSequence

VALUES = [0, 3, 3, 5, 9, 12]
DISTINCT = [0, 2, 7, 8, 20, 33]


@pytest.fixture
def ef():
    return EliasFanoSequence(VALUES, VALUES[-1])


def test_roundtrip_and_access(ef):
    assert len(ef) == len(VALUES)
    assert list(ef) == VALUES
    assert [ef.access(i) for i in range(len(VALUES))] == VALUES
    assert ef.back() == VALUES[-1]


def test_random_roundtrip():
    rng = random.Random(11)
    values = sorted(rng.randrange(10_000) for _ in range(500))
    seq = EliasFanoSequence(values, values[-1])
    assert list(seq) == values
    assert all(seq.access(i) == v for i, v in enumerate(values))


def test_iter_from(ef):
    assert list(ef.iter_from(2)) == VALUES[2:]
    assert list(ef.iter_from(len(VALUES))) == []
    with pytest.raises(IndexError):
        ef.iter_from(len(VALUES) + 1)


def test_access_out_of_range(ef):
    with pytest.raises(IndexError):
        ef.access(len(VALUES))


def test_next_geq_pinned(ef):
    assert ef.next_geq(3) == (2, 3)
    assert ef.next_geq(4) == (3, 5)
    assert ef.next_geq(13) == (len(VALUES), 12)


def test_prev_leq_invariants(ef):
    for x in range(16):
        pos = ef.prev_leq(x)
        if x > VALUES[-1]:
            assert pos == len(VALUES)
            continue
        assert VALUES[pos] <= x
        assert pos + 1 == len(VALUES) or VALUES[pos + 1] > x


def test_locate_invariants():
    seq = EliasFanoSequence(DISTINCT, DISTINCT[-1])
    assert seq.locate(0) == (0, 0, 0)
    for x in range(1, DISTINCT[-1] + 1):
        pos, prev, nxt = seq.locate(x)
        assert nxt == DISTINCT[pos]
        assert prev == DISTINCT[pos - 1]
        assert prev < x <= nxt


def test_locate_above_back_raises():
    seq = EliasFanoSequence(DISTINCT, DISTINCT[-1])
    with pytest.raises(ValueError):
        seq.locate(DISTINCT[-1] + 1)


def test_unsorted_raises():
    with pytest.raises(ValueError):
        EliasFanoSequence([1, 0], 1)


def test_value_above_universe_raises():
    with pytest.raises(ValueError):
        EliasFanoSequence([0, 5], 4)


def test_empty_sequence():
    seq = EliasFanoSequence([], 0)
    assert len(seq) == 0
    assert list(seq) == []
    with pytest.raises(ValueError):
        seq.next_geq(0)


def test_num_bits_grows_with_size():
    small = EliasFanoSequence(VALUES, VALUES[-1])
    values = list(range(0, 4000, 3))
    large = EliasFanoSequence(values, values[-1])
    assert small.num_bits() >= 64
    assert large.num_bits() > small.num_bits()