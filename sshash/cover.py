"""Cover of weighted sequences by walks that join equal end weights.

Every sequence is a node whose ends are its first and last weight. Nodes
are merged on shared end weights into trees, and the trees are then
linked greedily into walks. Writing the sequences in walk order, each
one possibly reversed, reduces the number of runs of equal weights.
"""

import copy
import logging
import time
from collections import defaultdict, deque
from collections.abc import Iterable
from dataclasses import replace

from .even_frequency_weights import EvenFrequencyWeights
from .node import INVALID_UINT32, Node, Walk, Walks

_log = logging.getLogger(__name__)


def _is_leaf(u: Node) -> bool:
    return u.left == INVALID_UINT32 and u.right == INVALID_UINT32


def _has_chain(u: Node) -> bool:
    return u.chain_id != INVALID_UINT32


def _append_to_walk(u: Node, walk: Walk) -> None:
    """Attach ``u`` at whichever end of ``walk`` it links to, flipping it if needed."""
    if not walk:
        walk.append(u)
        return
    if walk[0].front == u.front or walk[-1].back == u.back:
        u.flip()
    if walk[0].front == u.back:
        walk.appendleft(u)
    elif walk[-1].back == u.front:
        walk.append(u)


def _merge(x: Node, y: Node, w: int, offset_x: int, offset_y: int) -> Node:
    """Orient ``x`` and ``y`` to meet on ``w`` and return their parent."""
    if x.front == w:
        x.flip()
    if y.back == w:
        y.flip()
    return Node(front=x.front, back=y.back, left=offset_x, right=offset_y)


class _Emitter:
    """Flatten walks into (sequence id, sign) pairs."""

    def __init__(self, nodes: list[Node], chains: Walks) -> None:
        self._nodes = nodes
        self._chains = chains
        self._prev_back = INVALID_UINT32
        self.entries: list[tuple[int, bool]] = []

    def _leaf(self, u: Node) -> None:
        if u.front != self._prev_back:
            _log.error("path is broken")
        self._prev_back = u.back
        self.entries.append((u.id, u.sign))

    def _chain(self, parent_sign: bool, v: Node) -> None:
        chain = self._chains[v.chain_id]
        if parent_sign == v.sign:
            for u in chain:
                self._leaf(u)
        else:
            for u in reversed(chain):
                u.flip()
                self._leaf(u)

    def _tree(self, parent_sign: bool, root: Node) -> None:
        stack = [(parent_sign, root)]
        while stack:
            sign, u = stack.pop()
            if _is_leaf(u):
                if _has_chain(u):
                    self._chain(sign, u)
                else:
                    if not sign:
                        u.flip()
                    self._leaf(u)
                continue
            new_sign = sign == u.sign
            left, right = self._nodes[u.left], self._nodes[u.right]
            first, second = (left, right) if new_sign else (right, left)
            stack.append((new_sign, second))
            stack.append((new_sign, first))

    def walk(self, walk: Walk) -> None:
        self._prev_back = walk[0].front
        for u in walk:
            if _has_chain(u):
                self._chain(True, u)
            elif not _is_leaf(u):
                self._tree(True, u)
            else:
                self._leaf(u)


class Cover:
    """Compute an ordering and orientation of sequences that joins weight runs."""

    def __init__(self, num_sequences: int, num_runs_weights: int, nodes: Iterable[Node]) -> None:
        if num_runs_weights < num_sequences:
            raise ValueError(
                f"number of runs ({num_runs_weights}) cannot be smaller than "
                f"the number of sequences ({num_sequences})"
            )
        self._nodes = [replace(n) for n in nodes]
        if len(self._nodes) != num_sequences:
            raise ValueError(
                f"expected {num_sequences} nodes, got {len(self._nodes)}"
            )
        self._num_sequences = num_sequences
        self._initial_runs = num_runs_weights
        self.num_runs_weights = num_runs_weights
        self._walks: Walks = []
        self._chains: Walks = []
        # weight -> offsets of unvisited nodes having it as front or back
        self._incidence: defaultdict[int, set[int]] = defaultdict(set)
        self._unvisited: set[int] = set()

    def compute(self) -> None:
        """Build the walks covering all nodes."""
        if not self._nodes:
            raise ValueError("there are no sequences to cover")
        _log.info("initial number of runs = %d", self._initial_runs)
        _log.info("num_nodes = %d", len(self._nodes))
        start = time.perf_counter()
        self._pre_process()
        self._merge_even()
        self._greedy_cover()
        elapsed = time.perf_counter() - start
        _log.info(
            "cover computed in: %.3f [sec] (%.1f [ns/node])",
            elapsed,
            elapsed * 1e9 / self._num_sequences,
        )

    def entries(self) -> list[tuple[int, bool]]:
        """Return (sequence id, sign) in output order; sign False means reversed."""
        emitter = _Emitter(copy.deepcopy(self._nodes), copy.deepcopy(self._chains))
        for walk in self._walks:
            emitter.walk(walk)
        if len(emitter.entries) != self._num_sequences:
            raise RuntimeError(
                f"wrong number of sequences written: expected {self._num_sequences} "
                f"but got {len(emitter.entries)}"
            )
        return emitter.entries

    def save(self, filename: str) -> int:
        """Write one "id sign" line per sequence and return the final number of runs."""
        entries = self.entries()
        with open(filename, "w", encoding="ascii") as out:
            for seq_id, sign in entries:
                out.write(f"{seq_id} {1 if sign else 0}\n")
        self.num_runs_weights = self._initial_runs - self._num_sequences + len(self._walks)
        _log.info("final number of runs = %d", self.num_runs_weights)
        return self.num_runs_weights

    def _insert_node(self, u: Node, offset: int) -> None:
        self._unvisited.add(offset)
        self._incidence[u.front].add(offset)
        self._incidence[u.back].add(offset)

    def _erase_node(self, u: Node, offset: int) -> None:
        self._unvisited.discard(offset)
        self._incidence[u.front].discard(offset)
        self._incidence[u.back].discard(offset)

    def _pre_process(self) -> None:
        nodes = self._nodes
        # (x, y) and (y, x) are the same node: normalise to x <= y.
        for u in nodes:
            if u.front > u.back:
                u.flip()
        nodes.sort(key=lambda u: (u.front, u.back))

        grouped: list[Node] = []
        chain: Walk = deque()
        front, back = nodes[0].front, nodes[0].back
        nodes.append(Node(front=0, back=0))  # sentinel flushing the last group

        for u in nodes:
            u_front, u_back = u.front, u.back
            if (u.front, u.back) != (front, back):
                if len(chain) == 1:
                    grouped.append(chain[0])
                elif front != back and len(chain) % 2 == 0:
                    p1 = chain[-1]
                    if len(chain) == 2:
                        p2 = chain[0]
                    else:
                        chain.pop()
                        p2 = Node(
                            front=chain[0].front,
                            back=chain[-1].back,
                            chain_id=len(self._chains),
                        )
                        self._chains.append(chain)
                    grouped.append(p1)
                    grouped.append(p2)
                else:
                    grouped.append(
                        Node(
                            front=chain[0].front,
                            back=chain[-1].back,
                            chain_id=len(self._chains),
                        )
                    )
                    self._chains.append(chain)
                chain = deque()
            _append_to_walk(u, chain)
            front, back = u_front, u_back

        _log.info("num_chains = %d", len(self._chains))

        self._nodes = nodes = grouped
        for offset, u in enumerate(nodes):
            self._insert_node(u, offset)

        # Merge every (w, w) node with another node incident to w.
        for offset_u in range(len(nodes)):
            u = nodes[offset_u]
            if u.front != u.back:
                continue
            w = u.front
            incidence_w = self._incidence[w]
            if len(incidence_w) == 1:
                continue
            self._erase_node(u, offset_u)
            offset_x = next(iter(incidence_w))
            x = nodes[offset_x]
            self._erase_node(x, offset_x)
            p = _merge(x, u, w, offset_x, offset_u)
            offset_p = len(nodes)
            nodes.append(p)
            self._insert_node(p, offset_p)

    def _frequencies(self) -> dict[int, int]:
        freq: dict[int, int] = {}
        for offset, u in enumerate(self._nodes):
            if offset in self._unvisited:
                freq[u.front] = freq.get(u.front, 0) + 1
                freq[u.back] = freq.get(u.back, 0) + 1
        return freq

    def _merge_even(self) -> None:
        nodes = self._nodes
        efw = EvenFrequencyWeights(self._frequencies())

        while efw.has_next():
            w = efw.pop_min()
            incidence_w = self._incidence[w]
            if len(incidence_w) < 2:
                continue

            it = iter(incidence_w)
            offset_x = next(it)
            offset_y = next(it)
            x, y = nodes[offset_x], nodes[offset_y]
            p = _merge(x, y, w, offset_x, offset_y)
            self._erase_node(x, offset_x)
            self._erase_node(y, offset_y)
            offset_p = len(nodes)
            nodes.append(p)

            if p.front == p.back:
                ww = p.front
                efw.decrease_freq(ww)
                incidence_ww = self._incidence[ww]
                if incidence_ww:
                    offset_xx = next(iter(incidence_ww))
                    xx = nodes[offset_xx]
                    self._insert_node(p, offset_p)
                    yy = nodes[offset_p]
                    p = _merge(xx, yy, ww, offset_xx, offset_p)
                    self._erase_node(xx, offset_xx)
                    self._erase_node(yy, offset_p)
                    offset_p = len(nodes)
                    nodes.append(p)

            self._insert_node(p, offset_p)

        self._log_lower_bound()

    def _log_lower_bound(self) -> None:
        # weight -> [frequency, appears only in nodes (w, w)]
        weights: dict[int, list] = {}
        for offset, u in enumerate(self._nodes):
            if offset not in self._unvisited:
                continue
            for w in (u.front, u.back):
                info = weights.setdefault(w, [0, True])
                info[0] += 1
            if u.front != u.back:
                weights[u.front][1] = False
                weights[u.back][1] = False

        num_endpoints = 0
        for freq, all_equal in weights.values():
            if all_equal:
                num_endpoints += 2
            elif freq % 2 == 1:
                num_endpoints += 1
        _log.info("(estimated) num_walks = %d", num_endpoints // 2)

    def _try_to_extend(self, w: int) -> int | None:
        incidence_w = self._incidence[w]
        return next(iter(incidence_w)) if incidence_w else None

    def _greedy_cover(self) -> None:
        while self._unvisited:
            offset_u: int | None = next(iter(self._unvisited))
            walk: Walk = deque()
            while offset_u is not None:
                u = replace(self._nodes[offset_u])
                _append_to_walk(u, walk)
                self._erase_node(u, offset_u)
                offset_u = self._try_to_extend(walk[-1].back)
                if offset_u is None:
                    offset_u = self._try_to_extend(walk[0].front)
            self._walks.append(walk)
        _log.info("num_walks = %d", len(self._walks))