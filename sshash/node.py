"""Nodes and walks of the weight-run cover graph."""

from collections import deque
from dataclasses import dataclass

INVALID_UINT32 = 0xFFFFFFFF


@dataclass
class Node:
    """A sequence seen as an edge between its first and last weight.

    ``sign`` is True for forward orientation. ``chain_id``, ``left`` and
    ``right`` link a parent node to what it was merged from.
    """

    id: int = INVALID_UINT32
    front: int = INVALID_UINT32
    back: int = INVALID_UINT32
    sign: bool = True
    chain_id: int = INVALID_UINT32
    left: int = INVALID_UINT32
    right: int = INVALID_UINT32

    def flip(self) -> None:
        """Reverse the orientation: swap front and back and negate the sign."""
        self.front, self.back = self.back, self.front
        self.sign = not self.sign

    def __str__(self) -> str:
        return f"{self.id}:[{self.front},{self.back},{'+' if self.sign else '-'}]"


Walk = deque[Node]
Walks = list[Walk]