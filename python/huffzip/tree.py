import heapq
from dataclasses import dataclass, field
from typing import Any

from huffzip.abc import FrequencyTable, Symbol
from huffzip.errors import EmptyAlphabetError


NO_CHILD = -1


@dataclass(frozen=True)
class Node:
    freq: int
    symbol: Symbol | None = None
    left: int = NO_CHILD
    right: int = NO_CHILD

    @property
    def is_leaf(self) -> bool:
        return self.left == NO_CHILD


@dataclass
class HuffmanTree:
    """Huffman tree stored as an arena.

    Leaves occupy the first ``n_leaves`` slots of ``nodes``, internal nodes
    follow in creation order and refer to their children by index.
    """

    nodes: list[Node] = field(default_factory=list)
    root: int = NO_CHILD

    @property
    def freq(self) -> int:
        return self.nodes[self.root].freq

    def leaves(self) -> list[Node]:
        return [n for n in self.nodes if n.is_leaf]

    def left(self, index: int) -> int:
        return self.nodes[index].left

    def right(self, index: int) -> int:
        return self.nodes[index].right


def symbol_order(symbol: Symbol) -> tuple[str, str]:
    # Total order over arbitrary hashable symbols, independent of dict order
    return type(symbol).__name__, repr(symbol)


def build_huffman_tree(freqs: FrequencyTable) -> HuffmanTree:
    if len(freqs) == 0:
        raise EmptyAlphabetError()

    tree = HuffmanTree()
    heap: list[tuple[int, int]] = []

    for symbol in sorted(freqs, key=symbol_order):
        freq = freqs[symbol]
        if freq < 0:
            raise ValueError(f"Negative frequency for {symbol!r}: {freq}")
        tree.nodes.append(Node(freq=freq, symbol=symbol))
        heap.append((freq, len(tree.nodes) - 1))

    # Ties on freq pop the lower arena index first
    heapq.heapify(heap)

    while len(heap) > 1:
        freq1, left = heapq.heappop(heap)
        freq2, right = heapq.heappop(heap)
        tree.nodes.append(Node(freq=freq1 + freq2, left=left, right=right))
        heapq.heappush(heap, (freq1 + freq2, len(tree.nodes) - 1))

    tree.root = heap[0][1]
    return tree


def describe(tree: HuffmanTree) -> dict[str, Any]:
    leaves = tree.leaves()
    return {
        "symbols": len(leaves),
        "nodes": len(tree.nodes),
        "total": tree.freq,
    }
