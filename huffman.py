import heapq
import logging
from collections import Counter
from enum import Enum
from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Tuple

from errors import (
    EmptyInputError,
    InconsistentTreeError,
    MalformedBitstreamError,
    UnknownSymbolError,
)

logger = logging.getLogger(__name__)

#: Code given to the symbol of a tree that consists of a single leaf.
SINGLE_LEAF_CODE = "0"

_BIT_VALUES = {"0": 0, "1": 1, 0: 0, 1: 1}


class TieBreak(Enum):
    """Policy deciding which node wins when several share a frequency.

    Nodes are kept in the heap keyed by ``(frequency, sequence)`` where
    ``sequence`` grows with every insertion, so equal frequencies are popped
    in insertion order. The policy only decides the order the leaves are
    inserted in; merged nodes always take the next sequence number.

    ``INSERTION`` inserts leaves in frequency table order (first occurrence
    in the input). ``SYMBOL`` inserts them in ascending symbol order, which
    makes the tree independent of input order but needs orderable symbols.
    """

    INSERTION = "insertion"
    SYMBOL = "symbol"


class HuffmanNode:
    """Node stored in a :class:`HuffmanTree` arena.

    :ivar symbol: The symbol stored at a leaf; ``None`` for internal nodes.
    :type symbol: Hashable | None
    :ivar freq: Frequency (weight) of the subtree rooted at this node.
    :type freq: int
    :ivar left: Arena index of the left child, ``None`` for leaves.
    :type left: int | None
    :ivar right: Arena index of the right child, ``None`` for leaves.
    :type right: int | None
    """

    def __init__(self, symbol=None, freq=0, left=None, right=None):
        self.symbol = symbol
        self.freq = freq
        self.left = left
        self.right = right

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode(symbol={self.symbol!r}, freq={self.freq})"
        return (
            f"HuffmanNode(freq={self.freq}, "
            f"left={self.left}, right={self.right})"
        )


class HuffmanTree:
    """Huffman tree whose nodes live in a single list.

    Children are referenced by their index in :attr:`nodes`. The tree is
    never mutated after :func:`build_tree` returns it, so one instance can
    be shared by any number of encode and decode calls.

    :ivar nodes: Every node of the tree; leaves come first, in the order
        they were inserted into the priority queue.
    :type nodes: List[HuffmanNode]
    :ivar root: Index of the root node in :attr:`nodes`.
    :type root: int
    """

    def __init__(self, nodes: List[HuffmanNode], root: int):
        self.nodes = nodes
        self.root = root

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def root_node(self) -> HuffmanNode:
        return self.nodes[self.root]

    def children(self, index: int) -> Optional[Tuple[int, int]]:
        """Return the ``(left, right)`` child indices of a node.

        :param index: Arena index of the node.
        :type index: int
        :returns: ``None`` if the node is a leaf, the child indices otherwise.
        :rtype: Optional[Tuple[int, int]]
        :raises InconsistentTreeError: If the node has exactly one child.
        """
        node = self.nodes[index]
        if node.left is None and node.right is None:
            return None
        if node.left is None or node.right is None:
            raise InconsistentTreeError(
                f"Node {index} has exactly one child: {node!r}"
            )
        return node.left, node.right

    def is_single_leaf(self) -> bool:
        """Whether the whole tree is one leaf (one distinct symbol)."""
        return self.children(self.root) is None

    def walk(self) -> Iterator[Tuple[int, str]]:
        """Yield ``(index, path)`` for every leaf, left subtrees first.

        ``path`` is the string of edge labels from the root, ``"0"`` for a
        left edge and ``"1"`` for a right edge. The root leaf of a single
        leaf tree has the empty path.

        :returns: Iterator over leaf indices and their paths.
        :rtype: Iterator[Tuple[int, str]]
        :raises InconsistentTreeError: If a node has exactly one child.
        """
        stack = [(self.root, "")]
        while stack:
            index, path = stack.pop()
            kids = self.children(index)
            if kids is None:
                yield index, path
                continue
            left, right = kids
            stack.append((right, path + "1"))
            stack.append((left, path + "0"))

    def leaves(self) -> List[HuffmanNode]:
        return [self.nodes[index] for index, _ in self.walk()]

    def depth(self, symbol) -> int:
        """Return the depth of the leaf holding ``symbol``.

        :raises UnknownSymbolError: If no leaf holds ``symbol``.
        """
        for index, path in self.walk():
            if self.nodes[index].symbol == symbol:
                return len(path)
        raise UnknownSymbolError(symbol)

    def height(self) -> int:
        return max(len(path) for _, path in self.walk())

    def code_lengths(self) -> Dict[Hashable, int]:
        """Map every symbol to the length of its code.

        Equal to the leaf depth, except for a single leaf tree where the
        lone symbol still needs a one bit code.
        """
        return {
            self.nodes[index].symbol: max(1, len(path))
            for index, path in self.walk()
        }

    def weighted_path_length(self) -> int:
        """Sum of ``frequency * depth`` over all leaves."""
        return sum(
            self.nodes[index].freq * len(path) for index, path in self.walk()
        )

    def validate(self) -> None:
        """Check the structural invariants of the whole tree.

        Every reachable node must be a leaf or have two children, no node may
        be reachable twice, internal nodes must not hold a symbol, and every
        internal frequency must equal the sum of its children's.

        :raises InconsistentTreeError: On the first violation found.
        """
        seen = set()
        stack = [self.root]
        while stack:
            index = stack.pop()
            if index in seen:
                raise InconsistentTreeError(
                    f"Node {index} is reachable more than once"
                )
            seen.add(index)
            kids = self.children(index)
            if kids is None:
                continue
            left, right = kids
            node = self.nodes[index]
            if node.symbol is not None:
                raise InconsistentTreeError(
                    f"Internal node {index} holds symbol {node.symbol!r}"
                )
            if node.freq != self.nodes[left].freq + self.nodes[right].freq:
                raise InconsistentTreeError(
                    f"Node {index} frequency {node.freq} does not match "
                    f"its children"
                )
            stack.extend(kids)


def count_frequencies(data: Iterable[Hashable]) -> Dict[Hashable, int]:
    """Count how often every distinct symbol occurs in ``data``.

    Symbols appear in the result in order of their first occurrence. Empty
    input gives an empty table.

    :param data: Sequence of hashable symbols (``str``, ``bytes``, list...).
    :type data: Iterable[Hashable]
    :returns: Mapping from symbol to occurrence count.
    :rtype: Dict[Hashable, int]
    """
    frequencies = dict(Counter(data))
    logger.debug("Counted %d distinct symbols", len(frequencies))
    return frequencies


def build_tree(
    frequencies: Dict[Hashable, int],
    tie_break: TieBreak = TieBreak.INSERTION,
) -> HuffmanTree:
    """Build a Huffman tree from a symbol frequency table.

    The two lowest nodes are merged repeatedly; the first one popped becomes
    the left child. Ties are resolved as documented on :class:`TieBreak`.

    :param frequencies: Mapping from symbol to observed frequency.
    :type frequencies: Dict[Hashable, int]
    :param tie_break: Tie-break policy, as a member or its string value.
    :type tie_break: TieBreak | str
    :returns: The built tree.
    :rtype: HuffmanTree
    :raises EmptyInputError: If ``frequencies`` is empty.
    :raises ValueError: If a frequency is not a positive integer.
    """
    if not frequencies:
        raise EmptyInputError(
            "Cannot build a Huffman tree from an empty frequency table"
        )
    tie_break = TieBreak(tie_break)

    items = list(frequencies.items())
    if tie_break is TieBreak.SYMBOL:
        items.sort(key=lambda item: item[0])

    nodes: List[HuffmanNode] = []
    heap: List[Tuple[int, int]] = []
    for symbol, freq in items:
        if freq <= 0:
            raise ValueError(
                f"Frequency of {symbol!r} must be positive, got {freq}"
            )
        nodes.append(HuffmanNode(symbol=symbol, freq=freq))
        heap.append((freq, len(nodes) - 1))
    # The arena index doubles as the insertion sequence number.
    heapq.heapify(heap)

    while len(heap) > 1:
        left_freq, left = heapq.heappop(heap)
        right_freq, right = heapq.heappop(heap)
        nodes.append(
            HuffmanNode(freq=left_freq + right_freq, left=left, right=right)
        )
        heapq.heappush(heap, (nodes[-1].freq, len(nodes) - 1))

    tree = HuffmanTree(nodes, heap[0][1])
    logger.debug(
        "Built Huffman tree with %d nodes (%s tie-break)",
        len(tree), tie_break.value,
    )
    return tree


def generate_codes(tree: HuffmanTree) -> Dict[Hashable, str]:
    """Assign every leaf symbol its root-to-leaf path as a code.

    :param tree: Tree built by :func:`build_tree`.
    :type tree: HuffmanTree
    :returns: Mapping from symbol to a non-empty string of ``0``/``1``.
    :rtype: Dict[Hashable, str]
    :raises InconsistentTreeError: If a node has exactly one child.
    """
    if tree.is_single_leaf():
        return {tree.root_node.symbol: SINGLE_LEAF_CODE}
    return {tree.nodes[index].symbol: path for index, path in tree.walk()}


def encode(data: Iterable[Hashable], codes: Dict[Hashable, str]) -> str:
    """Concatenate the codes of every symbol in ``data``.

    :param data: Symbols to encode.
    :type data: Iterable[Hashable]
    :param codes: Code table from :func:`generate_codes`.
    :type codes: Dict[Hashable, str]
    :returns: The encoded bit string.
    :rtype: str
    :raises UnknownSymbolError: If a symbol has no entry in ``codes``.
    """
    parts = []
    for symbol in data:
        try:
            parts.append(codes[symbol])
        except KeyError:
            raise UnknownSymbolError(symbol) from None
    bits = "".join(parts)
    logger.debug("Encoded %d symbols into %d bits", len(parts), len(bits))
    return bits


def decode(
    bits: Iterable,
    tree: HuffmanTree,
    count: Optional[int] = None,
) -> List[Hashable]:
    """Decode a bitstream by walking ``tree`` from the root for each symbol.

    :param bits: ``str`` of ``0``/``1`` characters, or any iterable of the
        ints 0 and 1.
    :type bits: Iterable
    :param tree: The tree the bitstream was encoded with.
    :type tree: HuffmanTree
    :param count: Stop after this many symbols and ignore remaining bits
        (e.g. byte padding). ``None`` decodes until the bits run out.
    :type count: int | None
    :returns: The decoded symbols.
    :rtype: List[Hashable]
    :raises MalformedBitstreamError: If the stream is empty, contains a bit
        other than 0/1, ends in the middle of a code, or holds fewer than
        ``count`` symbols.
    :raises InconsistentTreeError: If a node has exactly one child.
    """
    single_leaf = tree.is_single_leaf()
    output: List[Hashable] = []
    current = tree.root
    consumed = 0

    for bit in bits:
        if count is not None and len(output) >= count:
            break
        value = _BIT_VALUES.get(bit)
        if value is None:
            raise MalformedBitstreamError(f"Invalid bit {bit!r}", consumed)
        if single_leaf:
            if value != 0:
                raise MalformedBitstreamError(
                    "Single symbol tree only accepts 0 bits", consumed
                )
            output.append(tree.root_node.symbol)
        else:
            current = tree.children(current)[value]
            if tree.children(current) is None:
                output.append(tree.nodes[current].symbol)
                current = tree.root
        consumed += 1

    if current != tree.root:
        raise MalformedBitstreamError(
            "Bitstream ends in the middle of a code", consumed
        )
    if count is not None and len(output) < count:
        raise MalformedBitstreamError(
            f"Bitstream holds {len(output)} of {count} symbols", consumed
        )
    if not output and count != 0:
        raise MalformedBitstreamError("Empty bitstream", consumed)

    logger.debug("Decoded %d bits into %d symbols", consumed, len(output))
    return output
