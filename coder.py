import logging
import math
from typing import Dict, Hashable, NamedTuple, Optional, Sequence, Tuple

from bitops import BitReader, pack_bits
from errors import EmptyInputError
from huffman import (
    HuffmanTree,
    TieBreak,
    build_tree,
    count_frequencies,
    decode,
    encode,
    generate_codes,
)

logger = logging.getLogger(__name__)


class CodingStats(NamedTuple):
    """Size figures for one encoded message."""

    symbols: int
    distinct: int
    encoded_bits: int
    weighted_path_length: int
    average_code_length: float
    fixed_width_bits: int
    ratio: float


class HuffmanCoder:
    """Huffman coder bound to the tree built from one message.

    The tree and code table are built once in :meth:`from_data` and shared
    by every later :meth:`encode` and :meth:`decode` call.

    :ivar frequencies: Symbol frequencies the tree was built from.
    :type frequencies: Dict[Hashable, int]
    :ivar tree: The Huffman tree.
    :type tree: HuffmanTree
    :ivar codes: Mapping from symbol to its bit string code.
    :type codes: Dict[Hashable, str]
    :ivar tie_break: Tie-break policy used to build :attr:`tree`.
    :type tie_break: TieBreak
    """

    def __init__(
        self,
        frequencies: Dict[Hashable, int],
        tie_break: TieBreak = TieBreak.INSERTION,
    ):
        """Build the tree and code table for a frequency table.

        :param frequencies: Mapping from symbol to observed frequency.
        :type frequencies: Dict[Hashable, int]
        :param tie_break: Tie-break policy for the tree builder.
        :type tie_break: TieBreak | str
        :raises EmptyInputError: If ``frequencies`` is empty.
        """
        self.tie_break = TieBreak(tie_break)
        self.frequencies = dict(frequencies)
        self.tree: HuffmanTree = build_tree(self.frequencies, self.tie_break)
        self.codes: Dict[Hashable, str] = generate_codes(self.tree)

    @classmethod
    def from_data(
        cls, data: Sequence, tie_break: TieBreak = TieBreak.INSERTION
    ) -> "HuffmanCoder":
        """Create a coder from the symbol frequencies of ``data``.

        :param data: The message the coder is built for.
        :type data: Sequence
        :param tie_break: Tie-break policy for the tree builder.
        :type tie_break: TieBreak | str
        :returns: A coder whose code table covers every symbol of ``data``.
        :rtype: HuffmanCoder
        :raises EmptyInputError: If ``data`` is empty.
        """
        if len(data) == 0:
            raise EmptyInputError(
                "Cannot build a Huffman coder for empty input"
            )
        return cls(count_frequencies(data), tie_break)

    def encode(self, data: Sequence) -> str:
        return encode(data, self.codes)

    def decode(
        self,
        bits,
        like: Optional[Sequence] = None,
        count: Optional[int] = None,
    ):
        """Decode ``bits`` with this coder's tree.

        :param bits: Bit string or iterable of 0/1 ints.
        :param like: Optional sample of the original input; a ``str`` sample
            makes the result a ``str`` and a ``bytes`` sample makes it
            ``bytes``. Otherwise the symbols are returned as a list.
        :param count: Number of symbols to decode, see :func:`huffman.decode`.
        :returns: The decoded message.
        :raises MalformedBitstreamError: If ``bits`` is not a valid encoding.
        """
        symbols = decode(bits, self.tree, count)
        if isinstance(like, str):
            return "".join(symbols)
        if isinstance(like, (bytes, bytearray)):
            return bytes(symbols)
        return symbols

    def encode_packed(self, data: Sequence) -> Tuple[bytes, int]:
        """Encode ``data`` and pack the bits into zero-padded bytes.

        :returns: Packed bytes and the number of meaningful bits.
        :rtype: Tuple[bytes, int]
        """
        payload, bit_length = pack_bits(self.encode(data))
        logger.debug(
            "Packed %d bits into %d bytes", bit_length, len(payload)
        )
        return payload, bit_length

    def decode_packed(
        self, payload: bytes, bit_length: int, like: Optional[Sequence] = None
    ):
        """Decode bytes produced by :meth:`encode_packed`.

        :raises MalformedBitstreamError: If the bits are not a valid encoding.
        :raises ValueError: If ``bit_length`` does not fit in ``payload``.
        """
        return self.decode(BitReader(payload, bit_length), like=like)

    def stats(
        self, data: Sequence, bits: Optional[str] = None
    ) -> CodingStats:
        """Compare the Huffman encoding of ``data`` to a fixed-width code.

        The fixed-width code spends ``ceil(log2(distinct))`` bits (at least
        one) on every symbol.

        :param data: The message to measure.
        :param bits: Encoding of ``data`` if the caller already has it.
        :raises UnknownSymbolError: If ``data`` has a symbol without a code.
        """
        if bits is None:
            bits = self.encode(data)
        encoded_bits = len(bits)
        distinct = len(self.codes)
        width = max(1, math.ceil(math.log2(distinct)))
        fixed_width_bits = width * len(data)
        return CodingStats(
            symbols=len(data),
            distinct=distinct,
            encoded_bits=encoded_bits,
            weighted_path_length=self.tree.weighted_path_length(),
            average_code_length=(
                encoded_bits / len(data) if len(data) else 0.0
            ),
            fixed_width_bits=fixed_width_bits,
            ratio=(
                fixed_width_bits / encoded_bits if encoded_bits else 0.0
            ),
        )
