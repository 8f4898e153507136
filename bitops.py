from typing import Iterator, Tuple


class BitWriter:
    """Bit-packing writer for Huffman codes.

    Accumulates bits MSB-first into bytes. The final partial byte is padded
    with zeros on :meth:`flush`, so the number of meaningful bits has to be
    kept alongside the bytes (see :attr:`bit_length`).

    :ivar buffer: Internal byte buffer holding fully written bytes.
    :type buffer: bytearray
    :ivar bit_buffer: 8-bit scratch register for accumulating pending bits.
    :type bit_buffer: int
    :ivar bit_count: Number of valid bits currently stored in ``bit_buffer`` (0-7).
    :type bit_count: int
    :ivar bit_length: Total number of bits written so far.
    :type bit_length: int
    """

    def __init__(self):
        self.buffer = bytearray()
        self.bit_buffer = 0
        self.bit_count = 0
        self.bit_length = 0

    def write_bit(self, bit: int):
        """Append a single bit.

        :param bit: ``0`` or ``1``.
        :type bit: int
        :returns: None
        :rtype: None
        """
        self.bit_buffer = (self.bit_buffer << 1) | (bit & 1)
        self.bit_count += 1
        self.bit_length += 1
        if self.bit_count == 8:
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0

    def write_code(self, code: str):
        """Append a code given as a string of ``0``/``1`` characters.

        :param code: Bit string, e.g. ``"110"``.
        :type code: str
        :returns: None
        :rtype: None
        :raises ValueError: If ``code`` holds a character other than 0/1.
        """
        for char in code:
            if char == "0":
                self.write_bit(0)
            elif char == "1":
                self.write_bit(1)
            else:
                raise ValueError(f"Invalid bit character: {char!r}")

    def flush(self) -> bytes:
        """Return all bytes written so far, zero-padding the last one.

        Pending bits stay in the writer, so more bits can still be written
        and a later flush returns the longer stream.

        :returns: The packed bytes.
        :rtype: bytes
        """
        if self.bit_count > 0:
            return bytes(self.buffer) + bytes(
                [self.bit_buffer << (8 - self.bit_count)]
            )
        return bytes(self.buffer)


class BitReader:
    """Reads back the bits packed by :class:`BitWriter`.

    :ivar data: Packed bytes.
    :type data: bytes
    :ivar bit_length: Number of meaningful bits in ``data``; padding past it
        is never returned.
    :type bit_length: int
    :ivar pos: Index of the next bit to read.
    :type pos: int
    """

    def __init__(self, data: bytes, bit_length: int):
        """Create a bit reader.

        :param data: Source data to read from.
        :type data: bytes
        :param bit_length: Number of meaningful bits in ``data``.
        :type bit_length: int
        :raises ValueError: If ``bit_length`` does not fit in ``data``.
        """
        if bit_length < 0 or bit_length > len(data) * 8:
            raise ValueError(
                f"Bit length {bit_length} does not fit in {len(data)} bytes"
            )
        self.data = data
        self.bit_length = bit_length
        self.pos = 0

    def read_bit(self) -> int:
        """Read the next bit.

        :returns: ``0`` or ``1``.
        :rtype: int
        :raises EOFError: If all meaningful bits were already read.
        """
        if self.pos >= self.bit_length:
            raise EOFError("Unexpected end of data")
        byte = self.data[self.pos >> 3]
        bit = (byte >> (7 - (self.pos & 7))) & 1
        self.pos += 1
        return bit

    def __iter__(self) -> Iterator[int]:
        while self.pos < self.bit_length:
            yield self.read_bit()


def pack_bits(bits: str) -> Tuple[bytes, int]:
    """Pack a ``0``/``1`` string into bytes.

    :returns: The packed bytes and the number of meaningful bits.
    :rtype: Tuple[bytes, int]
    """
    writer = BitWriter()
    writer.write_code(bits)
    return writer.flush(), writer.bit_length


def unpack_bits(data: bytes, bit_length: int) -> str:
    return "".join(str(bit) for bit in BitReader(data, bit_length))
