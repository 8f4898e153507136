import pytest

from bitops import BitWriter, BitReader, pack_bits, unpack_bits


def test_bitwriter_write_code_and_flush_basic():
    bw = BitWriter()
    bw.write_code("1010")
    bw.write_code("11110000")
    out = bw.flush()
    assert isinstance(out, (bytes, bytearray))
    assert len(out) == 2
    assert out[0] == 0b10101111
    assert out[1] == 0b00000000
    assert bw.bit_length == 12


def test_bitwriter_flush_keeps_pending_bits():
    bw = BitWriter()
    bw.write_code("1")
    assert bw.flush() == bytes([0b10000000])
    bw.write_code("1")
    assert bw.flush() == bytes([0b11000000])


def test_bitwriter_rejects_invalid_characters():
    bw = BitWriter()
    with pytest.raises(ValueError):
        bw.write_code("012")


def test_bitreader_reads_msb_first_and_skips_padding():
    br = BitReader(bytes([0b11001010, 0b10000000]), 9)
    assert [br.read_bit() for _ in range(3)] == [1, 1, 0]
    assert list(br) == [0, 1, 0, 1, 0, 1]


def test_bitreader_eoferror_past_bit_length():
    br = BitReader(b"\xF0", 4)
    for _ in range(4):
        br.read_bit()
    with pytest.raises(EOFError):
        _ = br.read_bit()


def test_bitreader_bit_length_must_fit():
    with pytest.raises(ValueError):
        BitReader(b"\x00", 9)


def test_pack_and_unpack_bits():
    payload, bit_length = pack_bits("01001100100111")
    assert payload == bytes([0x4C, 0x9C])
    assert bit_length == 14
    assert unpack_bits(payload, bit_length) == "01001100100111"


def test_pack_empty_is_noop():
    assert pack_bits("") == (b"", 0)
    assert unpack_bits(b"", 0) == ""
