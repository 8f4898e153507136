import pytest

from coder import HuffmanCoder
from errors import EmptyInputError, MalformedBitstreamError, UnknownSymbolError
from huffman import TieBreak


def test_coder_roundtrip_restores_input_type(message):
    coder = HuffmanCoder.from_data(message)
    bits = coder.encode(message)
    out = coder.decode(bits, like=message)
    assert type(out) is type(message)
    assert out == message


def test_coder_packed_roundtrip(message):
    coder = HuffmanCoder.from_data(message)
    payload, bit_length = coder.encode_packed(message)
    assert len(payload) == (bit_length + 7) // 8
    assert coder.decode_packed(payload, bit_length, like=message) == message


def test_coder_decode_without_sample_returns_list():
    coder = HuffmanCoder.from_data([3, 1, 3, 3])
    assert coder.decode(coder.encode([3, 1, 3, 3])) == [3, 1, 3, 3]


def test_coder_empty_input():
    with pytest.raises(EmptyInputError):
        HuffmanCoder.from_data("")
    with pytest.raises(EmptyInputError):
        HuffmanCoder({})


def test_coder_shares_one_tree():
    coder = HuffmanCoder.from_data("abacabad", tie_break="symbol")
    assert coder.tie_break is TieBreak.SYMBOL
    assert coder.frequencies == {"a": 4, "b": 2, "c": 1, "d": 1}
    assert coder.decode(coder.encode("dcba"), like="") == "dcba"
    assert coder.decode(coder.encode("cab"), like="") == "cab"


def test_coder_foreign_symbol_raises():
    coder = HuffmanCoder.from_data("abc")
    with pytest.raises(UnknownSymbolError):
        coder.encode("abd")


def test_coder_truncated_packed_stream_raises():
    coder = HuffmanCoder.from_data("abacabad")
    payload, bit_length = coder.encode_packed("abacabad")
    with pytest.raises(MalformedBitstreamError):
        coder.decode_packed(payload, bit_length - 1)


def test_coder_stats_abacabad():
    coder = HuffmanCoder.from_data("abacabad")
    stats = coder.stats("abacabad")
    assert stats.symbols == 8
    assert stats.distinct == 4
    assert stats.encoded_bits == 14
    assert stats.weighted_path_length == 14
    assert stats.average_code_length == pytest.approx(14 / 8)
    assert stats.fixed_width_bits == 16
    assert stats.ratio == pytest.approx(16 / 14)


def test_coder_stats_single_symbol():
    coder = HuffmanCoder.from_data("aaaa")
    stats = coder.stats("aaaa")
    assert stats.encoded_bits == 4
    assert stats.weighted_path_length == 0
    assert stats.fixed_width_bits == 4
    assert stats.ratio == pytest.approx(1.0)


def test_coder_stats_reuses_given_encoding():
    coder = HuffmanCoder.from_data("abacabad")
    bits = coder.encode("abacabad")
    assert coder.stats("abacabad", bits) == coder.stats("abacabad")
