import struct

import pytest  # noqa

from huffzip.compression import HuffmanCompressor
from huffzip.container import (
    MAGIC,
    CompressedData,
    deserialize,
    pack_bits,
    serialize,
    unpack_bits,
)
from huffzip.errors import CorruptDataError, SerializationError


def sample() -> CompressedData:
    return CompressedData(
        tokenizer="word",
        encoder={"the": "0", "of": "10", "ünï": "110", "a b": "111"},
        data=["0", "", "10110111", "0" * 9, "111" * 100],
    )


def test_round_trip():
    compressed = sample()
    buf = serialize(compressed)
    assert buf.startswith(MAGIC)
    assert deserialize(buf) == compressed


def test_codewords_of_different_lengths_are_distinct():
    compressed = CompressedData("char", {"a": "0", "b": "00", "c": "000"}, [])
    # Not a valid Huffman table, but lengths must survive serialization
    with pytest.raises(CorruptDataError):
        deserialize(serialize(compressed))

    compressed = CompressedData("char", {"a": "0", "b": "10", "c": "110", "d": "111"}, ["0", "00", "000"])  # noqa
    assert deserialize(serialize(compressed)).data == ["0", "00", "000"]


def test_deterministic_bytes():
    c1 = sample()
    c2 = CompressedData(c1.tokenizer, dict(reversed(list(c1.encoder.items()))), list(c1.data))  # noqa
    assert serialize(c1) == serialize(c2)


def test_same_table_from_different_partitions():
    lines = [f"row {i} of the table {'z' * (i % 3)}" for i in range(30)]
    b1 = HuffmanCompressor("char").compress(lines)
    b2 = HuffmanCompressor("char", workers=4, chunk_size=1).compress(lines)
    b3 = HuffmanCompressor("char", workers=3, chunk_size=7).compress(lines)
    assert b1 == b2 == b3


@pytest.mark.parametrize("bits", ["1", "10100101", "101001011", "0000000"])
def test_pack_bits(bits: str):
    payload = pack_bits(bits)
    assert len(payload) == (len(bits) + 7) // 8
    assert unpack_bits(payload, len(bits)) == bits


def test_bad_magic():
    buf = serialize(sample())
    with pytest.raises(SerializationError):
        deserialize(b"ZIP!" + buf[4:])


def test_bad_version():
    buf = serialize(sample())
    with pytest.raises(SerializationError):
        deserialize(buf[:4] + b"\x09" + buf[5:])


@pytest.mark.parametrize("cut", [1, 5, 12, 30])
def test_truncated(cut: int):
    buf = serialize(sample())
    with pytest.raises(SerializationError):
        deserialize(buf[:-cut])


def test_trailing_bytes():
    with pytest.raises(SerializationError):
        deserialize(serialize(sample()) + b"\x00")


def test_nonzero_padding():
    buf = bytearray(serialize(CompressedData("char", {"a": "0", "b": "1"}, ["1"])))  # noqa
    assert buf[-1] == 0x80
    buf[-1] = 0x81
    with pytest.raises(CorruptDataError) as e:
        deserialize(bytes(buf))
    assert e.value.line_index == 0


def test_duplicate_symbol():
    entry = struct.pack(">I", 1) + b"a" + struct.pack(">H", 1)
    buf = (
        MAGIC + b"\x01" + struct.pack(">H", 4) + b"char"
        + struct.pack(">I", 2)
        + entry + b"\x00"
        + entry + b"\x80"
        + struct.pack(">I", 0)
    )
    with pytest.raises(CorruptDataError):
        deserialize(buf)


def test_zero_length_codeword():
    buf = (
        MAGIC + b"\x01" + struct.pack(">H", 4) + b"char"
        + struct.pack(">I", 1)
        + struct.pack(">I", 1) + b"a" + struct.pack(">H", 0)
        + struct.pack(">I", 0)
    )
    with pytest.raises(SerializationError):
        deserialize(buf)


def test_unserializable():
    with pytest.raises(SerializationError):
        serialize(CompressedData("char", {1: "0"}, []))
    with pytest.raises(SerializationError):
        serialize(CompressedData("char", {"a": "0"}, ["012"]))
    with pytest.raises(SerializationError):
        serialize(CompressedData("char", {"a": ""}, []))
