"""Binary container holding an encoder table and the encoded lines.

Layout (all integers big-endian)::

    magic        4s   b"HUFZ"
    version      B
    tokenizer    H    + utf-8 name
    n_entries    I
      symbol     I    + utf-8 bytes
      code_len   H    + ceil(code_len / 8) bytes, MSB first, zero padded
    n_lines      I
      bit_len    Q    + ceil(bit_len / 8) bytes, MSB first, zero padded

Every bit string carries its exact bit length, so payloads never rely on
byte alignment.

Symbols are stored as length-prefixed utf-8 text, so only tokenizers that
produce ``str`` symbols can be serialized; anything else raises
SerializationError.
"""
import struct
from dataclasses import dataclass, field

from huffzip.abc import EncoderTable
from huffzip.codes import find_prefix_violation
from huffzip.errors import CorruptDataError, SerializationError


MAGIC = b"HUFZ"
VERSION = 1
MAX_CODE_LEN = 0xFFFF


@dataclass
class CompressedData:
    tokenizer: str
    encoder: EncoderTable = field(default_factory=dict)
    data: list[str] = field(default_factory=list)


def pack_bits(bits: str) -> bytes:
    if not bits:
        return b""
    nbytes = (len(bits) + 7) // 8
    padded = bits.ljust(nbytes * 8, "0")
    return int(padded, 2).to_bytes(nbytes, "big")


def unpack_bits(payload: bytes, nbits: int) -> str:
    if nbits == 0:
        return ""
    padded = format(int.from_bytes(payload, "big"), "b").zfill(len(payload) * 8)  # noqa
    if "1" in padded[nbits:]:
        raise CorruptDataError(f"nonzero padding after {nbits} bits")
    return padded[:nbits]


def _check_bits(bits: str, what: str) -> None:
    if bits.strip("01"):
        raise SerializationError(f"{what} is not a bit string: {bits!r}")


def _pack_text(fmt: str, text: str, what: str) -> bytes:
    try:
        raw = text.encode("utf-8")
        return struct.pack(fmt, len(raw)) + raw
    except (UnicodeEncodeError, struct.error) as e:
        raise SerializationError(f"Cannot serialize {what} {text!r}: {e}") from e


def serialize(compressed: CompressedData) -> bytes:
    out = bytearray()
    out += MAGIC
    out += struct.pack(">B", VERSION)
    out += _pack_text(">H", compressed.tokenizer, "tokenizer name")

    # Sorted by (length, code) so equal tables give equal bytes
    entries = sorted(compressed.encoder.items(), key=lambda kv: (len(kv[1]), kv[1]))  # noqa
    out += struct.pack(">I", len(entries))
    for symbol, code in entries:
        if not isinstance(symbol, str):
            raise SerializationError(f"Only str symbols can be serialized, got {type(symbol).__name__}")  # noqa
        if not 0 < len(code) <= MAX_CODE_LEN:
            raise SerializationError(f"Codeword length {len(code)} out of range for {symbol!r}")  # noqa
        _check_bits(code, f"codeword of {symbol!r}")
        out += _pack_text(">I", symbol, "symbol")
        out += struct.pack(">H", len(code))
        out += pack_bits(code)

    out += struct.pack(">I", len(compressed.data))
    for i, bits in enumerate(compressed.data):
        _check_bits(bits, f"line {i}")
        out += struct.pack(">Q", len(bits))
        out += pack_bits(bits)

    return bytes(out)


class _Reader:
    def __init__(self, buf: bytes) -> None:
        self.buf = memoryview(buf)
        self.pos = 0

    def take(self, n: int) -> bytes:
        if self.pos + n > len(self.buf):
            raise SerializationError(
                f"Truncated container: need {n} bytes at offset {self.pos}, have {len(self.buf) - self.pos}"  # noqa
            )
        chunk = bytes(self.buf[self.pos:self.pos + n])
        self.pos += n
        return chunk

    def unpack(self, fmt: str) -> int:
        return struct.unpack(fmt, self.take(struct.calcsize(fmt)))[0]

    def text(self, fmt: str) -> str:
        raw = self.take(self.unpack(fmt))
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SerializationError(f"Invalid utf-8 at offset {self.pos - len(raw)}") from e  # noqa

    def bits(self, nbits: int) -> str:
        return unpack_bits(self.take((nbits + 7) // 8), nbits)

    def at_end(self) -> bool:
        return self.pos == len(self.buf)


def deserialize(buf: bytes) -> CompressedData:
    r = _Reader(buf)

    magic = r.take(len(MAGIC))
    if magic != MAGIC:
        raise SerializationError(f"Invalid magic: {magic!r}")
    version = r.unpack(">B")
    if version != VERSION:
        raise SerializationError(f"Unsupported container version: {version}")

    compressed = CompressedData(tokenizer=r.text(">H"))

    codes: set[str] = set()
    for _ in range(r.unpack(">I")):
        symbol = r.text(">I")
        code_len = r.unpack(">H")
        if code_len == 0:
            raise SerializationError(f"Zero-length codeword for {symbol!r}")
        code = r.bits(code_len)
        if symbol in compressed.encoder:
            raise CorruptDataError(f"Duplicate symbol in code table: {symbol!r}")
        if code in codes:
            raise CorruptDataError(f"Duplicate codeword in code table: {code!r}")
        codes.add(code)
        compressed.encoder[symbol] = code

    violation = find_prefix_violation(compressed.encoder)
    if violation is not None:
        raise CorruptDataError(
            f"Code table is not prefix-free: {violation[0]!r} prefixes {violation[1]!r}"  # noqa
        )

    for i in range(r.unpack(">I")):
        nbits = r.unpack(">Q")
        try:
            compressed.data.append(r.bits(nbits))
        except CorruptDataError as e:
            raise CorruptDataError(str(e), line_index=i) from e

    if not r.at_end():
        raise SerializationError(f"{len(r.buf) - r.pos} trailing bytes after container")  # noqa

    return compressed
