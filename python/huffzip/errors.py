from typing import Any


class HuffmanError(Exception):
    """Base class of every error raised by huffzip."""


class EmptyAlphabetError(HuffmanError, ValueError):
    def __init__(self, message: str = "Cannot build a Huffman tree from an empty frequency table") -> None:  # noqa
        super().__init__(message)


class UnknownSymbolError(HuffmanError, KeyError):
    """A token has no codeword in the encoder table.

    Happens when a table learned on one corpus is used to encode another.
    """

    def __init__(self, symbol: Any, line_index: int | None = None) -> None:
        self.symbol = symbol
        self.line_index = line_index
        super().__init__(symbol)

    def __str__(self) -> str:
        where = f" on line {self.line_index}" if self.line_index is not None else ""  # noqa
        return f"Unknown symbol {self.symbol!r}{where}"


class CorruptDataError(HuffmanError, ValueError):
    def __init__(self, message: str, line_index: int | None = None) -> None:
        self.line_index = line_index
        if line_index is not None:
            message = f"line {line_index}: {message}"
        super().__init__(message)


class SerializationError(HuffmanError, ValueError):
    pass


class CodeTableError(HuffmanError, RuntimeError):
    """Two symbols ended up with the same codeword (internal corruption)."""
