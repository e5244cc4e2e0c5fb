from abc import ABC, abstractmethod
from collections.abc import Hashable, Sequence
from typing import TypeAlias


# A token produced by a Tokenizer (a character, a word, ...)
Symbol: TypeAlias = Hashable
FrequencyTable: TypeAlias = dict[Symbol, int]
# Bits are kept as strings of '0' / '1'
CodeWord: TypeAlias = str
EncoderTable: TypeAlias = dict[Symbol, CodeWord]
DecoderTable: TypeAlias = dict[CodeWord, Symbol]


class Tokenizer(ABC):
    name: str = ""

    @abstractmethod
    def tokenize(self, line: str) -> list[Symbol]:
        pass

    @abstractmethod
    def detokenize(self, symbols: Sequence[Symbol]) -> str:
        pass


class Compressor(ABC):
    @abstractmethod
    def compress(self, lines: Sequence[str]) -> bytes:
        pass

    @abstractmethod
    def decompress(self, data: bytes) -> list[str]:
        pass
