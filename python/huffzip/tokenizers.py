import re
from collections.abc import Sequence

from huffzip.abc import Symbol, Tokenizer


_NON_ALNUM = re.compile(r"[^0-9A-Za-z]+")
_WORD_OR_SPACE = re.compile(r"\s+|\S+")


def preprocess(line: str) -> str:
    # Collapse everything outside [0-9A-Za-z] to one space, then lowercase
    return _NON_ALNUM.sub(" ", line).lower()


class CharTokenizer(Tokenizer):
    name = "char"

    def tokenize(self, line: str) -> list[Symbol]:
        return list(line)

    def detokenize(self, symbols: Sequence[Symbol]) -> str:
        return "".join(symbols)


class WordTokenizer(Tokenizer):
    """Whitespace-separated words, joined back with a single space.

    Not an exact inverse: runs of whitespace, tabs and leading/trailing
    whitespace come back as single spaces (or vanish). Use
    SpacedWordTokenizer when lines must round-trip byte for byte.

    Splits on any Unicode whitespace (``str.split``), not only ASCII
    whitespace, so e.g. a no-break space also separates words.
    """

    name = "word"

    def tokenize(self, line: str) -> list[Symbol]:
        return line.split()

    def detokenize(self, symbols: Sequence[Symbol]) -> str:
        return " ".join(symbols)


class SpacedWordTokenizer(Tokenizer):
    """Words and the whitespace runs between them are both tokens."""

    name = "spaced"

    def tokenize(self, line: str) -> list[Symbol]:
        return _WORD_OR_SPACE.findall(line)

    def detokenize(self, symbols: Sequence[Symbol]) -> str:
        return "".join(symbols)


Tokenizers: dict[str, type[Tokenizer]] = {
    "char": CharTokenizer,
    "word": WordTokenizer,
    "spaced": SpacedWordTokenizer,
}


def get_tokenizer(tokenizer: str | Tokenizer) -> Tokenizer:
    if isinstance(tokenizer, Tokenizer):
        return tokenizer
    if tokenizer not in Tokenizers:
        raise ValueError(f"Unknown tokenizer: {tokenizer}")
    return Tokenizers[tokenizer]()
