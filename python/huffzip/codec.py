from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TypeVar

import tqdm  # noqa

from huffzip.abc import DecoderTable, EncoderTable, Symbol, Tokenizer
from huffzip.errors import CorruptDataError, HuffmanError, UnknownSymbolError


T = TypeVar("T")
R = TypeVar("R")

_MISSING = object()


@dataclass
class DecodeReport:
    lines: list[str | None] = field(default_factory=list)
    errors: dict[int, HuffmanError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def _map_lines(
    fn: Callable[[int, T], R],
    items: Sequence[T],
    workers: int,
    progress: bool,
    desc: str,
) -> list[R]:
    # Results come back in input order whatever the worker count
    pbar = tqdm.tqdm(total=len(items), desc=desc, disable=not progress)
    try:
        if workers <= 1:
            results = []
            for i, item in enumerate(items):
                results.append(fn(i, item))
                pbar.update(1)
            return results

        def job(pair: tuple[int, T]) -> R:
            return fn(*pair)

        results = []
        with ThreadPoolExecutor(max_workers=workers) as pool:
            for r in pool.map(job, enumerate(items)):
                results.append(r)
                pbar.update(1)
        return results
    finally:
        pbar.close()


def encode_tokens(
    tokens: Sequence[Symbol],
    encoder: EncoderTable,
    line_index: int | None = None,
) -> str:
    parts = []
    for token in tokens:
        code = encoder.get(token)
        if code is None:
            raise UnknownSymbolError(token, line_index)
        parts.append(code)
    return "".join(parts)


def encode(
    lines: Sequence[str],
    tokenizer: Tokenizer,
    encoder: EncoderTable,
    workers: int = 1,
    progress: bool = False,
) -> list[str]:
    def encode_line(i: int, line: str) -> str:
        return encode_tokens(tokenizer.tokenize(line), encoder, i)

    return _map_lines(encode_line, lines, workers, progress, "Encoding")


def decode_bits(
    bits: str,
    decoder: DecoderTable,
    line_index: int | None = None,
    max_code_len: int | None = None,
) -> list[Symbol]:
    if max_code_len is None:
        max_code_len = max((len(c) for c in decoder), default=0)

    symbols: list[Symbol] = []
    candidate = ""
    for pos, bit in enumerate(bits):
        if bit != "0" and bit != "1":
            raise CorruptDataError(f"invalid bit {bit!r} at position {pos}", line_index)  # noqa
        candidate += bit
        symbol = decoder.get(candidate, _MISSING)
        if symbol is not _MISSING:
            symbols.append(symbol)
            candidate = ""
        elif len(candidate) >= max_code_len:
            raise CorruptDataError(
                f"no codeword matches {candidate!r} at position {pos}", line_index
            )

    if candidate:
        raise CorruptDataError(
            f"bitstream ends inside a codeword ({len(candidate)} dangling bits)",
            line_index,
        )
    return symbols


def decode(
    encoded_lines: Sequence[str],
    decoder: DecoderTable,
    tokenizer: Tokenizer,
    workers: int = 1,
    progress: bool = False,
) -> list[str]:
    max_code_len = max((len(c) for c in decoder), default=0)

    def decode_line(i: int, bits: str) -> str:
        return tokenizer.detokenize(decode_bits(bits, decoder, i, max_code_len))

    return _map_lines(decode_line, encoded_lines, workers, progress, "Decoding")


def decode_isolated(
    encoded_lines: Sequence[str],
    decoder: DecoderTable,
    tokenizer: Tokenizer,
    workers: int = 1,
    progress: bool = False,
) -> DecodeReport:
    """Decode every line, recording failures instead of raising.

    Failed lines are ``None`` in ``report.lines`` and their error is kept in
    ``report.errors`` under the line index.
    """
    max_code_len = max((len(c) for c in decoder), default=0)

    def decode_line(i: int, bits: str) -> str | HuffmanError:
        try:
            symbols = decode_bits(bits, decoder, i, max_code_len)
        except CorruptDataError as e:
            return e
        return tokenizer.detokenize(symbols)

    report = DecodeReport()
    results = _map_lines(decode_line, encoded_lines, workers, progress, "Decoding")  # noqa
    for i, r in enumerate(results):
        if isinstance(r, HuffmanError):
            report.lines.append(None)
            report.errors[i] = r
        else:
            report.lines.append(r)
    return report
