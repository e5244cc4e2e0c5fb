from collections import Counter
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from huffzip.abc import FrequencyTable, Tokenizer


def split_chunks(lines: Sequence[str], workers: int, chunk_size: int | None = None) -> list[Sequence[str]]:  # noqa
    """Split lines into contiguous chunks, one per unit of work."""
    if len(lines) == 0:
        return []
    if chunk_size is None:
        chunk_size = -(-len(lines) // max(1, workers))
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return [lines[i:i + chunk_size] for i in range(0, len(lines), chunk_size)]


def count_chunk(lines: Iterable[str], tokenizer: Tokenizer) -> Counter:
    freqs: Counter = Counter()
    for line in lines:
        freqs.update(tokenizer.tokenize(line))
    return freqs


def merge_frequencies(tables: Iterable[FrequencyTable]) -> FrequencyTable:
    merged: Counter = Counter()
    for table in tables:
        merged.update(table)
    return dict(merged)


def learn_frequencies(
    lines: Sequence[str],
    tokenizer: Tokenizer,
    workers: int = 1,
    chunk_size: int | None = None,
) -> FrequencyTable:
    chunks = split_chunks(lines, workers, chunk_size)

    if workers <= 1 or len(chunks) <= 1:
        return merge_frequencies(count_chunk(c, tokenizer) for c in chunks)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        local = list(pool.map(lambda c: count_chunk(c, tokenizer), chunks))
    return merge_frequencies(local)
