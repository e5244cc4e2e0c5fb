from collections.abc import Sequence
from dataclasses import dataclass

from huffzip import codec
from huffzip.abc import Compressor, DecoderTable, EncoderTable, Tokenizer
from huffzip.codes import derive_decoder, derive_tables
from huffzip.container import CompressedData, deserialize, serialize
from huffzip.errors import SerializationError
from huffzip.freqs import learn_frequencies
from huffzip.tokenizers import Tokenizers, get_tokenizer
from huffzip.tree import HuffmanTree, build_huffman_tree, describe


@dataclass(frozen=True)
class HuffmanModel:
    tokenizer: Tokenizer
    encoder: EncoderTable
    decoder: DecoderTable
    tree: HuffmanTree | None = None


class HuffmanCompressor(Compressor):
    """Two-pass Huffman compressor over lines of text.

    The first pass learns token frequencies over all lines, the second
    encodes every line on its own with the resulting code.
    """

    def __init__(
        self,
        tokenizer: str | Tokenizer = "char",
        workers: int = 1,
        chunk_size: int | None = None,
        progress: bool = False,
        verbose: bool = False,
    ) -> None:
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.tokenizer = get_tokenizer(tokenizer)
        self.workers = workers
        self.chunk_size = chunk_size
        self.progress = progress
        self.verbose = verbose

    def learn(self, lines: Sequence[str]) -> HuffmanModel:
        freqs = learn_frequencies(lines, self.tokenizer, self.workers, self.chunk_size)  # noqa
        tree = build_huffman_tree(freqs)
        encoder, decoder = derive_tables(tree)

        if self.verbose:
            info = describe(tree)
            print("Tokenizer:", self.tokenizer.name)
            print("Alphabet size:", info["symbols"])
            print("Total tokens:", info["total"])
            lengths = sorted(len(c) for c in encoder.values())
            print(f"Codeword length: min={lengths[0]} max={lengths[-1]}")

        return HuffmanModel(self.tokenizer, encoder, decoder, tree)

    def compress(self, lines: Sequence[str], model: HuffmanModel | None = None) -> bytes:  # noqa
        if model is None:
            model = self.learn(lines)
        data = codec.encode(
            lines, model.tokenizer, model.encoder, self.workers, self.progress
        )
        if self.verbose:
            nbits = sum(len(d) for d in data)
            print(f"Encoded length: {nbits} bits = {nbits / 8:.2f} bytes")
        return serialize(CompressedData(model.tokenizer.name, model.encoder, data))

    def load(self, data: bytes, tokenizer: str | Tokenizer | None = None) -> tuple[HuffmanModel, list[str]]:  # noqa
        compressed = deserialize(data)
        decoder = derive_decoder(compressed.encoder)
        model = HuffmanModel(
            self._resolve_tokenizer(compressed.tokenizer, tokenizer),
            compressed.encoder,
            decoder,
        )
        return model, compressed.data

    def _resolve_tokenizer(self, name: str, override: str | Tokenizer | None) -> Tokenizer:  # noqa
        # An explicit tokenizer wins over the name stored in the container
        if override is not None:
            return get_tokenizer(override)
        if name == self.tokenizer.name:
            return self.tokenizer
        if name not in Tokenizers:
            raise SerializationError(
                f"Container was written with tokenizer {name!r}, pass a tokenizer to decode it"  # noqa
            )
        return get_tokenizer(name)

    def decompress(self, data: bytes, tokenizer: str | Tokenizer | None = None) -> list[str]:  # noqa
        model, lines = self.load(data, tokenizer)
        return codec.decode(
            lines, model.decoder, model.tokenizer, self.workers, self.progress
        )

    def decompress_isolated(self, data: bytes, tokenizer: str | Tokenizer | None = None) -> codec.DecodeReport:  # noqa
        model, lines = self.load(data, tokenizer)
        return codec.decode_isolated(
            lines, model.decoder, model.tokenizer, self.workers, self.progress
        )


def compress_as_chars(lines: Sequence[str], workers: int = 1) -> bytes:
    return HuffmanCompressor("char", workers=workers).compress(lines)


def compress_as_words(lines: Sequence[str], workers: int = 1) -> bytes:
    return HuffmanCompressor("word", workers=workers).compress(lines)


def decompress(data: bytes, tokenizer: str | Tokenizer | None = None, workers: int = 1) -> list[str]:  # noqa
    return HuffmanCompressor(workers=workers).decompress(data, tokenizer)
