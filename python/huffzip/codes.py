from huffzip.abc import CodeWord, DecoderTable, EncoderTable
from huffzip.errors import CodeTableError
from huffzip.tree import HuffmanTree


# Codeword of the only symbol when the root itself is a leaf
SINGLE_SYMBOL_CODE: CodeWord = "0"


def derive_encoder(tree: HuffmanTree) -> EncoderTable:
    encoder: EncoderTable = {}
    seen: set[CodeWord] = set()

    stack: list[tuple[int, CodeWord]] = [(tree.root, "")]
    while stack:
        index, path = stack.pop()
        node = tree.nodes[index]
        if node.is_leaf:
            code = path or SINGLE_SYMBOL_CODE
            if code in seen or node.symbol in encoder:
                raise CodeTableError(f"Codeword {code!r} assigned twice (symbol {node.symbol!r})")  # noqa
            seen.add(code)
            encoder[node.symbol] = code
        else:
            stack.append((node.left, path + "0"))
            stack.append((node.right, path + "1"))

    return encoder


def derive_decoder(encoder: EncoderTable) -> DecoderTable:
    decoder: DecoderTable = {}
    for symbol, code in encoder.items():
        if code in decoder:
            raise CodeTableError(
                f"Symbols {decoder[code]!r} and {symbol!r} share codeword {code!r}"
            )
        decoder[code] = symbol
    assert len(decoder) == len(encoder)
    return decoder


def derive_tables(tree: HuffmanTree) -> tuple[EncoderTable, DecoderTable]:
    encoder = derive_encoder(tree)
    return encoder, derive_decoder(encoder)


def find_prefix_violation(encoder: EncoderTable) -> tuple[CodeWord, CodeWord] | None:  # noqa
    """Return a (prefix, code) pair breaking the prefix-free property, if any.

    After sorting, a codeword that is a prefix of others sorts immediately
    before one of them, so only neighbours need comparing.
    """
    codes = sorted(encoder.values())
    for shorter, longer in zip(codes, codes[1:]):
        if longer.startswith(shorter):
            return shorter, longer
    return None


def is_prefix_free(encoder: EncoderTable) -> bool:
    return find_prefix_violation(encoder) is None
