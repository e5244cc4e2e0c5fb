import itertools

import pytest  # noqa

from huffzip.codes import (
    derive_decoder,
    derive_encoder,
    derive_tables,
    find_prefix_violation,
    is_prefix_free,
)
from huffzip.errors import CodeTableError
from huffzip.tree import HuffmanTree, Node, build_huffman_tree


def test_to_encoder_and_to_decoder():
    tree = build_huffman_tree({"a": 40, "b": 35, "c": 20, "d": 5})

    encoder, decoder = derive_tables(tree)
    assert encoder == {"a": "0", "b": "11", "c": "101", "d": "100"}

    assert len(decoder) == 4
    assert decoder["101"] == "c"


def test_optimal_lengths():
    encoder = derive_encoder(build_huffman_tree({"a": 40, "b": 35, "c": 20, "d": 5}))  # noqa
    lengths = {s: len(c) for s, c in encoder.items()}
    assert lengths == {"a": 1, "b": 2, "c": 3, "d": 3}


@pytest.mark.parametrize(
    "freqs",
    [
        {"a": 3, "b": 4, "c": 3, "d": 1},
        {s: i + 1 for i, s in enumerate("abcdefghijklmnopqrstuvwxyz")},
        {s: 2 ** i for i, s in enumerate("abcdefghijklmnop")},
        {"the": 50, "of": 20, "and": 20, "a": 9, "zebra": 1},
    ],
)
def test_prefix_free(freqs: dict[str, int]):
    encoder, decoder = derive_tables(build_huffman_tree(freqs))
    assert len(encoder) == len(freqs)
    assert len(decoder) == len(encoder)
    for (s1, c1), (s2, c2) in itertools.permutations(encoder.items(), 2):
        assert not c2.startswith(c1), f"{s1}={c1} prefixes {s2}={c2}"
    assert is_prefix_free(encoder)


def test_single_symbol_gets_one_bit():
    encoder = derive_encoder(build_huffman_tree({"x": 5}))
    assert encoder == {"x": "0"}


def test_duplicate_leaf_is_internal_corruption():
    tree = HuffmanTree(
        nodes=[Node(1, "a"), Node(1, "a"), Node(2, left=0, right=1)], root=2
    )
    with pytest.raises(CodeTableError):
        derive_encoder(tree)


def test_decoder_collision():
    with pytest.raises(CodeTableError):
        derive_decoder({"a": "01", "b": "01"})


def test_find_prefix_violation():
    assert find_prefix_violation({"a": "0", "b": "10", "c": "11"}) is None
    assert find_prefix_violation({"a": "1", "b": "00", "c": "10"}) == ("1", "10")  # noqa
    assert not is_prefix_free({"a": "0", "b": "01"})
