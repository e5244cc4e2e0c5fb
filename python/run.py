import fire  # noqa

from huffzip.compression import HuffmanCompressor
from huffzip.tokenizers import Tokenizers, preprocess


def read_lines(in_file: str, normalize: bool = False) -> list[str]:
    # Split on "\n" only; a final newline leaves a trailing "" so that
    # "\n".join(lines) gives back the file exactly
    with open(in_file, "r", encoding="utf-8", newline="") as f:
        lines = f.read().split("\n")
    if normalize:
        lines = [preprocess(line) for line in lines]
    return lines


def write_lines(out_file: str, lines: list[str]) -> None:
    with open(out_file, "w", encoding="utf-8", newline="") as f:
        f.write("\n".join(lines))


def _compressor(mode: str, workers: int, verbose: bool = True) -> HuffmanCompressor:  # noqa
    if mode not in Tokenizers:
        raise ValueError(f"Unknown mode: {mode}")
    return HuffmanCompressor(mode, workers=workers, progress=True, verbose=verbose)  # noqa


def compress(in_file: str, out_file: str, mode: str = "char", normalize: bool = False, workers: int = 1):  # noqa
    lines = read_lines(in_file, normalize)
    data = _compressor(mode, workers).compress(lines)
    with open(out_file, "wb") as f:
        f.write(data)
    print(f"Wrote {len(data)} bytes ({len(lines)} lines) to {out_file}")


def decompress(in_file: str, out_file: str, workers: int = 1):
    with open(in_file, "rb") as f:
        data = f.read()
    lines = HuffmanCompressor(workers=workers, progress=True).decompress(data)
    write_lines(out_file, lines)
    print(f"Wrote {len(lines)} lines to {out_file}")


def roundtrip(in_file: str, mode: str = "char", normalize: bool = False, workers: int = 1):  # noqa
    lines = read_lines(in_file, normalize)

    comp = _compressor(mode, workers)
    encoded: bytes = comp.compress(lines)
    decoded: list[str] = comp.decompress(encoded)

    print("\nDecoding process:")

    if lines == decoded:
        print("Data successfully encoded and decoded!")
        print("Lines: ", len(lines))
        orig_bytes = len("\n".join(lines).encode("utf-8"))
        print(f"Original length: {orig_bytes} bytes")
        print(f"Container length: {len(encoded)} bytes")
        if len(encoded) > 0:
            print(f"Compression rate: {orig_bytes / len(encoded):.2f}x")
    else:
        mismatch = next(i for i, (a, b) in enumerate(zip(lines, decoded)) if a != b) if len(lines) == len(decoded) else None  # noqa
        print("Error: decoded data does not match original!")
        print(f"Line count: {len(lines)} -> {len(decoded)}, first mismatch: {mismatch}")  # noqa
        if mode == "word":
            print("Note: word mode does not preserve repeated or surrounding whitespace; try --mode=spaced")  # noqa
        raise RuntimeError("Decoded data does not match original!")


if __name__ == "__main__":
    fire.Fire({
        "compress": compress,
        "decompress": decompress,
        "roundtrip": roundtrip,
    })
