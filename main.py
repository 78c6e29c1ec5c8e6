# main.py
import logging

from elias_fano.elias_fano import EliasFano
from tests.sequences import generate_sorted_sequence


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    values = [0, 5, 9, 800, 1000]
    ef = EliasFano(1000, len(values))
    ef.compress(values)
    print(ef)

    print(f"First value: {ef.value()}")
    print(f"Next values: {ef.next()}, {ef.next()}")
    print(f"visit(4): {ef.visit(4)}")
    print(f"visit(1): {ef.visit(1)}")
    print(f"Decoded: {ef.into_vec()}")

    test_compression(generate_sorted_sequence(100_000, universe=10_000_000, seed=7))


def test_compression(values):
    ef = EliasFano(values[-1], len(values))
    ef.compress(values)
    metrics = ef.compression_stats()

    print(f"Original size (bits): {metrics['original_size']}")
    print(f"Compressed size (bits): {metrics['compressed_size']}")
    print(f"Compression ratio: {metrics['compression_ratio']:.2f}")
    print(f"Space saving: {metrics['space_saving']*100:.2f}%")
    print(f"Bits per element: {metrics['bits_per_element']:.2f}")
    print(f"Entropy efficiency: {metrics['entropy_efficiency']:.2f}")


if __name__ == "__main__":
    main()
