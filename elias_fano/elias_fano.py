import logging
import math

from elias_fano.bitvector import BitVector, most_significant_bit, read_range, set_range
from elias_fano.errors import GreaterThanUniverseError, OutOfBoundsError, UnsortedError

logger = logging.getLogger(__name__)

VALUE_BITS = 64

_LAYOUT_FIELDS = (
    "universe",
    "n",
    "lower_bits",
    "higher_bits_length",
    "mask",
    "lower_bits_offset",
    "bv_len",
)


class EliasFano:
    """
    Elias-Fano encoding of a non-decreasing sequence of n integers in [0, universe].

    The buffer holds an upper region where element i sets bit
    (v >> lower_bits) + i + 1, followed by n fixed-width slots holding the
    low bits of each element. A cursor (position, value, high_bits_pos)
    walks the upper region marker by marker to decode.
    """

    def __init__(self, universe, n):
        if n <= 0:
            raise ValueError(f"element count must be positive, got {n}")
        if universe < 0:
            raise ValueError(f"universe must be non-negative, got {universe}")

        self.universe = universe
        self.n = n
        self.lower_bits = most_significant_bit(universe // n) if universe > n else 0
        self.higher_bits_length = n + (universe >> self.lower_bits) + 2
        self.mask = (1 << self.lower_bits) - 1
        self.lower_bits_offset = self.higher_bits_length
        self.bv_len = self.lower_bits_offset + n * self.lower_bits
        # the last low slot ends on bit bv_len itself
        self.bitvector = BitVector(self.bv_len + 1)

        self._value = 0
        self._position = 0
        self.high_bits_pos = 0

        logger.debug(
            "EliasFano layout: universe=%d n=%d lower_bits=%d bv_len=%d",
            universe, n, self.lower_bits, self.bv_len,
        )

    def compress(self, elems):
        """
        Encode an ascending iterable of at most n values. Must be called once,
        right after construction. On error the instance is unusable.
        """
        last = 0
        count = 0
        for i, elem in enumerate(elems):
            if elem < 0:
                raise ValueError(f"Value must be non-negative, got {elem} at index {i}")
            if i > 0 and elem < last:
                raise UnsortedError(i)
            if elem > self.universe:
                raise GreaterThanUniverseError(i)

            high = (elem >> self.lower_bits) + i + 1
            self.bitvector.set_bit(high, 1)
            offset = self.lower_bits_offset + i * self.lower_bits
            set_range(self.bitvector, offset, elem & self.mask, self.lower_bits)

            last = elem
            count += 1
            if i == 0:
                self._value = elem
                self.high_bits_pos = high

        logger.debug("Compressed %d elements into %d bits", count, self.bv_len)

    def visit(self, position):
        """Move the cursor to `position` and return the value there."""
        if position < 0 or position > self.size():
            raise OutOfBoundsError(position)

        if position == self._position:
            return self._value

        if position < self._position:
            self.reset()

        pos = self.high_bits_pos
        for _ in range(position - self._position):
            pos = self.bitvector.next_set_bit(pos + 1, self.higher_bits_length)

        self._position = position
        self._read_current_value(pos)
        return self._value

    def next(self):
        if self._position + 1 >= self.size():
            raise OutOfBoundsError(self._position + 1)

        self._position += 1
        self._read_current_value(self.high_bits_pos + 1)
        return self._value

    def skip(self, k):
        if k < 0:
            raise ValueError(f"skip only moves forward, got {k}")
        return self.visit(self._position + k)

    def reset(self):
        self._position = 0
        self._read_current_value(0)

    def position(self):
        return self._position

    def value(self):
        return self._value

    def size(self):
        return self.n

    def bit_size(self):
        return self.bv_len

    def into_vec(self):
        """Decode the whole sequence, leaving the cursor on the last element."""
        self.reset()
        vals = [self._value]
        for _ in range(self.n - 1):
            vals.append(self.next())
        return vals

    def _read_current_value(self, start):
        # Past the last marker the scan stops on the sentinel slot at
        # higher_bits_length, which decodes to the first value above universe.
        self.high_bits_pos = self.bitvector.next_set_bit(start, self.higher_bits_length)

        low = 0
        if self._position < self.n:
            offset = self.lower_bits_offset + self._position * self.lower_bits
            low = read_range(self.bitvector, offset, self.lower_bits)

        self._value = ((self.high_bits_pos - self._position - 1) << self.lower_bits) | low

    def compression_stats(self):
        """Size metrics against a plain array of 64-bit integers."""
        original_size = self.n * VALUE_BITS
        compressed_size = self.bit_size()
        # log2 C(universe + n, n): bits needed for any n-multiset of [0, universe]
        lower_bound = (
            math.lgamma(self.universe + self.n + 1)
            - math.lgamma(self.n + 1)
            - math.lgamma(self.universe + 1)
        ) / math.log(2)

        return {
            "original_size": original_size,
            "compressed_size": compressed_size,
            "compression_ratio": original_size / compressed_size,
            "space_saving": 1 - compressed_size / original_size,
            "bits_per_element": compressed_size / self.n,
            "lower_bound": lower_bound,
            "entropy_efficiency": lower_bound / compressed_size,
        }

    def to_dict(self):
        """Plain-data snapshot: layout fields, cursor state and raw buffer words."""
        data = {field: getattr(self, field) for field in _LAYOUT_FIELDS}
        data.update(
            position=self._position,
            value=self._value,
            high_bits_pos=self.high_bits_pos,
            words=self.bitvector.to_words(),
        )
        return data

    @classmethod
    def from_dict(cls, data):
        ef = cls.__new__(cls)
        ef.__setstate__(data)
        return ef

    def __getstate__(self):
        return self.to_dict()

    def __setstate__(self, state):
        for field in _LAYOUT_FIELDS:
            setattr(self, field, state[field])
        self._position = state["position"]
        self._value = state["value"]
        self.high_bits_pos = state["high_bits_pos"]
        self.bitvector = BitVector.from_words(self.bv_len + 1, state["words"])

    def __eq__(self, other):
        if not isinstance(other, EliasFano):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __len__(self):
        return self.n

    def __repr__(self):
        return (
            f"EliasFano(universe={self.universe}, n={self.n}, "
            f"position={self._position}, value={self._value})"
        )

    def __str__(self):
        return (
            "\n"
            f"    Universe: {self.universe}\n"
            f"    Elements: {self.n}\n"
            f"    Lower_bits: {self.lower_bits}\n"
            f"    Higher_bits_length: {self.higher_bits_length}\n"
            f"    Mask: {bin(self.mask)}\n"
            f"    Lower_bits_offset: {self.lower_bits_offset}\n"
            f"    Bitvector length: {self.bv_len}\n"
        )
