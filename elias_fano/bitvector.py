import numpy as np

WORD_BITS = 64
WORD_SHIFT = 6
WORD_MASK = WORD_BITS - 1


def most_significant_bit(x):
    """0-based index of the highest set bit of x."""
    if x <= 0:
        raise ValueError(f"most significant bit undefined for {x}")
    return x.bit_length() - 1


class BitVector:
    """Fixed-capacity bit buffer stored as uint64 words."""

    def __init__(self, size):
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        self.size = size
        self.words = np.zeros((size + WORD_MASK) >> WORD_SHIFT, dtype=np.uint64)

    @classmethod
    def from_words(cls, size, words):
        bv = cls(size)
        if len(words) != len(bv.words):
            raise ValueError(
                f"expected {len(bv.words)} words for {size} bits, got {len(words)}"
            )
        bv.words[:] = np.asarray(words, dtype=np.uint64)
        return bv

    def to_words(self):
        return self.words.tolist()

    def __len__(self):
        return self.size

    def __eq__(self, other):
        if not isinstance(other, BitVector):
            return NotImplemented
        return self.size == other.size and np.array_equal(self.words, other.words)

    def __repr__(self):
        return f"BitVector(size={self.size}, ones={self.count_ones()})"

    def _check(self, i):
        if not 0 <= i < self.size:
            raise IndexError(f"bit {i} out of range for buffer of {self.size} bits")

    def get_bit(self, i):
        self._check(i)
        return (int(self.words[i >> WORD_SHIFT]) >> (i & WORD_MASK)) & 1

    def set_bit(self, i, value):
        self._check(i)
        bit = np.uint64(1) << np.uint64(i & WORD_MASK)
        if value:
            self.words[i >> WORD_SHIFT] |= bit
        else:
            self.words[i >> WORD_SHIFT] &= ~bit

    def next_set_bit(self, start, stop=None):
        """
        Index of the first set bit in [start, stop), or stop if there is none.
        Scans a word at a time, so the cost grows with the distance covered.
        """
        if stop is None or stop > self.size:
            stop = self.size
        if start >= stop:
            return stop

        word_index = start >> WORD_SHIFT
        last_word = (stop - 1) >> WORD_SHIFT
        # drop the bits below start in the first word
        word = (int(self.words[word_index]) >> (start & WORD_MASK)) << (start & WORD_MASK)

        while True:
            if word:
                bit = (word_index << WORD_SHIFT) + (word & -word).bit_length() - 1
                return bit if bit < stop else stop
            word_index += 1
            if word_index > last_word:
                return stop
            word = int(self.words[word_index])

    def count_ones(self):
        return sum(bin(w).count("1") for w in self.words.tolist())

    def write_bits(self, start, width, bits):
        """Store the low `width` bits of `bits` at start .. start+width-1, LSB first."""
        if width == 0:
            return
        self._check(start)
        self._check(start + width - 1)
        pos = start
        while width:
            word_index = pos >> WORD_SHIFT
            shift = pos & WORD_MASK
            take = min(width, WORD_BITS - shift)
            chunk = (1 << take) - 1
            word = int(self.words[word_index]) & ~(chunk << shift)
            self.words[word_index] = word | ((bits & chunk) << shift)
            bits >>= take
            width -= take
            pos += take

    def read_bits(self, start, width):
        if width == 0:
            return 0
        self._check(start)
        self._check(start + width - 1)
        bits = 0
        read = 0
        pos = start
        while read < width:
            word_index = pos >> WORD_SHIFT
            shift = pos & WORD_MASK
            take = min(width - read, WORD_BITS - shift)
            chunk = (int(self.words[word_index]) >> shift) & ((1 << take) - 1)
            bits |= chunk << read
            read += take
            pos += take
        return bits


def _reverse_bits(value, width):
    return int(format(value, f"0{width}b")[::-1], 2)


def set_range(bitvector, offset, value, width):
    """Write the low `width` bits of value into offset+1 .. offset+width, MSB first."""
    if width == 0:
        return
    # bits are LSB first inside a word, so the field goes in reversed
    bitvector.write_bits(offset + 1, width, _reverse_bits(value & ((1 << width) - 1), width))


def read_range(bitvector, offset, width):
    if width == 0:
        return 0
    return _reverse_bits(bitvector.read_bits(offset + 1, width), width)
