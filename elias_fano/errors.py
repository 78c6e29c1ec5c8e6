from enum import Enum


class ErrorKind(Enum):
    OUT_OF_BOUNDS = "Index out of range attempted to be accessed"
    UNSORTED = "The iterator was not sorted"
    GREATER_THAN_UNIVERSE = "A value greater than the universe was found"


class EliasFanoError(Exception):
    """Base class for the three failures an EliasFano can report."""

    kind = None

    def __init__(self, index=None):
        super().__init__(self.kind.value)
        # element index (compress) or requested position (navigation)
        self.index = index


class OutOfBoundsError(EliasFanoError, IndexError):
    kind = ErrorKind.OUT_OF_BOUNDS


class UnsortedError(EliasFanoError, ValueError):
    kind = ErrorKind.UNSORTED


class GreaterThanUniverseError(EliasFanoError, ValueError):
    kind = ErrorKind.GREATER_THAN_UNIVERSE
