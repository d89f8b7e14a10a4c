"""
Splitting a Sobol sequence across independent workers.

Two decompositions are supported:

- leap-frogging: worker r of K owns indices ``r, r + K, r + 2K, ...``;
- blocking: worker r owns one contiguous range of indices.

Each worker owns its generator; nothing is shared between workers.
"""

import logging
import operator

import numpy as np

from sobol_qmc.errors import ConfigurationError, RangeError
from sobol_qmc.rng.direction_numbers import DEFAULT_BIT_WIDTH, DirectionVectorTable
from sobol_qmc.rng.sobol import SobolSequenceGenerator

logger = logging.getLogger(__name__)


def leapfrog_indices(offset: int, stride: int, n_points: int) -> np.ndarray:
    """Sequence indices ``offset, offset + stride, ...`` (n_points of them)."""
    if offset < 0:
        raise ValueError("offset must be non-negative")
    if stride < 1:
        raise ValueError("stride must be at least 1")
    if n_points < 0:
        raise ValueError("n_points must be non-negative")
    return offset + stride * np.arange(n_points, dtype=np.int64)


def block_ranges(n_points: int, n_workers: int) -> list[tuple[int, int]]:
    """
    Split indices ``0..n_points-1`` into contiguous half-open ranges.

    The first ``n_points % n_workers`` workers get one extra index.

    Returns
    -------
    list[tuple[int, int]]
        ``(start, stop)`` per worker, in worker order
    """
    if n_points < 0:
        raise ValueError("n_points must be non-negative")
    if n_workers < 1:
        raise ValueError("n_workers must be at least 1")

    base, extra = divmod(n_points, n_workers)
    ranges = []
    start = 0
    for r in range(n_workers):
        stop = start + base + (1 if r < extra else 0)
        ranges.append((start, stop))
        start = stop
    return ranges


def generate_block(
    start: int,
    stop: int,
    dimension: int,
    table: DirectionVectorTable | None = None,
    bit_width: int = DEFAULT_BIT_WIDTH,
) -> np.ndarray:
    """
    Points with indices ``start..stop-1`` from a generator owned by the caller.

    Returns
    -------
    np.ndarray
        Array of shape (stop - start, dimension)
    """
    if start < 0 or stop < start:
        raise ValueError("block must satisfy 0 <= start <= stop")

    generator = SobolSequenceGenerator(dimension, table=table, bit_width=bit_width)
    if stop == start:
        return np.empty((0, dimension), dtype=np.float64)
    if start > 0:
        generator.skip_to(start - 1)
    return generator.generate(stop - start)


class LeapfrogStream:
    """
    Worker-owned view of every ``stride``-th point of a Sobol sequence.

    Parameters
    ----------
    dimension : int
        Number of dimensions
    offset : int
        First index emitted by this worker (its residue class)
    stride : int
        Number of workers K; consecutive emitted indices differ by K
    table : DirectionVectorTable, optional
        Direction numbers (default: built-in table)
    bit_width : int, optional
        Expected bit width of the table (default: 30)

    Notes
    -----
    A stride of at most W is walked with recursive steps, costing
    ``O(stride * D)`` per point. Larger strides reposition the generator with
    the independent formula, costing ``O(W * D)`` per point.
    """

    def __init__(
        self,
        dimension: int,
        offset: int = 0,
        stride: int = 1,
        table: DirectionVectorTable | None = None,
        bit_width: int = DEFAULT_BIT_WIDTH,
    ):
        offset = operator.index(offset)
        stride = operator.index(stride)
        if offset < 0:
            raise ConfigurationError("offset must be non-negative")
        if stride < 1:
            raise ConfigurationError("stride must be at least 1")

        self._generator = SobolSequenceGenerator(dimension, table=table, bit_width=bit_width)
        self.offset = offset
        self.stride = stride
        self._next_index = offset

        logger.debug("Leapfrog stream: offset=%d, stride=%d, D=%d", offset, stride, dimension)

    @property
    def dimension(self) -> int:
        return self._generator.dimension

    @property
    def next_index(self) -> int:
        """Sequence index of the next point this stream emits."""
        return self._next_index

    def next(self) -> np.ndarray:
        """Emit the point at the stream's next index."""
        i = self._next_index
        if i > self._generator.max_index:
            raise RangeError(f"leapfrog index {i} exceeds 2**{self._generator.bit_width} - 1")

        # Short gaps are walked with the O(D) recursive step; longer ones jump
        # with the O(W * D) independent formula and take one recursive step
        gap = i - self._generator.index
        if gap < 1 or gap > self._generator.bit_width:
            if i == 0:
                self._generator.reset()
            else:
                self._generator.skip_to(i - 1)
            gap = 1
        for _ in range(gap):
            point = self._generator.next()

        self._next_index = i + self.stride
        return point

    def take(self, n_points: int) -> np.ndarray:
        """
        Emit the next ``n_points`` points of this stream.

        Returns
        -------
        np.ndarray
            Array of shape (n_points, dimension)
        """
        if n_points <= 0:
            raise ValueError("n_points must be positive")

        last = self._next_index + self.stride * (n_points - 1)
        if last > self._generator.max_index:
            raise RangeError(
                f"leapfrog index {last} exceeds 2**{self._generator.bit_width} - 1"
            )
        return np.vstack([self.next() for _ in range(n_points)])

    def __iter__(self):
        return self

    def __next__(self) -> np.ndarray:
        if self._next_index > self._generator.max_index:
            raise StopIteration
        return self.next()
