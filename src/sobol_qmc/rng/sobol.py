"""
Sobol low-discrepancy sequence generators.

Two formulas produce the same integers:

- the independent formula, ``x_i = XOR of m[b] for every set bit b of gray(i)``,
  which gives random access to any index in O(W);
- the recursive formula, ``x_{i+1} = x_i XOR m[c]`` with c the lowest zero bit
  of i, which walks the sequence in O(1) per step.

SobolDimensionGenerator owns the state of one dimension. SobolSequenceGenerator
drives D of them in lock-step and normalises the raw W-bit integers to [0, 1).
"""

import logging
import operator

import numpy as np

from sobol_qmc.errors import ConfigurationError, RangeError
from sobol_qmc.rng.direction_numbers import (
    DEFAULT_BIT_WIDTH,
    DirectionVector,
    DirectionVectorTable,
    default_table,
)
from sobol_qmc.rng.gray_code import gray_code, lowest_zero_bit, lowest_zero_bits, set_bits
from sobol_qmc.rng.normal import inverse_normal_cdf

logger = logging.getLogger(__name__)


def sobol_value(i: int, m: DirectionVector) -> int:
    """
    Raw Sobol integer at index i for one dimension (independent formula).

    Parameters
    ----------
    i : int
        Sequence index in ``[0, 2**W - 1]``
    m : DirectionVector
        Direction numbers of the dimension

    Returns
    -------
    int
        W-bit integer; divide by ``2**W`` for the coordinate in [0, 1)
    """
    i = _check_index(i, m.bit_width)

    y = 0
    for b in set_bits(gray_code(i)):
        y ^= m[b]
    return y


def _check_index(i, bit_width: int) -> int:
    # numpy integers from index arrays become plain ints
    i = operator.index(i)
    if i < 0 or i > (1 << bit_width) - 1:
        raise RangeError(f"index {i} outside [0, 2**{bit_width} - 1]")
    return i


class SobolDimensionGenerator:
    """
    One-dimensional Sobol generator with random access and recursive stepping.

    The generator starts at index 0 with value 0. Each ``advance()`` moves to
    the next index and returns its raw integer.

    Parameters
    ----------
    direction_vector : DirectionVector
        Direction numbers of this dimension
    """

    def __init__(self, direction_vector: DirectionVector):
        self._m = direction_vector
        self._bit_width = direction_vector.bit_width
        self._max_index = (1 << self._bit_width) - 1

        self._index = 0
        self._value = self.value_at(0)

    @property
    def direction_vector(self) -> DirectionVector:
        return self._m

    @property
    def bit_width(self) -> int:
        return self._bit_width

    @property
    def index(self) -> int:
        """Index of the current value."""
        return self._index

    @property
    def value(self) -> int:
        """Raw integer at the current index."""
        return self._value

    def value_at(self, i: int) -> int:
        """Raw integer at index i, without touching the generator state."""
        return sobol_value(i, self._m)

    def advance(self) -> int:
        """
        Step to the next index using the recursive formula.

        Returns
        -------
        int
            Raw integer at the new index

        Raises
        ------
        RangeError
            If the current index is already ``2**W - 1``
        """
        if self._index >= self._max_index:
            raise RangeError(
                f"cannot advance past index 2**{self._bit_width} - 1"
            )

        c = lowest_zero_bit(self._index)
        self._value ^= self._m[c]
        self._index += 1
        return self._value

    def reseed(self, i: int) -> None:
        """Jump to index i using the independent formula."""
        i = _check_index(i, self._bit_width)
        value = self.value_at(i)
        self._index = i
        self._value = value

    def reset(self) -> None:
        """Return to index 0."""
        self._index = 0
        self._value = 0

    def _restore(self, index: int, value: int) -> None:
        self._index = index
        self._value = value

    def __repr__(self) -> str:
        return f"SobolDimensionGenerator(index={self._index}, bit_width={self._bit_width})"


class SobolSequenceGenerator:
    """
    D-dimensional Sobol sequence generator.

    Composes one SobolDimensionGenerator per dimension and advances them
    together. The first point returned by ``next()`` is index 0, the origin.

    Parameters
    ----------
    dimension : int
        Number of dimensions D (at least 1, at most the table size)
    table : DirectionVectorTable, optional
        Direction numbers (default: built-in 16-dimensional W=30 table)
    bit_width : int, optional
        Expected bit width W of the table rows (default: 30)

    Notes
    -----
    An instance is not safe for concurrent ``next()`` calls. Give each worker
    its own generator and position it with ``skip_to``.
    """

    def __init__(
        self,
        dimension: int,
        table: DirectionVectorTable | None = None,
        bit_width: int = DEFAULT_BIT_WIDTH,
    ):
        if table is None:
            table = default_table()

        if dimension < 1:
            raise ConfigurationError("dimension must be at least 1")
        if dimension > table.dimensions:
            raise ConfigurationError(
                f"dimension {dimension} exceeds the {table.dimensions} rows of the "
                f"direction vector table"
            )
        if table.bit_width != bit_width:
            raise ConfigurationError(
                f"direction vectors have bit width {table.bit_width}, expected {bit_width}"
            )

        self._table = table
        self._dimension = dimension
        self._bit_width = bit_width
        self._max_index = (1 << bit_width) - 1
        self._scale = float(1 << bit_width)

        self._generators = [SobolDimensionGenerator(table[d]) for d in range(dimension)]
        self._directions = table.as_array()[:dimension]

        # Index of the last emitted point, -1 before the first one
        self._index = -1

        logger.debug("Created Sobol generator: D=%d, W=%d", dimension, bit_width)

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def bit_width(self) -> int:
        return self._bit_width

    @property
    def table(self) -> DirectionVectorTable:
        return self._table

    @property
    def max_index(self) -> int:
        return self._max_index

    @property
    def index(self) -> int:
        """Index of the last emitted point (-1 if none has been emitted)."""
        return self._index

    def next(self) -> np.ndarray:
        """
        Emit the next point of the sequence.

        Returns
        -------
        np.ndarray
            Read-only array of shape (dimension,) with values in [0, 1)

        Raises
        ------
        RangeError
            If index ``2**W - 1`` has already been emitted
        """
        if self._index < 0:
            raw = [g.value for g in self._generators]
        elif self._index >= self._max_index:
            raise RangeError(f"Sobol sequence exhausted at index 2**{self._bit_width} - 1")
        else:
            raw = [g.advance() for g in self._generators]

        self._index += 1
        return self._normalize(raw)

    def skip_to(self, i: int) -> None:
        """
        Reposition the generator at index i.

        The following ``next()`` returns the point at index ``i + 1``.

        Raises
        ------
        RangeError
            If i is outside ``[0, 2**W - 1]``; the state is left unchanged
        """
        i = _check_index(i, self._bit_width)

        for g in self._generators:
            g.reseed(i)
        self._index = i

        logger.debug("Sobol generator repositioned at index %d", i)

    def point_at(self, i: int) -> np.ndarray:
        """Point at index i, without changing the generator state."""
        i = _check_index(i, self._bit_width)
        return self._normalize([g.value_at(i) for g in self._generators])

    def generate(self, n_points: int) -> np.ndarray:
        """
        Emit the next ``n_points`` points in one batch.

        Equivalent to ``n_points`` calls of ``next()``, including the final
        generator state.

        Parameters
        ----------
        n_points : int
            Number of points (must be positive)

        Returns
        -------
        np.ndarray
            Array of shape (n_points, dimension) with values in [0, 1)
        """
        if n_points <= 0:
            raise ValueError("n_points must be positive")

        first = self._index + 1
        last = self._index + n_points
        if last > self._max_index:
            raise RangeError(
                f"cannot emit {n_points} points after index {self._index}: "
                f"exceeds 2**{self._bit_width} - 1"
            )

        # Known state: the dimension generators sit at max(index, 0)
        start = max(self._index, 0)
        y0 = np.array([g.value for g in self._generators], dtype=np.uint64)

        c = lowest_zero_bits(np.arange(start, last, dtype=np.int64))
        steps = self._directions[:, c].T
        states = np.vstack([y0, y0 ^ np.bitwise_xor.accumulate(steps, axis=0)])

        emitted = states[first - start:]
        for d, g in enumerate(self._generators):
            g._restore(last, int(states[-1, d]))
        self._index = last

        return emitted.astype(np.float64) / self._scale

    def generate_normal(self, n_points: int) -> np.ndarray:
        """
        Emit the next ``n_points`` points mapped to standard normal variates.

        Notes
        -----
        The origin point maps to about -6.4 in every coordinate; skip index 0
        (``skip_to(0)``) before drawing normals for simulation.
        """
        return inverse_normal_cdf(self.generate(n_points))

    def reset(self) -> None:
        """Restart the sequence so that ``next()`` returns the origin again."""
        for g in self._generators:
            g.reset()
        self._index = -1

    def _normalize(self, raw) -> np.ndarray:
        point = np.array(raw, dtype=np.float64) / self._scale
        point.flags.writeable = False
        return point

    def __iter__(self):
        return self

    def __next__(self) -> np.ndarray:
        if self._index >= self._max_index:
            raise StopIteration
        return self.next()

    def __repr__(self) -> str:
        return (
            f"SobolSequenceGenerator(dimension={self._dimension}, "
            f"bit_width={self._bit_width}, index={self._index})"
        )
