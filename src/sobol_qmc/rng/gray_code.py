"""
Gray-code indexing for Sobol sequences.

The Sobol value at index i is an XOR of direction numbers selected by the set
bits of ``gray_code(i)``. Consecutive gray codes differ in exactly one bit,
the position of the lowest zero bit of i, which is what makes the recursive
update a single XOR per dimension.
"""

import operator

import numpy as np


def gray_code(i: int) -> int:
    """
    Reflected binary gray code of a non-negative integer.

    Parameters
    ----------
    i : int
        Sequence index (must be >= 0)

    Returns
    -------
    int
        ``i ^ (i >> 1)``
    """
    i = operator.index(i)
    if i < 0:
        raise ValueError("index must be non-negative")
    return i ^ (i >> 1)


def lowest_zero_bit(i: int) -> int:
    """
    Position (0-based) of the rightmost zero bit of i.

    This is the single bit in which ``gray_code(i)`` and ``gray_code(i + 1)``
    differ, i.e. the number of trailing one bits of i.

    Parameters
    ----------
    i : int
        Non-negative integer

    Returns
    -------
    int
        Bit position c such that ``(i >> c) & 1 == 0`` and all lower bits are 1
    """
    i = operator.index(i)
    if i < 0:
        raise ValueError("index must be non-negative")
    # Isolate the lowest zero bit of i as the lowest set bit of ~i
    return ((i + 1) & ~i).bit_length() - 1


def set_bits(n: int):
    """Yield the positions of the set bits of n, lowest first."""
    b = 0
    while n:
        if n & 1:
            yield b
        n >>= 1
        b += 1


def lowest_zero_bits(indices: np.ndarray) -> np.ndarray:
    """
    Vectorised ``lowest_zero_bit`` over an array of non-negative indices.

    Parameters
    ----------
    indices : np.ndarray
        Integer array of non-negative indices below ``2**62``

    Returns
    -------
    np.ndarray
        int64 array of bit positions, same shape as ``indices``
    """
    x = np.asarray(indices, dtype=np.int64)
    if np.any(x < 0):
        raise ValueError("indices must be non-negative")

    # (x + 1) & ~x is a power of two; its exponent is the bit position
    isolated = ((x + 1) & ~x).astype(np.float64)
    return np.log2(isolated).astype(np.int64)
