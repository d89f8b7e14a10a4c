"""
Sobol sequence generation: direction numbers, gray-code indexing, generators.
"""

from sobol_qmc.rng.direction_numbers import (
    DirectionVector,
    DirectionVectorTable,
    default_table,
)
from sobol_qmc.rng.gray_code import gray_code, lowest_zero_bit
from sobol_qmc.rng.leapfrog import LeapfrogStream, block_ranges, generate_block, leapfrog_indices
from sobol_qmc.rng.normal import inverse_normal_cdf
from sobol_qmc.rng.sobol import SobolDimensionGenerator, SobolSequenceGenerator, sobol_value

__all__ = [
    "DirectionVector",
    "DirectionVectorTable",
    "default_table",
    "gray_code",
    "lowest_zero_bit",
    "sobol_value",
    "SobolDimensionGenerator",
    "SobolSequenceGenerator",
    "LeapfrogStream",
    "leapfrog_indices",
    "block_ranges",
    "generate_block",
    "inverse_normal_cdf",
]
