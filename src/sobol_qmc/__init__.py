"""
Sobol Quasi-Monte Carlo Sequences

Multi-dimensional Sobol low-discrepancy sequence generation with gray-code
indexing, leap-frogging for parallel workers and Brownian bridge paths.
"""

from sobol_qmc._version import __version__

# Errors
from sobol_qmc.errors import ConfigurationError, RangeError, SobolError

# Sequence generation
from sobol_qmc.rng.direction_numbers import DirectionVector, DirectionVectorTable, default_table
from sobol_qmc.rng.gray_code import gray_code
from sobol_qmc.rng.leapfrog import LeapfrogStream
from sobol_qmc.rng.sobol import SobolDimensionGenerator, SobolSequenceGenerator, sobol_value

# Paths
from sobol_qmc.paths.brownian_bridge import BridgeSchedule, BrownianBridgeMapper, build_schedule

# Configuration
from sobol_qmc.config import SobolConfig, load_config

__all__ = [
    # Version
    "__version__",
    # Errors
    "SobolError",
    "ConfigurationError",
    "RangeError",
    # Sequence generation
    "DirectionVector",
    "DirectionVectorTable",
    "default_table",
    "gray_code",
    "sobol_value",
    "SobolDimensionGenerator",
    "SobolSequenceGenerator",
    "LeapfrogStream",
    # Paths
    "BridgeSchedule",
    "BrownianBridgeMapper",
    "build_schedule",
    # Configuration
    "SobolConfig",
    "load_config",
]
