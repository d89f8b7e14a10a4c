"""
Exception types raised by the Sobol sequence generators.
"""


class SobolError(Exception):
    """Base class for all errors raised by sobol_qmc."""


class ConfigurationError(SobolError, ValueError):
    """
    Invalid generator configuration.

    Raised at construction time when the requested dimensionality exceeds the
    direction-vector table, when a direction-vector row does not match the
    configured bit width, or when a configuration file is malformed.
    """


class RangeError(SobolError, OverflowError):
    """
    Sequence index outside ``[0, 2**W - 1]``.

    Raised by the call that would leave the representable index range; the
    generator state is left untouched.
    """
