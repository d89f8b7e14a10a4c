"""
Configuration for building Sobol generators.
"""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from sobol_qmc.errors import ConfigurationError
from sobol_qmc.rng.direction_numbers import DEFAULT_BIT_WIDTH, DirectionVectorTable, default_table
from sobol_qmc.rng.leapfrog import LeapfrogStream
from sobol_qmc.rng.sobol import SobolSequenceGenerator


@dataclass
class SobolConfig:
    """
    Settings for one Sobol point stream.

    Attributes
    ----------
    dimension : int
        Number of dimensions D
    bit_width : int
        Bit width W of the direction numbers
    table_path : str | None
        JSON direction-vector table; None uses the built-in table
    skip : int
        Number of leading points to discard
    stride : int
        Leap-frog step (number of workers); 1 means the plain sequence
    offset : int
        Leap-frog residue class of this worker, in ``[0, stride)``
    """

    dimension: int
    bit_width: int = DEFAULT_BIT_WIDTH
    table_path: str | None = None
    skip: int = 0
    stride: int = 1
    offset: int = 0

    def __post_init__(self):
        for name in ("dimension", "bit_width", "skip", "stride", "offset"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if self.table_path is not None and not isinstance(self.table_path, (str, Path)):
            raise ConfigurationError(f"table_path must be a path, got {self.table_path!r}")

        if self.dimension < 1:
            raise ConfigurationError("dimension must be at least 1")
        if self.skip < 0:
            raise ConfigurationError("skip must be non-negative")
        if self.stride < 1:
            raise ConfigurationError("stride must be at least 1")
        if not 0 <= self.offset < self.stride:
            raise ConfigurationError("offset must be in [0, stride)")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SobolConfig":
        """Build a config from a plain dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"unknown configuration keys: {sorted(unknown)}")
        if "dimension" not in data:
            raise ConfigurationError("configuration must set 'dimension'")
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return asdict(self)

    def load_table(self) -> DirectionVectorTable:
        if self.table_path is None:
            return default_table()
        return DirectionVectorTable.from_json(self.table_path)

    def build_generator(self) -> SobolSequenceGenerator:
        """Generator positioned so that ``next()`` returns point ``skip``."""
        generator = SobolSequenceGenerator(
            self.dimension, table=self.load_table(), bit_width=self.bit_width
        )
        if self.skip > 0:
            generator.skip_to(self.skip - 1)
        return generator

    def build_stream(self) -> LeapfrogStream:
        """Leap-frog stream over indices ``skip + offset + k * stride``."""
        return LeapfrogStream(
            self.dimension,
            offset=self.skip + self.offset,
            stride=self.stride,
            table=self.load_table(),
            bit_width=self.bit_width,
        )


def load_config(path) -> SobolConfig:
    """Read a SobolConfig from a JSON file."""
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path}: invalid JSON ({e})") from e
    except OSError as e:
        raise ConfigurationError(f"{path}: cannot read configuration ({e})") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a JSON object")
    return SobolConfig.from_dict(data)
