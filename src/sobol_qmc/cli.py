#!/usr/bin/env python
"""
Command-line interface for Sobol point generation.

This module provides the main CLI entrypoint for the sobol-points command.

Example usage:
    sobol-points --dimension 4 --n_points 16
    sobol-points --dimension 2 --n_points 8 --skip 1 --normal --format json
    sobol-points --dimension 3 --n_points 100 --stride 4 --offset 1
"""

import argparse
import json
import logging
import sys

import numpy as np

from sobol_qmc.config import SobolConfig, load_config
from sobol_qmc.errors import SobolError
from sobol_qmc.rng.normal import inverse_normal_cdf

logger = logging.getLogger(__name__)


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    args : list[str] | None
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Sobol low-discrepancy point generator",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON configuration file; command-line flags override its values",
    )
    parser.add_argument("--dimension", type=int, default=None, help="Number of dimensions")
    parser.add_argument("--n_points", type=int, default=16, help="Number of points to emit")
    parser.add_argument(
        "--skip", type=int, default=None, help="Number of leading points to discard"
    )
    parser.add_argument(
        "--stride",
        type=int,
        default=None,
        help="Leap-frog step: emit every stride-th point",
    )
    parser.add_argument(
        "--offset",
        type=int,
        default=None,
        help="Leap-frog residue class in [0, stride)",
    )
    parser.add_argument(
        "--bit_width", type=int, default=None, help="Bit width of the direction numbers"
    )
    parser.add_argument(
        "--table",
        type=str,
        default=None,
        help="JSON direction-vector table (default: built-in 16-dimensional table)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["csv", "json"],
        default="csv",
        help="Output format",
    )
    parser.add_argument(
        "--normal",
        action="store_true",
        help="Map points to standard normal variates",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args(args)


def build_config(parsed: argparse.Namespace) -> SobolConfig:
    """Merge the optional config file with command-line overrides."""
    data = load_config(parsed.config).to_dict() if parsed.config else {}

    overrides = {
        "dimension": parsed.dimension,
        "skip": parsed.skip,
        "stride": parsed.stride,
        "offset": parsed.offset,
        "bit_width": parsed.bit_width,
        "table_path": parsed.table,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})
    return SobolConfig.from_dict(data)


def generate_points(config: SobolConfig, n_points: int) -> np.ndarray:
    """Emit ``n_points`` points for the configuration."""
    if config.stride == 1:
        return config.build_generator().generate(n_points)
    return config.build_stream().take(n_points)


def format_points(points: np.ndarray, fmt: str, first_index: int, stride: int) -> str:
    if fmt == "json":
        return json.dumps(
            {
                "dimension": points.shape[1],
                "first_index": first_index,
                "stride": stride,
                "points": points.tolist(),
            },
            indent=2,
        )

    header = ",".join(["index"] + [f"x{d}" for d in range(points.shape[1])])
    lines = [header]
    for k, row in enumerate(points):
        values = ",".join(f"{x:.17g}" for x in row)
        lines.append(f"{first_index + k * stride},{values}")
    return "\n".join(lines)


def main(args: list[str] | None = None) -> int:
    """Main CLI entrypoint.

    Parameters
    ----------
    args : list[str] | None
        Command-line arguments. If None, uses sys.argv.

    Returns
    -------
    int
        Exit code (0 for success, 1 for configuration or range errors).
    """
    parsed = parse_args(args)

    if parsed.verbose and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.DEBUG)

    if parsed.n_points <= 0:
        print("Error: --n_points must be positive", file=sys.stderr)
        return 1

    try:
        config = build_config(parsed)
        points = generate_points(config, parsed.n_points)
    except SobolError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if parsed.normal:
        points = inverse_normal_cdf(points)

    logger.debug("Emitting %d points of dimension %d", points.shape[0], points.shape[1])
    first_index = config.skip + config.offset
    print(format_points(points, parsed.format, first_index, config.stride))
    return 0


if __name__ == "__main__":
    sys.exit(main())
