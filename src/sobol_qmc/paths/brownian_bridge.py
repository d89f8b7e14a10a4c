"""
Brownian bridge construction of Wiener paths from Sobol points.

The bridge fixes the terminal value first, then the midpoint, then the
midpoints of each half, and so on. Sobol dimension k drives the k-th point in
that order, so the well-distributed low dimensions determine the coarse shape
of the path and the high dimensions only fill in detail.

Given fixed neighbours W(t_l) and W(t_r), the point at t_m is

    W(t_m) = a * W(t_l) + b * W(t_r) + s * Z

with a = (t_r - t_m) / (t_r - t_l), b = (t_m - t_l) / (t_r - t_l) and
s = sqrt((t_m - t_l) * (t_r - t_m) / (t_r - t_l)).
"""

import logging
import math
from collections import deque
from dataclasses import dataclass

import numpy as np

from sobol_qmc.errors import ConfigurationError
from sobol_qmc.rng.normal import inverse_normal_cdf
from sobol_qmc.rng.sobol import SobolSequenceGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BridgeSchedule:
    """
    Construction order and interpolation coefficients for one time grid.

    Entry k of every tuple describes the point driven by dimension k.

    Attributes
    ----------
    n_steps : int
        Number of time steps N
    times : tuple[float, ...]
        Time grid t_1 < ... < t_N (t_0 = 0 is implicit)
    order : tuple[int, ...]
        Time-step index (1..N) constructed at position k
    left : tuple[int, ...]
        Already-fixed left neighbour of each step (0 is the origin)
    right : tuple[int, ...]
        Already-fixed right neighbour of each step (0 for the terminal step)
    left_weight : tuple[float, ...]
        Conditional-mean weight of the left neighbour
    right_weight : tuple[float, ...]
        Conditional-mean weight of the right neighbour
    std_dev : tuple[float, ...]
        Conditional standard deviation
    level : tuple[int, ...]
        Bisection level of each step (0 for the terminal step)
    """

    n_steps: int
    times: tuple[float, ...]
    order: tuple[int, ...]
    left: tuple[int, ...]
    right: tuple[int, ...]
    left_weight: tuple[float, ...]
    right_weight: tuple[float, ...]
    std_dev: tuple[float, ...]
    level: tuple[int, ...]

    @property
    def levels(self) -> int:
        """Number of bisection levels, ceil(log2(N)) + 1 on a full binary split."""
        return max(self.level) + 1

    def dimension_of(self, step: int) -> int:
        """Sobol dimension that drives time step ``step`` (1-based)."""
        if step < 1 or step > self.n_steps:
            raise ValueError(f"step must be between 1 and {self.n_steps}")
        return self.order.index(step)

    def step_of(self, dimension: int) -> int:
        """Time step driven by Sobol dimension ``dimension``."""
        return self.order[dimension]

    def build(self, z: np.ndarray) -> np.ndarray:
        """
        Turn standard normals into Brownian values W(t_1), ..., W(t_N).

        Parameters
        ----------
        z : np.ndarray
            Normals of shape (n_paths, N) or (N,), column k being dimension k

        Returns
        -------
        np.ndarray
            Brownian values with the same shape as ``z``
        """
        z = np.asarray(z, dtype=np.float64)
        squeeze = z.ndim == 1
        if squeeze:
            z = z[np.newaxis, :]
        if z.ndim != 2 or z.shape[1] != self.n_steps:
            raise ValueError(f"expected normals with {self.n_steps} columns, got shape {z.shape}")

        w = np.zeros((z.shape[0], self.n_steps + 1))
        for k, step in enumerate(self.order):
            w[:, step] = (
                self.left_weight[k] * w[:, self.left[k]]
                + self.right_weight[k] * w[:, self.right[k]]
                + self.std_dev[k] * z[:, k]
            )

        values = w[:, 1:]
        return values[0] if squeeze else values

    def increments(self, z: np.ndarray) -> np.ndarray:
        """Brownian increments W(t_k) - W(t_{k-1}) for the same input as ``build``."""
        values = self.build(z)
        return np.diff(values, prepend=0.0, axis=-1)


def build_schedule(n_steps: int, times=None) -> BridgeSchedule:
    """
    Compute the Brownian bridge schedule for a time grid.

    Parameters
    ----------
    n_steps : int
        Number of time steps N (must be >= 1)
    times : sequence of float, optional
        Strictly increasing positive times t_1..t_N (default: k / N)

    Returns
    -------
    BridgeSchedule
        Breadth-first bisection schedule
    """
    if n_steps < 1:
        raise ConfigurationError("n_steps must be at least 1")

    if times is None:
        grid = [k / n_steps for k in range(1, n_steps + 1)]
    else:
        grid = [float(t) for t in times]
        if len(grid) != n_steps:
            raise ConfigurationError(f"expected {n_steps} times, got {len(grid)}")
        if grid[0] <= 0.0 or any(b <= a for a, b in zip(grid, grid[1:])):
            raise ConfigurationError("times must be positive and strictly increasing")

    t = [0.0] + grid

    # Terminal point: W(t_N) = sqrt(t_N) * Z
    order = [n_steps]
    left = [0]
    right = [0]
    left_weight = [0.0]
    right_weight = [0.0]
    std_dev = [math.sqrt(t[n_steps])]
    level = [0]

    pending = deque([(0, n_steps, 1)])
    while pending:
        lo, hi, depth = pending.popleft()
        if hi - lo < 2:
            continue

        mid = lo + (hi - lo) // 2
        span = t[hi] - t[lo]
        order.append(mid)
        left.append(lo)
        right.append(hi)
        left_weight.append((t[hi] - t[mid]) / span)
        right_weight.append((t[mid] - t[lo]) / span)
        std_dev.append(math.sqrt((t[mid] - t[lo]) * (t[hi] - t[mid]) / span))
        level.append(depth)

        pending.append((lo, mid, depth + 1))
        pending.append((mid, hi, depth + 1))

    logger.debug("Built Brownian bridge schedule for %d steps", n_steps)

    return BridgeSchedule(
        n_steps=n_steps,
        times=tuple(grid),
        order=tuple(order),
        left=tuple(left),
        right=tuple(right),
        left_weight=tuple(left_weight),
        right_weight=tuple(right_weight),
        std_dev=tuple(std_dev),
        level=tuple(level),
    )


class BrownianBridgeMapper:
    """
    Generate Brownian paths from a Sobol generator through a Brownian bridge.

    Schedules are built once per time grid and reused for every draw.

    Parameters
    ----------
    generator : SobolSequenceGenerator
        Source of points; needs at least one dimension per time step
    skip_origin : bool, optional
        Skip the all-zero point at index 0 when the generator has not been
        used yet (default: True)
    """

    def __init__(self, generator: SobolSequenceGenerator, skip_origin: bool = True):
        self.generator = generator
        self.skip_origin = skip_origin
        self._schedules: dict[tuple, BridgeSchedule] = {}

    def schedule(self, n_steps: int, times=None) -> BridgeSchedule:
        """Return the cached schedule for the grid, building it on first use."""
        if n_steps > self.generator.dimension:
            raise ConfigurationError(
                f"{n_steps} time steps need {n_steps} dimensions, "
                f"generator has {self.generator.dimension}"
            )

        key = (n_steps, None if times is None else tuple(float(t) for t in times))
        if key not in self._schedules:
            self._schedules[key] = build_schedule(n_steps, times)
        return self._schedules[key]

    def normals(self, n_paths: int, n_steps: int) -> np.ndarray:
        """
        Draw ``n_paths`` Sobol points and map the first ``n_steps`` coordinates
        to standard normals.
        """
        if n_paths <= 0:
            raise ValueError("n_paths must be positive")
        if n_steps > self.generator.dimension:
            raise ConfigurationError(
                f"{n_steps} time steps need {n_steps} dimensions, "
                f"generator has {self.generator.dimension}"
            )

        if self.skip_origin and self.generator.index < 0:
            self.generator.skip_to(0)

        points = self.generator.generate(n_paths)[:, :n_steps]
        return inverse_normal_cdf(points)

    def paths(self, n_paths: int, n_steps: int, times=None) -> np.ndarray:
        """
        Generate Brownian paths.

        Returns
        -------
        np.ndarray
            Array of shape (n_paths, n_steps + 1) holding W(0) = 0 followed by
            W(t_1), ..., W(t_N)
        """
        schedule = self.schedule(n_steps, times)
        values = schedule.build(self.normals(n_paths, n_steps))
        return np.column_stack([np.zeros(n_paths), values])
