#!/usr/bin/env python
"""
Brownian bridge demo.

Prints the dimension assignment of the bridge for a path of n_steps and
compares the terminal-value statistics of Sobol bridge paths with the exact
N(0, T) distribution.
"""

import sys
from pathlib import Path

import numpy as np

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sobol_qmc.paths.brownian_bridge import BrownianBridgeMapper
from sobol_qmc.rng.sobol import SobolSequenceGenerator


def main(n_steps: int = 8, n_paths: int = 4095) -> int:
    generator = SobolSequenceGenerator(dimension=n_steps)
    mapper = BrownianBridgeMapper(generator)
    schedule = mapper.schedule(n_steps)

    print("\n" + "=" * 70)
    print(f"Brownian bridge schedule, {n_steps} steps ({schedule.levels} levels)")
    print("=" * 70)
    print(f"{'Dim':<6} {'Step':<6} {'Level':<7} {'Left':<6} {'Right':<7} "
          f"{'wL':<8} {'wR':<8} {'Std':<8}")
    print("-" * 70)
    for k, step in enumerate(schedule.order):
        print(
            f"{k:<6} {step:<6} {schedule.level[k]:<7} {schedule.left[k]:<6} "
            f"{schedule.right[k]:<7} {schedule.left_weight[k]:<8.4f} "
            f"{schedule.right_weight[k]:<8.4f} {schedule.std_dev[k]:<8.4f}"
        )

    paths = mapper.paths(n_paths, n_steps)
    terminal = paths[:, -1]
    print(f"\n{n_paths} Sobol paths:")
    print(f"  mean W(T):     {np.mean(terminal):+.6f}  (exact 0)")
    print(f"  var W(T):      {np.var(terminal):.6f}  (exact {schedule.times[-1]:.6f})")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
