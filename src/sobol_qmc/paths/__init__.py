"""
Path construction from Sobol points.
"""

from sobol_qmc.paths.brownian_bridge import BridgeSchedule, BrownianBridgeMapper, build_schedule

__all__ = ["BridgeSchedule", "BrownianBridgeMapper", "build_schedule"]
