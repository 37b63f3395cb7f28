"""
Container Loading Planner

Greedy 3D container-loading engine: decides which cargo boxes fit into a
container and where, subject to non-overlap, full support, weight capacity
and no-stack-on-top constraints.
"""

__version__ = "0.1.0"
