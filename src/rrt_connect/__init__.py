"""
Bidirectional RRT-Connect path planning in bounded n-dimensional spaces.
Contains the planners, the collision oracle and tree renderers.
"""

from .common.utils import Box, Sphere, segment_intersect
from .planner.config import PlannerConfig, PlannerConfigError
from .planner.rrt import RRT
from .planner.rrt_connect import PlannerSession, RRTConnect
from .planner.steer import ExtendStatus
from .planner.tree import Tree, TreeSnapshot

__all__ = [
    'Box',
    'Sphere',
    'segment_intersect',
    'PlannerConfig',
    'PlannerConfigError',
    'RRT',
    'RRTConnect',
    'PlannerSession',
    'ExtendStatus',
    'Tree',
    'TreeSnapshot',
]
