import numpy as np
import pytest

from rrt_connect.common.utils import Box
from rrt_connect.planner.config import PlannerConfig


@pytest.fixture
def open_config():
    return PlannerConfig(bounds=np.array([[-10.0, 10.0], [-10.0, 10.0]]), max_dist=1.0)


@pytest.fixture
def wall_scene():
    """Start and goal on either side of a wall that leaves gaps at top and bottom."""
    bounds = np.array([[-10.0, 10.0], [-10.0, 10.0]])
    start = np.array([-8.0, 0.0])
    goal = np.array([8.0, 0.0])
    obstacles = [Box.from_bounds([-1.0, -6.0], [1.0, 6.0])]
    return bounds, start, goal, obstacles
