"""Planner parameters and their validation."""

from dataclasses import dataclass, field

import numpy as np

# Defaults of the interactive planner
MAX_DIST = 0.4
ITERATIONS_PER_STEP = 10
CONNECT_ITERATIONS = 100
BACKOFF = 0.1


class PlannerConfigError(ValueError):
    """Raised when an episode is reset with unusable parameters."""


def as_bounds(bounds):
    """Coerce bounds to a float (d, 2) array of [low, high] rows."""
    try:
        arr = np.array(bounds, dtype=float)
    except (TypeError, ValueError) as exc:
        raise PlannerConfigError(f"bounds are not numeric: {bounds!r}") from exc
    if arr.ndim != 2 or arr.shape[1] != 2 or arr.shape[0] < 1:
        raise PlannerConfigError(f"bounds must have shape (d, 2), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise PlannerConfigError("bounds must be finite")
    if np.any(arr[:, 0] >= arr[:, 1]):
        raise PlannerConfigError(f"bounds have an empty extent: {arr.tolist()}")
    return arr


def _check_count(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
        raise PlannerConfigError(f"{name} must be an integer >= 1, got {value!r}")


@dataclass
class PlannerConfig:
    bounds: np.ndarray = field(default_factory=lambda: np.array([[-10.0, 10.0], [-10.0, 10.0]]))
    max_dist: float = MAX_DIST
    iterations_per_step: int = ITERATIONS_PER_STEP
    connect_iterations: int = CONNECT_ITERATIONS
    backoff: float = BACKOFF
    # 0.0 means a target only counts as reached on exact equality
    reach_tolerance: float = 0.0
    # RRT baseline only
    goal_sample_rate: float = 0.0

    @property
    def dim(self):
        return np.asarray(self.bounds).shape[0]

    def validate(self):
        """Check every field, normalising bounds in place. Returns self."""
        self.bounds = as_bounds(self.bounds)

        if not np.isfinite(self.max_dist) or self.max_dist <= 0:
            raise PlannerConfigError(f"max_dist must be > 0, got {self.max_dist}")
        _check_count("iterations_per_step", self.iterations_per_step)
        _check_count("connect_iterations", self.connect_iterations)
        if not np.isfinite(self.backoff) or self.backoff < 0:
            raise PlannerConfigError(f"backoff must be >= 0, got {self.backoff}")
        if not np.isfinite(self.reach_tolerance) or self.reach_tolerance < 0:
            raise PlannerConfigError(f"reach_tolerance must be >= 0, got {self.reach_tolerance}")
        if not 0.0 <= self.goal_sample_rate <= 1.0:
            raise PlannerConfigError(f"goal_sample_rate must be in [0, 1], got {self.goal_sample_rate}")

        self.max_dist = float(self.max_dist)
        self.iterations_per_step = int(self.iterations_per_step)
        self.connect_iterations = int(self.connect_iterations)
        self.backoff = float(self.backoff)
        self.reach_tolerance = float(self.reach_tolerance)
        self.goal_sample_rate = float(self.goal_sample_rate)
        return self


def as_configuration(q, dim, name="configuration"):
    """Return q as an immutable float vector of length dim."""
    try:
        arr = np.array(q, dtype=float).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise PlannerConfigError(f"{name} is not numeric: {q!r}") from exc
    if arr.shape[0] != dim:
        raise PlannerConfigError(f"{name} has dimension {arr.shape[0]}, expected {dim}")
    if not np.all(np.isfinite(arr)):
        raise PlannerConfigError(f"{name} must be finite, got {arr.tolist()}")
    arr.setflags(write=False)
    return arr
