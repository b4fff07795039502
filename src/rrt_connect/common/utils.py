import numpy as np


class Obstacle:
    """Read-only collidable region used by the collision oracle."""

    def contains(self, point):
        raise NotImplementedError

    def ray_distance(self, origin, direction):
        """Distance along a unit-length ray to the first hit, or None on a miss."""
        raise NotImplementedError

    @property
    def dim(self):
        return self.center.shape[0]


class Sphere(Obstacle):
    def __init__(self, center, radius):
        self.center = np.array(center, dtype=float)
        self.radius = float(radius)
        self.center.setflags(write=False)

    def contains(self, point):
        return np.linalg.norm(np.asarray(point, dtype=float) - self.center) <= self.radius

    def ray_distance(self, origin, direction):
        oc = np.asarray(origin, dtype=float) - self.center
        b = float(np.dot(oc, direction))
        c = float(np.dot(oc, oc)) - self.radius ** 2
        if c <= 0.0:
            # origin inside
            return 0.0
        disc = b * b - c
        if disc < 0.0:
            return None
        t = -b - np.sqrt(disc)
        if t < 0.0:
            return None
        return float(t)

    def __repr__(self):
        return f"Sphere(center={self.center.tolist()}, radius={self.radius})"


class Box(Obstacle):
    def __init__(self, center, extents):
        self.center = np.array(center, dtype=float)
        self.extents = np.array(extents, dtype=float)  # half-extents
        if self.center.shape != self.extents.shape:
            raise ValueError("Box center and extents must have the same dimension")
        if np.any(self.extents < 0):
            raise ValueError("Box extents must be non-negative")
        self.center.setflags(write=False)
        self.extents.setflags(write=False)

    @classmethod
    def from_bounds(cls, low, high):
        low = np.asarray(low, dtype=float)
        high = np.asarray(high, dtype=float)
        return cls((low + high) / 2.0, (high - low) / 2.0)

    @property
    def low(self):
        return self.center - self.extents

    @property
    def high(self):
        return self.center + self.extents

    def contains(self, point):
        p = np.array(point)
        return np.all(np.abs(p - self.center) <= self.extents)

    def ray_distance(self, origin, direction):
        """Slab test. Returns 0.0 when the origin is inside the box."""
        origin = np.asarray(origin, dtype=float)
        direction = np.asarray(direction, dtype=float)
        low, high = self.low, self.high

        t_near = -np.inf
        t_far = np.inf
        for o, d, lo, hi in zip(origin, direction, low, high):
            if abs(d) < 1e-12:
                if o < lo or o > hi:
                    return None
                continue
            t1 = (lo - o) / d
            t2 = (hi - o) / d
            if t1 > t2:
                t1, t2 = t2, t1
            t_near = max(t_near, t1)
            t_far = min(t_far, t2)
            if t_near > t_far:
                return None

        if t_far < 0.0:
            return None
        return float(max(t_near, 0.0))

    def __repr__(self):
        return f"Box(center={self.center.tolist()}, extents={self.extents.tolist()})"


def get_dist(p1, p2):
    return float(np.linalg.norm(np.asarray(p1, dtype=float) - np.asarray(p2, dtype=float)))


def normalize(v):
    v = np.asarray(v, dtype=float)
    n = np.linalg.norm(v)
    if n == 0.0:
        return np.zeros_like(v)
    return v / n


def sample_uniform(bounds, rng=None):
    """
    Uniform sample in bounds.
    If rng is provided, it must be a np.random.Generator.
    """
    if rng is None:
        return np.random.uniform(bounds[:, 0], bounds[:, 1])
    return rng.uniform(bounds[:, 0], bounds[:, 1])


def segment_intersect(obstacle, start, end):
    """
    Treat start->end as a ray of length |end - start| and return the distance
    at which it strikes the obstacle, or None if it misses or the hit lies at
    or beyond the end of the segment.
    """
    start = np.asarray(start, dtype=float)
    end = np.asarray(end, dtype=float)
    length = get_dist(start, end)
    if length == 0.0:
        return None

    direction = normalize(end - start)
    hit = obstacle.ray_distance(start, direction)
    if hit is not None and hit < length:
        return hit
    return None


def is_collision_free(p1, p2, obstacles):
    """Checks if line segment p1-p2 is collision-free."""
    for obs in obstacles:
        if segment_intersect(obs, p1, p2) is not None:
            return False
    return True


def path_length(path):
    path = np.asarray(path)
    if len(path) < 2:
        return 0.0
    return float(np.sum(np.linalg.norm(path[1:] - path[:-1], axis=1)))
