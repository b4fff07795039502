import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from matplotlib.patches import Circle, Rectangle
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401
from mpl_toolkits.mplot3d.art3d import Line3DCollection

from rrt_connect.common.utils import Box, Sphere
from rrt_connect.planner.config import as_bounds

START_COLOR = "green"
GOAL_COLOR = "red"
SOLVED_TREE_COLOR = "gray"
PATH_COLOR = "blue"


def _planner_snapshots(planner):
    """Tree snapshots of an RRTConnect (two trees) or RRT (one tree) planner."""
    if hasattr(planner, "snapshots"):
        snaps = planner.snapshots()
        return [] if snaps is None else list(snaps)
    if getattr(planner, "tree", None) is not None:
        return [planner.tree.snapshot()]
    return []


def snapshot_segments(snapshot):
    """(M, 2, d) array of parent->child segments of a tree snapshot."""
    child = np.nonzero(snapshot.parents >= 0)[0]
    if child.size == 0:
        return np.zeros((0, 2, snapshot.positions.shape[1]))
    parent = snapshot.parents[child]
    return np.stack([snapshot.positions[parent], snapshot.positions[child]], axis=1)


def _extract_nodes_and_edges(planner):
    """Return (nodes: (N,d) array, edges: list of (p,q) pairs) over all trees of a planner."""
    nodes = []
    edges = []
    for snap in _planner_snapshots(planner):
        nodes.append(snap.positions)
        edges.extend((seg[0], seg[1]) for seg in snapshot_segments(snap))

    if not nodes:
        return np.zeros((0, 2)), []
    return np.vstack(nodes), edges


def _is_3d(ax):
    return getattr(ax, "name", "") == "3d"


def plot_obstacles(ax, obstacles, color="gray", alpha=0.4):
    """Draw boxes and spheres (first two or three axes)."""
    for obs in obstacles:
        if _is_3d(ax):
            if isinstance(obs, Sphere):
                u, v = np.mgrid[0:2 * np.pi:15j, 0:np.pi:8j]
                x = obs.center[0] + obs.radius * np.cos(u) * np.sin(v)
                y = obs.center[1] + obs.radius * np.sin(u) * np.sin(v)
                z = obs.center[2] + obs.radius * np.cos(v)
                ax.plot_wireframe(x, y, z, color=color, alpha=alpha)
            elif isinstance(obs, Box):
                lo, hi = obs.low[:3], obs.high[:3]
                corners = np.array([[x, y, z] for x in (lo[0], hi[0]) for y in (lo[1], hi[1]) for z in (lo[2], hi[2])])
                segs = [(corners[i], corners[j]) for i in range(8) for j in range(i + 1, 8)
                        if np.count_nonzero(corners[i] != corners[j]) == 1]
                ax.add_collection3d(Line3DCollection(segs, colors=color, alpha=alpha))
        else:
            if isinstance(obs, Sphere):
                ax.add_patch(Circle(obs.center[:2], obs.radius, color=color, alpha=alpha))
            elif isinstance(obs, Box):
                lo = obs.low[:2]
                w, h = 2.0 * obs.extents[:2]
                ax.add_patch(Rectangle(lo, w, h, color=color, alpha=alpha))


def plot_tree(ax, snapshot, color="gray", node_size=6, node_alpha=0.5, edge_alpha=0.6):
    """Plot tree nodes and edges from a snapshot. Returns number of nodes plotted."""
    pts = snapshot.positions
    if pts.size == 0:
        return 0

    segs = snapshot_segments(snapshot)
    if _is_3d(ax):
        ax.scatter(pts[:, 0], pts[:, 1], pts[:, 2], c=color, s=node_size, alpha=node_alpha)
        if len(segs):
            ax.add_collection3d(Line3DCollection(segs[:, :, :3], colors=color, linewidths=0.5, alpha=edge_alpha))
    else:
        ax.scatter(pts[:, 0], pts[:, 1], c=color, s=node_size, alpha=node_alpha)
        if len(segs):
            ax.add_collection(LineCollection(segs[:, :, :2], colors=color, linewidths=0.5, alpha=edge_alpha))
    return pts.shape[0]


def plot_path(ax, path, color=PATH_COLOR, linewidth=2.0, zorder=10):
    if path is None:
        return
    p = np.asarray(path)
    if p.size == 0:
        return
    if _is_3d(ax):
        ax.plot(p[:, 0], p[:, 1], p[:, 2], color=color, linewidth=linewidth, zorder=zorder)
    else:
        ax.plot(p[:, 0], p[:, 1], color=color, linewidth=linewidth, zorder=zorder, marker="o", markersize=2)


def plot_planner(planner, obstacles=(), ax=None, title=None, out_file=None):
    """
    Draw a planner's trees, obstacles and, once solved, its path.

    Before a solve the start tree is green and the goal tree red; after a
    solve both trees are grey and the path is drawn over them.
    """
    bounds = as_bounds(planner.config.bounds)
    dim = bounds.shape[0]
    if dim < 2:
        raise ValueError("plotting needs at least two dimensions")
    fig = None
    if ax is None:
        fig = plt.figure(figsize=(8, 8))
        ax = fig.add_subplot(111, projection="3d" if dim >= 3 else None)

    plot_obstacles(ax, obstacles)

    path, success, cost = planner.get_best_solution()
    snaps = _planner_snapshots(planner)
    colors = [START_COLOR, GOAL_COLOR]
    for i, snap in enumerate(snaps):
        plot_tree(ax, snap, color=SOLVED_TREE_COLOR if success else colors[i % 2])
    if success:
        plot_path(ax, path)

    ax.set_xlim(bounds[0])
    if dim >= 2:
        ax.set_ylim(bounds[1])
    if _is_3d(ax):
        ax.set_zlim(bounds[2])
    else:
        ax.set_aspect("equal")
    if title is None:
        title = f"{planner.__class__.__name__}: {planner.nodes_in_tree} nodes"
        if success:
            title += f", path length {cost:.2f}"
    ax.set_title(title)

    if out_file is not None and fig is not None:
        fig.savefig(out_file)
        plt.close(fig)
    return ax


def plot_metrics_comparison(all_results, out_file="metrics_comparison.png"):
    """Create bar charts comparing core metrics across planners.

    Metrics: path_length, planning_time, iterations, nodes_in_tree
    """
    labels = [r['planner'] for r in all_results]
    path_len = [r.get('path_length', float('nan')) for r in all_results]
    time_req = [r.get('planning_time', float('nan')) for r in all_results]
    iters = [r.get('iterations', float('nan')) for r in all_results]
    nodes = [r.get('nodes_in_tree', float('nan')) for r in all_results]
    success = ['solved' if r.get('success') else 'unsolved' for r in all_results]

    fig, axs = plt.subplots(2, 2, figsize=(12, 8))
    axs = axs.ravel()

    for ax, values, title in zip(axs, (path_len, time_req, iters, nodes),
                                 ('Path length', 'Planning time (s)', 'Iterations', 'Nodes in tree')):
        bars = ax.bar(labels, [v if v is not None and np.isfinite(v) else 0.0 for v in values])
        ax.set_title(title)
        ax.tick_params(axis='x', rotation=45)
        _annotate_bars(ax, bars, success)

    plt.tight_layout()
    plt.savefig(out_file)
    plt.close(fig)
    return out_file


def _annotate_bars(ax, bar_container, texts):
    """Annotate each bar with a small label above it."""
    heights = [b.get_height() for b in bar_container]
    maxh = max(heights) if heights else 1.0
    offset = (maxh if maxh > 0 else 1.0) * 0.02

    for i, b in enumerate(bar_container):
        h = b.get_height()
        x = b.get_x() + b.get_width() / 2.0
        txt = texts[i] if i < len(texts) else ""
        ax.text(x, h + offset, txt, ha='center', va='bottom', fontsize=8, alpha=0.85)
