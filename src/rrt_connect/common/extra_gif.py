import logging

import matplotlib.pyplot as plt
from matplotlib import animation

from rrt_connect.common.extra_plot import (GOAL_COLOR, SOLVED_TREE_COLOR, START_COLOR,
                                           plot_obstacles, plot_path, plot_tree)

logger = logging.getLogger(__name__)


def record_growth(planner, max_steps, iterations=None):
    """
    Step an already reset planner and keep one frame per step.

    Each frame is (snapshots, path) where path is None until solved. The
    first frame shows the trees before any growth.
    """
    frames = [_frame(planner)]
    for _ in range(max_steps):
        solved = planner.step(iterations)
        frames.append(_frame(planner))
        if solved:
            break
    return frames


def _frame(planner):
    if hasattr(planner, "snapshots"):
        snaps = planner.snapshots()
    else:
        snaps = (planner.tree.snapshot(),)
    path, _, _ = planner.get_best_solution()
    return tuple(snaps), path


def make_growth_gif(frames, bounds, obstacles=(), out_file="planner_trees_growth.gif", fps=5, title="RRT-Connect"):
    """Create a GIF of tree growth from frames produced by ``record_growth``.

    The target directory must already exist.
    """
    if not frames:
        raise ValueError("no frames to animate")

    dim = bounds.shape[0]
    if dim < 2:
        raise ValueError("animation needs at least two dimensions")
    fig = plt.figure(figsize=(7, 7))
    ax = fig.add_subplot(111, projection="3d" if dim >= 3 else None)

    def update(frame_i):
        snaps, path = frames[frame_i]
        ax.clear()
        plot_obstacles(ax, obstacles)
        colors = [START_COLOR, GOAL_COLOR]
        for i, snap in enumerate(snaps):
            plot_tree(ax, snap, color=SOLVED_TREE_COLOR if path is not None else colors[i % 2])
        if path is not None:
            plot_path(ax, path)
        ax.set_xlim(bounds[0])
        ax.set_ylim(bounds[1])
        if dim >= 3:
            ax.set_zlim(bounds[2])
        else:
            ax.set_aspect("equal")
        nodes = sum(s.positions.shape[0] for s in snaps)
        ax.set_title(f"{title}: step {frame_i}, {nodes} nodes")
        return []

    ani = animation.FuncAnimation(fig, update, frames=len(frames), interval=1000 // fps)
    writer = animation.PillowWriter(fps=fps)
    ani.save(out_file, writer=writer)
    plt.close(fig)
    logger.info("saved GIF to %s (%d frames)", out_file, len(frames))
    return out_file
