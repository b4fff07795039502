import argparse
import json
import logging
import time

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from rrt_connect.common.extra_gif import make_growth_gif, record_growth
from rrt_connect.common.extra_plot import plot_metrics_comparison, plot_planner
from rrt_connect.common.scene import make_random_scene, scene_from_dict, scene_to_dict
from rrt_connect.common.utils import Box, path_length
from rrt_connect.planner.config import PlannerConfig
from rrt_connect.planner.rrt import RRT
from rrt_connect.planner.rrt_connect import RRTConnect


def run_planner(planner, planner_name, start, goal, obstacles, seed, max_steps, iterations=None):
    """
    Unified experiment runner: reset once, then step until solved or
    ``max_steps`` step() calls have been made.

    Returns a dict with metrics:
      path, success, path_length, nodes_in_tree,
      planning_time, iterations, steps
    """
    planner.reset(start, goal, obstacles, seed=seed)

    t0 = time.perf_counter()
    steps = 0
    success = False
    while steps < max_steps and not success:
        success = planner.step(iterations)
        steps += 1
    planning_time = time.perf_counter() - t0

    path, ok, cost = planner.get_best_solution()
    return {
        "planner": planner_name,
        "seed": seed,
        "path": None if path is None else path.tolist(),
        "success": bool(ok),
        "path_length": float(path_length(path)) if ok else float("inf"),
        "total_cost": float(cost),
        "nodes_in_tree": int(planner.nodes_in_tree),
        "planning_time": float(planning_time),
        "iterations": int(planner.iterations),
        "steps": steps,
    }


def _sanitize_for_json(obj):
    """Recursively convert numpy types and arrays to native Python types for json.dump."""
    if isinstance(obj, dict):
        return {k: _sanitize_for_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitize_for_json(v) for v in obj]
    if isinstance(obj, np.ndarray):
        return _sanitize_for_json(obj.tolist())
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, float) and not np.isfinite(obj):
        return None
    return obj


def default_scene():
    """Start and goal separated by a wall with a gap at the top."""
    bounds = np.array([[-10.0, 10.0], [-10.0, 10.0]])
    start = np.array([-8.0, 0.0])
    goal = np.array([8.0, 0.0])
    obstacles = [Box.from_bounds([-1.0, -10.0], [1.0, 6.0])]
    return bounds, start, goal, obstacles


def build_parser():
    parser = argparse.ArgumentParser(description="RRT-Connect planning demo")
    parser.add_argument("--scene", type=str, default=None,
                        help="JSON scene file (see rrt_connect.common.scene)")
    parser.add_argument("--random", action="store_true",
                        help="Spawn a random scene instead of the default wall")
    parser.add_argument("--obstacles", type=int, default=25,
                        help="Obstacle count for --random")
    parser.add_argument("--range", type=float, nargs=2, default=[10.0, 10.0],
                        help="Half-width of the domain along x and y for --random")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--max-dist", type=float, default=0.4)
    parser.add_argument("--iterations", type=int, default=10,
                        help="Outer iterations per step() call")
    parser.add_argument("--connect-iterations", type=int, default=100)
    parser.add_argument("--max-steps", type=int, default=500,
                        help="Give up after this many step() calls")
    parser.add_argument("--baseline", action="store_true",
                        help="Also run the single-tree RRT")
    parser.add_argument("--metrics", type=str, default=None, help="Write metrics JSON here")
    parser.add_argument("--plot", type=str, default=None, help="Write tree/path PNG here")
    parser.add_argument("--gif", type=str, default=None, help="Write tree growth GIF here")
    parser.add_argument("--save-scene", type=str, default=None, help="Write the scene JSON here")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    if args.scene is not None:
        with open(args.scene, "r") as f:
            bounds, start, goal, obstacles = scene_from_dict(json.load(f))
    elif args.random:
        rx, ry = args.range
        bounds = np.array([[-rx, rx], [-ry, ry]])
        rng = np.random.default_rng(args.seed)
        start, goal, obstacles = make_random_scene(rng, bounds, obstacle_count=args.obstacles)
    else:
        bounds, start, goal, obstacles = default_scene()

    if args.save_scene is not None:
        with open(args.save_scene, "w") as f:
            json.dump(scene_to_dict(bounds, start, goal, obstacles), f, indent=2)
        print(f"Saved scene to {args.save_scene}")

    def make_config():
        return PlannerConfig(bounds=bounds, max_dist=args.max_dist,
                             iterations_per_step=args.iterations,
                             connect_iterations=args.connect_iterations)

    planners = [(RRTConnect(make_config()), "RRT-Connect")]
    if args.baseline:
        planners.append((RRT(make_config()), "RRT"))

    all_results = []
    for planner, name in planners:
        print(f"\n--- {name} | seed={args.seed} ---")
        res = run_planner(planner, name, start, goal, obstacles, args.seed, args.max_steps)
        print(f"  success={res['success']}, len={res['path_length']:.4f}, "
              f"nodes={res['nodes_in_tree']}, iters={res['iterations']}, "
              f"steps={res['steps']}, time={res['planning_time']:.3f}s")
        all_results.append(res)

    if args.metrics is not None:
        with open(args.metrics, "w") as f:
            json.dump(_sanitize_for_json(all_results), f, indent=2)
        print(f"\nSaved metrics to {args.metrics}")
        if len(all_results) > 1:
            out = args.metrics.rsplit(".", 1)[0] + "_comparison.png"
            plot_metrics_comparison(all_results, out_file=out)
            print(f"Saved metrics comparison to {out}")

    if args.plot is not None:
        fig, axes = plt.subplots(1, len(planners), figsize=(8 * len(planners), 8), squeeze=False)
        for ax, (planner, name) in zip(axes[0], planners):
            plot_planner(planner, obstacles, ax=ax)
        fig.tight_layout()
        fig.savefig(args.plot)
        plt.close(fig)
        print(f"Saved tree+path visualization to {args.plot}")

    if args.gif is not None:
        planner = RRTConnect(make_config())
        planner.reset(start, goal, obstacles, seed=args.seed)
        frames = record_growth(planner, args.max_steps)
        make_growth_gif(frames, bounds, obstacles, out_file=args.gif)
        print(f"Saved GIF to {args.gif}")

    return 0 if all(r["success"] for r in all_results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
