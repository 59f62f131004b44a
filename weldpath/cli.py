"""Command-line interface for the circular path demo."""

import argparse
import logging
import signal
import sys
from pathlib import Path

import weldpath.config as cfg
from weldpath.config import TRACE
from weldpath.execution.driver import PathExecutionDriver
from weldpath.execution.offline import (
    AutoConfirm,
    ConsolePrompt,
    OfflineCartesianInterpolator,
    OfflineExecutor,
    RecordingVisualizer,
)
from weldpath.motion.normals import NORMAL_MODES, AnalyticCircularNormals
from weldpath.motion.waypoints import CircularPathSpec, WaypointPathGenerator
from weldpath.protocol.messages import encode_poses
from weldpath.utils.errors import InvalidArgument, PlanningError

logger = logging.getLogger("weldpath.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Plan and execute a circular Cartesian path"
    )
    parser.add_argument(
        "--center",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        default=list(cfg.DEFAULT_CENTER),
        help="Circle center in the planning frame (m)",
    )
    parser.add_argument(
        "--radius", type=float, default=cfg.DEFAULT_RADIUS_M, help="Circle radius (m)"
    )
    parser.add_argument(
        "--step",
        type=float,
        default=cfg.DEFAULT_ANGULAR_STEP_RAD,
        help="Angular step between waypoints (rad)",
    )
    parser.add_argument(
        "--forward",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        default=list(cfg.DEFAULT_FORWARD_AXIS),
        help="Direction of the first waypoint from the center",
    )
    parser.add_argument(
        "--facing",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        default=list(cfg.DEFAULT_FACING_AXIS),
        help="End-effector axis aligned with the normal",
    )
    parser.add_argument(
        "--normal-mode",
        choices=NORMAL_MODES,
        default="mirrored",
        help="mirrored: Rz(pi - theta) * forward; radial: toward the center",
    )
    parser.add_argument(
        "--eef-step",
        type=float,
        default=cfg.EEF_STEP_M,
        help="Cartesian interpolation resolution (m)",
    )
    parser.add_argument(
        "--jump-threshold",
        type=float,
        default=cfg.JUMP_THRESHOLD,
        help="Relative jump threshold (0 disables)",
    )
    parser.add_argument(
        "--reach", type=float, default=cfg.REACH_M, help="Offline planner reach (m)"
    )
    parser.add_argument(
        "--cycles",
        type=int,
        default=None,
        help="Number of plan/execute cycles (default: until declined; 1 with --yes)",
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        default=cfg.ASSUME_YES,
        help="Do not prompt before planning or executing",
    )
    parser.add_argument(
        "--dump",
        choices=["json", "msgpack"],
        help="Write the waypoints instead of running the demo",
    )
    parser.add_argument(
        "-o", "--output", help="Output file for --dump (default: stdout, json only)"
    )

    # Verbose logging options
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity; -v=INFO, -vv=DEBUG, -vvv=TRACE",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Enable quiet logging (WARNING level)",
    )
    parser.add_argument(
        "--log-level",
        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set specific log level",
    )
    return parser


def resolve_log_level(args: argparse.Namespace) -> int:
    """Pick the log level from CLI flags and environment.

    Precedence:
      1) Explicit --log-level
      2) Verbose / quiet flags
      3) Environment-driven TRACE (WELDPATH_TRACE=1 via TRACE_ENABLED)
      4) WELDPATH_LOG_LEVEL, else INFO
    """
    if args.log_level:
        if args.log_level == "TRACE":
            cfg.TRACE_ENABLED = True
            return TRACE
        return getattr(logging, args.log_level)
    if args.verbose >= 3:
        cfg.TRACE_ENABLED = True
        return TRACE
    if args.verbose >= 2:
        return logging.DEBUG
    if args.verbose == 1:
        return logging.INFO
    if args.quiet:
        return logging.WARNING
    if cfg.TRACE_ENABLED:
        return TRACE
    level = logging.getLevelName(cfg.LOG_LEVEL_DEFAULT)
    return level if isinstance(level, int) else logging.INFO


def _dump(args: argparse.Namespace, generator: WaypointPathGenerator, spec) -> int:
    waypoints = generator.generate(spec)
    data = encode_poses(waypoints, fmt=args.dump, frame_id=cfg.PLANNING_FRAME)
    if args.output:
        Path(args.output).write_bytes(data)
        logger.info(f"Wrote {len(waypoints)} waypoints to {args.output}")
    elif args.dump == "json":
        sys.stdout.write(data.decode("utf-8") + "\n")
    else:
        logger.error("msgpack output needs --output")
        return 2
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the demo."""
    args = build_parser().parse_args(argv)
    log_level = resolve_log_level(args)

    logging.basicConfig(
        level=log_level,
        format=cfg.LOG_FORMAT,
        datefmt=cfg.LOG_DATEFMT,
    )

    try:
        spec = CircularPathSpec(
            center=tuple(args.center),
            radius=args.radius,
            angular_step=args.step,
            forward_axis=tuple(args.forward),
            local_facing_axis=tuple(args.facing),
        )
        generator = WaypointPathGenerator(AnalyticCircularNormals(args.normal_mode))
        if args.dump:
            return _dump(args, generator, spec)

        interpolator = OfflineCartesianInterpolator(reach=args.reach)
    except InvalidArgument as e:
        logger.error(f"Invalid path configuration: {e}")
        return 2

    logger.info(f"Planning frame: {cfg.PLANNING_FRAME}")
    logger.info(f"Planning group: {cfg.PLANNING_GROUP}")

    cycles = args.cycles
    if args.yes:
        prompt = AutoConfirm()
        if cycles is None:
            cycles = 1
    else:
        prompt = ConsolePrompt()

    executor = OfflineExecutor()
    driver = PathExecutionDriver(
        interpolator=interpolator,
        executor=executor,
        visualizer=RecordingVisualizer(),
        prompt=prompt,
        generator=generator,
        eef_step=args.eef_step,
        jump_threshold=args.jump_threshold,
    )

    def handle_sigterm(signum, frame):
        """Handle SIGTERM signal for graceful shutdown."""
        logger.info("Received SIGTERM, shutting down...")
        executor.stop()
        raise SystemExit(0)

    signal.signal(signal.SIGTERM, handle_sigterm)

    try:
        results = driver.run(spec, cycles=cycles)
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        executor.stop()
        return 0
    except (InvalidArgument, PlanningError) as e:
        logger.error(f"Planning failed: {e}")
        return 1

    failed = [r for r in results if r.execution is not None and not r.execution.ok]
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
