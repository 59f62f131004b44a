"""
Caller-driven plan / visualize / execute cycle for a circular waypoint path.

One cycle:
  1. Operator confirms planning
  2. Waypoints are generated from the CircularPathSpec
  3. The interpolator turns them into a Cartesian trajectory; a partial
     fraction is logged as a warning and reported in the result
  4. Waypoints, labels and trajectory are sent to the visualization sink
  5. Operator confirms execution
  6. The executor runs the trajectory (blocking), markers are cleared

The driver never retries; failures are logged and returned to the caller.
Visualization errors are logged and otherwise ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from weldpath.config import (
    EEF_STEP_M,
    JUMP_THRESHOLD,
    PLANNING_FRAME,
    TITLE_TEXT,
    WAYPOINT_LABEL_PREFIX,
)
from weldpath.execution.interfaces import (
    CartesianPlan,
    ExecutionResult,
    OperatorPrompt,
    PathInterpolator,
    TrajectoryExecutor,
    VisualizationSink,
)
from weldpath.motion.pose import Pose3D
from weldpath.motion.waypoints import CircularPathSpec, WaypointPathGenerator

logger = logging.getLogger(__name__)

PLAN_PROMPT = "Press 'next' to create a plan for the circular trajectory"
EXECUTE_PROMPT = "Press 'next' to execute the trajectory"


@dataclass
class CycleResult:
    """Outcome of one plan/execute cycle."""

    waypoints: list[Pose3D]
    plan: CartesianPlan
    execution: ExecutionResult | None = None
    declined: bool = False
    visualization_errors: list[str] = field(default_factory=list)

    @property
    def fraction(self) -> float:
        return self.plan.fraction

    @property
    def partial(self) -> bool:
        return not self.plan.complete

    @property
    def ok(self) -> bool:
        return (
            self.plan.complete and self.execution is not None and self.execution.ok
        )


class _AlwaysConfirm:
    def confirm(self, message: str) -> bool:
        return True


class PathExecutionDriver:
    """Feed generated waypoints through the planning collaborators.

    Args:
        interpolator: Cartesian path interpolation service
        executor: Blocking trajectory execution service
        visualizer: Optional display sink
        prompt: Operator confirmation; confirms everything when None
        generator: Waypoint generator (analytic normals when None)
        eef_step: Interpolation resolution in meters
        jump_threshold: Relative jump threshold; 0.0 disables it
        require_complete: Skip execution when the plan covers less than
            100% of the waypoints
    """

    def __init__(
        self,
        interpolator: PathInterpolator,
        executor: TrajectoryExecutor,
        visualizer: VisualizationSink | None = None,
        prompt: OperatorPrompt | None = None,
        generator: WaypointPathGenerator | None = None,
        eef_step: float = EEF_STEP_M,
        jump_threshold: float = JUMP_THRESHOLD,
        require_complete: bool = False,
    ):
        self.interpolator = interpolator
        self.executor = executor
        self.visualizer = visualizer
        self.prompt = prompt if prompt is not None else _AlwaysConfirm()
        self.generator = generator if generator is not None else WaypointPathGenerator()
        self.eef_step = eef_step
        self.jump_threshold = jump_threshold
        self.require_complete = require_complete

    # ----- planning -----

    def plan(self, spec: CircularPathSpec) -> tuple[list[Pose3D], CartesianPlan]:
        """Generate waypoints and request a Cartesian interpolation."""
        waypoints = self.generator.generate(spec)
        plan = self.interpolator.compute_cartesian_path(
            waypoints, self.eef_step, self.jump_threshold
        )
        if plan.complete:
            logger.info(
                "Visualizing plan for a Cartesian path (%.2f%% achieved)",
                plan.fraction * 100.0,
            )
        else:
            logger.warning(
                "Cartesian path only %.2f%% achieved (%d waypoints in %s)",
                plan.fraction * 100.0,
                len(waypoints),
                PLANNING_FRAME,
            )
        return waypoints, plan

    # ----- visualization -----

    def _visual(self, errors: list[str], action: Callable[..., object], *args) -> None:
        try:
            action(*args)
        except Exception as e:
            name = getattr(action, "__name__", repr(action))
            logger.warning("Visualization %s failed: %s", name, e)
            errors.append(f"{name}: {e}")

    def visualize(
        self, waypoints: list[Pose3D], plan: CartesianPlan
    ) -> list[str]:
        """Publish the path, labeled waypoint axes and trajectory.

        Returns:
            Messages for every sink call that raised; empty on success
        """
        errors: list[str] = []
        vis = self.visualizer
        if vis is None:
            return errors
        self._visual(errors, vis.delete_all_markers)
        self._visual(errors, vis.publish_text, TITLE_TEXT)
        self._visual(errors, vis.publish_path, waypoints)
        for i, wp in enumerate(waypoints):
            self._visual(
                errors, vis.publish_axis_labeled, wp, f"{WAYPOINT_LABEL_PREFIX}{i}"
            )
        self._visual(errors, vis.publish_trajectory, plan.trajectory)
        self._visual(errors, vis.trigger)
        return errors

    def clear(self, errors: list[str]) -> None:
        if self.visualizer is None:
            return
        self._visual(errors, self.visualizer.delete_all_markers)
        self._visual(errors, self.visualizer.trigger)

    # ----- cycle -----

    def run_cycle(self, spec: CircularPathSpec) -> CycleResult | None:
        """Run one confirm/plan/visualize/confirm/execute cycle.

        Returns:
            CycleResult, or None when the operator declined to plan
        """
        if not self.prompt.confirm(PLAN_PROMPT):
            logger.info("Operator declined planning")
            return None

        waypoints, plan = self.plan(spec)
        result = CycleResult(waypoints=waypoints, plan=plan)
        result.visualization_errors.extend(self.visualize(waypoints, plan))

        if plan.fraction <= 0.0:
            logger.warning("Nothing planned, skipping execution")
            self.clear(result.visualization_errors)
            return result
        if self.require_complete and not plan.complete:
            logger.warning("Plan incomplete and require_complete is set, skipping")
            self.clear(result.visualization_errors)
            return result

        message = f"{EXECUTE_PROMPT} ({plan.fraction * 100.0:.2f}% achieved)"
        if not self.prompt.confirm(message):
            logger.info("Operator declined execution")
            result.declined = True
            self.clear(result.visualization_errors)
            return result

        try:
            result.execution = self.executor.execute(plan.trajectory)
        except Exception as e:
            logger.exception("Executor raised during execution")
            result.execution = ExecutionResult.failed(str(e), error=e)
        finally:
            self.clear(result.visualization_errors)

        if result.execution.ok:
            logger.info("Execution finished: %s", result.execution.message)
        else:
            logger.error(
                "Execution %s: %s",
                result.execution.code.name.lower(),
                result.execution.message,
            )
        return result

    def run(
        self, spec: CircularPathSpec, cycles: int | None = None
    ) -> list[CycleResult]:
        """Repeat run_cycle until ``cycles`` are done or the operator declines.

        Each cycle regenerates the waypoints from ``spec``.
        """
        results: list[CycleResult] = []
        while cycles is None or len(results) < cycles:
            result = self.run_cycle(spec)
            if result is None:
                break
            results.append(result)
            if result.declined:
                break
        logger.info("Completed %d cycle(s)", len(results))
        return results
