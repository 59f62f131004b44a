"""Integration test fixtures."""

import signal

import pytest

from weldpath.execution import (
    AutoConfirm,
    OfflineCartesianInterpolator,
    OfflineExecutor,
    PathExecutionDriver,
    RecordingVisualizer,
)
from weldpath.motion import CircularPathSpec


@pytest.fixture(autouse=True)
def restore_sigterm():
    """The CLI installs its own SIGTERM handler; put the previous one back."""
    previous = signal.getsignal(signal.SIGTERM)
    yield
    signal.signal(signal.SIGTERM, previous)


@pytest.fixture
def spec() -> CircularPathSpec:
    """Welding demo circle: 20 cm radius around (0.2, 0, 0.8), 0.5 rad steps."""
    return CircularPathSpec(
        center=(0.2, 0.0, 0.8),
        radius=0.2,
        angular_step=0.5,
        forward_axis=(1.0, 0.0, 0.0),
        local_facing_axis=(1.0, 0.0, 0.0),
    )


@pytest.fixture
def visualizer() -> RecordingVisualizer:
    return RecordingVisualizer()


@pytest.fixture
def executor() -> OfflineExecutor:
    return OfflineExecutor()


@pytest.fixture
def make_driver(visualizer, executor):
    """Build a driver around the offline collaborators."""

    def _make(
        prompt=None, reach=1.3, executor_=None, visualizer_=None, **kwargs
    ) -> PathExecutionDriver:
        kwargs.setdefault("eef_step", 0.01)
        kwargs.setdefault("jump_threshold", 0.0)
        return PathExecutionDriver(
            interpolator=OfflineCartesianInterpolator(reach=reach),
            executor=executor_ if executor_ is not None else executor,
            visualizer=visualizer_ if visualizer_ is not None else visualizer,
            prompt=prompt if prompt is not None else AutoConfirm(),
            **kwargs,
        )

    return _make
