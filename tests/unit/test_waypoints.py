"""Unit tests for weldpath.motion circular waypoint generation."""

import math

import numpy as np
import pytest

from weldpath.motion import (
    AnalyticCircularNormals,
    CircularPathSpec,
    ExternallySuppliedNormals,
    WaypointPathGenerator,
    generate,
    waypoint_count,
)
from weldpath.motion.waypoints import radial_distances
from weldpath.utils.errors import InvalidArgument

EPS = 1e-6


@pytest.fixture
def demo_spec() -> CircularPathSpec:
    """The circle the welding demo sweeps."""
    return CircularPathSpec(
        center=(0.2, 0.0, 0.8),
        radius=0.2,
        angular_step=0.5,
        forward_axis=(1.0, 0.0, 0.0),
        local_facing_axis=(1.0, 0.0, 0.0),
    )


class TestDemoExample:
    """Worked example from the demo configuration."""

    def test_first_waypoint_position(self, demo_spec):
        waypoints = generate(demo_spec)
        assert np.allclose(waypoints[0].position, (0.4, 0.0, 0.8), atol=1e-12)

    def test_first_waypoint_faces_center(self, demo_spec):
        """At theta=0 the normal is (-1, 0, 0): facing axis is turned around."""
        first = generate(demo_spec)[0]
        assert np.allclose(first.rotate((1.0, 0.0, 0.0)), (-1.0, 0.0, 0.0), atol=EPS)
        # Anti-parallel case resolves to a half-turn about vertical
        assert first.orientation == (0.0, 0.0, 1.0, 0.0)

    def test_thirteen_waypoints(self, demo_spec):
        assert len(generate(demo_spec)) == 13


class TestCount:
    """Waypoint count and the closing-point boundary."""

    @pytest.mark.parametrize(
        "step, expected",
        [
            (0.5, 13),
            (1.0, 7),
            (2.0, 4),
            (2.0 * math.pi, 1),
            (math.pi / 2.0, 4),
            (2.0 * math.pi / 3.0, 3),
            (2.0 * math.pi / 8.0, 8),
        ],
    )
    def test_count_matches_ceil(self, step, expected):
        assert waypoint_count(step) == expected
        spec = CircularPathSpec(angular_step=step)
        assert len(generate(spec)) == expected

    def test_exact_multiple_excludes_closing_point(self):
        """When 2*pi is a whole multiple of the step, theta=2*pi is not emitted."""
        spec = CircularPathSpec(radius=0.1, angular_step=2.0 * math.pi / 8.0)
        waypoints = generate(spec)
        assert len(waypoints) == 8
        first = np.array(waypoints[0].position)
        last = np.array(waypoints[-1].position)
        assert not np.allclose(first, last)
        assert spec.angles()[-1] < 2.0 * math.pi

    def test_angles_are_multiples_of_step(self):
        spec = CircularPathSpec(angular_step=0.3)
        angles = spec.angles()
        assert angles[0] == 0.0
        assert np.array_equal(angles, np.arange(len(angles)) * 0.3)


class TestInvariants:
    """Closure, unit quaternion and facing invariants."""

    @pytest.mark.parametrize(
        "center, radius, step",
        [
            ((0.2, 0.0, 0.8), 0.2, 0.5),
            ((0.0, 0.0, 0.0), 1.0, 0.1),
            ((-0.3, 0.5, 0.25), 0.05, 1.7),
        ],
    )
    def test_closure(self, center, radius, step):
        spec = CircularPathSpec(center=center, radius=radius, angular_step=step)
        waypoints = generate(spec)
        assert np.allclose(radial_distances(waypoints, center), radius, atol=EPS)
        # Circle stays in the horizontal plane through the center
        z = np.array([wp.position[2] for wp in waypoints])
        assert np.allclose(z, center[2], atol=EPS)

    def test_closure_3d_with_tilted_forward_axis(self):
        """Rotation about Z preserves length, so 3D distance is still the radius."""
        spec = CircularPathSpec(
            center=(0.0, 0.0, 0.5), radius=0.3, forward_axis=(1.0, 0.0, 1.0)
        )
        for wp in generate(spec):
            d = np.linalg.norm(np.array(wp.position) - np.array(spec.center))
            assert abs(d - 0.3) < EPS

    def test_unit_quaternions(self, demo_spec):
        for wp in generate(demo_spec):
            assert abs(np.linalg.norm(wp.orientation) - 1.0) < EPS

    @pytest.mark.parametrize(
        "facing", [(1.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 1.0, 1.0)]
    )
    def test_facing_axis_matches_normal(self, facing):
        spec = CircularPathSpec(angular_step=0.4, local_facing_axis=facing)
        normals = AnalyticCircularNormals()
        for k, (wp, theta) in enumerate(zip(generate(spec), spec.angles())):
            expected = normals.normal_at(k, float(theta), spec)
            expected = expected / np.linalg.norm(expected)
            assert np.allclose(wp.rotate(spec.local_facing_axis), expected, atol=EPS)

    def test_parallel_normal_gives_identity(self):
        """At theta=pi the mirrored normal equals the forward axis."""
        spec = CircularPathSpec(angular_step=math.pi / 2.0)
        waypoints = generate(spec)
        assert np.allclose(waypoints[2].orientation, (0.0, 0.0, 0.0, 1.0), atol=EPS)


class TestDeterminism:
    def test_identical_specs_identical_output(self, demo_spec):
        again = CircularPathSpec(
            center=(0.2, 0.0, 0.8),
            radius=0.2,
            angular_step=0.5,
            forward_axis=(1.0, 0.0, 0.0),
            local_facing_axis=(1.0, 0.0, 0.0),
        )
        assert generate(demo_spec) == generate(again)

    def test_generator_is_restartable(self, demo_spec):
        generator = WaypointPathGenerator()
        first = generator.generate(demo_spec)
        second = generator.generate(demo_spec)
        assert first == second
        assert first is not second


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"radius": 0.0},
            {"radius": -1.0},
            {"radius": float("nan")},
            {"angular_step": 0.0},
            {"angular_step": -0.1},
            {"angular_step": 7.0},
            {"angular_step": float("inf")},
            {"forward_axis": (0.0, 0.0, 0.0)},
            {"local_facing_axis": (0.0, 0.0, 0.0)},
            {"forward_axis": (1.0, 0.0)},
            {"center": (0.0, float("nan"), 0.0)},
        ],
    )
    def test_invalid_spec_rejected(self, kwargs):
        with pytest.raises(InvalidArgument):
            CircularPathSpec(**kwargs)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            CircularPathSpec(radius=-1.0)

    def test_generate_rejects_non_spec(self):
        with pytest.raises(InvalidArgument):
            generate({"radius": 0.2})  # type: ignore[arg-type]

    def test_axes_are_normalized(self):
        spec = CircularPathSpec(forward_axis=(2.0, 0.0, 0.0), local_facing_axis=(0, 0, 5))
        assert spec.forward_axis == (1.0, 0.0, 0.0)
        assert spec.local_facing_axis == (0.0, 0.0, 1.0)


class TestNormalSources:
    def test_mirrored_normal_points_away_at_quarter_turn(self):
        """The analytic placeholder faces the center only at theta=0 and theta=pi."""
        spec = CircularPathSpec(angular_step=math.pi / 2.0)
        wp = generate(spec)[1]
        offset = np.array(wp.position) - np.array(spec.center)
        facing = wp.rotate(spec.local_facing_axis)
        assert np.allclose(facing, (0.0, 1.0, 0.0), atol=EPS)
        assert np.dot(facing, offset) > 0.0

    def test_radial_mode_faces_center_everywhere(self, demo_spec):
        waypoints = generate(demo_spec, AnalyticCircularNormals("radial"))
        for wp in waypoints:
            inward = np.array(demo_spec.center) - np.array(wp.position)
            inward /= np.linalg.norm(inward)
            assert np.allclose(wp.rotate(demo_spec.local_facing_axis), inward, atol=EPS)

    def test_unknown_mode_rejected(self):
        with pytest.raises(InvalidArgument):
            AnalyticCircularNormals("outward")  # type: ignore[arg-type]

    def test_external_normals_used_in_order(self):
        spec = CircularPathSpec(angular_step=math.pi / 2.0, local_facing_axis=(0, 0, 1))
        supplied = [(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 2.0), (-1.0, 0.0, 0.0)]
        waypoints = generate(spec, ExternallySuppliedNormals(supplied))
        for wp, n in zip(waypoints, supplied):
            expected = np.array(n) / np.linalg.norm(n)
            assert np.allclose(wp.rotate((0.0, 0.0, 1.0)), expected, atol=EPS)

    def test_external_antiparallel_uses_perpendicular_fallback(self):
        """Facing +Z onto -Z: vertical axis is useless, half-turn about +Y."""
        spec = CircularPathSpec(angular_step=2.0 * math.pi, local_facing_axis=(0, 0, 1))
        (wp,) = generate(spec, ExternallySuppliedNormals([(0.0, 0.0, -1.0)]))
        assert wp.orientation == (0.0, 1.0, 0.0, 0.0)
        assert np.allclose(wp.rotate((0.0, 0.0, 1.0)), (0.0, 0.0, -1.0), atol=EPS)

    def test_too_few_external_normals(self):
        spec = CircularPathSpec(angular_step=1.0)
        with pytest.raises(InvalidArgument, match="7 normals"):
            generate(spec, ExternallySuppliedNormals([(1.0, 0.0, 0.0)] * 3))

    def test_zero_external_normal_rejected(self):
        with pytest.raises(InvalidArgument):
            ExternallySuppliedNormals([(1.0, 0.0, 0.0), (0.0, 0.0, 0.0)])
