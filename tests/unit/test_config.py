"""Unit tests for environment-driven configuration helpers."""

import logging

import pytest

from weldpath import config as cfg


class TestEnvFloat:
    def test_unset_uses_default(self, monkeypatch):
        monkeypatch.delenv("WELDPATH_TEST_FLOAT", raising=False)
        assert cfg._env_float("WELDPATH_TEST_FLOAT", 0.25) == 0.25

    def test_parses_value(self, monkeypatch):
        monkeypatch.setenv("WELDPATH_TEST_FLOAT", "0.125")
        assert cfg._env_float("WELDPATH_TEST_FLOAT", 0.25) == 0.125

    def test_garbage_falls_back(self, monkeypatch):
        monkeypatch.setenv("WELDPATH_TEST_FLOAT", "abc")
        assert cfg._env_float("WELDPATH_TEST_FLOAT", 0.25) == 0.25


class TestEnvVec3:
    @pytest.mark.parametrize("raw", ["0.1,0.2,0.3", "0.1 0.2 0.3", " 0.1, 0.2 ,0.3 "])
    def test_separators(self, monkeypatch, raw):
        monkeypatch.setenv("WELDPATH_TEST_VEC", raw)
        assert cfg._env_vec3("WELDPATH_TEST_VEC", (0.0, 0.0, 0.0)) == (0.1, 0.2, 0.3)

    @pytest.mark.parametrize("raw", ["1,2", "1,2,3,4", "x,y,z", ""])
    def test_invalid_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("WELDPATH_TEST_VEC", raw)
        assert cfg._env_vec3("WELDPATH_TEST_VEC", (1.0, 0.0, 0.0)) == (1.0, 0.0, 0.0)


class TestEnvBoolOptional:
    @pytest.mark.parametrize(
        "raw, expected",
        [("1", True), ("Yes", True), ("off", False), ("0", False), ("maybe", None)],
    )
    def test_values(self, monkeypatch, raw, expected):
        monkeypatch.setenv("WELDPATH_TEST_BOOL", raw)
        assert cfg._env_bool_optional("WELDPATH_TEST_BOOL") is expected

    def test_unset(self, monkeypatch):
        monkeypatch.delenv("WELDPATH_TEST_BOOL", raising=False)
        assert cfg._env_bool_optional("WELDPATH_TEST_BOOL") is None


def test_trace_level_registered():
    assert logging.getLevelName(cfg.TRACE) == "TRACE"
    assert hasattr(logging.getLogger("weldpath.test"), "trace")


def test_demo_defaults():
    """Defaults reproduce the welding demo unless overridden by the environment."""
    assert cfg.EEF_STEP_M > 0.0
    assert cfg.JUMP_THRESHOLD >= 0.0
    assert cfg.QUAT_NORM_TOL == 1e-6
