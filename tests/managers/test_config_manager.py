"""
Tests for ConfigManager and the config dataclasses.
"""

import pytest

from managers.config_manager import ConfigManager, deep_merge
from models.config import AppConfig, RenderConfig
from models.enums import LogLevel, PacingPolicy


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "source.yaml").write_text(
        "source:\n  path: clip.mp4\n  duration: 10\n  fps: 12\n", encoding="utf-8"
    )
    (tmp_path / "playback.yaml").write_text(
        "playback:\n  policy: SEQUENTIAL\n  loop: false\n  duration: 5\n", encoding="utf-8"
    )
    (tmp_path / "config.yaml").write_text(
        "include:\n  - source.yaml\n  - playback.yaml\n"
        "render:\n  target_columns: null\n"
        "logging:\n  level: DEBUG\n",
        encoding="utf-8",
    )
    (tmp_path / "defaults.yaml").write_text(
        "source:\n  path: default.mp4\n", encoding="utf-8"
    )
    return tmp_path


def manager_for(config_dir, name="config.yaml"):
    return ConfigManager(config_dir / name, defaults_path=config_dir / "defaults.yaml")


class TestConfigManagerLoad:

    def test_includes_merged(self, config_dir):
        config = manager_for(config_dir).load()

        assert config.source.path == "clip.mp4"
        assert config.source.fps == 12
        assert config.playback.policy == PacingPolicy.SEQUENTIAL
        assert config.playback.loop is False
        assert config.logging.level == LogLevel.DEBUG

    def test_null_target_columns_means_adaptive(self, config_dir):
        config = manager_for(config_dir).load()

        assert config.render.target_columns is None
        assert config.render.width_divisor == 3

    def test_overrides_applied_last(self, config_dir):
        config = manager_for(config_dir).load({"source": {"fps": 30}, "playback": {"policy": "elapsed"}})

        assert config.source.fps == 30
        assert config.source.path == "clip.mp4"
        assert config.playback.policy == PacingPolicy.ELAPSED

    def test_monolithic_config(self, config_dir):
        (config_dir / "single.yaml").write_text("source:\n  fps: 8\n", encoding="utf-8")

        config = manager_for(config_dir, "single.yaml").load()

        assert config.source.fps == 8
        assert config.playback.policy == PacingPolicy.ELAPSED

    def test_missing_file_falls_back_to_defaults(self, config_dir, log_stream):
        config = manager_for(config_dir, "missing.yaml").load()

        assert config.source.path == "default.mp4"
        assert "Falling back to factory defaults" in log_stream.getvalue()

    def test_missing_include_falls_back_to_defaults(self, config_dir):
        (config_dir / "broken.yaml").write_text("include:\n  - nope.yaml\n", encoding="utf-8")

        config = manager_for(config_dir, "broken.yaml").load()

        assert config.source.path == "default.mp4"

    def test_invalid_policy_rejected(self, config_dir):
        with pytest.raises(ValueError):
            manager_for(config_dir).load({"playback": {"policy": "FASTEST"}})

    def test_bundled_config_loads(self):
        config = ConfigManager().load()

        assert config.source.fps == 24
        assert config.playback.policy == PacingPolicy.ELAPSED


class TestAppConfig:

    def test_defaults(self):
        config = AppConfig.from_dict(None)

        assert config.source.fps == 24
        assert config.render.target_columns == 160
        assert config.playback.duration == 90.0

    def test_non_positive_fps_rejected(self):
        with pytest.raises(ValueError):
            AppConfig.from_dict({"source": {"fps": 0}})

    def test_non_positive_divisor_rejected(self):
        with pytest.raises(ValueError):
            RenderConfig.from_dict({"width_divisor": 0})

    def test_null_duration_means_unbounded(self):
        config = AppConfig.from_dict({"playback": {"duration": None}})

        assert config.playback.duration is None


class TestDeepMerge:

    def test_nested_sections_merged(self):
        merged = deep_merge({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})

        assert merged == {"a": {"x": 1, "y": 3}}

    def test_base_not_modified(self):
        base = {"a": {"x": 1}}
        deep_merge(base, {"a": {"x": 2}})

        assert base == {"a": {"x": 1}}
