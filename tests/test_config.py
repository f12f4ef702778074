"""Tests for smoother and application configuration."""

import logging
from pathlib import Path

import pytest

from arsmooth.core.config import (
    SENSITIVITY_PRESETS,
    AppConfig,
    DeviceProfile,
    ExportConfig,
    SmootherConfig,
)


class TestSmootherConfig:

    def test_defaults(self):
        config = SmootherConfig()

        assert config.smoothing_factor == 0.07
        assert config.min_smoothing_factor == 0.02
        assert config.max_smoothing_factor == 0.3
        assert config.max_position_delta == 0.5
        assert config.max_rotation_delta == 0.8
        assert config.max_scale_delta == 0.3
        assert config.buffer_size == 5
        assert config.stabilization_frames == 15
        assert config.velocity_threshold == 0.1
        assert config.prediction_strength == 0.1
        assert config.reinforce_on_abrupt
        assert config.validate() == []

    @pytest.mark.parametrize("level", sorted(SENSITIVITY_PRESETS))
    def test_presets_are_valid(self, level):
        config = SmootherConfig.from_preset(level)
        for key, value in SENSITIVITY_PRESETS[level].items():
            assert getattr(config, key) == value
        assert config.validate() == []

    def test_medium_preset_matches_defaults(self):
        assert SmootherConfig.from_preset("medium") == SmootherConfig()

    def test_preset_name_is_case_insensitive(self):
        assert SmootherConfig.from_preset("HIGH").buffer_size == 3

    def test_preset_with_overrides(self):
        config = SmootherConfig.from_preset("low", prediction_strength=0.05)
        assert config.buffer_size == 8
        assert config.prediction_strength == 0.05

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown sensitivity preset"):
            SmootherConfig().with_preset("ultra")

    def test_with_preset_returns_copy(self):
        config = SmootherConfig()
        config.with_preset("low")
        assert config.buffer_size == 5

    def test_mobile_profile(self):
        config = SmootherConfig().with_device_profile(DeviceProfile.MOBILE)

        assert config.buffer_size == 6
        assert config.prediction_strength == 0.03
        assert config.smoothing_factor == 0.03
        assert not config.reinforce_on_abrupt
        assert config.validate() == []

    def test_desktop_profile_is_unchanged(self):
        config = SmootherConfig(buffer_size=7)
        assert config.with_device_profile("desktop") == config

    def test_validate_reports_problems(self):
        config = SmootherConfig(
            min_smoothing_factor=0.5,
            max_smoothing_factor=0.2,
            buffer_size=0,
            velocity_threshold=0.0,
            max_position_delta=-1.0,
        )
        issues = " ".join(config.validate())

        assert "Smoothing bounds" in issues
        assert "buffer_size" in issues
        assert "velocity_threshold" in issues
        assert "max_position_delta" in issues

    def test_dict_round_trip_ignores_unknown_keys(self):
        data = SmootherConfig(buffer_size=4).to_dict()
        data["unknown_option"] = 1

        config = SmootherConfig.from_dict(data)

        assert config.buffer_size == 4
        assert not hasattr(config, "unknown_option")


class TestAppConfig:

    def test_defaults(self):
        config = AppConfig()

        assert config.num_targets == 3
        assert config.sensitivity is None
        assert config.device == "desktop"
        assert config.lost_debounce == 0.8
        assert config.validate() == []

    def test_build_smoother_config_default(self):
        assert AppConfig().build_smoother_config() == SmootherConfig()

    def test_explicit_sensitivity_applies_preset(self):
        app = AppConfig(sensitivity="high", smoother=SmootherConfig(buffer_size=8))
        config = app.build_smoother_config()

        assert config.buffer_size == 3
        assert config.max_position_delta == 1.0

    def test_build_smoother_config_mobile(self):
        config = AppConfig(sensitivity="high", device="mobile").build_smoother_config()

        # The mobile profile always lands on the low preset
        assert config.max_position_delta == 0.2
        assert config.buffer_size == 6
        assert config.prediction_strength == 0.03

    def test_preset_keeps_other_smoother_options(self):
        app = AppConfig(sensitivity="low", smoother=SmootherConfig(stabilization_frames=5))
        assert app.build_smoother_config().stabilization_frames == 5

    def test_yaml_round_trip(self, tmp_path):
        config = AppConfig(
            num_targets=2,
            sensitivity="low",
            lost_debounce=0.5,
            smoother=SmootherConfig(stabilization_frames=10, prediction_strength=0.2),
            export=ExportConfig(formats=["json", "csv"], output_dir=Path("out")),
        )
        path = tmp_path / "config.yaml"

        config.to_yaml(path)
        loaded = AppConfig.from_yaml(path)

        assert loaded == config
        assert isinstance(loaded.export.output_dir, Path)

    def test_partial_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("sensitivity: high\nnum_targets: 1\n")

        config = AppConfig.from_yaml(path)

        assert config.sensitivity == "high"
        assert config.num_targets == 1
        assert config.smoother == SmootherConfig()

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert AppConfig.from_yaml(path) == AppConfig()

    def test_yaml_smoother_section_is_kept(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("smoother:\n  buffer_size: 8\n  max_position_delta: 2.0\n")

        config = AppConfig.from_yaml(path).build_smoother_config()

        assert config.buffer_size == 8
        assert config.max_position_delta == 2.0
        assert config.smoothing_factor == 0.07

    def test_saved_smoother_section_survives_reload(self, tmp_path):
        path = tmp_path / "config.yaml"
        AppConfig(smoother=SmootherConfig(buffer_size=8, max_position_delta=2.0)).to_yaml(path)

        config = AppConfig.from_yaml(path).build_smoother_config()

        assert config.buffer_size == 8
        assert config.max_position_delta == 2.0

    def test_unknown_smoother_key_is_skipped(self, tmp_path, caplog):
        path = tmp_path / "config.yaml"
        path.write_text("smoother:\n  not_an_option: 1\n  buffer_size: 4\n")

        with caplog.at_level(logging.WARNING, logger="arsmooth.core.config"):
            config = AppConfig.from_yaml(path)

        assert config.smoother.buffer_size == 4
        assert not hasattr(config.smoother, "not_an_option")
        assert "not_an_option" in caplog.text

    def test_validate(self):
        config = AppConfig(num_targets=0, sensitivity="extreme", device="watch")
        config.export.formats = ["bvh"]
        config.smoother.buffer_size = 0

        issues = " ".join(config.validate())

        assert "num_targets" in issues
        assert "extreme" in issues
        assert "watch" in issues
        assert "bvh" in issues
        assert "buffer_size" in issues
