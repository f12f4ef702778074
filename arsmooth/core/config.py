"""
Configuration system for pose smoothing.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Dict, List, Literal, Optional

import yaml

logger = logging.getLogger(__name__)


# Coarse sensitivity profiles. Low sensitivity rejects more motion as noise
# and smooths harder; high sensitivity follows the tracker more closely.
SENSITIVITY_PRESETS: Dict[str, Dict[str, float]] = {
    "low": {
        "max_position_delta": 0.2,
        "max_rotation_delta": 0.3,
        "smoothing_factor": 0.03,
        "buffer_size": 8,
    },
    "medium": {
        "max_position_delta": 0.5,
        "max_rotation_delta": 0.8,
        "smoothing_factor": 0.07,
        "buffer_size": 5,
    },
    "high": {
        "max_position_delta": 1.0,
        "max_rotation_delta": 1.5,
        "smoothing_factor": 0.15,
        "buffer_size": 3,
    },
}


class DeviceProfile(Enum):
    """Device class the smoothers run on."""

    DESKTOP = "desktop"
    MOBILE = "mobile"


# Constrained devices get wider buffers, weaker prediction, and drop
# abrupt frames outright.
MOBILE_OVERRIDES = {
    "buffer_size": 6,
    "prediction_strength": 0.03,
    "reinforce_on_abrupt": False,
}


@dataclass
class SmootherConfig:
    """Per-target pose smoothing configuration."""

    # Abrupt motion thresholds (per frame)
    max_position_delta: float = 0.5
    max_rotation_delta: float = 0.8
    max_scale_delta: float = 0.3

    # Exponential smoothing gains
    smoothing_factor: float = 0.07
    min_smoothing_factor: float = 0.02
    max_smoothing_factor: float = 0.3

    # Moving average window
    buffer_size: int = 5

    # Frames buffered after acquisition before any output is emitted
    stabilization_frames: int = 15

    # Velocity-adaptive gain
    velocity_threshold: float = 0.1
    velocity_blend: float = 0.3
    max_slowdown: float = 5.0

    # Look-ahead weight for linear prediction
    prediction_strength: float = 0.1

    # Dropped-frame compensation
    stall_threshold: float = 0.05  # seconds
    stall_gain: float = 1.2

    # Push the buffer average back when a frame is rejected as abrupt
    reinforce_on_abrupt: bool = True

    @classmethod
    def from_preset(cls, level: str, **overrides) -> "SmootherConfig":
        """Create a configuration from a named sensitivity preset."""
        return replace(cls().with_preset(level), **overrides)

    def with_preset(self, level: str) -> "SmootherConfig":
        """Return a copy with a sensitivity preset applied."""
        key = level.lower()
        if key not in SENSITIVITY_PRESETS:
            raise ValueError(f"Unknown sensitivity preset: {level}")
        return replace(self, **SENSITIVITY_PRESETS[key])

    def with_device_profile(self, profile: DeviceProfile) -> "SmootherConfig":
        """Return a copy tuned for a device class."""
        profile = DeviceProfile(profile)
        if profile == DeviceProfile.MOBILE:
            return replace(self.with_preset("low"), **MOBILE_OVERRIDES)
        return self

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "SmootherConfig":
        """Create from dictionary, skipping unknown keys with a warning."""
        config = cls()
        for key, value in data.items():
            if hasattr(config, key):
                setattr(config, key, value)
            else:
                logger.warning(f"Ignoring unknown smoother option: {key}")
        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of warnings/errors."""
        issues = []

        if not 0.0 < self.min_smoothing_factor <= self.max_smoothing_factor <= 1.0:
            issues.append(
                "Smoothing bounds must satisfy 0 < min_smoothing_factor "
                f"<= max_smoothing_factor <= 1 (got {self.min_smoothing_factor}, "
                f"{self.max_smoothing_factor})"
            )
        if not self.min_smoothing_factor <= self.smoothing_factor <= self.max_smoothing_factor:
            issues.append(
                f"smoothing_factor {self.smoothing_factor} lies outside "
                f"[{self.min_smoothing_factor}, {self.max_smoothing_factor}]"
            )
        if self.buffer_size < 1:
            issues.append(f"buffer_size must be at least 1 (got {self.buffer_size})")
        if self.stabilization_frames < 0:
            issues.append(
                f"stabilization_frames must not be negative (got {self.stabilization_frames})"
            )
        if self.velocity_threshold <= 0:
            issues.append(
                f"velocity_threshold must be positive (got {self.velocity_threshold})"
            )
        if not 0.0 <= self.velocity_blend <= 1.0:
            issues.append(f"velocity_blend must be within [0, 1] (got {self.velocity_blend})")
        if not 0.0 <= self.prediction_strength <= 1.0:
            issues.append(
                f"prediction_strength must be within [0, 1] (got {self.prediction_strength})"
            )
        for name in ("max_position_delta", "max_rotation_delta", "max_scale_delta"):
            if getattr(self, name) <= 0:
                issues.append(f"{name} must be positive (got {getattr(self, name)})")

        return issues


@dataclass
class ExportConfig:
    """Export configuration."""

    formats: List[str] = field(default_factory=lambda: ["json"])
    output_dir: Path = field(default_factory=lambda: Path("data/exports"))


@dataclass
class AppConfig:
    """Main application configuration."""

    # Number of independently tracked markers
    num_targets: int = 3

    # Optional preset applied over the smoother section; None keeps it as written.
    # The mobile device class always lands on the low preset.
    sensitivity: Optional[Literal["low", "medium", "high"]] = None
    device: Literal["desktop", "mobile"] = "desktop"

    # Seconds a lost target may reappear before the loss is confirmed
    lost_debounce: float = 0.8

    smoother: SmootherConfig = field(default_factory=SmootherConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    def build_smoother_config(self) -> SmootherConfig:
        """Resolve the effective per-target smoother configuration."""
        config = self.smoother
        if self.sensitivity is not None:
            config = config.with_preset(self.sensitivity)
        return config.with_device_profile(DeviceProfile(self.device))

    @classmethod
    def from_yaml(cls, path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        config = cls()

        if "smoother" in data:
            config.smoother = SmootherConfig.from_dict(data["smoother"] or {})
        if "export" in data:
            export = dict(data["export"])
            if "output_dir" in export:
                export["output_dir"] = Path(export["output_dir"])
            config.export = ExportConfig(**export)

        # Top-level configs
        if "num_targets" in data:
            config.num_targets = int(data["num_targets"])
        if "sensitivity" in data:
            config.sensitivity = data["sensitivity"]
        if "device" in data:
            config.device = data["device"]
        if "lost_debounce" in data:
            config.lost_debounce = float(data["lost_debounce"])

        return config

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file."""
        def dataclass_to_dict(obj):
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    k: dataclass_to_dict(v) for k, v in obj.__dict__.items()
                }
            elif isinstance(obj, Path):
                return str(obj)
            return obj

        data = dataclass_to_dict(self)

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def validate(self) -> List[str]:
        """Validate configuration and return list of warnings/errors."""
        issues = []

        if self.num_targets < 1:
            issues.append(f"num_targets must be at least 1 (got {self.num_targets})")
        if self.sensitivity is not None and self.sensitivity not in SENSITIVITY_PRESETS:
            issues.append(f"Unknown sensitivity preset: {self.sensitivity}")
        if self.device not in [p.value for p in DeviceProfile]:
            issues.append(f"Unknown device profile: {self.device}")
        if self.lost_debounce < 0:
            issues.append(f"lost_debounce must not be negative (got {self.lost_debounce})")
        for fmt in self.export.formats:
            if fmt not in ("json", "csv"):
                issues.append(f"Unsupported export format: {fmt}")

        issues.extend(self.smoother.validate())
        return issues
