"""Core data types and configuration."""

from arsmooth.core.config import (
    SENSITIVITY_PRESETS,
    AppConfig,
    DeviceProfile,
    ExportConfig,
    SmootherConfig,
)
from arsmooth.core.types import Pose, SmoothedFrame

__all__ = [
    "SENSITIVITY_PRESETS",
    "AppConfig",
    "DeviceProfile",
    "ExportConfig",
    "SmootherConfig",
    "Pose",
    "SmoothedFrame",
]
