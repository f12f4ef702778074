"""
AR Pose Smoothing

Stabilizes noisy per-frame 6-DOF poses coming from an image-tracking engine
so that overlays rendered on top of physical markers stay steady.

Features:
- Adaptive exponential smoothing driven by estimated velocity
- Rejection of abrupt tracker glitches (occlusion snaps, re-detection)
- Moving-average buffering and short-horizon linear prediction
- Independent smoothing state for every tracked marker
- Sensitivity presets and a mobile device profile
- Offline replay of recorded tracker streams with JSON/CSV export

License: MIT
"""

__version__ = "1.0.0"
__author__ = "AR Pose Smoothing Contributors"

from arsmooth.core.types import Pose, SmoothedFrame
from arsmooth.core.config import AppConfig, DeviceProfile, SmootherConfig
from arsmooth.filters.pose_smoother import FrameStatus, PoseSmoother
from arsmooth.tracking.bank import TargetBank

__all__ = [
    "__version__",
    "Pose",
    "SmoothedFrame",
    "AppConfig",
    "DeviceProfile",
    "SmootherConfig",
    "FrameStatus",
    "PoseSmoother",
    "TargetBank",
]
