"""Pose smoothing filters."""

from arsmooth.filters.buffer import SampleBuffer
from arsmooth.filters.pose_smoother import (
    FilterState,
    FrameStatus,
    PoseSmoother,
    SmootherStats,
)

__all__ = ["SampleBuffer", "FilterState", "FrameStatus", "PoseSmoother", "SmootherStats"]
