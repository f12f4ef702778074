"""Shared fixtures and helpers for the pose smoothing tests."""

from typing import Iterable, List, Optional

import pytest

from arsmooth.core.config import SmootherConfig
from arsmooth.core.types import Pose
from arsmooth.filters.pose_smoother import PoseSmoother

FRAME_DT = 1.0 / 60.0


def make_pose(x: float = 0.0, y: float = 0.0, z: float = 0.0,
              rotation=(0.0, 0.0, 0.0), scale=(1.0, 1.0, 1.0)) -> Pose:
    return Pose(position=(x, y, z), rotation=rotation, scale=scale)


def feed(smoother: PoseSmoother, poses: Iterable[Pose], start: float = 0.0,
         dt: float = FRAME_DT) -> List[Optional[Pose]]:
    """Ingest poses at a fixed frame rate and collect the outputs."""
    return [smoother.ingest(pose, start + i * dt) for i, pose in enumerate(poses)]


@pytest.fixture
def config():
    """Default (medium) smoother configuration."""
    return SmootherConfig()


@pytest.fixture
def smoother(config):
    """Smoother that has already been told its target is in view."""
    s = PoseSmoother(config)
    s.on_target_found()
    return s
