"""
Adaptive pose smoothing and short-horizon motion prediction.

Each tracked marker owns one PoseSmoother. Every rendered frame the raw
anchor pose reported by the tracker is ingested and, once the target has
been stable for a few frames, a smoothed pose is emitted:

1. Velocity is estimated from the raw pose and low-passed
2. Abrupt jumps (occlusion snaps, re-detection) are rejected
3. Accepted samples feed a moving-average ring buffer
4. The interpolation gain adapts to the estimated speed
5. The emitted pose is lerped towards the buffer average
   (or a linear prediction when the buffer is empty)
"""

import logging
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np
from numpy.typing import NDArray

from arsmooth.core.config import DeviceProfile, SmootherConfig
from arsmooth.core.types import Pose
from arsmooth.filters.buffer import SampleBuffer

logger = logging.getLogger(__name__)

# Guards the adaptive gain against a zero velocity threshold
_MIN_VELOCITY_THRESHOLD = 1e-6


class FrameStatus(Enum):
    """Outcome of a single ingest call."""

    EMITTED = "emitted"  # Smoothed pose produced
    STABILIZING = "stabilizing"  # Sample buffered, still inside the stabilization window
    ABRUPT = "abrupt"  # Sample rejected as a tracker glitch
    INVALID = "invalid"  # Non-finite pose or timestamp
    INACTIVE = "inactive"  # Target not tracked


@dataclass
class SmootherStats:
    """Running counters for one smoother."""

    frames_ingested: int = 0
    frames_emitted: int = 0
    frames_rejected: int = 0
    frames_invalid: int = 0
    stalls: int = 0

    def to_dict(self) -> dict:
        return {
            "frames_ingested": self.frames_ingested,
            "frames_emitted": self.frames_emitted,
            "frames_rejected": self.frames_rejected,
            "frames_invalid": self.frames_invalid,
            "stalls": self.stalls,
        }


@dataclass
class FilterState:
    """Mutable smoothing state for one tracked target."""

    last_pose: Pose
    buffer: SampleBuffer
    smoothing_factor: float
    adaptive_smoothing_factor: float
    velocity_position: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    velocity_rotation: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    is_tracking: bool = False
    frame_count: int = 0
    last_sample_timestamp: Optional[float] = None
    has_reference: bool = False


class PoseSmoother:
    """
    Stabilizes the raw pose stream of a single tracked target.

    The smoother starts inactive; call ``on_target_found`` when the tracker
    reports the target, then ``ingest`` once per rendered frame.
    """

    def __init__(
        self,
        config: Optional[SmootherConfig] = None,
        initial_pose: Optional[Pose] = None,
    ):
        """
        Initialize pose smoother.

        Args:
            config: Smoothing configuration (defaults to the medium preset)
            initial_pose: Reference pose for abrupt-motion checks. When omitted,
                the first finite sample seeds it (identity until then)
        """
        self.config = config or SmootherConfig()
        self._warn_config_issues()

        self.state = FilterState(
            last_pose=initial_pose or Pose.identity(),
            has_reference=initial_pose is not None,
            buffer=SampleBuffer(self.config.buffer_size),
            smoothing_factor=self.config.smoothing_factor,
            adaptive_smoothing_factor=self._clamp_gain(self.config.smoothing_factor),
        )
        self.stats = SmootherStats()
        self.last_status = FrameStatus.INACTIVE

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def last_pose(self) -> Pose:
        return self.state.last_pose

    @property
    def velocity(self) -> NDArray[np.float64]:
        """Smoothed velocity as [vx, vy, vz, wx, wy, wz]."""
        return np.concatenate([self.state.velocity_position, self.state.velocity_rotation])

    @property
    def smoothing_factor(self) -> float:
        return self.state.smoothing_factor

    @property
    def adaptive_smoothing_factor(self) -> float:
        return self.state.adaptive_smoothing_factor

    @property
    def is_tracking(self) -> bool:
        return self.state.is_tracking

    @property
    def frame_count(self) -> int:
        return self.state.frame_count

    @property
    def buffer(self) -> SampleBuffer:
        return self.state.buffer

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def on_target_found(self):
        """Restart stabilization; the last emitted pose and velocity are kept."""
        self.state.is_tracking = True
        self.state.frame_count = 0
        self.state.buffer.clear()
        logger.info("Target found - starting smooth tracking")

    def on_target_lost(self):
        """Freeze updates until the target is found again."""
        self.state.is_tracking = False
        logger.info("Target lost - stopping tracking")

    def set_sensitivity(self, level: str):
        """Switch to a named sensitivity preset at runtime."""
        self.reconfigure(self.config.with_preset(level))

    def apply_device_profile(self, profile: DeviceProfile):
        """Retune for a device class (mobile widens buffers, weakens prediction)."""
        self.reconfigure(self.config.with_device_profile(profile))

    def reconfigure(self, config: SmootherConfig):
        """Swap configuration without resetting the filter state."""
        self.config = config
        self._warn_config_issues()
        self.state.smoothing_factor = config.smoothing_factor
        self.state.adaptive_smoothing_factor = self._clamp_gain(
            self.state.adaptive_smoothing_factor
        )
        self.state.buffer.resize(config.buffer_size)

    # ------------------------------------------------------------------
    # Per-frame processing
    # ------------------------------------------------------------------

    def ingest(self, raw_pose: Pose, now: Optional[float] = None) -> Optional[Pose]:
        """
        Process the tracker's raw pose for the current frame.

        Args:
            raw_pose: Raw anchor pose reported by the tracker
            now: Monotonic timestamp in seconds (defaults to time.monotonic())

        Returns:
            The updated smoothed pose, or None when the caller should leave
            its transform untouched this frame
        """
        state = self.state

        if not state.is_tracking:
            self.last_status = FrameStatus.INACTIVE
            return None

        if now is None:
            now = time.monotonic()

        if not raw_pose.is_finite() or not math.isfinite(now):
            self.stats.frames_invalid += 1
            self.last_status = FrameStatus.INVALID
            logger.debug("Dropping non-finite pose sample")
            return None

        self.stats.frames_ingested += 1
        state.frame_count += 1

        if not state.has_reference:
            # Nothing emitted yet and no starting pose given: anchor on this sample
            state.last_pose = raw_pose
            state.has_reference = True
            logger.debug(f"Reference pose seeded at {raw_pose.position.tolist()}")

        self._update_velocity(raw_pose, now)

        if self._is_abrupt(raw_pose):
            self.stats.frames_rejected += 1
            self.last_status = FrameStatus.ABRUPT
            logger.debug("Abrupt movement detected - skipping frame")
            if self.config.reinforce_on_abrupt:
                averaged = state.buffer.average()
                if averaged is not None:
                    state.buffer.push(averaged)
            return None

        state.buffer.push(raw_pose)

        if state.frame_count <= self.config.stabilization_frames:
            self.last_status = FrameStatus.STABILIZING
            return None

        state.adaptive_smoothing_factor = self._compute_adaptive_factor()

        predicted = self._predict(raw_pose)
        averaged = state.buffer.average()
        target = averaged if averaged is not None else predicted

        state.last_pose = state.last_pose.lerp(target, state.adaptive_smoothing_factor)

        self.stats.frames_emitted += 1
        self.last_status = FrameStatus.EMITTED
        return state.last_pose

    def _update_velocity(self, raw_pose: Pose, now: float):
        """Estimate velocity against the last emitted pose and low-pass it."""
        state = self.state

        if state.last_sample_timestamp is None:
            delta_time = 0.0
        else:
            delta_time = now - state.last_sample_timestamp
        state.last_sample_timestamp = now

        if delta_time > self.config.stall_threshold:
            # Dropped frames: lean towards heavier smoothing from now on
            state.smoothing_factor = min(
                state.smoothing_factor * self.config.stall_gain,
                self.config.max_smoothing_factor,
            )
            self.stats.stalls += 1
            logger.debug(f"Frame stall of {delta_time * 1000:.1f} ms")

        if delta_time <= 0:
            return

        blend = self.config.velocity_blend
        with np.errstate(over="ignore"):
            position_velocity = (raw_pose.position - state.last_pose.position) / delta_time
            rotation_velocity = (raw_pose.rotation - state.last_pose.rotation) / delta_time
        if not (np.all(np.isfinite(position_velocity)) and np.all(np.isfinite(rotation_velocity))):
            return

        state.velocity_position = (
            state.velocity_position + (position_velocity - state.velocity_position) * blend
        )
        state.velocity_rotation = (
            state.velocity_rotation + (rotation_velocity - state.velocity_rotation) * blend
        )

    def _is_abrupt(self, raw_pose: Pose) -> bool:
        last = self.state.last_pose
        return (
            raw_pose.position_delta(last) > self.config.max_position_delta
            or raw_pose.rotation_delta(last) > self.config.max_rotation_delta
            or raw_pose.scale_delta(last) > self.config.max_scale_delta
        )

    def _compute_adaptive_factor(self) -> float:
        """Fast motion smooths harder, slow motion responds faster."""
        speed = float(np.linalg.norm(self.state.velocity_position))
        threshold = max(self.config.velocity_threshold, _MIN_VELOCITY_THRESHOLD)
        base = self.state.smoothing_factor

        if speed > threshold:
            slowdown = min(speed / threshold, self.config.max_slowdown)
            return self._clamp_gain(base / slowdown)
        return self._clamp_gain(base * 2)

    def _predict(self, raw_pose: Pose) -> Pose:
        strength = self.config.prediction_strength
        return Pose(
            position=raw_pose.position + self.state.velocity_position * strength,
            rotation=raw_pose.rotation + self.state.velocity_rotation * strength,
            scale=raw_pose.scale,
        )

    def _clamp_gain(self, value: float) -> float:
        return float(np.clip(
            value, self.config.min_smoothing_factor, self.config.max_smoothing_factor
        ))

    def _warn_config_issues(self):
        issues: List[str] = self.config.validate()
        for issue in issues:
            logger.warning(f"Smoother configuration: {issue}")

    def __repr__(self) -> str:
        return (
            f"PoseSmoother(tracking={self.state.is_tracking}, "
            f"frames={self.state.frame_count}, buffer={len(self.state.buffer)}, "
            f"gain={self.state.adaptive_smoothing_factor:.3f})"
        )
