"""
Lifecycle of a single tracked marker.
"""

import logging
from enum import Enum
from typing import Optional

from arsmooth.core.types import Pose
from arsmooth.filters.pose_smoother import PoseSmoother

logger = logging.getLogger(__name__)


class TargetState(Enum):
    """Target state enumeration."""

    SEARCHING = 0  # Never seen
    TRACKED = 1  # Currently detected
    LOST_PENDING = 2  # Lost, waiting for the debounce to expire
    LOST = 3  # Loss confirmed


class TrackedTarget:
    """
    A physical marker with its own smoother and debounced loss handling.

    The tracker fires found/lost events at most once per transition. Frames
    stop flowing to the smoother as soon as the target is reported lost, but
    the loss is only confirmed (and the smoother frozen) once the target has
    stayed missing for ``lost_debounce`` seconds.
    """

    def __init__(self, target_id: int, smoother: PoseSmoother, lost_debounce: float = 0.8):
        self.target_id = target_id
        self.smoother = smoother
        self.lost_debounce = lost_debounce

        self.state = TargetState.SEARCHING
        self.lost_since: Optional[float] = None

        # Found events seen over the target's lifetime
        self.hits = 0

    @property
    def visible(self) -> bool:
        return self.state == TargetState.TRACKED

    @property
    def is_active(self) -> bool:
        """Tracked, or lost so recently that the loss is not yet confirmed."""
        return self.state in (TargetState.TRACKED, TargetState.LOST_PENDING)

    def mark_found(self):
        """Handle a found event from the tracker."""
        if self.state == TargetState.LOST_PENDING:
            logger.debug(f"Target {self.target_id} reappeared before loss was confirmed")

        self.state = TargetState.TRACKED
        self.lost_since = None
        self.hits += 1
        self.smoother.on_target_found()

    def mark_lost(self, now: float):
        """Handle a lost event from the tracker; the loss is confirmed later."""
        if self.state != TargetState.TRACKED:
            return
        self.state = TargetState.LOST_PENDING
        self.lost_since = now

    def poll(self, now: float) -> bool:
        """
        Confirm a pending loss once the debounce window has expired.

        Returns:
            True if the loss was confirmed by this call
        """
        if self.state != TargetState.LOST_PENDING or self.lost_since is None:
            return False
        if now - self.lost_since < self.lost_debounce:
            return False

        self.state = TargetState.LOST
        self.lost_since = None
        self.smoother.on_target_lost()
        return True

    def update(self, raw_pose: Pose, now: float) -> Optional[Pose]:
        """Feed one frame to the smoother if the target is visible."""
        if not self.visible:
            return None
        return self.smoother.ingest(raw_pose, now)

    def __repr__(self) -> str:
        return (
            f"TrackedTarget(id={self.target_id}, state={self.state.name}, "
            f"hits={self.hits}, smoother={self.smoother!r})"
        )
