"""
Independent smoothers for every tracked marker.
"""

import logging
from typing import Dict, List, Mapping, Optional

from arsmooth.core.config import AppConfig, DeviceProfile, SmootherConfig
from arsmooth.core.types import Pose
from arsmooth.filters.pose_smoother import PoseSmoother
from arsmooth.tracking.target import TargetState, TrackedTarget

logger = logging.getLogger(__name__)


class TargetBank:
    """
    One TrackedTarget per marker; targets share no mutable state.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        """
        Initialize the target bank.

        Args:
            config: Application configuration (number of targets, preset,
                device profile, loss debounce)
        """
        self.config = config or AppConfig()

        smoother_config = self.config.build_smoother_config()
        self.targets: Dict[int, TrackedTarget] = {
            target_id: TrackedTarget(
                target_id,
                PoseSmoother(smoother_config),
                lost_debounce=self.config.lost_debounce,
            )
            for target_id in range(self.config.num_targets)
        }

    def __len__(self) -> int:
        return len(self.targets)

    def __getitem__(self, target_id: int) -> TrackedTarget:
        return self.targets[target_id]

    def target_found(self, target_id: int, now: float):
        target = self._get(target_id)
        if target is not None:
            target.mark_found()

    def target_lost(self, target_id: int, now: float):
        target = self._get(target_id)
        if target is not None:
            target.mark_lost(now)

    def poll(self, now: float) -> List[int]:
        """
        Confirm pending losses whose debounce window has expired.

        Returns:
            Ids of targets whose loss was confirmed by this call
        """
        confirmed = [
            target_id for target_id, target in self.targets.items() if target.poll(now)
        ]
        if confirmed and not self.active_targets():
            logger.info("No targets in view")
        return confirmed

    def update(self, raw_poses: Mapping[int, Pose], now: float) -> Dict[int, Pose]:
        """
        Process one rendered frame.

        Args:
            raw_poses: Raw anchor pose for each target reported this frame
            now: Monotonic frame timestamp in seconds

        Returns:
            Smoothed poses for targets that produced an update this frame
        """
        self.poll(now)

        emitted = {}
        for target_id, raw_pose in raw_poses.items():
            target = self._get(target_id)
            if target is None:
                continue
            pose = target.update(raw_pose, now)
            if pose is not None:
                emitted[target_id] = pose
        return emitted

    def active_targets(self) -> List[int]:
        return [
            target_id for target_id, target in self.targets.items() if target.is_active
        ]

    def visible_targets(self) -> List[int]:
        return [
            target_id for target_id, target in self.targets.items()
            if target.state == TargetState.TRACKED
        ]

    def set_sensitivity(self, level: str):
        """Switch every smoother to a named sensitivity preset."""
        for target in self.targets.values():
            target.smoother.set_sensitivity(level)

    def apply_device_profile(self, profile: DeviceProfile):
        for target in self.targets.values():
            target.smoother.apply_device_profile(profile)

    def reconfigure(self, config: SmootherConfig):
        for target in self.targets.values():
            target.smoother.reconfigure(config)

    def _get(self, target_id: int) -> Optional[TrackedTarget]:
        target = self.targets.get(target_id)
        if target is None:
            logger.warning(f"Ignoring event for unknown target {target_id}")
        return target
