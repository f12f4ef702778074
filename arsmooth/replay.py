"""
Offline replay of recorded tracker streams through the smoothing bank.

Recordings hold one event per row: a raw pose sample, or a found/lost
lifecycle transition, for one target at one timestamp.
"""

import csv
import json
import logging
from dataclasses import dataclass
from itertools import groupby
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from rich.progress import track

from arsmooth.core.config import AppConfig
from arsmooth.core.types import Pose, SmoothedFrame
from arsmooth.filters.pose_smoother import FrameStatus
from arsmooth.tracking.bank import TargetBank

logger = logging.getLogger(__name__)

EVENT_KINDS = ("pose", "found", "lost")
POSE_COLUMNS = ["px", "py", "pz", "rx", "ry", "rz", "sx", "sy", "sz"]
CSV_HEADER = ["timestamp", "target_id", "event"] + POSE_COLUMNS


@dataclass
class TrackerEvent:
    """One recorded tracker event."""

    timestamp: float
    target_id: int
    event: str
    pose: Optional[Pose] = None

    def __post_init__(self):
        if self.event not in EVENT_KINDS:
            raise ValueError(f"Unknown tracker event: {self.event}")
        if self.event == "pose" and self.pose is None:
            raise ValueError(f"Pose event at t={self.timestamp} carries no pose")

    def to_dict(self) -> Dict:
        data = {
            "timestamp": float(self.timestamp),
            "target_id": int(self.target_id),
            "event": self.event,
        }
        if self.pose is not None:
            data.update(self.pose.to_dict())
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "TrackerEvent":
        event = data.get("event", "pose")
        pose = Pose.from_dict(data) if event == "pose" else None
        return cls(
            timestamp=float(data["timestamp"]),
            target_id=int(data.get("target_id", 0)),
            event=event,
            pose=pose,
        )


def load_recording(path: Path) -> List[TrackerEvent]:
    """
    Load a recorded tracker stream.

    Args:
        path: CSV or JSON recording

    Returns:
        Events sorted by timestamp (stable for equal timestamps)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Recording not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        events = _load_csv(path)
    elif suffix == ".json":
        events = _load_json(path)
    else:
        raise ValueError(f"Unsupported recording format: {path.suffix}")

    logger.info(f"Loaded {len(events)} events from {path.name}")
    return sorted(events, key=lambda e: e.timestamp)


def _load_csv(path: Path) -> List[TrackerEvent]:
    events = []
    with open(path, "r", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            event = (row.get("event") or "pose").strip()
            pose = None
            if event == "pose":
                pose = Pose.from_array([float(row[col]) for col in POSE_COLUMNS])
            events.append(TrackerEvent(
                timestamp=float(row["timestamp"]),
                target_id=int(row.get("target_id") or 0),
                event=event,
                pose=pose,
            ))
    return events


def _load_json(path: Path) -> List[TrackerEvent]:
    with open(path, "r") as f:
        data = json.load(f)

    rows = data["events"] if isinstance(data, dict) else data
    return [TrackerEvent.from_dict(row) for row in rows]


def save_recording(events: Iterable[TrackerEvent], path: Path):
    """Write events in the CSV recording format."""
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for event in events:
            values = event.pose.to_array().tolist() if event.pose is not None else [""] * 9
            writer.writerow([event.timestamp, event.target_id, event.event] + values)


def replay(
    events: Iterable[TrackerEvent],
    config: Optional[AppConfig] = None,
    bank: Optional[TargetBank] = None,
    show_progress: bool = False,
) -> List[SmoothedFrame]:
    """
    Drive a target bank with recorded events, one frame per timestamp.

    Lifecycle events at a timestamp are applied before that frame's poses.
    A target with several poses at one timestamp keeps the last of them.

    Args:
        events: Recorded events, sorted by timestamp
        config: Application configuration (ignored when ``bank`` is given)
        bank: Existing bank to drive
        show_progress: Whether to show a progress bar

    Returns:
        One SmoothedFrame per target and frame with a pose
    """
    bank = bank or TargetBank(config)
    frames = [list(group) for _, group in groupby(events, key=lambda e: e.timestamp)]

    iterator = track(frames, description="Replaying...") if show_progress else frames

    results: List[SmoothedFrame] = []
    for frame_events in iterator:
        now = frame_events[0].timestamp

        raw_poses: Dict[int, Pose] = {}
        for event in frame_events:
            if event.event == "found":
                bank.target_found(event.target_id, now)
            elif event.event == "lost":
                bank.target_lost(event.target_id, now)
            else:
                if event.target_id in raw_poses:
                    logger.warning(
                        f"Duplicate pose for target {event.target_id} at {now:.3f}s, "
                        "keeping the later sample"
                    )
                raw_poses[event.target_id] = event.pose

        emitted = bank.update(raw_poses, now)

        for target_id, raw_pose in raw_poses.items():
            if target_id not in bank.targets:
                continue
            target = bank[target_id]
            if target.visible:
                status = target.smoother.last_status
            else:
                status = FrameStatus.INACTIVE
            results.append(SmoothedFrame(
                timestamp=now,
                target_id=target_id,
                status=status.value,
                raw=raw_pose,
                pose=emitted.get(target_id),
            ))

    return results
