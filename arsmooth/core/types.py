"""
Core data types for pose smoothing.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np
from numpy.typing import NDArray


def _as_vector(values: Sequence[float]) -> NDArray[np.float64]:
    vector = np.array(values, dtype=np.float64).reshape(-1)
    assert vector.shape == (3,), "Pose components must have exactly 3 values"
    vector.setflags(write=False)
    return vector


@dataclass(frozen=True)
class Pose:
    """
    6-DOF pose sampled from the tracker or emitted by a smoother.

    Rotation is stored as XYZ Euler angles in radians. All three components
    are read-only arrays, so a pose never changes after construction.
    """

    position: NDArray[np.float64]
    rotation: NDArray[np.float64]
    scale: NDArray[np.float64]

    def __post_init__(self):
        object.__setattr__(self, "position", _as_vector(self.position))
        object.__setattr__(self, "rotation", _as_vector(self.rotation))
        object.__setattr__(self, "scale", _as_vector(self.scale))

    @classmethod
    def identity(cls) -> "Pose":
        """Origin, no rotation, unit scale."""
        return cls(position=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0), scale=(1.0, 1.0, 1.0))

    @classmethod
    def from_array(cls, values: Sequence[float]) -> "Pose":
        """Build from a flat [px, py, pz, rx, ry, rz, sx, sy, sz] vector."""
        flat = np.asarray(values, dtype=np.float64).reshape(-1)
        assert flat.shape == (9,), "Flat pose must have 9 values"
        return cls(position=flat[0:3], rotation=flat[3:6], scale=flat[6:9])

    def to_array(self) -> NDArray[np.float64]:
        """Convert to a flat [px, py, pz, rx, ry, rz, sx, sy, sz] vector."""
        return np.concatenate([self.position, self.rotation, self.scale])

    def lerp(self, target: "Pose", t: float) -> "Pose":
        """
        Move towards another pose by a fraction.

        Position and scale use vector lerp, rotation uses independent
        per-axis scalar lerp (no shortest-path wrapping).

        Args:
            target: Pose to move towards
            t: Interpolation weight (0 = stay, 1 = jump to target)

        Returns:
            New interpolated pose
        """
        return Pose(
            position=self.position + (target.position - self.position) * t,
            rotation=self.rotation + (target.rotation - self.rotation) * t,
            scale=self.scale + (target.scale - self.scale) * t,
        )

    def position_delta(self, other: "Pose") -> float:
        """Euclidean distance between positions."""
        return float(np.linalg.norm(self.position - other.position))

    def rotation_delta(self, other: "Pose") -> float:
        """Sum of absolute per-axis rotation differences."""
        return float(np.sum(np.abs(self.rotation - other.rotation)))

    def scale_delta(self, other: "Pose") -> float:
        """Absolute scale difference on the x axis."""
        return float(abs(self.scale[0] - other.scale[0]))

    def is_finite(self) -> bool:
        return bool(
            np.all(np.isfinite(self.position))
            and np.all(np.isfinite(self.rotation))
            and np.all(np.isfinite(self.scale))
        )

    def to_dict(self) -> Dict[str, List[float]]:
        """Convert to dictionary for serialization."""
        return {
            "position": [float(v) for v in self.position],
            "rotation": [float(v) for v in self.rotation],
            "scale": [float(v) for v in self.scale],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Sequence[float]]) -> "Pose":
        """Create from dictionary."""
        return cls(
            position=data["position"],
            rotation=data.get("rotation", (0.0, 0.0, 0.0)),
            scale=data.get("scale", (1.0, 1.0, 1.0)),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pose):
            return NotImplemented
        return bool(
            np.array_equal(self.position, other.position)
            and np.array_equal(self.rotation, other.rotation)
            and np.array_equal(self.scale, other.scale)
        )

    def __hash__(self) -> int:
        return hash(self.to_array().tobytes())

    def __repr__(self) -> str:
        return (
            f"Pose(position={self.position.tolist()}, "
            f"rotation={self.rotation.tolist()}, scale={self.scale.tolist()})"
        )


@dataclass
class SmoothedFrame:
    """Result of one replayed tracker frame for a single target."""

    timestamp: float
    target_id: int
    status: str
    raw: Optional[Pose] = None
    pose: Optional[Pose] = None

    @property
    def emitted(self) -> bool:
        return self.pose is not None

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "timestamp": float(self.timestamp),
            "target_id": int(self.target_id),
            "status": self.status,
            "raw": self.raw.to_dict() if self.raw is not None else None,
            "pose": self.pose.to_dict() if self.pose is not None else None,
        }
