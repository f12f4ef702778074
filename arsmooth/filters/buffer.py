"""
Fixed-capacity ring buffer of recent pose samples.
"""

from typing import List, Optional

import numpy as np
from numpy.typing import NDArray

from arsmooth.core.types import Pose

POSE_WIDTH = 9


class SampleBuffer:
    """
    FIFO of the last ``capacity`` accepted poses, used for moving averages.

    Samples are stored flattened in a preallocated array; pushing past
    capacity overwrites the oldest sample.
    """

    def __init__(self, capacity: int = 5):
        self._capacity = max(1, int(capacity))
        self._data: NDArray[np.float64] = np.zeros((self._capacity, POSE_WIDTH))
        self._start = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._count

    def push(self, pose: Pose):
        """Append a sample, evicting the oldest one when full."""
        end = (self._start + self._count) % self._capacity
        self._data[end] = pose.to_array()
        if self._count < self._capacity:
            self._count += 1
        else:
            self._start = (self._start + 1) % self._capacity

    def average(self) -> Optional[Pose]:
        """Component-wise mean of the buffered samples, or None when empty."""
        if self._count == 0:
            return None
        return Pose.from_array(self._ordered().mean(axis=0))

    def samples(self) -> List[Pose]:
        """Buffered samples, oldest first."""
        return [Pose.from_array(row) for row in self._ordered()]

    def clear(self):
        self._start = 0
        self._count = 0

    def resize(self, capacity: int):
        """Change capacity, keeping the newest samples that still fit."""
        capacity = max(1, int(capacity))
        if capacity == self._capacity:
            return

        kept = self._ordered()[-capacity:]
        self._capacity = capacity
        self._data = np.zeros((capacity, POSE_WIDTH))
        self._data[:len(kept)] = kept
        self._start = 0
        self._count = len(kept)

    def _ordered(self) -> NDArray[np.float64]:
        idx = (self._start + np.arange(self._count)) % self._capacity
        return self._data[idx]

    def __repr__(self) -> str:
        return f"SampleBuffer(size={self._count}, capacity={self._capacity})"
