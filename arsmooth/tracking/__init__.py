"""Multi-target tracking lifecycle."""

from arsmooth.tracking.bank import TargetBank
from arsmooth.tracking.target import TargetState, TrackedTarget

__all__ = ["TargetBank", "TargetState", "TrackedTarget"]
