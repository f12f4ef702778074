"""Export smoothed pose streams to CSV format."""

import csv
from pathlib import Path
from typing import List

from arsmooth.core.types import SmoothedFrame

POSE_COLUMNS = ["px", "py", "pz", "rx", "ry", "rz", "sx", "sy", "sz"]


def export_csv(results: List[SmoothedFrame], output_path: Path):
    """
    Export smoothed poses to CSV format.

    Format: timestamp, target_id, status, px, py, pz, rx, ry, rz, sx, sy, sz

    Pose columns are left empty for frames that produced no update.

    Args:
        results: List of smoothed frames
        output_path: Output CSV file path
    """
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)

        # Write header
        writer.writerow(["timestamp", "target_id", "status"] + POSE_COLUMNS)

        # Write data
        for result in results:
            if result.pose is not None:
                values = [float(v) for v in result.pose.to_array()]
            else:
                values = [""] * len(POSE_COLUMNS)
            writer.writerow([float(result.timestamp), result.target_id, result.status] + values)
