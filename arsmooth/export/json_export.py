"""Export smoothed pose streams to JSON format."""

import json
from pathlib import Path
from typing import List

from arsmooth import __version__
from arsmooth.core.types import SmoothedFrame


def export_json(results: List[SmoothedFrame], output_path: Path):
    """
    Export results to JSON format.

    Args:
        results: List of smoothed frames
        output_path: Output JSON file path
    """
    data = {
        "version": __version__,
        "num_frames": len(results),
        "num_emitted": sum(1 for result in results if result.emitted),
        "frames": [result.to_dict() for result in results],
    }

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)
