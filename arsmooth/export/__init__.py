"""Export modules for smoothed pose streams."""

from arsmooth.export.json_export import export_json
from arsmooth.export.csv_export import export_csv

__all__ = ["export_json", "export_csv"]
