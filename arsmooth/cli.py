"""
Command-line interface for replaying recorded tracker streams.
"""

import argparse
import sys
from collections import Counter
from pathlib import Path

from rich.console import Console
from rich.table import Table

from arsmooth.app import setup_logging
from arsmooth.core.config import SENSITIVITY_PRESETS, AppConfig, DeviceProfile
from arsmooth.export.csv_export import export_csv
from arsmooth.export.json_export import export_json
from arsmooth.replay import load_recording, replay

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arsmooth",
        description="AR marker pose smoothing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Replay a recorded tracker stream with default settings
  arsmooth replay session.csv --output smoothed.json

  # Replay as a mobile device with low sensitivity, export both formats
  arsmooth replay session.csv --output smoothed --device mobile --export-format both

  # Show sensitivity presets
  arsmooth presets

  # Export to the formats and directory named in a config file
  arsmooth replay session.csv --config config.yaml

  # Write a default configuration file
  arsmooth init-config config.yaml
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay_parser = subparsers.add_parser("replay", help="Replay a recorded tracker stream")
    replay_parser.add_argument(
        "recording",
        type=Path,
        help="Recorded tracker stream (CSV or JSON)",
    )
    replay_parser.add_argument(
        "--output",
        type=Path,
        help="Output file path, extension set by export format "
        "(default: export.output_dir from config, named after the recording)",
    )
    replay_parser.add_argument(
        "--config",
        type=Path,
        help="Configuration file (YAML)",
    )
    replay_parser.add_argument(
        "--sensitivity",
        choices=sorted(SENSITIVITY_PRESETS),
        help="Sensitivity preset (overrides config)",
    )
    replay_parser.add_argument(
        "--device",
        choices=[p.value for p in DeviceProfile],
        help="Device profile (overrides config)",
    )
    replay_parser.add_argument(
        "--export-format",
        choices=["json", "csv", "both"],
        help="Export format (default: export.formats from config)",
    )
    replay_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every rejected frame",
    )

    subparsers.add_parser("presets", help="Show sensitivity presets")

    init_parser = subparsers.add_parser("init-config", help="Write a default configuration file")
    init_parser.add_argument("path", type=Path, help="Destination YAML file")

    return parser


def print_presets():
    table = Table(title="Sensitivity presets")
    table.add_column("Preset", style="cyan")
    table.add_column("Max position delta", justify="right")
    table.add_column("Max rotation delta", justify="right")
    table.add_column("Smoothing factor", justify="right")
    table.add_column("Buffer size", justify="right")

    for name, preset in SENSITIVITY_PRESETS.items():
        table.add_row(
            name,
            f"{preset['max_position_delta']:.2f}",
            f"{preset['max_rotation_delta']:.2f}",
            f"{preset['smoothing_factor']:.2f}",
            str(preset["buffer_size"]),
        )

    console.print(table)


def run_replay(args) -> int:
    setup_logging(verbose=args.verbose)

    # Load configuration
    try:
        config = AppConfig.from_yaml(args.config) if args.config else AppConfig()
    except (OSError, TypeError, ValueError) as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        return 1

    if args.sensitivity:
        config.sensitivity = args.sensitivity
    if args.device:
        config.device = args.device

    # Validate configuration
    issues = config.validate()
    if issues:
        console.print("[yellow]Configuration warnings:[/yellow]")
        for issue in issues:
            console.print(f"  - {issue}")

    try:
        events = load_recording(args.recording)
    except (OSError, KeyError, ValueError) as e:
        console.print(f"[red]Error loading recording:[/red] {e}")
        return 1

    console.print(f"\n[bold green]Replaying:[/bold green] {args.recording}")
    results = replay(events, config=config, show_progress=True)

    # Export results
    console.print("\n[cyan]Exporting results...[/cyan]")

    if args.export_format == "both":
        formats = ["json", "csv"]
    elif args.export_format:
        formats = [args.export_format]
    else:
        formats = config.export.formats

    output = args.output or config.export.output_dir / args.recording.stem
    output.parent.mkdir(parents=True, exist_ok=True)

    if "json" in formats:
        json_path = output.with_suffix(".json")
        export_json(results, json_path)
        console.print(f"[green]✓[/green] Exported JSON: {json_path}")

    if "csv" in formats:
        csv_path = output.with_suffix(".csv")
        export_csv(results, csv_path)
        console.print(f"[green]✓[/green] Exported CSV: {csv_path}")

    # Print statistics
    table = Table(title="Replay summary")
    table.add_column("Target", justify="right")
    table.add_column("Frames", justify="right")
    table.add_column("Emitted", justify="right")
    table.add_column("Stabilizing", justify="right")
    table.add_column("Abrupt", justify="right")
    table.add_column("Invalid", justify="right")

    per_target = {}
    for result in results:
        per_target.setdefault(result.target_id, Counter())[result.status] += 1

    for target_id in sorted(per_target):
        counts = per_target[target_id]
        table.add_row(
            str(target_id),
            str(sum(counts.values())),
            str(counts["emitted"]),
            str(counts["stabilizing"]),
            str(counts["abrupt"]),
            str(counts["invalid"]),
        )

    console.print(table)
    console.print("\n[bold green]✓ Replay complete![/bold green]")
    return 0


def run_init_config(args) -> int:
    try:
        AppConfig().to_yaml(args.path)
    except OSError as e:
        console.print(f"[red]Error writing configuration:[/red] {e}")
        return 1
    console.print(f"[green]✓[/green] Wrote default configuration: {args.path}")
    return 0


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.command == "presets":
        print_presets()
        return 0
    if args.command == "init-config":
        return run_init_config(args)
    return run_replay(args)


if __name__ == "__main__":
    sys.exit(main())
