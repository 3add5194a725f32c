#!/usr/bin/env python3
"""
CLI for asset maintenance status and usage reports.

Commands:
  summary    - One row per asset: interval due/overdue, last service, usage, costs
  intervals  - Status and due point of every interval for one asset
  usage      - Cleaned readings and per-pair usage contributions for one asset
"""

import argparse
import json
import logging
import os
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from maintrecon import (
    AssetMaintenanceSummary,
    CostAggregationClient,
    IntervalState,
    ReportConfig,
    StoreUnavailableError,
    build_report,
    clean_series,
    load_config,
    load_snapshot,
    normalize_events,
    resolve_maintenance,
    trace_usage,
)
from maintrecon.cycle import IntervalStatus
from maintrecon.normalizer import extract_events

# =============================================================================
# Formatting helpers
# =============================================================================


def format_value(value: Optional[float], unit: str = "") -> str:
    """Format a counter value for display."""
    if value is None:
        return "-"
    text = f"{value:,.0f}"
    return f"{text} {unit}" if unit else text


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def format_signed(summary: AssetMaintenanceSummary) -> str:
    """Overdue amount as a negative number, remaining as positive."""
    if summary.overdue is not None:
        return f"-{abs(summary.overdue):,.0f}"
    if summary.remaining is not None:
        return f"{summary.remaining:,.0f}"
    return "-"


def format_last_service(summary: AssetMaintenanceSummary) -> str:
    """Format last service as 'date @ value'."""
    parts = []
    if summary.last_service_date:
        parts.append(summary.last_service_date)
    if summary.last_service_value is not None:
        parts.append(f"{summary.last_service_value:,.0f}")
    return " @ ".join(parts) if parts else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


# =============================================================================
# Shared setup
# =============================================================================


def make_config(args) -> ReportConfig:
    """Report window from --from/--to (default: today) plus file overrides."""
    overrides = load_config(args.config) if getattr(args, "config", None) else {}
    today = date.today().isoformat()
    return ReportConfig.for_dates(args.date_from or today, args.date_to or today, **overrides)


def make_cost_source(args):
    """HTTP collaborator when a URL is configured, else the snapshot's figures."""
    url = getattr(args, "cost_url", None) or os.environ.get("COST_AGGREGATION_URL")
    if url:
        return CostAggregationClient(url)
    return None


# =============================================================================
# Summary command
# =============================================================================


def make_summary_table(summaries: List[AssetMaintenanceSummary]) -> List[List[str]]:
    """Convert summaries to table rows."""
    rows = []
    for s in summaries:
        unit = s.maintenance_unit.symbol
        rows.append(
            [
                s.asset_code,
                truncate(s.plant_name, 20),
                format_value(s.current_value, unit),
                truncate(s.interval_name, 40),
                format_signed(s),
                format_last_service(s),
                format_value(s.usage, unit),
                format_value(s.fuel_liters, "L"),
                format_cost(s.maintenance_cost),
            ]
        )
    return rows


def cmd_summary(args):
    """Show the maintenance summary for every in-scope asset."""
    config = make_config(args)
    store = load_snapshot(args.snapshot_file)
    summaries = build_report(
        store,
        config,
        cost_source=make_cost_source(args),
        business_unit_id=args.business_unit,
        plant_id=args.plant,
    )

    if args.json:
        print(json.dumps({"assets": [s.to_dict() for s in summaries]}, indent=2))
        return 0

    print(f"Period: {config.date_from} to {config.date_to}")
    print(f"Assets: {len(summaries)}")
    overdue = sum(1 for s in summaries if s.overdue is not None)
    if overdue:
        print(f"Overdue: {overdue}")
    print()

    if not summaries:
        print("No assets in scope.")
        return 0

    headers = [
        "Asset",
        "Plant",
        "Current",
        "Interval",
        "Remaining",
        "Last Service",
        "Usage",
        "Fuel",
        "Maint. Cost",
    ]
    print(tabulate(make_summary_table(summaries), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Intervals command
# =============================================================================


def make_interval_table(statuses: List[IntervalStatus], current_value: float) -> List[List[str]]:
    """Convert interval statuses to table rows."""
    rows = []
    for s in statuses:
        remaining = "-"
        if s.due_value is not None and s.state.is_actionable:
            remaining = f"{s.remaining(current_value):,.0f}"
        rows.append(
            [
                s.interval.label,
                format_value(s.interval.interval_value),
                s.state.label.upper(),
                format_value(s.due_value),
                remaining,
            ]
        )
    return rows


def cmd_intervals(args):
    """Show status of every interval for one asset."""
    store = load_snapshot(args.snapshot_file)
    asset = store.get_asset(args.asset_id)
    if asset is None:
        print(f"Error: Unknown asset '{args.asset_id}'")
        return 1

    config = make_config(args)
    intervals = store.fetch_intervals([asset.model_id]).get(asset.model_id, [])
    history = store.fetch_service_history([asset.id]).get(asset.id, [])
    resolution, selection = resolve_maintenance(asset, intervals, history, config)

    unit = asset.maintenance_unit.symbol
    print(f"Asset: {asset.display_name}")
    print(f"Current: {format_value(asset.current_value, unit)}")
    if resolution is None:
        print("No maintenance intervals defined for this model.")
        return 0
    print(
        f"Cycle: {resolution.current_cycle} "
        f"({format_value(resolution.cycle_start)} - {format_value(resolution.cycle_end)} {unit})"
    )
    if selection.interval_label:
        print(f"Selected: {selection.interval_label}")
    print()

    statuses = sorted(
        resolution.statuses,
        key=lambda s: (s.state.value, s.interval.interval_value),
    )
    headers = ["Interval", "Value", "Status", "Due", "Remaining"]
    print(
        tabulate(
            make_interval_table(statuses, resolution.current_value),
            headers=headers,
            tablefmt="simple",
        )
    )

    not_applicable = resolution.by_state(IntervalState.NOT_APPLICABLE)
    if not_applicable:
        print()
        print(f"NOT APPLICABLE ({len(not_applicable)} intervals)")
    return 0


# =============================================================================
# Usage command
# =============================================================================


def cmd_usage(args):
    """Show cleaned readings and how each pair contributed to usage."""
    config = make_config(args)
    store = load_snapshot(args.snapshot_file)
    asset = store.get_asset(args.asset_id)
    if asset is None:
        print(f"Error: Unknown asset '{args.asset_id}'")
        return 1

    fuel = store.fetch_fuel_transactions([asset.id], config.extended_start, config.window_end)
    checklists = store.fetch_checklist_readings([asset.id], config.extended_start, config.window_end)
    events = extract_events(fuel, checklists, {asset.id: asset.maintenance_unit})
    series = normalize_events(events, config.extended_start, config.window_end).get(asset.id)

    print(f"Asset: {asset.display_name}")
    print(f"Period: {config.date_from} to {config.date_to}")
    if series is None:
        print("No readings in period.")
        return 0

    readings = clean_series(series, config)
    print(f"Readings: {len(series)} raw, {len(readings)} after cleaning")
    print()

    rows = []
    total = 0.0
    for current, nxt, result in trace_usage(readings, config):
        if result.skip_reason is None:
            total += result.contribution
        rows.append(
            [
                current.ts.isoformat(sep=" "),
                format_value(current.value),
                nxt.ts.isoformat(sep=" "),
                format_value(nxt.value),
                f"{result.contribution:,.1f}",
                result.skip_reason.value if result.skip_reason else ("capped" if result.capped else "-"),
            ]
        )
    if not rows:
        print("Usage unknown (not enough readings).")
        return 0

    headers = ["From", "Value", "To", "Value", "Usage", "Note"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    print()
    print(f"Total: {format_value(max(total, 0.0), asset.maintenance_unit.symbol)}")
    return 0


# =============================================================================
# Main
# =============================================================================


def add_period_arguments(parser, required: bool = True):
    parser.add_argument(
        "--from",
        dest="date_from",
        required=required,
        help="First day of the period (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--to",
        dest="date_to",
        required=required,
        help="Last day of the period, inclusive (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML file with threshold overrides",
    )


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Asset maintenance status and usage reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s snapshots/sample.yaml summary --from 2025-01-01 --to 2025-01-31
  %(prog)s snapshots/sample.yaml summary --from 2025-01-01 --to 2025-01-31 --plant p-north
  %(prog)s snapshots/sample.yaml intervals a-cr12
  %(prog)s snapshots/sample.yaml usage a-cr12 --from 2025-01-01 --to 2025-01-31
""",
    )
    parser.add_argument(
        "snapshot_file",
        type=Path,
        help="Path to store snapshot YAML file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress (-v) or debug detail (-vv)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Summary subcommand
    summary_parser = subparsers.add_parser(
        "summary", help="Maintenance summary for every in-scope asset"
    )
    add_period_arguments(summary_parser)
    summary_parser.add_argument("--business-unit", type=str, help="Business unit id filter")
    summary_parser.add_argument("--plant", type=str, help="Plant id filter (historical plant)")
    summary_parser.add_argument(
        "--cost-url",
        type=str,
        help="Cost aggregation endpoint (default: $COST_AGGREGATION_URL, else snapshot figures)",
    )
    summary_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    # Intervals subcommand
    intervals_parser = subparsers.add_parser(
        "intervals", help="Status of every interval for one asset"
    )
    intervals_parser.add_argument("asset_id", type=str, help="Asset id")
    add_period_arguments(intervals_parser, required=False)

    # Usage subcommand
    usage_parser = subparsers.add_parser(
        "usage", help="Cleaned readings and usage contributions for one asset"
    )
    usage_parser.add_argument("asset_id", type=str, help="Asset id")
    add_period_arguments(usage_parser)

    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    # Validate snapshot file exists
    if not args.snapshot_file.exists():
        print(f"Error: File not found: {args.snapshot_file}")
        return 1

    try:
        if args.command == "summary":
            return cmd_summary(args)
        elif args.command == "intervals":
            return cmd_intervals(args)
        elif args.command == "usage":
            return cmd_usage(args)
    except StoreUnavailableError as e:
        print(f"Error: {e}")
        return 1
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
