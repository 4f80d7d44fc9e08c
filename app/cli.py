#!/usr/bin/env python3
"""
Usage Analytics CLI — API server, dataset summary, and offline exports.

USAGE:
  python -m app.cli serve                                   # Start API server
  python -m app.cli serve --port 9000 --reload

  python -m app.cli stats                                   # Summarize the dataset
  python -m app.cli stats --data ./data/other.csv

  python -m app.cli export --format xlsx                    # All events to exports/
  python -m app.cli export --format csv --query login --start 2024-01-01 --end 2024-01-31
  python -m app.cli export --companies "Acme,Globex"
"""
from __future__ import annotations

import argparse
from pathlib import Path

from app.config import DATA_PATH, EXPORTS_FOLDER, PORT
from app.data.store import EventStore
from app.data.schemas import EventFilter
from app.logger import configure_logging, get_logger

log = get_logger("cli")


def _load(args) -> EventStore:
    store = EventStore(args.data)
    store.load()
    return store


def cmd_stats(args):
    """Print load counts and the busiest companies and event types."""
    from app.analytics.activity import get_top_active_companies, get_event_distribution

    store = _load(args)
    report = store.load_report

    print("\n" + "=" * 60)
    print("  USAGE ANALYTICS — DATASET SUMMARY")
    print("=" * 60)
    print(f"  Source:        {store.data_path}")
    print(f"  Date range:    {store.date_range()}")
    print(f"  Rows read:     {report.rows_read:,}")
    print(f"  Rows loaded:   {report.rows_loaded:,}")
    print(f"  Rows skipped:  {report.rows_skipped:,}")
    print(f"  Companies:     {report.companies:,}")
    print(f"  Event types:   {report.event_types:,}")

    print("\nTOP COMPANIES:\n")
    for i, row in enumerate(get_top_active_companies(store)["data"], 1):
        print(f"{i:<4}{row['name'][:40]:<42}{row['event_count']:>10,}  {row['percentage']:>6.2f}%")

    print("\nEVENT TYPES:\n")
    for row in get_event_distribution(store)["data"]:
        print(f"    {row['type'][:40]:<42}{row['count']:>10,}  {row['percentage']:>6.2f}%")
    print()


def cmd_export(args):
    """Write the filtered events to EXPORTS_FOLDER."""
    from app.analytics.export import export_events

    store = _load(args)
    companies = [c.strip() for c in (args.companies or "").split(",") if c.strip()]
    filters = EventFilter.build(args.start, args.end, companies)
    result = export_events(store, args.format, args.query or "", filters)

    out_dir = Path(args.output)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / result.filename
    path.write_bytes(result.content)
    log.info("wrote export %s (%d bytes)", path, len(result.content))
    print(f"  ✓ {path}")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    log.info("starting usage analytics API on port %d", args.port)
    uvicorn.run("app.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)


def main():
    configure_logging()
    parser = argparse.ArgumentParser(
        description="Usage Analytics — product usage event analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=PORT, help=f"Port (default {PORT})")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    # stats subcommand
    stats_parser = subparsers.add_parser("stats", help="Summarize the loaded dataset")
    stats_parser.add_argument("--data", default=str(DATA_PATH), help="Source CSV")
    stats_parser.set_defaults(func=cmd_stats)

    # export subcommand
    export_parser = subparsers.add_parser("export", help="Export filtered events to a file")
    export_parser.add_argument("--data", default=str(DATA_PATH), help="Source CSV")
    export_parser.add_argument("--format", choices=["csv", "json", "xlsx"], default="csv")
    export_parser.add_argument("--query", help="Free-text search")
    export_parser.add_argument("--start", help="Start date YYYY-MM-DD")
    export_parser.add_argument("--end", help="End date YYYY-MM-DD")
    export_parser.add_argument("--companies", help="Comma-separated company names")
    export_parser.add_argument("--output", default=str(EXPORTS_FOLDER), help="Output directory")
    export_parser.set_defaults(func=cmd_export)

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
