"""Main CLI entry point."""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path


def main(argv: list[str] | None = None) -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(
        prog="contract-enrichment",
        description="Enriched contract views from CRM query results",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # contracts
    contracts_parser = subparsers.add_parser("contracts", help="Fetch and enrich contracts")
    contracts_parser.add_argument(
        "--month",
        type=str,
        default=None,
        help="Calendar month YYYY-MM (default: previous month)",
    )
    contracts_parser.add_argument(
        "--start",
        type=date.fromisoformat,
        default=None,
        help="Contract start date from, inclusive (YYYY-MM-DD). Requires --end.",
    )
    contracts_parser.add_argument(
        "--end",
        type=date.fromisoformat,
        default=None,
        help="Contract start date to, exclusive (YYYY-MM-DD). Requires --start.",
    )
    contracts_parser.add_argument(
        "--dept",
        type=str,
        default=None,
        help="Opportunity owner department (ALL or * for every department)",
    )
    contracts_parser.add_argument(
        "--stages",
        type=Path,
        default=None,
        help="YAML file with extra stage label variants (won/install)",
    )
    contracts_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write enriched JSON to file (default: stdout)",
    )

    # day-diff
    diff_parser = subparsers.add_parser("day-diff", help="Days between two CRM timestamps")
    diff_parser.add_argument("start", help="Start timestamp or date")
    diff_parser.add_argument("end", help="End timestamp or date")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "contracts":
        _run_contracts(args)
    elif args.command == "day-diff":
        _run_day_diff(args)
    else:
        parser.print_help()


def _run_contracts(args: argparse.Namespace) -> None:
    """Run contracts command."""
    import httpx

    from contract_enrichment.auth import EnvTokenProvider
    from contract_enrichment.enrichment.stages import StageTable
    from contract_enrichment.exceptions import EnrichmentError
    from contract_enrichment.models.filters import FilterParams
    from contract_enrichment.pipeline import enrich_contracts

    if (args.start is None) != (args.end is None):
        raise SystemExit("--start and --end must be given together.")

    try:
        params = FilterParams(
            month=args.month,
            start=args.start,
            end=args.end,
            owner_department=args.dept,
        )
        params.resolve_range()
    except ValueError as e:
        raise SystemExit(f"Invalid filter: {e}")

    try:
        stages = StageTable.from_yaml(args.stages) if args.stages else None
    except (OSError, EnrichmentError) as e:
        raise SystemExit(f"Invalid stage file: {e}")

    try:
        contracts = enrich_contracts(params, EnvTokenProvider(), stages=stages)
    except EnrichmentError as e:
        print(f"Error [{e.code}]: {e}", file=sys.stderr)
        raise SystemExit(1)
    except httpx.HTTPError as e:
        print(f"Query failed: {e}", file=sys.stderr)
        raise SystemExit(1)

    output = json.dumps(
        [c.model_dump(mode="json") for c in contracts],
        indent=2,
        ensure_ascii=False,
        default=str,
    )

    if args.output:
        args.output.write_text(output, encoding="utf-8")
        print(f"Wrote {len(contracts)} contracts to {args.output}")
    else:
        print(output)


def _run_day_diff(args: argparse.Namespace) -> None:
    """Run day-diff command."""
    from contract_enrichment.enrichment.dates import day_diff

    print(json.dumps(day_diff(args.start, args.end).model_dump()))


if __name__ == "__main__":
    main()
