"""CLI entry point for inspecting exported lead dumps.

Reads a JSON array of lead rows (as exported from the lead table) and
prints what the dashboard would show, without touching the store.

Usage:
    leadforge rank leads.json --tab GULF --limit 20
    leadforge counts leads.json
    leadforge snipers leads.json --top 5

Example:
    # Check how big the 100+ review sniper list is before a campaign
    python -m leadforge --verbose snipers leads.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .classifier import LeadClassifier
from .config import ConfigError, config
from .listing import LeadFilter, build_listing, dedupe_leads, tab_counts, visible_leads
from .logging_utils import get_logger, setup_logging
from .models import Lead
from .signals import is_high_value_sniper
from .sources import SourceTab

logger = get_logger(__name__)


class DumpError(Exception):
    """Raised when a lead dump cannot be read."""

    pass


def load_leads(path: str) -> List[Lead]:
    """Load lead rows from a JSON file, skipping rows that fail validation.

    Raises:
        DumpError: If the file is missing, not JSON, or not a list.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise DumpError(f"Cannot read {path}: {e}") from e
    except ValueError as e:
        raise DumpError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise DumpError(f"{path} must contain a JSON array of lead rows")

    leads: List[Lead] = []
    for index, row in enumerate(data):
        try:
            leads.append(Lead.model_validate(row))
        except ValidationError as e:
            logger.warning(
                "Skipping invalid row",
                extra={"index": index, "error": str(e)},
            )
    return leads


def cmd_rank(args: argparse.Namespace, leads: List[Lead]) -> int:
    lead_filter = LeadFilter(
        tab=SourceTab(args.tab),
        search=args.search or "",
        premium_only=args.premium_only,
        campaign_id=args.campaign,
    )
    listing = build_listing(leads, LeadClassifier(), lead_filter)

    for item in listing[: args.limit] if args.limit else listing:
        pin = "*" if item.analysis.is_pinned else " "
        print(
            f"{pin} {item.analysis.tag.value:24} | {item.lead.business_name} | "
            f"Reviews: {item.lead.review_count} | Rating: {item.lead.rating} | "
            f"{item.channel}"
        )
        if args.show_pitch:
            print(f"    {item.analysis.pitch}")

    print(f"{len(listing)} leads")
    return 0


def cmd_counts(args: argparse.Namespace, leads: List[Lead]) -> int:
    for tab, count in tab_counts(leads).items():
        print(f"{tab.value:12} {count}")
    return 0


def cmd_snipers(args: argparse.Namespace, leads: List[Lead]) -> int:
    survivors = [
        lead for lead in dedupe_leads(visible_leads(leads))
        if is_high_value_sniper(lead)
    ]
    print(f"100+ Review Sniper List Count: {len(survivors)}")
    print(f"--- Top {args.top} Candidates ---")
    survivors.sort(key=lambda lead: lead.review_count, reverse=True)
    for lead in survivors[: args.top]:
        print(f"{lead.business_name} | Reviews: {lead.review_count} | Rating: {lead.rating}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="leadforge",
        description="Inspect a lead dump the way the LeadForge dashboard sees it.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable INFO logging (default: LOG_LEVEL)")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_dump_arg(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "dump",
            nargs="?",
            help="JSON lead dump (default: LEADFORGE_DUMP_PATH)",
        )

    rank_parser = subparsers.add_parser("rank", help="Print the ranked lead listing")
    add_dump_arg(rank_parser)
    rank_parser.add_argument(
        "--tab",
        default=SourceTab.ALL.value,
        choices=[tab.value for tab in SourceTab],
        help="Source tab filter",
    )
    rank_parser.add_argument("--search", help="Business name or phone substring")
    rank_parser.add_argument("--premium-only", action="store_true", help="Premium leads only")
    rank_parser.add_argument("--campaign", help="Campaign id filter")
    rank_parser.add_argument("--limit", type=int, default=0, help="Max rows (0 = all)")
    rank_parser.add_argument("--show-pitch", action="store_true", help="Print each pitch")
    rank_parser.set_defaults(handler=cmd_rank)

    counts_parser = subparsers.add_parser("counts", help="Print lead counts per source tab")
    add_dump_arg(counts_parser)
    counts_parser.set_defaults(handler=cmd_counts)

    snipers_parser = subparsers.add_parser("snipers", help="Print the 100+ review sniper list")
    add_dump_arg(snipers_parser)
    snipers_parser.add_argument("--top", type=int, default=5, help="Candidates to show")
    snipers_parser.set_defaults(handler=cmd_snipers)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI.

    Returns:
        Process exit code: 0 on success, 1 when the dump cannot be loaded.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug or config.DEBUG:
        level = "DEBUG"
    elif args.verbose:
        level = "INFO"
    else:
        level = logging.getLevelName(config.get_log_level())
    setup_logging(level=level, structured=not config.is_development())

    try:
        path = config.validate_for_cli(args.dump)
        leads = load_leads(path)
    except (ConfigError, DumpError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info("Loaded lead dump", extra={"path": path, "count": len(leads)})
    return args.handler(args, leads)


if __name__ == "__main__":
    sys.exit(main())
