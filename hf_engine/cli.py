"""Command-line interface for the health-factor engine."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .config import load_config
from .engine import format_hf, is_liquidatable
from .errors import HfError
from .fixed_point import from_decimal
from .logging_setup import configure_logging
from .positions import load_positions
from .services import HealthFactorService, HealthMonitor
from .store import create_store


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="hf-engine",
        description="Q64.64 health-factor engine for lending positions",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    compute_parser = sub.add_parser("compute", help="Compute and store HF per owner")
    compute_parser.add_argument("positions", help="Path to a positions YAML file")

    check_parser = sub.add_parser("check", help="Compute HF and send notifications")
    check_parser.add_argument("positions", help="Path to a positions YAML file")

    show_parser = sub.add_parser("show", help="Show the stored HF for an owner")
    show_parser.add_argument("owner", help="Owner identity")

    return parser


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command and return the exit status."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    service = HealthFactorService(create_store(config.store))
    threshold_q64 = from_decimal(config.engine.liquidation_hf)

    if args.command == "show":
        state = service.last(args.owner)
        if state is None:
            print(f"No health factor stored for {args.owner}")
            return 1
        print(
            f"{state.owner}  HF {format_hf(state.last_hf_q64)}  "
            f"(q64={state.last_hf_q64}, updated={state.last_update})"
        )
        return 0

    try:
        positions = load_positions(args.positions)
    except (HfError, FileNotFoundError) as e:
        print(f"{args.positions}  FAILED  {type(e).__name__}: {e}")
        return 1

    if args.command == "check":
        monitor = HealthMonitor(config, service)
        await monitor.check_and_alert(positions)
        return 1 if monitor.failed_owners else 0

    failed = 0
    for owner, inp in positions:
        try:
            state = service.compute(owner, inp)
        except HfError as e:
            print(f"{owner}  FAILED  {type(e).__name__}: {e}")
            failed += 1
            continue
        status = (
            "LIQUIDATABLE" if is_liquidatable(state.last_hf_q64, threshold_q64) else "healthy"
        )
        print(f"{owner}  HF {format_hf(state.last_hf_q64)}  {status}")
    return 1 if failed else 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
