from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from .store import DEFAULT_DB_PATH


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Report followed mangahub.io series with chapters newer than the last one you read.",
    )
    parser.add_argument(
        "--places",
        default=None,
        help="Path to Firefox places.sqlite (default: the default profile's history).",
    )
    parser.add_argument(
        "--db",
        default=str(DEFAULT_DB_PATH),
        help=f"Allow/deny database location (default: {DEFAULT_DB_PATH}).",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=1,
        help="Attempts per series page request (default: 1).",
    )
    parser.add_argument(
        "--backoff",
        type=float,
        default=3.0,
        help="Base backoff (seconds) between retries (default: 3.0).",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.0,
        help="Optional delay (seconds) between series page requests.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="HTTP timeout in seconds for series page requests (default: 30).",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("check", help="Check tracked series for new chapters (default).")
    list_parser = subparsers.add_parser("list", help="Print the allowed or denied series.")
    list_parser.add_argument("which", choices=("allowed", "denied"))

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "check"
    return args


def validate_args(args: argparse.Namespace) -> None:
    if args.retries <= 0:
        raise SystemExit("Retries must be at least 1.")
    if args.backoff < 0:
        raise SystemExit("Backoff must be zero or greater.")
    if args.delay < 0:
        raise SystemExit("Delay must be zero or greater.")
    if args.timeout <= 0:
        raise SystemExit("Timeout must be a positive number.")
    if args.places is not None and not Path(args.places).is_file():
        raise SystemExit(f"History database not found: {args.places}")
    db_path = Path(args.db).expanduser()
    if db_path.exists() and not db_path.is_file():
        raise SystemExit(f"Database path exists and is not a file: {db_path}")
