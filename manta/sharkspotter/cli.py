"""Command-line entry point.

Usage:
    # Find objects on 3.stor in shard 2.moray
    sharkspotter -m 2.moray -s 3.stor -d us-east.example.com

    # Scan a sub-range in smaller chunks
    sharkspotter -m 2.moray -s 3.stor -d us-east.example.com -b 1000 -e 50000 -c 1000

    # Record every object id of the shard in a reusable filter file
    sharkspotter -m 2.moray -f /var/tmp/2.moray.bits -d us-east.example.com
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys
from collections.abc import Sequence
from pathlib import Path

from .core.config import DEFAULT_BACKOFF_DELAY, DEFAULT_CHUNK_SIZE, ScanConfig
from .core.exceptions import ConfigError, SpotterError
from .runtime.orchestrator import ScanOrchestrator, ScanSummary

logger = logging.getLogger("manta.sharkspotter")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sharkspotter",
        description="Find objects stored on a given storage node by scanning a metadata shard",
    )
    parser.add_argument(
        "-m", "--moray", dest="shard", required=True, help="shard to search, e.g. 2.moray"
    )
    parser.add_argument(
        "-d", "--domain", required=True, help="domain name of services, e.g. us-east.example.com"
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "-s", "--shark", dest="target_location", help="storage node to search for, e.g. 3.stor"
    )
    target.add_argument(
        "-f",
        "--filter",
        dest="filter_path",
        type=Path,
        help="record object ids in this filter file instead",
    )
    parser.add_argument(
        "-b", "--begin", type=int, default=0, help="id to start the search from (default 0)"
    )
    parser.add_argument(
        "-e",
        "--end",
        type=int,
        default=None,
        help="id to end the search at (default: larger of max(_id), max(_idx))",
    )
    parser.add_argument(
        "-c",
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help="ids per query (default 10000)",
    )
    parser.add_argument(
        "--keep-part-records", action="store_true", help="do not skip multipart upload parts"
    )
    parser.add_argument(
        "--backoff-delay",
        type=float,
        default=DEFAULT_BACKOFF_DELAY,
        help="seconds to wait before retrying an overloaded chunk (default 5)",
    )
    parser.add_argument(
        "--max-overload-retries",
        type=int,
        default=None,
        help="give up on a chunk after N overload retries",
    )
    parser.add_argument(
        "--gateway-url", default=None, help="SQL gateway URL (default http://<shard>:2020)"
    )
    parser.add_argument(
        "--output-dir", type=Path, default=Path("."), help="directory for the result file"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="log verbosity",
    )
    return parser


def parse_config(argv: Sequence[str] | None = None) -> tuple[ScanConfig, argparse.Namespace]:
    """Parse arguments into a validated config; exits with status 2 on bad input."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = ScanConfig.from_options(
            shard=args.shard,
            domain=args.domain,
            target_location=args.target_location,
            filter_path=args.filter_path,
            begin=args.begin,
            end=args.end,
            chunk_size=args.chunk_size,
            keep_part_records=args.keep_part_records,
            backoff_delay=args.backoff_delay,
            max_overload_retries=args.max_overload_retries,
            gateway_url=args.gateway_url,
            output_dir=args.output_dir,
        )
    except ConfigError as e:
        parser.error(str(e))
    return config, args


async def run_scan(config: ScanConfig) -> ScanSummary:
    """Run one scan session, cancelling between chunks or overload waits on SIGINT/SIGTERM."""
    cancel = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, cancel.set)
        except (NotImplementedError, RuntimeError):
            pass

    async with ScanOrchestrator.from_config(config) as orchestrator:
        logger.info("sharkspotter: begin", extra={"options": config.model_dump(mode="json")})
        return await orchestrator.run(cancel=cancel)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    config, args = parse_config(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        summary = asyncio.run(run_scan(config))
    except SpotterError as e:
        logger.error("sharkspotter: failed", extra={"error_message": str(e)})
        print(json.dumps({"succeeded": False, "error": f"{type(e).__name__}: {e}"}))
        return 1

    print(json.dumps(summary.to_dict(), indent=2))
    return 0 if summary.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
