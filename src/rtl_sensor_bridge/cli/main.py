"""CLI entry point for the sensor bridge."""

from __future__ import annotations

import argparse
import logging
import sys
import time

from rtl_sensor_bridge.accessories.sink import InMemoryServiceFactory
from rtl_sensor_bridge.core.exceptions import ConfigError, DecoderProcessError
from rtl_sensor_bridge.ui.display import (
    display_accessories,
    print_banner,
    print_error,
    print_success,
)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="RTL Bridge - Forward rtl_433 sensor readings to accessories"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        required=True,
        help="Configuration file (platform block or Homebridge config.json)",
    )
    parser.add_argument(
        "-d",
        "--duration",
        type=int,
        default=0,
        help="Duration in seconds (default: 0 = until rtl_433 exits)",
    )
    parser.add_argument(
        "--rtl-433",
        dest="rtl_433",
        type=str,
        default=None,
        help="Path to the rtl_433 binary (overrides configuration)",
    )
    parser.add_argument(
        "--no-kill-stale",
        action="store_true",
        help="Do not kill running rtl_433 instances before starting",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show every dispatched update",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Use plain text output (no rich formatting)",
    )
    return parser


def bridge() -> None:
    """Sensor bridge CLI entry point."""
    args = build_parser().parse_args()
    setup_logging(args.verbose)

    from rtl_sensor_bridge.core.config import load_config
    from rtl_sensor_bridge.decoders.rtl433 import require_rtl433_available
    from rtl_sensor_bridge.platform import RTLPlatform

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    updates: dict[str, object] = {}
    if args.rtl_433:
        updates["rtl_433_path"] = args.rtl_433
    if args.no_kill_stale:
        updates["kill_stale"] = False
    if updates:
        config = config.model_copy(update=updates)

    try:
        require_rtl433_available(config.rtl_433_path)
    except DecoderProcessError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print_banner(
        "RTL Bridge",
        f"{len(config.devices)} device(s) via {config.rtl_433_path}",
        plain=args.plain,
    )
    print("Press Ctrl+C to stop\n")

    platform = RTLPlatform(config, InMemoryServiceFactory())
    platform.accessories(lambda accessories: None)

    handle = platform.handle
    if handle is None:
        if args.plain:
            print("Error: rtl_433 could not be started", file=sys.stderr)
        else:
            print_error("rtl_433 could not be started")
        sys.exit(1)

    if not args.plain:
        print_success(f"rtl_433 running (PID: {handle.pid})")

    start_time = time.time()
    try:
        while not handle.wait(timeout=1.0):
            if args.duration > 0 and time.time() - start_time >= args.duration:
                print(f"\nDuration ({args.duration}s) reached.")
                break
    except KeyboardInterrupt:
        print("\nStopped")
    finally:
        platform.shutdown()
        display_accessories(
            platform.registry.accessories,
            stats=platform.dispatcher.stats,
            plain=args.plain,
        )
