#!/usr/bin/env python3
"""
LAN Discovery CLI

Sweeps a /24 subnet and prints the addresses that answered.
"""

import argparse
import json
import logging
import sys
import time
from typing import List, Optional

from .core.errors import ConfigError, DiscoveryError
from .core.logging import setup_logging
from .discovery import PingDiscovery
from .discovery_components.probe_pool import ProbePool
from .discovery_components.config_helper import load_config
from .discovery_components.reachability_probe import METHODS

# Configure logger for CLI
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lan-discovery',
        description="LAN Discovery - find reachable hosts on a /24 subnet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sweep the default subnet
  lan-discovery

  # Sweep another subnet with a shorter timeout
  lan-discovery --subnet 10.0.0 --timeout 2

  # Use TCP echo-port checks instead of ping, JSON output
  lan-discovery --method tcp --json

Settings can also come from a YAML file (--config) or LAN_DISCOVERY_*
environment variables. Command line flags win.
        """
    )
    parser.add_argument('--subnet', help='First three octets of the subnet (default: 192.168.0)')
    parser.add_argument('--timeout', type=float, help='Per-probe timeout in seconds (default: 10)')
    parser.add_argument('--workers', type=int, dest='max_workers',
                        help='Maximum concurrent probes (default: 256)')
    parser.add_argument('--idle-timeout', type=float,
                        help='Seconds before an idle worker thread exits (default: 10)')
    parser.add_argument('--method', choices=METHODS, help='Reachability check (default: icmp)')
    parser.add_argument('--config', help='YAML configuration file')
    parser.add_argument('--json', action='store_true', help='Print the result as JSON')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level="INFO" if args.verbose else "WARNING", debug=args.verbose, stream=sys.stderr)
    if args.verbose:
        logger.info("Verbose logging enabled")

    try:
        config = load_config(
            config_file=args.config,
            subnet=args.subnet,
            timeout=args.timeout,
            max_workers=args.max_workers,
            idle_timeout=args.idle_timeout,
            method=args.method,
        )
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 2

    start_time = time.time()
    pool = ProbePool(max_workers=config.max_workers, idle_timeout=config.idle_timeout)
    try:
        discoverer = PingDiscovery(pool, subnet=config.subnet, timeout=config.timeout,
                                   method=config.method)
        result = discoverer.scan()
    except KeyboardInterrupt:
        # workers are daemon threads; in-flight pings are abandoned
        pool.shutdown(wait=False, cancel_futures=True)
        logger.info("Discovery interrupted by user")
        return 1
    except DiscoveryError as e:
        pool.shutdown(wait=True)
        logger.error(f"Discovery failed: {e}")
        print(f"error: {e}", file=sys.stderr)
        return 1
    pool.shutdown(wait=True)

    if args.json:
        print(json.dumps(result.to_dict()))
    else:
        print(f"Found addresses {result.sorted_addresses()} in {time.time() - start_time:.2f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
