"""
LAN Discovery - Concurrent reachability sweep of a /24 subnet

Usage Examples:

# Quick discovery of the default subnet
from lan_discovery import discover
addresses = discover()

# Reusing one pool across sweeps
from lan_discovery import PingDiscovery, ProbePool
with ProbePool(max_workers=256, idle_timeout=10) as pool:
    discoverer = PingDiscovery(pool, subnet="10.0.0", timeout=2)
    addresses = discoverer.discover()
"""

from .core.errors import ConfigError, DiscoveryError, DiscoveryIOError, ProbeFaultError
from .discovery import DiscoveryResult, PingDiscovery, discover
from .discovery_components.address_space import candidate_addresses
from .discovery_components.config_helper import DiscoveryConfig, load_config
from .discovery_components.probe_pool import ProbePool
from .discovery_components.reachability_probe import ProbeOutcome, ProbeStatus, ReachabilityProbe

__version__ = "0.1.0"
__all__ = [
    "discover",
    "PingDiscovery",
    "DiscoveryResult",
    "ProbePool",
    "ReachabilityProbe",
    "ProbeOutcome",
    "ProbeStatus",
    "DiscoveryConfig",
    "load_config",
    "candidate_addresses",
    "DiscoveryError",
    "DiscoveryIOError",
    "ProbeFaultError",
    "ConfigError",
]


def main():
    """Entry point for the CLI"""
    import sys
    from .cli import main as cli_main
    sys.exit(cli_main())
