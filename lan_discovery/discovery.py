"""
LAN Discovery - concurrent reachability sweep of a /24 subnet

Every host address of the subnet is probed in parallel on a bounded
thread pool. The sweep returns the set of addresses that answered.
"""

import ipaddress
import logging
import time
from concurrent.futures import CancelledError, Future
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple

from .core.errors import DiscoveryIOError, ProbeFaultError
from .discovery_components.address_space import candidate_addresses
from .discovery_components.config_helper import DEFAULT_SUBNET, DiscoveryConfig, load_config
from .discovery_components.probe_pool import ProbePool
from .discovery_components.reachability_probe import (
    DEFAULT_TIMEOUT,
    ProbeOutcome,
    ProbeStatus,
    ReachabilityProbe,
)

# Configure logger for this module
logger = logging.getLogger(__name__)


@dataclass
class DiscoveryResult:
    """Outcome of one subnet sweep"""
    subnet: str
    addresses: FrozenSet[str] = field(default_factory=frozenset)
    reachable: int = 0
    unreachable: int = 0
    skipped: int = 0
    timestamp: str = ""
    duration_seconds: float = 0.0

    def sorted_addresses(self) -> List[str]:
        return sorted(self.addresses, key=ipaddress.IPv4Address)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "subnet": self.subnet,
            "addresses": self.sorted_addresses(),
            "reachable": self.reachable,
            "unreachable": self.unreachable,
            "skipped": self.skipped,
            "timestamp": self.timestamp,
            "duration_seconds": self.duration_seconds,
        }


class PingDiscovery:
    """Discovers reachable hosts by probing every address of a /24 subnet"""

    def __init__(self, pool: ProbePool, subnet: str = DEFAULT_SUBNET,
                 timeout: float = DEFAULT_TIMEOUT, method: str = 'icmp',
                 probe_factory: Callable[..., Callable[[], ProbeOutcome]] = ReachabilityProbe):
        """
        Initialize the discoverer.

        The pool is owned by the caller, who shuts it down when done. It
        may be reused across any number of sweeps.

        Args:
            pool: Pool the probes run on
            subnet: Default subnet prefix, e.g. "192.168.0"
            timeout: Per-probe timeout in seconds
            method: Reachability check, 'icmp' or 'tcp'
            probe_factory: Builds the probe task for an address
        """
        self.pool = pool
        self.subnet = subnet
        self.timeout = timeout
        self.method = method
        self.probe_factory = probe_factory

    def discover(self, subnet: Optional[str] = None) -> FrozenSet[str]:
        """
        Return the addresses in ``subnet`` that answered a reachability check.

        Raises:
            ValueError: if the subnet prefix is malformed
            DiscoveryIOError: if any probe failed with a network I/O error
            ProbeFaultError: if any probe failed unexpectedly
        """
        return self.scan(subnet).addresses

    def scan(self, subnet: Optional[str] = None) -> DiscoveryResult:
        """Run a sweep and return the addresses together with outcome counts."""
        subnet = self.subnet if subnet is None else subnet
        candidates = candidate_addresses(subnet)
        start_time = time.time()

        logger.info(f"Starting discovery of {len(candidates)} addresses in {subnet}.0/24")

        # everything is dispatched before the first wait
        futures = self._submit_all(candidates)

        reachable = set()
        counts = {status: 0 for status in ProbeStatus}
        first_failure: Optional[ProbeOutcome] = None

        for address, future in futures:
            outcome = self._collect(address, future)
            counts[outcome.status] += 1

            if outcome.status is ProbeStatus.REACHABLE:
                reachable.add(outcome.resolved or outcome.address)
            elif outcome.status is ProbeStatus.FAILED:
                logger.error(f"Probe of {address} failed: {outcome.error}")
                if first_failure is None:
                    first_failure = outcome

        duration = round(time.time() - start_time, 2)

        if counts[ProbeStatus.SKIPPED]:
            logger.warning(f"{counts[ProbeStatus.SKIPPED]} probe results were not collected in {subnet}.0/24")

        if first_failure is not None:
            raise DiscoveryIOError(
                f"Discovery of {subnet}.0/24 failed: probe of {first_failure.address} "
                f"raised {first_failure.error}",
                address=first_failure.address,
            ) from first_failure.error

        result = DiscoveryResult(
            subnet=subnet,
            addresses=frozenset(reachable),
            reachable=counts[ProbeStatus.REACHABLE],
            unreachable=counts[ProbeStatus.UNREACHABLE],
            skipped=counts[ProbeStatus.SKIPPED],
            timestamp=time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime(start_time)),
            duration_seconds=duration,
        )
        logger.info(f"Discovery completed for {subnet}.0/24 in {duration}s, "
                    f"{len(result.addresses)} reachable")
        return result

    def _submit_all(self, candidates: Tuple[str, ...]) -> List[Tuple[str, Future]]:
        futures = []
        for address in candidates:
            probe = self.probe_factory(address, timeout=self.timeout, method=self.method)
            futures.append((address, self.pool.submit(probe)))
        return futures

    def _collect(self, address: str, future: Future) -> ProbeOutcome:
        """Wait for one probe and turn an interrupted wait into a SKIPPED outcome."""
        try:
            return future.result()
        except CancelledError:
            logger.warning(f"Wait for probe of {address} was interrupted, skipping it")
            return ProbeOutcome(address, ProbeStatus.SKIPPED)
        except OSError as e:
            return ProbeOutcome(address, ProbeStatus.FAILED, error=e)
        except Exception as e:
            raise ProbeFaultError(f"Probe of {address} raised an unexpected error: {e!r}",
                                  address=address) from e


def discover(subnet: Optional[str] = None, config: Optional[DiscoveryConfig] = None) -> FrozenSet[str]:
    """
    Convenience function: sweep a subnet on a fresh pool and shut it down.

    Args:
        subnet: Subnet prefix, overrides the configured one
        config: Settings, loaded from the environment when omitted

    Returns:
        Reachable addresses
    """
    config = config or load_config()
    logger.debug(f"discover called with subnet={subnet}, config={config.to_dict()}")
    with ProbePool(max_workers=config.max_workers, idle_timeout=config.idle_timeout) as pool:
        discoverer = PingDiscovery(pool, subnet=config.subnet, timeout=config.timeout,
                                   method=config.method)
        return discoverer.discover(subnet)


if __name__ == "__main__":
    start = time.time()
    print(f"Found addresses {sorted(discover())} in {time.time() - start:.2f}s")
