"""
Reachability Probe - one bounded-time liveness check per host

A probe resolves its address, then either sends a single ICMP echo through
the platform ping command or attempts a TCP connection to the echo port.
"""

import enum
import errno
import logging
import platform
import socket
import subprocess
import time
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
ECHO_PORT = 7
METHODS = ('icmp', 'tcp')

# extra time given to the ping process beyond its own reply deadline
PING_GRACE_SECONDS = 1.0


class ProbeStatus(enum.Enum):
    REACHABLE = 'reachable'
    UNREACHABLE = 'unreachable'
    FAILED = 'failed'
    SKIPPED = 'skipped'


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of probing a single candidate address"""
    address: str
    status: ProbeStatus
    resolved: Optional[str] = None
    error: Optional[BaseException] = None
    elapsed: float = 0.0

    @property
    def is_reachable(self) -> bool:
        return self.status is ProbeStatus.REACHABLE


def build_ping_command(address: str, timeout: float, system: Optional[str] = None) -> List[str]:
    """
    Build a single-echo ping command for the current platform.

    Windows and macOS take the reply deadline in milliseconds, Linux in
    whole seconds.
    """
    system = (system or platform.system()).lower()
    if system == 'windows':
        return ['ping', '-n', '1', '-w', str(int(timeout * 1000)), address]
    if system == 'darwin':
        return ['ping', '-c', '1', '-W', str(int(timeout * 1000)), address]
    return ['ping', '-c', '1', '-W', str(max(1, int(round(timeout)))), address]


def interpret_ping_result(returncode: int, stdout: str, stderr: str,
                          system: Optional[str] = None) -> bool:
    """
    Map a finished ping process to reachable (True) or unreachable (False).

    iputils ping exits 1 when no reply came back and 2 on any other error;
    BSD/macOS ping exits 2 for no reply and 64 and up on errors. Windows
    ping also exits 0 when the local gateway answers "Destination host
    unreachable", so there a reply only counts if it carries a TTL.

    Raises:
        OSError: ping could not send the echo (no raw socket permission,
            no route, bad interface)
    """
    system = (system or platform.system()).lower()
    if system == 'windows':
        return returncode == 0 and 'ttl=' in stdout.lower()

    no_reply = (2,) if system == 'darwin' else (1,)
    if returncode == 0:
        return True
    if returncode in no_reply:
        return False
    message = stderr.strip() or stdout.strip() or f"ping exited with status {returncode}"
    raise OSError(errno.EIO, message)


class ReachabilityProbe:
    """Callable task that checks whether one address answers within ``timeout``"""

    def __init__(self, address: str, timeout: float = DEFAULT_TIMEOUT, method: str = 'icmp'):
        if not address:
            raise ValueError("Probe address must not be empty")
        if method not in METHODS:
            raise ValueError(f"Unknown reachability method {method!r}, expected one of {METHODS}")
        self.address = address
        self.timeout = timeout
        self.method = method

    def __repr__(self) -> str:
        return f"ReachabilityProbe({self.address!r}, timeout={self.timeout}, method={self.method!r})"

    def __call__(self) -> ProbeOutcome:
        start_time = time.monotonic()

        try:
            resolved = socket.gethostbyname(self.address)
        except OSError as e:
            elapsed = time.monotonic() - start_time
            logger.debug(f"Address {self.address} FAILED to resolve in {elapsed:.3f}s: {e}")
            return ProbeOutcome(self.address, ProbeStatus.FAILED, error=e, elapsed=elapsed)

        try:
            if self.method == 'tcp':
                reachable = self._check_tcp(resolved)
            else:
                reachable = self._check_icmp(resolved)
        except OSError as e:
            elapsed = time.monotonic() - start_time
            logger.debug(f"Address {resolved} FAILED in {elapsed:.3f}s: {e}")
            return ProbeOutcome(self.address, ProbeStatus.FAILED, resolved=resolved, error=e, elapsed=elapsed)

        elapsed = time.monotonic() - start_time
        if reachable:
            logger.debug(f"Address {resolved} REACHABLE in {elapsed:.3f}s")
            return ProbeOutcome(self.address, ProbeStatus.REACHABLE, resolved=resolved, elapsed=elapsed)

        logger.debug(f"Address {resolved} UNREACHABLE in {elapsed:.3f}s")
        return ProbeOutcome(self.address, ProbeStatus.UNREACHABLE, resolved=resolved, elapsed=elapsed)

    def _check_icmp(self, address: str) -> bool:
        system = platform.system()
        cmd = build_ping_command(address, self.timeout, system=system)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout + PING_GRACE_SECONDS,
            )
        except subprocess.TimeoutExpired:
            return False
        return interpret_ping_result(result.returncode, result.stdout or "", result.stderr or "",
                                     system=system)

    def _check_tcp(self, address: str) -> bool:
        # a refused connection still proves the host is up
        try:
            with socket.create_connection((address, ECHO_PORT), timeout=self.timeout):
                return True
        except ConnectionRefusedError:
            return True
        except OSError:
            return False
