"""
Error types raised by LAN Discovery.

Negative reachability results are never errors. Only I/O failures,
unexpected probe faults and bad configuration reach the caller.
"""

from typing import Optional


class DiscoveryError(Exception):
    """Base class for all discovery errors"""


class DiscoveryIOError(DiscoveryError, OSError):
    """A probe hit a network-level I/O failure (resolution, socket, ping launch)"""

    def __init__(self, message: str, address: Optional[str] = None):
        super().__init__(message)
        self.address = address


class ProbeFaultError(DiscoveryError, RuntimeError):
    """A probe raised something that is not an I/O error"""

    def __init__(self, message: str, address: Optional[str] = None):
        super().__init__(message)
        self.address = address


class ConfigError(DiscoveryError, ValueError):
    """Invalid configuration value or configuration file"""
