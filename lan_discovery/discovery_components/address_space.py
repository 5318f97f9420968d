"""
Address Space - candidate host addresses for a /24 subnet prefix
"""

from typing import Tuple

FIRST_HOST = 1
LAST_HOST = 254


def validate_subnet(subnet: str) -> str:
    """
    Check that ``subnet`` is three dotted-decimal octets (e.g. "192.168.0").

    Returns:
        The prefix unchanged

    Raises:
        ValueError: if the prefix is malformed
    """
    if not isinstance(subnet, str):
        raise ValueError(f"Subnet prefix must be a string, got {type(subnet).__name__}")

    octets = subnet.split('.')
    if len(octets) != 3:
        raise ValueError(f"Subnet prefix must have exactly three octets: {subnet!r}")

    for octet in octets:
        if not octet.isdigit() or not octet.isascii():
            raise ValueError(f"Invalid octet {octet!r} in subnet prefix {subnet!r}")
        if int(octet) > 255:
            raise ValueError(f"Octet {octet} out of range in subnet prefix {subnet!r}")

    return subnet


def candidate_addresses(subnet: str) -> Tuple[str, ...]:
    """Host addresses ``subnet.1`` through ``subnet.254``, in order."""
    validate_subnet(subnet)
    return tuple(f"{subnet}.{host}" for host in range(FIRST_HOST, LAST_HOST + 1))
