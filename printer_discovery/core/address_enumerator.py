"""
Address enumeration for CIDR blocks.

Turns a CIDR string into the ordered sequence of every IPv4 address it
contains, network and broadcast addresses included.
"""

import ipaddress
from typing import Iterator

from ..utils.error_handler import ConfigurationError
from ..utils.network_utils import next_address


def parse_network(cidr: str) -> ipaddress.IPv4Network:
    """
    Parse and validate an IPv4 CIDR block.

    Host bits are masked off, so ``192.168.1.7/24`` yields ``192.168.1.0/24``.

    Args:
        cidr: Network in ``address/prefix`` notation

    Returns:
        The parsed network

    Raises:
        ConfigurationError: If cidr is not a valid IPv4 CIDR block
    """
    if not isinstance(cidr, str) or "/" not in cidr:
        raise ConfigurationError(f"Invalid CIDR: {cidr!r} (expected address/prefix, e.g. 192.168.1.0/24)")
    try:
        return ipaddress.IPv4Network(cidr.strip(), strict=False)
    except ValueError as e:
        raise ConfigurationError(f"Invalid CIDR: {cidr!r}: {e}") from e


def enumerate_addresses(cidr: str) -> Iterator[str]:
    """
    Enumerate every address of a CIDR block in ascending order.

    Validation happens immediately; the returned iterator is lazy and yields
    exactly ``2 ** (32 - prefixlen)`` addresses.

    Raises:
        ConfigurationError: If cidr is not a valid IPv4 CIDR block
    """
    network = parse_network(cidr)
    return _walk_block(str(network.network_address), network.num_addresses)


def _walk_block(first: str, count: int) -> Iterator[str]:
    address = first
    for _ in range(count):
        yield address
        address = next_address(address)
