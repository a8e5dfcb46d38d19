"""
Network utility functions for IPv4 address arithmetic.

This module provides helper functions for converting between dotted and
integer address forms and stepping through address ranges.
"""

import ipaddress
from typing import Union

IPV4_MAX = 0xFFFFFFFF

AddressLike = Union[str, int, ipaddress.IPv4Address]


def ip_to_int(ip_address: AddressLike) -> int:
    """
    Convert an IPv4 address to its 32-bit integer representation.

    Raises:
        ValueError: If the address is not a valid IPv4 address
    """
    return int(ipaddress.IPv4Address(ip_address))


def int_to_ip(value: int) -> str:
    """
    Convert a 32-bit integer to dotted decimal notation.

    Raises:
        ValueError: If value is outside 0..2^32-1
    """
    return str(ipaddress.IPv4Address(value))


def next_address(ip_address: AddressLike) -> str:
    """
    Return the successor of an IPv4 address.

    Increments the lowest octet first and carries into the higher ones, so
    ``10.0.0.255`` is followed by ``10.0.1.0``. ``255.255.255.255`` wraps to
    ``0.0.0.0``.

    Args:
        ip_address: Address to increment

    Returns:
        str: The next address in dotted decimal notation
    """
    return int_to_ip((ip_to_int(ip_address) + 1) & IPV4_MAX)
