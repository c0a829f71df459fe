# SPDX-License-Identifier: LGPL-2.1-or-later

import ipaddress

from libvmnet.error import InvalidAddressError

MIN_PREFIX_LENGTH = 8
MAX_PREFIX_LENGTH = 32
HOST_PREFIX_LENGTH = 32


def is_cidr(token):
    return "/" in token


def parse_address(token):
    """
    Parse dotted-quad IPv4 address, four decimal octets in range 0-255.
    """
    if not isinstance(token, str) or token.count(".") != 3:
        raise InvalidAddressError(token)
    try:
        return ipaddress.IPv4Address(token)
    except ValueError:
        raise InvalidAddressError(token)


def parse_cidr(token):
    """
    Parse `<address>/<prefix>` with prefix in
    [MIN_PREFIX_LENGTH, MAX_PREFIX_LENGTH]. Host bits are allowed.
    """
    if not isinstance(token, str) or token.count("/") != 1:
        raise InvalidAddressError(token)
    address, prefix = token.split("/")
    parse_address(address)
    if not prefix.isdigit() or not prefix.isascii():
        raise InvalidAddressError(token)
    if not MIN_PREFIX_LENGTH <= int(prefix) <= MAX_PREFIX_LENGTH:
        raise InvalidAddressError(token)
    return ipaddress.IPv4Network(f"{address}/{int(prefix)}", strict=False)


def parse_destination(token):
    """
    Return IPv4Network for route destination, bare address is treated as
    host route.
    """
    if isinstance(token, str) and is_cidr(token):
        return parse_cidr(token)
    return ipaddress.IPv4Network(
        f"{parse_address(token)}/{HOST_PREFIX_LENGTH}"
    )
