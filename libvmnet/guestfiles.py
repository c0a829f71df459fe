# SPDX-License-Identifier: LGPL-2.1-or-later

import re

from libvmnet.schema import GuestFile
from libvmnet.schema import Resolver
from libvmnet.schema import VM

from .nic import Nics
from .nic import is_nic_ref
from .route import RouteEntry

NAMESERVER_REGEX = re.compile(rf"{Resolver.NAMESERVER} (.+)")


def gen_resolv_conf(resolvers):
    lines = [GuestFile.HEADER]
    lines.extend(f"{Resolver.NAMESERVER} {resolver}" for resolver in resolvers)
    return "\n".join(lines) + "\n"


def parse_resolv_conf(content):
    resolvers = []
    for line in content.split("\n"):
        match = NAMESERVER_REGEX.match(line)
        if match:
            resolvers.append(match.group(1))
    return resolvers


def gen_static_routes(routes, nics):
    """
    Route via `nics[N]` is stored as interface route using the IP of that
    nic, the symbolic form is not visible to guest.
    """
    lines = [GuestFile.HEADER]
    for destination, gateway in routes.items():
        route = RouteEntry(destination, gateway)
        if is_nic_ref(gateway):
            lines.append(
                f"{GuestFile.INTERFACE_ROUTE_FLAG} {destination} "
                f"{route.gateway_ip(nics)}"
            )
        else:
            lines.append(f"{destination} {gateway}")
    return "\n".join(lines) + "\n"


def parse_static_routes(content):
    """
    Return dict of destination to gateway IP. Comment lines and lines not
    holding exactly destination and gateway are ignored.
    """
    routes = {}
    for line in content.split("\n"):
        if line.startswith(GuestFile.COMMENT):
            continue
        parts = line.split()
        if parts and parts[0] == GuestFile.INTERFACE_ROUTE_FLAG:
            parts.pop(0)
        if len(parts) != 2:
            continue
        routes[parts[0]] = parts[1]
    return routes


def resolve_routes(routes, nics):
    """
    Return dict of destination to gateway IP as guest should see it.
    """
    return {
        destination: RouteEntry(destination, gateway).gateway_ip(nics)
        for destination, gateway in routes.items()
    }


def gen_guest_files(state):
    """
    Return guest files content indexed by path relative to guest root.
    """
    nics = Nics(state.get(VM.NICS))
    return {
        GuestFile.RESOLV_CONF: gen_resolv_conf(state.get(VM.RESOLVERS, [])),
        GuestFile.STATIC_ROUTES: gen_static_routes(
            state.get(VM.ROUTES, {}), nics
        ),
    }
