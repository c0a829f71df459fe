# SPDX-License-Identifier: LGPL-2.1-or-later

import logging

from libvmnet.error import InvalidAddressError
from libvmnet.error import InvalidDestinationError
from libvmnet.error import InvalidGatewayError
from libvmnet.error import InvalidNicError
from libvmnet.iplib import is_cidr
from libvmnet.iplib import parse_address
from libvmnet.iplib import parse_destination

from .nic import gen_nic_ref
from .nic import is_nic_ref
from .nic import parse_nic_ref
from .state import StateEntry


class RouteEntry(StateEntry):
    """
    Static route of a VM: destination (IP address or CIDR) to gateway (IP
    address or `nics[N]`). The user supplied tokens are kept as is.
    """

    def __init__(self, destination, gateway):
        self.destination = destination
        self.gateway = gateway
        self.network = None
        self.nic_index = None

    @property
    def is_nic_gateway(self):
        return self.nic_index is not None

    def validate(self, nics):
        """
        Validate destination first, then gateway. The first failure is raised.
        """
        self.network = parse_route_destination(self.destination)

        if is_nic_ref(self.gateway):
            self.nic_index = nics.resolve_ref(self.gateway).index
        elif not isinstance(self.gateway, str) or is_cidr(self.gateway):
            raise InvalidGatewayError(self.gateway)
        else:
            try:
                parse_address(self.gateway)
            except InvalidAddressError:
                raise InvalidGatewayError(self.gateway)

    def gateway_ip(self, nics):
        """
        Return the concrete gateway IP, `nics[N]` is resolved to the IP of
        that nic.
        """
        if is_nic_ref(self.gateway):
            return nics.resolve_ref(self.gateway).ip
        return self.gateway

    def renumber(self, index_map):
        """
        Rewrite `nics[N]` gateway using index_map(old index to new index).
        """
        if not is_nic_ref(self.gateway):
            return
        old_index = parse_nic_ref(self.gateway)
        new_index = index_map[old_index]
        if new_index != old_index:
            logging.debug(
                f"Route {self.destination} gateway renumbered from "
                f"{self.gateway} to {gen_nic_ref(new_index)}"
            )
            self.gateway = gen_nic_ref(new_index)
            self.nic_index = new_index

    def _keys(self):
        return (self.destination, self.gateway)

    def to_dict(self):
        return {self.destination: self.gateway}


def parse_route_destination(token):
    try:
        return parse_destination(token)
    except InvalidAddressError:
        raise InvalidDestinationError(token)


def validate_route(destination, gateway, nics):
    route = RouteEntry(destination, gateway)
    route.validate(nics)
    return route


class RouteState:
    """
    Routes of a VM indexed by destination network.
    """

    def __init__(self, cur_routes=None):
        self._routes = {}
        if cur_routes:
            for destination, gateway in cur_routes.items():
                route = RouteEntry(destination, gateway)
                route.network = parse_route_destination(destination)
                self._routes[route.network] = route

    def remove(self, networks):
        """
        Remove routes by destination network returned by
        parse_route_destination(), so `172.21.1.1` and `172.21.1.1/32` are
        the same route.
        """
        # Must be called before merge()
        for network in networks:
            if self._routes.pop(network, None) is None:
                logging.debug(
                    f"Ignoring removal of non-existent route {network}"
                )

    def merge(self, routes):
        for route in routes:
            old_route = self._routes.get(route.network)
            if old_route and old_route.destination != route.destination:
                logging.debug(
                    f"Route {old_route.destination} replaced by "
                    f"{route.destination} for the same destination"
                )
            self._routes[route.network] = route

    def validate_nic_dependency(self, nics, removed_indexes):
        """
        Every `nics[N]` route should refer to an existing static IP nic which
        is not being removed.
        """
        for route in self._routes.values():
            if is_nic_ref(route.gateway):
                nic = nics.resolve_ref(route.gateway)
                if nic.index in removed_indexes:
                    raise InvalidNicError(route.gateway)
                route.nic_index = nic.index

    def renumber(self, index_map):
        for route in self._routes.values():
            route.renumber(index_map)

    @property
    def routes(self):
        return list(self._routes.values())

    def to_dict(self):
        return {
            route.destination: route.gateway
            for route in self._routes.values()
        }


def validate_routes(routes, nics):
    """
    Validate routes in given order, return list of RouteEntry.
    """
    return [
        validate_route(destination, gateway, nics)
        for destination, gateway in routes.items()
    ]
