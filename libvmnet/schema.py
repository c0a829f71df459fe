# SPDX-License-Identifier: LGPL-2.1-or-later

import pkgutil

import yaml


def load(schema_name):
    return yaml.load(
        pkgutil.get_data("libvmnet", "schemas/" + schema_name + ".yaml"),
        Loader=yaml.SafeLoader,
    )


payload_schema = load("payload")


class VM:
    NICS = "nics"
    ROUTES = "routes"
    RESOLVERS = "resolvers"


class Nic:
    KEY = "nics"

    MAC = "mac"
    TAG = "nic_tag"
    IP = "ip"
    NETMASK = "netmask"
    GATEWAY = "gateway"
    PRIMARY = "primary"

    IP_DHCP = "dhcp"
    REF_FORMAT = "nics[{}]"

    ADD = "add_nics"
    REMOVE = "remove_nics"

    MAC_PREFIX = (0x90, 0xB8, 0xD0)


class Route:
    KEY = "routes"

    SET = "set_routes"
    REMOVE = "remove_routes"


class Resolver:
    KEY = "resolvers"

    NAMESERVER = "nameserver"


class GuestFile:
    RESOLV_CONF = "etc/resolv.conf"
    STATIC_ROUTES = "etc/inet/static_routes"

    INTERFACE_ROUTE_FLAG = "-interface"
    COMMENT = "#"
    HEADER = "# Generated by vmnetstate, do not edit"
