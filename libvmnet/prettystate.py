# SPDX-License-Identifier: LGPL-2.1-or-later

from collections import OrderedDict
from copy import deepcopy
import difflib
import json

import yaml

from libvmnet.schema import Nic
from libvmnet.schema import VM

PRIORITY_KEYS = (VM.NICS, VM.ROUTES, VM.RESOLVERS)
NIC_PRIORITY_KEYS = (Nic.MAC, Nic.TAG, Nic.IP, Nic.NETMASK)


def format_desired_current_state_diff(desired_state, current_state):
    pretty_desired_state = PrettyState(desired_state).yaml
    pretty_current_state = PrettyState(current_state).yaml

    diff = "".join(
        difflib.unified_diff(
            pretty_desired_state.splitlines(True),
            pretty_current_state.splitlines(True),
            fromfile="desired",
            tofile="current",
            n=3,
        )
    )
    return (
        "\n"
        "desired\n"
        "=======\n"
        f"{pretty_desired_state}\n"
        "current\n"
        "=======\n"
        f"{pretty_current_state}\n"
        "difference\n"
        "==========\n"
        f"{diff}\n"
    )


class PrettyState:
    def __init__(self, state):
        yaml.add_representer(OrderedDict, represent_ordereddict)
        self.state = order_state(deepcopy(state))

    @property
    def yaml(self):
        return yaml.dump(
            self.state, default_flow_style=False, explicit_start=True
        )

    @property
    def json(self):
        return json.dumps(self.state, indent=4, separators=(",", ": "))


def represent_ordereddict(dumper, data):
    """
    Represent OrderedDict as regular dictionary
    """
    value = []

    for item_key, item_value in data.items():
        node_key = dumper.represent_data(item_key)
        node_value = dumper.represent_data(item_value)

        value.append((node_key, node_value))

    return yaml.nodes.MappingNode("tag:yaml.org,2002:map", value)


def order_state(state):
    """
    Top level keys in the order of nics, routes, resolvers. Routes are
    sorted by destination, resolvers keep their order as it is meaningful.
    """
    ordered_state = _order_by_priority(state, PRIORITY_KEYS)
    if isinstance(ordered_state.get(VM.NICS), list):
        ordered_state[VM.NICS] = [
            _order_by_priority(nic, NIC_PRIORITY_KEYS)
            for nic in ordered_state[VM.NICS]
        ]
    if isinstance(ordered_state.get(VM.ROUTES), dict):
        ordered_state[VM.ROUTES] = order_dict(ordered_state[VM.ROUTES])
    return ordered_state


def _order_by_priority(dict_, priority_keys):
    ordered = OrderedDict()
    for key in priority_keys:
        if key in dict_:
            ordered[key] = dict_.pop(key)
    for key, value in order_dict(dict_).items():
        ordered[key] = value
    return ordered


def order_dict(dict_):
    ordered_dict = OrderedDict()
    for key, value in sorted(dict_.items()):
        if isinstance(value, dict):
            value = order_dict(value)
        ordered_dict[key] = value

    return ordered_dict
