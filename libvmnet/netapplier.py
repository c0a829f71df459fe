# SPDX-License-Identifier: LGPL-2.1-or-later

import copy
import logging
import os
import random

from libvmnet import validator
from libvmnet.error import VmNetVerificationError
from libvmnet.schema import GuestFile
from libvmnet.schema import Nic
from libvmnet.schema import VM

from .guestfiles import gen_guest_files
from .guestfiles import parse_resolv_conf
from .guestfiles import parse_static_routes
from .guestfiles import resolve_routes
from .net_state import NetState
from .nic import Nics
from .prettystate import format_desired_current_state_diff
from .version import get_version


def create(payload):
    """
    Validate the VM creation payload and return the network state of new VM

    :param payload: dict holding `nics`, `routes` and `resolvers`
    :returns: dict holding `nics`, `routes` and `resolvers`
    :rtype: dict
    """
    logging.debug(f"libvmnet version: {get_version()}")
    logging.debug(f"Creating VM network state: {payload}")
    payload = copy.deepcopy(payload)
    validator.schema_validate(payload)
    _gen_missing_macs(payload.get(VM.NICS, []), [])
    return NetState(payload).state


def update(current_state, payload):
    """
    Apply the update payload on top of current VM network state. The whole
    payload is rejected by VmNetValueError when any entry is invalid.

    :param current_state: dict returned by `create()` or `update()`
    :param payload: dict holding `set_routes`, `remove_routes`,
        `remove_nics`, `add_nics` and `resolvers`
    :returns: new network state
    :rtype: dict
    """
    logging.debug(f"libvmnet version: {get_version()}")
    logging.debug(f"Updating VM network state {current_state} by {payload}")
    payload = copy.deepcopy(payload)
    validator.schema_validate(payload)
    _gen_missing_macs(
        payload.get(Nic.ADD, []), current_state.get(VM.NICS, [])
    )
    return NetState(payload, current_state).state


def write_guest_files(state, root):
    """
    Write resolver and static route files into guest root directory.
    """
    for rel_path, content in gen_guest_files(state).items():
        path = os.path.join(root, rel_path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as fd:
            fd.write(content)
        logging.debug(f"Guest file {path} written")


def verify_guest_files(state, root):
    """
    Read back the guest files and compare with the network state, raise
    VmNetVerificationError on mismatch.
    """
    desired = {
        VM.RESOLVERS: list(state.get(VM.RESOLVERS, [])),
        VM.ROUTES: resolve_routes(
            state.get(VM.ROUTES, {}), Nics(state.get(VM.NICS))
        ),
    }
    current = {
        VM.RESOLVERS: parse_resolv_conf(
            _read_guest_file(root, GuestFile.RESOLV_CONF)
        ),
        VM.ROUTES: parse_static_routes(
            _read_guest_file(root, GuestFile.STATIC_ROUTES)
        ),
    }
    if desired != current:
        raise VmNetVerificationError(
            format_desired_current_state_diff(desired, current)
        )


def _read_guest_file(root, rel_path):
    path = os.path.join(root, rel_path)
    if not os.path.exists(path):
        logging.debug(f"Guest file {path} does not exist")
        return ""
    with open(path) as fd:
        return fd.read()


def _gen_missing_macs(nics_info, existing_nics_info):
    used_macs = {
        nic[Nic.MAC].lower()
        for nic in list(nics_info) + list(existing_nics_info)
        if nic.get(Nic.MAC)
    }
    for nic in nics_info:
        if not nic.get(Nic.MAC):
            mac = random_mac()
            while mac in used_macs:
                mac = random_mac()
            used_macs.add(mac)
            nic[Nic.MAC] = mac


def random_mac():
    octets = list(Nic.MAC_PREFIX)
    octets += [random.randint(0x00, 0xFF) for _ in range(3)]
    return ":".join(f"{octet:02x}" for octet in octets)
