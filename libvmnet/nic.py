# SPDX-License-Identifier: LGPL-2.1-or-later

from copy import deepcopy
import re

from libvmnet.error import InvalidAddressError
from libvmnet.error import InvalidNicError
from libvmnet.error import VmNetValueError
from libvmnet.iplib import parse_address
from libvmnet.schema import Nic

from .state import StateEntry

NIC_REF_REGEX = re.compile(r"nics\[([0-9]+)\]")


def is_nic_ref(token):
    return (
        isinstance(token, str) and NIC_REF_REGEX.fullmatch(token) is not None
    )


def parse_nic_ref(token):
    match = NIC_REF_REGEX.fullmatch(token) if isinstance(token, str) else None
    if not match:
        raise InvalidNicError(token)
    return int(match.group(1))


def gen_nic_ref(index):
    return Nic.REF_FORMAT.format(index)


class NicEntry(StateEntry):
    def __init__(self, index, info):
        self.index = index
        self._info = deepcopy(info)
        self._validate_ip()

    @property
    def mac(self):
        mac = self._info.get(Nic.MAC)
        return mac.lower() if mac else None

    @property
    def ip(self):
        return self._info.get(Nic.IP)

    @property
    def is_dhcp(self):
        return self.ip == Nic.IP_DHCP

    def _validate_ip(self):
        if self.is_dhcp:
            return
        try:
            parse_address(self.ip)
        except InvalidAddressError:
            raise VmNetValueError(
                f'Invalid IP for nic {self.index}: "{self.ip}" '
                f"(must be IP address or {Nic.IP_DHCP})"
            )

    def _keys(self):
        return (self.index, self.mac or "", self.ip)

    def to_dict(self):
        return deepcopy(self._info)


class Nics:
    """
    Ordered nic list of a VM, position in list is the index used by
    `nics[N]` route gateways.
    """

    def __init__(self, nics_info):
        self._nics = [
            NicEntry(index, info) for index, info in enumerate(nics_info or [])
        ]

    def __len__(self):
        return len(self._nics)

    def __iter__(self):
        return iter(self._nics)

    def __getitem__(self, index):
        return self._nics[index]

    def resolve_ref(self, token):
        """
        Return the NicEntry referred by `nics[N]` token. The nic should exist
        and should have static IP.
        """
        index = parse_nic_ref(token)
        if index >= len(self._nics) or self._nics[index].is_dhcp:
            raise InvalidNicError(token)
        return self._nics[index]

    def find(self, identifier):
        """
        Return the index of nic identified by MAC address, integer index or
        `nics[N]` token.
        """
        index = None
        if isinstance(identifier, int) and not isinstance(identifier, bool):
            index = identifier
        elif is_nic_ref(identifier):
            index = parse_nic_ref(identifier)
        elif (
            isinstance(identifier, str)
            and identifier.isascii()
            and identifier.isdecimal()
        ):
            index = int(identifier)
        elif isinstance(identifier, str):
            for nic in self._nics:
                if nic.mac and nic.mac == identifier.lower():
                    index = nic.index
                    break

        if index is None or not 0 <= index < len(self._nics):
            raise VmNetValueError(
                f'Cannot remove nic "{identifier}": no such nic'
            )
        return index

    def gen_after(self, removed_indexes, added_nics_info=None):
        """
        Return tuple: (new Nics, index_map)
        Nics removed are dropped, nics added are appended after the surviving
        ones. The index_map maps surviving old index to its new index.
        """
        index_map = {}
        new_nics_info = []
        for nic in self._nics:
            if nic.index in removed_indexes:
                continue
            index_map[nic.index] = len(new_nics_info)
            new_nics_info.append(nic.to_dict())
        new_nics_info.extend(deepcopy(added_nics_info or []))
        return Nics(new_nics_info), index_map

    def to_dict(self):
        return [nic.to_dict() for nic in self._nics]
