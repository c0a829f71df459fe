# SPDX-License-Identifier: LGPL-2.1-or-later

from copy import deepcopy

from libvmnet.error import InvalidAddressError
from libvmnet.error import InvalidResolverError
from libvmnet.iplib import parse_address


def validate_resolvers(resolvers):
    """
    Return the resolver list with order preserved, raise InvalidResolverError
    on the first resolver which is not an IPv4 address.
    """
    for resolver in resolvers:
        try:
            parse_address(resolver)
        except InvalidAddressError:
            raise InvalidResolverError(resolver)
    return list(resolvers)


def merge_resolvers(desire, current):
    """
    * When desire is None, use current resolvers.
    * Otherwise desire replaces current wholesale, including empty list.
    """
    if desire is None:
        return deepcopy(current) if current else []
    return list(desire)


class ResolverState:
    def __init__(self, des_resolvers, cur_resolvers):
        self._cur_resolvers = deepcopy(cur_resolvers) if cur_resolvers else []
        if des_resolvers is not None:
            validate_resolvers(des_resolvers)
        self._resolvers = merge_resolvers(des_resolvers, self._cur_resolvers)

    @property
    def config(self):
        return self._resolvers

    @property
    def current_config(self):
        return self._cur_resolvers

    @property
    def config_changed(self):
        return self._resolvers != self._cur_resolvers
