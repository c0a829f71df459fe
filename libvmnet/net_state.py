# SPDX-License-Identifier: LGPL-2.1-or-later

import copy
import logging

from libvmnet.error import VmNetValueError
from libvmnet.schema import Nic
from libvmnet.schema import Resolver
from libvmnet.schema import Route
from libvmnet.schema import VM

from .nic import Nics
from .resolver import ResolverState
from .route import RouteState
from .route import parse_route_destination
from .route import validate_routes

CREATE_ONLY_KEYS = (VM.NICS, VM.ROUTES)


class NetState:
    """
    Network state of a VM after applying the desire state on top of the
    current state.

    Without current state, desire state is a creation payload holding
    `nics`, `routes` and `resolvers`. With current state, desire state is an
    update payload holding `set_routes`, `remove_routes`, `remove_nics`,
    `add_nics` and `resolvers`.

    Everything is validated before anything is merged, any failure raises
    VmNetValueError and neither desire nor current state is modified.
    """

    def __init__(self, desire_state, current_state=None):
        self.desire_state = copy.deepcopy(desire_state)
        self.current_state = copy.deepcopy(current_state)
        if current_state is None:
            self._create()
        else:
            self._update()

    def _create(self):
        self._nics = Nics(self.desire_state.get(VM.NICS))
        routes = validate_routes(
            self.desire_state.get(VM.ROUTES, {}), self._nics
        )
        self._resolver = ResolverState(
            self.desire_state.get(VM.RESOLVERS), None
        )
        self._route = RouteState()
        self._route.merge(routes)

    def _update(self):
        for key in CREATE_ONLY_KEYS:
            if key in self.desire_state:
                raise VmNetValueError(
                    f"Property '{key}' is not allowed in update, please use "
                    f"'{Route.SET}', '{Route.REMOVE}', '{Nic.ADD}' or "
                    f"'{Nic.REMOVE}' instead"
                )
        cur_nics = Nics(self.current_state.get(VM.NICS))

        # Validate phase
        routes = validate_routes(
            self.desire_state.get(Route.SET, {}), cur_nics
        )
        self._resolver = ResolverState(
            self.desire_state.get(Resolver.KEY),
            self.current_state.get(VM.RESOLVERS),
        )
        added_nics_info = self.desire_state.get(Nic.ADD, [])
        Nics(added_nics_info)
        removed_networks = [
            parse_route_destination(destination)
            for destination in self.desire_state.get(Route.REMOVE, [])
        ]
        removed_indexes = {
            cur_nics.find(identifier)
            for identifier in self.desire_state.get(Nic.REMOVE, [])
        }

        # Merge phase, working on copies of current state only
        self._route = RouteState(self.current_state.get(VM.ROUTES))
        self._route.remove(removed_networks)
        self._route.merge(routes)
        self._route.validate_nic_dependency(cur_nics, removed_indexes)

        self._nics, index_map = cur_nics.gen_after(
            removed_indexes, added_nics_info
        )
        self._route.renumber(index_map)
        if self._resolver.config_changed:
            logging.debug(
                f"Resolvers changed from {self._resolver.current_config} "
                f"to {self._resolver.config}"
            )

    @property
    def state(self):
        return {
            VM.NICS: self._nics.to_dict(),
            VM.ROUTES: self._route.to_dict(),
            VM.RESOLVERS: list(self._resolver.config),
        }
