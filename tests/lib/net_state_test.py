# SPDX-License-Identifier: LGPL-2.1-or-later

from copy import deepcopy

import pytest

from libvmnet.error import InvalidDestinationError
from libvmnet.error import InvalidNicError
from libvmnet.error import InvalidResolverError
from libvmnet.error import VmNetValueError
from libvmnet.net_state import NetState
from libvmnet.schema import Nic
from libvmnet.schema import Resolver
from libvmnet.schema import Route
from libvmnet.schema import VM

from .testlib.constants import GATEWAY_IP
from .testlib.constants import NIC0_IP
from .testlib.constants import NIC1_MAC
from .testlib.constants import NIC2_IP
from .testlib.constants import RESOLVER1
from .testlib.constants import RESOLVER2
from .testlib.constants import RESOLVER3
from .testlib.niclib import gen_nic_info
from .testlib.niclib import gen_three_static_nics
from .testlib.niclib import gen_two_static_nics
from .testlib.routelib import HOST_ROUTE_DESTINATION
from .testlib.routelib import INVALID_NIC
from .testlib.routelib import NET_ROUTE_DESTINATION
from .testlib.routelib import NEW_NET_ROUTE_DESTINATION
from .testlib.routelib import ROUTE_FAILURES
from .testlib.routelib import gen_routes


def _gen_current_state():
    return NetState(
        {
            VM.NICS: gen_two_static_nics(),
            VM.ROUTES: gen_routes(),
            VM.RESOLVERS: [RESOLVER1],
        }
    ).state


class TestCreate:
    def test_create(self):
        state = _gen_current_state()

        assert state[VM.ROUTES] == gen_routes()
        assert state[VM.RESOLVERS] == [RESOLVER1]
        assert state[VM.NICS] == gen_two_static_nics()

    def test_create_empty(self):
        assert NetState({}).state == {
            VM.NICS: [],
            VM.ROUTES: {},
            VM.RESOLVERS: [],
        }

    @pytest.mark.parametrize(
        "description,routes,nics_info,error_cls,message",
        ROUTE_FAILURES,
        ids=[failure[0] for failure in ROUTE_FAILURES],
    )
    def test_create_failures(
        self, description, routes, nics_info, error_cls, message
    ):
        with pytest.raises(error_cls) as excinfo:
            NetState({VM.NICS: nics_info, VM.ROUTES: routes})
        assert str(excinfo.value) == message

    def test_create_with_invalid_resolver(self):
        with pytest.raises(InvalidResolverError):
            NetState({VM.RESOLVERS: [RESOLVER1, "asdf"]})

    def test_route_error_reported_before_resolver_error(self):
        with pytest.raises(InvalidNicError):
            NetState(
                {VM.ROUTES: {"10.2.0.0/24": "nics[0]"}, VM.RESOLVERS: ["x"]}
            )

    def test_desire_state_untouched(self):
        desire = {VM.NICS: gen_two_static_nics(), VM.ROUTES: gen_routes()}
        desire_clone = deepcopy(desire)

        NetState(desire)

        assert desire == desire_clone

    def test_same_host_route_in_both_forms_keeps_last(self):
        state = NetState(
            {
                VM.NICS: gen_two_static_nics(),
                VM.ROUTES: {
                    HOST_ROUTE_DESTINATION: "nics[0]",
                    f"{HOST_ROUTE_DESTINATION}/32": GATEWAY_IP,
                },
            }
        ).state

        assert state[VM.ROUTES] == {
            f"{HOST_ROUTE_DESTINATION}/32": GATEWAY_IP
        }


class TestUpdate:
    def test_replace_route_and_resolvers(self):
        current = _gen_current_state()

        state = NetState(
            {
                Route.REMOVE: [NET_ROUTE_DESTINATION],
                Resolver.KEY: [RESOLVER2, RESOLVER3],
                Route.SET: {NEW_NET_ROUTE_DESTINATION: GATEWAY_IP},
            },
            current,
        ).state

        assert state[VM.ROUTES] == {
            HOST_ROUTE_DESTINATION: "nics[1]",
            NEW_NET_ROUTE_DESTINATION: GATEWAY_IP,
        }
        assert state[VM.RESOLVERS] == [RESOLVER2, RESOLVER3]
        assert state[VM.NICS] == current[VM.NICS]

    def test_update_single_admin_nic(self):
        current = NetState(
            {
                VM.NICS: [gen_nic_info(NIC0_IP)],
                VM.ROUTES: {NET_ROUTE_DESTINATION: GATEWAY_IP},
            }
        ).state

        state = NetState(
            {
                Route.REMOVE: [NET_ROUTE_DESTINATION],
                Route.SET: {NEW_NET_ROUTE_DESTINATION: GATEWAY_IP},
            },
            current,
        ).state

        assert state[VM.ROUTES] == {NEW_NET_ROUTE_DESTINATION: GATEWAY_IP}

    def test_resolvers_untouched_when_not_defined(self):
        state = NetState({}, _gen_current_state()).state

        assert state[VM.RESOLVERS] == [RESOLVER1]

    def test_remove_nic_referred_by_route(self):
        current = _gen_current_state()

        with pytest.raises(InvalidNicError) as excinfo:
            NetState({Nic.REMOVE: [NIC1_MAC]}, current)
        assert str(excinfo.value) == INVALID_NIC % "nics[1]"

    def test_remove_nic_and_route_together(self):
        current = _gen_current_state()

        state = NetState(
            {
                Nic.REMOVE: [NIC1_MAC],
                Route.REMOVE: [HOST_ROUTE_DESTINATION],
            },
            current,
        ).state

        assert state[VM.ROUTES] == {NET_ROUTE_DESTINATION: GATEWAY_IP}
        assert state[VM.NICS] == current[VM.NICS][:1]

    def test_remove_nic_renumbers_route(self):
        current = NetState(
            {
                VM.NICS: gen_three_static_nics(),
                VM.ROUTES: {HOST_ROUTE_DESTINATION: "nics[2]"},
            }
        ).state

        state = NetState({Nic.REMOVE: [0]}, current).state

        assert state[VM.ROUTES] == {HOST_ROUTE_DESTINATION: "nics[1]"}
        assert state[VM.NICS][1][Nic.IP] == NIC2_IP

    def test_set_route_refers_pre_removal_index(self):
        current = NetState({VM.NICS: gen_three_static_nics()}).state

        state = NetState(
            {
                Nic.REMOVE: ["nics[0]"],
                Route.SET: {HOST_ROUTE_DESTINATION: "nics[2]"},
            },
            current,
        ).state

        assert state[VM.ROUTES] == {HOST_ROUTE_DESTINATION: "nics[1]"}

    def test_set_route_refers_removed_nic(self):
        current = NetState({VM.NICS: gen_two_static_nics()}).state

        with pytest.raises(InvalidNicError) as excinfo:
            NetState(
                {
                    Nic.REMOVE: [0],
                    Route.SET: {HOST_ROUTE_DESTINATION: "nics[0]"},
                },
                current,
            )
        assert excinfo.value.token == "nics[0]"

    def test_add_nic_appended(self):
        current = _gen_current_state()

        state = NetState(
            {Nic.ADD: [gen_nic_info(NIC2_IP)]},
            current,
        ).state

        assert len(state[VM.NICS]) == 3
        assert state[VM.NICS][2][Nic.IP] == NIC2_IP

    def test_route_to_nic_added_in_same_update(self):
        current = _gen_current_state()

        with pytest.raises(InvalidNicError):
            NetState(
                {
                    Nic.ADD: [gen_nic_info(NIC2_IP)],
                    Route.SET: {"10.0.0.0/8": "nics[2]"},
                },
                current,
            )

    def test_remove_non_existent_nic(self):
        with pytest.raises(VmNetValueError):
            NetState(
                {Nic.REMOVE: ["90:b8:d0:ff:ff:ff"]}, _gen_current_state()
            )

    def test_remove_nic_by_non_ascii_digit(self):
        with pytest.raises(VmNetValueError) as excinfo:
            NetState({Nic.REMOVE: ["\u00b2"]}, _gen_current_state())
        assert str(excinfo.value) == 'Cannot remove nic "\u00b2": no such nic'

    def test_remove_host_route_by_cidr_form(self):
        state = NetState(
            {Route.REMOVE: [f"{HOST_ROUTE_DESTINATION}/32"]},
            _gen_current_state(),
        ).state

        assert state[VM.ROUTES] == {NET_ROUTE_DESTINATION: GATEWAY_IP}

    def test_set_cidr_form_replaces_host_route(self):
        host_cidr = f"{HOST_ROUTE_DESTINATION}/32"

        state = NetState(
            {Route.SET: {host_cidr: "nics[0]"}}, _gen_current_state()
        ).state

        assert state[VM.ROUTES] == {
            host_cidr: "nics[0]",
            NET_ROUTE_DESTINATION: GATEWAY_IP,
        }

    def test_remove_invalid_route_destination(self):
        current = _gen_current_state()

        with pytest.raises(InvalidDestinationError) as excinfo:
            NetState({Route.REMOVE: ["10.2.0.0/33"]}, current)
        assert excinfo.value.token == "10.2.0.0/33"

    @pytest.mark.parametrize("key", [VM.NICS, VM.ROUTES])
    def test_create_only_property_in_update(self, key):
        with pytest.raises(VmNetValueError):
            NetState({key: {}}, _gen_current_state())

    def test_rejected_update_has_no_effect(self):
        current = _gen_current_state()
        current_clone = deepcopy(current)
        desire = {
            Route.REMOVE: [NET_ROUTE_DESTINATION],
            Resolver.KEY: [RESOLVER2],
            Route.SET: {NEW_NET_ROUTE_DESTINATION: GATEWAY_IP},
            Nic.REMOVE: [NIC1_MAC],
        }

        with pytest.raises(InvalidNicError):
            NetState(desire, current)

        assert current == current_clone

    def test_invalid_set_route_rejects_whole_update(self):
        current = _gen_current_state()

        with pytest.raises(VmNetValueError):
            NetState(
                {
                    Resolver.KEY: [RESOLVER2],
                    Route.SET: {
                        NEW_NET_ROUTE_DESTINATION: GATEWAY_IP,
                        "10.2.0.0/33": GATEWAY_IP,
                    },
                },
                current,
            )
