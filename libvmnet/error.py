# SPDX-License-Identifier: LGPL-2.1-or-later


class VmNetError(Exception):
    """
    The base exception of libvmnet.
    """

    pass


class VmNetValueError(VmNetError, ValueError):
    """
    Exception happens at pre-apply check, user should resubmit the amended
    payload. Example:
        * JSON/YAML syntax issue.
        * Invalid value of a route, resolver or nic property.
        * Removing a nic still referred by a route.
    """

    pass


class _TokenValueError(VmNetValueError):
    """
    Request rejection caused by a single user supplied token.
    """

    TEMPLATE = "%s"

    def __init__(self, token):
        self.token = token
        super().__init__(self.TEMPLATE % token)


class InvalidAddressError(_TokenValueError):
    TEMPLATE = 'Invalid IP address: "%s"'


class InvalidDestinationError(_TokenValueError):
    TEMPLATE = 'Invalid route destination: "%s" (must be IP address or CIDR)'


class InvalidGatewayError(_TokenValueError):
    TEMPLATE = 'Invalid route gateway: "%s" (must be IP address or nic)'


class InvalidNicError(_TokenValueError):
    """
    Route gateway refers to a nic which is out of range, configured by DHCP,
    or being removed by the same update.
    """

    TEMPLATE = 'Route gateway: "%s" refers to non-existent or DHCP nic'


class InvalidResolverError(_TokenValueError):
    TEMPLATE = 'Invalid resolver: "%s" (must be IP address)'


class VmNetVerificationError(VmNetError):
    """
    After written, guest files do not match the desired state.
    """

    pass


class VmNetInternalError(VmNetError):
    """
    Unexpected behaviour happened. It is a bug of libvmnet which should be
    fixed.
    """

    pass
