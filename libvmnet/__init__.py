# SPDX-License-Identifier: LGPL-2.1-or-later

from . import error
from . import schema

from .guestfiles import gen_guest_files
from .netapplier import create
from .netapplier import update
from .netapplier import verify_guest_files
from .netapplier import write_guest_files
from .prettystate import PrettyState
from .version import get_version as _get_version

__all__ = [
    "PrettyState",
    "create",
    "error",
    "gen_guest_files",
    "schema",
    "update",
    "verify_guest_files",
    "write_guest_files",
]

__version__ = _get_version()
