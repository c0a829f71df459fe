# SPDX-License-Identifier: LGPL-2.1-or-later

import copy
import logging

import jsonschema as js

from . import schema

MAX_SUPPORTED_NICS = 32


def schema_validate(data, validation_schema=schema.payload_schema):
    data = copy.deepcopy(data)
    _validate_max_supported_nic_count(data)
    js.validate(data, validation_schema)


def _validate_max_supported_nic_count(data):
    """
    Raises warning if the nic count in the single payload exceeds the limit
    specified in MAX_SUPPORTED_NICS
    """
    num_of_nics = len(data.get(schema.Nic.KEY, ())) + len(
        data.get(schema.Nic.ADD, ())
    )
    if num_of_nics > MAX_SUPPORTED_NICS:
        logging.warning(
            "Nics count exceeds the limit %s in payload",
            MAX_SUPPORTED_NICS,
        )
