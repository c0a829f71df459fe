# SPDX-License-Identifier: LGPL-2.1-or-later

import pkgutil


def get_version():
    return pkgutil.get_data("libvmnet", "VERSION").decode("utf-8").strip()
