# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import os
from importlib import metadata

commit_hash = os.getenv("COMMIT_HASH", "no hash")
commit_time = os.getenv("COMMIT_TIMESTAMP", "no timestamp")


def _installed_version() -> str:
    try:
        return metadata.version("issuer-operations")
    except metadata.PackageNotFoundError:
        return "no version"


version = os.getenv("VERSION") or _installed_version()


def get_version() -> str:
    return f"{version} ({commit_hash} {commit_time})"
