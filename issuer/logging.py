# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from enum import Enum

from common.logging import operations


class IssuerOperationsLogEntry(operations.OperationsLogEntry):
    """Container for issuer operations specific logging."""

    class Operation(Enum):
        login = "LOGIN"
        issuance = "ISSUANCE"
        retrieval = "RETRIEVAL"
        revocation = "REVOCATION"

    class Step(Enum):
        login_redirect = "REDIRECT"
        issuance_token_exchange = "TOKEN_EXCHANGE"
        issuance_token_introspection = "TOKEN_INTROSPECTION"
        issuance_profile = "PROFILE"
        issuance_cms = "CMS"
        issuance_creation = "CREATION"
        issuance_storage = "STORAGE"
        retrieval_fetch = "FETCH"
        retrieval_qr_code = "QR_CODE"
        revocation_status_update = "STATUS_UPDATE"
        rendering = "RENDERING"

    operation: Operation
    step: Step
