# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Errors of the issuer operations. Each failure point of a flow raises one of
those with a short description of what failed, the handler renders it as
`{"error": ..., "error_description": ...}`.
"""

from fastapi import HTTPException, status


class OperationException(HTTPException):
    """Base class for all issuer operation exceptions."""

    error: str = None
    """Machine readable code identifieng the exception."""

    error_description: str = None
    """Human readable error description for the failure point."""

    def __init__(self, error_description: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> None:
        super().__init__(status_code, error_description, headers={"Cache-Control": "no-store"})
        self.error_description = error_description


class InvalidRequestException(OperationException):
    """Input of the caller is missing or malformed, or the caller's data cannot be used."""

    error = "invalid_request"


class ServerErrorException(OperationException):
    """A downstream service failed or the server is misconfigured."""

    error = "server_error"

    def __init__(self, error_description: str) -> None:
        super().__init__(error_description, status.HTTP_500_INTERNAL_SERVER_ERROR)
