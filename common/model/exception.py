# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from pydantic import BaseModel


class HTTPError(BaseModel):
    """
    Error body rendered for failed operations
    * error: Machine readable code identifieng the failure class.
    * error_description: Human readable description of the failure point.
    """

    error: str
    error_description: str
