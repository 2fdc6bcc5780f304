# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

CREDENTIAL_CONTEXT = "https://www.w3.org/2018/credentials/v1"
EXAMPLE_CONTEXT = "https://www.w3.org/2018/credentials/examples/v1"
VERIFIABLE_CREDENTIAL_TYPE = "VerifiableCredential"


class OAuth2Token(BaseModel):
    """Token response of the authorization server (RFC 6749 section 5.1)"""

    model_config = ConfigDict(extra="allow")

    access_token: str = ""
    token_type: str = "Bearer"
    refresh_token: str | None = None
    expires_in: int | None = None
    scope: str | None = None


class Introspection(BaseModel):
    """Token introspection response (RFC 7662 section 2.2)"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    active: bool = False
    subject: str = Field(default="", alias="sub")
    """The user the token was issued for, used to look up the CMS user by e-mail"""
    scope: str = ""
    """Requested credential kind, also names the CMS collection holding the subject data"""
    client_id: str | None = None
    exp: int | None = None


class CMSUser(BaseModel):
    """User entry of the CMS. Unset fields arrive as `null`."""

    model_config = ConfigDict(extra="allow")

    id: int | str | None = None
    userid: str | int = ""
    name: str | None = None
    email: str | None = None

    @field_validator("userid", mode="before")
    @classmethod
    def empty_userid_from_null(cls, value: Any) -> Any:
        return "" if value is None else value


class CreateCredentialRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    context: list[str] = Field(alias="@context")
    type: list[str]
    credential_subject: dict[str, Any] = Field(alias="credentialSubject")
    profile: str


class StoreCredentialRequest(BaseModel):
    profile: str
    credential: str
    """The credential as returned by the VCS, kept as raw JSON text"""


class UpdateCredentialStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    credential: str
    status: str
    status_reason: str = Field(alias="statusReason")
