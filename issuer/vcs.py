# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Client side of the verifiable credential service (VCS)"""

import logging

import httpx

from common import httpx_wrapper
from issuer import models

_logger = logging.getLogger(__name__)

CREATE_CREDENTIAL_ENDPOINT = "/credential"
STORE_CREDENTIAL_ENDPOINT = "/store"
RETRIEVE_CREDENTIAL_ENDPOINT = "/retrieve"
UPDATE_STATUS_ENDPOINT = "/updateCredentialStatus"

REVOKED_STATUS = "Revoked"
REVOKED_STATUS_REASON = "Disable by admin"

_JSON_HEADERS = {"Content-Type": "application/json"}


class VCSError(Exception):
    """The VCS could not be reached or did not answer as expected"""


class VCSRequestError(VCSError):
    """The request to the VCS could not be built"""


def _build_request(client: httpx.Client, method: str, url: str, **kwargs) -> httpx.Request:
    try:
        return client.build_request(method, url, **kwargs)
    except (httpx.InvalidURL, httpx.UnsupportedProtocol, TypeError, ValueError) as e:
        raise VCSRequestError(f"failed to create request for {url}: {e}") from e


def _json_body(payload: models.CreateCredentialRequest | models.StoreCredentialRequest | models.UpdateCredentialStatusRequest) -> str:
    try:
        return payload.model_dump_json(by_alias=True)
    except (TypeError, ValueError) as e:
        raise VCSRequestError(f"failed to marshal {type(payload).__name__}: {e}") from e


def send_http_request(client: httpx.Client, request: httpx.Request, expected_status: int) -> bytes:
    """Send `request` and return the response body if the status matches `expected_status`."""
    try:
        response = httpx_wrapper.send(client, request)
    except httpx.HTTPError as e:
        raise VCSError(f"http request failed: {e}") from e

    if response.status_code != expected_status:
        raise VCSError(
            f"http request: expected={expected_status} actual={response.status_code} {response.reason_phrase} body={response.text}",
        )
    return response.content


def create_credential(
    client: httpx.Client,
    vcs_url: str,
    subject: dict,
    introspection: models.Introspection,
    profile: str,
) -> bytes:
    """Let the VCS issue a credential for `subject` and return it as raw JSON"""
    types = [models.VERIFIABLE_CREDENTIAL_TYPE]
    if introspection.scope:
        types.append(introspection.scope)

    credential_request = models.CreateCredentialRequest(
        context=[models.CREDENTIAL_CONTEXT, models.EXAMPLE_CONTEXT],
        type=types,
        credential_subject=subject,
        profile=profile,
    )
    body = _json_body(credential_request)
    request = _build_request(client, "POST", f"{vcs_url}{CREATE_CREDENTIAL_ENDPOINT}", content=body, headers=_JSON_HEADERS)
    return send_http_request(client, request, httpx.codes.CREATED)


def store_credential(client: httpx.Client, vcs_url: str, credential: bytes, profile: str) -> None:
    store_request = models.StoreCredentialRequest(profile=profile, credential=credential.decode())
    request = _build_request(client, "POST", f"{vcs_url}{STORE_CREDENTIAL_ENDPOINT}", content=_json_body(store_request), headers=_JSON_HEADERS)
    send_http_request(client, request, httpx.codes.OK)


def retrieve_credential(client: httpx.Client, vcs_url: str, credential_id: str, profile: str) -> bytes:
    request = _build_request(
        client,
        "GET",
        f"{vcs_url}{RETRIEVE_CREDENTIAL_ENDPOINT}",
        params={"id": credential_id, "profile": profile},
    )
    return send_http_request(client, request, httpx.codes.OK)


def update_credential_status(client: httpx.Client, vcs_url: str, credential: str) -> None:
    """Mark `credential` as revoked"""
    status_request = models.UpdateCredentialStatusRequest(
        credential=credential,
        status=REVOKED_STATUS,
        status_reason=REVOKED_STATUS_REASON,
    )
    request = _build_request(client, "POST", f"{vcs_url}{UPDATE_STATUS_ENDPOINT}", content=_json_body(status_request), headers=_JSON_HEADERS)
    send_http_request(client, request, httpx.codes.OK)
    _logger.info("Credential status updated to revoked")
