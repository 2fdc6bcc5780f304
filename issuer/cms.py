# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Lookup of the credential subject data in the CMS.

The CMS is queried twice: first the user matching the e-mail of the token
subject, then the record of the collection named after the token scope that
belongs to this user. Both lookups have to match exactly one entry.
"""

import json
import logging
import urllib.parse

import httpx
import pydantic

from common import httpx_wrapper
from issuer.models import CMSUser, Introspection

_logger = logging.getLogger(__name__)


class CMSError(Exception):
    """The CMS could not deliver exactly one matching entry"""


class CMSResponseError(CMSError):
    """The CMS answered with a payload which is not the expected JSON"""


def _fetch(client: httpx.Client, url: str) -> bytes:
    try:
        response = httpx_wrapper.send(client, client.build_request("GET", url))
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise CMSError(f"request to {url} failed: {e}") from e
    if response.status_code != httpx.codes.OK:
        raise CMSError(f"{url} returned {response.status_code} {response.reason_phrase}: {response.text}")
    return response.content


def _single_entry(data: bytes, kind: str) -> dict:
    try:
        entries = json.loads(data)
    except ValueError as e:
        raise CMSResponseError(f"failed to decode {kind}s: {e}") from e
    if not isinstance(entries, list) or not all(isinstance(entry, dict) for entry in entries):
        raise CMSResponseError(f"failed to decode {kind}s: expected a list of objects")
    if not entries:
        raise CMSError(f"{kind} not found")
    if len(entries) > 1:
        raise CMSError(f"multiple {kind}s found")
    return entries[0]


def unmarshal_user(data: bytes) -> CMSUser:
    user = _single_entry(data, "user")
    try:
        return CMSUser.model_validate(user)
    except pydantic.ValidationError as e:
        raise CMSResponseError(f"failed to decode users: {e}") from e


def unmarshal_subject(data: bytes) -> dict:
    return _single_entry(data, "record")


def get_cms_data(client: httpx.Client, cms_url: str, introspection: Introspection) -> dict:
    """
    Collect the credential subject of the user the token was issued for.
    `client` has to be authorized for the CMS, usually the one handed out by the token issuer.
    """
    query = urllib.parse.urlencode({"email": introspection.subject})
    user = unmarshal_user(_fetch(client, f"{cms_url}/users?{query}"))

    query = urllib.parse.urlencode({"userid": user.userid})
    subject = unmarshal_subject(_fetch(client, f"{cms_url}/{introspection.scope}s?{query}"))
    _logger.debug(f"Found CMS {introspection.scope} record for user {user.userid}")
    return subject
