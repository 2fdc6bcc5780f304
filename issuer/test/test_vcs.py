# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import json

import httpx
import pytest

import issuer.vcs as vcs
from issuer.test import mock_services as mock

VCS_URL = "http://vcs.example.com"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_send_http_request_wrong_status():
    client = _client(lambda request: httpx.Response(200, json={}))
    request = client.build_request("GET", VCS_URL)
    with pytest.raises(vcs.VCSError, match="200 OK"):
        vcs.send_http_request(client, request, httpx.codes.INTERNAL_SERVER_ERROR)


def test_send_http_request_returns_body():
    client = _client(lambda request: httpx.Response(201, text="created"))
    request = client.build_request("POST", VCS_URL)
    assert vcs.send_http_request(client, request, httpx.codes.CREATED) == b"created"


def test_create_credential():
    vcs_service = mock.MockVCS()
    credential = vcs.create_credential(_client(vcs_service), VCS_URL, {"id": "1"}, mock.introspection(), mock.PROFILE)
    assert json.loads(credential) == mock.TEST_CREDENTIAL
    assert vcs_service.body("/credential") == {
        "@context": ["https://www.w3.org/2018/credentials/v1", "https://www.w3.org/2018/credentials/examples/v1"],
        "type": ["VerifiableCredential", "degree"],
        "credentialSubject": {"id": "1"},
        "profile": mock.PROFILE,
    }


def test_create_credential_without_scope():
    vcs_service = mock.MockVCS()
    vcs.create_credential(_client(vcs_service), VCS_URL, {"id": "1"}, mock.introspection(scope=""), mock.PROFILE)
    assert vcs_service.body("/credential")["type"] == ["VerifiableCredential"]


def test_create_credential_unserializable_subject():
    vcs_service = mock.MockVCS()
    with pytest.raises(vcs.VCSRequestError):
        vcs.create_credential(_client(vcs_service), VCS_URL, {"id": "1", "invalid": object()}, mock.introspection(), mock.PROFILE)
    assert not vcs_service.requests


def test_create_credential_invalid_url():
    with pytest.raises(vcs.VCSRequestError, match="Invalid port"):
        vcs.create_credential(_client(mock.MockVCS()), "http://vcs:port", {"id": "1"}, mock.introspection(), mock.PROFILE)


def test_create_credential_unreachable():
    with pytest.raises(vcs.VCSError, match="Connection refused"):
        vcs.create_credential(_client(mock.unreachable), VCS_URL, {"id": "1"}, mock.introspection(), mock.PROFILE)


def test_store_credential():
    vcs_service = mock.MockVCS()
    vcs.store_credential(_client(vcs_service), VCS_URL, b'{"id": "1"}', mock.PROFILE)
    assert vcs_service.body("/store") == {"profile": mock.PROFILE, "credential": '{"id": "1"}'}


def test_store_credential_incorrect_status():
    with pytest.raises(vcs.VCSError, match="201 Created"):
        vcs.store_credential(_client(mock.MockVCS(store_status=201)), VCS_URL, b"{}", mock.PROFILE)


def test_retrieve_credential():
    vcs_service = mock.MockVCS()
    credential = vcs.retrieve_credential(_client(vcs_service), VCS_URL, "test", mock.PROFILE)
    assert json.loads(credential) == mock.TEST_CREDENTIAL
    assert vcs_service.requests["/retrieve"].url.params["id"] == "test"


def test_retrieve_credential_incorrect_status():
    with pytest.raises(vcs.VCSError, match="201 Created"):
        vcs.retrieve_credential(_client(mock.MockVCS(retrieve_status=201)), VCS_URL, "test", "")


def test_update_credential_status():
    vcs_service = mock.MockVCS()
    vcs.update_credential_status(_client(vcs_service), VCS_URL, "vc")
    assert vcs_service.body("/updateCredentialStatus") == {
        "credential": "vc",
        "status": vcs.REVOKED_STATUS,
        "statusReason": vcs.REVOKED_STATUS_REASON,
    }
