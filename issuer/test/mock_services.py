# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Stand-ins for the authorization server, CMS and VCS used by the issuer tests.
CMS & VCS are served through httpx.MockTransport, so no network is involved.
"""

import copy
import json

import httpx

import issuer.token as token
from issuer.models import Introspection, OAuth2Token

PROFILE = "vc-issuer-1"

FOO = {"id": 1, "userid": "100", "name": "Foo Bar", "email": "foo@bar.com"}

DEGREE_RECORD = {
    "email": "foo@bar.com",
    "name": "Foo Bar",
    "degree": {"type": "BachelorDegree", "university": "MIT"},
}

TEST_CREDENTIAL = {
    "@context": ["https://www.w3.org/2018/credentials/v1", "https://www.w3.org/2018/credentials/examples/v1"],
    "id": "http://example.edu/credentials/1872",
    "type": ["VerifiableCredential", "degree"],
    "credentialSubject": {
        "id": "did:example:ebfeb1f712ebc6f1c276e12ec21",
        "degree": {"type": "BachelorDegree", "university": "MIT"},
        "name": "Jayden Doe",
    },
}


def introspection(scope: str = "degree") -> Introspection:
    return Introspection(active=True, sub="foo@bar.com", scope=scope)


def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("[Errno 111] Connection refused", request=request)


class MockCMS:
    """Answers /users with `users` and every other collection with `records`. Payloads given as str are sent verbatim."""

    def __init__(self, users: list | str | None = None, records: list | str | None = None) -> None:
        self.users = [FOO] if users is None else users
        self.records = [DEGREE_RECORD] if records is None else records
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        payload = self.users if request.url.path == "/users" else self.records
        if isinstance(payload, str):
            return httpx.Response(200, text=payload)
        return httpx.Response(200, json=payload)


class MockVCS:
    """VCS answering with the configured status codes and credential"""

    def __init__(
        self,
        credential: dict | str | None = None,
        create_status: int = 201,
        store_status: int = 200,
        retrieve_status: int = 200,
        update_status: int = 200,
    ) -> None:
        self.credential = copy.deepcopy(TEST_CREDENTIAL) if credential is None else credential
        self.status = {
            "/credential": create_status,
            "/store": store_status,
            "/retrieve": retrieve_status,
            "/updateCredentialStatus": update_status,
        }
        self.requests: dict[str, httpx.Request] = {}

    def body(self, path: str) -> dict:
        return json.loads(self.requests[path].content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests[path] = request
        if path not in self.status:
            return httpx.Response(404)
        if path in ("/credential", "/retrieve"):
            content = self.credential if isinstance(self.credential, str) else json.dumps(self.credential)
            return httpx.Response(self.status[path], text=content)
        return httpx.Response(self.status[path])


class MockTokenIssuer(token.TokenIssuer):
    def __init__(self, cms_handler=None, err: str | None = None) -> None:
        self.cms_handler = cms_handler or MockCMS()
        self.err = err

    def auth_code_url(self, response) -> str:
        return "https://auth.example.com/authorize?client_id=issuer"

    def exchange(self, request) -> OAuth2Token:
        if self.err:
            raise token.TokenError(self.err)
        return OAuth2Token(access_token="ABC")

    def client(self, oauth2_token: OAuth2Token) -> httpx.Client:
        return httpx.Client(
            transport=httpx.MockTransport(self.cms_handler),
            headers={"Authorization": f"Bearer {oauth2_token.access_token}"},
        )


class MockTokenResolver(token.TokenResolver):
    def __init__(self, result: Introspection | None = None, err: str | None = None) -> None:
        self.result = result or introspection()
        self.err = err

    def resolve(self, access_token: str) -> Introspection:
        if self.err:
            raise token.TokenError(self.err)
        return self.result
