# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
OAuth2 collaborators of the issuance flow.

`TokenIssuer` drives the authorization code flow (RFC 6749 section 4.1),
`TokenResolver` validates an access token through introspection (RFC 7662).
Both are injected into the routes, so other authorization servers can be
plugged in by overriding `get_token_issuer` / `get_token_resolver`.
"""

import abc
import logging
import secrets
import urllib.parse
from typing import Annotated

import httpx
from fastapi import Depends, Request, Response

from common import httpx_wrapper
import issuer.config as conf
from issuer.models import OAuth2Token, Introspection

_logger = logging.getLogger(__name__)

STATE_COOKIE = "oauth2_state"
_STATE_COOKIE_MAX_AGE = 600


class TokenError(Exception):
    """Failure to obtain or validate a token"""


class TokenIssuer(abc.ABC):
    @abc.abstractmethod
    def auth_code_url(self, response: Response) -> str:
        """Url of the authorization endpoint to send the user agent to. May set cookies on `response`."""

    @abc.abstractmethod
    def exchange(self, request: Request) -> OAuth2Token:
        """Exchange the authorization code of the callback `request` for a token."""

    @abc.abstractmethod
    def client(self, token: OAuth2Token) -> httpx.Client:
        """httpx client authorized with `token`. The caller closes it."""


class TokenResolver(abc.ABC):
    @abc.abstractmethod
    def resolve(self, access_token: str) -> Introspection:
        """Token information for `access_token`."""


def _client_auth(config: conf.IssuerConfig) -> httpx.BasicAuth:
    return httpx.BasicAuth(config.oauth2_client_id, config.oauth2_client_secret)


def _decode(response: httpx.Response, model: type[OAuth2Token] | type[Introspection]):
    if response.status_code != httpx.codes.OK:
        raise TokenError(f"{response.request.url} returned {response.status_code} {response.reason_phrase}: {response.text}")
    try:
        return model.model_validate(response.json())
    except ValueError as e:
        raise TokenError(f"invalid response from {response.request.url}: {e}") from e


class OAuth2TokenIssuer(TokenIssuer):
    def __init__(self, config: conf.IssuerConfig, http_client: httpx.Client | None = None) -> None:
        self.config = config
        self.http_client = http_client or config.get_http_client()

    def auth_code_url(self, response: Response) -> str:
        state = secrets.token_urlsafe(16)
        response.set_cookie(STATE_COOKIE, state, max_age=_STATE_COOKIE_MAX_AGE, httponly=True)
        query = urllib.parse.urlencode(
            {
                "response_type": "code",
                "client_id": self.config.oauth2_client_id,
                "redirect_uri": self.config.oauth2_redirect_url,
                "state": state,
            }
        )
        separator = "&" if "?" in self.config.oauth2_auth_url else "?"
        return f"{self.config.oauth2_auth_url}{separator}{query}"

    def exchange(self, request: Request) -> OAuth2Token:
        code = request.query_params.get("code")
        if not code:
            raise TokenError("authorization code is missing")
        expected_state = request.cookies.get(STATE_COOKIE)
        if not expected_state or request.query_params.get("state") != expected_state:
            raise TokenError("invalid oauth2 state")

        try:
            token_request = self.http_client.build_request(
                "POST",
                self.config.oauth2_token_url,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self.config.oauth2_redirect_url,
                },
            )
            response = httpx_wrapper.send(self.http_client, token_request, auth=_client_auth(self.config))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TokenError(f"token request failed: {e}") from e
        return _decode(response, OAuth2Token)

    def client(self, token: OAuth2Token) -> httpx.Client:
        return httpx.Client(
            headers={"Authorization": f"Bearer {token.access_token}"},
            verify=self.config.enable_ssl_verification,
            timeout=self.config.request_timeout,
        )


class IntrospectionTokenResolver(TokenResolver):
    def __init__(self, config: conf.IssuerConfig, http_client: httpx.Client | None = None) -> None:
        self.config = config
        self.http_client = http_client or config.get_http_client()

    def resolve(self, access_token: str) -> Introspection:
        try:
            introspection_request = self.http_client.build_request(
                "POST",
                self.config.oauth2_introspection_url,
                data={"token": access_token, "token_type_hint": "access_token"},
            )
            response = httpx_wrapper.send(self.http_client, introspection_request, auth=_client_auth(self.config))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TokenError(f"introspection request failed: {e}") from e
        introspection = _decode(response, Introspection)
        if not introspection.active:
            raise TokenError("token is not active")
        _logger.debug(f"Token introspected for {introspection.subject=} {introspection.scope=}")
        return introspection


def get_token_issuer(config: conf.inject) -> TokenIssuer:
    return OAuth2TokenIssuer(config)


def get_token_resolver(config: conf.inject) -> TokenResolver:
    return IntrospectionTokenResolver(config)


inject_issuer = Annotated[TokenIssuer, Depends(get_token_issuer)]
inject_resolver = Annotated[TokenResolver, Depends(get_token_resolver)]
