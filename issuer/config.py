# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import os
import logging
from typing import Annotated
from functools import cache

import httpx

from fastapi import Depends, templating

import common.config as conf
from common.parsing import interpret_as_float

_logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_DIRECTORY = os.path.join(os.path.dirname(os.path.abspath(__file__)), "template")


class IssuerConfig(conf.Config):
    def __init__(self):
        super().__init__()
        self.app_name = os.getenv("APP_NAME", "Issuer Operations")

        # Downstream services
        self.cms_url = os.getenv("CMS_URL", "")
        """Base url of the CMS holding the user profiles, e.g. https://cms.example.com"""
        self.vcs_url = os.getenv("VCS_URL", "")
        """Base url of the verifiable credential service (/credential, /store, /retrieve, ...)"""
        self.request_timeout: float = interpret_as_float(os.getenv("REQUEST_TIMEOUT"), 10.0)
        """Timeout in seconds for every outgoing request"""
        if not self.cms_url or not self.vcs_url:
            _logger.warning("CMS_URL or VCS_URL not configured. Issuance will fail until both are set.")

        # OAuth2
        self.oauth2_client_id = os.getenv("OAUTH2_CLIENT_ID", "")
        self.oauth2_client_secret = os.getenv("OAUTH2_CLIENT_SECRET", "")
        self.oauth2_auth_url = os.getenv("OAUTH2_AUTH_URL", "")
        """Authorization endpoint the /login redirects to"""
        self.oauth2_token_url = os.getenv("OAUTH2_TOKEN_URL", "")
        self.oauth2_redirect_url = os.getenv("OAUTH2_REDIRECT_URL", "")
        """Absolute url of our /callback as registered at the authorization server"""
        self.oauth2_introspection_url = os.getenv("OAUTH2_INTROSPECTION_URL", "")

        # Templates
        self.template_directory = os.getenv("TEMPLATE_BASE_DIR") or DEFAULT_TEMPLATE_DIRECTORY
        """Base directory for jinja, defaults to the templates shipped with the package"""
        self.receive_vc_template = os.getenv("TEMPLATE_RECEIVE_VC", "receive_vc.html")
        """Template rendered after a credential has been issued and stored"""
        self.vc_template = os.getenv("TEMPLATE_VC", "vc.html")
        """Template confirming a credential status update"""
        self.qr_code_template = os.getenv("TEMPLATE_QR_CODE", "qr_code.html")
        """Template showing the QR code pointing to a stored credential"""

    def get_template_resource(self) -> templating.Jinja2Templates:
        return _template_resource(self.template_directory)

    def get_http_client(self) -> httpx.Client:
        """Shared httpx client for the VCS and the authorization server"""
        return _client(self.enable_ssl_verification, self.request_timeout)


# Config instances are created per request, so shared resources are cached by their settings
@cache
def _template_resource(template_directory: str) -> templating.Jinja2Templates:
    return templating.Jinja2Templates(template_directory)


@cache
def _client(verify: bool, timeout: float) -> httpx.Client:
    return httpx.Client(verify=verify, timeout=timeout)


inject = Annotated[IssuerConfig, Depends(IssuerConfig)]


def get_vcs_client(config: inject) -> httpx.Client:
    return config.get_http_client()


inject_vcs_client = Annotated[httpx.Client, Depends(get_vcs_client)]
