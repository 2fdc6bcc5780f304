# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Credential Issuer Operations

Bridges an OAuth2 login to the issuance of a verifiable credential:
the user data is taken from the CMS, the credential is created and
stored by the verifiable credential service (VCS).

OAuth 2.0
https://datatracker.ietf.org/doc/html/rfc6749

OAuth 2.0 Token Introspection
https://datatracker.ietf.org/doc/html/rfc7662

W3C Verifiable Credential
https://www.w3.org/TR/vc-data-model/
"""

# FastAPI
from asgi_correlation_id import CorrelationIdMiddleware

from common.fastapi_extensions import ExtendedFastAPI

from issuer.exception.handler import configure_exception_handlers
import issuer.route.operation as operation
import issuer.route.health as health
import issuer.config as conf

app = ExtendedFastAPI(conf.IssuerConfig)

app.include_router(operation.router)
app.include_router(health.router)

configure_exception_handlers(app)

app.add_middleware(
    CorrelationIdMiddleware,
)
