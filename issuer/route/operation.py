# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Browser facing issuance endpoints

/login      redirects the user to the authorization server, remembering the VCS profile in a cookie
/callback   redirect target of the authorization server, issues & stores the credential
/retrieve   fetches a stored credential, as JSON or as QR code page
/revoke     form post revoking a credential
"""

import json
import logging
import urllib.parse
from typing import Annotated

import fastapi
import jinja2
from fastapi import Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from common.model.exception import HTTPError
import issuer.cms as cms
import issuer.config as conf
import issuer.qr_code as qr_code
import issuer.token as token
import issuer.vcs as vcs
from issuer.exception.operation_errors import InvalidRequestException, OperationException, ServerErrorException
from issuer.logging import IssuerOperationsLogEntry as LogEntry

_logger = logging.getLogger(__name__)

TAG = "Issuer Operations"

LOGIN_PATH = "/login"
CALLBACK_PATH = "/callback"
RETRIEVE_PATH = "/retrieve"
REVOKE_PATH = "/revoke"

VCS_PROFILE_COOKIE = "vcsProfile"
_VCS_PROFILE_COOKIE_MAX_AGE = 24 * 60 * 60

router = fastapi.APIRouter(
    tags=[TAG],
    responses={
        fastapi.status.HTTP_400_BAD_REQUEST: {"model": HTTPError},
        fastapi.status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": HTTPError},
    },
)


def _log_success(message: str, operation: LogEntry.Operation, step: LogEntry.Step, **kwargs) -> None:
    _logger.info(LogEntry(message=message, status=LogEntry.Status.success, operation=operation, step=step, **kwargs))


def _failure(exception: OperationException, operation: LogEntry.Operation, step: LogEntry.Step, **kwargs) -> OperationException:
    """Log the failure of `step` and hand back `exception` to be raised"""
    _logger.error(
        LogEntry(
            message=exception.error_description,
            status=LogEntry.Status.error,
            operation=operation,
            step=step,
            **kwargs,
        )
    )
    return exception


def _render(
    request: Request,
    config: conf.IssuerConfig,
    template_name: str,
    context: dict,
    operation: LogEntry.Operation,
    profile: str | None = None,
) -> HTMLResponse:
    try:
        return config.get_template_resource().TemplateResponse(request, template_name, context)
    except jinja2.TemplateError as e:
        _logger.exception(f"Template could not be rendered: {config.template_directory}/{template_name}")
        raise _failure(ServerErrorException(f"unable to load html: {e!r}"), operation, LogEntry.Step.rendering, profile=profile) from e


@router.get(
    LOGIN_PATH,
    status_code=fastapi.status.HTTP_307_TEMPORARY_REDIRECT,
    response_class=RedirectResponse,
    description="Redirects to the authorization server. The VCS profile to issue with is kept in a cookie.",
)
def login(
    token_issuer: token.inject_issuer,
    vcs_profile: Annotated[str | None, Query(alias="vcsProfile")] = None,
    scope: str | None = None,
):
    operation = LogEntry.Operation.login
    if not vcs_profile:
        raise _failure(InvalidRequestException("vcs profile is empty"), operation, LogEntry.Step.login_redirect)

    response = RedirectResponse("", status_code=fastapi.status.HTTP_307_TEMPORARY_REDIRECT)
    url = token_issuer.auth_code_url(response)
    if scope:
        url += f"&scope={urllib.parse.quote(scope)}"
    response.headers["location"] = url
    response.set_cookie(VCS_PROFILE_COOKIE, vcs_profile, max_age=_VCS_PROFILE_COOKIE_MAX_AGE)

    _log_success("Redirecting to authorization server", operation, LogEntry.Step.login_redirect, profile=vcs_profile)
    return response


@router.get(
    CALLBACK_PATH,
    response_class=HTMLResponse,
    description="OAuth2 redirect target. Issues a credential from the CMS data of the user and stores it in the VCS.",
)
def callback(
    request: Request,
    config: conf.inject,
    vcs_client: conf.inject_vcs_client,
    token_issuer: token.inject_issuer,
    token_resolver: token.inject_resolver,
):
    operation = LogEntry.Operation.issuance
    try:
        oauth2_token = token_issuer.exchange(request)
    except token.TokenError as e:
        raise _failure(
            InvalidRequestException(f"failed to exchange code for token: {e}"),
            operation,
            LogEntry.Step.issuance_token_exchange,
        ) from e

    # The token subject identifies the user in the CMS
    try:
        introspection = token_resolver.resolve(oauth2_token.access_token)
    except token.TokenError as e:
        raise _failure(
            InvalidRequestException(f"failed to get token info: {e}"),
            operation,
            LogEntry.Step.issuance_token_introspection,
        ) from e

    profile = request.cookies.get(VCS_PROFILE_COOKIE)
    if not profile:
        raise _failure(
            InvalidRequestException(f"failed to get cookie: named cookie {VCS_PROFILE_COOKIE} not present"),
            operation,
            LogEntry.Step.issuance_profile,
        )

    try:
        with token_issuer.client(oauth2_token) as cms_client:
            subject = cms.get_cms_data(cms_client, config.cms_url, introspection)
    except cms.CMSResponseError as e:
        raise _failure(ServerErrorException(f"failed to get cms data: {e}"), operation, LogEntry.Step.issuance_cms, profile=profile) from e
    except cms.CMSError as e:
        raise _failure(InvalidRequestException(f"failed to get cms data: {e}"), operation, LogEntry.Step.issuance_cms, profile=profile) from e

    try:
        credential = vcs.create_credential(vcs_client, config.vcs_url, subject, introspection, profile)
        created = json.loads(credential)
        if not isinstance(created, dict):
            raise ValueError("credential is not a JSON object")
    except (vcs.VCSError, ValueError) as e:
        raise _failure(ServerErrorException(f"failed to create credential: {e}"), operation, LogEntry.Step.issuance_creation, profile=profile) from e

    credential_id = created.get("id")
    try:
        vcs.store_credential(vcs_client, config.vcs_url, credential, profile)
    except vcs.VCSError as e:
        raise _failure(
            ServerErrorException(f"failed to store credential: {e}"),
            operation,
            LogEntry.Step.issuance_storage,
            profile=profile,
            credential_id=credential_id,
        ) from e

    _log_success("Credential issued and stored", operation, LogEntry.Step.issuance_storage, profile=profile, credential_id=credential_id)

    retrieve_path = None
    if credential_id:
        retrieve_path = f"{RETRIEVE_PATH}?{urllib.parse.urlencode({'id': credential_id, 'profile': profile})}"
    return _render(
        request,
        config,
        config.receive_vc_template,
        {
            "vc": json.dumps(created, indent=2),
            "credential_id": credential_id,
            "retrieve_path": retrieve_path,
        },
        operation,
        profile,
    )


@router.get(
    RETRIEVE_PATH,
    description="Fetches a stored credential from the VCS. With `qr` a page holding a QR code pointing back here is rendered instead.",
)
def retrieve(
    request: Request,
    config: conf.inject,
    vcs_client: conf.inject_vcs_client,
    credential_id: Annotated[str | None, Query(alias="id")] = None,
    profile: str | None = None,
    qr: bool = False,
):
    operation = LogEntry.Operation.retrieval
    if not credential_id:
        raise _failure(InvalidRequestException("credential id is empty"), operation, LogEntry.Step.retrieval_fetch)
    profile = profile or request.cookies.get(VCS_PROFILE_COOKIE, "")

    try:
        credential = vcs.retrieve_credential(vcs_client, config.vcs_url, credential_id, profile)
    except vcs.VCSError as e:
        raise _failure(
            ServerErrorException(f"failed to retrieve credential: {e}"),
            operation,
            LogEntry.Step.retrieval_fetch,
            profile=profile,
            credential_id=credential_id,
        ) from e

    if not qr:
        try:
            json.loads(credential)
        except ValueError as e:
            raise _failure(
                ServerErrorException(f"failed to decode credential: {e}"),
                operation,
                LogEntry.Step.retrieval_fetch,
                profile=profile,
                credential_id=credential_id,
            ) from e
        _log_success("Credential retrieved", operation, LogEntry.Step.retrieval_fetch, profile=profile, credential_id=credential_id)
        return Response(content=credential, media_type="application/json")

    host = config.external_url or str(request.base_url)
    try:
        code = qr_code.generate_qr_code(credential, host, profile)
    except qr_code.QRCodeError as e:
        raise _failure(
            ServerErrorException(f"failed to generate qr code: {e}"),
            operation,
            LogEntry.Step.retrieval_qr_code,
            profile=profile,
            credential_id=credential_id,
        ) from e

    _log_success("Credential QR code generated", operation, LogEntry.Step.retrieval_qr_code, profile=profile, credential_id=credential_id)
    return _render(
        request,
        config,
        config.qr_code_template,
        {"qr_code": code.image, "url": code.url, "credential_id": credential_id},
        operation,
        profile,
    )


@router.post(
    REVOKE_PATH,
    response_class=HTMLResponse,
    description="Revokes the credential posted in the form field `vcDataInput`.",
)
def revoke(
    request: Request,
    config: conf.inject,
    vcs_client: conf.inject_vcs_client,
    vc_data_input: Annotated[str | None, Form(alias="vcDataInput")] = None,
):
    operation = LogEntry.Operation.revocation
    step = LogEntry.Step.revocation_status_update
    if not vc_data_input:
        raise _failure(InvalidRequestException("failed to parse form: vcDataInput is missing"), operation, step)

    try:
        vcs.update_credential_status(vcs_client, config.vcs_url, vc_data_input)
    except vcs.VCSRequestError as e:
        raise _failure(ServerErrorException(f"failed to create new http request: {e}"), operation, step) from e
    except vcs.VCSError as e:
        raise _failure(InvalidRequestException(f"failed to update vc status: {e}"), operation, step) from e

    _log_success("Credential revoked", operation, step)
    return _render(
        request,
        config,
        config.vc_template,
        {"msg": "VC is revoked", "data": vc_data_input},
        operation,
    )
