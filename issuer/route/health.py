# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""This file defines the custom health checks for the application."""
import os
import logging

from fastapi import Response

from common import health
import issuer.config as conf

_logger = logging.getLogger(__name__)


class DebugHealthResponse(health.HealthResponse):
    """Response body model for health request operation."""

    config_cms_url_present: health.HealthStatus = health.HealthStatus.unhealthy
    config_vcs_url_present: health.HealthStatus = health.HealthStatus.unhealthy
    config_oauth2_present: health.HealthStatus = health.HealthStatus.unhealthy
    templates_present: health.HealthStatus = health.HealthStatus.unhealthy


class ReadinessHealthResponse(health.HealthResponse):
    """Response body model for health request operation."""

    cms_connectivity: health.HealthStatus = health.HealthStatus.unhealthy
    vcs_connectivity: health.HealthStatus = health.HealthStatus.unhealthy


class IssuerHealthAPIRouter(health.HealthAPIRouter):
    def __init__(self) -> None:
        super().__init__(
            readiness_response_model=ReadinessHealthResponse,
            debug_response_model=DebugHealthResponse,
        )

    def _build_readiness_probe(
        self,
        result: ReadinessHealthResponse,
        response: Response,
        config: conf.IssuerConfig,
    ) -> ReadinessHealthResponse:
        result.cms_connectivity = health.is_reachable(config.cms_url, config)
        result.vcs_connectivity = health.is_reachable(config.vcs_url, config)
        return super()._build_readiness_probe(result, response, config)

    def get_readiness_probe(self, response: Response, config: conf.inject):
        return self._build_readiness_probe(ReadinessHealthResponse(), response, config)

    def _build_debug_probe(
        self,
        result: DebugHealthResponse,
        response: Response,
        config: conf.IssuerConfig,
    ) -> DebugHealthResponse:
        result.config_cms_url_present = bool(config.cms_url)
        result.config_vcs_url_present = bool(config.vcs_url)
        result.config_oauth2_present = all(
            [
                config.oauth2_client_id,
                config.oauth2_auth_url,
                config.oauth2_token_url,
                config.oauth2_redirect_url,
                config.oauth2_introspection_url,
            ]
        )
        templates = [config.receive_vc_template, config.vc_template, config.qr_code_template]
        missing = [t for t in templates if not os.path.isfile(os.path.join(config.template_directory, t))]
        if missing:
            _logger.error(f"Templates missing in {config.template_directory}: {missing}")
        result.templates_present = not missing
        return super()._build_debug_probe(result, response, config)

    def get_debug_probe(self, response: Response, config: conf.inject):
        return self._build_debug_probe(DebugHealthResponse(), response, config)


router = IssuerHealthAPIRouter()
