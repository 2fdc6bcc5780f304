# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import logging
from enum import Enum

from pydantic import BaseModel

from fastapi import APIRouter, status, Response

import common.config as conf
from common import httpx_wrapper

_logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    """Indicator of system health."""

    healthy = "HEALTHY"
    unhealthy = "UNHEALTHY"


class HealthResponse(BaseModel):
    """Response body model for health request operation.

    May only contain `HealthStatus` fields. Those can be set with boolean values,
    those get converted before the model is returned to the client."""

    http_server_connectivity: HealthStatus = HealthStatus.unhealthy
    """Only ever returned as healthy, as an unhealthy http server returns nothing at all."""

    def convert_from_bool(self) -> None:
        '''Converts every boolean field into its `HealthStatus` representation.'''
        for k, v in iter(self):
            if isinstance(v, bool):
                setattr(self, k, HealthStatus.healthy if v else HealthStatus.unhealthy)

    def is_healthy(self) -> bool:
        """Summarizes all checks performed into the status field."""
        return all(v == HealthStatus.healthy for _, v in iter(self))


def is_reachable(url: str | None, config: conf.Config) -> bool:
    """True if a GET on `url` gets any answer below 500. Connection failures are logged."""
    if not url:
        return False
    try:
        return httpx_wrapper.get(url, config).status_code < 500
    except Exception:
        _logger.exception(f"Health check for {url=} errors.")
        return False


class HealthAPIRouter(APIRouter):
    """Create a api router for common health endpoints
    `/health/debug`, `/health/liveness` and `/health/readiness`.

    To add application specific checks create child classes of `HealthResponse`
    and `HealthAPIRouter`, overwrite the _build* and get_* methods and hand
    the response classes to this constructor.
    """

    def __init__(
        self,
        readiness_response_model: type[HealthResponse] = HealthResponse,
        liveness_response_model: type[HealthResponse] = HealthResponse,
        debug_response_model: type[HealthResponse] = HealthResponse,
        *args,
        **kwargs,
    ) -> None:
        super().__init__(prefix="/health", tags=["Health"], *args, **kwargs)
        self.add_api_route(
            "/debug",
            endpoint=self.get_debug_probe,
            description="Provides information regarding debug and config states.",
            responses={
                status.HTTP_200_OK: {"model": debug_response_model},
                status.HTTP_503_SERVICE_UNAVAILABLE: {"model": debug_response_model},
            },
        )
        self.add_api_route(
            "/liveness",
            endpoint=self.get_liveness_probe,
            description="Determines whether the application instance needs to be restarted.",
            responses={
                status.HTTP_200_OK: {"model": liveness_response_model},
                status.HTTP_503_SERVICE_UNAVAILABLE: {"model": liveness_response_model},
            },
        )
        self.add_api_route(
            "/readiness",
            endpoint=self.get_readiness_probe,
            description="Determines whether the application instance is ready to accept requests.",
            responses={
                status.HTTP_200_OK: {"model": readiness_response_model},
                status.HTTP_503_SERVICE_UNAVAILABLE: {"model": readiness_response_model},
            },
        )

    def _resolve_probe(self, result: HealthResponse, response: Response) -> HealthResponse:
        """Evaluates the `result` and sets the http code on `response` accordingly."""
        result.http_server_connectivity = HealthStatus.healthy
        result.convert_from_bool()
        if result.is_healthy():
            response.status_code = status.HTTP_200_OK
        else:
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return result

    def _build_debug_probe(self, result: HealthResponse, response: Response, config: conf.Config) -> HealthResponse:
        return self._resolve_probe(result, response)

    def get_debug_probe(self, response: Response, config: conf.inject) -> HealthResponse:
        """Provides information regarding debug and config states."""
        return self._build_debug_probe(HealthResponse(), response, config)

    def _build_liveness_probe(self, result: HealthResponse, response: Response, config: conf.Config) -> HealthResponse:
        return self._resolve_probe(result, response)

    def get_liveness_probe(self, response: Response, config: conf.inject) -> HealthResponse:
        """Determines whether the application instance needs to be restarted."""
        return self._build_liveness_probe(HealthResponse(), response, config)

    def _build_readiness_probe(self, result: HealthResponse, response: Response, config: conf.Config) -> HealthResponse:
        """If any probe fails the system should not receive any data."""
        return self._resolve_probe(result, response)

    def get_readiness_probe(self, response: Response, config: conf.inject) -> HealthResponse:
        """Determines whether the application instance is ready to accept requests."""
        return self._build_readiness_probe(HealthResponse(), response, config)
