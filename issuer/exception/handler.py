# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

from fastapi import Request, FastAPI
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from common.model.exception import HTTPError
from .operation_errors import OperationException, InvalidRequestException


def configure_exception_handlers(app: FastAPI) -> None:
    """
    Configure exception handlers on the FastAPI app instance.
    Changed 422 Unprocessable Entity to 400 Bad Request

    Args:
        app (FastAPI): the instance to configure the handlers for.
    """

    @app.exception_handler(OperationException)
    async def operation_exception_handler(request: Request, exc: OperationException):
        return JSONResponse(
            status_code=exc.status_code,
            headers=exc.headers,
            content=HTTPError(error=exc.error, error_description=exc.error_description).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def invalid_request_exception_handler(request: Request, exc: RequestValidationError):
        """
        Recasts Validation Errors to operation exceptions
        """
        details = "; ".join(f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}" for error in exc.errors())
        return await operation_exception_handler(request, InvalidRequestException(f"invalid request: {details}"))
