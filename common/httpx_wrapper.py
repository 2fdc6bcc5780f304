# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Wrapper for httpx functions to add additional context"""

from common import config as conf


import httpx


def send(client: httpx.Client, request: httpx.Request, **kwargs) -> httpx.Response:
    """Wrapper for httpx.Client.send, on error adds additional information to exception
    By default httpx transport errors only provide e.g. '[Errno -2] Name or service not known'
    Re-raises the httpx.HTTPError with method & URL noted on failure to
        exchange data with the service
    """
    try:
        return client.send(request, **kwargs)
    except httpx.HTTPError as e:
        e.add_note(f"Failed to {request.method} {request.url}")
        raise


def get(url: str, config: conf.Config, timeout: float = 5.0) -> httpx.Response:
    """Wrapper for httpx.get call, on error adds additional information to exception
    Throws httpx.ConnectError with URL & ssl verification status on failure to
        get connection to the service
    """
    try:
        return httpx.get(url, verify=config.enable_ssl_verification, timeout=timeout)
    except httpx.ConnectError as e:
        e.add_note(f"Failed to GET {url=} with ssl verification={config.enable_ssl_verification}")
        raise
