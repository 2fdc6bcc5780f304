# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import io
import json
import base64
import urllib.parse
from dataclasses import dataclass

import qrcode
import qrcode.constants

from issuer.vcs import RETRIEVE_CREDENTIAL_ENDPOINT


class QRCodeError(Exception):
    pass


@dataclass
class QRCode:
    url: str
    """Where a wallet can fetch the credential"""
    image: str
    """PNG of the QR code as data uri, ready for an <img src=...>"""


def generate_qr_code(credential: bytes, host: str, profile: str) -> QRCode:
    """QR code pointing to the retrieval endpoint for the given stored credential"""
    try:
        parsed = json.loads(credential)
        credential_id = parsed["id"]
    except (ValueError, TypeError, KeyError) as e:
        raise QRCodeError(f"generate QR Code unmarshalling failed: {e!r}") from e
    if not isinstance(credential_id, str) or not credential_id:
        raise QRCodeError("generate QR Code unmarshalling failed: credential id is missing")

    query = urllib.parse.urlencode({"id": credential_id, "profile": profile})
    url = f"{host.rstrip('/')}{RETRIEVE_CREDENTIAL_ENDPOINT}?{query}"

    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, box_size=6, border=2)
    qr.add_data(url)
    qr.make(fit=True)
    buffer = io.BytesIO()
    qr.make_image(fill_color="black", back_color="white").save(buffer, format="PNG")
    return QRCode(url=url, image=f"data:image/png;base64,{base64.b64encode(buffer.getvalue()).decode('ascii')}")
