# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import base64

import pytest

from issuer import qr_code


def test_generate_qr_code():
    code = qr_code.generate_qr_code(b'{"id":"test"}', "https://issuer.example.com/", "profile")
    assert code.url == "https://issuer.example.com/retrieve?id=test&profile=profile"
    assert code.image.startswith("data:image/png;base64,")
    png = base64.b64decode(code.image.removeprefix("data:image/png;base64,"))
    assert png.startswith(b"\x89PNG")


def test_generate_qr_code_escapes_id():
    code = qr_code.generate_qr_code(b'{"id":"http://example.edu/credentials/1872"}', "host", "profile")
    assert code.url == "host/retrieve?id=http%3A%2F%2Fexample.edu%2Fcredentials%2F1872&profile=profile"


@pytest.mark.parametrize("credential", [b'{"name":chan int}', b'"credential"', b"[]", b'{"name": "no id"}', b'{"id": 5}'])
def test_generate_qr_code_error(credential):
    with pytest.raises(qr_code.QRCodeError, match="generate QR Code unmarshalling failed"):
        qr_code.generate_qr_code(credential, "host", "profile")
