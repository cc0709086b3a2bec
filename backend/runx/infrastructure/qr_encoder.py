"""QR Provisioning Encoder: renders otpauth URIs as PNG data URLs.

Invariants:
    - Output is a self-contained data URL (data:image/png;base64,...)
"""

import base64
import io

import qrcode

DATA_URL_PREFIX = "data:image/png;base64,"


class QrDataUrlEncoder:
    """ProvisioningEncoder implementation backed by qrcode + Pillow."""

    def __init__(self, box_size: int = 10, border: int = 4):
        self.box_size = box_size
        self.border = border

    def render(self, uri: str) -> str:
        qr = qrcode.QRCode(box_size=self.box_size, border=self.border)
        qr.add_data(uri)
        qr.make(fit=True)
        image = qr.make_image()
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return DATA_URL_PREFIX + base64.b64encode(buffer.getvalue()).decode("ascii")
