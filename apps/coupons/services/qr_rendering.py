"""
QR payload formatting and image rendering.

The payload scanned by suppliers has the form ``COUPON-<employee_code>-<token>``.
Employee codes may contain dashes; the token is always the trailing UUID.
"""

import base64
from io import BytesIO

import qrcode

PAYLOAD_PREFIX = 'COUPON'

# Length of a canonical UUID4 string
TOKEN_LENGTH = 36


class QRPayloadGenerator:
    """Build, parse and render coupon QR payloads."""

    @staticmethod
    def build_payload(employee_code, token):
        """
        Compose the string encoded in the QR image.

        Args:
            employee_code (str): Public code of the employee.
            token (str): Opaque QR token (``QRCode.code``).

        Returns:
            str: ``COUPON-<employee_code>-<token>``.
        """
        return f"{PAYLOAD_PREFIX}-{employee_code}-{token}"

    @staticmethod
    def parse_payload(raw):
        """
        Split a scanned value into ``(employee_code, token)``.

        A bare token (no prefix) is accepted as well and yields
        ``(None, token)``.
        """
        value = (raw or '').strip()
        prefix = f"{PAYLOAD_PREFIX}-"
        if not value.startswith(prefix):
            return None, value

        rest = value[len(prefix):]
        if len(rest) <= TOKEN_LENGTH + 1 or rest[-TOKEN_LENGTH - 1] != '-':
            return None, rest

        return rest[:-TOKEN_LENGTH - 1], rest[-TOKEN_LENGTH:]

    @staticmethod
    def generate_qr_image(payload):
        """
        Render the payload as a QR image.

        Uses error correction level M (15% recovery), which survives
        scanning from a phone screen.

        Returns:
            PIL.Image.Image: The QR code image.
        """
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(payload)
        qr.make(fit=True)

        return qr.make_image(fill_color="black", back_color="white")

    @staticmethod
    def generate_data_uri(payload):
        """Render the payload as a ``data:image/png;base64,...`` URI."""
        img = QRPayloadGenerator.generate_qr_image(payload)

        buffer = BytesIO()
        img.save(buffer, format='PNG')
        encoded = base64.b64encode(buffer.getvalue()).decode('ascii')

        return f"data:image/png;base64,{encoded}"
