import base64
import binascii
import hashlib
import hmac
from typing import Mapping, Optional

HMAC_HEADER = "X-Shopify-Hmac-Sha256"


def get_hmac_header(headers: Optional[Mapping], name: str = HMAC_HEADER) -> str | None:
    """Case-insensitive header lookup that works for plain dicts too."""
    if not headers:
        return None
    wanted = name.lower()
    for key, value in headers.items():
        if isinstance(key, str) and key.lower() == wanted:
            return value if isinstance(value, str) else str(value)
    return None


def compute_hmac(raw_body: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).digest()


def sign_body(raw_body: bytes, secret: str) -> str:
    """Base64 HMAC-SHA256 of the body, as Shopify sends it in the header."""
    return base64.b64encode(compute_hmac(raw_body, secret)).decode("ascii")


def verify_shopify_hmac(raw_body: bytes, supplied_signature: Optional[str], secret: str) -> bool:
    """
    Verify a Shopify webhook signature over the exact raw body bytes.

    Returns False (never raises) for a missing/empty header, a header that is not
    valid base64, or one whose decoded length differs from the digest length.
    The byte comparison itself is constant-time.
    """
    if not supplied_signature or not isinstance(supplied_signature, str):
        return False
    if not secret or not isinstance(secret, str):
        return False
    if isinstance(raw_body, str):
        raw_body = raw_body.encode("utf-8")
    if not isinstance(raw_body, (bytes, bytearray)):
        return False

    try:
        supplied = base64.b64decode(supplied_signature, validate=True)
    except (binascii.Error, ValueError):
        return False

    expected = compute_hmac(bytes(raw_body), secret)
    if len(supplied) != len(expected):
        return False
    return hmac.compare_digest(supplied, expected)
