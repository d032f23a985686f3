"""GitHub webhook signature validation.

GitHub signs each delivery with HMAC-SHA1 over the raw body, keyed by the
shared secret, and sends it as ``X-Hub-Signature: sha1=<hex digest>``.
"""

import hashlib
import hmac
import logging
from typing import List, Mapping, Sequence, Union

logger = logging.getLogger(__name__)

HEADER_SIGNATURE = "X-Hub-Signature"
SIGNATURE_PREFIX = "sha1="


def _as_bytes(secret: Union[str, bytes]) -> bytes:
    if isinstance(secret, str):
        return secret.encode("utf-8")
    return secret


def compute_signature(body: bytes, secret: Union[str, bytes]) -> str:
    """Return the ``sha1=<hex>`` signature GitHub would send for ``body``."""
    digest = hmac.new(_as_bytes(secret), msg=body, digestmod=hashlib.sha1)
    return SIGNATURE_PREFIX + digest.hexdigest()


def _signature_values(headers: Mapping[str, Sequence[str]]) -> List[str]:
    # Header names are case-insensitive; variants of the same name are one header.
    wanted = HEADER_SIGNATURE.lower()
    values: List[str] = []
    for name, header_values in headers.items():
        if name.lower() == wanted:
            values.extend(header_values)
    return values


def validate_signature(
    headers: Mapping[str, Sequence[str]],
    body: bytes,
    secret: Union[str, bytes],
) -> bool:
    """Check a delivery's X-Hub-Signature header against its body.

    Args:
        headers: Request headers as name -> list of values.
        body: The raw request body.
        secret: The shared webhook secret.

    Returns:
        True only if exactly one signature header is present and it matches
        the HMAC-SHA1 of ``body``.
    """
    values = _signature_values(headers)
    if not values:
        logger.warning("Missing %s header", HEADER_SIGNATURE)
        return False
    if len(values) != 1:
        logger.warning(
            "Got suspicious signature: %d %s values",
            len(values),
            HEADER_SIGNATURE,
        )
        return False

    expected = compute_signature(body, secret)
    received = values[0].encode("utf-8", errors="surrogatepass")

    # compare_digest keeps the comparison constant-time; a mismatch is not logged
    return hmac.compare_digest(received, expected.encode("ascii"))
