# src/apps/discord/services/signature.py
"""
Ed25519 verification of incoming Discord interaction requests.
"""

import logging

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

logger = logging.getLogger(__name__)


def verify_signature(public_key_hex: str, signature_hex: str, timestamp: str, body) -> bool:
    """
    Check ``X-Signature-Ed25519`` over ``timestamp + body``.

    Returns False for missing headers, a missing key or malformed hex
    rather than raising.
    """
    if not public_key_hex or not signature_hex or not timestamp:
        return False

    if isinstance(body, bytes):
        message = timestamp.encode() + body
    else:
        message = (timestamp + (body or '')).encode()

    try:
        key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(public_key_hex))
        key.verify(bytes.fromhex(signature_hex), message)
    except InvalidSignature:
        return False
    except ValueError as e:
        logger.warning(f"Malformed Discord signature or key: {e}")
        return False
    return True
