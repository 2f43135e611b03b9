"""
Message Verifier: HMAC-SHA1 signed envelopes.

Envelope format: ``base64(payload) + "--" + hex(hmac_sha1(base64(payload)))``

The MAC is computed over the base64 text, not the raw payload. The base64
alphabet has no ``-`` so the first ``--`` always ends the payload.
"""
import base64
import binascii

from cryptography.hazmat.primitives import constant_time, hashes, hmac

from ..exceptions import MalformedEnvelope, TamperedOrInvalid
from ..result import Err, Ok, Result

SEPARATOR = "--"
DIGEST_SIZE = 20  # HMAC-SHA1, 160 bits


def _digest(text: bytes, key: bytes) -> str:
    mac = hmac.HMAC(key, hashes.SHA1())
    mac.update(text)
    return mac.finalize().hex()


def secure_compare(left: bytes, right: bytes) -> bool:
    """Compare two byte strings in constant time.

    Strings of different length still pay for a full-length comparison.
    """
    if len(left) != len(right):
        constant_time.bytes_eq(left, left)
        return False
    return constant_time.bytes_eq(left, right)


def sign(payload: bytes, key: bytes) -> str:
    """Sign ``payload`` with ``key``, returning a signed envelope."""
    text = base64.b64encode(payload)
    return f"{text.decode('ascii')}{SEPARATOR}{_digest(text, key)}"


def verify(envelope: str, key: bytes) -> Result:
    """Verify a signed envelope and return its payload.

    Args:
        envelope: Envelope produced by ``sign``.
        key: Signing key.

    Returns:
        ``Ok(payload)`` on success, ``Err(MalformedEnvelope)`` when the
        envelope cannot be split, ``Err(TamperedOrInvalid)`` when the MAC
        does not match or the payload is not valid base64.
    """
    if not isinstance(envelope, str):
        return Err(MalformedEnvelope("envelope must be a string"))
    text, separator, digest = envelope.partition(SEPARATOR)
    if not separator:
        return Err(MalformedEnvelope("envelope has no signature"))
    try:
        text_bytes = text.encode("ascii")
        digest_bytes = digest.encode("ascii")
    except UnicodeEncodeError:
        return Err(MalformedEnvelope("envelope is not ASCII"))
    expected = _digest(text_bytes, key).encode("ascii")
    if not secure_compare(expected, digest_bytes):
        return Err(TamperedOrInvalid("signature mismatch"))
    try:
        payload = base64.b64decode(text_bytes, validate=True)
    except (binascii.Error, ValueError):
        return Err(TamperedOrInvalid("payload is not valid base64"))
    return Ok(payload)
