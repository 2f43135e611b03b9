"""
Message Encryptor: AES-256-CBC encrypt-then-MAC envelopes.

Inner format: ``base64(ciphertext) + "--" + base64(iv)``, which is then
signed with ``verifier.sign`` using a distinct signing key.

Plaintext padding:
    [padding_size 1B][message][padding_size random bytes]
The total is always a multiple of the 16-byte AES block.

Security Note:
    The signature is verified before the ciphertext or its padding are
    looked at, so a forged token cannot be used as a padding oracle.
"""
import os
import base64
import binascii

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..exceptions import MalformedEnvelope
from ..result import Err, Ok, Result
from .verifier import sign, verify

BLOCK_SIZE = 16
IV_SIZE = 16
KEY_SIZE = 32  # AES-256

_SEPARATOR = b"--"


def trim_key(key: bytes) -> bytes:
    """Keep the leading 32 bytes of ``key``; shorter keys are unchanged."""
    return key[:KEY_SIZE]


def pad_message(message: bytes) -> bytes:
    """Prefix the padding length and append random filler up to a block."""
    remaining = (len(message) + 1) % BLOCK_SIZE
    padding_size = 0 if remaining == 0 else BLOCK_SIZE - remaining
    return bytes([padding_size]) + message + os.urandom(padding_size)


def unpad_message(padded: bytes) -> Result:
    """Strip the padding added by ``pad_message``.

    Returns:
        ``Ok(message)``, or ``Err(MalformedEnvelope)`` when the buffer is
        empty or the padding length exceeds the remaining bytes.
    """
    if not padded:
        return Err(MalformedEnvelope("empty plaintext"))
    padding_size = padded[0]
    rest = padded[1:]
    if padding_size > len(rest):
        return Err(MalformedEnvelope("padding length exceeds plaintext"))
    return Ok(rest[:len(rest) - padding_size])


def _cipher(key: bytes, iv: bytes) -> Cipher:
    return Cipher(algorithms.AES(trim_key(key)), modes.CBC(iv))


def encrypt_and_sign(message: bytes, cipher_key: bytes, sign_key: bytes) -> str:
    """Encrypt ``message`` and sign the result.

    Args:
        message: Plaintext bytes.
        cipher_key: Encryption key; only the first 32 bytes are used.
        sign_key: Key for the outer signature.

    Returns:
        Signed envelope wrapping ``base64(ciphertext)--base64(iv)``.
    """
    iv = os.urandom(IV_SIZE)
    encryptor = _cipher(cipher_key, iv).encryptor()
    ciphertext = encryptor.update(pad_message(message)) + encryptor.finalize()
    inner = base64.b64encode(ciphertext) + _SEPARATOR + base64.b64encode(iv)
    return sign(inner, sign_key)


def verify_and_decrypt(envelope: str, cipher_key: bytes, sign_key: bytes) -> Result:
    """Verify the signature of ``envelope``, then decrypt it.

    Args:
        envelope: Token produced by ``encrypt_and_sign``.
        cipher_key: Encryption key; only the first 32 bytes are used.
        sign_key: Key for the outer signature.

    Returns:
        ``Ok(message)`` on success. Verification failures are returned
        unchanged; a broken inner envelope or padding gives
        ``Err(MalformedEnvelope)``.
    """
    verified = verify(envelope, sign_key)
    if isinstance(verified, Err):
        return verified
    encoded_ciphertext, separator, encoded_iv = verified.value.partition(_SEPARATOR)
    if not separator:
        return Err(MalformedEnvelope("encrypted envelope has no IV"))
    try:
        ciphertext = base64.b64decode(encoded_ciphertext, validate=True)
        iv = base64.b64decode(encoded_iv, validate=True)
    except (binascii.Error, ValueError):
        return Err(MalformedEnvelope("encrypted envelope is not valid base64"))
    if len(iv) != IV_SIZE:
        return Err(MalformedEnvelope(f"IV must be {IV_SIZE} bytes"))
    if not ciphertext or len(ciphertext) % BLOCK_SIZE:
        return Err(MalformedEnvelope("ciphertext is not a whole number of blocks"))
    decryptor = _cipher(cipher_key, iv).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    return unpad_message(padded)
