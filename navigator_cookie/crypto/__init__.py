"""Cookie Crypto: key derivation, signed and encrypted envelopes."""

from .keys import (
    DerivationParameters,
    KeyCache,
    KeyGenerator,
    MemoryKeyCache,
    NullKeyCache,
    validate_secret,
)
from .verifier import sign, verify, secure_compare
from .encryptor import (
    encrypt_and_sign,
    verify_and_decrypt,
    pad_message,
    unpad_message,
)

__all__ = [
    "DerivationParameters",
    "KeyCache",
    "KeyGenerator",
    "MemoryKeyCache",
    "NullKeyCache",
    "validate_secret",
    "sign",
    "verify",
    "secure_compare",
    "encrypt_and_sign",
    "verify_and_decrypt",
    "pad_message",
    "unpad_message",
]
