"""Tests for encrypt-then-MAC envelopes and the length-prefixed padding."""
import base64
import os

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from navigator_cookie.crypto.encryptor import (
    encrypt_and_sign,
    pad_message,
    trim_key,
    unpad_message,
    verify_and_decrypt,
)
from navigator_cookie.crypto.verifier import sign, verify
from navigator_cookie.exceptions import MalformedEnvelope, TamperedOrInvalid
from navigator_cookie.result import Err, Ok

CIPHER_KEY = b"c" * 32
SIGN_KEY = b"s" * 32


def signed_ciphertext(plaintext: bytes, iv: bytes = None) -> str:
    """Encrypt raw (already padded) plaintext and sign it like the encryptor."""
    iv = iv or os.urandom(16)
    encryptor = Cipher(algorithms.AES(CIPHER_KEY), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(plaintext) + encryptor.finalize()
    return sign(base64.b64encode(ciphertext) + b"--" + base64.b64encode(iv), SIGN_KEY)


class TestPadding:

    @pytest.mark.parametrize("size", range(0, 70))
    def test_padded_length(self, size):
        padded = pad_message(b"m" * size)
        if (size + 1) % 16 == 0:
            assert len(padded) == size + 1
        else:
            assert len(padded) % 16 == 0
            assert size < len(padded) <= size + 16

    def test_layout(self):
        padded = pad_message(b"hello")
        assert padded[0] == 10
        assert padded[1:6] == b"hello"
        assert len(padded) == 16

    def test_no_padding_needed(self):
        padded = pad_message(b"x" * 15)
        assert padded == b"\x00" + b"x" * 15

    def test_unpad(self):
        assert unpad_message(pad_message(b"hello")) == Ok(b"hello")

    def test_unpad_empty(self):
        assert isinstance(unpad_message(b"").error, MalformedEnvelope)

    def test_unpad_oversized_padding(self):
        result = unpad_message(bytes([200]) + b"x" * 15)
        assert isinstance(result, Err)
        assert isinstance(result.error, MalformedEnvelope)

    def test_unpad_whole_buffer(self):
        assert unpad_message(bytes([15]) + b"x" * 15) == Ok(b"")


class TestEncryptAndSign:

    def test_round_trip(self):
        encrypted = encrypt_and_sign(b"secret message", CIPHER_KEY, SIGN_KEY)
        assert verify_and_decrypt(encrypted, CIPHER_KEY, SIGN_KEY) == Ok(b"secret message")

    def test_empty_message(self):
        encrypted = encrypt_and_sign(b"", CIPHER_KEY, SIGN_KEY)
        assert verify_and_decrypt(encrypted, CIPHER_KEY, SIGN_KEY) == Ok(b"")

    def test_inner_envelope(self):
        encrypted = encrypt_and_sign(b"secret message", CIPHER_KEY, SIGN_KEY)
        inner = verify(encrypted, SIGN_KEY).value
        ciphertext, iv = inner.split(b"--")
        assert len(base64.b64decode(iv)) == 16
        assert len(base64.b64decode(ciphertext)) == 16
        assert b"secret message" not in base64.b64decode(ciphertext)

    def test_random_iv(self):
        first = encrypt_and_sign(b"secret message", CIPHER_KEY, SIGN_KEY)
        second = encrypt_and_sign(b"secret message", CIPHER_KEY, SIGN_KEY)
        assert first != second

    def test_long_key_is_truncated(self):
        long_key = CIPHER_KEY + b"x" * 32
        encrypted = encrypt_and_sign(b"message", long_key, SIGN_KEY)
        other_tail = CIPHER_KEY + b"y" * 32
        assert verify_and_decrypt(encrypted, other_tail, SIGN_KEY) == Ok(b"message")
        assert trim_key(long_key) == CIPHER_KEY

    def test_wrong_sign_key(self):
        encrypted = encrypt_and_sign(b"message", CIPHER_KEY, SIGN_KEY)
        result = verify_and_decrypt(encrypted, CIPHER_KEY, b"t" * 32)
        assert isinstance(result.error, TamperedOrInvalid)

    def test_verification_failure_is_propagated(self):
        result = verify_and_decrypt("no separator", CIPHER_KEY, SIGN_KEY)
        assert isinstance(result.error, MalformedEnvelope)


class TestMalformedInnerEnvelope:

    def test_missing_iv(self):
        token = sign(base64.b64encode(b"x" * 16), SIGN_KEY)
        result = verify_and_decrypt(token, CIPHER_KEY, SIGN_KEY)
        assert isinstance(result.error, MalformedEnvelope)

    def test_invalid_base64(self):
        token = sign(b"***--***", SIGN_KEY)
        result = verify_and_decrypt(token, CIPHER_KEY, SIGN_KEY)
        assert isinstance(result.error, MalformedEnvelope)

    def test_short_iv(self):
        inner = base64.b64encode(b"x" * 16) + b"--" + base64.b64encode(b"iv")
        result = verify_and_decrypt(sign(inner, SIGN_KEY), CIPHER_KEY, SIGN_KEY)
        assert isinstance(result.error, MalformedEnvelope)

    def test_partial_block(self):
        inner = base64.b64encode(b"x" * 15) + b"--" + base64.b64encode(b"i" * 16)
        result = verify_and_decrypt(sign(inner, SIGN_KEY), CIPHER_KEY, SIGN_KEY)
        assert isinstance(result.error, MalformedEnvelope)

    def test_negative_padding_guard(self):
        token = signed_ciphertext(bytes([200]) + b"x" * 15)
        result = verify_and_decrypt(token, CIPHER_KEY, SIGN_KEY)
        assert isinstance(result, Err)
        assert isinstance(result.error, MalformedEnvelope)
