"""
Cookie Store: the whole session lives inside the cookie token.

Provides the session-store interface:
- ``init(options)`` validate options and build a ``StoreConfig``
- ``put(secret, value, config)`` serialize, sign (and encrypt) a value
- ``get(secret, token, config)`` verify (and decrypt) a token
- ``delete(...)`` no-op, the client drops the cookie

Tokens are checked before anything else touches them. A malformed,
tampered or undecodable token never raises: ``get`` returns an empty
session instead. A missing or short master secret is a deployment error
and raises ``InvalidSecret``.

Security Note:
    Never log tokens, secrets, derived keys or session values.
"""
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from .config import StoreConfig
from .crypto.encryptor import encrypt_and_sign, verify_and_decrypt
from .crypto.keys import to_bytes, validate_secret
from .crypto.verifier import sign, verify
from .result import Err, Ok, Result
from .exceptions import DecodeError, EncodeError

logger = logging.getLogger("navigator.cookie")

Secret = Union[str, bytes, None]


def init(options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> StoreConfig:
    """Build the immutable store configuration.

    Raises:
        ConfigurationError: If salts are missing or options are invalid.
    """
    return StoreConfig.from_options(options, **kwargs)


def _derive(secret: bytes, salt: bytes, config: StoreConfig) -> bytes:
    return config.key_generator.generate(secret, salt, config.key_options)


def _encode(value: Any, config: StoreConfig) -> Result:
    try:
        result = config.serializer.encode(value, config.serializer_config)
    except Exception as err:  # third-party serializers may still raise
        logger.debug("Serializer raised on encode: %s", type(err).__name__)
        return Err(EncodeError("serializer raised"))
    if isinstance(result, Err):
        return result
    if not isinstance(result, Ok):
        logger.debug("Serializer returned %s on encode", type(result).__name__)
        return Err(EncodeError("serializer did not return a result"))
    if isinstance(result.value, str):
        return Ok(to_bytes(result.value))
    if not isinstance(result.value, (bytes, bytearray)):
        logger.debug("Serializer encoded to %s", type(result.value).__name__)
        return Err(EncodeError("serializer did not return bytes"))
    return Ok(bytes(result.value))


def _decode(data: bytes, config: StoreConfig) -> Result:
    try:
        result = config.serializer.decode(data, config.serializer_config)
    except Exception as err:
        logger.debug("Serializer raised on decode: %s", type(err).__name__)
        return Err(DecodeError("serializer raised"))
    if not isinstance(result, (Ok, Err)):
        logger.debug("Serializer returned %s on decode", type(result).__name__)
        return Err(DecodeError("serializer did not return a result"))
    return result


def put(secret: Secret, value: Any, config: StoreConfig) -> str:
    """Turn ``value`` into a cookie token.

    A value the serializer cannot encode is stored as an empty payload.

    Args:
        secret: Master secret, at least 64 bytes.
        value: Session value.
        config: Store configuration from ``init``.

    Returns:
        Signed (or encrypted and signed) token.

    Raises:
        InvalidSecret: If the secret is missing or too short.
    """
    secret = validate_secret(secret)
    encoded = _encode(value, config)
    if isinstance(encoded, Err):
        logger.debug("Storing empty session: %s", type(encoded.error).__name__)
        payload = b""
    else:
        payload = encoded.value
    sign_key = _derive(secret, config.signing_salt, config)
    if config.encrypted:
        cipher_key = _derive(secret, config.encryption_salt, config)
        return encrypt_and_sign(payload, cipher_key, sign_key)
    return sign(payload, sign_key)


def get(secret: Secret, token: Optional[str], config: StoreConfig) -> Any:
    """Recover the session value stored in ``token``.

    Args:
        secret: Master secret, at least 64 bytes.
        token: Cookie value sent by the client.
        config: Store configuration from ``init``.

    Returns:
        The stored value, or an empty dict when the token is absent,
        malformed, tampered with or cannot be decoded.

    Raises:
        InvalidSecret: If the secret is missing or too short.
    """
    secret = validate_secret(secret)
    if not token:
        return {}
    sign_key = _derive(secret, config.signing_salt, config)
    if config.encrypted:
        cipher_key = _derive(secret, config.encryption_salt, config)
        verified = verify_and_decrypt(token, cipher_key, sign_key)
    else:
        verified = verify(token, sign_key)
    if isinstance(verified, Err):
        logger.debug("Rejected session cookie: %s", type(verified.error).__name__)
        return {}
    decoded = _decode(verified.value, config)
    if isinstance(decoded, Err):
        logger.debug("Undecodable session cookie: %s", type(decoded.error).__name__)
        return {}
    return decoded.value


def delete(*args: Any, **kwargs: Any) -> None:
    """Nothing is kept server side; the client removes the cookie."""
    return None


class CookieStore:
    """Cookie store bound to one configuration.

    Example:
        store = CookieStore(signing_salt="signing", encryption_salt="encryption")
        token = store.put(secret_key_base, {"user": 1})
        store.get(secret_key_base, token)  # {"user": 1}
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        *,
        config: Optional[StoreConfig] = None,
        **kwargs: Any,
    ):
        self._config = config if config is not None else init(options, **kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> "CookieStore":
        return cls(config=StoreConfig.from_env(**overrides))

    @property
    def config(self) -> StoreConfig:
        return self._config

    def get(self, secret: Secret, token: Optional[str]) -> Any:
        return get(secret, token, self._config)

    def put(self, secret: Secret, value: Any) -> str:
        return put(secret, value, self._config)

    def delete(self, *args: Any, **kwargs: Any) -> None:
        return delete(*args, **kwargs)

    def __repr__(self) -> str:
        return (
            f'<CookieStore [encrypted:{self._config.encrypted}] '
            f'serializer={self._config.serializer.name!r}>'
        )
