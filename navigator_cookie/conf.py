"""
Cookie Store Defaults: Constants and environment-provided options.

Store options can be read from environment variables:
    COOKIE_SIGNING_SALT = <salt used to derive the signing key>
    COOKIE_ENCRYPTION_SALT = <salt used to derive the encryption key>
    COOKIE_ENCRYPT = true|false
    COOKIE_SERIALIZER = pickle|json|jsonpickle
    COOKIE_JSON_ENCODER = <import path of the JSON codec, default orjson>
    COOKIE_KEY_ITERATIONS / COOKIE_KEY_LENGTH / COOKIE_KEY_DIGEST
    COOKIE_KEY_CACHE_SIZE

Security Note:
    Salts are not secret, but the master secret is. It is never read
    from here: callers pass it on every ``get``/``put``.
"""
import os
import logging
from collections.abc import Mapping
from typing import Any, Optional

logger = logging.getLogger("navigator.cookie")

SECRET_MIN_LENGTH = 64
DEFAULT_KEY_ITERATIONS = 1000
DEFAULT_KEY_LENGTH = 32
DEFAULT_KEY_DIGEST = "sha256"
DEFAULT_KEY_CACHE_SIZE = 512
DEFAULT_SERIALIZER = "pickle"
DEFAULT_JSON_ENCODER = "orjson"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _env_bool(value: str, name: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean value, got {value!r}")


def env_options(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Collect cookie store options from COOKIE_* environment variables.

    Only variables that are present end up in the result, so the store
    defaults apply to everything else.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Options suitable for ``navigator_cookie.init``.

    Raises:
        ValueError: If a numeric or boolean variable cannot be parsed.
    """
    if environ is None:
        environ = os.environ
    options: dict[str, Any] = {}
    if "COOKIE_SIGNING_SALT" in environ:
        options["signing_salt"] = environ["COOKIE_SIGNING_SALT"]
    if "COOKIE_ENCRYPTION_SALT" in environ:
        options["encryption_salt"] = environ["COOKIE_ENCRYPTION_SALT"]
    if "COOKIE_ENCRYPT" in environ:
        options["encrypt"] = _env_bool(environ["COOKIE_ENCRYPT"], "COOKIE_ENCRYPT")
    serializer = environ.get("COOKIE_SERIALIZER", DEFAULT_SERIALIZER)
    options["serializer"] = serializer
    if serializer == "json":
        options["json_encoder"] = environ.get(
            "COOKIE_JSON_ENCODER", DEFAULT_JSON_ENCODER
        )
    for name, option in (
        ("COOKIE_KEY_ITERATIONS", "key_iterations"),
        ("COOKIE_KEY_LENGTH", "key_length"),
        ("COOKIE_KEY_CACHE_SIZE", "key_cache_size"),
    ):
        if name in environ:
            options[option] = int(environ[name])
    if "COOKIE_KEY_DIGEST" in environ:
        options["key_digest"] = environ["COOKIE_KEY_DIGEST"]
    logger.debug(
        "Loaded cookie store options from environment: %s", sorted(options)
    )
    return options
