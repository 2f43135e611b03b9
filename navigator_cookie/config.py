"""
Store Configuration: validated, immutable cookie store settings.

A ``StoreConfig`` is built once from the store options and shared
read-only by every request.

Security Note:
    Never log key material. Only log salts' presence and parameters.
"""
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from .conf import DEFAULT_KEY_CACHE_SIZE, DEFAULT_SERIALIZER, env_options
from .crypto.encryptor import KEY_SIZE
from .crypto.keys import DerivationParameters, KeyGenerator, MemoryKeyCache, to_bytes
from .exceptions import ConfigurationError
from .serializers import Serializer, resolve_serializer

logger = logging.getLogger("navigator.cookie")


def _aes_key_length(length: int) -> bool:
    # keys longer than KEY_SIZE are truncated before use
    return length in (16, 24) or length >= KEY_SIZE


class StoreConfig(BaseModel):
    """Validated cookie store configuration."""

    signing_salt: bytes
    encryption_salt: Optional[bytes] = None
    serializer: Serializer
    serializer_config: Any = None
    key_options: DerivationParameters = Field(default_factory=DerivationParameters)
    key_generator: KeyGenerator = Field(default_factory=KeyGenerator)

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    @field_validator("signing_salt", "encryption_salt", mode="before")
    @classmethod
    def validate_salt(cls, v: Union[str, bytes, None]) -> Optional[bytes]:
        """Accept salts as text or bytes."""
        if v is None:
            return None
        if not isinstance(v, (str, bytes, bytearray)):
            raise ValueError(f"salt must be str or bytes, got {type(v).__name__}")
        return to_bytes(v)

    @property
    def encrypted(self) -> bool:
        """True when cookies are encrypted as well as signed."""
        return self.encryption_salt is not None

    @classmethod
    def from_options(
        cls,
        options: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> "StoreConfig":
        """Build a StoreConfig from cookie store options.

        Options consumed here: ``signing_salt``, ``encryption_salt``,
        ``encrypt`` (default True), ``serializer`` (default ``"pickle"``),
        ``key_iterations``, ``key_length``, ``key_digest``, ``key_cache``,
        ``key_cache_size``. Everything else is passed to the serializer's
        ``init``.

        Raises:
            ConfigurationError: If a salt is missing or an option is invalid.
        """
        opts = dict(options or {}, **kwargs)
        encrypt = opts.pop("encrypt", True)
        signing_salt = opts.pop("signing_salt", None)
        encryption_salt = opts.pop("encryption_salt", None)
        if signing_salt is None:
            raise ConfigurationError("cookie store expects 'signing_salt' as option")
        if not encrypt:
            encryption_salt = None
        elif encryption_salt is None:
            raise ConfigurationError(
                "encrypted cookie store expects 'encryption_salt' as option"
            )

        key_values = {
            field: opts.pop(option)
            for option, field in (
                ("key_iterations", "iterations"),
                ("key_length", "length"),
                ("key_digest", "digest"),
            )
            if option in opts
        }
        key_cache = opts.pop("key_cache", None)
        key_cache_size = opts.pop("key_cache_size", DEFAULT_KEY_CACHE_SIZE)
        serializer = resolve_serializer(opts.pop("serializer", DEFAULT_SERIALIZER))

        try:
            key_options = DerivationParameters(**key_values)
            if encryption_salt is not None and not _aes_key_length(key_options.length):
                raise ConfigurationError(
                    f"encrypted cookie store expects 'key_length' of 16, 24 "
                    f"or at least {KEY_SIZE} bytes, got {key_options.length}"
                )
            if key_cache is None:
                key_cache = MemoryKeyCache(max_entries=key_cache_size)
            serializer_config = serializer.init(opts)
            config = cls(
                signing_salt=signing_salt,
                encryption_salt=encryption_salt,
                serializer=serializer,
                serializer_config=serializer_config,
                key_options=key_options,
                key_generator=KeyGenerator(cache=key_cache),
            )
        except ConfigurationError:
            raise
        except (ValidationError, ValueError, TypeError) as err:
            raise ConfigurationError(f"Invalid cookie store options: {err}") from err
        logger.debug(
            "Cookie store configured: encrypted=%s serializer=%s key_options=%s",
            config.encrypted, serializer.name, key_options.model_dump(),
        )
        return config

    @classmethod
    def from_env(cls, **overrides: Any) -> "StoreConfig":
        """Create StoreConfig from COOKIE_* environment variables.

        Returns:
            Populated StoreConfig instance.
        """
        try:
            options = env_options()
        except ValueError as err:
            raise ConfigurationError(str(err)) from err
        options.update(overrides)
        return cls.from_options(options)
