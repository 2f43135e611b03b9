"""
Key Derivation: PBKDF2 subkeys derived from the master secret.

Each purpose (signing, encryption) uses its own salt, so the same master
secret yields independent keys. Derivations are memoized in a cache owned
by the ``KeyGenerator`` instance, keyed by
(secret, salt, iterations, length, digest).

Security Note:
    Never log key material or the master secret. Only log parameters.
"""
import logging
import threading
from collections import OrderedDict
from typing import Optional, Protocol, Union

from pydantic import BaseModel, Field, field_validator
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..conf import (
    SECRET_MIN_LENGTH,
    DEFAULT_KEY_ITERATIONS,
    DEFAULT_KEY_LENGTH,
    DEFAULT_KEY_DIGEST,
    DEFAULT_KEY_CACHE_SIZE,
)
from ..exceptions import InvalidSecret

logger = logging.getLogger("navigator.cookie")

DIGESTS: dict[str, type[hashes.HashAlgorithm]] = {
    "sha": hashes.SHA1,
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}

CacheKey = tuple[bytes, bytes, int, int, str]


class DerivationParameters(BaseModel):
    """PBKDF2 parameters, frozen once a store is configured."""

    iterations: int = Field(default=DEFAULT_KEY_ITERATIONS, ge=1)
    length: int = Field(default=DEFAULT_KEY_LENGTH, ge=1)
    digest: str = Field(default=DEFAULT_KEY_DIGEST)

    model_config = {"frozen": True}

    @field_validator("digest")
    @classmethod
    def validate_digest(cls, v: str) -> str:
        """Validate the digest is a supported hash."""
        name = v.lower()
        if name not in DIGESTS:
            raise ValueError(
                f"Unsupported key digest: {v} (available: {sorted(DIGESTS)})"
            )
        return name


def to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise TypeError(f"expected str or bytes, got {type(value).__name__}")


def validate_secret(secret: Union[str, bytes, None]) -> bytes:
    """Return the master secret as bytes, ensuring it is long enough.

    Raises:
        InvalidSecret: If the secret is missing, not text or bytes, or
            shorter than 64 bytes.
    """
    if secret is None:
        raise InvalidSecret("cookie store expects a secret to be set")
    if not isinstance(secret, (str, bytes, bytearray)):
        raise InvalidSecret(
            f"cookie store expects the secret as str or bytes, "
            f"got {type(secret).__name__}"
        )
    secret = to_bytes(secret)
    if len(secret) < SECRET_MIN_LENGTH:
        raise InvalidSecret(
            f"cookie store expects the secret to be at least "
            f"{SECRET_MIN_LENGTH} bytes"
        )
    return secret


class KeyCache(Protocol):
    """Storage for derived keys."""

    def get(self, key: CacheKey) -> Optional[bytes]:
        ...

    def set(self, key: CacheKey, value: bytes) -> None:
        ...


class MemoryKeyCache:
    """Bounded, thread-safe LRU cache of derived keys.

    Entries are whole ``bytes`` objects replaced under a lock, so a reader
    never sees a partially written key.
    """

    def __init__(self, max_entries: int = DEFAULT_KEY_CACHE_SIZE):
        if max_entries < 1:
            raise ValueError("max_entries must be a positive integer")
        self._max_entries = max_entries
        self._entries: OrderedDict[CacheKey, bytes] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: CacheKey) -> Optional[bytes]:
        with self._lock:
            value = self._entries.get(key)
            if value is not None:
                self._entries.move_to_end(key)
            return value

    def set(self, key: CacheKey, value: bytes) -> None:
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
                logger.debug("Evicted derived key from cache")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class NullKeyCache:
    """Cache that never stores anything; every derivation recomputes."""

    def get(self, key: CacheKey) -> Optional[bytes]:
        return None

    def set(self, key: CacheKey, value: bytes) -> None:
        return None


class KeyGenerator:
    """Derives fixed-length subkeys from a master secret and a salt.

    Args:
        cache: Cache used to memoize derivations. A ``MemoryKeyCache`` is
            created when omitted.
    """

    def __init__(self, cache: Optional[KeyCache] = None):
        self._cache = cache if cache is not None else MemoryKeyCache()

    @property
    def cache(self) -> KeyCache:
        return self._cache

    def generate(
        self,
        secret: Union[str, bytes, None],
        salt: Union[str, bytes],
        params: Optional[DerivationParameters] = None,
    ) -> bytes:
        """Derive a key from ``secret`` and ``salt``.

        Args:
            secret: Master secret, at least 64 bytes.
            salt: Purpose specific salt.
            params: PBKDF2 parameters. Defaults to 1000 iterations of
                HMAC-SHA256 producing 32 bytes.

        Returns:
            Derived key of ``params.length`` bytes.

        Raises:
            InvalidSecret: If the secret is missing or too short.
        """
        secret = validate_secret(secret)
        salt = to_bytes(salt)
        if params is None:
            params = DerivationParameters()
        cache_key = (secret, salt, params.iterations, params.length, params.digest)
        key = self._cache.get(cache_key)
        if key is None:
            kdf = PBKDF2HMAC(
                algorithm=DIGESTS[params.digest](),
                length=params.length,
                salt=salt,
                iterations=params.iterations,
            )
            key = kdf.derive(secret)
            self._cache.set(cache_key, key)
        return key
