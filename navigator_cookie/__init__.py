"""Navigator Cookie: stateless session store kept inside the cookie.

The session value is serialized, optionally encrypted with AES-256-CBC and
signed with HMAC-SHA1 using keys derived (PBKDF2) from the application
secret. Nothing is stored server side.
"""

from .version import __version__
from .exceptions import (
    CookieStoreError,
    ConfigurationError,
    InvalidSecret,
    VerificationError,
    MalformedEnvelope,
    TamperedOrInvalid,
    SerializerError,
    EncodeError,
    DecodeError,
)
from .result import Ok, Err, Result
from .config import StoreConfig
from .crypto import DerivationParameters, KeyGenerator, MemoryKeyCache, NullKeyCache
from .serializers import (
    Serializer,
    PickleSerializer,
    JSONSerializer,
    JsonPickleSerializer,
    register_serializer,
    register_safe_class,
)
from .store import CookieStore, init, get, put, delete

__all__ = [
    "__version__",
    "CookieStore",
    "init",
    "get",
    "put",
    "delete",
    "StoreConfig",
    "DerivationParameters",
    "KeyGenerator",
    "MemoryKeyCache",
    "NullKeyCache",
    "Serializer",
    "PickleSerializer",
    "JSONSerializer",
    "JsonPickleSerializer",
    "register_serializer",
    "register_safe_class",
    "Ok",
    "Err",
    "Result",
    "CookieStoreError",
    "ConfigurationError",
    "InvalidSecret",
    "VerificationError",
    "MalformedEnvelope",
    "TamperedOrInvalid",
    "SerializerError",
    "EncodeError",
    "DecodeError",
]
