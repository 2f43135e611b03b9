"""Exceptions raised (or carried as error values) by the cookie store.

Configuration problems are raised loudly. Problems caused by an untrusted
cookie are never raised: they travel inside ``Err`` results and the store
turns them into an empty session.
"""


class CookieStoreError(Exception):
    """Base class for every error defined by navigator_cookie."""


class ConfigurationError(CookieStoreError, ValueError):
    """Missing or invalid store options, raised at ``init`` time."""


class InvalidSecret(CookieStoreError, ValueError):
    """The master secret is missing or shorter than 64 bytes."""


class VerificationError(CookieStoreError):
    """A token could not be verified or decrypted."""


class MalformedEnvelope(VerificationError):
    """The token does not follow the envelope grammar."""


class TamperedOrInvalid(VerificationError):
    """The token signature does not match its payload."""


class SerializerError(CookieStoreError):
    """Base class for value serializer failures."""


class EncodeError(SerializerError):
    """A value could not be serialized."""


class DecodeError(SerializerError):
    """A payload could not be deserialized."""
