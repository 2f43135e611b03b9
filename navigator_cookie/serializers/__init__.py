"""Cookie Serializers: pluggable formats for the session payload.

Serializers are looked up by name (``"pickle"``, ``"json"``,
``"jsonpickle"``) or given directly as a ``Serializer`` subclass or
instance. Third parties add names with ``register_serializer``.
"""
from typing import Any, Union

from ..exceptions import ConfigurationError
from .base import Serializer
from .native import PickleSerializer, SafeUnpickler, register_safe_class
from .json_codec import JSONCodec, JSONSerializer
from .jsonpickle_codec import JsonPickleSerializer

SERIALIZERS: dict[str, type[Serializer]] = {
    "pickle": PickleSerializer,
    "native": PickleSerializer,
    "json": JSONSerializer,
    "jsonpickle": JsonPickleSerializer,
}


def register_serializer(name: str, serializer: type[Serializer]) -> None:
    """Make ``serializer`` available under ``name``."""
    if not (isinstance(serializer, type) and issubclass(serializer, Serializer)):
        raise TypeError(f"{serializer!r} is not a Serializer subclass")
    SERIALIZERS[name.lower()] = serializer


def resolve_serializer(reference: Union[str, type, Serializer, Any]) -> Serializer:
    """Return a Serializer instance for a name, class or instance.

    Raises:
        ConfigurationError: If the reference is unknown or the class
            cannot be instantiated without arguments.
    """
    if isinstance(reference, Serializer):
        return reference
    if isinstance(reference, str):
        try:
            reference = SERIALIZERS[reference.lower()]
        except KeyError:
            raise ConfigurationError(
                f"Unknown cookie serializer: {reference} "
                f"(available: {sorted(SERIALIZERS)})"
            ) from None
    if isinstance(reference, type) and issubclass(reference, Serializer):
        try:
            return reference()
        except TypeError as err:
            raise ConfigurationError(
                f"Unable to instantiate cookie serializer {reference.__name__}: {err}"
            ) from err
    raise ConfigurationError(f"Invalid cookie serializer: {reference!r}")


__all__ = [
    "Serializer",
    "PickleSerializer",
    "SafeUnpickler",
    "register_safe_class",
    "JSONSerializer",
    "JSONCodec",
    "JsonPickleSerializer",
    "SERIALIZERS",
    "register_serializer",
    "resolve_serializer",
]
