"""Native serializer: Python's pickle format.

Decoding goes through ``SafeUnpickler``, which only resolves the globals
listed in ``SAFE_GLOBALS`` plus the classes registered with
``register_safe_class`` or given with the ``allowed_classes`` option.
Anything else named by the payload is refused before it is imported.
"""
import io
import pickle
import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from ..exceptions import ConfigurationError, DecodeError, EncodeError
from ..result import Err, Ok, Result
from .base import Serializer

logger = logging.getLogger("navigator.cookie")

GlobalName = tuple[str, str]

# containers and scalars without an opcode of their own
SAFE_GLOBALS: frozenset[GlobalName] = frozenset({
    ("builtins", "set"),
    ("builtins", "frozenset"),
    ("builtins", "bytearray"),
    ("builtins", "complex"),
    ("builtins", "range"),
    ("builtins", "slice"),
    ("collections", "OrderedDict"),
    ("datetime", "date"),
    ("datetime", "time"),
    ("datetime", "datetime"),
    ("datetime", "timedelta"),
    ("datetime", "timezone"),
    ("decimal", "Decimal"),
    ("uuid", "UUID"),
})

_registered: set[GlobalName] = set()
_registry_lock = threading.Lock()


def _global_name(cls: Union[type, str]) -> GlobalName:
    if isinstance(cls, str):
        module, _, name = cls.rpartition(".")
        if not module or not name:
            raise ConfigurationError(
                f"allowed class must be a dotted path, got {cls!r}"
            )
        return module, name
    if isinstance(cls, type):
        return cls.__module__, cls.__qualname__
    raise ConfigurationError(f"allowed class must be a class, got {cls!r}")


def register_safe_class(cls: type) -> type:
    """Allow instances of ``cls`` in native session payloads.

    Usable as a class decorator.
    """
    name = _global_name(cls)
    with _registry_lock:
        _registered.add(name)
    return cls


class SafeUnpickler(pickle.Unpickler):
    """Unpickler that only resolves allowed globals."""

    def __init__(self, file, allowed: frozenset[GlobalName]):
        super().__init__(file)
        self._allowed = allowed

    def find_class(self, module, name):
        if (module, name) in self._allowed:
            return super().find_class(module, name)
        raise pickle.UnpicklingError(f"global {module}.{name} is not allowed")


class PickleSerializer(Serializer):
    """Serializes picklable values built from allowed types.

    Payloads only reach ``decode`` after their signature was verified,
    but arbitrary bytes still decode to ``Err`` instead of raising, and
    never run code named by the payload.
    """

    name = "pickle"

    def init(self, options: Mapping[str, Any]) -> frozenset[GlobalName]:
        """Resolve the ``allowed_classes`` option.

        Raises:
            ConfigurationError: If an entry is neither a class nor a
                dotted path.
        """
        allowed: Optional[Iterable] = options.get("allowed_classes")
        if allowed is None:
            return frozenset()
        if isinstance(allowed, (str, type)):
            allowed = [allowed]
        return frozenset(_global_name(cls) for cls in allowed)

    def encode(self, value: Any, config: Any) -> Result:
        try:
            return Ok(pickle.dumps(value, protocol=pickle.DEFAULT_PROTOCOL))
        except Exception as err:  # pickle raises many unrelated types
            logger.debug("Unable to pickle session value: %s", type(err).__name__)
            return Err(EncodeError("value cannot be pickled"))

    def decode(self, data: bytes, config: Any) -> Result:
        with _registry_lock:
            allowed = SAFE_GLOBALS | _registered | (config or frozenset())
        try:
            return Ok(SafeUnpickler(io.BytesIO(data), allowed).load())
        except Exception as err:
            logger.debug("Unable to unpickle session payload: %s", type(err).__name__)
            return Err(DecodeError("payload is not a valid pickle"))
