"""
JSON serializer: delegates to an externally supplied codec.

The codec is given with the ``json_encoder`` option, either as an object
(module, class or instance) or as an import path such as ``"orjson"``.
It must expose ``encode``/``decode`` or ``dumps``/``loads``.

Whatever the codec raises or returns as an error is normalized to a
generic ``EncodeError``/``DecodeError``.
"""
import logging
import importlib
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from ..exceptions import ConfigurationError, DecodeError, EncodeError
from ..result import Err, Ok, Result
from .base import Serializer

logger = logging.getLogger("navigator.cookie")


@dataclass(frozen=True)
class JSONCodec:
    """Resolved codec and its encode/decode callables."""
    encoder: Any
    dumps: Callable[[Any], Any]
    loads: Callable[[str], Any]


def _codec_function(encoder: Any, *names: str) -> Callable:
    for name in names:
        fn = getattr(encoder, name, None)
        if callable(fn):
            return fn
    raise ConfigurationError(
        f"JSON cookie serializer expects 'json_encoder' to provide "
        f"{' or '.join(names)}"
    )


class JSONSerializer(Serializer):
    """Serializes session values as JSON text through ``json_encoder``."""

    name = "json"

    def init(self, options: Mapping[str, Any]) -> JSONCodec:
        """Resolve the ``json_encoder`` option.

        Raises:
            ConfigurationError: If the codec is missing, cannot be imported
                or lacks encode/decode functions.
        """
        encoder = options.get("json_encoder")
        if encoder is None:
            raise ConfigurationError(
                "JSON cookie serializer expects 'json_encoder' as option"
            )
        if isinstance(encoder, str):
            try:
                encoder = importlib.import_module(encoder)
            except ImportError as err:
                raise ConfigurationError(
                    f"Unable to import JSON encoder {encoder!r}"
                ) from err
        return JSONCodec(
            encoder=encoder,
            dumps=_codec_function(encoder, "encode", "dumps"),
            loads=_codec_function(encoder, "decode", "loads"),
        )

    def encode(self, value: Any, config: JSONCodec) -> Result:
        try:
            result = config.dumps(value)
        except Exception as err:  # shield callers from codec errors
            logger.debug("JSON encoder failed: %s", type(err).__name__)
            return Err(EncodeError("value cannot be encoded"))
        if isinstance(result, str):
            result = result.encode("utf-8")
        if not isinstance(result, (bytes, bytearray)):
            return Err(EncodeError("JSON encoder did not return text"))
        return Ok(bytes(result))

    def decode(self, data: bytes, config: JSONCodec) -> Result:
        try:
            result = config.loads(data.decode("utf-8"))
        except Exception as err:
            logger.debug("JSON decoder failed: %s", type(err).__name__)
            return Err(DecodeError("payload cannot be decoded"))
        if isinstance(result, Exception):
            return Err(DecodeError("payload cannot be decoded"))
        return Ok(result)
