"""jsonpickle serializer, able to restore typed session models."""
import logging
from typing import Any

import jsonpickle
from jsonpickle.unpickler import loadclass
from datamodel import BaseModel
from pydantic import BaseModel as PydanticBaseModel

from ..exceptions import DecodeError, EncodeError
from ..result import Err, Ok, Result
from .base import Serializer

logger = logging.getLogger("navigator.cookie")


class ModelHandler(jsonpickle.handlers.BaseHandler):
    """ModelHandler.
    Flattens Data Models (and pydantic models) through their __dict__.
    """
    def flatten(self, obj, data):
        data['__dict__'] = self.context.flatten(obj.__dict__, reset=False)
        return data

    def restore(self, obj):
        module_and_type = obj['py/object']
        mdl = loadclass(module_and_type)
        cls = mdl.__new__(mdl) if hasattr(mdl, '__new__') else object.__new__(mdl)
        cls.__dict__ = self.context.restore(obj['__dict__'], reset=False)
        return cls


class PydanticHandler(ModelHandler):
    """PydanticHandler.
    Restores pydantic models, whose private state lives beside __dict__.
    """
    def restore(self, obj):
        module_and_type = obj['py/object']
        mdl = loadclass(module_and_type)
        values = self.context.restore(obj['__dict__'], reset=False)
        return mdl.model_construct(**values)


jsonpickle.handlers.registry.register(BaseModel, ModelHandler, base=True)
jsonpickle.handlers.registry.register(PydanticBaseModel, PydanticHandler, base=True)


class JsonPickleSerializer(Serializer):
    """Serializes values with jsonpickle.

    Unlike plain JSON, dict keys keep their type and registered models
    come back as instances of their class.
    """

    name = "jsonpickle"

    def init(self, options):
        return None

    def encode(self, value: Any, config: Any) -> Result:
        try:
            return Ok(jsonpickle.encode(value, keys=True).encode("utf-8"))
        except Exception as err:
            logger.debug("jsonpickle cannot encode value: %s", type(err).__name__)
            return Err(EncodeError("value cannot be encoded"))

    def decode(self, data: bytes, config: Any) -> Result:
        try:
            return Ok(jsonpickle.decode(data.decode("utf-8"), keys=True))
        except Exception as err:
            logger.debug("jsonpickle cannot decode payload: %s", type(err).__name__)
            return Err(DecodeError("payload cannot be decoded"))
