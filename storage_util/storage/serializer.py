from typing import Any, Protocol
import dataclasses
import pickle
import json
import yaml
from pydantic import BaseModel


class Serializer(Protocol):
    """Serialize/deserialize Python values for backends that store bytes/text.

    Implementations should be symmetric: `dump` -> bytes, `load` <- bytes.
    `extension` is appended to file names by file-based backends.
    """

    extension: str

    def dump(self, value: Any) -> bytes: ...

    def load(self, data: bytes) -> Any: ...


def _plain(o: Any) -> Any:
    if isinstance(o, BaseModel):
        return o.model_dump(mode="json")
    if dataclasses.is_dataclass(o) and not isinstance(o, type):
        return dataclasses.asdict(o)
    return o.__dict__


class PickleSerializer:
    """Default serializer using pickle (binary).

    This is a practical default since stored values may be arbitrary Python
    objects. Consumers can choose `JSONSerializer` when interoperable text
    is desired.
    """

    extension = ".pkl"

    def dump(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)

    def load(self, data: bytes) -> Any:
        return pickle.loads(data)


class JSONSerializer:
    """Serializer using JSON (text).

    Pydantic models and dataclasses are stored as plain objects; pass the model
    class as `value_type` when loading to get an instance back.
    """

    extension = ".json"

    def dump(self, value: Any) -> bytes:
        return json.dumps(value, default=_plain).encode("utf-8")

    def load(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))


class YAMLSerializer:
    """Serializer using YAML (text). Caller must ensure values are YAML-serializable."""

    extension = ".yml"

    def dump(self, value: Any) -> bytes:
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
        return yaml.safe_dump(value).encode("utf-8")

    def load(self, data: bytes) -> Any:
        return yaml.safe_load(data.decode("utf-8"))


SERIALIZERS = {
    "pickle": PickleSerializer,
    "json": JSONSerializer,
    "yaml": YAMLSerializer,
}


def get_serializer(name: str) -> Serializer:
    try:
        return SERIALIZERS[name]()
    except KeyError:
        raise ValueError(f"Unknown serializer {name!r}; expected one of {sorted(SERIALIZERS)}") from None
