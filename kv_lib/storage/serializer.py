from typing import Any, Mapping, Protocol
import json

import bson
from bson.errors import InvalidBSON, InvalidDocument

from kv_lib.errors import DeserializationError, SerializationError


class Serializer(Protocol):
    """Serialize/deserialize the key-value mapping for file backends.

    Implementations should be symmetric: `dump` -> bytes, `load` <- bytes.
    Codec failures are reported as `SerializationError` and
    `DeserializationError`, never as the codec library's own exceptions.
    """

    name: str

    def dump(self, mapping: Mapping[str, str]) -> bytes: ...

    def load(self, data: bytes) -> Any: ...


class JSONSerializer:
    """Serializer using a JSON object (text, UTF-8)."""

    name = "json"

    def dump(self, mapping: Mapping[str, str]) -> bytes:
        try:
            return json.dumps(dict(mapping), ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError("Failed to write JSON data") from e

    def load(self, data: bytes) -> Any:
        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            # JSONDecodeError is a ValueError; so are oversized integer literals
            raise DeserializationError("Failed to read JSON data") from e


class BSONSerializer:
    """Serializer using a single BSON document (binary).

    Uses the `bson` package shipped with pymongo. BSON keys are C strings,
    so a key containing a NUL byte cannot be encoded.
    """

    name = "bson"

    def dump(self, mapping: Mapping[str, str]) -> bytes:
        try:
            return bson.encode(dict(mapping))
        except (InvalidDocument, TypeError, ValueError) as e:
            raise SerializationError("Failed to write BSON data") from e

    def load(self, data: bytes) -> Any:
        try:
            return bson.decode(data)
        except (InvalidBSON, IndexError, ValueError) as e:
            raise DeserializationError("Failed to read BSON data") from e
