"""JSON serializer implementation."""

import base64
import json
from datetime import date, datetime
from typing import Any

from marshalkv.exceptions import DecodeError, EncodeError

# Single-key objects with one of these names are codec tags, never user data
_TAGS = frozenset({"__bytes__", "__datetime__", "__date__", "__dict__"})


class JsonSerializer:
    """JSON serializer for stored values.

    Handles serialization of Python objects to JSON bytes and
    deserialization back to Python objects. Types JSON lacks are
    written as single-key tagged objects and restored on read:

        bytes     -> {"__bytes__": "<base64>"}
        datetime  -> {"__datetime__": "<isoformat>"}
        date      -> {"__date__": "<isoformat>"}

    A user dict that would look like a tag (one key, named like a tag)
    is written as {"__dict__": [[key, value]]} and unwrapped on read.

    Other objects with a ``__dict__`` are written as their attribute
    dict and come back as a plain dict.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the JSON serializer.

        Args:
            encoding: Character encoding to use.
        """
        self._encoding = encoding

    def serialize(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Args:
            value: The Python object to serialize.

        Returns:
            The serialized value as bytes.

        Raises:
            EncodeError: If the value cannot be serialized.
        """
        try:
            json_str = json.dumps(self._escape(value), default=self._default_encoder)
            return json_str.encode(self._encoding)
        except (TypeError, ValueError, RecursionError) as e:
            raise EncodeError(f"Failed to serialize value: {e}") from e

    def deserialize(self, data: bytes) -> Any:
        """Deserialize bytes to value.

        Args:
            data: The bytes to deserialize.

        Returns:
            The deserialized Python object.

        Raises:
            DecodeError: If the data cannot be deserialized.
        """
        try:
            json_str = data.decode(self._encoding)
            return json.loads(json_str, object_hook=self._object_hook)
        except (ValueError, TypeError) as e:
            # JSONDecodeError, UnicodeDecodeError and bad base64 are all ValueErrors
            raise DecodeError(f"Failed to deserialize data: {e}") from e

    def _escape(self, value: Any) -> Any:
        """Wrap user dicts that collide with a tag name, recursively."""
        if isinstance(value, dict):
            escaped = {k: self._escape(v) for k, v in value.items()}
            if len(escaped) == 1:
                (key, item), = escaped.items()
                if key in _TAGS:
                    return {"__dict__": [[key, item]]}
            return escaped
        if isinstance(value, (list, tuple)):
            return [self._escape(item) for item in value]
        return value

    def _default_encoder(self, obj: Any) -> Any:
        """Custom encoder for non-JSON-serializable types.

        Args:
            obj: The object to encode.

        Returns:
            A JSON-serializable representation of the object.

        Raises:
            TypeError: If the object cannot be encoded.
        """
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return {"__bytes__": base64.b64encode(bytes(obj)).decode("ascii")}
        if isinstance(obj, datetime):
            return {"__datetime__": obj.isoformat()}
        if isinstance(obj, date):
            return {"__date__": obj.isoformat()}
        if hasattr(obj, "__dict__"):
            return self._escape(dict(vars(obj)))
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

    def _object_hook(self, obj: dict[str, Any]) -> Any:
        """Restore tagged objects written by serialize()."""
        if len(obj) != 1:
            return obj
        if "__dict__" in obj:
            return {key: item for key, item in obj["__dict__"]}
        if "__bytes__" in obj:
            return base64.b64decode(obj["__bytes__"], validate=True)
        if "__datetime__" in obj:
            return datetime.fromisoformat(obj["__datetime__"])
        if "__date__" in obj:
            return date.fromisoformat(obj["__date__"])
        return obj
