"""Serializer interface."""

from typing import Any, Protocol


class ISerializer(Protocol):
    """Contract for serializing/deserializing stored values.

    Serializers handle the conversion between Python objects
    and bytes for storage in key-value backends. A serializer
    must round-trip every value it accepts, including the empty
    string and bytes outside the text-safe range.
    """

    def serialize(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Args:
            value: The Python object to serialize.

        Returns:
            The serialized value as bytes.

        Raises:
            EncodeError: If the value cannot be serialized.
        """
        ...

    def deserialize(self, data: bytes) -> Any:
        """Deserialize bytes to value.

        Args:
            data: The bytes to deserialize.

        Returns:
            The deserialized Python object.

        Raises:
            DecodeError: If the data was not produced by this serializer.
        """
        ...
