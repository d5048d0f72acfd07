"""Pickle serializer implementation."""

import pickle
from typing import Any

from marshalkv.exceptions import DecodeError, EncodeError


class PickleSerializer:
    """Serializer using pickle, Python's native object marshalling.

    Supports arbitrary picklable objects (namespaces, dataclasses,
    bytes, nested containers) with exact round-trip equality.

    Unpickling can execute arbitrary code. Only use this serializer
    against a store that untrusted parties cannot write to; use
    JsonSerializer otherwise.
    """

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        """Initialize the pickle serializer.

        Args:
            protocol: Pickle protocol version used when writing.
        """
        if not 0 <= protocol <= pickle.HIGHEST_PROTOCOL:
            raise ValueError(f"Unsupported pickle protocol: {protocol}")
        self._protocol = protocol

    @property
    def protocol(self) -> int:
        """Return the pickle protocol used when writing."""
        return self._protocol

    def serialize(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Args:
            value: The Python object to serialize.

        Returns:
            The pickled value.

        Raises:
            EncodeError: If the value cannot be pickled.
        """
        try:
            return pickle.dumps(value, protocol=self._protocol)
        except (pickle.PicklingError, TypeError, AttributeError, RecursionError) as e:
            raise EncodeError(f"Failed to serialize value: {e}") from e

    def deserialize(self, data: bytes) -> Any:
        """Deserialize bytes to value.

        Args:
            data: Bytes produced by serialize().

        Returns:
            The unpickled value.

        Raises:
            DecodeError: If the data is not a valid pickle.
        """
        try:
            return pickle.loads(data)
        except Exception as e:
            # Malformed pickles surface as many exception types
            # (UnpicklingError, EOFError, ValueError, KeyError, ...)
            raise DecodeError(f"Failed to deserialize data: {e}") from e
