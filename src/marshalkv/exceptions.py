"""marshalkv exceptions."""


class MarshalKVError(Exception):
    """Base exception for marshalkv."""

    pass


class BackendError(MarshalKVError):
    """The underlying key-value store failed (connectivity, protocol, timeout)."""

    pass


class OptionsError(MarshalKVError, ValueError):
    """A call option carries an unusable value."""

    pass


class SerializationError(MarshalKVError):
    """Raised when serialization or deserialization fails."""

    pass


class EncodeError(SerializationError):
    """A value could not be converted to bytes."""

    pass


class DecodeError(SerializationError):
    """Stored bytes could not be converted back to a value.

    Attributes:
        key: The key whose payload failed to decode, when known.
    """

    def __init__(self, message: str, key: str | bytes | None = None) -> None:
        super().__init__(message)
        self.key = key
