"""Store configuration entity."""

import codecs
from dataclasses import dataclass


@dataclass
class StoreConfig:
    """Store configuration.

    Marshalling Mode:
        When marshalling=True (the default), values are passed through the
        store's serializer on write and read unless a call asks for raw
        access.

    Raw Mode:
        When marshalling=False, every call behaves as if ``raw=True`` was
        given: values are written as their byte/string form and read back
        as stored bytes.
    """

    marshalling: bool = True
    encoding: str = "utf-8"  # Used to turn raw str values into bytes

    def __post_init__(self) -> None:
        """Validate the configured encoding."""
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {self.encoding!r}") from e
