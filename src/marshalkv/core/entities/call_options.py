"""Per-call options value object."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from marshalkv.exceptions import OptionsError

# Option names meaning "expire this key N seconds from now", in priority
# order. Each comes from a different calling convention.
TTL_ALIASES: tuple[str, ...] = (
    "expire_after",  # Rack
    "expires_in",  # Merb
    "expire_in",  # Rails
)

RAW_OPTION = "raw"


def coerce_ttl(value: Any) -> timedelta:
    """Convert a TTL option value to a timedelta.

    Args:
        value: Seconds as int/float, or a timedelta.

    Returns:
        The TTL as a timedelta.

    Raises:
        OptionsError: If the value is not a positive duration.
    """
    if isinstance(value, timedelta):
        ttl = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        ttl = timedelta(seconds=value)
    else:
        raise OptionsError(
            f"TTL must be seconds or a timedelta, got {type(value).__name__}"
        )

    if ttl.total_seconds() <= 0:
        raise OptionsError(f"TTL must be positive, got {ttl.total_seconds()}s")
    return ttl


def coerce_raw(value: Any) -> bool:
    """Validate the raw flag; None means not given.

    Raises:
        OptionsError: If the value is not a bool.
    """
    if value is None:
        return False
    if not isinstance(value, bool):
        raise OptionsError(f"raw must be a bool, got {type(value).__name__}")
    return value


def normalize_ttl(options: Mapping[str, Any]) -> timedelta | None:
    """Pick the effective TTL out of an options mapping.

    The first alias from TTL_ALIASES with a non-None value wins; the
    others are ignored.

    Args:
        options: Raw call options.

    Returns:
        The TTL, or None when no alias is present (permanent write).
    """
    for alias in TTL_ALIASES:
        value = options.get(alias)
        if value is not None:
            return coerce_ttl(value)
    return None


@dataclass(frozen=True)
class CallOptions:
    """Immutable options for a single store call.

    Built fresh for every call and discarded afterwards.
    """

    raw: bool = False
    ttl: timedelta | None = None

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "CallOptions":
        """Build options from a loosely-typed mapping.

        Recognizes ``raw`` and the TTL aliases; any other key is ignored.

        Args:
            options: Mapping of option names to values.

        Returns:
            A new CallOptions instance.
        """
        return cls(
            raw=coerce_raw(options.get(RAW_OPTION)),
            ttl=normalize_ttl(options),
        )

    @classmethod
    def resolve(
        cls,
        options: "CallOptions | Mapping[str, Any] | None" = None,
        **kwargs: Any,
    ) -> "CallOptions":
        """Build options from whatever a caller passed.

        Args:
            options: An existing CallOptions, a mapping, or None.
            **kwargs: Keyword options; they take precedence over ``options``.

        Returns:
            The effective CallOptions.
        """
        if isinstance(options, CallOptions):
            if not kwargs:
                return options
            base: dict[str, Any] = {RAW_OPTION: options.raw}
            if options.ttl is not None:
                base[TTL_ALIASES[0]] = options.ttl
        else:
            base = dict(options or {})

        if kwargs:
            if any(alias in kwargs for alias in TTL_ALIASES):
                # A TTL given as keyword replaces any TTL from the mapping
                for alias in TTL_ALIASES:
                    base.pop(alias, None)
            base.update(kwargs)

        return cls.from_mapping(base)
