"""
Value Objects

Immutable, self-validating building blocks shared by every platform.
A value object validates itself at construction, so an invalid instance
can never be obtained.
"""

import re
from dataclasses import MISSING, dataclass, fields
from datetime import datetime
from enum import Enum
from typing import (
    Any,
    ClassVar,
    Dict,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from .clock import ensure_utc, format_timestamp, parse_timestamp
from .errors import ValidationError

V = TypeVar("V", bound="ValueObject")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(key: str) -> str:
    """Convert a camelCase payload key (``videoUrl``) to ``video_url``."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def require_text(field: str, value: Any) -> None:
    """Require a non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "must be a non-empty string")


def require_optional_text(field: str, value: Any) -> None:
    """Require a string when the value is present."""
    if value is not None and not isinstance(value, str):
        raise ValidationError(field, "must be a string")


def require_non_negative(field: str, value: Any) -> None:
    """Require a non-negative integer counter."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "must be an integer")
    if value < 0:
        raise ValidationError(field, "cannot be negative")


def require_positive_int(field: str, value: Any) -> None:
    """Require a strictly positive integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "must be an integer")
    if value <= 0:
        raise ValidationError(field, "must be positive")


def require_bool(field: str, value: Any) -> None:
    """Require a real boolean; strings such as ``"false"`` are rejected."""
    if not isinstance(value, bool):
        raise ValidationError(field, "must be a boolean")


def require_positive(field: str, value: Any) -> None:
    """Require a strictly positive number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(field, "must be a number")
    if value <= 0:
        raise ValidationError(field, "must be positive")


def require_strings(field: str, values: Any) -> None:
    """Require a tuple of strings."""
    if not isinstance(values, tuple) or not all(isinstance(v, str) for v in values):
        raise ValidationError(field, "must be a list of strings")


def require_timestamp(field: str, value: Any) -> None:
    """Require a datetime."""
    if not isinstance(value, datetime):
        raise ValidationError(field, "must be a timestamp")


def _unwrap_optional(hint: Any) -> Any:
    if get_origin(hint) is Union:
        args = [arg for arg in get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _coerce(field: str, hint: Any, value: Any) -> Any:
    """Coerce a raw payload value into the type declared on the field."""
    hint = _unwrap_optional(hint)

    if hint is datetime:
        try:
            return parse_timestamp(value)
        except (TypeError, ValueError):
            raise ValidationError(field, f"must be a timestamp, got {value!r}")

    if get_origin(hint) is tuple:
        if not isinstance(value, (list, tuple)):
            raise ValidationError(field, "must be a list")
        args = get_args(hint)
        item_hint = args[0] if args else Any
        return tuple(_coerce(field, item_hint, item) for item in value)

    if isinstance(hint, type) and issubclass(hint, Enum):
        if isinstance(value, hint):
            return value
        try:
            return hint(value)
        except ValueError:
            allowed = ", ".join(str(member.value) for member in hint)
            raise ValidationError(field, f"must be one of {allowed}, got {value!r}")

    if isinstance(hint, type) and issubclass(hint, ContentId):
        if isinstance(value, hint):
            return value
        if not isinstance(value, str):
            raise ValidationError(field, "must be a non-empty string")
        try:
            return hint(value)
        except ValidationError as e:
            raise ValidationError(field, e.reason)

    if isinstance(hint, type) and issubclass(hint, ValueObject):
        if isinstance(value, hint):
            return value
        if not isinstance(value, Mapping):
            raise ValidationError(field, "must be an object")
        return hint.from_payload(value)

    return value


def serialize_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, ContentId):
        return value.value
    if isinstance(value, ValueObject):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (tuple, list)):
        return [serialize_value(item) for item in value]
    return value


@dataclass(frozen=True)
class ValueObject:
    """
    Base class for immutable value objects.

    Subclasses are frozen dataclasses. ``validate()`` runs in
    ``__post_init__``; equality is structural via the dataclass ``__eq__``.
    Datetimes are normalised to UTC and lists to tuples before validation.
    """

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                object.__setattr__(self, f.name, ensure_utc(value))
            elif isinstance(value, list):
                object.__setattr__(self, f.name, tuple(value))
        self.validate()

    def validate(self) -> None:
        """Raise ValidationError when an invariant is violated."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {f.name: serialize_value(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_payload(cls: Type[V], payload: Mapping[str, Any]) -> V:
        """
        Build an instance from a raw producer payload.

        Keys may be camelCase (as sent by the browser extension) or
        snake_case (as stored by ``to_dict``). Unknown keys are ignored.

        Raises:
            ValidationError: Naming the first missing or malformed field
        """
        if not isinstance(payload, Mapping):
            raise ValidationError(cls.__name__, "payload must be an object")

        normalized = {snake_case(str(key)): value for key, value in payload.items()}
        hints = get_type_hints(cls)
        kwargs = {}
        for f in fields(cls):
            value = normalized.get(f.name)
            if value is not None:
                kwargs[f.name] = _coerce(f.name, hints.get(f.name, Any), value)
            elif f.default is MISSING and f.default_factory is MISSING:
                raise ValidationError(f.name, "is required")
        return cls(**kwargs)


@dataclass(frozen=True)
class ContentId(ValueObject):
    """
    Platform-scoped identifier.

    Must be a non-empty string; subclasses may add a ``PATTERN`` the whole
    value has to match.
    """

    value: str

    PATTERN: ClassVar[Optional[re.Pattern]] = None

    def validate(self) -> None:
        name = type(self).__name__
        if not isinstance(self.value, str) or not self.value:
            raise ValidationError("id", f"{name} must be a non-empty string")
        if self.PATTERN is not None and not self.PATTERN.fullmatch(self.value):
            raise ValidationError("id", f"invalid {name}: {self.value!r}")

    def __str__(self) -> str:
        return self.value


def freeze_tags(values: Tuple[str, ...], tag: str) -> Tuple[str, ...]:
    """Return ``values`` with ``tag`` appended unless already present."""
    if tag in values:
        return values
    return values + (tag,)


def drop_tag(values: Tuple[str, ...], tag: str) -> Tuple[str, ...]:
    """Return ``values`` without ``tag``."""
    return tuple(v for v in values if v != tag)
