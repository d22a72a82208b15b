"""Input validation utilities for TikTok API tool parameters."""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..constants import AMBIENT_IDENTIFIERS, DATE_FORMAT, DATETIME_FORMAT
from ..exceptions import ValidationError

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")

_TYPE_NAMES = {
    "string": "a string",
    "number": "a number",
    "integer": "an integer",
    "boolean": "a boolean",
    "array": "an array",
    "object": "an object",
}


@dataclass(frozen=True)
class FieldSpec:
    """Declarative constraints for one tool argument."""

    name: str
    type: str = "string"
    required: bool = False
    default: Any = None
    enum: Optional[Sequence[str]] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    format: Optional[str] = None  # "date" or "datetime"
    items: Optional[str] = None
    item_fields: Optional[Sequence["FieldSpec"]] = None
    ambient: bool = False
    description: str = ""


def validate_date(value: str) -> bool:
    """Validate a ``YYYY-MM-DD`` calendar date.

    Args:
        value: Date string to validate

    Returns:
        True if the string matches the pattern and names a real date
    """
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, DATE_FORMAT)
        return True
    except ValueError:
        return False


def validate_datetime(value: str) -> bool:
    """Validate a ``YYYY-MM-DD HH:MM:SS`` timestamp."""
    if not isinstance(value, str) or not DATETIME_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, DATETIME_FORMAT)
        return True
    except ValueError:
        return False


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid number argument
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _check_type(value: Any, type_name: str) -> bool:
    if type_name == "string":
        return isinstance(value, str)
    if type_name == "number":
        return is_number(value)
    if type_name == "integer":
        return is_integer(value)
    if type_name == "boolean":
        return isinstance(value, bool)
    if type_name == "array":
        return isinstance(value, (list, tuple))
    if type_name == "object":
        return isinstance(value, Mapping)
    raise ValueError(f"Unsupported field type: {type_name}")


def _check_value(spec: FieldSpec, value: Any, path: str, errors: list[tuple[str, str]]) -> Any:
    """Check one present value against its spec, appending violations to ``errors``.

    Returns the normalized value (integers coerced from integral floats,
    arrays converted to lists).
    """
    if not _check_type(value, spec.type):
        errors.append((path, f"Expected {_TYPE_NAMES[spec.type]}, received {type(value).__name__}"))
        return value

    if spec.type == "integer":
        value = int(value)

    if spec.type in ("number", "integer"):
        if spec.minimum is not None and value < spec.minimum:
            errors.append((path, f"Must be greater than or equal to {spec.minimum:g}"))
        if spec.maximum is not None and value > spec.maximum:
            errors.append((path, f"Must be less than or equal to {spec.maximum:g}"))
        if spec.exclusive_minimum is not None and value <= spec.exclusive_minimum:
            errors.append((path, f"Must be greater than {spec.exclusive_minimum:g}"))

    if spec.type == "string":
        if spec.min_length is not None and len(value) < spec.min_length:
            if spec.min_length == 1:
                errors.append((path, "Must not be empty"))
            else:
                errors.append((path, f"Must be at least {spec.min_length} characters"))
        if spec.max_length is not None and len(value) > spec.max_length:
            errors.append((path, f"Must be at most {spec.max_length} characters"))
        if spec.enum is not None and value not in spec.enum:
            errors.append((path, f"Invalid value {value!r}. Expected one of: {', '.join(spec.enum)}"))
        if spec.format == "date" and not validate_date(value):
            errors.append((path, "Invalid date, expected YYYY-MM-DD"))
        if spec.format == "datetime" and not validate_datetime(value):
            errors.append((path, "Invalid datetime, expected YYYY-MM-DD HH:MM:SS"))

    if spec.type == "array":
        value = list(value)
        if spec.min_length is not None and len(value) < spec.min_length:
            errors.append((path, f"Must contain at least {spec.min_length} item(s)"))
        if spec.max_length is not None and len(value) > spec.max_length:
            errors.append((path, f"Must contain at most {spec.max_length} item(s)"))
        if spec.item_fields is not None:
            value = [
                _validate_object(spec.item_fields, item, f"{path}[{idx}]", errors, {})
                for idx, item in enumerate(value)
            ]
        elif spec.items is not None:
            item_spec = FieldSpec(name=spec.name, type=spec.items, enum=spec.enum)
            value = [_check_value(item_spec, item, f"{path}[{idx}]", errors) for idx, item in enumerate(value)]

    if spec.type == "object":
        value = dict(value)

    return value


def _validate_object(
    fields: Sequence[FieldSpec],
    raw: Any,
    prefix: str,
    errors: list[tuple[str, str]],
    ambient: Mapping[str, str],
) -> dict[str, Any]:
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        errors.append((prefix or "arguments", f"Expected an object, received {type(raw).__name__}"))
        return {}

    normalized: dict[str, Any] = {}
    for spec in fields:
        path = f"{prefix}.{spec.name}" if prefix else spec.name
        value = raw.get(spec.name)

        if value is None and spec.ambient:
            value = ambient.get(spec.name)
            if value is None:
                env_name = AMBIENT_IDENTIFIERS.get(spec.name)
                hint = f" Set {env_name} environment variable or provide {spec.name} parameter." if env_name else ""
                errors.append((path, f"{spec.name} is required.{hint}"))
                continue

        if value is None:
            if spec.required:
                errors.append((path, "Required"))
            elif spec.default is not None:
                normalized[spec.name] = spec.default
            continue

        normalized[spec.name] = _check_value(spec, value, path, errors)

    return normalized


def validate_arguments(
    fields: Sequence[FieldSpec],
    raw: Any,
    ambient: Optional[Mapping[str, str]] = None,
) -> dict[str, Any]:
    """Validate and normalize raw tool arguments.

    Args:
        fields: Field specs for the tool
        raw: Arguments as received from the caller (``None`` means no arguments)
        ambient: Startup configuration used for absent identifier fields

    Returns:
        Normalized arguments: defaults applied, ambient identifiers filled in,
        unknown keys dropped

    Raises:
        ValidationError: Listing every violated field
    """
    errors: list[tuple[str, str]] = []
    normalized = _validate_object(fields, raw, "", errors, ambient or {})
    if errors:
        raise ValidationError(errors)
    return normalized
