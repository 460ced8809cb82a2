"""Type-safe field parsing helpers for configuration loading.

This module centralizes primitive parsing so the config loader can stay
concise and produce consistent validation errors for every check kind.
"""

from __future__ import annotations

from typing import AbstractSet, Mapping, Sequence

from core.errors import PrevetConfigError


def expect_mapping(value: object, context: str) -> Mapping[str, object]:
    """Validate a YAML object mapping with string keys."""
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise PrevetConfigError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise PrevetConfigError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def optional_mapping(value: object, context: str) -> Mapping[str, object]:
    """Validate a mapping where YAML ``null`` stands for an empty object."""
    if value is None:
        return {}
    return expect_mapping(value, context)


def expect_sequence(value: object, context: str) -> Sequence[object]:
    """Validate a YAML list."""
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise PrevetConfigError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def reject_unknown_keys(
    mapping: Mapping[str, object],
    allowed_keys: AbstractSet[str],
    context: str,
) -> None:
    """Fail when a mapping carries fields outside the schema."""
    unknown_keys = sorted(set(mapping) - set(allowed_keys))
    if unknown_keys:
        raise PrevetConfigError(f"{context} contains unknown fields: {', '.join(unknown_keys)}.")


def required_string(args: Mapping[str, object], field_name: str, context: str) -> str:
    """Read a required non-empty string field."""
    value = optional_string(args, field_name, context)
    if value is None:
        raise PrevetConfigError(f"{context} is missing required field '{field_name}'.")
    return value


def optional_string(args: Mapping[str, object], field_name: str, context: str) -> str | None:
    """Read an optional string field."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    raise PrevetConfigError(f"{context} field '{field_name}' must be a string when provided.")


def string_tuple(args: Mapping[str, object], field_name: str, context: str) -> tuple[str, ...]:
    """Read an optional list of strings, keeping order."""
    value = args.get(field_name)
    if value is None:
        return ()
    rows = expect_sequence(value, f"{context} field '{field_name}'")
    parsed: list[str] = []
    for row in rows:
        if not isinstance(row, str):
            raise PrevetConfigError(
                f"{context} field '{field_name}' must only contain strings, "
                f"got {type(row).__name__}."
            )
        parsed.append(row)
    return tuple(parsed)


def optional_bool(args: Mapping[str, object], field_name: str, context: str) -> bool:
    """Read a boolean field that defaults to False."""
    value = args.get(field_name)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise PrevetConfigError(f"{context} field '{field_name}' must be true/false.")


def int_with_default(
    args: Mapping[str, object],
    field_name: str,
    default_value: int,
    context: str,
) -> int:
    """Read an integer field while preserving explicit zero values."""
    value = args.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, bool) or not isinstance(value, int):
        raise PrevetConfigError(f"{context} field '{field_name}' must be an integer.")
    return value


def float_with_default(
    args: Mapping[str, object],
    field_name: str,
    default_value: float,
    context: str,
) -> float:
    """Read a numeric field while preserving explicit zero values."""
    value = args.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PrevetConfigError(f"{context} field '{field_name}' must be numeric.")
    return float(value)
