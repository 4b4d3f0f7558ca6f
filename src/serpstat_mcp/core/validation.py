"""Declarative argument validation.

Every tool describes its accepted arguments with a JSON Schema document.
The same document is advertised during tool discovery and checked here
with ``jsonschema``, so the advertised ``required`` list and the validator
can never drift apart. ``check_schema`` vets each document when a tool is
registered.

Validation never stops at the first problem: every violation is collected
with its dotted path (``groups.0.name``) before ``ValidationError`` is
raised. Defaults declared in the schema are filled in afterwards.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import SchemaError
from jsonschema.exceptions import ValidationError as SchemaViolation

from .errors import SchemaDefinitionError, ValidationError, Violation

SUPPORTED_FORMATS: frozenset[str] = frozenset({"uri"})

FORMAT_CHECKER = FormatChecker(formats=())

_ROOT = "arguments"
_ENUM_PREVIEW = 12


@FORMAT_CHECKER.checks("uri")
def _is_uri(value: object) -> bool:
    if not isinstance(value, str):
        return True
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc)


_REASONS: dict[str, Callable[[Any, Any], str]] = {
    "minLength": lambda limit, value: f"minimum length {limit}, got {len(value)}",
    "maxLength": lambda limit, value: f"maximum length {limit}, got {len(value)}",
    "minimum": lambda limit, value: f"minimum {limit}, got {value}",
    "maximum": lambda limit, value: f"maximum {limit}, got {value}",
    "exclusiveMinimum": lambda limit, value: f"must be greater than {limit}, got {value}",
    "exclusiveMaximum": lambda limit, value: f"must be less than {limit}, got {value}",
    "minItems": lambda limit, value: f"minimum {limit} items, got {len(value)}",
    "maxItems": lambda limit, value: f"maximum {limit} items, got {len(value)}",
    "pattern": lambda pattern, _value: f"does not match pattern {pattern}",
    "uniqueItems": lambda _flag, _value: "items must be unique",
    "format": lambda name, _value: (
        "must be a valid URI including scheme" if name == "uri" else f"must be a valid {name}"
    ),
}


@dataclass(frozen=True, slots=True)
class ValidatedArguments:
    """Arguments that passed ``validate_arguments``; defaults already applied.

    Instances are produced by the validator only. Downstream code reads
    them without further defensive checks.
    """

    values: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.values[key]

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def as_params(self) -> dict[str, Any]:
        """Return a private deep copy suitable for an outbound request body."""
        return copy.deepcopy(self.values)


def validate_arguments(schema: Mapping[str, Any], raw: Any) -> ValidatedArguments:
    """Check ``raw`` against ``schema`` and return the validated arguments."""

    if raw is None:
        raw = {}
    violations = check_value(schema, raw)
    if violations:
        raise ValidationError(violations)
    values = copy.deepcopy(raw)
    _apply_defaults(schema, values)
    return ValidatedArguments(values=values)


def check_value(schema: Mapping[str, Any], value: Any) -> list[Violation]:
    """Return every violation of ``value`` against ``schema`` without raising."""

    validator = Draft202012Validator(schema, format_checker=FORMAT_CHECKER)
    return _violations(validator.iter_errors(value))


def required_fields(schema: Mapping[str, Any]) -> list[str]:
    return list(schema.get("required", []))


def check_schema(schema: Any, path: str = "") -> None:
    """Raise ``SchemaDefinitionError`` if ``schema`` cannot be used for a tool."""

    if not isinstance(schema, Mapping):
        raise SchemaDefinitionError(f"{path or '<root>'}: schema must be an object")
    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as exc:
        location = _join(path, ".".join(str(part) for part in exc.absolute_path))
        raise SchemaDefinitionError(f"{location or '<root>'}: {exc.message}") from exc
    for location, sub_schema in _subschemas(schema, path):
        _check_declarations(sub_schema, location or "<root>")


def _check_declarations(schema: Mapping[str, Any], where: str) -> None:
    properties = schema.get("properties", {})
    missing = [name for name in schema.get("required", []) if name not in properties]
    if missing:
        raise SchemaDefinitionError(f"{where}: required field(s) {missing} are not declared")
    if "format" in schema and schema["format"] not in SUPPORTED_FORMATS:
        raise SchemaDefinitionError(f"{where}: unsupported format '{schema['format']}'")
    if "enum" in schema and not schema["enum"]:
        raise SchemaDefinitionError(f"{where}: enum must be a non-empty list")
    if "default" in schema:
        problems = check_value({k: v for k, v in schema.items() if k != "default"}, schema["default"])
        if problems:
            raise SchemaDefinitionError(f"{where}: default does not satisfy its own schema ({problems[0].reason})")


def _subschemas(schema: Any, path: str) -> Iterator[tuple[str, Mapping[str, Any]]]:
    if not isinstance(schema, Mapping):
        return
    yield path, schema
    for name, sub_schema in schema.get("properties", {}).items():
        yield from _subschemas(sub_schema, _join(path, name))
    additional = schema.get("additionalProperties")
    if isinstance(additional, Mapping):
        yield from _subschemas(additional, _join(path, "*"))
    items = schema.get("items")
    if isinstance(items, Mapping):
        yield from _subschemas(items, _join(path, "items"))


def _violations(errors: Iterable[SchemaViolation]) -> list[Violation]:
    found: dict[Violation, None] = {}
    for error in errors:
        base = ".".join(str(part) for part in error.absolute_path)
        for name, reason in _describe(error):
            found[Violation(_join(base, name) or _ROOT, reason)] = None
    return list(found)


def _describe(error: SchemaViolation) -> Iterator[tuple[str, str]]:
    keyword = error.validator
    limit = error.validator_value
    instance = error.instance
    if keyword == "required":
        for name in limit:
            if name not in instance:
                yield name, "is required"
    elif keyword == "additionalProperties":
        declared = error.schema.get("properties", {})
        for name in instance:
            if name not in declared:
                yield str(name), "unknown field"
    elif keyword == "type":
        yield "", _describe_expected(error.schema)
    elif keyword == "enum":
        yield "", _describe_enum(limit)
    elif keyword in _REASONS:
        yield "", _REASONS[keyword](limit, instance)
    else:
        yield "", error.message


def _apply_defaults(schema: Mapping[str, Any], value: Any) -> None:
    if isinstance(value, dict):
        for name, sub_schema in schema.get("properties", {}).items():
            if name in value:
                _apply_defaults(sub_schema, value[name])
            elif "default" in sub_schema:
                value[name] = copy.deepcopy(sub_schema["default"])
    elif isinstance(value, list) and isinstance(schema.get("items"), Mapping):
        for item in value:
            _apply_defaults(schema["items"], item)


def _describe_expected(schema: Mapping[str, Any]) -> str:
    declared = schema.get("type", [])
    types = [declared] if isinstance(declared, str) else list(declared)
    parts = [f"expected {' or '.join(types)}"]
    if "minLength" in schema:
        parts.append(f"minimum length {schema['minLength']}")
    if "maxLength" in schema:
        parts.append(f"maximum length {schema['maxLength']}")
    if "minimum" in schema:
        parts.append(f"minimum {schema['minimum']}")
    if "maximum" in schema:
        parts.append(f"maximum {schema['maximum']}")
    if "minItems" in schema:
        parts.append(f"minimum {schema['minItems']} items")
    return ", ".join(parts)


def _describe_enum(allowed: list[Any] | tuple[Any, ...]) -> str:
    shown = ", ".join(str(item) for item in allowed[:_ENUM_PREVIEW])
    if len(allowed) > _ENUM_PREVIEW:
        shown = f"{shown}, ... ({len(allowed)} allowed values)"
    return f"must be one of: {shown}"


def _join(path: str, name: str) -> str:
    if not name:
        return path
    return f"{path}.{name}" if path else name


__all__ = [
    "FORMAT_CHECKER",
    "ValidatedArguments",
    "check_schema",
    "check_value",
    "required_fields",
    "validate_arguments",
]
