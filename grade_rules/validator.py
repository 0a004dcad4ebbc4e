"""Validation of raw records against entity schemas."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .messages import ERROR_MESSAGES, TYPE_MESSAGES, ErrorKind
from .rules import FieldRule, Issue
from .schemas import Schema, get_schema

ROOT_PATH = ""


@dataclass(frozen=True)
class Accepted:
    data: dict[str, Any]

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "data": self.data}


@dataclass(frozen=True)
class Rejected:
    errors: dict[str, str]
    kinds: dict[str, ErrorKind] = field(default_factory=dict, compare=False)

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "errors": self.errors}

    def issues(self) -> list[dict[str, str]]:
        """
        Flatten the error map into a list of issues.

        Returns:
            List of dicts with 'field', 'kind', and 'message'.
        """
        return [
            {
                "field": path,
                "kind": self.kinds[path].value if path in self.kinds else "",
                "message": message,
            }
            for path, message in self.errors.items()
        ]


Result = Accepted | Rejected


def _join(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def _walk(
    schema: Schema,
    data: Any,
    prefix: str,
    errors: dict[str, Issue],
) -> dict[str, Any] | None:
    if not isinstance(data, Mapping):
        errors[prefix] = Issue(ErrorKind.MALFORMED_SHAPE, TYPE_MESSAGES["object"])
        return None

    output: dict[str, Any] = {}
    for name, node in schema.fields.items():
        path = _join(prefix, name)
        value = data.get(name)

        if isinstance(node, Schema):
            if value is None:
                errors[path] = Issue(ErrorKind.MISSING_REQUIRED_FIELD, ERROR_MESSAGES["required"])
                continue
            nested = _walk(node, value, path, errors)
            if nested is not None:
                output[name] = nested
            continue

        if value is None:
            if node.has_default:
                output[name] = node.default
            elif not node.optional:
                errors[path] = Issue(ErrorKind.MISSING_REQUIRED_FIELD, ERROR_MESSAGES["required"])
            continue

        issue = node.check(value)
        if issue is not None:
            errors[path] = issue
        else:
            output[name] = value

    return output


def validate(schema: Schema, data: Any) -> Result:
    """
    Validate a raw record against a schema.

    Every failing field path is reported with a single message; the walk
    does not stop at the first invalid field. Keys the schema does not
    declare are ignored and left out of the accepted data.

    Args:
        schema: Entity schema to validate against
        data: Untrusted input, typically parsed JSON or form state

    Returns:
        Accepted with the normalized record, or Rejected mapping each
        failing field path to its message.
    """
    errors: dict[str, Issue] = {}
    output = _walk(schema, data, ROOT_PATH, errors)

    if errors:
        return Rejected(
            errors={path: issue.message for path, issue in errors.items()},
            kinds={path: issue.kind for path, issue in errors.items()},
        )
    return Accepted(data=output)


def validate_entity(entity: str, data: Any) -> Result:
    """Validate `data` against the registered schema named `entity`."""
    return validate(get_schema(entity), data)


def validate_field(rule: FieldRule, value: Any) -> str | None:
    """
    Validate a single form value against a rule.

    Returns:
        The error message, or None when the value is acceptable.
    """
    if value is None:
        return None if rule.optional else ERROR_MESSAGES["required"]
    issue = rule.check(value)
    return issue.message if issue else None
