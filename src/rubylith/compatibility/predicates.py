"""
Boundary shape checks for loosely typed input.

Two levels are offered for data that arrives as plain mappings (an HTTP
body, a YAML document):

- ``is_component`` / ``is_contract`` / ``is_environment`` /
  ``is_capability``: cheap structural predicates.  They test that the
  required keys are present and that version strings parse, nothing
  more.  Keys may be snake_case or camelCase.
- ``validate_*`` / ``safe_validate_*``: full model validation.  The
  ``validate_*`` functions raise pydantic ``ValidationError``; the safe
  variants return a ``ValidationResult`` instead.

The checkers never call these; they expect validated records.

Usage::

    from rubylith.compatibility.predicates import safe_validate_component

    outcome = safe_validate_component(body)
    if not outcome.success:
        return {"errors": [e.model_dump() for e in outcome.errors]}
    component = outcome.data
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rubylith.compatibility.schema import Capability, Component, Contract, Environment
from rubylith.versioning.ranges import is_valid_version_range
from rubylith.versioning.semver import is_valid_version

M = TypeVar("M", bound=BaseModel)


# ---------------------------------------------------------------------------
# Structural predicates
# ---------------------------------------------------------------------------


def _get(data: Mapping[str, Any], *keys: str) -> tuple[bool, Any]:
    for key in keys:
        if key in data:
            return True, data[key]
    return False, None


def _has(data: Mapping[str, Any], *keys: str) -> bool:
    return _get(data, *keys)[0]


def is_component(value: object) -> bool:
    if isinstance(value, Component):
        return True
    if not isinstance(value, Mapping):
        return False
    return (
        all(_has(value, key) for key in ("name", "version", "type", "lifecycle", "contract"))
        and isinstance(value["name"], str)
        and is_valid_version(value["version"])
    )


def is_contract(value: object) -> bool:
    if isinstance(value, Contract):
        return True
    if not isinstance(value, Mapping):
        return False
    found, schema_version = _get(value, "schemaVersion", "schema_version")
    return (
        found
        and all(_has(value, key) for key in ("name", "version", "runtime", "compatibility"))
        and isinstance(value["name"], str)
        and is_valid_version(value["version"])
        and is_valid_version(schema_version)
    )


def is_environment(value: object) -> bool:
    if isinstance(value, Environment):
        return True
    if not isinstance(value, Mapping):
        return False
    return (
        all(_has(value, key) for key in ("id", "name", "capabilities"))
        and isinstance(value["id"], str)
        and isinstance(value["name"], str)
        and isinstance(value["capabilities"], list)
    )


def is_capability(value: object) -> bool:
    if isinstance(value, Capability):
        return True
    if not isinstance(value, Mapping):
        return False
    return (
        all(_has(value, key) for key in ("id", "name", "type", "version"))
        and isinstance(value["id"], str)
        and isinstance(value["name"], str)
        and is_valid_version(value["version"])
    )


def is_valid_version_range_format(value: object) -> bool:
    """Return whether *value* is a parseable version range."""
    return is_valid_version_range(value)


# ---------------------------------------------------------------------------
# Full validation
# ---------------------------------------------------------------------------


class ValidationErrorDetail(BaseModel):
    """One validation failure, located by dotted field path."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    field: str
    message: str


class ValidationResult(BaseModel, Generic[M]):
    """Outcome of ``safe_validate_*``: ``data`` on success, ``errors`` otherwise."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool
    data: Optional[M] = None
    errors: list[ValidationErrorDetail] = Field(default_factory=list)


def _details(exc: ValidationError) -> list[ValidationErrorDetail]:
    return [
        ValidationErrorDetail(
            field=".".join(str(part) for part in err["loc"]) or "<root>",
            message=err["msg"],
        )
        for err in exc.errors()
    ]


def _safe(model: type[M], data: Any) -> ValidationResult[M]:
    try:
        parsed = model.model_validate(data)
    except ValidationError as exc:
        return ValidationResult[model](success=False, errors=_details(exc))
    return ValidationResult[model](success=True, data=parsed)


def validate_component(data: Any) -> Component:
    return Component.model_validate(data)


def validate_contract(data: Any) -> Contract:
    return Contract.model_validate(data)


def validate_environment(data: Any) -> Environment:
    return Environment.model_validate(data)


def validate_capability(data: Any) -> Capability:
    return Capability.model_validate(data)


def safe_validate_component(data: Any) -> ValidationResult[Component]:
    return _safe(Component, data)


def safe_validate_contract(data: Any) -> ValidationResult[Contract]:
    return _safe(Contract, data)


def safe_validate_environment(data: Any) -> ValidationResult[Environment]:
    return _safe(Environment, data)


def safe_validate_capability(data: Any) -> ValidationResult[Capability]:
    return _safe(Capability, data)
