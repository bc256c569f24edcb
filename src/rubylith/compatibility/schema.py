"""
Pydantic v2 models for registry records and compatibility results.

Registry records (``Component``, ``Contract``, ``Environment``,
``Capability``) are immutable projections of what the registry stores.
They ignore keys the engine does not use, so a full record from the
API or a YAML registry file validates unchanged.  Keys may be given in
snake_case or in the camelCase used on the wire (``schemaVersion``,
``versionRange``, ...).

Version fields are validated and normalized at construction; range
fields are parsed once to reject malformed syntax.  An invalid version
or range therefore cannot exist inside a record.

Result models use ``extra="forbid"`` and ``CompatibilityResult`` enforces
``compatible == (no error-severity issue)``.

Usage::

    from rubylith.compatibility.schema import Component

    component = Component.model_validate(raw_json)
"""

from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel

from rubylith.compatibility.types import (
    CapabilityType,
    CompatibilityLevel,
    ComponentLifecycle,
    ComponentType,
    IssueCode,
    IssueSeverity,
)
from rubylith.versioning.ranges import VersionRange
from rubylith.versioning.semver import Version


def _normalize_version(value: str) -> str:
    # Registry data sometimes carries npm-style "=1.2.0"
    return str(Version.parse(value.strip().lstrip("=")))


def _check_range(value: str) -> str:
    VersionRange.parse(value)
    return value.strip()


VersionString = Annotated[str, AfterValidator(_normalize_version)]
RangeString = Annotated[str, AfterValidator(_check_range)]


class RecordModel(BaseModel):
    """Base for immutable registry records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class ResultModel(BaseModel):
    """Base for immutable engine outputs."""

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Component
# ---------------------------------------------------------------------------


class ComponentRef(RecordModel):
    """A ``{name, version}`` reference to another record."""

    name: str = Field(..., min_length=1)
    version: VersionString


class ComponentDependency(RecordModel):
    """A dependency on another component, by name and version range."""

    name: str = Field(..., min_length=1)
    version_range: RangeString
    optional: bool = False
    reason: Optional[str] = None


class ComponentProvides(RecordModel):
    name: str = Field(..., min_length=1)
    version: VersionString
    config: dict[str, Any] = Field(default_factory=dict)


class ComponentRequirement(RecordModel):
    """A capability the component needs from its environment."""

    name: str = Field(..., min_length=1)
    version_range: RangeString
    optional: bool = False
    fallback: Optional[str] = None


class Component(RecordModel):
    """A versioned, distributable UI component."""

    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    version: VersionString
    type: ComponentType
    lifecycle: ComponentLifecycle
    description: Optional[str] = None
    author: Optional[str] = None
    license: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)
    dependencies: list[ComponentDependency] = Field(default_factory=list)
    provides: list[ComponentProvides] = Field(default_factory=list)
    requires: list[ComponentRequirement] = Field(default_factory=list)
    contract: ComponentRef
    metadata: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


class RuntimeSpec(RecordModel):
    """Runtime requirements declared by a contract.

    ``framework`` is kept as a plain string so that the component/contract
    checker can report an unknown framework as an issue instead of the
    record failing to load.
    """

    framework: str = Field(..., min_length=1)
    framework_version: Optional[str] = None
    browsers: list[str] = Field(default_factory=list)
    environment: Optional[str] = None
    module_format: Optional[str] = None


class ContractCompatibility(RecordModel):
    min_schema_version: VersionString
    breaking_changes: list[str] = Field(default_factory=list)
    migration_guide: Optional[str] = None


class Contract(RecordModel):
    """The execution requirements a component declares."""

    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    version: VersionString
    schema_version: VersionString
    description: Optional[str] = None
    definition: dict[str, Any] = Field(
        default_factory=dict,
        alias="schema",
        description="Props schema of the contract",
    )
    runtime: RuntimeSpec
    compatibility: ContractCompatibility
    metadata: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Environment and capabilities
# ---------------------------------------------------------------------------


class Capability(RecordModel):
    """A named, versioned feature provided by an environment."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: CapabilityType
    version: VersionString
    provider: str
    description: Optional[str] = None
    config: dict[str, Any] = Field(default_factory=dict)


class EnvironmentCompatibility(RecordModel):
    supported_types: list[ComponentType] = Field(default_factory=list)
    blacklist: list[ComponentRef] = Field(default_factory=list)
    constraints: dict[str, RangeString] = Field(
        default_factory=dict,
        description="Component name -> version range the component must satisfy",
    )


class Environment(RecordModel):
    """A deployment context offering capabilities and constraints."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
    capabilities: list[Capability] = Field(default_factory=list)
    compatibility: EnvironmentCompatibility = Field(
        default_factory=EnvironmentCompatibility
    )
    metadata: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------


class CompatibilityIssue(ResultModel):
    """A structured finding attached to a compatibility check."""

    severity: IssueSeverity
    code: IssueCode
    message: str
    field: Optional[str] = None
    suggestion: Optional[str] = None


class CompatibilityResult(ResultModel):
    """Outcome of a single compatibility check."""

    compatible: bool
    level: CompatibilityLevel
    issues: list[CompatibilityIssue] = Field(default_factory=list)
    score: int = Field(..., ge=0, le=100)

    @model_validator(mode="after")
    def _compatible_matches_issues(self) -> "CompatibilityResult":
        has_error = any(i.severity == IssueSeverity.ERROR for i in self.issues)
        if self.compatible == has_error:
            raise ValueError(
                "compatible must be True exactly when no issue has severity 'error'"
            )
        return self

    @property
    def errors(self) -> list[CompatibilityIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.ERROR]

    @property
    def warnings(self) -> list[CompatibilityIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.WARNING]

    def has_issue(self, code: IssueCode) -> bool:
        return any(i.code == code for i in self.issues)


class DependencyCompatibility(ResultModel):
    """Whether one declared dependency is satisfied by the candidate pool."""

    dependency: str
    required: str = Field(description="Version range the dependency declares")
    available: Optional[str] = Field(
        None, description="Version of the same-named candidate, if any"
    )
    compatible: bool
    level: CompatibilityLevel


class CapabilityMatch(ResultModel):
    """How one component requirement resolves against an environment."""

    capability: str
    required: bool
    available: bool
    compatible: bool
    provider: Optional[str] = None
    version: Optional[str] = None


class EnvironmentMatch(ResultModel):
    """An environment paired with the result of checking a component against it."""

    environment: Environment
    result: CompatibilityResult
