"""
Compatibility & matching engine for the component registry.

Decides whether a component can run against a contract, an environment
or a pool of other components, scores how well it matches, and ranks
candidates.  All checkers are pure functions over validated records.

Public API::

    from rubylith.compatibility import (
        # Records
        Component,
        Contract,
        Environment,
        Capability,
        # Results
        CompatibilityResult,
        CompatibilityIssue,
        DependencyCompatibility,
        CapabilityMatch,
        EnvironmentMatch,
        # Vocabularies
        CompatibilityLevel,
        IssueCode,
        IssueSeverity,
        ComponentType,
        # Checkers
        check_component_contract,
        check_component_environment,
        check_capability_matches,
        check_dependency_compatibility,
        check_contract_compatibility,
        # Selection
        check_batch_compatibility,
        find_compatible_environments,
        find_best_contract_version,
        # Boundary validation
        is_component,
        safe_validate_component,
        # OTel helpers
        emit_compatibility_result,
        emit_compatibility_issue,
        emit_selection_result,
    )
"""

from rubylith.compatibility.checker import (
    check_capability_matches,
    check_component_contract,
    check_component_environment,
    check_contract_compatibility,
    check_dependency_compatibility,
)
from rubylith.compatibility.otel import (
    emit_compatibility_issue,
    emit_compatibility_result,
    emit_selection_result,
)
from rubylith.compatibility.predicates import (
    ValidationErrorDetail,
    ValidationResult,
    is_capability,
    is_component,
    is_contract,
    is_environment,
    is_valid_version_range_format,
    safe_validate_capability,
    safe_validate_component,
    safe_validate_contract,
    safe_validate_environment,
    validate_capability,
    validate_component,
    validate_contract,
    validate_environment,
)
from rubylith.compatibility.schema import (
    Capability,
    CapabilityMatch,
    CompatibilityIssue,
    CompatibilityResult,
    Component,
    ComponentDependency,
    ComponentProvides,
    ComponentRef,
    ComponentRequirement,
    Contract,
    ContractCompatibility,
    DependencyCompatibility,
    Environment,
    EnvironmentCompatibility,
    EnvironmentMatch,
    RuntimeSpec,
)
from rubylith.compatibility.scoring import ScoreCard, clamp_score
from rubylith.compatibility.selection import (
    check_batch_compatibility,
    find_best_contract_version,
    find_compatible_environments,
)
from rubylith.compatibility.types import (
    WELL_SUPPORTED_COMPONENT_TYPES,
    CapabilityType,
    CompatibilityLevel,
    ComponentLifecycle,
    ComponentType,
    IssueCode,
    IssueSeverity,
    RuntimeFramework,
    is_valid_capability_type,
    is_valid_component_type,
    is_valid_runtime_framework,
)

__all__ = [
    # Records
    "Component",
    "ComponentRef",
    "ComponentDependency",
    "ComponentProvides",
    "ComponentRequirement",
    "Contract",
    "RuntimeSpec",
    "ContractCompatibility",
    "Environment",
    "EnvironmentCompatibility",
    "Capability",
    # Results
    "CompatibilityResult",
    "CompatibilityIssue",
    "DependencyCompatibility",
    "CapabilityMatch",
    "EnvironmentMatch",
    # Vocabularies
    "CompatibilityLevel",
    "IssueCode",
    "IssueSeverity",
    "ComponentType",
    "ComponentLifecycle",
    "CapabilityType",
    "RuntimeFramework",
    "WELL_SUPPORTED_COMPONENT_TYPES",
    "is_valid_component_type",
    "is_valid_capability_type",
    "is_valid_runtime_framework",
    # Scoring
    "ScoreCard",
    "clamp_score",
    # Checkers
    "check_component_contract",
    "check_component_environment",
    "check_capability_matches",
    "check_dependency_compatibility",
    "check_contract_compatibility",
    # Selection
    "check_batch_compatibility",
    "find_compatible_environments",
    "find_best_contract_version",
    # Boundary validation
    "is_component",
    "is_contract",
    "is_environment",
    "is_capability",
    "is_valid_version_range_format",
    "ValidationResult",
    "ValidationErrorDetail",
    "validate_component",
    "validate_contract",
    "validate_environment",
    "validate_capability",
    "safe_validate_component",
    "safe_validate_contract",
    "safe_validate_environment",
    "safe_validate_capability",
    # OTel
    "emit_compatibility_result",
    "emit_compatibility_issue",
    "emit_selection_result",
]
