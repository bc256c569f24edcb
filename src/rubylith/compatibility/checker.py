"""
Pairwise compatibility checkers.

Every checker is a pure function of its arguments: it reads the records
it is given, records issues on a fresh ``ScoreCard`` and returns an
immutable result.  Domain incompatibility is reported as data; only a
malformed version or range (which validated records cannot contain)
raises ``VersionError``.

Penalties:

==============================  ========  =====
Code                            Severity  Score
==============================  ========  =====
CONTRACT_MISMATCH               error       -50
CONTRACT_VERSION_INCOMPATIBLE   error       -40
RUNTIME_FRAMEWORK_MISMATCH      error       -30
COMPONENT_TYPE_UNSUPPORTED      warning     -10  (component <-> contract)
COMPONENT_TYPE_UNSUPPORTED      error       -50  (component <-> environment)
COMPONENT_BLACKLISTED           error      -100
VERSION_CONSTRAINT_VIOLATION    error       -40
MISSING_CAPABILITIES            error       -15 per capability
VERSION_INCOMPATIBLE            error       -50
SCHEMA_VERSION_INCOMPATIBLE     error       -40
RUNTIME_FRAMEWORK_CHANGE        warning     -20
BREAKING_CHANGES_PRESENT        warning     -10 per change
==============================  ========  =====

Usage::

    from rubylith.compatibility.checker import check_component_contract

    result = check_component_contract(component, contract)
    if not result.compatible:
        for issue in result.errors:
            print(issue.code.value, issue.message)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from rubylith.compatibility.schema import (
    Capability,
    CapabilityMatch,
    CompatibilityResult,
    Component,
    ComponentRef,
    Contract,
    DependencyCompatibility,
    Environment,
)
from rubylith.compatibility.scoring import ScoreCard
from rubylith.compatibility.types import (
    WELL_SUPPORTED_COMPONENT_TYPES,
    CompatibilityLevel,
    ComponentType,
    IssueCode,
    is_valid_runtime_framework,
)
from rubylith.versioning.levels import classify, weakest
from rubylith.versioning.ranges import is_valid_version_range, satisfies
from rubylith.versioning.semver import Version

logger = logging.getLogger(__name__)

CONTRACT_MISMATCH_PENALTY = 50
CONTRACT_VERSION_PENALTY = 40
RUNTIME_FRAMEWORK_PENALTY = 30
TYPE_NOT_WELL_SUPPORTED_PENALTY = 10
NEWER_CONTRACT_BONUS = 10

TYPE_UNSUPPORTED_PENALTY = 50
BLACKLIST_PENALTY = 100
CONSTRAINT_PENALTY = 40
MISSING_CAPABILITY_PENALTY = 15

VERSION_INCOMPATIBLE_PENALTY = 50
SCHEMA_INCOMPATIBLE_PENALTY = 40
FRAMEWORK_CHANGE_PENALTY = 20
BREAKING_CHANGE_PENALTY = 10


# ---------------------------------------------------------------------------
# Component <-> contract
# ---------------------------------------------------------------------------


def check_component_contract(
    component: Component,
    contract: Contract,
    well_supported_types: Optional[Iterable[ComponentType]] = None,
) -> CompatibilityResult:
    """Check whether *component* can run against *contract*.

    A name mismatch is recorded but does not stop the remaining checks.
    A contract that is strictly newer than the pinned version and still
    in the same family (level ``MAJOR`` or ``MINOR``) earns a bonus.

    Args:
        component: The component under test.
        contract: The candidate contract.
        well_supported_types: Allow-list of component types that are
            fully supported; others get a warning.  Defaults to
            ``WELL_SUPPORTED_COMPONENT_TYPES``.

    Returns:
        ``CompatibilityResult`` whose level is the classified contract
        version level when compatible, ``NONE`` otherwise.
    """
    card = ScoreCard()
    pinned = component.contract

    if pinned.name != contract.name:
        card.error(
            IssueCode.CONTRACT_MISMATCH,
            f"Component references contract '{pinned.name}' but was "
            f"checked against '{contract.name}'",
            penalty=CONTRACT_MISMATCH_PENALTY,
            field="contract.name",
        )

    level = classify(pinned.version, contract.version)
    if level is CompatibilityLevel.NONE:
        card.error(
            IssueCode.CONTRACT_VERSION_INCOMPATIBLE,
            f"Component contract version {pinned.version} is incompatible "
            f"with contract version {contract.version}",
            penalty=CONTRACT_VERSION_PENALTY,
            field="contract.version",
        )
    elif level in (CompatibilityLevel.MAJOR, CompatibilityLevel.MINOR) and (
        Version.parse(contract.version) > Version.parse(pinned.version)
    ):
        card.bonus(NEWER_CONTRACT_BONUS)

    runtime = contract.runtime
    if not is_valid_runtime_framework(runtime.framework):
        card.error(
            IssueCode.RUNTIME_FRAMEWORK_MISMATCH,
            f"Contract declares unknown runtime framework '{runtime.framework}'",
            penalty=RUNTIME_FRAMEWORK_PENALTY,
            field="runtime.framework",
        )
    elif runtime.framework_version is not None and not is_valid_version_range(
        runtime.framework_version
    ):
        card.error(
            IssueCode.RUNTIME_FRAMEWORK_MISMATCH,
            f"Contract declares invalid {runtime.framework} version range "
            f"'{runtime.framework_version}'",
            penalty=RUNTIME_FRAMEWORK_PENALTY,
            field="runtime.frameworkVersion",
        )

    allowed = (
        WELL_SUPPORTED_COMPONENT_TYPES
        if well_supported_types is None
        else frozenset(well_supported_types)
    )
    if component.type not in allowed:
        card.warning(
            IssueCode.COMPONENT_TYPE_UNSUPPORTED,
            f"Component type '{component.type.value}' may not be fully supported",
            penalty=TYPE_NOT_WELL_SUPPORTED_PENALTY,
            field="type",
        )

    result = card.finish(level)
    logger.debug(
        "Component %s@%s vs contract %s@%s: compatible=%s level=%s score=%d",
        component.name,
        component.version,
        contract.name,
        contract.version,
        result.compatible,
        result.level.value,
        result.score,
    )
    return result


# ---------------------------------------------------------------------------
# Component <-> environment
# ---------------------------------------------------------------------------


def _find_capability(environment: Environment, name: str) -> Optional[Capability]:
    for capability in environment.capabilities:
        if capability.name == name:
            return capability
    return None


def _is_blacklisted(component: Component, blacklist: list[ComponentRef]) -> bool:
    version = Version.parse(component.version)
    return any(
        entry.name == component.name and Version.parse(entry.version) == version
        for entry in blacklist
    )


def check_capability_matches(
    component: Component, environment: Environment
) -> list[CapabilityMatch]:
    """Resolve each of the component's requirements against *environment*.

    Returns one match per requirement, in requirement order.  A requirement
    resolves to the first capability with the same name.
    """
    matches: list[CapabilityMatch] = []
    for requirement in component.requires:
        capability = _find_capability(environment, requirement.name)
        compatible = capability is not None and satisfies(
            capability.version, requirement.version_range
        )
        matches.append(
            CapabilityMatch(
                capability=requirement.name,
                required=not requirement.optional,
                available=capability is not None,
                compatible=compatible,
                provider=capability.provider if capability else None,
                version=capability.version if capability else None,
            )
        )
    return matches


def check_component_environment(
    component: Component, environment: Environment
) -> CompatibilityResult:
    """Check whether *component* can be deployed into *environment*.

    The four checks (supported type, blacklist, version constraint,
    required capabilities) are independent; every failing one is
    reported.  Level is ``PATCH`` when compatible, ``NONE`` otherwise.
    """
    card = ScoreCard()
    rules = environment.compatibility

    if component.type not in rules.supported_types:
        card.error(
            IssueCode.COMPONENT_TYPE_UNSUPPORTED,
            f"Component type '{component.type.value}' is not supported "
            f"in environment '{environment.id}'",
            penalty=TYPE_UNSUPPORTED_PENALTY,
            field="type",
        )

    if _is_blacklisted(component, rules.blacklist):
        card.error(
            IssueCode.COMPONENT_BLACKLISTED,
            f"Component {component.name}@{component.version} is blacklisted "
            f"in environment '{environment.id}'",
            penalty=BLACKLIST_PENALTY,
        )

    constraint = rules.constraints.get(component.name)
    if constraint is not None and not satisfies(component.version, constraint):
        card.error(
            IssueCode.VERSION_CONSTRAINT_VIOLATION,
            f"Component version {component.version} violates environment "
            f"constraint {constraint}",
            penalty=CONSTRAINT_PENALTY,
            field="version",
        )

    missing = [
        match.capability
        for match in check_capability_matches(component, environment)
        if match.required and not match.compatible
    ]
    if missing:
        card.error(
            IssueCode.MISSING_CAPABILITIES,
            f"Missing required capabilities: {', '.join(missing)}",
            penalty=MISSING_CAPABILITY_PENALTY * len(missing),
            field="requires",
            suggestion="Ensure the environment provides all required capabilities "
            "at a satisfying version",
        )

    result = card.finish(CompatibilityLevel.PATCH)
    logger.debug(
        "Component %s@%s vs environment %s: compatible=%s score=%d issues=%d",
        component.name,
        component.version,
        environment.id,
        result.compatible,
        result.score,
        len(result.issues),
    )
    return result


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def check_dependency_compatibility(
    component: Component, available_components: Iterable[Component]
) -> list[DependencyCompatibility]:
    """Check each declared dependency against a flat candidate pool.

    Each dependency is looked up by name (first match wins) and checked
    on its own; nothing is resolved transitively.  A missing dependency
    is compatible only when optional, and its level is always ``NONE``.
    """
    pool: dict[str, Component] = {}
    for candidate in available_components:
        pool.setdefault(candidate.name, candidate)

    results: list[DependencyCompatibility] = []
    for dependency in component.dependencies:
        candidate = pool.get(dependency.name)
        if candidate is None:
            results.append(
                DependencyCompatibility(
                    dependency=dependency.name,
                    required=dependency.version_range,
                    compatible=dependency.optional,
                    level=CompatibilityLevel.NONE,
                )
            )
            continue

        ok = satisfies(candidate.version, dependency.version_range)
        results.append(
            DependencyCompatibility(
                dependency=dependency.name,
                required=dependency.version_range,
                available=candidate.version,
                compatible=ok,
                level=CompatibilityLevel.PATCH if ok else CompatibilityLevel.NONE,
            )
        )
    return results


# ---------------------------------------------------------------------------
# Contract <-> contract
# ---------------------------------------------------------------------------


def check_contract_compatibility(source: Contract, target: Contract) -> CompatibilityResult:
    """Check whether components built for *source* can migrate to *target*.

    Contracts with different names are never a valid migration: the
    result is incompatible with score 0.  Otherwise the reported level
    is the weaker of the version and schema-version levels.
    """
    if source.name != target.name:
        return ScoreCard.rejected(
            IssueCode.CONTRACT_NAME_MISMATCH,
            f"Contract names do not match: '{source.name}' -> '{target.name}'",
            field="name",
        )

    card = ScoreCard()

    version_level = classify(source.version, target.version)
    if version_level is CompatibilityLevel.NONE:
        card.error(
            IssueCode.VERSION_INCOMPATIBLE,
            f"Contract versions are incompatible: {source.version} -> {target.version}",
            penalty=VERSION_INCOMPATIBLE_PENALTY,
            field="version",
        )

    schema_level = classify(source.schema_version, target.schema_version)
    if schema_level is CompatibilityLevel.NONE:
        card.error(
            IssueCode.SCHEMA_VERSION_INCOMPATIBLE,
            f"Schema versions are incompatible: {source.schema_version} -> "
            f"{target.schema_version}",
            penalty=SCHEMA_INCOMPATIBLE_PENALTY,
            field="schemaVersion",
        )

    if source.runtime.framework != target.runtime.framework:
        card.warning(
            IssueCode.RUNTIME_FRAMEWORK_CHANGE,
            f"Runtime framework changed: {source.runtime.framework} -> "
            f"{target.runtime.framework}",
            penalty=FRAMEWORK_CHANGE_PENALTY,
            field="runtime.framework",
            suggestion="Verify component compatibility with the new runtime framework",
        )

    breaking = target.compatibility.breaking_changes
    if breaking:
        guide = target.compatibility.migration_guide
        card.warning(
            IssueCode.BREAKING_CHANGES_PRESENT,
            f"Contract {target.name}@{target.version} declares "
            f"{len(breaking)} breaking change(s)",
            penalty=BREAKING_CHANGE_PENALTY * len(breaking),
            field="compatibility.breakingChanges",
            suggestion=(
                f"See migration guide: {guide}"
                if guide
                else "Review breaking changes before upgrading"
            ),
        )

    result = card.finish(weakest(version_level, schema_level))
    logger.debug(
        "Contract %s migration %s -> %s: compatible=%s level=%s score=%d",
        source.name,
        source.version,
        target.version,
        result.compatible,
        result.level.value,
        result.score,
    )
    return result
