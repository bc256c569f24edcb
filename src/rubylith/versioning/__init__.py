"""
Version algebra for the component registry.

Parses, compares, increments and range-tests semantic versions, and
classifies version pairs into compatibility levels.

Public API::

    from rubylith.versioning import (
        # Versions
        Version,
        ReleaseType,
        parse_version,
        safe_parse_version,
        validate_version,
        safe_validate_version,
        is_valid_version,
        compare_versions,
        sort_ascending,
        sort_descending,
        latest_version,
        increment_version,
        # Ranges
        VersionRange,
        satisfies,
        safe_satisfies_range,
        max_satisfying,
        min_satisfying,
        caret_range,
        tilde_range,
        # Levels
        CompatibilityLevel,
        classify,
        are_compatible,
        # Errors
        VersionError,
    )
"""

from rubylith.versioning.errors import VersionError
from rubylith.versioning.levels import (
    CompatibilityLevel,
    are_compatible,
    calculate_compatibility_score,
    classify,
    weakest,
)
from rubylith.versioning.ranges import (
    Comparator,
    VersionRange,
    caret_range,
    exact_range,
    filter_satisfying,
    is_valid_version_range,
    max_range,
    max_satisfying,
    min_range,
    min_satisfying,
    parse_range,
    safe_satisfies_range,
    satisfies,
    tilde_range,
    validate_version_range,
)
from rubylith.versioning.semver import (
    ReleaseType,
    Version,
    compare_versions,
    increment_version,
    is_equal,
    is_greater,
    is_greater_or_equal,
    is_less,
    is_less_or_equal,
    is_valid_version,
    latest_version,
    parse_version,
    safe_parse_version,
    safe_validate_version,
    sort_ascending,
    sort_descending,
    validate_version,
)

__all__ = [
    # Versions
    "Version",
    "ReleaseType",
    "parse_version",
    "safe_parse_version",
    "validate_version",
    "safe_validate_version",
    "is_valid_version",
    "compare_versions",
    "is_greater",
    "is_greater_or_equal",
    "is_less",
    "is_less_or_equal",
    "is_equal",
    "sort_ascending",
    "sort_descending",
    "latest_version",
    "increment_version",
    # Ranges
    "Comparator",
    "VersionRange",
    "parse_range",
    "satisfies",
    "safe_satisfies_range",
    "is_valid_version_range",
    "validate_version_range",
    "filter_satisfying",
    "max_satisfying",
    "min_satisfying",
    "caret_range",
    "tilde_range",
    "exact_range",
    "min_range",
    "max_range",
    # Levels
    "CompatibilityLevel",
    "classify",
    "are_compatible",
    "weakest",
    "calculate_compatibility_score",
    # Errors
    "VersionError",
]
