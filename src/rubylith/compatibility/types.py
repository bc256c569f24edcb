"""
Closed vocabularies shared by the compatibility engine.

Enum values are the wire strings used by registry records, so records
deserialized from JSON or YAML validate directly against them.
"""

from __future__ import annotations

from enum import Enum

from rubylith.versioning.levels import CompatibilityLevel


class ComponentType(str, Enum):
    """Component categorization."""

    UI_COMPONENT = "ui-component"
    LAYOUT_COMPONENT = "layout-component"
    DATA_COMPONENT = "data-component"
    NAV_COMPONENT = "nav-component"
    FORM_COMPONENT = "form-component"
    UTILITY_COMPONENT = "utility-component"
    COMPOSITE = "composite"
    TEMPLATE = "template"
    ADAPTER = "adapter"
    PLUGIN = "plugin"


class ComponentLifecycle(str, Enum):
    DEVELOPMENT = "development"
    ALPHA = "alpha"
    BETA = "beta"
    STABLE = "stable"
    DEPRECATED = "deprecated"
    ARCHIVED = "archived"


class CapabilityType(str, Enum):
    """Kinds of capability an environment can provide."""

    THEME_PROVIDER = "theme-provider"
    LAYOUT_ENGINE = "layout-engine"
    STYLE_INJECTION = "style-injection"
    STATE_MANAGEMENT = "state-management"
    ROUTING = "routing"
    I18N = "i18n"
    ANALYTICS = "analytics"
    ERROR_BOUNDARY = "error-boundary"
    PERFORMANCE = "performance"
    ACCESSIBILITY = "accessibility"
    TESTING = "testing"
    DEVTOOLS = "devtools"
    SECURITY = "security"
    CACHING = "caching"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NETWORKING = "networking"
    STORAGE = "storage"
    CRYPTO = "crypto"
    CUSTOM = "custom"


class RuntimeFramework(str, Enum):
    """Runtime frameworks a contract may declare."""

    REACT = "react"
    REACT_18 = "react-18"
    VUE = "vue"
    ANGULAR = "angular"
    SVELTE = "svelte"
    VANILLA = "vanilla"
    WEB_COMPONENTS = "web-components"


class IssueSeverity(str, Enum):
    """Severity of a compatibility issue.  Only ``ERROR`` breaks compatibility."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueCode(str, Enum):
    """Stable issue codes.  New codes are appended, existing ones never reused."""

    # Component <-> contract
    CONTRACT_MISMATCH = "CONTRACT_MISMATCH"
    CONTRACT_VERSION_INCOMPATIBLE = "CONTRACT_VERSION_INCOMPATIBLE"
    RUNTIME_FRAMEWORK_MISMATCH = "RUNTIME_FRAMEWORK_MISMATCH"
    COMPONENT_TYPE_UNSUPPORTED = "COMPONENT_TYPE_UNSUPPORTED"
    # Component <-> environment
    COMPONENT_BLACKLISTED = "COMPONENT_BLACKLISTED"
    VERSION_CONSTRAINT_VIOLATION = "VERSION_CONSTRAINT_VIOLATION"
    MISSING_CAPABILITIES = "MISSING_CAPABILITIES"
    # Contract <-> contract
    CONTRACT_NAME_MISMATCH = "CONTRACT_NAME_MISMATCH"
    VERSION_INCOMPATIBLE = "VERSION_INCOMPATIBLE"
    SCHEMA_VERSION_INCOMPATIBLE = "SCHEMA_VERSION_INCOMPATIBLE"
    RUNTIME_FRAMEWORK_CHANGE = "RUNTIME_FRAMEWORK_CHANGE"
    BREAKING_CHANGES_PRESENT = "BREAKING_CHANGES_PRESENT"


# Component types the component/contract checker treats as fully supported
WELL_SUPPORTED_COMPONENT_TYPES: frozenset[ComponentType] = frozenset(
    {
        ComponentType.UI_COMPONENT,
        ComponentType.LAYOUT_COMPONENT,
        ComponentType.DATA_COMPONENT,
    }
)


def is_valid_component_type(value: object) -> bool:
    return isinstance(value, str) and value in _COMPONENT_TYPE_VALUES


def is_valid_capability_type(value: object) -> bool:
    return isinstance(value, str) and value in _CAPABILITY_TYPE_VALUES


def is_valid_runtime_framework(value: object) -> bool:
    return isinstance(value, str) and value in _RUNTIME_FRAMEWORK_VALUES


_COMPONENT_TYPE_VALUES = frozenset(t.value for t in ComponentType)
_CAPABILITY_TYPE_VALUES = frozenset(t.value for t in CapabilityType)
_RUNTIME_FRAMEWORK_VALUES = frozenset(t.value for t in RuntimeFramework)

__all__ = [
    "CapabilityType",
    "CompatibilityLevel",
    "ComponentLifecycle",
    "ComponentType",
    "IssueCode",
    "IssueSeverity",
    "RuntimeFramework",
    "WELL_SUPPORTED_COMPONENT_TYPES",
    "is_valid_capability_type",
    "is_valid_component_type",
    "is_valid_runtime_framework",
]
