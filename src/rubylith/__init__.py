"""
Rubylith - component registry compatibility engine.

Components publish contracts (execution requirements) and environments
publish capabilities.  This package decides whether they fit together,
scores the fit, and ranks candidates.

Example usage:
    from rubylith import check_component_environment, find_compatible_environments

    result = check_component_environment(component, environment)
    if not result.compatible:
        print([issue.code for issue in result.errors])

    matches = find_compatible_environments(component, environments, min_score=80)
"""

__version__ = "0.1.0"
__all__ = [
    "check_component_contract",
    "check_component_environment",
    "check_contract_compatibility",
    "find_compatible_environments",
    "find_best_contract_version",
    "RegistryLoader",
    "__version__",
]


# Lazy imports
def __getattr__(name: str):
    if name in (
        "check_component_contract",
        "check_component_environment",
        "check_contract_compatibility",
    ):
        from rubylith.compatibility import checker
        return getattr(checker, name)
    if name in ("find_compatible_environments", "find_best_contract_version"):
        from rubylith.compatibility import selection
        return getattr(selection, name)
    if name == "RegistryLoader":
        from rubylith.loader import RegistryLoader
        return RegistryLoader
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
