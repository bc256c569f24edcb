"""
Batch evaluation and ranked selection over many records.

Each element is evaluated independently with the pairwise checkers, so
evaluation may fan out over a thread pool (``max_workers > 1``).  Results
are always collected in input order before any ranking, which keeps the
output independent of completion order.

Usage::

    from rubylith.compatibility.selection import find_compatible_environments

    matches = find_compatible_environments(component, environments, min_score=80)
    best = matches[0].environment if matches else None
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, TypeVar

from rubylith.compatibility.checker import (
    check_component_contract,
    check_component_environment,
)
from rubylith.compatibility.schema import (
    CompatibilityResult,
    Component,
    Contract,
    Environment,
    EnvironmentMatch,
)
from rubylith.compatibility.types import ComponentType
from rubylith.versioning.semver import Version

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 80

T = TypeVar("T")
R = TypeVar("R")


def _evaluate(
    fn: Callable[[T], R], items: Sequence[T], max_workers: Optional[int]
) -> list[R]:
    """Apply *fn* to every item, returning results in input order."""
    if not max_workers or max_workers <= 1 or len(items) <= 1:
        return [fn(item) for item in items]
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(fn, items))


def check_batch_compatibility(
    components: Iterable[Component],
    environment: Environment,
    max_workers: Optional[int] = None,
) -> dict[str, CompatibilityResult]:
    """Check every component against one environment.

    Returns:
        Mapping of component name to result, in input order.  When two
        components share a name, the later result wins.
    """
    items = list(components)
    results = _evaluate(
        lambda c: check_component_environment(c, environment), items, max_workers
    )
    batch = {component.name: result for component, result in zip(items, results)}
    logger.debug(
        "Batch check against %s: %d components, %d compatible",
        environment.id,
        len(batch),
        sum(1 for r in batch.values() if r.compatible),
    )
    return batch


def find_compatible_environments(
    component: Component,
    environments: Iterable[Environment],
    min_score: int = DEFAULT_MIN_SCORE,
    max_workers: Optional[int] = None,
) -> list[EnvironmentMatch]:
    """Rank the environments *component* can run in.

    Keeps compatible results scoring at least *min_score*, sorted by
    score descending.  Environments with equal scores keep their input
    order.
    """
    items = list(environments)
    results = _evaluate(
        lambda env: check_component_environment(component, env), items, max_workers
    )
    matches = [
        EnvironmentMatch(environment=env, result=result)
        for env, result in zip(items, results)
        if result.compatible and result.score >= min_score
    ]
    matches.sort(key=lambda m: m.result.score, reverse=True)
    logger.debug(
        "Component %s@%s: %d of %d environments at score >= %d",
        component.name,
        component.version,
        len(matches),
        len(items),
        min_score,
    )
    return matches


def find_best_contract_version(
    component: Component,
    contracts: Iterable[Contract],
    well_supported_types: Optional[Iterable[ComponentType]] = None,
) -> Optional[Contract]:
    """Pick the best contract revision for *component*.

    Only contracts named like ``component.contract.name`` are considered,
    and only compatible ones can win.  Highest score wins; ties go to the
    greatest version.

    Returns:
        The winning ``Contract``, or ``None`` when nothing is compatible.
    """
    allowed = None if well_supported_types is None else frozenset(well_supported_types)
    candidates: list[tuple[int, Version, Contract]] = []
    for contract in contracts:
        if contract.name != component.contract.name:
            continue
        result = check_component_contract(component, contract, allowed)
        if result.compatible:
            candidates.append((result.score, Version.parse(contract.version), contract))

    if not candidates:
        logger.debug("No compatible contract for %s", component.name)
        return None
    candidates.sort(key=lambda c: (c[0], c[1]), reverse=True)
    best = candidates[0][2]
    logger.debug(
        "Best contract for %s: %s@%s (score %d, %d candidates)",
        component.name,
        best.name,
        best.version,
        candidates[0][0],
        len(candidates),
    )
    return best
