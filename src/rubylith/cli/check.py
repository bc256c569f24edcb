"""Rubylith CLI - compatibility check and selection commands."""

import sys
from typing import Optional

import click

from rubylith.cli._common import (
    current_config,
    dump_json,
    echo_result,
    fail,
    fail_option,
    json_option,
    load_registry,
    record_check,
    registry_argument,
    resolve_component,
)
from rubylith.compatibility.checker import (
    check_component_contract,
    check_component_environment,
    check_contract_compatibility,
    check_dependency_compatibility,
)
from rubylith.compatibility.otel import emit_selection_result
from rubylith.compatibility.selection import (
    check_batch_compatibility,
    find_best_contract_version,
    find_compatible_environments,
)
from rubylith.logger import CompatibilityLogger
from rubylith.versioning.errors import VersionError


@click.group()
def check():
    """Pairwise compatibility checks against a registry document."""
    pass


@check.command("contract")
@registry_argument
@click.argument("component")
@click.option("--contract-version", help="Contract revision to check (default: latest)")
@json_option
@fail_option
def check_contract_cmd(
    registry: str,
    component: str,
    contract_version: Optional[str],
    as_json: bool,
    fail_on_incompatible: bool,
):
    """Check COMPONENT against the contract it references.

    COMPONENT is a component name, optionally pinned as name@version.

    Example:

        rubylith check contract registry.yaml data-table@2.1.0 --contract-version 1.2.0
    """
    doc = load_registry(registry)
    comp = resolve_component(doc, component)
    contract_name = comp.contract.name
    try:
        contract = doc.contract(contract_name, contract_version)
    except VersionError as exc:
        fail(str(exc))
    if contract is None:
        label = f"{contract_name}@{contract_version}" if contract_version else contract_name
        fail(f"Contract '{label}' not found in registry")

    result = check_component_contract(
        comp, contract, current_config().well_supported_types
    )
    subject = f"{comp.name}@{comp.version}"
    record_check("component_contract", subject, f"{contract.name}@{contract.version}", result)

    if as_json:
        dump_json(result.model_dump(mode="json"))
    else:
        echo_result(f"{subject} -> contract {contract.name}@{contract.version}", result)

    if fail_on_incompatible and not result.compatible:
        sys.exit(1)


@check.command("environment")
@registry_argument
@click.argument("component")
@click.argument("environment")
@json_option
@fail_option
def check_environment_cmd(
    registry: str,
    component: str,
    environment: str,
    as_json: bool,
    fail_on_incompatible: bool,
):
    """Check COMPONENT against the environment with id ENVIRONMENT.

    Example:

        rubylith check environment registry.yaml data-table prod --json
    """
    doc = load_registry(registry)
    comp = resolve_component(doc, component)
    env = doc.environment(environment)
    if env is None:
        fail(f"Environment '{environment}' not found in registry")

    result = check_component_environment(comp, env)
    subject = f"{comp.name}@{comp.version}"
    record_check("component_environment", subject, env.id, result)

    if as_json:
        dump_json(result.model_dump(mode="json"))
    else:
        echo_result(f"{subject} -> environment {env.id}", result)

    if fail_on_incompatible and not result.compatible:
        sys.exit(1)


@check.command("dependencies")
@registry_argument
@click.argument("component")
@json_option
@fail_option
def check_dependencies_cmd(
    registry: str,
    component: str,
    as_json: bool,
    fail_on_incompatible: bool,
):
    """Check COMPONENT's dependencies against the registry's components."""
    doc = load_registry(registry)
    comp = resolve_component(doc, component)
    pool = [c for c in doc.components if c.name != comp.name]
    results = check_dependency_compatibility(comp, pool)
    all_ok = all(r.compatible for r in results)

    if as_json:
        dump_json([r.model_dump(mode="json") for r in results])
    else:
        click.echo(f"Dependencies of {comp.name}@{comp.version}:")
        if not results:
            click.echo("  (none)")
        for r in results:
            mark = "ok" if r.compatible else "FAIL"
            available = r.available or "missing"
            click.echo(f"  [{mark}] {r.dependency} {r.required} (available: {available})")

    if fail_on_incompatible and not all_ok:
        sys.exit(1)


@check.command("migration")
@registry_argument
@click.argument("contract")
@click.argument("from_version", metavar="FROM")
@click.argument("to_version", metavar="TO")
@click.option("--to-contract", help="Target contract name (default: same as CONTRACT)")
@json_option
@fail_option
def check_migration_cmd(
    registry: str,
    contract: str,
    from_version: str,
    to_version: str,
    to_contract: Optional[str],
    as_json: bool,
    fail_on_incompatible: bool,
):
    """Check whether CONTRACT can migrate from revision FROM to TO.

    Example:

        rubylith check migration registry.yaml table-contract 1.0.0 2.0.0
    """
    doc = load_registry(registry)
    try:
        source = doc.contract(contract, from_version)
        target = doc.contract(to_contract or contract, to_version)
    except VersionError as exc:
        fail(str(exc))
    if source is None:
        fail(f"Contract '{contract}@{from_version}' not found in registry")
    if target is None:
        fail(f"Contract '{to_contract or contract}@{to_version}' not found in registry")

    result = check_contract_compatibility(source, target)
    subject = f"{source.name}@{source.version}"
    record_check("contract_migration", subject, f"{target.name}@{target.version}", result)

    if as_json:
        dump_json(result.model_dump(mode="json"))
    else:
        echo_result(f"Migration {subject} -> {target.name}@{target.version}", result)

    if fail_on_incompatible and not result.compatible:
        sys.exit(1)


# ---------------------------------------------------------------------------
# Batch and selection commands
# ---------------------------------------------------------------------------


@click.command("batch")
@registry_argument
@click.argument("environment")
@click.option("--workers", type=click.IntRange(min=1), help="Worker threads (default: from config)")
@json_option
@fail_option
def batch_cmd(
    registry: str,
    environment: str,
    workers: Optional[int],
    as_json: bool,
    fail_on_incompatible: bool,
):
    """Check every registry component against ENVIRONMENT."""
    doc = load_registry(registry)
    env = doc.environment(environment)
    if env is None:
        fail(f"Environment '{environment}' not found in registry")

    config = current_config()
    results = check_batch_compatibility(
        doc.components, env, max_workers=workers or config.batch_max_workers
    )
    compatible = [name for name, r in results.items() if r.compatible]
    CompatibilityLogger().log_selection("batch", env.id, len(results), len(compatible))
    if config.emit_span_events:
        emit_selection_result("batch", env.id, len(results), len(compatible))

    if as_json:
        dump_json({name: r.model_dump(mode="json") for name, r in results.items()})
    else:
        click.echo(f"Batch check against {env.id}: {len(compatible)}/{len(results)} compatible")
        for name, r in results.items():
            mark = "ok" if r.compatible else "FAIL"
            codes = ", ".join(i.code.value for i in r.errors)
            suffix = f" ({codes})" if codes else ""
            click.echo(f"  [{mark}] {name} score={r.score}{suffix}")

    if fail_on_incompatible and len(compatible) < len(results):
        sys.exit(1)


@click.command("environments")
@registry_argument
@click.argument("component")
@click.option("--min-score", type=click.IntRange(0, 100), help="Minimum score (default: from config)")
@json_option
@fail_option
def environments_cmd(
    registry: str,
    component: str,
    min_score: Optional[int],
    as_json: bool,
    fail_on_incompatible: bool,
):
    """Rank the registry environments COMPONENT can run in."""
    doc = load_registry(registry)
    comp = resolve_component(doc, component)
    config = current_config()
    threshold = config.min_environment_score if min_score is None else min_score

    matches = find_compatible_environments(
        comp, doc.environments, min_score=threshold, max_workers=config.batch_max_workers
    )
    subject = f"{comp.name}@{comp.version}"
    best = matches[0].environment.id if matches else None
    CompatibilityLogger().log_selection(
        "environments", subject, len(doc.environments), len(matches), best
    )
    if config.emit_span_events:
        emit_selection_result("environments", subject, len(doc.environments), len(matches), best)

    if as_json:
        dump_json(
            [
                {"environment": m.environment.id, "result": m.result.model_dump(mode="json")}
                for m in matches
            ]
        )
    else:
        click.echo(f"Environments for {subject} (min score {threshold}):")
        if not matches:
            click.echo("  (none)")
        for m in matches:
            click.echo(f"  {m.environment.id} score={m.result.score}")

    if fail_on_incompatible and not matches:
        sys.exit(1)


@click.command("best-contract")
@registry_argument
@click.argument("component")
@json_option
@fail_option
def best_contract_cmd(
    registry: str,
    component: str,
    as_json: bool,
    fail_on_incompatible: bool,
):
    """Pick the best registry contract revision for COMPONENT."""
    doc = load_registry(registry)
    comp = resolve_component(doc, component)
    config = current_config()
    candidates = doc.contract_versions(comp.contract.name)
    best = find_best_contract_version(comp, candidates, config.well_supported_types)

    subject = f"{comp.name}@{comp.version}"
    label = f"{best.name}@{best.version}" if best else None
    CompatibilityLogger().log_selection(
        "best_contract", subject, len(candidates), 1 if best else 0, label
    )
    if config.emit_span_events:
        emit_selection_result("best_contract", subject, len(candidates), 1 if best else 0, label)

    if as_json:
        dump_json(best.model_dump(mode="json", by_alias=True) if best else None)
    elif best:
        click.echo(f"Best contract for {subject}: {label}")
    else:
        click.echo(f"No compatible contract for {subject}")

    if fail_on_incompatible and best is None:
        sys.exit(1)
