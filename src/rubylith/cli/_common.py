"""Shared helpers for the Rubylith CLI commands."""

import json
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional

import click
import yaml
from pydantic import ValidationError

from rubylith.compatibility.otel import emit_compatibility_issue, emit_compatibility_result
from rubylith.compatibility.schema import CompatibilityResult, Component
from rubylith.config import RegistryConfig, get_config
from rubylith.loader import RegistryDocument, RegistryLoader
from rubylith.logger import CompatibilityLogger
from rubylith.versioning.errors import VersionError

json_option = click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
fail_option = click.option(
    "--fail-on-incompatible",
    is_flag=True,
    help="Exit with code 1 if the result is incompatible",
)
registry_argument = click.argument("registry", type=click.Path(exists=True, dir_okay=False))


def fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def current_config() -> RegistryConfig:
    ctx = click.get_current_context(silent=True)
    if ctx is not None and isinstance(ctx.obj, dict) and "config" in ctx.obj:
        return ctx.obj["config"]
    return get_config()


def load_registry(path: str) -> RegistryDocument:
    try:
        return RegistryLoader().load(Path(path))
    except (TypeError, yaml.YAMLError) as exc:
        fail(f"{path} is not a valid registry document: {exc}")
    except ValidationError as exc:
        fail(f"{path} failed validation:\n{exc}")


def split_ref(ref: str) -> tuple[str, Optional[str]]:
    """Split ``name@version`` into its parts; the version is optional."""
    name, sep, version = ref.rpartition("@")
    if not sep or not name:
        return ref, None
    return name, version


def resolve_component(registry: RegistryDocument, ref: str) -> Component:
    name, version = split_ref(ref)
    try:
        component = registry.component(name, version)
    except VersionError as exc:
        fail(str(exc))
    if component is None:
        fail(f"Component '{ref}' not found in registry")
    return component


def dump_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def record_check(check: str, subject: str, target: str, result: CompatibilityResult) -> None:
    """Log a check outcome and, when enabled, add span events for it."""
    CompatibilityLogger().log_check(check, subject, target, result)
    if current_config().emit_span_events:
        emit_compatibility_result(check, subject, target, result)
        for issue in result.issues:
            emit_compatibility_issue(subject, issue)


def echo_result(title: str, result: CompatibilityResult) -> None:
    status = "compatible" if result.compatible else "INCOMPATIBLE"
    click.echo(f"{title}: {status}")
    click.echo(f"  Level: {result.level.value}")
    click.echo(f"  Score: {result.score}")
    for issue in result.issues:
        line = f"  [{issue.severity.value}] {issue.code.value}: {issue.message}"
        click.echo(line)
        if issue.suggestion:
            click.echo(f"      -> {issue.suggestion}")
