"""Rubylith CLI - semantic version utilities."""

import sys
from typing import Optional

import click

from rubylith.cli._common import dump_json, fail, json_option
from rubylith.versioning import (
    ReleaseType,
    VersionError,
    classify,
    compare_versions,
    increment_version,
    satisfies,
)


@click.group()
def version():
    """Semantic version helpers (compare, satisfies, bump)."""
    pass


@version.command("compare")
@click.argument("a")
@click.argument("b")
@json_option
def compare_cmd(a: str, b: str, as_json: bool):
    """Compare versions A and B and classify their compatibility level.

    Prints -1, 0 or 1 followed by the level.
    """
    try:
        order = compare_versions(a, b)
        level = classify(a, b)
    except VersionError as exc:
        fail(str(exc))

    if as_json:
        dump_json({"a": a, "b": b, "order": order, "level": level.value})
    else:
        click.echo(f"{order} {level.value}")


@version.command("satisfies")
@click.argument("version_", metavar="VERSION")
@click.argument("range_", metavar="RANGE")
@json_option
def satisfies_cmd(version_: str, range_: str, as_json: bool):
    """Exit 0 if VERSION satisfies RANGE, 1 otherwise."""
    try:
        ok = satisfies(version_, range_)
    except VersionError as exc:
        fail(str(exc))

    if as_json:
        dump_json({"version": version_, "range": range_, "satisfies": ok})
    else:
        click.echo("yes" if ok else "no")
    if not ok:
        sys.exit(1)


@version.command("bump")
@click.argument("version_", metavar="VERSION")
@click.argument("release", type=click.Choice([t.value for t in ReleaseType]))
@click.option("--preid", help="Prerelease identifier (e.g. beta)")
def bump_cmd(version_: str, release: str, preid: Optional[str]):
    """Increment VERSION by RELEASE type and print the result.

    Example:

        rubylith version bump 1.2.3 preminor --preid beta   # 1.3.0-beta.0
    """
    try:
        click.echo(increment_version(version_, ReleaseType(release), preid))
    except VersionError as exc:
        fail(str(exc))
