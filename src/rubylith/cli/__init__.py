"""
Rubylith CLI - compatibility checks over a registry document.

Commands:
    check contract      Component against its contract
    check environment   Component against an environment
    check dependencies  Component dependencies against registry components
    check migration     Contract revision against another revision
    batch               All components against one environment
    environments        Rank environments for a component
    best-contract       Best contract revision for a component
    version             compare / satisfies / bump
"""

from typing import Optional

import click

from rubylith.cli.check import batch_cmd, best_contract_cmd, check, environments_cmd
from rubylith.cli.version import version
from rubylith.config import get_config
from rubylith.logger import configure_logging


@click.group()
@click.version_option(package_name="rubylith-registry")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Override RUBYLITH_LOG_LEVEL",
)
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    help="Override RUBYLITH_LOG_FORMAT",
)
@click.pass_context
def main(ctx: click.Context, log_level: Optional[str], log_format: Optional[str]):
    """Rubylith - component registry compatibility engine."""
    config = get_config()
    configure_logging(log_level or config.log_level, log_format or config.log_format)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# Register command groups
main.add_command(check)
main.add_command(version)

# Register standalone commands
main.add_command(batch_cmd)
main.add_command(environments_cmd)
main.add_command(best_contract_cmd)


if __name__ == "__main__":
    main()
