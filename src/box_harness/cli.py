"""CLI main entry point."""

import asyncio
import json
import sys

import click

from .config import load_config
from .errors import HarnessError
from .lifecycle import LifecycleController
from .logging import configure_logging

LOG_LEVELS = ["warning", "info", "debug"]


@click.group()
@click.option("-c", "--config", "config_path", type=click.Path(), help="Config file path")
@click.option("-v", "--verbose", count=True, help="Increase verbosity")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option(
    "--log-file", type=click.Path(dir_okay=False), help="Write JSON logs to this file"
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str | None,
    verbose: int,
    json_output: bool,
    log_file: str | None,
) -> None:
    """Box integration test harness."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["json_output"] = json_output
    configure_logging(LOG_LEVELS[min(verbose, len(LOG_LEVELS) - 1)], log_file=log_file)


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Start and end a run without executing tests.

    Verifies the config, both credentialed sessions and the shared user. A
    user created for the check is deleted again.
    """

    async def _check() -> dict:
        config = load_config(ctx.obj["config_path"])
        controller = LifecycleController()
        session = await controller.start_run(config)
        try:
            admin = await session.admin_client.get_current_user()
            user = await session.user_client.get_current_user()
        finally:
            await controller.end_run()
        return {
            "config_source": config.source,
            "enterprise_id": config.enterprise_id,
            "admin_login": admin.get("login"),
            "user_id": session.user_id,
            "user_name": user.get("name"),
            "user_created": session.user_created,
        }

    try:
        result = asyncio.run(_check())
    except HarnessError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if ctx.obj["json_output"]:
        click.echo(json.dumps(result, indent=2))
        return

    click.echo(f"Config:     {result['config_source']}")
    click.echo(f"Enterprise: {result['enterprise_id']}")
    click.echo(f"Admin:      {result['admin_login']}")
    # Deletion failures are reported as warnings, not here
    origin = "created" if result["user_created"] else "from config"
    click.echo(f"User:       {result['user_id']} ({result['user_name']}, {origin})")
    click.echo("Session OK")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
