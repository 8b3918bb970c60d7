"""Root CLI group for mindspace with global flags and command registration.

The group runs in chain mode, so several commands share one workspace
and one session: ``mindspace remove seed-mars undo list``.
"""

from __future__ import annotations

import click

from mindspace import __version__
from mindspace.commands import register_commands
from mindspace.commands._base import MindspaceGroup
from mindspace.commands._context import AppContext
from mindspace.config.settings import ConfigError, MindspaceSettings


@click.group(
    cls=MindspaceGroup,
    chain=True,
    invoke_without_command=True,
    examples="""\
  mindspace list
  mindspace add -t "Learn Rust" list
  mindspace mode solar
  mindspace --json stats
  mindspace remove seed-mars undo""",
)
@click.version_option(version=__version__, prog_name="mindspace")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """mindspace: ideas as planets, from the command line."""
    try:
        settings = MindspaceSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
