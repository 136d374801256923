import logging
import os
from pathlib import Path

import click

from . import __version__
from .config import load_settings
from .errors import GopkgError
from .manifest import MANIFEST_NAME
from .resolver import resolve
from .scaffold import create_package
from .toolchain import go_build, go_run, go_test

BANNER = r"""
  ________      __________ ____  __.________
 /  _____/  ____\______   \    |/ _/  _____/
/   \  ___ /  _ \|     ___/      </   \  ___
\    \_\  (  <_> )    |   |    |  \    \_\  \
 \______  /\____/|____|   |____|__ \______  /
        \/                        \/      \/"""

_SELECTOR_LABELS = {"branch": "Branch", "tag": "Tag", "rev": "Rev"}


def _print_event(event, dependency, detail):
    if event == "fetch":
        click.echo(f"{click.style('Getting', fg='green', bold=True)} {dependency.name} [{detail}]")
    elif event == "pin":
        kind, _, value = detail.partition(" ")
        click.echo(f"  - {_SELECTOR_LABELS.get(kind, kind)}: {value}")
    elif event == "normalize":
        click.echo(f"  - [{click.style('Not using gopkg layout', fg='yellow', bold=True)}]")
    elif event == "done":
        click.echo(f"  - {click.style('Done', fg='green', bold=True)}\n")
    elif event == "conflict":
        click.echo(f"{click.style('Conflict', fg='yellow', bold=True)} {detail}", err=True)


def _resolve_workspace(ctx):
    """
    Vendor the dependencies of ./gopkg.yaml and return the resolve result.
    """
    workspace = ctx.obj["workspace"]
    settings = ctx.obj["settings"]
    try:
        return resolve(
            workspace / MANIFEST_NAME,
            settings.vendor_root(workspace),
            settings=settings,
            on_event=_print_event,
        )
    except GopkgError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group(invoke_without_command=True)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option("--config", "config_path", default=None, help="Path to config.yaml.")
@click.option("--vendor-dir", default=None, help="Vendor directory, relative to the workspace.")
@click.option("--strict/--no-strict", default=None, help="Fail on conflicting refs for one dependency.")
@click.option("--keep-scratch", is_flag=True, default=None, help="Keep cloned working copies.")
@click.version_option(__version__, prog_name="gopkg")
@click.pass_context
def cli(ctx, verbose, config_path, vendor_dir, strict, keep_scratch):
    """Vendor git dependencies listed in gopkg.yaml and drive the go toolchain."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = load_settings(config_path)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.ensure_object(dict)
    ctx.obj["workspace"] = Path(os.getcwd())
    ctx.obj["settings"] = settings.override(
        vendor_dir=vendor_dir, strict=strict, keep_scratch=keep_scratch or None
    )
    if ctx.invoked_subcommand is None:
        click.echo(BANNER + f" v{__version__}")
        click.echo(ctx.get_help())


@cli.command("new")
@click.argument("name")
@click.option("--lib", is_flag=True, help="Create a library package.")
@click.pass_context
def new_cmd(ctx, name, lib):
    """Create a new package."""
    try:
        root = create_package(ctx.obj["workspace"], name, lib=lib)
    except GopkgError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Created {root}")


@cli.command("get")
@click.pass_context
def get_cmd(ctx):
    """Download dependencies into the vendor directory."""
    result = _resolve_workspace(ctx)
    click.echo(
        f"{len(result.vendored)} vendored, {len(result.skipped)} already present."
    )


@cli.command("build")
@click.pass_context
def build_cmd(ctx):
    """Compile the package and its dependencies."""
    result = _resolve_workspace(ctx)
    if not result.name:
        raise click.ClickException(f"{MANIFEST_NAME} does not define a name")
    try:
        go_build(ctx.obj["workspace"], result.name, ctx.obj["settings"])
    except GopkgError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command("test")
@click.argument("path", required=False, default="")
@click.pass_context
def test_cmd(ctx, path):
    """Test packages."""
    _resolve_workspace(ctx)
    try:
        go_test(ctx.obj["workspace"], path, ctx.obj["settings"])
    except GopkgError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command("run", context_settings={"ignore_unknown_options": True})
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def run_cmd(ctx, args):
    """Compile and run the program with the given arguments."""
    result = _resolve_workspace(ctx)
    if not result.name:
        raise click.ClickException(f"{MANIFEST_NAME} does not define a name")
    try:
        go_run(ctx.obj["workspace"], result.name, args, ctx.obj["settings"])
    except GopkgError as exc:
        raise click.ClickException(str(exc)) from exc


def main():
    cli()


if __name__ == "__main__":
    main()
