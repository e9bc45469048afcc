"""
dotstrap: dotfiles bootstrapper, CLI entrypoint.

Usage:
    python -m src.main --help
    python -m src.main install
    python -m src.main detect --json
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from src.core.observability.logging_config import DEFAULT_LEVEL, setup_logging

from src import __version__


def _fail(message: str) -> None:
    """Print a fatal diagnostic on stderr and exit 1."""
    click.secho(f"[error] {message}", fg="red", err=True)
    sys.exit(1)


def _load_settings(ctx: click.Context):
    """Resolve settings from the group options, or exit 1 on a bad config."""
    from src.core.config.loader import ConfigError, load_settings

    try:
        return load_settings(
            config_path=ctx.obj.get("config_path"),
            checkout=ctx.obj.get("checkout"),
        )
    except ConfigError as e:
        _fail(str(e))


def _print_receipts(receipts, verbose: bool = False) -> None:
    for receipt in receipts:
        label = f"{receipt.step}: {receipt.subject}"
        timing = f" ({receipt.duration_ms}ms)" if receipt.duration_ms else ""
        if receipt.ok:
            click.secho(f"   ✓ {label}", fg="green", nl=False)
            click.echo(timing)
            if verbose and receipt.output:
                for line in receipt.output.split("\n")[:10]:
                    click.echo(f"     │ {line}")
        elif receipt.failed:
            color = "yellow" if receipt.metadata.get("warning") else "red"
            click.secho(f"   ✗ {label}", fg=color, nl=False)
            click.echo(timing)
            if receipt.error:
                for line in receipt.error.split("\n")[:5]:
                    click.echo(f"     │ {line}")
        else:
            click.secho(f"   ⊘ {label}", fg="yellow", nl=False)
            click.echo(f" ({receipt.output})" if receipt.output else "")


@click.group()
@click.version_option(version=__version__, prog_name="dotstrap")
@click.option("--verbose", "-v", is_flag=True, help="Show per-step output.")
@click.option("--quiet", "-q", is_flag=True, help="Only report errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to dotstrap.yml (default: <checkout>/dotstrap.yml).",
)
@click.option(
    "--checkout",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Dotfiles checkout (default: the directory dotstrap runs from).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    checkout: str | None,
) -> None:
    """dotstrap: bootstrap a dotfiles checkout into a working zsh."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["checkout"] = Path(checkout) if checkout else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("DOTSTRAP_LOG_LEVEL", DEFAULT_LEVEL)

    setup_logging(
        level=level,
        log_file=os.environ.get("DOTSTRAP_LOG_FILE"),
        log_file_level=os.environ.get("DOTSTRAP_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.option(
    "--non-interactive", is_flag=True, help="Never prompt; decline every installation.",
)
@click.option("--yes", "-y", is_flag=True, help="Never prompt; accept every installation.")
@click.option("--no-handoff", is_flag=True, help="Stay in the current shell when done.")
@click.option(
    "--compile/--no-compile",
    "compile_fragments",
    default=None,
    help="Precompile fragments and plugins (default: from dotstrap.yml).",
)
@click.option("--no-chsh", is_flag=True, help="Don't offer to change the login shell.")
@click.pass_context
def install(
    ctx: click.Context,
    non_interactive: bool,
    yes: bool,
    no_handoff: bool,
    compile_fragments: bool | None,
    no_chsh: bool,
) -> None:
    """Install tools, link dotfiles, sync submodules, start zsh.

    Without --yes or --non-interactive, each installation is confirmed
    on the terminal.  When stdin is not a terminal every installation is
    declined.

    Examples:

        dotstrap install

        dotstrap install --yes --no-handoff
    """
    from src.core.errors import HandoffError
    from src.core.services.handoff import perform_handoff
    from src.core.services.prompts import ConsentPolicy, make_confirm
    from src.core.use_cases.bootstrap import run_bootstrap

    if yes:
        policy = ConsentPolicy.ACCEPT
    elif non_interactive or not sys.stdin.isatty():
        policy = ConsentPolicy.DECLINE
    else:
        policy = ConsentPolicy.ASK

    settings = _load_settings(ctx)
    quiet = ctx.obj.get("quiet", False)

    if not quiet:
        click.secho(f"\n🔧 dotstrap {__version__}", fg="cyan", bold=True)
        click.echo(f"   Dotfiles: {settings.checkout}")
        click.echo()

    result = run_bootstrap(
        settings,
        confirm=make_confirm(policy),
        compile_fragments=compile_fragments,
        handoff=not no_handoff,
        set_login_shell=not no_chsh,
    )

    if not quiet:
        _print_receipts(result.steps, verbose=ctx.obj.get("verbose", False))
        click.echo()

    if result.warnings and not quiet:
        click.secho(f"⚠️  {len(result.warnings)} warning(s); see above", fg="yellow")

    if result.error:
        _fail(result.error)

    if result.handoff is None:
        if not quiet:
            click.secho("✅ Dotfiles ready", fg="green", bold=True)
        return

    try:
        perform_handoff(result.handoff)
    except HandoffError as e:
        _fail(str(e))


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show the package manager, required tools and link state."""
    from src.core.use_cases.detect import run_detect

    result = run_detect(_load_settings(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    detection = result.detection

    click.secho(f"\n🔍 Dotfiles: {result.checkout}", fg="cyan", bold=True)
    if detection.package_manager:
        click.echo(f"   Package manager: {detection.package_manager}")
    else:
        click.secho("   Package manager: none found", fg="yellow")
    click.echo()

    for tool in detection.tools:
        if tool.present:
            version_label = f" v{tool.version}" if tool.version else ""
            click.secho(f"   ✓ {tool.label}", fg="green", nl=False)
            click.echo(f"{version_label}  → {tool.path}")
        else:
            click.secho(f"   ✗ {tool.label} ", fg="red", nl=False)
            click.echo(f"(not found)  → {tool.docs_url}")

    if result.links:
        click.echo()
        for target, linked in result.links.items():
            if linked:
                click.secho(f"   ✓ {target}", fg="green")
            else:
                click.secho(f"   ✗ {target} (not linked)", fg="yellow")

    click.echo()


@cli.command()
@click.pass_context
def link(ctx: click.Context) -> None:
    """Create standard directories and dotfile symlinks only."""
    from src.core.errors import BootstrapError
    from src.core.services.linker import link_dotfiles

    settings = _load_settings(ctx)
    try:
        receipts = link_dotfiles(settings)
    except BootstrapError as e:
        if not ctx.obj.get("quiet"):
            _print_receipts(e.receipts)
        _fail(str(e))
        return

    if not ctx.obj.get("quiet"):
        _print_receipts(receipts, verbose=ctx.obj.get("verbose", False))


@cli.command()
@click.pass_context
def submodules(ctx: click.Context) -> None:
    """Sync, update and clean the checkout's git submodules only."""
    from src.core.errors import BootstrapError
    from src.core.services.submodules import sync_submodules

    settings = _load_settings(ctx)
    try:
        receipts = sync_submodules(settings.checkout)
    except BootstrapError as e:
        if not ctx.obj.get("quiet"):
            _print_receipts(e.receipts)
        _fail(str(e))
        return

    if not ctx.obj.get("quiet"):
        _print_receipts(receipts, verbose=ctx.obj.get("verbose", False))


# ── Register sub-command groups from src/ui/cli/ ──────────────────

from src.ui.cli.fragments import fragments

cli.add_command(fragments)


if __name__ == "__main__":
    cli()
