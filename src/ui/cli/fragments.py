"""
CLI commands for shell configuration fragments.

Thin wrappers over ``src.core.services.fragments``.
"""

from __future__ import annotations

import json
import sys

import click


def _resolve_settings(ctx: click.Context):
    """Resolve settings from the root group's options."""
    from src.core.config.loader import ConfigError, load_settings

    try:
        return load_settings(
            config_path=ctx.obj.get("config_path"),
            checkout=ctx.obj.get("checkout"),
        )
    except ConfigError as e:
        click.secho(f"[error] {e}", fg="red", err=True)
        sys.exit(1)


def _resolve_shell(settings) -> str:
    """The configured shell, also looked up next to the package manager."""
    from src.adapters.registry import default_registry
    from src.core.errors import HandoffError
    from src.core.services.detection import manager_bin_dir
    from src.core.services.handoff import resolve_shell

    bin_dir = manager_bin_dir(default_registry().detect(settings.package_managers))
    try:
        return resolve_shell(settings, [bin_dir] if bin_dir else None)
    except HandoffError as e:
        click.secho(f"[error] {e}", fg="red", err=True)
        sys.exit(1)


@click.group()
def fragments() -> None:
    """Shell fragments: list, syntax-check and precompile rc.d files."""


@fragments.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """List fragments in the order the shell sources them."""
    from src.core.services.fragments import is_compiled, list_fragments, list_plugins

    settings = _resolve_settings(ctx)
    files = list_fragments(settings.fragments_dir)
    plugins = list_plugins(settings.plugins_dir)

    if as_json:
        click.echo(json.dumps({
            "fragments_dir": str(settings.fragments_dir),
            "fragments": [
                {"name": p.name, "compiled": is_compiled(p)} for p in files
            ],
            "plugins": [str(p.relative_to(settings.plugins_dir)) for p in plugins],
        }, indent=2))
        return

    if not files:
        click.echo(f"No fragments in {settings.fragments_dir}")
        return

    click.secho(f"📄 {settings.fragments_dir}", fg="cyan", bold=True)
    for i, path in enumerate(files, 1):
        marker = " (compiled)" if is_compiled(path) else ""
        click.echo(f"   {i:>2}. {path.name}{marker}")
    if plugins:
        click.echo(f"   + {len(plugins)} plugin file(s) in {settings.plugins_dir}")


@fragments.command("check")
@click.pass_context
def check_cmd(ctx: click.Context) -> None:
    """Syntax-check each fragment with ``zsh -n``."""
    from src.core.services.fragments import check_fragments

    settings = _resolve_settings(ctx)
    shell_path = _resolve_shell(settings)
    receipts = check_fragments(settings.fragments_dir, shell_path)

    if not receipts:
        click.echo(f"No fragments in {settings.fragments_dir}")
        return

    failed = 0
    for receipt in receipts:
        if receipt.ok:
            click.secho(f"   ✓ {receipt.subject}", fg="green")
        else:
            failed += 1
            click.secho(f"   ✗ {receipt.subject}", fg="red")
            for line in receipt.error.split("\n")[:5]:
                click.echo(f"     │ {line}")

    if failed:
        click.secho(f"[error] {failed} fragment(s) failed to parse", fg="red", err=True)
        sys.exit(1)


@fragments.command("compile")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def compile_cmd(ctx: click.Context, as_json: bool) -> None:
    """Precompile fragments and plugin files with zcompile."""
    from src.core.services.fragments import compile_fragments

    settings = _resolve_settings(ctx)
    shell_path = _resolve_shell(settings)
    report = compile_fragments(settings.fragments_dir, settings.plugins_dir, shell_path)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    click.secho(
        f"⚡ {len(report.compiled)} compiled, {len(report.up_to_date)} up to date",
        fg="green" if not report.warnings else "yellow",
        bold=True,
    )
    for warning in report.warnings:
        click.secho(f"   ⚠️  {warning}", fg="yellow")
