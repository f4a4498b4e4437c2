"""
reqbundle — CLI entrypoint.

Usage:
    python -m reqbundle.main --help
    python -m reqbundle.main install
    python -m reqbundle.main plan
    python -m reqbundle.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from reqbundle import __version__
from reqbundle.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="reqbundle")
@click.option("--verbose", "-v", is_flag=True, help="Show progress and installer output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to reqbundle.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """reqbundle — package Python requirements for deployment."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(verbose=verbose, quiet=quiet, debug=debug),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--mock", is_flag=True, help="Record commands instead of running them.")
@click.pass_context
def install(ctx: click.Context, as_json: bool, mock: bool) -> None:
    """Install requirements for every deployment unit."""
    from reqbundle.core.use_cases.install import run_install

    result = run_install(config_path=ctx.obj.get("config_path"), mock_mode=mock)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if not result.ok:
        click.secho("❌ Installing requirements failed:", fg="red", bold=True)
        for line in (result.error or "").splitlines()[-20:]:
            click.echo(f"   │ {line}")
        sys.exit(1)

    project = result.project
    assert project is not None

    mode_label = "[mock] " if mock else ""
    if not ctx.obj.get("quiet"):
        click.secho(f"\n📦 {mode_label}{project.name or result.service_path}", fg="cyan", bold=True)
    for module in result.modules:
        out_dir = Path(project.options.output_dir) / module
        click.secho("   ✓ ", fg="green", nl=False)
        click.echo(f"{module}  → {out_dir / 'requirements'}")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, as_json: bool) -> None:
    """Show the commands install would run, without running them."""
    from reqbundle.core.use_cases.install import run_plan

    result = run_plan(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if not result.ok:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    for planned in result.planned:
        label = "hook" if planned.kind == "post_install" else "pip"
        click.secho(f"   [{planned.module}] {label}: ", fg="cyan", nl=False)
        click.echo(planned.spec.display)


@cli.command("filter")
@click.argument("source", type=click.Path(dir_okay=False))
@click.argument("destination", type=click.Path(dir_okay=False))
@click.option("--deny", "-d", "denied", multiple=True, help="Package name to drop (repeatable).")
def filter_cmd(source: str, destination: str, denied: tuple[str, ...]) -> None:
    """Copy a requirements file, dropping denied packages."""
    from reqbundle.core.engine.requirements import filter_requirements
    from reqbundle.core.errors import ManifestReadError

    try:
        filter_requirements(Path(source), Path(destination), denied)
    except ManifestReadError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    click.echo(f"Wrote {destination}")


@cli.group()
def config() -> None:
    """Project configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate reqbundle.yml."""
    from reqbundle.core.config.loader import ConfigError, load_project

    try:
        project = load_project(ctx.obj.get("config_path"))
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "error": str(e)}, indent=2))
        else:
            click.secho("❌ Configuration error:", fg="red", bold=True)
            click.echo(f"   • {e}")
        sys.exit(1)

    opts = project.options
    if as_json:
        click.echo(json.dumps({
            "valid": True,
            "project": project.name,
            "units": len(project.units),
            "modules": project.modules,
            "options": opts.model_dump(mode="json"),
        }, indent=2))
        return

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   Project: {project.name}")
    click.echo(f"   Units:   {len(project.units)}")
    click.echo(f"   Modules: {', '.join(project.modules) or '-'}")
    if opts.dockerize_pip:
        image = f"built from {opts.docker_file}" if opts.builds_image else opts.docker_image
        click.echo(f"   Docker:  {image}")
    click.echo()


if __name__ == "__main__":
    cli()
