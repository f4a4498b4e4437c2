"""
Installation orchestrator — the top-level install loop.

Takes the deployment units of a project, groups them by module, and
for each module not yet installed runs the full sequence:

    filter manifest → pip install → copy vendor libraries → post-install hook

Flow:
    units → dedup by module → filter → build → execute → vendor → hook

Everything is sequential and the first failure ends the run: a
missing tool or a failed install invalidates the whole artifact.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from reqbundle.core.context import InstallContext
from reqbundle.core.engine.builder import CommandBuilder
from reqbundle.core.engine.requirements import filter_requirements
from reqbundle.core.errors import ModuleConflictError
from reqbundle.core.models.command import PlannedCommand
from reqbundle.core.models.options import InstallationOptions
from reqbundle.core.models.unit import ROOT_MODULE, DeploymentUnit

logger = logging.getLogger(__name__)

PIPFILE = "Pipfile"


@dataclass
class ModuleTarget:
    """One unit of installation work: a module and where it goes."""

    module: str
    vendor: str | None = None
    post_install_command: str | None = None
    post_install_args: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_unit(cls, unit: DeploymentUnit) -> ModuleTarget:
        return cls(
            module=unit.module_id,
            vendor=unit.vendor,
            post_install_command=unit.post_install_command,
            post_install_args=unit.post_install_args,
        )

    @classmethod
    def from_options(cls, options: InstallationOptions) -> ModuleTarget:
        """The single target of a whole-project (non-individual) install."""
        return cls(
            module=ROOT_MODULE,
            vendor=options.vendor,
            post_install_command=options.post_install_command,
            post_install_args=options.post_install_args,
        )


def install_all(units: Iterable[DeploymentUnit], context: InstallContext) -> set[str]:
    """Install the requirements of every unit. The single entry point.

    Args:
        units: Deployment units of the project.
        context: The run's install context.

    Returns:
        Module identifiers that were installed.

    Raises:
        InstallError: On the first fatal error; nothing after it runs.
    """
    context.filesystem.ensure_dir(context.options.output_dir)
    builder = CommandBuilder(context)

    if context.options.individually:
        return install_units(units, context, set(), builder=builder)

    install_target(ModuleTarget.from_options(context.options), context, builder)
    return {ROOT_MODULE}


def install_units(
    units: Iterable[DeploymentUnit],
    context: InstallContext,
    done: set[str],
    builder: CommandBuilder | None = None,
) -> set[str]:
    """Install each not-yet-done module once, first unit wins.

    Args:
        units: Units in declaration order.
        context: The run's install context.
        done: Module identifiers already installed in this run.
        builder: Optional shared builder (keeps image/uid lookups cached).

    Returns:
        A new set: ``done`` plus every module installed here.
    """
    builder = builder or CommandBuilder(context)
    done = set(done)
    owners: dict[str, DeploymentUnit] = {}

    for unit in units:
        module = unit.module_id
        if module in done:
            _check_shared_module(unit, owners.get(module), context)
            continue

        install_target(ModuleTarget.from_unit(unit), context, builder)
        owners[module] = unit
        done.add(module)

    return done


def install_target(
    target: ModuleTarget,
    context: InstallContext,
    builder: CommandBuilder,
) -> None:
    """Filter, install, vendor and hook one module into its output folder."""
    opts = context.options
    fs = context.filesystem

    # Filesystem paths (host) and command paths (what pip sees) differ
    # when commands are built for another platform, so keep both.
    target_root = builder.join(opts.output_dir, target.module)
    manifest = builder.join(target.module, opts.file_name)
    out_dir = Path(opts.output_dir) / target.module
    out_manifest = out_dir / "requirements.txt"

    fs.ensure_dir(out_dir / "requirements")

    if opts.use_pipenv and fs.exists(PIPFILE):
        # The manifest was already generated from the Pipfile; filter it in place.
        source = fs.resolve(out_manifest)
    else:
        source = fs.resolve(Path(target.module) / opts.file_name)
    filter_requirements(source, fs.resolve(out_manifest), opts.no_deploy)

    logger.info("Installing requirements of %s in %s...", manifest, target_root)
    spec = builder.build_install_command(builder.join(target_root, "requirements.txt"), target_root)
    context.executor.execute(spec).raise_for_status()

    if target.vendor:
        copy_vendors(target.vendor, out_dir, context)

    if target.post_install_command:
        hook = builder.build_post_install_command(
            target.post_install_command, target.post_install_args, target_root
        )
        context.executor.execute(hook).raise_for_status()


def copy_vendors(vendor: str, out_dir: Path, context: InstallContext) -> None:
    """Copy everything in ``vendor`` into ``<out_dir>/requirements``.

    Each entry replaces whatever already sits at its destination.
    """
    fs = context.filesystem
    requirements_dir = out_dir / "requirements"
    logger.info("Copying vendor libraries from %s to %s...", vendor, requirements_dir)

    for name in fs.list_dir(vendor):
        dest = requirements_dir / name
        if fs.exists(dest):
            fs.remove_tree(dest)
        fs.copy_tree(Path(vendor) / name, dest)


def plan_commands(units: Iterable[DeploymentUnit], context: InstallContext) -> list[PlannedCommand]:
    """Build, without running, the commands ``install_all`` would run."""
    builder = CommandBuilder(context)
    opts = context.options

    if opts.individually:
        targets: list[ModuleTarget] = []
        seen: set[str] = set()
        for unit in units:
            if unit.module_id not in seen:
                seen.add(unit.module_id)
                targets.append(ModuleTarget.from_unit(unit))
    else:
        targets = [ModuleTarget.from_options(opts)]

    planned: list[PlannedCommand] = []
    for target in targets:
        target_root = builder.join(opts.output_dir, target.module)
        spec = builder.build_install_command(
            builder.join(target_root, "requirements.txt"), target_root
        )
        planned.append(PlannedCommand(module=target.module, spec=spec))
        if target.post_install_command:
            hook = builder.build_post_install_command(
                target.post_install_command, target.post_install_args, target_root
            )
            planned.append(PlannedCommand(module=target.module, kind="post_install", spec=hook))
    return planned


def _check_shared_module(
    unit: DeploymentUnit,
    owner: DeploymentUnit | None,
    context: InstallContext,
) -> None:
    """Flag a unit whose vendor/hook settings lose to the module's first unit."""
    if owner is None or unit.install_settings() == owner.install_settings():
        logger.debug("Module %s already installed, skipping %s", unit.module_id, unit.name)
        return

    message = (
        f"Unit '{unit.name}' shares module '{unit.module_id}' with '{owner.name}' "
        f"but declares different vendor/post-install settings; "
        f"only '{owner.name}' settings apply"
    )
    if context.options.strict_modules:
        raise ModuleConflictError(message)
    logger.warning(message)
