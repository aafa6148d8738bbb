"""Install command for chezinstall.

Mirrors the usage of the shell installer it replaces::

    chezinstall [-b bindir] [-d] [-t tag] [--] [binary-args...]

Any trailing arguments are passed to the freshly installed binary, which is
then run and whose exit status becomes the command's exit status.
"""

from __future__ import annotations

import sys

import click
from rich.console import Console
from rich.markup import escape

from chezinstall.app.config import build_config
from chezinstall.domain.errors import ConfigError, InstallerError
from chezinstall.infrastructure.observability import configure_logging, get_logger
from chezinstall.services.installer import InstallPlan, InstallService

console = Console()
logger = get_logger(__name__)


def _print_plan(plan: InstallPlan) -> None:
    rows = [
        ("tag", f"{plan.asset.tag} (requested {plan.requested_tag})"),
        ("platform", plan.asset.platform.label),
        ("archive", plan.asset.archive_url),
        ("checksums", plan.asset.checksums_url),
        ("target", str(plan.target)),
    ]
    # URLs are printed unwrapped so they stay copyable
    for key, value in rows:
        console.print(f"[bold]{key:<10}[/bold] {escape(value)}", soft_wrap=True)


@click.command(
    name="install",
    context_settings={
        "help_option_names": ["-h", "--help"],
        "allow_interspersed_args": False,
    },
)
@click.option(
    "-b",
    "--bindir",
    default=None,
    help="Installation directory. Defaults to $BINDIR, else ./bin.",
)
@click.option(
    "-t",
    "--tag",
    default=None,
    help="Tag or version to install, or 'latest'.  [default: latest]",
)
@click.option(
    "-d",
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug logging (same as --log-level 3).",
)
@click.option(
    "--log-level",
    type=click.IntRange(0, 3),
    default=None,
    help="0=critical, 1=error, 2=info, 3=debug. Defaults to $LOG_LEVEL, else 2.",
)
@click.option("--repo", default=None, help="GitHub repository publishing releases.")
@click.option("--base-url", default=None, help="Base URL of the release host.")
@click.option("--project", default=None, help="Project (and binary) name.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Optional JSON file with installer settings.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Resolve the release and show what would be installed without downloading.",
)
@click.argument("binary_args", nargs=-1, type=click.UNPROCESSED)
def install(
    bindir: str | None,
    tag: str | None,
    debug: bool,
    log_level: int | None,
    repo: str | None,
    base_url: str | None,
    project: str | None,
    config_path: str | None,
    dry_run: bool,
    binary_args: tuple[str, ...],
) -> None:
    """Download, verify and install a release binary."""

    configure_logging()
    try:
        config = build_config(
            config_path=config_path,
            bindir=bindir,
            tag=tag,
            log_level=3 if debug else log_level,
            repo=repo,
            base_url=base_url,
            project=project,
            binary_args=binary_args or None,
        )
    except ConfigError as exc:
        logger.error(str(exc))
        sys.exit(1)

    configure_logging(config.log_level)
    service = InstallService(config)
    try:
        if dry_run:
            _print_plan(service.plan())
            return
        target = service.install()
        if config.binary_args:
            sys.exit(service.run_binary(target, config.binary_args))
    except InstallerError:
        # Already logged where it was raised.
        sys.exit(1)
