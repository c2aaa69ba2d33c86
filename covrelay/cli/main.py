"""Main CLI entry point for covrelay."""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape

from ..adapters.io.logging_setup import setup_logging
from ..config.loader import ConfigLoader
from ..config.models import CovRelayConfig
from ..domain.models import CoverageInputs, CovRelayError, SendOptions
from .dependency_injection import create_dependency_container

# Errors and logs go to stderr; stdout may carry the report.
console = Console(stderr=True)

# CLI parameter -> (config section, config key)
_OPTION_TARGETS: dict[str, tuple[str, str]] = {
    "to_file": ("report", "to_file"),
    "coverage_files": ("report", "coverage_files"),
    "coverage_path": ("report", "coverage_paths"),
    "source_path": ("report", "source_paths"),
    "ignore_missing_files": ("report", "ignore_missing_files"),
    "expect": ("report", "expect"),
    "do_not_expect": ("report", "do_not_expect"),
    "send_to": ("send", "service"),
    "service_name": ("send", "service_name"),
    "service_number": ("send", "service_number"),
    "service_job_id": ("send", "service_job_id"),
    "service_pull_request": ("send", "service_pull_request"),
    "repo_token": ("send", "repo_token"),
    "git": ("send", "git"),
    "parallel": ("send", "parallel"),
    "dry_run": ("send", "dry_run"),
}


class ClickContext:
    """Context object for Click commands."""

    def __init__(self) -> None:
        self.config_file: Path | None = None
        self.verbose: bool = False
        self.quiet: bool = False


def report_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that writes a report."""
    options = [
        click.argument("coverage_files", nargs=-1, type=click.Path()),
        click.option(
            "--coverage-path",
            multiple=True,
            help="Directory searched recursively for .coverage data files",
        ),
        click.option(
            "--source-path",
            multiple=True,
            help="Directory searched for source files (default: .)",
        ),
        click.option(
            "--ignore-missing-files",
            is_flag=True,
            help="Leave source files that cannot be found out of the report",
        ),
        click.option(
            "--expect",
            multiple=True,
            help="Source file, or directory ending in '/', that must have coverage",
        ),
        click.option(
            "--do-not-expect", multiple=True, help="Exception to --expect"
        ),
        click.option("--service-name", help="Value of service_name in the report"),
        click.option("--service-number", help="Value of service_number in the report"),
        click.option("--service-job-id", help="Value of service_job_id in the report"),
        click.option(
            "--service-pull-request",
            help="Value of service_pull_request in the report",
        ),
        click.option("--repo-token", help="Value of repo_token in the report"),
        click.option("--git", is_flag=True, help="Include git commit metadata"),
        click.option("--parallel", is_flag=True, help='Add "parallel": true'),
        click.option(
            "--dry-run",
            is_flag=True,
            help="Write the report and show the upload command without running it",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Reduce output: set log level to WARNING and hide INFO",
)
@click.pass_context
def app(ctx: click.Context, config: Path | None, verbose: bool, quiet: bool) -> None:
    """covrelay - write coverage reports for hosted coverage services and upload them."""
    ctx.ensure_object(ClickContext)
    ctx.obj.config_file = config
    ctx.obj.verbose = verbose
    ctx.obj.quiet = quiet
    setup_logging(console, verbose=verbose, quiet=quiet)


@app.command()
@click.option(
    "--to-file",
    "-o",
    help="Report destination, '-' for standard output (default: coverage.json)",
)
@click.option(
    "--send-to",
    help="Coverage service to upload to: Codecov or Coveralls",
)
@report_options
@click.pass_context
def coveralls(ctx: click.Context, **params: Any) -> None:
    """Write a Coveralls-format JSON report, optionally uploading it."""
    _run(ctx, params)


@app.command("send-to")
@click.argument("service")
@report_options
@click.pass_context
def send_to(ctx: click.Context, service: str, **params: Any) -> None:
    """Write the report for SERVICE (Codecov or Coveralls) and upload it."""
    params["send_to"] = service
    _run(ctx, params, forced={"send_to"})


def _collect_overrides(
    ctx: click.Context, params: dict[str, Any], forced: set[str] | None = None
) -> dict[str, Any]:
    """Nest the options given on the command line into config sections."""
    overrides: dict[str, Any] = {}
    for name, value in params.items():
        given = name in (forced or set()) or (
            ctx.get_parameter_source(name) == ParameterSource.COMMANDLINE
        )
        if not given or name not in _OPTION_TARGETS:
            continue
        if isinstance(value, tuple):
            if not value:
                continue
            value = list(value)
        section, key = _OPTION_TARGETS[name]
        overrides.setdefault(section, {})[key] = value
    return overrides


def _options_from_config(config: CovRelayConfig) -> tuple[SendOptions, CoverageInputs]:
    send = config.send
    options = SendOptions(
        to_file=config.report.to_file,
        service=send.service,
        service_name=send.service_name,
        service_number=send.service_number,
        service_job_id=send.service_job_id,
        service_pull_request=send.service_pull_request,
        repo_token=send.repo_token,
        git=send.git,
        parallel=send.parallel,
        dry_run=send.dry_run,
    )
    inputs = CoverageInputs(
        coverage_files=config.report.coverage_files,
        coverage_paths=config.report.coverage_paths,
        source_paths=config.report.source_paths,
        ignore_missing_files=config.report.ignore_missing_files,
        expect=config.report.expect,
        do_not_expect=config.report.do_not_expect,
    )
    return options, inputs


def _run(
    ctx: click.Context, params: dict[str, Any], forced: set[str] | None = None
) -> None:
    try:
        loader = ConfigLoader(ctx.obj.config_file)
        config = loader.load_config(_collect_overrides(ctx, params, forced))
        if config.logging.verbose or config.logging.quiet:
            setup_logging(
                console,
                verbose=ctx.obj.verbose or config.logging.verbose,
                quiet=ctx.obj.quiet or config.logging.quiet,
            )

        container = create_dependency_container(config)
        options, inputs = _options_from_config(config)
        exit_code = container["send_usecase"].run(options, inputs)
    except CovRelayError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    if exit_code is not None:
        sys.exit(exit_code)


def main() -> None:
    app(obj=ClickContext())


if __name__ == "__main__":
    main()
