"""
Send Use Case - resolve report parameters, write the report, upload it.

Parameters the user left empty are filled in from the CI environment when a
coverage service is selected. Explicit values always win. CI detection runs
at most once, and only when some parameter actually needs it.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from ..adapters.io.reporter_coveralls import CoverallsReportWriter
from ..domain.models import (
    CIKind,
    CoverageInputs,
    CoverageServiceKind,
    FatalConfigurationError,
    SendOptions,
    ServiceConfig,
)
from ..ports.coverage_port import CoverageLoaderPort
from ..ports.resolver_port import ResolverFactory
from ..ports.upload_port import UploadPort
from . import ci as ci_detector
from . import coverage_services

logger = logging.getLogger(__name__)


class LazyCI:
    """Detects the CI provider on first use and remembers the answer."""

    def __init__(self, environ: Mapping[str, str]) -> None:
        self._environ = environ
        self._ci: CIKind | None = None

    def get(self) -> CIKind:
        """
        Return the detected provider.

        Raises:
            FatalConfigurationError: If no supported CI is detected
        """
        if self._ci is None:
            ci = ci_detector.detect(self._environ)
            if ci is None:
                raise FatalConfigurationError("unknown CI service or not in CI")
            logger.info("detected CI: %s", ci_detector.pretty_name(ci))
            self._ci = ci
        return self._ci


class SendReportUseCase:
    """
    Orchestrates a report run.

    Resolves the service configuration, writes the report, and when a
    coverage service is selected, runs its upload command and hands back the
    command's exit code.
    """

    def __init__(
        self,
        loader: CoverageLoaderPort,
        resolver_factory: ResolverFactory,
        writer: CoverallsReportWriter,
        uploader: UploadPort,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._loader = loader
        self._resolver_factory = resolver_factory
        self._writer = writer
        self._uploader = uploader
        self._environ = os.environ if environ is None else environ

    def resolve(
        self, options: SendOptions, service: CoverageServiceKind | None
    ) -> ServiceConfig:
        """
        Fill in missing parameters for ``service`` from the environment.

        Raises:
            FatalConfigurationError: If CI detection or a required variable fails
        """
        ci = LazyCI(self._environ)

        to_file = options.to_file
        if service is not None:
            to_file = coverage_services.report_filename(service)
            logger.info("will write coverage report to '%s'", to_file)

        return ServiceConfig(
            to_file=to_file,
            service_name=self._service_name(options, service, ci),
            service_number=options.service_number,
            service_job_id=self._service_job_id(options, service, ci),
            service_pull_request=self._service_pull_request(options, service, ci),
            repo_token=self._repo_token(options, service, ci),
            include_git=self._include_git(options, service, ci),
            parallel=options.parallel,
        )

    def run(self, options: SendOptions, inputs: CoverageInputs) -> int | None:
        """
        Execute the run.

        Returns:
            The upload command's exit code, or None when nothing was uploaded
            (no service selected, or dry run)
        """
        service = coverage_services.from_argument(options.service)
        config = self.resolve(options, service)

        visited, points = self._loader.load_coverage(
            inputs.coverage_files,
            inputs.coverage_paths,
            inputs.expect,
            inputs.do_not_expect,
        )
        resolver = self._resolver_factory(
            inputs.source_paths, inputs.ignore_missing_files
        )
        self._writer.write(config, visited, points, resolver)

        if service is None:
            return None

        command = coverage_services.send_command(service)
        logger.info("sending to %s with command:", coverage_services.pretty_name(service))
        logger.info("%s", command)
        if options.dry_run:
            return None

        exit_code = self._uploader.send(command)
        report = Path(coverage_services.report_filename(service))
        if report.exists():
            logger.info("deleting '%s'", report)
            report.unlink()
        return exit_code

    def _service_name(
        self, options: SendOptions, service: CoverageServiceKind | None, ci: LazyCI
    ) -> str:
        if service is None or options.service_name != "":
            return options.service_name
        name = ci_detector.name_in_report(ci.get())
        logger.info("using service name '%s'", name)
        return name

    def _service_job_id(
        self, options: SendOptions, service: CoverageServiceKind | None, ci: LazyCI
    ) -> str:
        if service is None or options.service_job_id != "":
            return options.service_job_id
        variable = ci_detector.job_id_variable(ci.get())
        logger.info("using job ID variable $%s", variable)
        value = self._environ.get(variable)
        if value is None:
            raise FatalConfigurationError(f"expected job id in ${variable}")
        return value

    def _service_pull_request(
        self, options: SendOptions, service: CoverageServiceKind | None, ci: LazyCI
    ) -> str:
        if service is None or options.service_pull_request != "":
            return options.service_pull_request
        variable = coverage_services.needs_pull_request_number(ci.get(), service)
        if variable is None:
            return options.service_pull_request
        value = self._environ.get(variable)
        if value is None:
            logger.info("$%s not set", variable)
            return options.service_pull_request
        logger.info("using PR number variable $%s", variable)
        return value

    def _repo_token(
        self, options: SendOptions, service: CoverageServiceKind | None, ci: LazyCI
    ) -> str:
        if service is None or options.repo_token != "":
            return options.repo_token
        if not coverage_services.needs_repo_token(ci.get(), service):
            return options.repo_token

        variables = coverage_services.repo_token_variables(service)
        for variable in variables:
            value = self._environ.get(variable)
            if value is not None:
                logger.info("using repo token variable $%s", variable)
                return value
        raise FatalConfigurationError(f"expected repo token in ${variables[0]}")

    def _include_git(
        self, options: SendOptions, service: CoverageServiceKind | None, ci: LazyCI
    ) -> bool:
        if service is None or options.git:
            return options.git
        if coverage_services.needs_git_info(ci.get(), service):
            logger.info("including git info")
            return True
        return False
