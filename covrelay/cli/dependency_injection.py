"""Dependency injection container for CLI commands."""

from typing import Any

from ..adapters.coverage.coverage_py_adapter import CoveragePyLoader
from ..adapters.io.reporter_coveralls import CoverallsReportWriter
from ..adapters.source.search import search_file
from ..adapters.upload.shell_upload import ShellUploadAdapter
from ..adapters.vcs.git_adapter import GitAdapter
from ..application.send_usecase import SendReportUseCase
from ..config.models import CovRelayConfig
from ..domain.models import CovRelayError


class DependencyError(CovRelayError):
    """Raised when dependency injection fails."""

    pass


def create_dependency_container(config: CovRelayConfig) -> dict[str, Any]:
    """
    Create a dependency injection container with all required services.

    Args:
        config: covrelay configuration

    Returns:
        Dictionary containing all service instances

    Raises:
        DependencyError: If dependency creation fails
    """
    try:
        loader = CoveragePyLoader()
    except ImportError as e:
        raise DependencyError(str(e)) from e

    container: dict[str, Any] = {
        "config": config,
        "coverage_loader": loader,
        "vcs_adapter": GitAdapter(timeout=config.subprocess.git_timeout),
        "upload_adapter": ShellUploadAdapter(timeout=config.subprocess.upload_timeout),
    }
    container["report_writer"] = CoverallsReportWriter(container["vcs_adapter"])
    container["send_usecase"] = SendReportUseCase(
        loader=container["coverage_loader"],
        resolver_factory=search_file,
        writer=container["report_writer"],
        uploader=container["upload_adapter"],
    )
    return container
