"""
Coverage service registry.

Static tables describing each supported coverage service: where its report
goes, how it is uploaded, and which parameters it needs on each CI provider.
"""

from __future__ import annotations

from ..domain.models import CIKind, CoverageServiceKind, FatalConfigurationError

REPORT_FILENAME = "coverage.json"

_SEND_COMMANDS: dict[CoverageServiceKind, str] = {
    CoverageServiceKind.CODECOV: (
        "curl -s https://codecov.io/bash | bash -s -- -Z -f coverage.json"
    ),
    CoverageServiceKind.COVERALLS: (
        "curl -L -F json_file=@./coverage.json https://coveralls.io/api/v1/jobs"
    ),
}

_REPO_TOKEN_VARIABLES: dict[CoverageServiceKind, list[str]] = {
    CoverageServiceKind.CODECOV: ["CODECOV_TOKEN"],
    CoverageServiceKind.COVERALLS: ["COVERALLS_REPO_TOKEN"],
}

# (CI, service) pairs absent from a table need nothing.
_PULL_REQUEST_VARIABLES: dict[tuple[CIKind, CoverageServiceKind], str] = {
    (CIKind.CIRCLECI, CoverageServiceKind.COVERALLS): "CIRCLE_PULL_REQUEST",
    (CIKind.GITHUB_ACTIONS, CoverageServiceKind.COVERALLS): "PULL_REQUEST_NUMBER",
}

_NEEDS_REPO_TOKEN: frozenset[tuple[CIKind, CoverageServiceKind]] = frozenset(
    {
        (CIKind.CIRCLECI, CoverageServiceKind.COVERALLS),
        (CIKind.GITHUB_ACTIONS, CoverageServiceKind.COVERALLS),
    }
)

_NEEDS_GIT_INFO: frozenset[tuple[CIKind, CoverageServiceKind]] = frozenset(
    {
        (CIKind.CIRCLECI, CoverageServiceKind.COVERALLS),
        (CIKind.GITHUB_ACTIONS, CoverageServiceKind.COVERALLS),
    }
)


def from_argument(argument: str | None) -> CoverageServiceKind | None:
    """
    Map the user's ``--send-to`` value to a service.

    None or an empty string selects no service. Names are case-sensitive.

    Raises:
        FatalConfigurationError: If the name is not a known service
    """
    if not argument:
        return None
    for service in CoverageServiceKind:
        if service.value == argument:
            return service
    raise FatalConfigurationError(f"send-to: unknown coverage service '{argument}'")


def pretty_name(service: CoverageServiceKind) -> str:
    return service.value


def report_filename(service: CoverageServiceKind) -> str:
    return REPORT_FILENAME


def send_command(service: CoverageServiceKind) -> str:
    return _SEND_COMMANDS[service]


def needs_pull_request_number(ci: CIKind, service: CoverageServiceKind) -> str | None:
    """Environment variable supplying the PR number, if the pair needs one."""
    return _PULL_REQUEST_VARIABLES.get((ci, service))


def needs_repo_token(ci: CIKind, service: CoverageServiceKind) -> bool:
    return (ci, service) in _NEEDS_REPO_TOKEN


def repo_token_variables(service: CoverageServiceKind) -> list[str]:
    """Candidate token variables, highest priority first."""
    return list(_REPO_TOKEN_VARIABLES[service])


def needs_git_info(ci: CIKind, service: CoverageServiceKind) -> bool:
    return (ci, service) in _NEEDS_GIT_INFO
