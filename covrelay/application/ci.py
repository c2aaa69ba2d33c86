"""
CI provider detection.

Each supported provider sets a well-known environment variable to "true".
Detection checks them in a fixed priority order.
"""

from __future__ import annotations

from collections.abc import Mapping

from ..domain.models import CIKind

# Checked in this order; the first match wins.
_DETECTION_VARIABLES: list[tuple[str, str, CIKind]] = [
    ("CIRCLECI", "true", CIKind.CIRCLECI),
    ("TRAVIS", "true", CIKind.TRAVIS),
    ("GITHUB_ACTIONS", "true", CIKind.GITHUB_ACTIONS),
]

_PRETTY_NAMES: dict[CIKind, str] = {
    CIKind.CIRCLECI: "CircleCI",
    CIKind.TRAVIS: "Travis",
    CIKind.GITHUB_ACTIONS: "GitHub Actions",
}

_NAMES_IN_REPORT: dict[CIKind, str] = {
    CIKind.CIRCLECI: "circleci",
    CIKind.TRAVIS: "travis-ci",
    CIKind.GITHUB_ACTIONS: "github",
}

_JOB_ID_VARIABLES: dict[CIKind, str] = {
    CIKind.CIRCLECI: "CIRCLE_BUILD_NUM",
    CIKind.TRAVIS: "TRAVIS_JOB_ID",
    CIKind.GITHUB_ACTIONS: "GITHUB_RUN_NUMBER",
}


def detect(environ: Mapping[str, str]) -> CIKind | None:
    """Return the CI provider described by ``environ``, or None."""
    for variable, expected, kind in _DETECTION_VARIABLES:
        if environ.get(variable) == expected:
            return kind
    return None


def pretty_name(ci: CIKind) -> str:
    return _PRETTY_NAMES[ci]


def name_in_report(ci: CIKind) -> str:
    """Name used for ``service_name`` in the report."""
    return _NAMES_IN_REPORT[ci]


def job_id_variable(ci: CIKind) -> str:
    """Environment variable holding the job or build number."""
    return _JOB_ID_VARIABLES[ci]
