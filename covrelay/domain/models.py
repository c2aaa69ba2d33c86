"""
Domain models for the covrelay system.

This module contains the core domain models using Pydantic for validation
and serialization, the closed enumerations for CI providers and coverage
services, and the error hierarchy shared by every layer.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CovRelayError(Exception):
    """Base exception for covrelay domain errors."""

    pass


class FatalConfigurationError(CovRelayError):
    """Raised when the run cannot proceed with the given configuration."""

    pass


class CoverageLoadError(CovRelayError):
    """Raised when coverage data cannot be loaded."""

    pass


class SourceNotFoundError(CovRelayError):
    """Raised when a source file cannot be found and missing files are not ignored."""

    pass


class VcsError(CovRelayError):
    """Raised when a version-control command fails."""

    pass


class ReportError(CovRelayError):
    """Raised when the coverage report cannot be written."""

    pass


# Per-line coverage: None marks a line without coverage points.
LineCoverage = list[int | None]

# Logical path -> per-point visit counts.
VisitationMapping = dict[str, list[int]]

# Logical path -> character offsets of the points, index-aligned with counts.
PointTable = dict[str, list[int]]


class CIKind(str, Enum):
    """Continuous-integration providers that can be detected."""

    CIRCLECI = "circleci"
    TRAVIS = "travis"
    GITHUB_ACTIONS = "github"


class CoverageServiceKind(str, Enum):
    """Coverage services a report can be sent to."""

    CODECOV = "Codecov"
    COVERALLS = "Coveralls"


class FileReport(BaseModel):
    """
    Coverage report fragment for a single source file.

    Created once per resolved file while the report is assembled.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Logical path of the source file")
    source_digest: str = Field(
        ..., description="MD5 digest of the file content as lowercase hex"
    )
    coverage: LineCoverage = Field(
        default_factory=list, description="Visit count per line, None if not executable"
    )

    @field_validator("source_digest")
    @classmethod
    def validate_source_digest(cls, v: str) -> str:
        """Validate that the digest is 128-bit lowercase hex."""
        if len(v) != 32 or any(c not in "0123456789abcdef" for c in v):
            raise ValueError("source_digest must be 32 lowercase hex characters")
        return v

    @field_validator("coverage")
    @classmethod
    def validate_coverage(cls, v: Any) -> Any:
        """Validate that visit counts are non-negative."""
        for count in v:
            if count is not None and count < 0:
                raise ValueError("Visit counts must be non-negative")
        return v


class GitHead(BaseModel):
    """Metadata of the latest commit."""

    model_config = ConfigDict(frozen=True)

    id: str
    author_name: str
    author_email: str
    committer_name: str
    committer_email: str
    message: str


class GitInfo(BaseModel):
    """Git block of the report: latest commit plus current branch."""

    model_config = ConfigDict(frozen=True)

    head: GitHead
    branch: str


class ServiceConfig(BaseModel):
    """
    Fully resolved report parameters.

    Built by the send use case after its resolution pass and handed to the
    report writer unchanged.
    """

    model_config = ConfigDict(frozen=True)

    to_file: str = Field("-", description="Report destination, '-' for stdout")
    service_name: str = ""
    service_number: str = ""
    service_job_id: str = ""
    service_pull_request: str = ""
    repo_token: str = ""
    include_git: bool = False
    parallel: bool = False


class CoverageInputs(BaseModel):
    """Where coverage data and sources are read from."""

    model_config = ConfigDict(frozen=True)

    coverage_files: list[str] = Field(default_factory=list)
    coverage_paths: list[str] = Field(default_factory=list)
    source_paths: list[str] = Field(default_factory=lambda: ["."])
    ignore_missing_files: bool = False
    expect: list[str] = Field(default_factory=list)
    do_not_expect: list[str] = Field(default_factory=list)


class SendOptions(BaseModel):
    """
    Parameters as supplied by the user, before any auto-detection.

    Empty strings and False mean "not supplied".
    """

    model_config = ConfigDict(frozen=True)

    to_file: str = "coverage.json"
    service: str | None = None
    service_name: str = ""
    service_number: str = ""
    service_job_id: str = ""
    service_pull_request: str = ""
    repo_token: str = ""
    git: bool = False
    parallel: bool = False
    dry_run: bool = False
