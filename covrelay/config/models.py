"""Configuration models for covrelay."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReportConfig(BaseModel):
    """Where coverage data comes from and where the report goes."""

    to_file: str = Field(
        default="coverage.json",
        description="Report destination; '-' writes to standard output",
    )
    coverage_files: list[str] = Field(
        default_factory=list, description="Explicit coverage data files"
    )
    coverage_paths: list[str] = Field(
        default_factory=list,
        description="Directories searched recursively for coverage data files",
    )
    source_paths: list[str] = Field(
        default_factory=lambda: ["."],
        description="Directories searched for source files, in order",
    )
    ignore_missing_files: bool = Field(
        default=False, description="Leave out source files that cannot be found"
    )
    expect: list[str] = Field(
        default_factory=list,
        description="Source files or directories (trailing '/') that must have coverage",
    )
    do_not_expect: list[str] = Field(
        default_factory=list, description="Exceptions to 'expect'"
    )

    @field_validator(
        "coverage_files",
        "coverage_paths",
        "source_paths",
        "expect",
        "do_not_expect",
        mode="before",
    )
    @classmethod
    def split_single_value(cls, v: object) -> object:
        """Accept a single path where a list is expected."""
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("to_file")
    @classmethod
    def validate_to_file(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("to_file must not be empty")
        return v


class SendConfig(BaseModel):
    """Report parameters and upload settings."""

    service: str | None = Field(
        default=None, description="Coverage service to send to (Codecov or Coveralls)"
    )
    service_name: str = ""
    service_number: str = ""
    service_job_id: str = ""
    service_pull_request: str = ""
    repo_token: str = Field(default="", repr=False)
    git: bool = Field(default=False, description="Include git metadata")
    parallel: bool = Field(default=False, description="Mark the report as parallel")
    dry_run: bool = Field(
        default=False, description="Write the report but do not upload it"
    )

    @field_validator(
        "service_name",
        "service_number",
        "service_job_id",
        "service_pull_request",
        "repo_token",
        mode="before",
    )
    @classmethod
    def stringify_numbers(cls, v: object) -> object:
        """Job ids and PR numbers often arrive as numbers."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class SubprocessConfig(BaseModel):
    """Timeouts for child processes, in seconds; None waits indefinitely."""

    git_timeout: float | None = Field(default=30, gt=0)
    upload_timeout: float | None = Field(default=None, gt=0)


class LoggingConfig(BaseModel):
    """Configuration for logging behavior."""

    verbose: bool = False
    quiet: bool = False


class CovRelayConfig(BaseModel):
    """Main configuration model for covrelay."""

    model_config = ConfigDict(extra="forbid")

    report: ReportConfig = Field(default_factory=ReportConfig)
    send: SendConfig = Field(default_factory=SendConfig)
    subprocess: SubprocessConfig = Field(default_factory=SubprocessConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
