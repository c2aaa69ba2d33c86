"""Tests for the coverage service registry."""

import pytest

from covrelay.application import coverage_services
from covrelay.domain.models import (
    CIKind,
    CoverageServiceKind,
    FatalConfigurationError,
)


class TestFromArgument:
    """Test parsing the --send-to value."""

    def test_none_selects_nothing(self):
        assert coverage_services.from_argument(None) is None

    def test_empty_selects_nothing(self):
        assert coverage_services.from_argument("") is None

    def test_known_names(self):
        assert coverage_services.from_argument("Coveralls") is CoverageServiceKind.COVERALLS
        assert coverage_services.from_argument("Codecov") is CoverageServiceKind.CODECOV

    def test_unknown_name_is_fatal(self):
        with pytest.raises(FatalConfigurationError, match="unknown coverage service 'bogus'"):
            coverage_services.from_argument("bogus")

    def test_case_sensitive(self):
        with pytest.raises(FatalConfigurationError):
            coverage_services.from_argument("coveralls")


class TestServiceTables:
    """Test the per-service and per-(CI, service) tables."""

    def test_report_filename(self):
        for service in CoverageServiceKind:
            assert coverage_services.report_filename(service) == "coverage.json"

    def test_send_commands_upload_report_file(self):
        for service in CoverageServiceKind:
            assert "coverage.json" in coverage_services.send_command(service)
        assert "coveralls.io" in coverage_services.send_command(
            CoverageServiceKind.COVERALLS
        )
        assert "codecov.io" in coverage_services.send_command(CoverageServiceKind.CODECOV)

    def test_pretty_names(self):
        assert coverage_services.pretty_name(CoverageServiceKind.CODECOV) == "Codecov"

    def test_pull_request_variables(self):
        coveralls = CoverageServiceKind.COVERALLS
        assert (
            coverage_services.needs_pull_request_number(CIKind.CIRCLECI, coveralls)
            == "CIRCLE_PULL_REQUEST"
        )
        assert (
            coverage_services.needs_pull_request_number(CIKind.GITHUB_ACTIONS, coveralls)
            == "PULL_REQUEST_NUMBER"
        )
        assert coverage_services.needs_pull_request_number(CIKind.TRAVIS, coveralls) is None
        for kind in CIKind:
            assert (
                coverage_services.needs_pull_request_number(
                    kind, CoverageServiceKind.CODECOV
                )
                is None
            )

    def test_repo_token_and_git_policies(self):
        coveralls = CoverageServiceKind.COVERALLS
        for kind in (CIKind.CIRCLECI, CIKind.GITHUB_ACTIONS):
            assert coverage_services.needs_repo_token(kind, coveralls)
            assert coverage_services.needs_git_info(kind, coveralls)
        assert not coverage_services.needs_repo_token(CIKind.TRAVIS, coveralls)
        assert not coverage_services.needs_git_info(CIKind.TRAVIS, coveralls)
        assert not coverage_services.needs_repo_token(
            CIKind.GITHUB_ACTIONS, CoverageServiceKind.CODECOV
        )

    def test_repo_token_variables(self):
        assert coverage_services.repo_token_variables(CoverageServiceKind.CODECOV) == [
            "CODECOV_TOKEN"
        ]
        assert coverage_services.repo_token_variables(CoverageServiceKind.COVERALLS) == [
            "COVERALLS_REPO_TOKEN"
        ]
