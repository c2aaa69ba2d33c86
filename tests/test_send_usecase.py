"""
Tests for the send use case.

Covers parameter resolution from CI environments, the upload step, and
the cases that must stop the run.
"""

import json
from pathlib import Path

import pytest

from covrelay.adapters.io.reporter_coveralls import CoverallsReportWriter
from covrelay.application.send_usecase import LazyCI, SendReportUseCase
from covrelay.domain.models import (
    CIKind,
    CoverageInputs,
    CoverageServiceKind,
    FatalConfigurationError,
    SendOptions,
)
from tests.fakes import FakeLoader, FakeUploader, FakeVcs


class RecordingEnviron(dict):
    """Environment mapping that records which variables were read."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reads: list[str] = []

    def get(self, key, default=None):
        self.reads.append(key)
        return super().get(key, default)


def _usecase(environ, loader=None, uploader=None, vcs=None, resolver=None):
    return SendReportUseCase(
        loader=loader or FakeLoader(),
        resolver_factory=lambda paths, ignore: resolver or (lambda _: None),
        writer=CoverallsReportWriter(vcs or FakeVcs()),
        uploader=uploader or FakeUploader(),
        environ=environ,
    )


class TestLazyCI:
    """Test compute-once CI detection."""

    def test_detects_once(self):
        environ = RecordingEnviron(TRAVIS="true")
        ci = LazyCI(environ)

        assert ci.get() is CIKind.TRAVIS
        reads = len(environ.reads)
        assert ci.get() is CIKind.TRAVIS
        assert len(environ.reads) == reads

    def test_no_ci_is_fatal(self):
        with pytest.raises(FatalConfigurationError, match="not in CI"):
            LazyCI({}).get()


class TestResolve:
    """Test filling in parameters from the environment."""

    def test_no_service_leaves_options_alone(self):
        environ = RecordingEnviron(CIRCLECI="true", CIRCLE_BUILD_NUM="5")
        options = SendOptions(to_file="out/report.json", service_name="custom")

        config = _usecase(environ).resolve(options, None)

        assert config.to_file == "out/report.json"
        assert config.service_name == "custom"
        assert config.service_job_id == ""
        assert config.include_git is False
        assert environ.reads == []

    def test_no_ci_probe_when_everything_is_supplied(self):
        environ = RecordingEnviron()
        options = SendOptions(
            service_name="travis-ci",
            service_job_id="1",
            service_pull_request="2",
            repo_token="t",
            git=True,
        )

        config = _usecase(environ).resolve(options, CoverageServiceKind.COVERALLS)

        assert environ.reads == []
        assert config.service_name == "travis-ci"
        assert config.include_git is True

    def test_service_forces_report_filename(self):
        options = SendOptions(
            to_file="elsewhere.json",
            service_name="x",
            service_job_id="1",
            service_pull_request="2",
            repo_token="t",
            git=True,
        )

        config = _usecase({}).resolve(options, CoverageServiceKind.CODECOV)

        assert config.to_file == "coverage.json"

    def test_travis_coveralls(self):
        environ = {"TRAVIS": "true", "TRAVIS_JOB_ID": "123"}

        config = _usecase(environ).resolve(SendOptions(), CoverageServiceKind.COVERALLS)

        assert config.service_name == "travis-ci"
        assert config.service_job_id == "123"
        assert config.service_pull_request == ""
        assert config.repo_token == ""
        assert config.include_git is False

    def test_github_coveralls(self):
        environ = {
            "GITHUB_ACTIONS": "true",
            "GITHUB_RUN_NUMBER": "77",
            "PULL_REQUEST_NUMBER": "12",
            "COVERALLS_REPO_TOKEN": "tok",
        }

        config = _usecase(environ).resolve(SendOptions(), CoverageServiceKind.COVERALLS)

        assert config.service_name == "github"
        assert config.service_job_id == "77"
        assert config.service_pull_request == "12"
        assert config.repo_token == "tok"
        assert config.include_git is True

    def test_circleci_missing_pull_request_is_left_unset(self):
        environ = {
            "CIRCLECI": "true",
            "CIRCLE_BUILD_NUM": "9",
            "COVERALLS_REPO_TOKEN": "tok",
        }

        config = _usecase(environ).resolve(SendOptions(), CoverageServiceKind.COVERALLS)

        assert config.service_pull_request == ""
        assert config.service_name == "circleci"

    def test_explicit_job_id_wins(self):
        environ = {"TRAVIS": "true", "TRAVIS_JOB_ID": "999"}
        options = SendOptions(service_job_id="42")

        config = _usecase(environ).resolve(options, CoverageServiceKind.COVERALLS)

        assert config.service_job_id == "42"

    def test_missing_job_id_is_fatal(self):
        with pytest.raises(FatalConfigurationError, match=r"\$TRAVIS_JOB_ID"):
            _usecase({"TRAVIS": "true"}).resolve(
                SendOptions(), CoverageServiceKind.CODECOV
            )

    def test_missing_repo_token_is_fatal(self):
        environ = {"GITHUB_ACTIONS": "true", "GITHUB_RUN_NUMBER": "1"}

        with pytest.raises(FatalConfigurationError, match=r"\$COVERALLS_REPO_TOKEN"):
            _usecase(environ).resolve(SendOptions(), CoverageServiceKind.COVERALLS)

    def test_codecov_needs_no_token(self):
        environ = {"GITHUB_ACTIONS": "true", "GITHUB_RUN_NUMBER": "1"}

        config = _usecase(environ).resolve(SendOptions(), CoverageServiceKind.CODECOV)

        assert config.repo_token == ""
        assert config.include_git is False

    def test_not_in_ci_is_fatal(self):
        with pytest.raises(FatalConfigurationError, match="unknown CI service"):
            _usecase({}).resolve(SendOptions(), CoverageServiceKind.COVERALLS)


class TestRun:
    """Test the whole run, including upload."""

    @pytest.fixture(autouse=True)
    def in_tmp(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        self.tmp_path = tmp_path

    def test_without_service_writes_report_only(self, fake_uploader):
        loader = FakeLoader()
        inputs = CoverageInputs(coverage_files=["a/.coverage"], expect=["src/"])

        result = _usecase({}, loader=loader, uploader=fake_uploader).run(
            SendOptions(to_file="report.json"), inputs
        )

        assert result is None
        assert fake_uploader.commands == []
        assert json.loads(Path("report.json").read_text()) == {"source_files": []}
        assert loader.calls == [(["a/.coverage"], [], ["src/"], [])]

    def test_upload_exit_code_is_returned_and_report_deleted(self):
        uploader = FakeUploader(returncode=22)
        environ = {"TRAVIS": "true", "TRAVIS_JOB_ID": "5"}
        options = SendOptions(service="Coveralls")

        result = _usecase(environ, uploader=uploader).run(options, CoverageInputs())

        assert result == 22
        assert uploader.commands == [
            "curl -L -F json_file=@./coverage.json https://coveralls.io/api/v1/jobs"
        ]
        assert not Path("coverage.json").exists()

    def test_dry_run_keeps_report_and_skips_upload(self, fake_uploader, caplog):
        environ = {"TRAVIS": "true", "TRAVIS_JOB_ID": "5"}
        options = SendOptions(service="Codecov", dry_run=True)

        with caplog.at_level("INFO"):
            result = _usecase(environ, uploader=fake_uploader).run(
                options, CoverageInputs()
            )

        assert result is None
        assert fake_uploader.commands == []
        report = json.loads(Path("coverage.json").read_text())
        assert report["service_name"] == "travis-ci"
        assert report["service_job_id"] == "5"
        assert "sending to Codecov with command:" in caplog.text
        assert "codecov.io/bash" in caplog.text

    def test_explicit_job_id_reaches_report(self, fake_uploader):
        environ = {"TRAVIS": "true", "TRAVIS_JOB_ID": "999"}
        options = SendOptions(service="Coveralls", service_job_id="42", dry_run=True)

        _usecase(environ, uploader=fake_uploader).run(options, CoverageInputs())

        report = json.loads(Path("coverage.json").read_text())
        assert report["service_job_id"] == "42"

    def test_unknown_service_is_fatal_before_loading(self):
        loader = FakeLoader()

        with pytest.raises(FatalConfigurationError):
            _usecase({}, loader=loader).run(SendOptions(service="bogus"), CoverageInputs())

        assert loader.calls == []

    def test_coverage_reaches_report(self, three_line_source):
        path, counts, offsets = three_line_source
        loader = FakeLoader({"a.py": counts}, {"a.py": offsets})

        _usecase({}, loader=loader, resolver=lambda _: path).run(
            SendOptions(to_file="out.json"), CoverageInputs()
        )

        report = json.loads(Path("out.json").read_text())
        assert report["source_files"][0]["coverage"] == [None, 2, 0]
