# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/test_cli.py

"""Tests for the snapdiff command line."""

import pytest
from typer.testing import CliRunner

from snapdiff.cli import app


runner = CliRunner()


def diff_args(env):
    return ["diff", str(env.snap_dir), env.snap1, env.snap2, str(env.result_dir)]


class TestDiffCommand:

    def test_success(self, stream_env):
        result = runner.invoke(app, diff_args(stream_env))
        assert result.exit_code == 0, result.output
        assert "completed successfully" in result.output
        assert (stream_env.result_dir / "serialized_json" / "0.json").exists()

    def test_no_json(self, stream_env):
        result = runner.invoke(app, diff_args(stream_env) + ["--no-json"])
        assert result.exit_code == 0, result.output
        assert list((stream_env.result_dir / "serialized_json").iterdir()) == []

    def test_failure(self, stream_env):
        (stream_env.result_dir / "leftover").write_text("")
        result = runner.invoke(app, diff_args(stream_env))
        assert result.exit_code == 1
        assert "please check log file" in result.output
        assert "is not empty" in result.output

    def test_missing_arguments(self):
        result = runner.invoke(app, ["diff", "/only/one"])
        assert result.exit_code != 0


class TestSummaryCommand:

    @pytest.fixture
    def finished_run(self, stream_env):
        assert runner.invoke(app, diff_args(stream_env)).exit_code == 0
        return stream_env.result_dir

    def test_summary(self, finished_run):
        result = runner.invoke(app, ["summary", str(finished_run)])
        assert result.exit_code == 0, result.output
        assert "Summary of 5 changes" in result.output
        assert "rename: 1" in result.output

    def test_table(self, finished_run):
        result = runner.invoke(app, ["summary", str(finished_run), "--format", "table"])
        assert result.exit_code == 0, result.output
        assert "Snapshot Changes" in result.output

    def test_unknown_format(self, finished_run):
        result = runner.invoke(app, ["summary", str(finished_run), "-f", "xml"])
        assert result.exit_code == 1

    def test_not_a_result_dir(self, tmp_path):
        result = runner.invoke(app, ["summary", str(tmp_path)])
        assert result.exit_code == 1


class TestDiffErrorsWithoutLog:

    def test_missing_result_dir_reason_shown(self, stream_env, tmp_path):
        args = ["diff", str(stream_env.snap_dir), stream_env.snap1,
                stream_env.snap2, str(tmp_path / "nowhere")]
        result = runner.invoke(app, args)
        assert result.exit_code == 1
        assert "is not a directory" in result.output

    def test_log_file_failure_reported(self, stream_env, monkeypatch):
        import logging

        def refuse(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(logging, "FileHandler", refuse)
        result = runner.invoke(app, diff_args(stream_env))
        assert result.exit_code == 1
        assert "Could not open log file" in result.output
