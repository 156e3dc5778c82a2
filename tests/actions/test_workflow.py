"""
Unit tests for the GitHub Actions workflow adapter.
"""

import io
import logging
import os
from pathlib import Path

import pytest
import responses
from unittest.mock import patch

from setup_slotalk.actions.workflow import (
    OUTPUT_NAME,
    PathUpdate,
    WorkflowCommandHandler,
    add_path,
    configure_workflow_logging,
    get_input,
    group,
    run_action,
    set_output,
)
from setup_slotalk.core.exceptions import InputError

PINNED_URL = (
    "https://github.com/tfadeyi/slotalk/releases/download/v1.2.3/"
    "slotalk-linux-amd64.tar.gz"
)


class TestGetInput:
    def test_read(self):
        assert get_input("version", environ={"INPUT_VERSION": " 1.2.3 "}) == "1.2.3"

    def test_name_mangling(self):
        assert get_input("my input", environ={"INPUT_MY_INPUT": "x"}) == "x"

    def test_optional_missing(self):
        assert get_input("version", environ={}) == ""

    def test_required_missing(self):
        with pytest.raises(InputError, match="version"):
            get_input("version", required=True, environ={})


class TestSetOutput:
    def test_output_file(self, tmp_path):
        output_file = tmp_path / "output"
        output_file.write_text("other=1\n")

        set_output(OUTPUT_NAME, "/opt/slotalk", {"GITHUB_OUTPUT": str(output_file)})

        assert output_file.read_text() == "other=1\nslotalk-path=/opt/slotalk\n"

    def test_legacy_command(self):
        stream = io.StringIO()

        set_output(OUTPUT_NAME, "/opt/slotalk", {}, stream=stream)

        assert stream.getvalue() == "::set-output name=slotalk-path::/opt/slotalk\n"


class TestAddPath:
    """Test best-effort search path updates."""

    def test_prepends(self, tmp_path):
        path_file = tmp_path / "path"
        environ = {"GITHUB_PATH": str(path_file)}

        update = add_path("/opt/slotalk/bin", "/usr/bin", environ)

        assert update.applied is True
        assert update.failed is False
        assert update.path == "/opt/slotalk/bin" + os.pathsep + "/usr/bin"
        assert environ["PATH"] == update.path
        assert path_file.read_text() == "/opt/slotalk/bin\n"

    def test_already_first(self):
        environ = {}

        update = add_path("/opt/slotalk/bin", "/opt/slotalk/bin:/usr/bin", environ)

        assert update == PathUpdate(
            directory="/opt/slotalk/bin",
            applied=False,
            path="/opt/slotalk/bin:/usr/bin",
        )
        assert "PATH" not in environ

    def test_empty_current_path(self, tmp_path):
        environ = {"GITHUB_PATH": str(tmp_path / "path")}

        update = add_path("/opt/slotalk/bin", "", environ)

        assert update.path == "/opt/slotalk/bin"

    def test_failure_captured(self, tmp_path):
        """Test a failing update is reported, never raised."""
        environ = {"GITHUB_PATH": str(tmp_path / "missing-dir" / "path")}

        update = add_path("/opt/slotalk/bin", "/usr/bin", environ)

        assert update.applied is False
        assert update.failed is True
        assert isinstance(update.error, OSError)
        assert update.path == "/usr/bin"
        assert "PATH" not in environ

    def test_without_path_file(self, capsys, caplog):
        """Test nothing is applied when the runner provides no GITHUB_PATH."""
        environ = {}

        update = add_path("/opt/slotalk/bin", "/usr/bin", environ)

        assert update.applied is False
        assert update.failed is False
        assert update.path == "/usr/bin"
        assert "PATH" not in environ
        assert "::add-path::" not in capsys.readouterr().out
        assert "GITHUB_PATH is not set" in caplog.text


class TestWorkflowLogging:
    def _logger(self, stream):
        logger = logging.getLogger("test.workflow")
        logger.handlers = []
        logger.propagate = False
        logger.setLevel(logging.DEBUG)
        logger.addHandler(WorkflowCommandHandler(stream))
        return logger

    def test_levels(self):
        stream = io.StringIO()
        logger = self._logger(stream)

        logger.debug("walking")
        logger.info("cached")
        logger.warning("unsupported")
        logger.error("failed")

        assert stream.getvalue().splitlines() == [
            "::debug::walking",
            "cached",
            "::warning::unsupported",
            "::error::failed",
        ]

    def test_multiline_escaped(self):
        stream = io.StringIO()
        logger = self._logger(stream)

        logger.warning("line one\nline two 100%")

        assert stream.getvalue() == "::warning::line one%0Aline two 100%25\n"

    def test_group(self):
        stream = io.StringIO()

        with group("Downloading slotalk v1.2.3", stream):
            stream.write("inside\n")

        assert stream.getvalue().splitlines() == [
            "::group::Downloading slotalk v1.2.3",
            "inside",
            "::endgroup::",
        ]

    def test_configure_replaces_root_handlers(self):
        stream = io.StringIO()

        handler = configure_workflow_logging(stream)
        logging.getLogger("setup_slotalk.test").warning("careful")

        assert logging.getLogger().handlers == [handler]
        assert stream.getvalue() == "::warning::careful\n"


class TestRunAction:
    """End-to-end runs of the pipeline step."""

    @pytest.fixture
    def environ(self, tmp_path, cache_root, isolated_env):
        (tmp_path / "work").mkdir()
        return {
            "INPUT_VERSION": "1.2.3",
            "RUNNER_TOOL_CACHE": str(cache_root),
            "GITHUB_OUTPUT": str(tmp_path / "output"),
            "GITHUB_PATH": str(tmp_path / "path"),
            "PATH": "/usr/bin",
        }

    @responses.activate
    def test_install_and_publish(self, environ, tmp_path, slotalk_archive, monkeypatch):
        monkeypatch.chdir(tmp_path / "work")
        responses.add(responses.GET, PINNED_URL, body=slotalk_archive, status=200)

        with patch("platform.system", return_value="Linux"), patch(
            "platform.machine", return_value="x86_64"
        ):
            exit_code = run_action(environ)

        assert exit_code == 0
        output = (tmp_path / "output").read_text().strip()
        name, value = output.split("=", 1)
        assert name == "slotalk-path"
        assert value.endswith(os.path.join("bin", "slotalk"))
        assert Path(value).is_file()
        assert (tmp_path / "path").read_text().strip() == str(Path(value).parent)
        assert environ["PATH"].startswith(str(Path(value).parent))

    def test_cached_version_no_download(self, environ, tmp_path, cache_root, monkeypatch):
        from setup_slotalk.core.tool_cache import ToolCache

        monkeypatch.chdir(tmp_path / "work")
        tree = tmp_path / "tree"
        (tree / "bin").mkdir(parents=True)
        (tree / "bin" / "slotalk").write_text("binary")
        root = ToolCache(cache_root).cache_dir(tree, "slotalk", "v1.2.3")

        with patch("setup_slotalk.core.installer.download_file") as mock_download:
            exit_code = run_action(environ)

        assert exit_code == 0
        mock_download.assert_not_called()
        assert (tmp_path / "output").read_text() == (
            f"slotalk-path={root / 'bin' / 'slotalk'}\n"
        )

    def test_missing_input(self, environ, capsys):
        del environ["INPUT_VERSION"]

        assert run_action(environ) == 1
        assert "::error::Input required and not supplied: version" in capsys.readouterr().out

    @responses.activate
    def test_download_failure(self, environ, tmp_path, capsys, monkeypatch):
        monkeypatch.chdir(tmp_path / "work")
        responses.add(responses.GET, PINNED_URL, status=404)

        with patch("platform.system", return_value="Linux"), patch(
            "platform.machine", return_value="x86_64"
        ):
            exit_code = run_action(environ)

        assert exit_code == 1
        out = capsys.readouterr().out
        assert f"::error::Failed to download slotalk from location {PINNED_URL}" in out
        assert not (tmp_path / "output").exists()

    @responses.activate
    def test_unusable_cache_root(self, environ, tmp_path, slotalk_archive, capsys, monkeypatch):
        """Test a cache root that is a regular file fails the step cleanly."""
        monkeypatch.chdir(tmp_path / "work")
        not_a_dir = tmp_path / "not-a-dir"
        not_a_dir.write_text("")
        environ["RUNNER_TOOL_CACHE"] = str(not_a_dir)
        responses.add(responses.GET, PINNED_URL, body=slotalk_archive, status=200)

        with patch("platform.system", return_value="Linux"), patch(
            "platform.machine", return_value="x86_64"
        ):
            exit_code = run_action(environ)

        assert exit_code == 1
        out = capsys.readouterr().out
        assert "::error::" in out
        assert str(not_a_dir) in out
        assert not (tmp_path / "output").exists()

    def test_os_error_reported(self, environ, tmp_path, capsys, monkeypatch):
        monkeypatch.chdir(tmp_path / "work")

        with patch(
            "setup_slotalk.actions.workflow.SlotalkInstaller.install",
            side_effect=PermissionError(13, "Permission denied", "/opt/cache"),
        ):
            exit_code = run_action(environ)

        assert exit_code == 1
        assert "::error::[Errno 13] Permission denied: '/opt/cache'" in capsys.readouterr().out

    def test_unsupported_platform(self, environ, tmp_path, capsys, monkeypatch):
        monkeypatch.chdir(tmp_path / "work")

        with patch("platform.system", return_value="Windows"), patch(
            "platform.machine", return_value="AMD64"
        ):
            exit_code = run_action(environ)

        assert exit_code == 1
        assert "Windows/AMD64" in capsys.readouterr().out

    @responses.activate
    def test_path_failure_not_fatal(self, environ, tmp_path, slotalk_archive, monkeypatch):
        monkeypatch.chdir(tmp_path / "work")
        environ["GITHUB_PATH"] = str(tmp_path / "missing-dir" / "path")
        responses.add(responses.GET, PINNED_URL, body=slotalk_archive, status=200)

        with patch("platform.system", return_value="Linux"), patch(
            "platform.machine", return_value="x86_64"
        ):
            exit_code = run_action(environ)

        assert exit_code == 0
        assert (tmp_path / "output").read_text().startswith("slotalk-path=")
