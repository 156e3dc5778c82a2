"""
GitHub Actions workflow adapter.

Reads step inputs from ``INPUT_*`` variables, publishes outputs through
the ``GITHUB_OUTPUT`` file, extends the job's search path through
``GITHUB_PATH`` and renders log records as workflow commands.
"""

import logging
import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, MutableMapping, Optional, TextIO

from setup_slotalk.config import load_config
from setup_slotalk.core.exceptions import InputError, SetupSlotalkError
from setup_slotalk.core.installer import SlotalkInstaller
from setup_slotalk.core.tool_cache import ToolCache
from setup_slotalk.core.version import normalize_version

logger = logging.getLogger(__name__)

OUTPUT_NAME = "slotalk-path"


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def issue_command(command: str, message: str = "", stream: Optional[TextIO] = None):
    """Write a ``::command::message`` line to stdout."""
    stream = stream or sys.stdout
    stream.write(f"::{command}::{_escape_data(str(message))}\n")
    stream.flush()


class WorkflowCommandHandler(logging.Handler):
    """Logging handler that renders records as workflow commands."""

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord):
        try:
            message = self.format(record)
            stream = self.stream or sys.stdout

            if record.levelno >= logging.ERROR:
                issue_command("error", message, stream)
            elif record.levelno >= logging.WARNING:
                issue_command("warning", message, stream)
            elif record.levelno >= logging.INFO:
                stream.write(message + "\n")
                stream.flush()
            else:
                issue_command("debug", message, stream)
        except Exception:
            self.handleError(record)


def configure_workflow_logging(stream: Optional[TextIO] = None) -> logging.Handler:
    """Route root logging through a WorkflowCommandHandler."""
    handler = WorkflowCommandHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    return handler


@contextmanager
def group(title: str, stream: Optional[TextIO] = None):
    """Fold the enclosed output into a collapsible log group."""
    issue_command("group", title, stream)
    try:
        yield
    finally:
        issue_command("endgroup", "", stream)


def get_input(
    name: str, required: bool = False, environ: Optional[Mapping[str, str]] = None
) -> str:
    """
    Read a step input.

    Args:
        name: Input name as declared by the step ('version')
        required: Raise if the input is missing or empty
        environ: Environment mapping (default: os.environ)

    Returns:
        Stripped input value ('' if not set)

    Raises:
        InputError: If required and not supplied
    """
    environ = os.environ if environ is None else environ
    var = "INPUT_" + name.replace(" ", "_").upper()
    value = environ.get(var, "").strip()

    if required and not value:
        raise InputError(f"Input required and not supplied: {name}")

    return value


def set_output(
    name: str,
    value: str,
    environ: Optional[Mapping[str, str]] = None,
    stream: Optional[TextIO] = None,
):
    """
    Publish a step output.

    Appends to the ``GITHUB_OUTPUT`` file, falling back to the
    ``set-output`` command when the runner does not provide one.
    """
    environ = os.environ if environ is None else environ
    output_file = environ.get("GITHUB_OUTPUT")

    if output_file:
        with open(output_file, "a", encoding="utf-8") as f:
            f.write(f"{name}={value}\n")
    else:
        stream = stream or sys.stdout
        stream.write(f"::set-output name={name}::{_escape_data(str(value))}\n")
        stream.flush()


@dataclass
class PathUpdate:
    """
    Result of a best-effort search path update.

    Attributes:
        directory: Directory that was to be added
        applied: True if the directory was prepended
        path: Resulting search path value
        error: Failure that prevented the update, if any
    """

    directory: str
    applied: bool
    path: str
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def add_path(
    directory: str,
    current_path: str,
    environ: Optional[MutableMapping[str, str]] = None,
) -> PathUpdate:
    """
    Prepend directory to the job's search path.

    Never raises: a failure is captured in the returned PathUpdate, the
    executable path is still published as an output.

    Args:
        directory: Directory holding the executable
        current_path: Current search path value
        environ: Environment mapping to update (default: os.environ)

    Returns:
        PathUpdate describing what happened
    """
    environ = os.environ if environ is None else environ

    if current_path.startswith(directory):
        return PathUpdate(directory=directory, applied=False, path=current_path)

    new_path = directory + os.pathsep + current_path if current_path else directory

    path_file = environ.get("GITHUB_PATH")
    if not path_file:
        # Runners no longer honour the add-path command
        logger.warning(f"GITHUB_PATH is not set, {directory} was not added to PATH")
        return PathUpdate(directory=directory, applied=False, path=current_path)

    try:
        with open(path_file, "a", encoding="utf-8") as f:
            f.write(directory + "\n")
        environ["PATH"] = new_path
    except OSError as e:
        logger.debug(f"Could not add {directory} to PATH: {e}")
        return PathUpdate(directory=directory, applied=False, path=current_path, error=e)

    return PathUpdate(directory=directory, applied=True, path=new_path)


def set_failed(message: str) -> int:
    """Report the step as failed; returns the exit code to use."""
    issue_command("error", message)
    return 1


def run_action(environ: Optional[MutableMapping[str, str]] = None) -> int:
    """
    Run the install step from workflow inputs.

    Returns:
        Exit code (0 on success, 1 on failure)
    """
    environ = os.environ if environ is None else environ

    try:
        raw_version = get_input("version", required=True, environ=environ)
        config = load_config(overrides={"version": raw_version}, environ=environ)
        version = normalize_version(config.version)

        cache = ToolCache(config.cache_dir, lock_timeout=config.lock_timeout)
        installer = SlotalkInstaller(
            cache,
            releases_base=config.releases_base,
            tool_name=config.tool_name,
            timeout=config.download_timeout,
        )

        with group(f"Downloading {config.tool_name} {version}"):
            result = installer.install(version)

    except (SetupSlotalkError, OSError) as e:
        return set_failed(str(e))

    cached_path = str(result.path)
    add_path(str(Path(cached_path).parent), environ.get("PATH", ""), environ)

    logger.info(
        f"Slotalk tool version '{result.version}' has been cached at {cached_path}"
    )
    try:
        set_output(OUTPUT_NAME, cached_path, environ)
    except OSError as e:
        return set_failed(f"Failed to set output {OUTPUT_NAME}: {e}")
    return 0


__all__ = [
    "OUTPUT_NAME",
    "issue_command",
    "WorkflowCommandHandler",
    "configure_workflow_logging",
    "group",
    "get_input",
    "set_output",
    "PathUpdate",
    "add_path",
    "set_failed",
    "run_action",
]
