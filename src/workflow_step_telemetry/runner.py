"""GitHub Actions runner commands.

Inputs arrive as ``INPUT_*`` environment variables, state and environment
changes are handed back to the runner through the files named by
``GITHUB_ENV``, ``GITHUB_PATH``, ``GITHUB_STATE`` and ``GITHUB_STEP_SUMMARY``.
"""

import os
import uuid

from .errors import ConfigurationError
from .utils.logging import log_debug


def get_input(name: str, required: bool = False) -> str:
    """Read an action input.

    Parameters
    ----------
    name : str
        Input name as declared in ``action.yml``.
    required : bool, optional
        Raise when the input is empty (default=False).

    Returns
    -------
    str
        Stripped input value, empty string if unset.

    Raises
    ------
    ConfigurationError
        If ``required`` is True and the input is empty.

    """
    key = "INPUT_" + name.replace(" ", "_").upper()
    value = os.environ.get(key, "").strip()
    if required and not value:
        raise ConfigurationError(f"Input required and not supplied: {name}")
    return value


def get_boolean_input(name: str) -> bool:
    """Read an action input as a boolean; only ``true`` is truthy."""
    return get_input(name).lower() == "true"


def _append_file_command(env_var: str, key: str, value: str) -> bool:
    """Append ``key<<delimiter`` block to the runner file named by ``env_var``.

    Returns False when the runner did not provide the file.
    """
    path = os.environ.get(env_var)
    if not path:
        return False
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{key}<<{delimiter}\n{value}\n{delimiter}\n")
    return True


def export_variable(name: str, value: str) -> None:
    """Set an environment variable for this process and later steps."""
    os.environ[name] = value
    if not _append_file_command("GITHUB_ENV", name, value):
        log_debug(f"GITHUB_ENV not set, {name} exported to this process only")


def add_path(directory: str) -> None:
    """Prepend a directory to ``PATH`` for this process and later steps."""
    os.environ["PATH"] = os.pathsep.join([directory, os.environ.get("PATH", "")])
    path_file = os.environ.get("GITHUB_PATH")
    if path_file:
        with open(path_file, "a", encoding="utf-8") as f:
            f.write(f"{directory}\n")


def save_state(name: str, value: str) -> None:
    """Persist a value for the post step of this action."""
    if not _append_file_command("GITHUB_STATE", name, value):
        log_debug(f"GITHUB_STATE not set, state {name} not saved")


def get_state(name: str) -> str:
    """Read a value saved by ``save_state`` during the main step."""
    return os.environ.get(f"STATE_{name}", "")


def set_secret(value: str) -> None:
    """Mask a value in the job log."""
    if value:
        print(f"::add-mask::{value}", flush=True)


def set_failed(message: str) -> None:
    """Annotate the step with an error; the caller decides the exit status."""
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    print(f"::error::{escaped}", flush=True)


def append_summary(content: str) -> None:
    """Append markdown to the job summary.

    Raises
    ------
    ConfigurationError
        If the runner did not provide ``GITHUB_STEP_SUMMARY``.

    """
    path = os.environ.get("GITHUB_STEP_SUMMARY")
    if not path:
        raise ConfigurationError(
            "Unable to find environment variable for GITHUB_STEP_SUMMARY. "
            "Check if your runtime environment supports job summaries."
        )
    with open(path, "a", encoding="utf-8") as f:
        f.write(content + "\n")
