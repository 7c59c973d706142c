"""Download and install the buildevents executable."""

import os
import platform
import stat
import subprocess
import tempfile

from .. import runner
from ..errors import InstallationError, UnsupportedPlatformError
from ..utils.logging import log_info

BUILDEVENTS_REPO = "honeycombio/buildevents"
CI_PROVIDER = "workflow-step-telemetry"

_OS_NAMES = {"windows": "windows", "darwin": "darwin", "linux": "linux"}
_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
}


def construct_executable_name(
    system: str | None = None, machine: str | None = None
) -> str:
    """Name of the buildevents release asset for a platform.

    Parameters
    ----------
    system : str or None, optional
        OS name as from ``platform.system()``. Defaults to the host.
    machine : str or None, optional
        Architecture as from ``platform.machine()``. Defaults to the host.

    Returns
    -------
    str
        Asset name such as ``buildevents-linux-amd64``.

    Raises
    ------
    UnsupportedPlatformError
        If the OS or architecture has no release asset.

    """
    system = system if system is not None else platform.system()
    machine = machine if machine is not None else platform.machine()

    os_name = _OS_NAMES.get(system.lower())
    if os_name is None:
        raise UnsupportedPlatformError(f"Unsupported platform: {system}")
    arch_name = _ARCH_NAMES.get(machine.lower())
    if arch_name is None:
        raise UnsupportedPlatformError(f"Unsupported architecture: {machine}")

    extension = ".exe" if os_name == "windows" else ""
    return f"buildevents-{os_name}-{arch_name}{extension}"


def install(apikey: str, apihost: str, dataset: str, gh_token: str = "") -> str:
    """Install the latest buildevents release and configure it.

    Parameters
    ----------
    apikey : str
        Honeycomb API key.
    apihost : str
        Honeycomb API host, empty for the buildevents default.
    dataset : str
        Honeycomb dataset.
    gh_token : str, optional
        Token for ``gh release download``.

    Returns
    -------
    str
        Path of the installed executable.

    Raises
    ------
    UnsupportedPlatformError
        If no asset exists for this platform.
    InstallationError
        If the download fails, with the gh error output.

    """
    log_info("Downloading and installing buildevents")

    asset = construct_executable_name()
    log_info(f"Downloading {asset} from {BUILDEVENTS_REPO} latest release")

    tool_dir = tempfile.mkdtemp(
        prefix="buildevents-", dir=os.environ.get("RUNNER_TEMP") or None
    )

    env = os.environ.copy()
    if gh_token:
        env["GH_TOKEN"] = gh_token
    try:
        subprocess.run(
            [
                "gh",
                "release",
                "download",
                "--repo",
                BUILDEVENTS_REPO,
                "--pattern",
                asset,
                "--dir",
                tool_dir,
            ],
            capture_output=True,
            text=True,
            check=True,
            env=env,
        )
    except subprocess.CalledProcessError as e:
        raise InstallationError(
            f"Failed to download {asset}: {(e.stderr or '').strip() or e}"
        ) from e

    # Rename so the executable can be called as plain "buildevents"
    extension = ".exe" if asset.endswith(".exe") else ""
    tool_path = os.path.join(tool_dir, f"buildevents{extension}")
    os.replace(os.path.join(tool_dir, asset), tool_path)
    mode = os.stat(tool_path).st_mode
    os.chmod(tool_path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    runner.add_path(tool_dir)

    runner.export_variable("BUILDEVENT_APIKEY", apikey)
    runner.export_variable("BUILDEVENT_APIHOST", apihost)
    runner.export_variable("BUILDEVENT_DATASET", dataset)
    runner.export_variable("BUILDEVENT_CIPROVIDER", CI_PROVIDER)

    return tool_path
