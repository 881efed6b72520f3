"""Wrapper around the external vault CLI (obsidian-cli, binary `obs`).

Structural operations that need link updates (move, delete) and the
default-vault lookup go through `obs`. Success is judged by exit code.
"""

import logging
import shutil
import subprocess

from obsi.core.types import CommandResult, OperationResult, VaultInfo

logger = logging.getLogger(__name__)

OBS_BINARY = "obs"

# obs subcommands that are passed through untouched
PROXY_COMMANDS = ("create", "set-default", "print-default")


def is_installed() -> bool:
    """Check whether the obs binary is on PATH."""
    return shutil.which(OBS_BINARY) is not None


def install_instructions() -> str:
    """Instructions printed when obs is missing."""
    return """obsidian-cli not found. Install it:

  brew tap yakitrak/yakitrak
  brew install obsidian-cli

Then set your default vault:
  obs set-default <vault-name>"""


def run(args: list[str]) -> CommandResult:
    """
    Run obs and capture its output.

    Args:
        args: Arguments after the binary name

    Returns:
        CommandResult with stripped stdout/stderr
    """
    logger.debug(f"Running: {OBS_BINARY} {' '.join(args)}")
    try:
        result = subprocess.run(
            [OBS_BINARY, *args], capture_output=True, text=True, check=False
        )
    except OSError as e:
        logger.debug(f"Failed to start {OBS_BINARY}: {e}")
        return CommandResult(success=False, error=str(e))

    return CommandResult(
        success=result.returncode == 0,
        output=(result.stdout or "").strip(),
        error=(result.stderr or "").strip(),
    )


def proxy(args: list[str]) -> int:
    """
    Run obs with the terminal's stdio attached.

    Returns:
        The process exit code
    """
    logger.debug(f"Proxying: {OBS_BINARY} {' '.join(args)}")
    try:
        result = subprocess.run([OBS_BINARY, *args], check=False)
    except OSError as e:
        logger.error(f"Failed to start {OBS_BINARY}: {e}")
        return 1
    return result.returncode


def parse_default_vault(output: str) -> VaultInfo | None:
    """
    Parse `obs print-default` output.

    The output looks like:
        Default vault name:  Obsi
        Default vault path:  /path/to/vault
    """
    name = ""
    path = ""
    for line in output.splitlines():
        if "vault name" in line:
            name = line.split(":", 1)[1].strip() if ":" in line else ""
        elif "vault path" in line:
            path = line.split(":", 1)[1].strip() if ":" in line else ""

    if name and path:
        return VaultInfo(name=name, path=path)
    return None


def get_default_vault() -> VaultInfo | None:
    """Get the default vault name and path from obs, or None."""
    result = run(["print-default"])
    if not result.success:
        return None
    return parse_default_vault(result.output)


def move(source: str, destination: str) -> OperationResult:
    """Move or rename a note; obs rewrites links to it."""
    result = run(["move", source, destination])
    return OperationResult(success=result.success, error=result.error)


def delete(name: str) -> OperationResult:
    """Delete a note through obs."""
    result = run(["delete", name])
    return OperationResult(success=result.success, error=result.error)
