"""Wrapper for the Claude Code CLI used by the AI-powered commands."""

import logging
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from obsi.core.types import ClaudeTools

logger = logging.getLogger(__name__)

CLAUDE_BINARY = "claude"


def is_installed() -> bool:
    """Check whether the claude binary is on PATH."""
    return shutil.which(CLAUDE_BINARY) is not None


def install_instructions() -> str:
    """Instructions printed when claude is missing."""
    return "Claude Code not found. Install it first:\n  npm install -g @anthropic-ai/claude-code"


def build_command(
    system_prompt: str,
    user_prompt: str,
    allowed_tools: Sequence[ClaudeTools | str],
) -> list[str]:
    """
    Build the argument list for a one-shot claude run.

    Args:
        system_prompt: System prompt for the run
        user_prompt: Task prompt passed with -p
        allowed_tools: Tools the assistant may use without asking

    Returns:
        argv list
    """
    tools = ",".join(str(tool) for tool in allowed_tools)
    return [
        CLAUDE_BINARY,
        "--system-prompt",
        system_prompt,
        "--allowedTools",
        tools,
        "-p",
        user_prompt,
    ]


def run_claude(
    system_prompt: str,
    user_prompt: str,
    allowed_tools: Sequence[ClaudeTools | str],
    cwd: Path | None = None,
) -> int:
    """
    Run claude with the terminal's stdio attached and wait for it.

    Returns:
        The process exit code (1 if it could not be started)
    """
    command = build_command(system_prompt, user_prompt, allowed_tools)
    logger.debug(
        f"Running claude: tools={command[4]}, cwd={cwd}, prompt={user_prompt[:80]!r}"
    )
    try:
        result = subprocess.run(command, cwd=cwd, check=False)
    except OSError as e:
        logger.error(f"Failed to start {CLAUDE_BINARY}: {e}")
        return 1
    return result.returncode


def launch_session(cwd: Path) -> int:
    """Start an interactive claude session in a directory."""
    logger.debug(f"Launching claude session in {cwd}")
    try:
        result = subprocess.run(
            [CLAUDE_BINARY, "--dangerously-skip-permissions"], cwd=cwd, check=False
        )
    except OSError as e:
        logger.error(f"Failed to start {CLAUDE_BINARY}: {e}")
        return 1
    return result.returncode
