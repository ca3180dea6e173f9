"""Subprocess helpers shared by the git and gh gateways."""

import logging
import os
import subprocess
import time
from pathlib import Path

logger = logging.getLogger(__name__)

_GH_COMMAND_TIMEOUT = 60  # seconds


def _build_timing_description(cmd: list[str]) -> str:
    """Build a loggable description of a command.

    GraphQL query bodies are replaced by their length so debug logs stay readable.
    """
    parts: list[str] = []
    for arg in cmd:
        if arg.startswith("query="):
            parts.append(f"query=<{len(arg) - len('query=')} chars>")
        else:
            parts.append(arg)
    return " ".join(parts)


def copied_env_for_git_subprocess() -> dict[str, str]:
    """Copy of the environment that never lets git block on a credential prompt."""
    env = os.environ.copy()
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def run_subprocess_with_context(
    cmd: list[str],
    *,
    operation_context: str,
    cwd: Path,
    check: bool = True,
    timeout: float | None = None,
    env: dict[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command, enriching failures with what was being attempted.

    Args:
        cmd: Command and arguments
        operation_context: Human-readable description, e.g. "list local branches"
        cwd: Working directory
        check: Raise on non-zero exit when True
        timeout: Seconds before the command is killed
        env: Environment override

    Returns:
        The completed process (stdout/stderr decoded as text)

    Raises:
        RuntimeError: If the command exits non-zero (check=True) or times out
        FileNotFoundError: If the executable is not installed
    """
    description = _build_timing_description(cmd)
    logger.debug("Running: %s (cwd=%s)", description, cwd)
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=check,
            timeout=timeout,
            env=env,
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        msg = f"Failed to {operation_context}\nCommand: {description}\nExit code: {e.returncode}"
        if stderr:
            msg += f"\nstderr: {stderr}"
        raise RuntimeError(msg) from e
    except subprocess.TimeoutExpired as e:
        raise RuntimeError(
            f"Failed to {operation_context}\nCommand: {description}\n"
            f"Timed out after {timeout} seconds"
        ) from e
    finally:
        logger.debug("Finished in %.3fs: %s", time.monotonic() - start, description)
    return result


def execute_gh_command(cmd: list[str], cwd: Path, *, operation_context: str) -> str:
    """Execute a gh CLI command and return stdout.

    Raises:
        RuntimeError: If the command fails, with enriched error context
        FileNotFoundError: If gh is not installed
    """
    result = run_subprocess_with_context(
        cmd,
        operation_context=operation_context,
        cwd=cwd,
        timeout=_GH_COMMAND_TIMEOUT,
    )
    return result.stdout
