"""
Host-side helper for running a sidecar as a child process.

The host writes one request to the child's stdin, waits up to a timeout for
it to exit, and collects stdout, stderr and the exit code. Failures to run
the child are reported on the result rather than raised.
"""

import json
import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from .config_manager import get_config
from .data_types import SidecarResponse

logger = logging.getLogger(__name__)


@dataclass
class SidecarResult:
    """Outcome of one sidecar process run."""

    stdout: str = ""
    stderr: str = ""
    exit_code: Optional[int] = None
    timed_out: bool = False
    error: Optional[str] = None
    response: Optional[SidecarResponse] = None

    @property
    def success(self) -> bool:
        """True when the process ran and reported a successful response."""
        return self.error is None and self.response is not None and self.response.success


def _build_argv(command: Union[str, Sequence[str]]) -> List[str]:
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


def parse_response(stdout: str) -> Optional[SidecarResponse]:
    """Parse the first line of a sidecar's stdout, or None if it is not a response."""
    line = stdout.strip().splitlines()[0] if stdout.strip() else ""
    if not line:
        return None
    try:
        return SidecarResponse.model_validate(json.loads(line))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Sidecar output is not a valid response: {e}")
        return None


def invoke_sidecar(
    command: Union[str, Sequence[str]],
    action: str,
    data: str,
    timeout: Optional[float] = None,
    env: Optional[Dict[str, str]] = None,
    cwd: Optional[str] = None,
) -> SidecarResult:
    """
    Run a sidecar once with a single request.

    Args:
        command: Executable and arguments, as a list or a shell-style string
        action: Action name for the request
        data: Request payload
        timeout: Seconds to wait before the child is killed (defaults to the
            configured timeout)
        env: Extra environment variables for the child
        cwd: Working directory for the child

    Returns:
        SidecarResult with the captured output and the parsed response
    """
    if timeout is None:
        timeout = get_config().timeout

    argv = _build_argv(command)
    if not argv:
        return SidecarResult(error="empty sidecar command")
    request = json.dumps({"action": action, "data": data})

    child_env = None
    if env:
        child_env = os.environ.copy()
        child_env.update(env)

    logger.debug(f"Running sidecar {argv} with action {action}")
    try:
        completed = subprocess.run(
            argv,
            input=request,
            text=True,
            encoding="utf-8",
            capture_output=True,
            timeout=timeout,
            env=child_env,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired as e:
        logger.warning(f"Sidecar {argv[0]} timed out after {timeout} seconds")
        return SidecarResult(
            stdout=_as_text(e.stdout),
            stderr=_as_text(e.stderr),
            timed_out=True,
            error=f"sidecar timed out after {timeout} seconds",
        )
    except OSError as e:
        logger.warning(f"Failed to start sidecar {argv[0]}: {e}")
        return SidecarResult(error=str(e))

    return SidecarResult(
        stdout=completed.stdout,
        stderr=completed.stderr,
        exit_code=completed.returncode,
        response=parse_response(completed.stdout),
    )


def _as_text(value: Union[str, bytes, None]) -> str:
    # TimeoutExpired carries bytes even when text=True was requested
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
