"""
Agent invocation: one request/response round-trip per external process.

The invoker spawns the provider's command with the prompt in its arguments,
waits for it with a fixed timeout and classifies the outcome:

- exit 0: the trimmed standard output is the response
- non-zero exit: AgentProcessError (with exit code and stderr)
- failure to start: AgentSpawnError
- no completion in time: AgentTimeoutError (process group killed, output
  discarded)

Output is buffered in memory without a size cap, so a runaway agent can
grow memory without bound.

Example:
    >>> registry = AgentRegistry()
    >>> invoker = AgentInvoker(registry.lookup("claude"))
    >>> invoker.execute("Say hello")  # doctest: +SKIP
    'Hello!'
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
import sys
import time

from stories.core.agents.exceptions import (
    AgentProcessError,
    AgentSpawnError,
    AgentTimeoutError,
)
from stories.core.agents.models import ProviderDescriptor
from stories.core.agents.registry import AgentRegistry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

IS_UNIX = sys.platform != "win32"


class AgentInvoker:
    """
    Executes prompts against a single command-line agent.

    Attributes:
        provider: Launch recipe of the bound agent
        timeout: Seconds to wait before killing the agent process
    """

    def __init__(self, provider: ProviderDescriptor, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.provider = provider
        self.timeout = timeout

    @property
    def name(self) -> str:
        return self.provider.name

    def execute(self, prompt: str) -> str:
        """
        Run the agent with a prompt and return its response.

        Args:
            prompt: Prompt text (passed as process arguments, not stdin)

        Returns:
            Response text extracted from standard output

        Raises:
            AgentTimeoutError: If the process does not finish within timeout
            AgentProcessError: If the process exits with a non-zero status
            AgentSpawnError: If the process cannot be started
        """
        command = self.provider.build_command(prompt)
        logger.debug("Running agent %s: %s", self.provider.name, " ".join(command))

        started = time.monotonic()
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                # Own process group so a timeout kills the agent's children too
                start_new_session=IS_UNIX,
            )
        except OSError as e:
            raise AgentSpawnError(self.provider.command, e.strerror or str(e)) from e

        try:
            # No input is written; closing stdin right away
            stdout, stderr = process.communicate(input=None, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            _kill_process_group(process)
            logger.warning(
                "Agent %s timed out after %.1fs", self.provider.name, time.monotonic() - started
            )
            raise AgentTimeoutError(self.provider.command, self.timeout) from None

        if process.returncode != 0:
            logger.debug(
                "Agent %s exited with %d: %s", self.provider.name, process.returncode, stderr
            )
            raise AgentProcessError(self.provider.command, process.returncode, stderr)

        response = self.provider.parse_response(stdout)
        logger.info(
            "Agent %s responded with %d chars in %.1fs",
            self.provider.name,
            len(response),
            time.monotonic() - started,
        )
        return response


def _kill_process_group(process: subprocess.Popen[str]) -> None:
    """
    Kill the process group of a timed-out agent and reap it.

    Partial output left in the pipes is drained and dropped.
    """
    if process.poll() is not None:
        return

    try:
        if IS_UNIX:
            os.killpg(os.getpgid(process.pid), signal.SIGKILL)
        else:
            process.kill()
    except (ProcessLookupError, OSError) as e:
        # Process may have exited between poll() and kill
        logger.debug("Process kill failed (process may be dead): %s", e)

    try:
        process.communicate(timeout=5.0)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()


def command_available(descriptor: ProviderDescriptor) -> bool:
    """True if the descriptor's command resolves on PATH. The agent is not invoked."""
    try:
        return shutil.which(descriptor.command) is not None
    except (OSError, ValueError) as e:
        logger.debug("Availability probe for %s failed: %s", descriptor.name, e)
        return False


def probe_available(registry: AgentRegistry, name: str) -> bool:
    """
    Check whether the provider a name resolves to has its command on PATH.

    Any lookup failure reads as unavailable.

    Args:
        registry: Registry to resolve the name in
        name: Provider name

    Returns:
        True if the provider is known and its command is found
    """
    provider = registry.lookup(name)
    if provider is None:
        return False
    return command_available(provider)


def detect_available(registry: AgentRegistry) -> list[str]:
    """
    Probe every registered provider, one after the other.

    Returns:
        Names of providers whose command is found, in listing order
    """
    available: list[str] = []
    for name in dict.fromkeys(registry.names()):
        if probe_available(registry, name):
            available.append(name)
    return available
