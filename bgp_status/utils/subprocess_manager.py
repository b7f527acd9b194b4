#!/usr/bin/env python3
"""
Subprocess Resource Manager for BGP Node Status

Runs backend CLI tools (gobgp) with:
- Context-managed process lifecycle
- Cleanup on all exit paths
- Timeout handling with graceful termination
"""

import logging
import subprocess
import time
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class ProcessState(Enum):
    """Process execution states"""

    COMPLETED = "completed"
    TIMEOUT = "timeout"
    FAILED = "failed"


@dataclass
class ProcessResult:
    """Result from managed subprocess execution"""

    returncode: int
    stdout: str
    stderr: str
    state: ProcessState
    execution_time: float
    command: List[str]
    pid: Optional[int] = None
    error_message: Optional[str] = None


class ManagedProcess:
    """
    Context manager for subprocess execution

    The process is started on enter and terminated (then killed if it does
    not exit) on leave if it is still running.
    """

    def __init__(
        self,
        command: List[str],
        timeout: Optional[float] = None,
        env: Optional[Dict[str, str]] = None,
    ):
        self.command = command
        self.timeout = timeout
        self.env = env

        self.process: Optional[subprocess.Popen] = None
        self.start_time: Optional[float] = None
        self.logger = logging.getLogger(__name__)

    def __enter__(self) -> "ManagedProcess":
        self.start_time = time.time()
        self.process = subprocess.Popen(
            self.command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            env=self.env,
            text=True,
        )
        self.logger.debug(f"Started process {self.process.pid}: {' '.join(self.command)}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.process and self.process.poll() is None:
            self.terminate_gracefully()

    def wait_for_completion(self) -> ProcessResult:
        """
        Wait for process completion

        Returns:
            ProcessResult with execution details
        """
        if not self.process:
            raise RuntimeError("Process not started - use within context manager")

        try:
            stdout, stderr = self.process.communicate(timeout=self.timeout)
            state = ProcessState.COMPLETED if self.process.returncode == 0 else ProcessState.FAILED

            return ProcessResult(
                returncode=self.process.returncode,
                stdout=stdout or "",
                stderr=stderr or "",
                state=state,
                execution_time=time.time() - self.start_time,
                command=self.command,
                pid=self.process.pid,
            )

        except subprocess.TimeoutExpired:
            self.logger.warning(f"Process {self.process.pid} timeout after {self.timeout}s")
            self.terminate_gracefully()

            return ProcessResult(
                returncode=self.process.returncode or -1,
                stdout="",
                stderr="",
                state=ProcessState.TIMEOUT,
                execution_time=time.time() - self.start_time,
                command=self.command,
                pid=self.process.pid,
                error_message=f"Process timeout after {self.timeout}s",
            )

    def terminate_gracefully(self, timeout: int = 5):
        """
        Gracefully terminate the process

        Args:
            timeout: Time to wait for graceful termination before force kill
        """
        try:
            self.process.terminate()
            self.process.communicate(timeout=timeout)
            self.logger.debug(f"Process {self.process.pid} terminated gracefully")
        except subprocess.TimeoutExpired:
            self.logger.warning(f"Force killing unresponsive process {self.process.pid}")
            self.process.kill()
            self.process.communicate()


@contextmanager
def managed_subprocess(command: List[str], **kwargs):
    """
    Convenience context manager for subprocess execution

    Example:
        with managed_subprocess(['gobgp', '-j', 'neighbor']) as result:
            if result.state == ProcessState.COMPLETED:
                print(result.stdout)
    """
    with ManagedProcess(command, **kwargs) as managed:
        yield managed.wait_for_completion()


def run_with_resource_management(
    command: List[str], timeout: Optional[float] = None, **kwargs
) -> ProcessResult:
    """
    Execute subprocess with resource management

    Raises:
        FileNotFoundError: If the executable does not exist
    """
    with managed_subprocess(command, timeout=timeout, **kwargs) as result:
        return result
