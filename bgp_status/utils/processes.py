"""
Process inspection for BGP backend detection

Decides whether the Calico node agent and which BGP backend (BIRD or GoBGP)
are running by matching command lines of live processes.
"""

import logging
from typing import Iterable, List, Sequence

import psutil

from bgp_status.utils.error_handling import ProcessInspectionError

logger = logging.getLogger(__name__)


def argv_matches(expected: Sequence[str], candidate: Sequence[str]) -> bool:
    """
    Check whether candidate's leading arguments equal expected element-wise.

    An empty expected sequence never matches.
    """
    if not expected or len(candidate) < len(expected):
        return False
    return list(candidate[:len(expected)]) == list(expected)


def ps_contains(expected: Sequence[str], snapshot: Iterable[Sequence[str]]) -> bool:
    """Check whether any process command line in snapshot matches expected"""
    return any(argv_matches(expected, cmdline) for cmdline in snapshot)


class ProcessInspector:
    """Collects the command lines of all live processes"""

    def snapshot(self) -> List[List[str]]:
        """
        Return the argv of every process that could be inspected.

        Processes that exit or deny access while being inspected are skipped.

        Raises:
            ProcessInspectionError: If the process table cannot be enumerated.
                The error carries the command lines gathered so far.
        """
        cmdlines: List[List[str]] = []
        try:
            for proc in psutil.process_iter():
                try:
                    cmdline = proc.cmdline()
                except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess) as e:
                    # Maybe it doesn't exist any more - move on to the next one.
                    logger.debug(f"Error getting CLI arguments for pid {proc.pid}: {e}")
                    continue
                if cmdline:
                    cmdlines.append(cmdline)
        except (psutil.Error, OSError) as e:
            raise ProcessInspectionError(f"Failed to list processes: {e}", partial=cmdlines)

        logger.debug(f"Inspected {len(cmdlines)} processes")
        return cmdlines
