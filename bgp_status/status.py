#!/usr/bin/env python3
"""
Node status report

Checks privileges, looks for the Calico node agent and the active BGP
backend, then writes one peer table per address family.
"""

import io
import logging
from typing import Callable, List, Optional, TextIO

from bgp_status.collectors import PeerSource
from bgp_status.collectors.bird_socket import BirdSocketCollector
from bgp_status.collectors.gobgp import GoBGPCollector
from bgp_status.models import AddressFamily
from bgp_status.reports import format_peer_section
from bgp_status.utils.error_handling import (
    BackendError, PrivilegeError, ProcessInspectionError, ProtocolParseError,
    TransportConnectError, TransportIOError
)
from bgp_status.utils.privileges import enforce_root
from bgp_status.utils.processes import ProcessInspector, ps_contains

# For older versions of calico/node, the process was called `calico-felix`.
# Newer ones use `calico-node -felix`.
CORE_PROCESSES = (("calico-felix",), ("calico-node", "-felix"))

BIRD_PROCESSES = {
    AddressFamily.IPV4: ("bird",),
    AddressFamily.IPV6: ("bird6",),
}

GOBGP_PROCESS = ("calico-bgp-daemon",)

FAMILIES = (AddressFamily.IPV4, AddressFamily.IPV6)


class NodeStatusReporter:
    """Builds the plain-text status report of the local node"""

    def __init__(self,
                 inspector: Optional[ProcessInspector] = None,
                 bird_collector: Optional[PeerSource] = None,
                 gobgp_collector: Optional[PeerSource] = None,
                 privilege_check: Callable[[], None] = enforce_root):
        self.logger = logging.getLogger(__name__)
        self.inspector = inspector or ProcessInspector()
        self._bird_collector = bird_collector
        self._gobgp_collector = gobgp_collector
        self.privilege_check = privilege_check

    @property
    def bird_collector(self) -> PeerSource:
        if self._bird_collector is None:
            self._bird_collector = BirdSocketCollector()
        return self._bird_collector

    @property
    def gobgp_collector(self) -> PeerSource:
        if self._gobgp_collector is None:
            self._gobgp_collector = GoBGPCollector()
        return self._gobgp_collector

    def report(self) -> str:
        """Return the full status report as text; a privilege failure becomes the report"""
        buffer = io.StringIO()
        try:
            self.write_status(buffer)
        except PrivilegeError as e:
            self.logger.error(e.message)
            return f"{e.message}\n"
        return buffer.getvalue()

    def write_status(self, out: TextIO):
        """
        Write the status report to out

        Raises:
            PrivilegeError: Not running as root; nothing is written
        """
        # Must run as root to be able to connect to BIRD sockets
        self.privilege_check()

        processes = self._snapshot(out)

        if not any(ps_contains(argv, processes) for argv in CORE_PROCESSES):
            out.write("Calico process is not running.\n")
            return

        out.write("Calico process is running.\n")

        bird_running = {family: ps_contains(argv, processes) for family, argv in BIRD_PROCESSES.items()}

        if any(bird_running.values()):
            for family in FAMILIES:
                if bird_running[family]:
                    self.write_bird_peers(out, family)
                else:
                    process_name = BIRD_PROCESSES[family][0]
                    out.write(f"\nINFO: BIRDv{family.value} process: '{process_name}' is not running.\n")
        elif ps_contains(GOBGP_PROCESS, processes):
            for family in FAMILIES:
                self.write_gobgp_peers(out, family)
        else:
            out.write("\nNone of the BGP backend processes (BIRD or GoBGP) are running.\n")

        out.write("\n")

    def write_bird_peers(self, out: TextIO, family: AddressFamily):
        """Query BIRD and write the peers of one family"""
        self.logger.debug(f"Print BIRD peers for {family.label}")
        out.write(f"\n{family.label} BGP status\n")

        try:
            peers = self.bird_collector.collect_peers(family)
        except TransportConnectError as e:
            self.logger.warning(f"BIRD {family.label} connection failed: {e.message}")
            out.write(f"Error querying BIRD: {e.message}\n")
            return
        except (TransportIOError, ProtocolParseError) as e:
            self.logger.warning(f"BIRD {family.label} query failed: {e.message}")
            out.write(f"Error executing command: {e.message}\n")
            return

        out.write(format_peer_section(family, peers) + "\n")

    def write_gobgp_peers(self, out: TextIO, family: AddressFamily):
        """Query GoBGP and write the peers of one family"""
        self.logger.debug(f"Print GoBGP peers for {family.label}")
        out.write(f"\n{family.label} BGP status\n")

        try:
            peers = self.gobgp_collector.collect_peers(family)
        except BackendError as e:
            self.logger.warning(f"GoBGP {family.label} query failed: {e.message}")
            out.write(f"Error retrieving neighbor info: {e.message}\n")
            return

        out.write(format_peer_section(family, peers) + "\n")

    def _snapshot(self, out: TextIO) -> List[List[str]]:
        """Process command lines; an inspection failure is reported and the partial view used"""
        try:
            return self.inspector.snapshot()
        except ProcessInspectionError as e:
            self.logger.warning(e.message)
            out.write(f"{e.message}\n")
            return e.partial
