#!/usr/bin/env python3
"""
BGP Peer Status Collection from BIRD

Queries the BIRD control socket with "show protocols" and scans the reply
into PeerRecords, with:
- Primary and fallback socket locations (containerized vs. package installs)
- A read deadline re-armed before every line, so slow but steady output is
  allowed while any single silence longer than the deadline aborts
- Socket cleanup on every exit path
"""

import logging
import socket
from typing import Iterator, List, Optional

from bgp_status.models import AddressFamily, PeerRecord
from bgp_status.protocol.scanner import scan_bird_peers
from bgp_status.utils.config import BirdConfig, get_config
from bgp_status.utils.error_handling import (
    TransportConnectError, TransportIOError, TransportTimeoutError
)
from bgp_status.utils.logging import LoggingTimer
from bgp_status.utils.timeout_config import TimeoutType, get_timeout


class UnixSocketTransport:
    """Line-oriented stream connection to a Unix domain socket"""

    def __init__(self, path: str, connect_timeout: Optional[float] = None):
        self.path = path
        self.connect_timeout = connect_timeout
        self._sock: Optional[socket.socket] = None
        self._reader = None

    def connect(self):
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(self.connect_timeout)
            sock.connect(self.path)
        except OSError:
            sock.close()
            raise
        self._sock = sock
        self._reader = sock.makefile("r", encoding="utf-8", errors="replace", newline="\n")

    def write(self, data: str):
        self._sock.sendall(data.encode("utf-8"))

    def set_read_deadline(self, seconds: float):
        """Bound the time the next read may block"""
        self._sock.settimeout(seconds)

    def readline(self) -> str:
        """Read one line; returns "" at end of stream"""
        return self._reader.readline()

    def close(self):
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None


class BirdSocketSession:
    """Context manager for one BIRD control socket connection"""

    def __init__(self, collector: 'BirdSocketCollector', family: AddressFamily):
        self.collector = collector
        self.family = family
        self.transport = None

    def __enter__(self):
        self.transport = self.collector._connect(self.family)
        return self.transport

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.transport is not None:
            try:
                self.transport.close()
                self.collector.logger.debug(f"Closed BIRD socket {self.transport.path}")
            except OSError as e:
                self.collector.logger.debug(f"Socket cleanup warning for {self.transport.path}: {e}")


class BirdSocketCollector:
    """Peer status collector for the BIRD backend"""

    def __init__(self,
                 bird_config: Optional[BirdConfig] = None,
                 read_timeout: Optional[float] = None,
                 connect_timeout: Optional[float] = None,
                 transport_factory=UnixSocketTransport):
        """
        Initialize BIRD collector

        Args:
            bird_config: Socket locations and command (defaults to global config)
            read_timeout: Maximum silence between lines in seconds
            connect_timeout: Socket connect timeout in seconds
            transport_factory: Callable (path, connect_timeout) -> transport
        """
        self.logger = logging.getLogger(__name__)
        self.config = bird_config or get_config().bird
        self.read_timeout = read_timeout or get_timeout(TimeoutType.BIRD_READ)
        self.connect_timeout = connect_timeout or get_timeout(TimeoutType.BIRD_CONNECT)
        self.transport_factory = transport_factory

    def collect_peers(self, family: AddressFamily) -> List[PeerRecord]:
        """
        Query BIRD and return the Calico BGP peers for one address family

        Raises:
            TransportConnectError: Neither socket location accepted a connection
            TransportIOError: Write or read failure (TransportTimeoutError on
                read deadline expiry)
            ProtocolParseError: Malformed reply
        """
        with LoggingTimer(self.logger, f"BIRD {family.label} query"):
            with BirdSocketSession(self, family) as transport:
                # To query the current state of the BGP peers, we send a
                # "show protocols" message and BIRD responds with peer data
                # in a table format.
                try:
                    transport.write(self.config.command + "\n")
                except OSError as e:
                    raise TransportIOError(f"unable to write to BIRD socket: {e}")

                self.logger.debug("Reading output from BIRD")
                return scan_bird_peers(self._read_lines(transport), family)

    def _connect(self, family: AddressFamily):
        """Connect to the primary socket, falling back to the package-install location once"""
        primary, fallback = self.config.socket_paths(family.socket_suffix)

        transport = self.transport_factory(primary, self.connect_timeout)
        try:
            transport.connect()
            return transport
        except OSError as e:
            self.logger.debug(f"Failed to connect to BIRD socket {primary} ({e}), trying {fallback}")

        transport = self.transport_factory(fallback, self.connect_timeout)
        try:
            transport.connect()
        except OSError as e:
            raise TransportConnectError(f"BIRDv{family.value}", e)
        return transport

    def _read_lines(self, transport) -> Iterator[str]:
        """Yield reply lines, arming the read deadline before each read"""
        while True:
            transport.set_read_deadline(self.read_timeout)
            try:
                line = transport.readline()
            except socket.timeout:
                raise TransportTimeoutError(
                    f"no output from BIRD for {self.read_timeout}s",
                    guidance="BIRD may be overloaded; retry or raise BGP_STATUS_BIRD_READ_TIMEOUT",
                )
            except OSError as e:
                raise TransportIOError(f"unable to read from BIRD socket: {e}")

            if not line:
                return
            yield line.rstrip("\r\n")
