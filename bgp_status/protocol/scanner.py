"""
BIRD protocol table scanner

Decodes the reply of BIRD's "show protocols" command into PeerRecords.

Sample output from BIRD:

    0001 BIRD 1.5.0 ready.
    2002-name     proto    table    state  since       info
    1002-kernel1  Kernel   master   up     2016-11-21
     device1  Device   master   up     2016-11-21
     direct1  Direct   master   up     2016-11-21
     Mesh_172_17_8_102 BGP      master   up     2016-11-21  Established
    0000

Each line starts with a 4-digit reply code (followed by a space or "-") or,
for the second and later rows of a table, a single space.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from bgp_status.models import AddressFamily, PeerRecord
from bgp_status.protocol.names import decode_peer_name
from bgp_status.utils.error_handling import UnexpectedHeaderShape, UnrecognizedLineFormat

logger = logging.getLogger(__name__)

# Reply codes
END_OF_DATA = "0000"
READY = "0001"
FIRST_ROW = "1002"
HEADER = "2002"
CONTINUATION = " "

# Expected BIRD protocol table columns
EXPECTED_COLUMNS = ["name", "proto", "table", "state", "since", "info"]

BGP_PROTOCOL = "BGP"
MIN_STATUS_COLUMNS = 6


class ScanPhase(Enum):
    """Phases of a single scan"""

    AWAITING_HEADER = "awaiting_header"
    STREAMING = "streaming"
    DONE = "done"


def parse_status_line(line: str, separator: str) -> Optional[PeerRecord]:
    """
    Parse one row of the protocol table.

    We expect at least 6 columns: name, proto, table, state, since and info.
    The info column holds the BGP state plus possibly some additional info
    (which ends up in columns > 6).

    Returns:
        PeerRecord, or None if the row is not a Calico BGP peer
    """
    logger.debug(f"Parsing line: {line}")
    columns = line.split()
    if len(columns) < MIN_STATUS_COLUMNS:
        logger.debug("Not a valid line: fewer than 6 columns")
        return None
    if columns[1] != BGP_PROTOCOL:
        logger.debug("Not a valid line: protocol is not BGP")
        return None

    decoded = decode_peer_name(columns[0], separator)
    if decoded is None:
        logger.debug(f"Not a valid line: peer name '{columns[0]}' is not correct format")
        return None
    peer_kind, address = decoded

    return PeerRecord(
        address=address,
        peer_kind=peer_kind,
        admin_state=columns[3],
        since=columns[4],
        session_state=columns[5],
        info=" ".join(columns[6:]),
    )


def advance(phase: ScanPhase, line: str, separator: str) -> Tuple[ScanPhase, Optional[PeerRecord]]:
    """
    Apply one response line to the scan.

    Args:
        phase: Current scan phase
        line: Response line without its line terminator
        separator: Address delimiter for the queried family

    Returns:
        (next phase, record produced by this line or None)

    Raises:
        UnexpectedHeaderShape: Header row with the wrong columns
        UnrecognizedLineFormat: Line matches no known reply code
    """
    if line.startswith(END_OF_DATA):
        return ScanPhase.DONE, None

    if line.startswith(READY):
        return phase, None

    if line.startswith(HEADER):
        if phase is not ScanPhase.AWAITING_HEADER:
            logger.debug("Ignoring repeated table header")
            return phase, None
        columns = line[5:].split()
        if columns != EXPECTED_COLUMNS:
            raise UnexpectedHeaderShape(columns)
        return ScanPhase.STREAMING, None

    if line.startswith(FIRST_ROW):
        return phase, parse_status_line(line[5:], separator)

    if line.startswith(CONTINUATION):
        return phase, parse_status_line(line[1:], separator)

    raise UnrecognizedLineFormat(line)


@dataclass
class BirdProtocolScanner:
    """
    Scan state for one BIRD response.

    Feed lines in order with feed(); the collected peers are in .peers once
    .done is true. A scanner is not reusable.
    """
    family: AddressFamily
    phase: ScanPhase = ScanPhase.AWAITING_HEADER
    peers: List[PeerRecord] = field(default_factory=list)

    @property
    def done(self) -> bool:
        return self.phase is ScanPhase.DONE

    def feed(self, line: str) -> ScanPhase:
        """Apply one line and return the resulting phase"""
        if self.done:
            raise RuntimeError("Scan already finished")

        logger.debug(f"Read: {line}")
        self.phase, peer = advance(self.phase, line, self.family.separator)
        if peer is not None:
            self.peers.append(peer)
        return self.phase


def scan_bird_peers(lines: Iterable[str], family: AddressFamily) -> List[PeerRecord]:
    """
    Scan BIRD output to return the list of Calico BGP peers.

    Args:
        lines: Response lines, terminators stripped
        family: Address family the response belongs to

    Returns:
        PeerRecords in response order (possibly empty)

    Raises:
        ProtocolParseError: If the response is malformed. No partial
            result is returned.
    """
    scanner = BirdProtocolScanner(family)

    for line in lines:
        if scanner.feed(line) is ScanPhase.DONE:
            break

    if not scanner.done:
        logger.warning(f"BIRD {family.label} output ended without end-of-data marker")

    return scanner.peers
