"""
BIRD Control Protocol

Parsing of BIRD control socket replies and of the peer names Calico gives
its BGP sessions.

Key Components:
- decode_peer_name: <Type>_<address> peer names to (PeerKind, address)
- BirdProtocolScanner: reply-code state machine over "show protocols" output
- scan_bird_peers: drives a scanner over a line stream
"""

from .names import decode_peer_name, PEER_NAME_PATTERN
from .scanner import (
    BirdProtocolScanner, ScanPhase, advance, parse_status_line, scan_bird_peers,
    EXPECTED_COLUMNS
)

__all__ = [
    'decode_peer_name',
    'PEER_NAME_PATTERN',
    'BirdProtocolScanner',
    'ScanPhase',
    'advance',
    'parse_status_line',
    'scan_bird_peers',
    'EXPECTED_COLUMNS'
]
