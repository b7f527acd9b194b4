"""
Peer table rendering

Turns PeerRecords into the plain-text table shown by the CLI and the HTTP
status endpoint.
"""

from typing import List, Sequence

from tabulate import tabulate

from bgp_status.models import AddressFamily, PeerRecord
from bgp_status.utils.error_handling import NoPeersFound

PEER_TABLE_HEADERS = ["PEER ADDRESS", "PEER TYPE", "STATE", "SINCE", "INFO"]


def render_peer_table(peers: Sequence[PeerRecord]) -> str:
    """
    Render peers as a table, one row per peer in the given order.

    Raises:
        NoPeersFound: If peers is empty
    """
    if not peers:
        raise NoPeersFound()

    rows = [peer.to_row() for peer in peers]
    return tabulate(rows, headers=PEER_TABLE_HEADERS, tablefmt="pretty", stralign="left")


def format_peer_section(family: AddressFamily, peers: List[PeerRecord]) -> str:
    """Peer table for one family, or a message if there are no peers"""
    try:
        return render_peer_table(peers)
    except NoPeersFound:
        return f"No {family.label} peers found."
