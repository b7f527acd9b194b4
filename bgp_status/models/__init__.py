"""
BGP Node Status Data Models

This module contains the core data models shared by the BIRD and GoBGP
collectors and the peer table renderer.
"""

from dataclasses import dataclass
from enum import Enum


class AddressFamily(Enum):
    """IP address family of a BGP query"""

    IPV4 = "4"
    IPV6 = "6"

    @property
    def separator(self) -> str:
        """Delimiter used when rebuilding addresses from encoded peer names."""
        return ":" if self is AddressFamily.IPV6 else "."

    @property
    def socket_suffix(self) -> str:
        """Suffix of the BIRD control socket name (bird.ctl vs bird6.ctl)."""
        return "6" if self is AddressFamily.IPV6 else ""

    @property
    def label(self) -> str:
        return f"IPv{self.value}"


class PeerKind(Enum):
    """Peer type encoded as the prefix of a BGP protocol name"""

    GLOBAL = "Global"
    MESH = "Mesh"
    NODE = "Node"

    @property
    def display_name(self) -> str:
        return PEER_KIND_DISPLAY[self]


# Mapping the BIRD/GoBGP type extracted from the peer name to the display type.
PEER_KIND_DISPLAY = {
    PeerKind.GLOBAL: "global",
    PeerKind.MESH: "node-to-node mesh",
    PeerKind.NODE: "node specific",
}


@dataclass(frozen=True)
class PeerRecord:
    """
    Status of one remote BGP peer.

    Records are built by the protocol scanner (BIRD) or the GoBGP adapter and
    only ever from input that matched the full peer grammar.
    """
    address: str                # Delimiter-normalized peer address
    peer_kind: PeerKind
    admin_state: str            # e.g. "up"
    since: str                  # Timestamp or duration, verbatim
    session_state: str          # e.g. "Established"
    info: str = ""              # Free-text trailer

    @property
    def info_column(self) -> str:
        """Session state plus any trailing info, as shown in the INFO column."""
        if self.info:
            return f"{self.session_state} {self.info}"
        return self.session_state

    def to_row(self) -> list:
        """Convert PeerRecord to a table row."""
        return [
            self.address,
            self.peer_kind.display_name,
            self.admin_state,
            self.since,
            self.info_column,
        ]
