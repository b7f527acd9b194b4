"""
BGP Peer Collectors

Two sources produce the same PeerRecord list:
- BirdSocketCollector: BIRD control socket ("show protocols")
- GoBGPCollector: gobgp neighbor listing
"""

from typing import List, Protocol

from bgp_status.models import AddressFamily, PeerRecord

from .bird_socket import BirdSocketCollector, UnixSocketTransport
from .gobgp import GoBGPClient, GoBGPCollector, format_timedelta


class PeerSource(Protocol):
    """Anything that can list the BGP peers of one address family"""

    def collect_peers(self, family: AddressFamily) -> List[PeerRecord]:
        ...


__all__ = [
    'PeerSource',
    'BirdSocketCollector',
    'UnixSocketTransport',
    'GoBGPClient',
    'GoBGPCollector',
    'format_timedelta'
]
