"""
Peer name decoding

Calico names its BGP protocols (BIRD) and neighbor descriptions (GoBGP)
as <Type>_<address>, with every address delimiter replaced by "_":

    Mesh_192_168_56_101            -> node-to-node mesh, 192.168.56.101
    Mesh_fd80_24e2_f998_72d7__2    -> node-to-node mesh, fd80:24e2:f998:72d7::2
"""

import re
from typing import Optional, Tuple

from bgp_status.models import PeerKind

# Check for Word_<IP> where every octet is separated by "_", regardless of IP protocol
PEER_NAME_PATTERN = re.compile(r'^(Global|Node|Mesh)_(.+)$')

_KINDS_BY_PREFIX = {kind.value: kind for kind in PeerKind}


def decode_peer_name(name: str, separator: str) -> Optional[Tuple[PeerKind, str]]:
    """
    Decode an encoded peer name into its kind and address.

    Args:
        name: Encoded name, e.g. "Global_10_0_0_5"
        separator: Address delimiter to restore ("." or ":")

    Returns:
        (PeerKind, address) or None if the name is not a peer name
    """
    match = PEER_NAME_PATTERN.match(name)
    if not match:
        return None

    kind = _KINDS_BY_PREFIX.get(match.group(1))
    if kind is None:
        return None

    return kind, match.group(2).replace("_", separator)
