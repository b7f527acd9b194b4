#!/usr/bin/env python3
"""
BGP Peer Status Collection from GoBGP

Lists neighbors through the gobgp CLI in JSON mode and maps them onto the
same PeerRecord model the BIRD scanner produces. Neighbor descriptions carry
the Calico peer name (<Type>_<address>), which gives the peer type.
"""

import ipaddress
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from bgp_status.models import AddressFamily, PeerRecord
from bgp_status.protocol.names import decode_peer_name
from bgp_status.utils.config import GoBGPConfig, get_config
from bgp_status.utils.error_handling import BackendError
from bgp_status.utils.logging import LoggingTimer
from bgp_status.utils.subprocess_manager import ProcessState, run_with_resource_management
from bgp_status.utils.timeout_config import TimeoutType, get_timeout

logger = logging.getLogger(__name__)

# gobgp API enum values, as emitted by the JSON encoder
SESSION_STATES = {
    0: "unknown",
    1: "idle",
    2: "connect",
    3: "active",
    4: "opensent",
    5: "openconfirm",
    6: "established",
}
ADMIN_STATES = {
    0: "up",
    1: "down",
    2: "pfx_ct",
}


def _enum_token(value: Union[int, str], names: dict, prefixes: tuple) -> str:
    """Normalize an enum given as number or (possibly prefixed) name to a lower-case token"""
    if isinstance(value, int):
        return names.get(value, str(value))
    token = value.strip().lower()
    for prefix in prefixes:
        if token.startswith(prefix):
            token = token[len(prefix):]
    return token


def _unix_seconds(value: Any) -> int:
    """Timestamps come as plain seconds or as {"seconds": N, "nanos": M}"""
    if value is None:
        return 0
    if isinstance(value, dict):
        return int(value.get("seconds", 0) or 0)
    return int(value)


class PeerConf(BaseModel):
    neighbor_address: str = ""
    description: str = ""


class PeerState(BaseModel):
    admin_state: Union[int, str] = 0
    session_state: Union[int, str] = 0


class TimersState(BaseModel):
    uptime: int = 0
    downtime: int = 0

    @field_validator("uptime", "downtime", mode="before")
    @classmethod
    def _timestamp(cls, value):
        return _unix_seconds(value)


class PeerTimers(BaseModel):
    state: TimersState = Field(default_factory=TimersState)


class GoBGPPeer(BaseModel):
    """One element of `gobgp -j neighbor` output"""
    conf: PeerConf = Field(default_factory=PeerConf)
    state: PeerState = Field(default_factory=PeerState)
    timers: PeerTimers = Field(default_factory=PeerTimers)


@dataclass
class NeighborInfo:
    """Backend-neutral view of a GoBGP neighbor"""
    address: str
    description: str
    admin_state: str        # lower-case token, e.g. "up"
    session_state: str      # lower-case token, e.g. "established"
    uptime: int = 0         # Unix seconds, 0 if never up
    downtime: int = 0       # Unix seconds

    @classmethod
    def from_peer(cls, peer: GoBGPPeer) -> 'NeighborInfo':
        return cls(
            address=peer.conf.neighbor_address,
            description=peer.conf.description,
            admin_state=_enum_token(peer.state.admin_state, ADMIN_STATES, ("admin_state_",)),
            session_state=_enum_token(peer.state.session_state, SESSION_STATES,
                                      ("session_state_", "bgp_fsm_")),
            uptime=peer.timers.state.uptime,
            downtime=peer.timers.state.downtime,
        )


def format_timedelta(seconds: int) -> str:
    """
    Render a second count as [Nd ]HH:MM:SS.

    The sign is dropped: 3661 -> "01:01:01", 90000 -> "1d 01:00:00".
    """
    remaining = abs(int(seconds))
    secs = remaining % 60
    remaining //= 60
    mins = remaining % 60
    remaining //= 60
    hours = remaining % 24
    days = remaining // 24

    clock = f"{hours:02d}:{mins:02d}:{secs:02d}"
    if days == 0:
        return clock
    return f"{days}d {clock}"


def neighbors_to_peers(neighbors: List[NeighborInfo], now: Optional[float] = None) -> List[PeerRecord]:
    """
    Map GoBGP neighbors onto PeerRecords.

    Neighbors whose description is not a Calico peer name are skipped.
    """
    if now is None:
        now = time.time()

    peers = []
    for neighbor in neighbors:
        decoded = decode_peer_name(neighbor.description, ".")
        if decoded is None:
            logger.debug(f"Not a valid neighbor: peer name '{neighbor.description}' is not recognized")
            continue
        peer_kind, _ = decoded

        session_state = neighbor.session_state.title()

        since = "never"
        if neighbor.uptime != 0:
            t = neighbor.uptime if session_state == "Established" else neighbor.downtime
            since = format_timedelta(int(now - t))

        peers.append(PeerRecord(
            address=neighbor.address,
            peer_kind=peer_kind,
            admin_state=neighbor.admin_state,
            since=since,
            session_state=session_state,
        ))

    return peers


class GoBGPClient:
    """Neighbor listing through the gobgp CLI"""

    def __init__(self, gobgp_config: Optional[GoBGPConfig] = None, timeout: Optional[float] = None):
        self.config = gobgp_config or get_config().gobgp
        self.timeout = timeout or get_timeout(TimeoutType.GOBGP_COMMAND)

    def build_command(self) -> List[str]:
        command = [self.config.binary]
        if self.config.host:
            command += ["-u", self.config.host]
        if self.config.port:
            command += ["-p", str(self.config.port)]
        return command + ["-j", "neighbor"]

    def list_neighbors(self, family: AddressFamily) -> List[NeighborInfo]:
        """
        List neighbors whose transport address belongs to family

        Raises:
            BackendError: gobgp missing, failing, timing out or returning bad JSON
        """
        command = self.build_command()
        try:
            result = run_with_resource_management(command, timeout=self.timeout)
        except OSError as e:
            raise BackendError(f"unable to run {command[0]}: {e}",
                               guidance="Check that the gobgp CLI is installed and on PATH")

        if result.state == ProcessState.TIMEOUT:
            raise BackendError(f"gobgp did not answer within {self.timeout}s")
        if result.state != ProcessState.COMPLETED:
            raise BackendError(f"gobgp exited with code {result.returncode}: {result.stderr.strip()}")

        return self.parse_neighbors(result.stdout, family)

    @staticmethod
    def parse_neighbors(output: str, family: AddressFamily) -> List[NeighborInfo]:
        """Validate gobgp JSON output and keep the neighbors of one family"""
        try:
            data = json.loads(output or "null") or []
            peers = [GoBGPPeer.model_validate(item) for item in data]
        except (ValueError, TypeError, ValidationError) as e:
            raise BackendError(f"unexpected gobgp neighbor output: {e}")

        neighbors = []
        for peer in peers:
            try:
                version = ipaddress.ip_address(peer.conf.neighbor_address).version
            except ValueError:
                logger.debug(f"Skipping neighbor with invalid address '{peer.conf.neighbor_address}'")
                continue
            if str(version) == family.value:
                neighbors.append(NeighborInfo.from_peer(peer))
        return neighbors


class GoBGPCollector:
    """Peer status collector for the GoBGP backend"""

    def __init__(self, client: Optional[GoBGPClient] = None):
        self.logger = logging.getLogger(__name__)
        self.client = client or GoBGPClient()

    def collect_peers(self, family: AddressFamily) -> List[PeerRecord]:
        with LoggingTimer(self.logger, f"GoBGP {family.label} query"):
            neighbors = self.client.list_neighbors(family)
            return neighbors_to_peers(neighbors)
