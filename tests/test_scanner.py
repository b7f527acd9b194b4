"""
Tests for the BIRD protocol table scanner

Covers the reply-code transitions, status-line filtering and the terminal
parse errors.
"""

import unittest

from bgp_status.models import AddressFamily, PeerKind, PeerRecord
from bgp_status.protocol.scanner import (
    BirdProtocolScanner, ScanPhase, advance, parse_status_line, scan_bird_peers
)
from bgp_status.utils.error_handling import (
    ProtocolParseError, UnexpectedHeaderShape, UnrecognizedLineFormat
)

HEADER = "2002 name proto table state since info"


class TestParseStatusLine(unittest.TestCase):
    """Rows of the protocol table"""

    def test_mesh_peer_without_info(self):
        peer = parse_status_line("Mesh_192_168_56_101 BGP master up 2016-11-21 Established", ".")

        self.assertEqual(peer, PeerRecord(
            address="192.168.56.101",
            peer_kind=PeerKind.MESH,
            admin_state="up",
            since="2016-11-21",
            session_state="Established",
            info="",
        ))

    def test_info_columns_joined_with_single_spaces(self):
        peer = parse_status_line(
            "Global_10_0_0_5   BGP   master  up  2016-11-22  Connect   extra   info here", ".")

        self.assertEqual(peer.session_state, "Connect")
        self.assertEqual(peer.info, "extra info here")

    def test_ipv6_peer(self):
        peer = parse_status_line("Node_fd80_24e2_f998_72d7__2 BGP master up 10:14:03 Established", ":")

        self.assertEqual(peer.address, "fd80:24e2:f998:72d7::2")
        self.assertEqual(peer.peer_kind, PeerKind.NODE)

    def test_fewer_than_six_columns_is_skipped(self):
        self.assertIsNone(parse_status_line("Mesh_10_0_0_1 BGP master up 2016-11-21", "."))
        self.assertIsNone(parse_status_line("", "."))

    def test_non_bgp_protocol_is_skipped(self):
        self.assertIsNone(parse_status_line("kernel1 Kernel master up 2016-11-21 extra", "."))
        # Well-formed peer name, but not a BGP session
        self.assertIsNone(parse_status_line("Mesh_10_0_0_1 OSPF master up 2016-11-21 Running", "."))

    def test_unrecognized_peer_name_is_skipped(self):
        self.assertIsNone(parse_status_line("bgp1 BGP master up 2016-11-21 Established", "."))
        self.assertIsNone(parse_status_line("Other_10_0_0_1 BGP master up 2016-11-21 Established", "."))


class TestAdvance(unittest.TestCase):
    """Individual state transitions"""

    def test_ready_marker_keeps_phase(self):
        phase, peer = advance(ScanPhase.AWAITING_HEADER, "0001 BIRD 1.5.0 ready.", ".")

        self.assertEqual(phase, ScanPhase.AWAITING_HEADER)
        self.assertIsNone(peer)

    def test_header_starts_streaming(self):
        phase, peer = advance(ScanPhase.AWAITING_HEADER, HEADER, ".")

        self.assertEqual(phase, ScanPhase.STREAMING)
        self.assertIsNone(peer)

    def test_header_with_dash_separator(self):
        phase, _ = advance(ScanPhase.AWAITING_HEADER, "2002-name     proto    table    state  since       info", ".")

        self.assertEqual(phase, ScanPhase.STREAMING)

    def test_header_with_wrong_order(self):
        with self.assertRaises(UnexpectedHeaderShape) as ctx:
            advance(ScanPhase.AWAITING_HEADER, "2002 name table proto state since info", ".")

        self.assertEqual(ctx.exception.columns, ["name", "table", "proto", "state", "since", "info"])

    def test_header_with_missing_column(self):
        with self.assertRaises(UnexpectedHeaderShape):
            advance(ScanPhase.AWAITING_HEADER, "2002 name proto table state since", ".")

    def test_repeated_header_is_not_revalidated(self):
        phase, peer = advance(ScanPhase.STREAMING, "2002 something else entirely", ".")

        self.assertEqual(phase, ScanPhase.STREAMING)
        self.assertIsNone(peer)

    def test_first_row_produces_record(self):
        phase, peer = advance(ScanPhase.STREAMING,
                              "1002-Mesh_172_17_8_102 BGP master up 2016-11-21 Established", ".")

        self.assertEqual(phase, ScanPhase.STREAMING)
        self.assertEqual(peer.address, "172.17.8.102")

    def test_continuation_row_produces_record(self):
        _, peer = advance(ScanPhase.STREAMING,
                          " Mesh_172_17_8_103 BGP master up 2016-11-21 Established", ".")

        self.assertEqual(peer.address, "172.17.8.103")

    def test_end_of_data(self):
        phase, peer = advance(ScanPhase.STREAMING, "0000", ".")

        self.assertEqual(phase, ScanPhase.DONE)
        self.assertIsNone(peer)

    def test_unknown_reply_code(self):
        with self.assertRaises(UnrecognizedLineFormat) as ctx:
            advance(ScanPhase.STREAMING, "9001 Syntax error", ".")

        self.assertEqual(ctx.exception.line, "9001 Syntax error")

    def test_tab_indented_row_is_not_a_continuation(self):
        with self.assertRaises(UnrecognizedLineFormat):
            advance(ScanPhase.STREAMING, "\tMesh_10_0_0_1 BGP master up 2016-11-21 Established", ".")


class TestScanBirdPeers(unittest.TestCase):
    """Whole responses"""

    def test_well_formed_response(self):
        lines = [
            HEADER,
            "1002 Mesh_192_168_56_101 BGP master up 2016-11-21 Established",
            " Global_10_0_0_5 BGP master up 2016-11-22 Connect extra info here",
            "0000",
        ]

        peers = scan_bird_peers(lines, AddressFamily.IPV4)

        self.assertEqual(len(peers), 2)
        self.assertEqual(peers[0].address, "192.168.56.101")
        self.assertEqual(peers[0].peer_kind, PeerKind.MESH)
        self.assertEqual(peers[0].session_state, "Established")
        self.assertEqual(peers[0].info, "")
        self.assertEqual(peers[1].address, "10.0.0.5")
        self.assertEqual(peers[1].peer_kind, PeerKind.GLOBAL)
        self.assertEqual(peers[1].session_state, "Connect")
        self.assertEqual(peers[1].info, "extra info here")

    def test_realistic_response_skips_non_bgp_rows(self):
        lines = [
            "0001 BIRD 1.5.0 ready.",
            "2002-name     proto    table    state  since       info",
            "1002-kernel1  Kernel   master   up     2016-11-21",
            " device1  Device   master   up     2016-11-21",
            " direct1  Direct   master   up     2016-11-21",
            " Mesh_172_17_8_102 BGP      master   up     2016-11-21  Established",
            " Mesh_172_17_8_103 BGP      master   start  2016-11-21  Active      Socket: Connection refused",
            "0000",
        ]

        peers = scan_bird_peers(lines, AddressFamily.IPV4)

        self.assertEqual([p.address for p in peers], ["172.17.8.102", "172.17.8.103"])
        self.assertEqual(peers[1].admin_state, "start")
        self.assertEqual(peers[1].info, "Socket: Connection refused")

    def test_order_and_duplicates_preserved(self):
        lines = [
            HEADER,
            "1002 Node_10_0_0_9 BGP master up 2016-11-21 Established",
            " Mesh_10_0_0_1 BGP master up 2016-11-21 Established",
            " Node_10_0_0_9 BGP master up 2016-11-21 Established",
            "0000",
        ]

        peers = scan_bird_peers(lines, AddressFamily.IPV4)

        self.assertEqual([p.address for p in peers], ["10.0.0.9", "10.0.0.1", "10.0.0.9"])

    def test_ipv6_response(self):
        lines = [
            HEADER,
            "1002-Mesh_fd80_24e2_f998_72d7__2 BGP master up 2016-11-21 Established",
            "0000",
        ]

        peers = scan_bird_peers(lines, AddressFamily.IPV6)

        self.assertEqual(peers[0].address, "fd80:24e2:f998:72d7::2")

    def test_bad_header_returns_no_records(self):
        lines = [
            "1002 Mesh_192_168_56_101 BGP master up 2016-11-21 Established",
            "2002 name proto state table since info",
            " Mesh_192_168_56_102 BGP master up 2016-11-21 Established",
            "0000",
        ]

        with self.assertRaises(UnexpectedHeaderShape):
            scan_bird_peers(lines, AddressFamily.IPV4)

    def test_unrecognized_line_aborts_scan(self):
        lines = [
            HEADER,
            "1002 Mesh_192_168_56_101 BGP master up 2016-11-21 Established",
            "8003 No protocols match",
            "0000",
        ]

        with self.assertRaises(ProtocolParseError):
            scan_bird_peers(lines, AddressFamily.IPV4)

    def test_rest_of_stream_discarded_after_end_of_data(self):
        def lines():
            yield HEADER
            yield "0000"
            raise AssertionError("read past end of data")

        self.assertEqual(scan_bird_peers(lines(), AddressFamily.IPV4), [])

    def test_empty_table(self):
        self.assertEqual(scan_bird_peers([HEADER, "0000"], AddressFamily.IPV4), [])

    def test_stream_end_without_marker_returns_records(self):
        lines = [
            HEADER,
            "1002 Mesh_192_168_56_101 BGP master up 2016-11-21 Established",
        ]

        with self.assertLogs("bgp_status.protocol.scanner", level="WARNING"):
            peers = scan_bird_peers(lines, AddressFamily.IPV4)

        self.assertEqual(len(peers), 1)


class TestBirdProtocolScanner(unittest.TestCase):

    def test_feed_tracks_phase_and_peers(self):
        scanner = BirdProtocolScanner(AddressFamily.IPV4)

        self.assertEqual(scanner.feed("0001 BIRD 2.0.7 ready."), ScanPhase.AWAITING_HEADER)
        self.assertEqual(scanner.feed(HEADER), ScanPhase.STREAMING)
        scanner.feed("1002-Mesh_10_0_0_1 BGP master up 2016-11-21 Established")
        self.assertEqual(len(scanner.peers), 1)
        self.assertEqual(scanner.feed("0000"), ScanPhase.DONE)
        self.assertTrue(scanner.done)

    def test_feed_after_done(self):
        scanner = BirdProtocolScanner(AddressFamily.IPV4)
        scanner.feed("0000")

        with self.assertRaises(RuntimeError):
            scanner.feed(HEADER)


if __name__ == '__main__':
    unittest.main()
