"""
Tests for peer table rendering
"""

import unittest

from bgp_status.models import AddressFamily, PeerKind, PeerRecord
from bgp_status.reports import format_peer_section, render_peer_table
from bgp_status.utils.error_handling import NoPeersFound

PEERS = [
    PeerRecord("192.168.56.101", PeerKind.MESH, "up", "2016-11-21", "Established"),
    PeerRecord("10.0.0.5", PeerKind.GLOBAL, "start", "2016-11-22", "Active",
               "Socket: Connection refused"),
]


class TestRenderPeerTable(unittest.TestCase):

    def test_empty_list(self):
        with self.assertRaises(NoPeersFound) as ctx:
            render_peer_table([])

        self.assertEqual(ctx.exception.message, "No peers found.")

    def test_header_and_rows(self):
        table = render_peer_table(PEERS)
        lines = table.splitlines()

        # Border, header, border, two rows, border
        self.assertEqual(len(lines), 6)
        for heading in ("PEER ADDRESS", "PEER TYPE", "STATE", "SINCE", "INFO"):
            self.assertIn(heading, lines[1])
        self.assertIn("192.168.56.101", lines[3])
        self.assertIn("node-to-node mesh", lines[3])
        self.assertIn("10.0.0.5", lines[4])
        self.assertIn("global", lines[4])
        self.assertIn("Active Socket: Connection refused", lines[4])

    def test_rows_keep_input_order(self):
        table = render_peer_table(list(reversed(PEERS)))

        self.assertLess(table.index("10.0.0.5"), table.index("192.168.56.101"))

    def test_cells_left_aligned(self):
        lines = render_peer_table(PEERS).splitlines()

        self.assertTrue(lines[3].startswith("| 192.168.56.101 "))
        self.assertTrue(lines[4].startswith("| 10.0.0.5       "))


class TestFormatPeerSection(unittest.TestCase):

    def test_no_peers_message(self):
        self.assertEqual(format_peer_section(AddressFamily.IPV4, []), "No IPv4 peers found.")
        self.assertEqual(format_peer_section(AddressFamily.IPV6, []), "No IPv6 peers found.")

    def test_table_for_peers(self):
        self.assertEqual(format_peer_section(AddressFamily.IPV4, PEERS), render_peer_table(PEERS))


if __name__ == '__main__':
    unittest.main()
