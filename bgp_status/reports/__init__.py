"""Peer status reports"""

from .peers import render_peer_table, format_peer_section, PEER_TABLE_HEADERS

__all__ = ['render_peer_table', 'format_peer_section', 'PEER_TABLE_HEADERS']
