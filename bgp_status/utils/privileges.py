"""Privilege checks"""

import os

from bgp_status.utils.error_handling import PrivilegeError


def enforce_root():
    """Make sure we run as super user; the BIRD sockets are root-only."""
    if os.geteuid() != 0:
        raise PrivilegeError()
