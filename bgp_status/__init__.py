"""
BGP Node Status - peer status reporting for Calico cluster members.

Provides node-level BGP visibility with:
- BIRD control socket querying and response parsing
- GoBGP neighbor listing for API-based deployments
- Process inspection to detect the active BGP backend
- Plain-text peer tables over the CLI or a single HTTP endpoint
"""

__version__ = "0.3.2"
__author__ = "BGP Toolkit Project"
