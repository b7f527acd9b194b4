"""
BGP Node Status WebUI Settings
Environment configuration for the HTTP status endpoint
"""

import os

BGP_STATUS_WEBUI_LOG_LEVEL = os.getenv('BGP_STATUS_WEBUI_LOG_LEVEL', 'INFO').upper()

# TLS material is optional; plain HTTP is served when either file is missing
CERT_PATH = os.getenv('BGP_STATUS_WEBUI_CERT', '/etc/bgp-node-status/certs/bgp-node-status.crt')
KEY_PATH = os.getenv('BGP_STATUS_WEBUI_KEY', '/etc/bgp-node-status/certs/bgp-node-status.key')
