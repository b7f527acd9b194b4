#!/usr/bin/env python3
"""
BGP Node Status WebUI Adapter - Minimal entry point

Runs the status endpoint with uvicorn, using TLS when a certificate and key
are installed.
"""
from pathlib import Path
from typing import Optional

import uvicorn

from bgp_status.utils.config import get_config
from webui.app import create_app
from webui.settings import BGP_STATUS_WEBUI_LOG_LEVEL, CERT_PATH, KEY_PATH


def serve(host: Optional[str] = None, port: Optional[int] = None, log_level: Optional[str] = None):
    """Run the HTTP server until interrupted"""
    cert_path = Path(CERT_PATH)
    key_path = Path(KEY_PATH)
    use_tls = cert_path.exists() and key_path.exists()

    web = get_config().web
    uvicorn.run(
        create_app(),
        host=host or web.host,
        port=port or web.port,
        ssl_keyfile=str(key_path) if use_tls else None,
        ssl_certfile=str(cert_path) if use_tls else None,
        log_level=(log_level or BGP_STATUS_WEBUI_LOG_LEVEL).lower()
    )


if __name__ == "__main__":
    serve()
