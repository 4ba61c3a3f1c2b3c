#!/usr/bin/env python
"""
Storefront API server entry point

Usage:
    Development:  python run_server.py --dev
    Production:   python run_server.py
    Gunicorn:     python run_server.py --gunicorn
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

import uvicorn

from storefront.config import get_settings

APP_PATH = "storefront.main:app"


def run_dev_server(host: str, port: int):
    """Run development server with auto-reload."""
    uvicorn.run(
        APP_PATH,
        host=host,
        port=port,
        reload=True,
        reload_dirs=["storefront"],
        log_level="debug",
    )


def run_prod_server(host: str, port: int):
    """Run Uvicorn with several workers."""
    uvicorn.run(
        APP_PATH,
        host=host,
        port=port,
        workers=int(os.getenv("WORKERS", 4)),
        log_level=get_settings().monitoring.log_level.lower(),
        proxy_headers=True,
        forwarded_allow_ips="*",
        server_header=False,
    )


def run_gunicorn(host: str, port: int):
    """Run under Gunicorn with Uvicorn workers."""
    env = dict(os.environ, BIND=f"{host}:{port}")
    subprocess.run(["gunicorn", APP_PATH, "-c", "gunicorn.conf.py"], env=env, check=True)


if __name__ == "__main__":
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Storefront API Server")
    parser.add_argument("--dev", action="store_true", help="Run with auto-reload")
    parser.add_argument("--gunicorn", action="store_true", help="Run with Gunicorn")
    parser.add_argument("--host", default=settings.api_host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.api_port, help="Port to bind")
    args = parser.parse_args()

    if args.dev:
        run_dev_server(args.host, args.port)
    elif args.gunicorn:
        run_gunicorn(args.host, args.port)
    else:
        run_prod_server(args.host, args.port)
