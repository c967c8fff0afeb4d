#!/usr/bin/env python3
"""
Development runner script for the JIVAS Graph Explorer.
Starts the API server that the browser frontend talks to.
"""

import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent

load_dotenv(PROJECT_ROOT / ".env")

from config.settings import get_settings


def run_api(host: str, port: int, reload: bool):
    """Start the FastAPI backend server."""
    command = [sys.executable, "-m", "uvicorn", "jvgraph.api.main:app", "--host", host, "--port", str(port)]
    if reload:
        command.append("--reload")
    return subprocess.Popen(command, cwd=PROJECT_ROOT)


def main():
    settings = get_settings()

    print(f"""
╔════════════════════════════════════════════════════════════════════════╗
║   🕸  JIVAS Graph Explorer                                             ║
╠════════════════════════════════════════════════════════════════════════╣
║   📡 API Server:    http://localhost:{settings.api_port:<35}║
║   🔗 JIVAS host:    {settings.jivas_host[:51]:<51}║
║   🌱 Root node:     {(settings.root_node or '(not set)')[:51]:<51}║
║                                                                        ║
║   Press Ctrl+C to stop                                                 ║
╚════════════════════════════════════════════════════════════════════════╝
    """)

    api_proc = run_api(settings.api_host, settings.api_port, settings.debug)

    try:
        api_proc.wait()
    except KeyboardInterrupt:
        print("\n\n👋 Shutting down...")
        api_proc.terminate()
        try:
            api_proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            api_proc.kill()
        print("✅ Stopped.")
        sys.exit(0)


if __name__ == "__main__":
    main()
