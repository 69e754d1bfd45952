"""
Launcher for the URL Param Sync Explorer.

For local development:
    panel serve code/app.py --dev --show

Or, once installed:
    url-param-sync --port 5006 --dev
"""

import argparse
import subprocess
import sys
from pathlib import Path

APP_PATH = Path(__file__).parent / "app.py"


def build_command(argv: list[str] | None = None) -> list[str]:
    """Translate launcher arguments into a `panel serve` command line."""
    parser = argparse.ArgumentParser(description="Serve the URL Param Sync Explorer")
    parser.add_argument("--address", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=5006)
    parser.add_argument("--dev", action="store_true", help="Reload on code changes")
    args = parser.parse_args(argv)

    cmd = [
        sys.executable, "-m", "panel", "serve",
        str(APP_PATH),
        "--address", args.address,
        "--port", str(args.port),
        "--allow-websocket-origin=*",
    ]
    if args.dev:
        cmd.append("--dev")
    return cmd


def run(argv: list[str] | None = None) -> None:
    """Start the Panel server."""
    subprocess.run(build_command(argv))


if __name__ == "__main__":
    run()
