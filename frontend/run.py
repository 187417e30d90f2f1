#!/usr/bin/env python3
"""
Starts the Mapa de Zonas Streamlit UI.
Run from the frontend directory: ``python run.py [--backend-url URL] [--port 8501]``
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path

import requests

RED, GREEN, YELLOW, BLUE, RESET = "\033[91m", "\033[92m", "\033[93m", "\033[94m", "\033[0m"


def say(message, color=BLUE):
    print(f"{color}{message}{RESET}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the Mapa de Zonas frontend")
    parser.add_argument("--backend-url", default=os.environ.get("BACKEND_URL", "http://localhost:8000"))
    parser.add_argument("--port", type=int, default=8501)
    parser.add_argument("--skip-venv-check", action="store_true", help="run outside a virtual environment")
    parser.add_argument("--yes", "-y", action="store_true", help="start even if the backend is unreachable")
    return parser.parse_args(argv)


def backend_is_up(backend_url):
    try:
        return requests.get(f"{backend_url}/health", timeout=2).status_code == 200
    except requests.exceptions.RequestException:
        return False


def main(argv=None):
    args = parse_args(argv)
    say("🗺️  Starting Mapa de Zonas frontend")

    if not Path("app.py").exists():
        say("❌ app.py not found. Run this script from the frontend directory.", RED)
        sys.exit(1)

    if not args.skip_venv_check and not os.environ.get("VIRTUAL_ENV"):
        say("⚠️  No virtual environment active. Activate one or pass --skip-venv-check.", YELLOW)
        sys.exit(1)

    try:
        import streamlit  # noqa: F401
    except ImportError:
        say("Streamlit missing, installing the project...", YELLOW)
        subprocess.run([sys.executable, "-m", "pip", "install", "-e", ".."], check=True)

    if not backend_is_up(args.backend_url):
        say(f"⚠️  No backend answering at {args.backend_url} (start it with: cd backend && python run.py)", YELLOW)
        if not args.yes and input("Continue anyway? (y/N): ").strip().lower() != "y":
            sys.exit(1)

    say(f"✅ UI on http://localhost:{args.port} talking to {args.backend_url}", GREEN)
    env = {**os.environ, "BACKEND_URL": args.backend_url}
    try:
        subprocess.run(
            [sys.executable, "-m", "streamlit", "run", "app.py", "--server.port", str(args.port)],
            check=True,
            env=env,
        )
    except KeyboardInterrupt:
        say("\n👋 Frontend stopped.", YELLOW)
    except subprocess.CalledProcessError as e:
        say(f"\n❌ streamlit exited with status {e.returncode}", RED)
        sys.exit(1)


if __name__ == "__main__":
    main()
