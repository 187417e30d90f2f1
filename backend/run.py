#!/usr/bin/env python3
"""
Starts the Mapa de Zonas API with uvicorn.
Run from the backend directory: ``python run.py [--port 8000] [--no-reload]``
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path

RED, GREEN, YELLOW, BLUE, RESET = "\033[91m", "\033[92m", "\033[93m", "\033[94m", "\033[0m"


def say(message, color=BLUE):
    print(f"{color}{message}{RESET}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the Mapa de Zonas backend")
    parser.add_argument("--host", default=os.environ.get("API_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("API_PORT", 8000)))
    parser.add_argument("--no-reload", action="store_true", help="disable uvicorn auto-reload")
    parser.add_argument("--skip-venv-check", action="store_true", help="run outside a virtual environment")
    return parser.parse_args(argv)


def ensure_dependencies():
    try:
        import fastapi, uvicorn, folium, httpx, pydantic_settings  # noqa: F401
    except ImportError as e:
        say(f"Missing dependency ({e.name}), installing the project...", YELLOW)
        subprocess.run([sys.executable, "-m", "pip", "install", "-e", ".."], check=True)


def main(argv=None):
    args = parse_args(argv)
    say("🗺️  Starting Mapa de Zonas backend")

    if not Path("mapa/main.py").exists():
        say("❌ mapa/main.py not found. Run this script from the backend directory.", RED)
        sys.exit(1)

    if not Path(".env").exists() and not Path("../.env").exists():
        say("ℹ️  No .env found; defaults apply (Nominatim, Overpass, São Paulo seed markers).", YELLOW)
        print("  Override e.g. USER_AGENT, HTTP_TIMEOUT, ZONE_RADIUS_M, LOAD_SEED_MARKERS=false")

    if not args.skip_venv_check and not os.environ.get("VIRTUAL_ENV"):
        say("⚠️  No virtual environment active. Activate one or pass --skip-venv-check.", YELLOW)
        sys.exit(1)

    ensure_dependencies()

    base = f"http://localhost:{args.port}"
    say(f"✅ Serving on {args.host}:{args.port}", GREEN)
    print(f"  Health: {base}/health")
    print(f"  Docs:   {base}/docs")

    command = [sys.executable, "-m", "uvicorn", "mapa.main:app", "--host", args.host, "--port", str(args.port)]
    if not args.no_reload:
        command.append("--reload")

    try:
        subprocess.run(command, check=True)
    except KeyboardInterrupt:
        say("\n👋 Backend stopped.", YELLOW)
    except subprocess.CalledProcessError as e:
        say(f"\n❌ uvicorn exited with status {e.returncode}", RED)
        sys.exit(1)


if __name__ == "__main__":
    main()
