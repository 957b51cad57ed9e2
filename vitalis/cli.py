"""Small CLI helpers wired to project scripts for developer convenience.

Usage (from project root):
  vitalis-runserver --host=0.0.0.0 --port=8000 --no-reload
  vitalis-run-tests
  vitalis-init-db          # creates the patient and clinical_record tables
  vitalis-check-db         # acquires a pooled connection and runs SELECT 1
  vitalis-init-env         # copies .env.example -> .env if missing
"""
from __future__ import annotations

import sys
import shutil
import subprocess
from pathlib import Path
from typing import List

from vitalis.core.config import settings
from vitalis.core.connection import ConnectionSource
from vitalis.core.database import init_db
from vitalis.core.logger import setup_logging
from vitalis.utils.errors import DatabaseConnectionError


def _args() -> List[str]:
    return sys.argv[1:]


def runserver() -> None:
    """Run Uvicorn programmatically. Accepts simple flags:

    --host=<host>  (default 127.0.0.1)
    --port=<port>  (default 8000)
    --no-reload    (disable auto-reload)
    --reload       (enable auto-reload)
    """
    import uvicorn

    host = "127.0.0.1"
    port = 8000
    reload = True

    for a in _args():
        if a.startswith("--host="):
            host = a.split("=", 1)[1]
        elif a.startswith("--port="):
            try:
                port = int(a.split("=", 1)[1])
            except ValueError:
                print(f"Ignoring invalid port: {a}")
        elif a == "--no-reload":
            reload = False
        elif a == "--reload":
            reload = True

    print(f"Starting uvicorn on {host}:{port} (reload={reload})")
    uvicorn.run("vitalis.main:app", host=host, port=port, reload=reload)


def run_tests() -> None:
    """Run pytest with any forwarded args."""
    cmd = ["pytest"] + _args()
    subprocess.run(cmd, check=True)


def create_tables() -> None:
    """Create the schema on the configured database."""
    setup_logging()
    source = ConnectionSource.from_settings(settings)
    try:
        init_db(source.engine)
        print("Tables created")
    finally:
        source.dispose()


def check_db() -> None:
    """Acquire a connection from the pool and ping the database."""
    setup_logging()
    source = ConnectionSource.from_settings(settings)
    try:
        source.ping()
        print("Database connection OK")
    except DatabaseConnectionError as exc:
        print(f"Database connection failed: {exc.message}")
        sys.exit(1)
    finally:
        source.dispose()


def init_env() -> None:
    """Copy `.env.example` to `.env` if `.env` is missing."""
    root = Path(__file__).resolve().parents[1]
    src = root / ".env.example"
    dst = root / ".env"
    if dst.exists():
        print(f".env already exists at {dst}")
        return
    if not src.exists():
        print(f".env.example not found at {src}")
        return
    shutil.copy(src, dst)
    print(f"Created .env from .env.example at {dst}")


if __name__ == "__main__":
    # Allow running the helpers directly: python -m vitalis.cli runserver
    if len(sys.argv) <= 1:
        print(__doc__)
        sys.exit(0)
    cmd = sys.argv[1]
    sys.argv.pop(1)
    if cmd == "runserver":
        runserver()
    elif cmd in ("run-tests", "tests", "test"):
        run_tests()
    elif cmd in ("init-db", "initdb"):
        create_tables()
    elif cmd in ("check-db", "checkdb"):
        check_db()
    elif cmd in ("init-env", "initenv"):
        init_env()
    else:
        print(f"Unknown command: {cmd}")
