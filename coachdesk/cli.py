"""Small CLI helpers wired to console scripts for developer convenience.

Usage (from project root):
  runserver --host=0.0.0.0 --port=8000 --no-reload
  run-tests
  migrate                  # defaults to `alembic upgrade head`
  init-env                 # copies .env.example -> .env if missing
  create-admin --email=admin@example.com --password=... [--name=...]
"""
from __future__ import annotations

import sys
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional


def _args() -> List[str]:
    return sys.argv[1:]


def _flag(name: str, default: Optional[str] = None) -> Optional[str]:
    prefix = f"--{name}="
    for a in _args():
        if a.startswith(prefix):
            return a.split("=", 1)[1]
    return default


def runserver() -> None:
    """Run Uvicorn programmatically. Accepts simple flags:

    --host=<host>  (default 127.0.0.1)
    --port=<port>  (default 8000)
    --no-reload    (disable auto-reload)
    --reload       (enable auto-reload)
    """
    import uvicorn

    host = _flag("host", "127.0.0.1")
    port = 8000
    reload = True

    port_arg = _flag("port")
    if port_arg:
        try:
            port = int(port_arg)
        except ValueError:
            sys.exit(f"Invalid port: {port_arg}")
    for a in _args():
        if a == "--no-reload":
            reload = False
        elif a == "--reload":
            reload = True

    print(f"Starting uvicorn on {host}:{port} (reload={reload})")
    uvicorn.run("coachdesk.main:app", host=host, port=port, reload=reload)


def run_tests() -> None:
    """Run pytest with any forwarded args."""
    args = _args()
    cmd = ["pytest"] + args
    subprocess.run(cmd, check=True)


def run_migrations() -> None:
    """Run alembic. If no args provided, runs `alembic upgrade head`."""
    args = _args()
    if args:
        cmd = ["alembic"] + args
    else:
        cmd = ["alembic", "upgrade", "head"]
    subprocess.run(cmd, check=True)


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


def create_admin() -> None:
    """Create an ADMIN account, or promote and reactivate an existing one.

    Reads --email/--password/--name, falling back to ADMIN_EMAIL,
    ADMIN_PASSWORD and ADMIN_NAME.
    """
    # Imported here so `init-env` works before DATABASE_URL is configured
    from coachdesk.core.config import settings
    from coachdesk.core.constants import UserRole
    from coachdesk.core.database import SessionLocal
    from coachdesk.core.logger import setup_logging
    from coachdesk.services.auth_service import AuthService
    from coachdesk.services.user_service import UserService

    setup_logging()
    email = _flag("email", settings.ADMIN_EMAIL)
    password = _flag("password", settings.ADMIN_PASSWORD)
    name = _flag("name", settings.ADMIN_NAME)
    if not email or not password:
        sys.exit("create-admin needs --email and --password (or ADMIN_EMAIL / ADMIN_PASSWORD)")
    if len(password) < 8:
        sys.exit("Admin password must be at least 8 characters")

    db = SessionLocal()
    try:
        existing = UserService.get_by_email(db, email)
        if existing:
            existing.role = UserRole.ADMIN
            existing.active = True
            db.commit()
            AuthService.admin_reset_password(db, existing.id, password)
            print(f"Updated {existing.email} as admin (id: {existing.id})")
            return
        user = UserService.create_user(db, email=email, name=name, password=password, role=UserRole.ADMIN)
        print(f"Created admin {user.email} (id: {user.id})")
    finally:
        db.close()


if __name__ == "__main__":
    # Allow running the helpers directly: python -m coachdesk.cli runserver
    if len(sys.argv) <= 1:
        print(__doc__)
        sys.exit(0)
    cmd = sys.argv[1]
    sys.argv.pop(1)
    if cmd == "runserver":
        runserver()
    elif cmd in ("run-tests", "tests", "test"):
        run_tests()
    elif cmd in ("migrate", "alembic"):
        run_migrations()
    elif cmd in ("init-env", "initenv"):
        init_env()
    elif cmd in ("create-admin", "createadmin"):
        create_admin()
    else:
        print(f"Unknown command: {cmd}")
