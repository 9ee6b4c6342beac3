#!/usr/bin/env python3
"""
Classifieds API launcher.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 0.0.0.0 --reload

Environment variables (see core/config.py for the full list):
  SECRET_KEY         Session token signing key, 32+ chars. Required unless DEBUG=true.
  DATABASE_URL       SQLAlchemy URL. Defaults to a SQLite file beside the code.
  PORT / HOST        Listening address. Defaults 5000 / 127.0.0.1.
  GOOGLE_CLIENT_ID   Expected audience for Google ID tokens. Unset disables /auth/google.
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Run the classifieds API server.")
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Listen port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    args = parser.parse_args()

    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
