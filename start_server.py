"""Production entry point: serve the notification engine with Gunicorn.

Bind address and worker counts come from the environment so container
platforms can size the engine without a rebuild. Push fan-out runs its own
thread pool per request, so a small number of Gunicorn threads is enough.
"""

import os
import sys

from gunicorn.app.wsgiapp import run

DEFAULT_BIND = "0.0.0.0:8000"
DEFAULT_WORKERS = "4"
DEFAULT_THREADS = "2"
# Retries wait up to (1 + 2) x base delay on top of three provider calls
DEFAULT_TIMEOUT = "60"


def gunicorn_argv() -> list[str]:
    """Command line for Gunicorn built from GUNICORN_* environment variables."""
    return [
        "gunicorn",
        "notification_engine.wsgi:application",
        "--bind",
        os.getenv("GUNICORN_BIND", DEFAULT_BIND),
        "--workers",
        os.getenv("GUNICORN_WORKERS", DEFAULT_WORKERS),
        "--threads",
        os.getenv("GUNICORN_THREADS", DEFAULT_THREADS),
        "--timeout",
        os.getenv("GUNICORN_TIMEOUT", DEFAULT_TIMEOUT),
        "--access-logfile",
        "-",
        "--error-logfile",
        "-",
    ]


def main():
    """Start the notification engine using Gunicorn."""
    sys.argv = gunicorn_argv()
    run()


if __name__ == "__main__":
    main()
