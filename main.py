"""
Development entry point for the Task Manager API.

Reads the server options from the environment (``.env`` included) and hands
``backend_fastapi.main:app`` to uvicorn. The storage backend itself is picked
by the app from ``ORM``; it is only echoed here.
"""

import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def run() -> None:
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    reload = _env_flag("RELOAD")

    print(f"Task Manager API on http://{host}:{port} using {os.getenv('ORM', 'peewee')}"
          + (" with auto-reload" if reload else ""))

    uvicorn.run(
        "backend_fastapi.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    run()
