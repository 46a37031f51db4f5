"""Launch the PantryPal API under uvicorn."""

from __future__ import annotations

import os

import uvicorn

from pantrypal.config import get_settings

APP_PATH = "pantrypal.server.app:app"


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError as exc:
        raise SystemExit(f"Invalid PANTRYPAL_SERVER_PORT '{value}': {exc}") from exc
    if not 0 < port < 65536:
        raise SystemExit(f"PANTRYPAL_SERVER_PORT out of range: {port}")
    return port


def main() -> None:
    """Entry point for the `pantrypal-server` script.

    Reads ``PANTRYPAL_SERVER_HOST`` (default 127.0.0.1), ``PANTRYPAL_SERVER_PORT``
    (default 5000) and ``RELOAD=1`` for auto-reload during development.
    """

    host = os.environ.get("PANTRYPAL_SERVER_HOST", "127.0.0.1")
    port = _port(os.environ.get("PANTRYPAL_SERVER_PORT", "5000"))
    reload_enabled = os.environ.get("RELOAD") == "1"

    uvicorn.run(
        APP_PATH,
        host=host,
        port=port,
        reload=reload_enabled,
        log_level=get_settings().log_level.lower(),
        # Logging is configured by create_app; keep uvicorn from replacing it.
        log_config=None,
    )


if __name__ == "__main__":
    main()
