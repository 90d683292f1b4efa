#!/usr/bin/env python3
"""Run the Crazy Eights Web API server.

Settings come from the environment (or a ``.env`` file next to this script):

    CRAZY_EIGHTS_HOST       bind address (default 0.0.0.0)
    CRAZY_EIGHTS_PORT       port (default 8000)
    CRAZY_EIGHTS_RELOAD     auto-reload on code changes (default off)
    CRAZY_EIGHTS_LOG_LEVEL  uvicorn log level (default info)
"""

import os
from pathlib import Path

import uvicorn

TRUTHY = {"1", "true", "yes", "on"}


def server_settings(env=None) -> dict:
    """Build uvicorn keyword arguments from environment variables."""
    env = os.environ if env is None else env
    return {
        "host": env.get("CRAZY_EIGHTS_HOST", "0.0.0.0"),
        "port": int(env.get("CRAZY_EIGHTS_PORT", "8000")),
        "reload": env.get("CRAZY_EIGHTS_RELOAD", "").strip().lower() in TRUTHY,
        "log_level": env.get("CRAZY_EIGHTS_LOG_LEVEL", "info").lower(),
    }


def main():
    """Run the server."""
    env_file = Path(__file__).parent / ".env"
    if env_file.exists():
        from dotenv import load_dotenv
        load_dotenv(env_file)
        print(f"Loaded environment from {env_file}")

    uvicorn.run("web.api:app", **server_settings())


if __name__ == "__main__":
    main()
