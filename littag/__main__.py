"""Entry point for running littag as a module or installed script.

Usage:
    littag / python -m littag                  → local JSON API (uvicorn)
    littag <command> ... / python -m littag <command> ... → CLI
"""

import os
import sys

import uvicorn


def run() -> None:
    """Entry point: no args → API server, else → CLI."""
    if len(sys.argv) == 1:
        uvicorn.run(
            "littag.api.app:app",
            host=os.getenv("LITTAG_HOST", "127.0.0.1"),
            port=int(os.getenv("LITTAG_PORT", "8000")),
        )
    else:
        from littag.cli import main

        sys.exit(main())


if __name__ == "__main__":
    run()
