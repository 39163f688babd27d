"""Entry point for running Othello via ``python -m othello``."""

from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered Othello web server."""

    host = os.environ.get("OTHELLO_HOST", "0.0.0.0")
    port = int(os.environ.get("OTHELLO_PORT", "8000"))
    logging.basicConfig(
        level=os.environ.get("OTHELLO_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("othello.ui:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
