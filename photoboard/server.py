"""
Run the photoboard API under uvicorn.
"""

from __future__ import annotations

import logging

import uvicorn

from photoboard.app import create_app
from photoboard.config import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    # Uvicorn exits non-zero when the lifespan fails to connect the database.
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
