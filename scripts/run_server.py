"""
Run the portfolio backend with uvicorn.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import uvicorn
from sqlalchemy.exc import SQLAlchemyError

from portfolio_backend.config import get_settings
from portfolio_backend.dependencies import get_db_client

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Portfolio backend server")
    parser.add_argument(
        "--host",
        type=str,
        default=settings.host,
        help="Interface to bind",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=settings.port,
        help="Port to listen on",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes (development only)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        get_db_client()
    except SQLAlchemyError:
        logger.exception("Error connecting to the database")
        return 1

    logger.info("Server is listening on http://%s:%s", args.host, args.port)
    uvicorn.run(
        "portfolio_backend.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
