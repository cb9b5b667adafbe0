"""Upgrade the ``documents`` schema once the database answers.

    python -m scripts.run_migrations --timeout 90
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from eduportal.logging_config import configure_logging

LOGGER = logging.getLogger("eduportal.migrations")
PROJECT_ROOT = Path(__file__).resolve().parent.parent
ALEMBIC_INI = PROJECT_ROOT / "alembic.ini"
URL_PLACEHOLDER = "%(EDUPORTAL_DATABASE_URL)s"


def load_config(config_path: str = str(ALEMBIC_INI)) -> Config:
    config = Config(config_path)
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return config


def resolve_database_url(config: Config) -> str:
    url = config.get_main_option("sqlalchemy.url")
    if url and url != URL_PLACEHOLDER:
        return url
    env_url = os.getenv("EDUPORTAL_DATABASE_URL")
    if not env_url:
        raise RuntimeError("EDUPORTAL_DATABASE_URL must be set before running migrations.")
    config.set_main_option("sqlalchemy.url", env_url)
    return env_url


def _probe(engine: Engine) -> None:
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))


def wait_for_database(database_url: str, *, timeout: float, poll_interval: float) -> None:
    """Retry ``SELECT 1`` on connection errors until ``timeout`` seconds pass."""
    engine = create_engine(database_url, pool_pre_ping=True)
    deadline = time.monotonic() + timeout
    try:
        while True:
            try:
                _probe(engine)
                LOGGER.info("Database is reachable.")
                return
            except OperationalError as exc:
                if time.monotonic() >= deadline:
                    raise RuntimeError(f"Database not reachable after {timeout}s.") from exc
                LOGGER.warning("Waiting for database: %s", exc.orig)
            except SQLAlchemyError as exc:
                raise RuntimeError("Database rejected the readiness check.") from exc
            time.sleep(poll_interval)
    finally:
        engine.dispose()


def run_migrations(revision: str, *, timeout: float, poll_interval: float, config: Config) -> None:
    database_url = resolve_database_url(config)
    wait_for_database(database_url, timeout=timeout, poll_interval=poll_interval)
    LOGGER.info("Upgrading documents schema to %s", revision)
    command.upgrade(config, revision)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--revision", default="head")
    parser.add_argument("--timeout", type=float, default=60.0, help="Seconds to wait for the database.")
    parser.add_argument("--poll-interval", type=float, default=3.0)
    args = parser.parse_args(argv)

    configure_logging()
    try:
        run_migrations(args.revision, timeout=args.timeout, poll_interval=args.poll_interval, config=load_config())
    except RuntimeError as exc:
        LOGGER.error("Migration aborted: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
