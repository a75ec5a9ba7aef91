#!/usr/bin/env python3
"""
Migration runner for deployment.
Runs Alembic migrations to upgrade the database schema before the server starts.
"""
import logging
import subprocess
import sys

from app.core.logging_config import setup_logging

logger = logging.getLogger("run_migration")


def run_migrations() -> int:
    """Run alembic upgrade head; returns a process exit code."""
    logger.info("Running database migrations")

    try:
        result = subprocess.run(
            ["alembic", "upgrade", "head"],
            check=True,
            capture_output=True,
            text=True
        )
    except subprocess.CalledProcessError as e:
        logger.error(f"Migration failed (exit {e.returncode})\nSTDOUT: {e.stdout}\nSTDERR: {e.stderr}")
        return 1
    except FileNotFoundError:
        logger.error("alembic executable not found; install the project first")
        return 1

    if result.stdout:
        logger.info(result.stdout.strip())
    if result.stderr:
        # alembic writes its progress to stderr
        logger.info(result.stderr.strip())

    logger.info("Migrations completed")
    return 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(run_migrations())
