#!/usr/bin/env python3
"""
Initialize database tables
"""
import logging

from config.db_connection import engine, init_db

logger = logging.getLogger(__name__)


def init_tables():
    """Initialize all tables"""
    logger.info(f"Connecting to database: {engine.url!r}")
    logger.info("Creating tables...")
    init_db(engine)
    logger.info("Tables created successfully!")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_tables()
