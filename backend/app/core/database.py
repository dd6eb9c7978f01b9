"""
PostgreSQL database access

This module centralizes database access:
- direct psycopg2 with RealDictCursor (repositories)
- retries with exponential backoff on connection failures
- transactions spanning several repository calls
"""
import time
import logging
from contextlib import contextmanager

import psycopg2
from psycopg2.extras import RealDictCursor

from .config import settings
from .exceptions import InvalidInput

logger = logging.getLogger(__name__)

# Seconds before a connection attempt is abandoned
CONNECTION_TIMEOUT = 10


def _database_url() -> str:
    database_url = settings.DATABASE_URL
    if not database_url:
        raise Exception("DATABASE_URL not configured")
    return database_url


def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Use this for:
    - Repository reads and single-statement writes
    - Code that expects dict results

    Returns:
        psycopg2 connection with RealDictCursor
    """
    return psycopg2.connect(
        _database_url(),
        cursor_factory=RealDictCursor,
        connect_timeout=CONNECTION_TIMEOUT,
    )


def get_db_connection_dict_with_retry(max_retries=3, retry_delay=1.0):
    """
    Get a psycopg2 connection with RealDictCursor and automatic retry

    Handles intermittent connection issues by:
    - Retrying failed connections up to max_retries times
    - Adding exponential backoff between retries
    - Logging connection attempts for debugging

    Args:
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)

    Returns:
        psycopg2 connection with RealDictCursor

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    database_url = _database_url()
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection (dict) attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(
                database_url,
                cursor_factory=RealDictCursor,
                connect_timeout=CONNECTION_TIMEOUT,
            )

            # Test connection with a simple query
            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

            logger.debug(f"Database connection (dict) successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            error_msg = str(e)

            if "SSL connection has been closed unexpectedly" in error_msg:
                logger.warning(f"SSL connection error on attempt {attempt}/{max_retries}: {error_msg}")
            else:
                logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {error_msg}")

            if attempt < max_retries:
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")
                raise last_error

    raise last_error if last_error else Exception("Connection failed after all retries")


@contextmanager
def transaction():
    """
    Context manager for a unit of work spanning several repository calls

    Commits when the block exits normally, rolls back on any exception.

    Usage:
        with transaction() as conn:
            order = order_repo.create(order_data, conn=conn)
            cart_repo.clear(user_id, conn=conn)
    """
    conn = get_db_connection_dict_with_retry()
    try:
        yield conn
        conn.commit()
    except Exception:
        logger.warning("Transaction rolled back")
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def connection_scope(conn=None):
    """
    Reuse the caller's connection or open (and commit/close) a private one

    Repositories accept an optional `conn` so they can join a transaction;
    when none is given the statement runs on its own connection.
    """
    if conn is not None:
        yield conn
        return

    own_conn = get_db_connection_dict()
    try:
        yield own_conn
        own_conn.commit()
    except Exception:
        own_conn.rollback()
        raise
    finally:
        own_conn.close()


def reject_nulls(values: dict, not_null, entity: str) -> None:
    """Raise InvalidInput when a partial update would set a NOT NULL column to NULL"""
    nulled = sorted(column for column, value in values.items() if value is None and column in not_null)
    if nulled:
        raise InvalidInput(f"{entity} fields cannot be null: {', '.join(nulled)}")
