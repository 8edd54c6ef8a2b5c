"""
DrupalDb - Pooled MySQL access to the Drupal site database.
"""

import logging
import re
from typing import Any, List, Optional, Sequence, Tuple

import mysql.connector
from mysql.connector import errorcode, pooling
from retrying import retry

from .db_config import DbConfig
from .exceptions import StorageError, StorageNotFoundError

MACHINE_NAME = re.compile(r'^[a-z0-9_]+$')


def check_identifier(name: str) -> str:
    """Reject anything that is not a Drupal machine name before it goes into SQL."""
    if not MACHINE_NAME.match(name or ''):
        raise StorageError(f"Invalid identifier: {name!r}")
    return name


def placeholders(count: int) -> str:
    return ', '.join(['%s'] * count)


class DrupalDb:
    """
    Read-only query helper over a lazily created connection pool.
    """

    def __init__(self, config: DbConfig, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.connection_pool = None

    def initialize_pool(self):
        """
        Initialize the connection pool lazily if it hasn't been created yet.
        """
        if not self.connection_pool:
            self.logger.debug("Initializing connection pool...")
            try:
                self.connection_pool = pooling.MySQLConnectionPool(
                    pool_name="derivgen_pool",
                    pool_size=self.config.pool_size,
                    user=self.config.user,
                    password=self.config.password,
                    host=self.config.host,
                    port=self.config.port,
                    database=self.config.database,
                )
                self.logger.debug("Connection pool initialized.")
            except mysql.connector.Error as err:
                self.logger.error(f"Failed to initialize connection pool: {err}")
                raise

    @retry(retry_on_exception=lambda e: isinstance(e, mysql.connector.errors.InterfaceError),
           stop_max_attempt_number=3, wait_exponential_multiplier=1000)
    def get_cursor(self):
        """
        Get a connection from the pool and create a cursor.
        """
        try:
            self.initialize_pool()
            connection = self.connection_pool.get_connection()
            return connection.cursor(buffered=True), connection
        except mysql.connector.Error as e:
            self.logger.debug(f"Error getting cursor: {e}")
            raise

    def close_connection(self, connection):
        """
        Return a connection to the pool.
        """
        if connection:
            try:
                connection.close()
            except mysql.connector.Error as e:
                self.logger.debug(f"Error closing connection: {e}")

    def table(self, name: str) -> str:
        """Prefixed, quoted table name."""
        return f"`{self.config.prefix}{check_identifier(name)}`"

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Tuple]:
        """
        Run a query and return all rows.

        Raises:
            StorageNotFoundError: If a referenced table does not exist
            StorageError: For any other database error
        """
        cursor, connection = None, None
        try:
            self.logger.debug(f"SQL: {sql} {list(params)}")
            cursor, connection = self.get_cursor()
            cursor.execute(sql, tuple(params))
            return cursor.fetchall()
        except mysql.connector.Error as e:
            if getattr(e, 'errno', None) == errorcode.ER_NO_SUCH_TABLE:
                raise StorageNotFoundError(str(e)) from e
            raise StorageError(f"Database query failed: {e}") from e
        finally:
            if cursor:
                cursor.close()
            if connection:
                self.close_connection(connection)

    def fetch_column(self, sql: str, params: Sequence[Any] = ()) -> List[Any]:
        """Run a query and return the first column of every row."""
        return [row[0] for row in self.fetch_all(sql, params)]
