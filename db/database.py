import os
import sqlite3
from typing import Mapping

from common.errors import StorageError
from common.logger import get_logger

logger = get_logger("db.database")


class PriceDatabase:
    def __init__(self, path: str) -> None:
        self.path = path
        self.conn: sqlite3.Connection | None = None

    def connect_to_db(self) -> None:
        """
        Opens the database file and creates the prices table on first run.
        """
        directory = os.path.dirname(self.path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            self.conn = sqlite3.connect(self.path)
            self._init_schema()
        except (OSError, sqlite3.Error) as exc:
            self.close_connection()
            raise StorageError(f"Cannot initialize database {self.path}: {exc}") from exc
        logger.info("Database ready at %s", self.path)

    def close_connection(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def _init_schema(self) -> None:
        with self.conn:
            self.conn.execute(
                """
                CREATE TABLE IF NOT EXISTS prices (
                    id         INTEGER PRIMARY KEY AUTOINCREMENT,
                    coin       TEXT NOT NULL,
                    price_usd  REAL NOT NULL,
                    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

    def save_prices(self, prices: Mapping[str, float]) -> int:
        """
        Appends one row per coin in a single transaction.

        Either every row is committed or, on the first failing insert, the
        whole batch is rolled back and StorageError is raised.
        """
        if self.conn is None:
            raise StorageError("Database connection is not initialized")

        rows = list(prices.items())
        try:
            with self.conn:
                self.conn.executemany(
                    "INSERT INTO prices (coin, price_usd) VALUES (?, ?)",
                    rows,
                )
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to save {len(rows)} prices: {exc}") from exc

        logger.debug("Inserted %d price rows", len(rows))
        return len(rows)
