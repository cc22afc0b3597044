"""
SQLite database module for storing tank level measurements.
"""

import sqlite3
import os
from datetime import datetime
from typing import Optional, List, Dict, Any
from contextlib import contextmanager

from .document import MeasurementDocument, format_timestamp


class TankDatabase:
    """Manages SQLite database for tank level measurements."""

    def __init__(self, db_path: str = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Defaults to './tank_measurements.db'
        """
        if db_path is None:
            db_path = os.path.join(os.getcwd(), 'tank_measurements.db')
        self.db_path = db_path
        self._init_database()

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self):
        """Create database tables if they don't exist."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS tank_measurements (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL UNIQUE,
                    level_cm REAL NOT NULL,
                    level_liter REAL NOT NULL,
                    level_pixel REAL NOT NULL,
                    image_path TEXT,
                    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_tank_timestamp
                ON tank_measurements(timestamp DESC)
            """)

    def insert_measurement(
        self,
        document: MeasurementDocument,
        image_path: Optional[str] = None
    ) -> int:
        """Insert a measurement document.

        A second measurement with the same timestamp replaces the first.

        Args:
            document: Measurement to store
            image_path: Optional path of the source snapshot

        Returns:
            ID of inserted row
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT OR REPLACE INTO tank_measurements
                (timestamp, level_cm, level_liter, level_pixel, image_path)
                VALUES (?, ?, ?, ?, ?)
            """, (
                document.timestamp,
                document.level_cm,
                document.level_liter,
                document.level_pixel,
                image_path
            ))
            return cursor.lastrowid

    def get_measurements(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Query tank level measurements, newest first.

        Args:
            start_date: Filter by start date (UTC)
            end_date: Filter by end date (UTC)
            limit: Maximum number of results

        Returns:
            List of measurement dictionaries
        """
        # Timestamps are stored as ISO-8601 strings, which sort chronologically
        with self._get_connection() as conn:
            cursor = conn.cursor()

            query = "SELECT * FROM tank_measurements WHERE 1=1"
            params = []

            if start_date:
                query += " AND timestamp >= ?"
                params.append(format_timestamp(start_date))

            if end_date:
                query += " AND timestamp <= ?"
                params.append(format_timestamp(end_date))

            query += " ORDER BY timestamp DESC"

            if limit:
                query += " LIMIT ?"
                params.append(int(limit))

            cursor.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]

    def get_latest_measurement(self) -> Optional[Dict[str, Any]]:
        """Get the most recent measurement."""
        rows = self.get_measurements(limit=1)
        return rows[0] if rows else None
