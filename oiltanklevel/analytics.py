"""
Tank level analytics for consumption and refill statistics.
"""

import json
import os
import pandas as pd
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, List, Any

from .db import TankDatabase


def _to_utc(value: datetime) -> pd.Timestamp:
    if value.tzinfo is None:
        return pd.Timestamp(value, tz='UTC')
    return pd.Timestamp(value).tz_convert('UTC')


class TankAnalytics:
    """Analyzes tank level history from the database or the output log."""

    def __init__(self, db_path: Optional[str] = None, log_path: Optional[str] = None):
        """Initialize analytics.

        Args:
            db_path: Path to SQLite database file
            log_path: Path to the JSON-lines output log, used when no
                database is given
        """
        self.log_path = log_path
        self.db = TankDatabase(db_path) if db_path or not log_path else None

    def _load_records(self) -> List[Dict[str, Any]]:
        if self.db is not None:
            return self.db.get_measurements()

        if not os.path.exists(self.log_path):
            return []
        with open(self.log_path, 'r') as f:
            return [json.loads(line) for line in f if line.strip()]

    def get_measurements_df(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> pd.DataFrame:
        """Get measurements as a pandas DataFrame sorted by time.

        Args:
            start_date: Filter by start date (UTC)
            end_date: Filter by end date (UTC)

        Returns:
            DataFrame with measurements
        """
        records = self._load_records()
        if not records:
            return pd.DataFrame()

        df = pd.DataFrame(records)
        df['timestamp'] = pd.to_datetime(df['timestamp'], utc=True)
        df = df.sort_values('timestamp').reset_index(drop=True)

        if start_date:
            df = df[df['timestamp'] >= _to_utc(start_date)]
        if end_date:
            df = df[df['timestamp'] <= _to_utc(end_date)]

        return df.reset_index(drop=True)

    def calculate_consumption(
        self,
        start_time: datetime,
        end_time: datetime
    ) -> Dict[str, Any]:
        """Calculate liters used and refilled between two times.

        Falling levels count as consumption and rising levels as refills.

        Args:
            start_time: Start datetime
            end_time: End datetime

        Returns:
            Dictionary with consumption statistics
        """
        df = self.get_measurements_df(start_date=start_time, end_date=end_time)

        if df.empty:
            return {
                'start_time': start_time,
                'end_time': end_time,
                'consumed_liters': None,
                'refilled_liters': None,
                'measurements_count': 0,
                'error': 'No measurements found'
            }

        changes = df['level_liter'].diff().dropna()
        consumed = float(-changes[changes < 0].sum())
        refilled = float(changes[changes > 0].sum())

        return {
            'start_time': start_time,
            'end_time': end_time,
            'start_liters': float(df.iloc[0]['level_liter']),
            'end_liters': float(df.iloc[-1]['level_liter']),
            'consumed_liters': consumed,
            'refilled_liters': refilled,
            'measurements_count': len(df),
            'time_span_hours': (end_time - start_time).total_seconds() / 3600
        }

    def get_daily_summary(self, days: int = 7, now: Optional[datetime] = None) -> pd.DataFrame:
        """Per-day level statistics for the last ``days`` days.

        Returns:
            DataFrame indexed by date with min/max/last level in cm and
            liters, plus liters consumed that day
        """
        if now is None:
            now = datetime.now(timezone.utc)
        df = self.get_measurements_df(start_date=now - timedelta(days=days), end_date=now)
        if df.empty:
            return pd.DataFrame()

        df['date'] = df['timestamp'].dt.date
        df['change'] = df['level_liter'].diff()
        summary = df.groupby('date').agg(
            level_cm_min=('level_cm', 'min'),
            level_cm_max=('level_cm', 'max'),
            level_cm_last=('level_cm', 'last'),
            level_liter_last=('level_liter', 'last'),
            consumed_liters=('change', lambda s: float(-s[s < 0].sum())),
            measurements_count=('level_cm', 'count'),
        )
        return summary
