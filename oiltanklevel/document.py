"""
Measurement documents and the files they are written to.
"""

import json
import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Optional, Dict, Any


logger = logging.getLogger(__name__)


def format_timestamp(timestamp: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with millisecond precision."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    timestamp = timestamp.astimezone(timezone.utc)
    return timestamp.strftime('%Y-%m-%dT%H:%M:%S.') + f"{timestamp.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class MeasurementDocument:
    """Result of a single tank level measurement."""
    timestamp: str
    level_cm: float
    level_liter: float
    level_pixel: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        """Single-line JSON record, as appended to the output log."""
        return json.dumps(self.to_dict())

    def append_to_log(self, path: str):
        """Append this document as one JSON line to ``path``."""
        logger.debug("Writing output to log file: %s", path)
        with open(path, 'a') as f:
            f.write(self.to_json() + '\n')

    def write_snapshot(self, path: str):
        """Write this document as a standalone pretty-printed JSON file."""
        logger.debug("Writing snapshot to: %s", path)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
            f.write('\n')


def build_document(
    level: float,
    volume: float,
    pixel: float,
    timestamp: Optional[datetime] = None
) -> MeasurementDocument:
    """Assemble a measurement document.

    Args:
        level: Fill height in calibration units (cm)
        volume: Fill volume in liters
        pixel: Detected transition row, kept as given
        timestamp: Capture time, defaults to now. Naive values are UTC.

    Returns:
        MeasurementDocument with level and volume rounded to one decimal
    """
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)

    return MeasurementDocument(
        timestamp=format_timestamp(timestamp),
        level_cm=float(round(level, 1)),
        level_liter=float(round(volume, 1)),
        level_pixel=pixel
    )
