"""
One complete measurement run: capture, preprocess, measure, record.

Example:
    from oiltanklevel import load_config, measure_and_log

    config = load_config('tank.json')
    document = measure_and_log(
        config,
        host='192.168.1.20',
        username='admin',
        password='secret',
        output='/var/log/oil-tank.jsonl'
    )
"""

import logging
import os
import tempfile
from datetime import datetime
from typing import Optional

from .capture import fetch_snapshot, preprocess_image, draw_confirmation_image
from .config import TankConfig
from .db import TankDatabase
from .document import MeasurementDocument
from .measurement import TankLevelMeasurer


logger = logging.getLogger(__name__)


def measure_and_log(
    config: TankConfig,
    host: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    image_path: Optional[str] = None,
    output: Optional[str] = None,
    snapshot: Optional[str] = None,
    confirmation_image: Optional[str] = None,
    keep_txt_file: bool = False,
    db_path: Optional[str] = None,
    timestamp: Optional[datetime] = None
) -> MeasurementDocument:
    """Measure the tank level and record the result.

    Either ``image_path`` names an existing snapshot, or one is downloaded
    from ``host`` with the given credentials.

    Args:
        config: Tank configuration
        host: Camera host
        username: Camera user
        password: Camera password
        image_path: Use this image instead of downloading one
        output: Append the result as a JSON line to this file
        snapshot: Write the result as a pretty-printed JSON file
        confirmation_image: Write the snapshot with the level drawn on it
        keep_txt_file: Keep the brightness dump instead of deleting it
        db_path: Also store the result in this SQLite database
        timestamp: Capture time, defaults to now

    Returns:
        The MeasurementDocument

    Raises:
        TankLevelError: Any capture, parse, detection or calibration failure
    """
    if image_path is None and host is None:
        raise ValueError("Either image_path or host is required")

    measurer = TankLevelMeasurer(config)
    source_image = image_path
    cleanup = []

    try:
        if image_path is None:
            fd, image_path = tempfile.mkstemp(suffix='.jpg')
            os.close(fd)
            cleanup.append(image_path)
            fetch_snapshot(host, username, password, image_path)

        fd, dump_path = tempfile.mkstemp(suffix='.txt')
        os.close(fd)
        if keep_txt_file:
            logger.info("Keeping brightness dump: %s", dump_path)
        else:
            cleanup.append(dump_path)

        preprocess_image(image_path, dump_path, config)
        document = measurer.measure_from_file(dump_path, timestamp)

        if confirmation_image:
            if not draw_confirmation_image(image_path, document.level_pixel, config, confirmation_image):
                logger.error("Failed to write confirmation image to %s", confirmation_image)
    finally:
        for path in cleanup:
            if os.path.exists(path):
                os.remove(path)

    if output:
        document.append_to_log(output)
    if snapshot:
        document.write_snapshot(snapshot)
    if db_path:
        TankDatabase(db_path).insert_measurement(document, image_path=source_image)

    return document
