"""
Oil Tank Level - Measure a tank's fill level from a webcam image of its sight glass.

This library provides tools for:
- Parsing the brightness dump of a preprocessed measurement strip
- Locating the liquid surface row in that strip
- Converting the row into height and volume with a site calibration table
- Recording measurements and analyzing consumption over time

Basic Usage:
    from oiltanklevel import TankConfig, TankLevelMeasurer

    config = TankConfig(calibration={0: 300, 100: 100})
    measurer = TankLevelMeasurer(config)
    document = measurer.measure_from_file('strip.txt')
    print(f"Level: {document.level_cm} cm / {document.level_liter} l")

Full run (download, preprocess, measure, record):
    from oiltanklevel import load_config, measure_and_log

    config = load_config('tank.json')
    measure_and_log(config, host='camera', username='admin', password='secret',
                    output='levels.jsonl')

Analytics:
    from oiltanklevel import TankAnalytics

    analytics = TankAnalytics(log_path='levels.jsonl')
    summary = analytics.get_daily_summary(days=7)
"""

__version__ = "0.1.0"

# Errors
from .errors import (
    TankLevelError,
    ParseError,
    NoTransitionFound,
    OutOfCalibrationRange,
    CaptureError,
)

# Core measurement
from .profile import (
    parse_brightness_dump,
    load_brightness_dump,
)
from .measurement import (
    TransitionLocator,
    TankLevelMeasurer,
)
from .calibration import (
    CalibrationInterpolator,
    load_calibration_mapping,
)
from .document import (
    MeasurementDocument,
    build_document,
)

# Configuration
from .config import (
    TankConfig,
    load_config,
)

# Storage and analytics
from .db import TankDatabase
from .analytics import TankAnalytics

# Integration helpers
from .integration import measure_and_log

__all__ = [
    # Version
    "__version__",

    # Errors
    "TankLevelError",
    "ParseError",
    "NoTransitionFound",
    "OutOfCalibrationRange",
    "CaptureError",

    # Core measurement
    "parse_brightness_dump",
    "load_brightness_dump",
    "TransitionLocator",
    "TankLevelMeasurer",
    "CalibrationInterpolator",
    "load_calibration_mapping",
    "MeasurementDocument",
    "build_document",

    # Configuration
    "TankConfig",
    "load_config",

    # Storage and analytics
    "TankDatabase",
    "TankAnalytics",

    # Integration
    "measure_and_log",
]
