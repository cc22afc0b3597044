"""
Tank level measurement from a preprocessed measurement strip.

After edge detection the strip's brightness profile is noisy near the top
(background above the liquid), then shows bright scatter, and the liquid
surface registers as a sustained run of pure black rows.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional, Union

import numpy as np

from .calibration import CalibrationInterpolator
from .config import TankConfig
from .document import MeasurementDocument, build_document
from .errors import NoTransitionFound
from .profile import parse_brightness_dump, load_brightness_dump


logger = logging.getLogger(__name__)


class TransitionLocator:
    """Finds the liquid surface row in a brightness profile."""

    def __init__(self, bright_threshold: int = 100, zero_run_length: int = 3):
        """Initialize the locator.

        Args:
            bright_threshold: A sample above this value opens the search
            zero_run_length: Number of consecutive zero samples that make the
                surface line (the first of them is reported)
        """
        if zero_run_length < 1:
            raise ValueError(f"zero_run_length must be at least 1, got {zero_run_length}")
        self.bright_threshold = bright_threshold
        self.zero_run_length = zero_run_length

    def find_search_start(self, profile: np.ndarray) -> int:
        """Index of the first sample brighter than the threshold."""
        bright = np.flatnonzero(profile > self.bright_threshold)
        if bright.size == 0:
            raise NoTransitionFound(
                f"No sample above brightness {self.bright_threshold} "
                f"in {len(profile)} rows"
            )
        return int(bright[0])

    def locate(self, profile: np.ndarray) -> int:
        """Locate the transition pixel.

        Args:
            profile: Brightness samples, index 0 at the top of the strip

        Returns:
            Index of the first row of the zero run

        Raises:
            NoTransitionFound: If either phase of the scan fails
        """
        profile = np.asarray(profile)
        start = self.find_search_start(profile)

        zeros = profile[start:] == 0
        if zeros.size >= self.zero_run_length:
            windows = np.lib.stride_tricks.sliding_window_view(zeros, self.zero_run_length)
            runs = np.flatnonzero(windows.all(axis=1))
            if runs.size:
                pixel = start + int(runs[0])
                logger.debug("Line is at %d", pixel)
                return pixel

        raise NoTransitionFound(
            f"No run of {self.zero_run_length} black rows after row {start}",
            search_start=start
        )


class TankLevelMeasurer:
    """Runs the full profile to measurement document pipeline."""

    def __init__(self, config: TankConfig):
        self.config = config
        self.locator = TransitionLocator(
            bright_threshold=config.bright_threshold,
            zero_run_length=config.zero_run_length
        )
        self.interpolator = CalibrationInterpolator(
            config.calibration,
            liters_per_unit=config.liters_per_unit
        )

    def measure_profile(
        self,
        profile: np.ndarray,
        timestamp: Optional[datetime] = None
    ) -> MeasurementDocument:
        """Measure the tank level from a brightness profile.

        Args:
            profile: Brightness profile of the strip
            timestamp: Capture time, defaults to now

        Returns:
            MeasurementDocument
        """
        pixel = self.locator.locate(profile)
        level, volume = self.interpolator.interpolate(pixel)
        logger.info("Level cm: %.2f", level)
        logger.info("Level liter: %.2f", volume)
        return build_document(level, volume, pixel, timestamp)

    def measure_from_dump(
        self,
        lines: Union[str, Iterable[str]],
        timestamp: Optional[datetime] = None
    ) -> MeasurementDocument:
        """Measure the tank level from brightness dump text."""
        return self.measure_profile(parse_brightness_dump(lines), timestamp)

    def measure_from_file(
        self,
        dump_path: str,
        timestamp: Optional[datetime] = None
    ) -> MeasurementDocument:
        """Measure the tank level from a brightness dump file."""
        return self.measure_profile(load_brightness_dump(dump_path), timestamp)
