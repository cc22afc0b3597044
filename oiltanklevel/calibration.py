"""
Calibration mapping between physical height and strip pixel rows.

The mapping is measured by hand for each site: fill the tank to known
heights and note the row where the liquid edge shows up in the strip. Higher
fill levels sit closer to the top of the strip, so the pixel offset shrinks
as the height grows.
"""

import json
import logging
from typing import Dict, Tuple

from .errors import OutOfCalibrationRange


logger = logging.getLogger(__name__)

DEFAULT_LITERS_PER_UNIT = 35.37


def _to_number(value):
    number = float(value)
    return int(number) if number.is_integer() else number


def normalize_mapping(data: Dict) -> Dict[float, float]:
    """Convert string keys and values (as found in JSON) to numbers."""
    return {_to_number(unit): _to_number(pixel) for unit, pixel in data.items()}


def load_calibration_mapping(path: str) -> Dict[float, float]:
    """Load a calibration mapping from a JSON file.

    The file holds a single object of ``{"<height>": <pixel>}`` pairs. JSON
    keys are always strings, so both sides are converted to numbers.

    Args:
        path: Path to the calibration JSON file

    Returns:
        Dictionary mapping physical height to pixel offset
    """
    with open(path, 'r') as f:
        data = json.load(f)

    return normalize_mapping(data)


class CalibrationInterpolator:
    """Converts a detected pixel row into a level and a volume."""

    def __init__(
        self,
        mapping: Dict[float, float],
        liters_per_unit: float = DEFAULT_LITERS_PER_UNIT
    ):
        """Initialize the interpolator.

        Args:
            mapping: Physical height (e.g. cm) to pixel offset
            liters_per_unit: Volume of one unit of height
        """
        self.mapping = dict(mapping)
        self.liters_per_unit = liters_per_unit
        self._sorted_points = sorted(self.mapping.items(), key=lambda x: x[0])

    def span(self) -> Tuple[float, float]:
        """Smallest and largest calibrated pixel offset."""
        offsets = [pixel for _, pixel in self._sorted_points]
        return min(offsets), max(offsets)

    def find_bracket(self, pixel: float) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """Find the calibration points used to interpolate ``pixel``.

        Points are walked in ascending height order. ``before`` is the last
        point whose offset is below the pixel and ``after`` is the first
        point whose offset is above it.

        Returns:
            ((before_unit, before_pixel), (after_unit, after_pixel))

        Raises:
            OutOfCalibrationRange: If either side is missing
        """
        before = None
        after = None
        for unit, offset in self._sorted_points:
            logger.debug("Testing %s cm (%s pixel)", unit, offset)
            if offset < pixel:
                before = (unit, offset)
            if after is None and offset > pixel:
                after = (unit, offset)

        if before is None or after is None:
            raise OutOfCalibrationRange(
                f"Pixel {pixel} is outside the calibrated span {self.span()}",
                pixel=pixel,
                span=self.span()
            )

        logger.debug("Before: %s cm | %s px", before[0], before[1])
        logger.debug("After: %s cm | %s px", after[0], after[1])
        return before, after

    def interpolate(self, pixel: float) -> Tuple[float, float]:
        """Interpolate the level and volume for a detected pixel.

        Args:
            pixel: Detected transition row

        Returns:
            Tuple of (level, volume)

        Raises:
            OutOfCalibrationRange: If the mapping has fewer than two points or
                the pixel is not bracketed by it
        """
        if len(self._sorted_points) < 2:
            raise OutOfCalibrationRange(
                f"Calibration needs at least two points, got {len(self._sorted_points)}",
                pixel=pixel
            )

        # Span edges cannot be bracketed; the fraction resolves to 0 or 1 there
        edge = [
            unit for unit, offset in self._sorted_points
            if offset == pixel and offset in self.span()
        ]
        if edge:
            level = float(edge[0])
        else:
            (before_unit, before_px), (after_unit, after_px) = self.find_bracket(pixel)
            fraction = 1 - ((pixel - after_px) / (before_px - after_px))
            logger.debug("Fraction: %.2f", fraction)
            level = before_unit + ((after_unit - before_unit) * fraction)

        volume = level * self.liters_per_unit
        return level, volume
