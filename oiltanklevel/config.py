"""
Configuration for a tank level measurement run.
"""

import json
import os
from dataclasses import dataclass, field, fields
from typing import Dict, Any

from .calibration import DEFAULT_LITERS_PER_UNIT, load_calibration_mapping, normalize_mapping


@dataclass
class TankConfig:
    """All tunables for one tank and camera."""
    calibration: Dict[float, float] = field(default_factory=dict)  # cm -> pixel row
    bright_threshold: int = 100  # Sample value that opens the edge search
    zero_run_length: int = 3  # Consecutive black rows required for the edge
    liters_per_unit: float = DEFAULT_LITERS_PER_UNIT
    strip_offset: int = 236  # X coordinate of the strip in the camera image
    strip_width: int = 60
    image_height: int = 480
    edge: int = 20  # ImageMagick -edge radius

    def get_crop_geometry(self) -> str:
        """ImageMagick crop geometry for the measurement strip."""
        return f"{self.strip_width}x{self.image_height}+{self.strip_offset}+0"

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: str = '') -> 'TankConfig':
        """Build a config from a dictionary.

        A ``calibration_path`` entry is resolved relative to ``base_dir`` and
        loaded as the calibration mapping. Unknown keys are ignored.
        """
        data = dict(data)
        calibration_path = data.pop('calibration_path', None)

        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}

        if calibration_path:
            kwargs['calibration'] = load_calibration_mapping(
                os.path.join(base_dir, calibration_path)
            )
        elif 'calibration' in kwargs:
            kwargs['calibration'] = normalize_mapping(kwargs['calibration'])

        return cls(**kwargs)


def load_config(config_path: str) -> TankConfig:
    """Load a TankConfig from a JSON file."""
    with open(config_path, 'r') as f:
        data = json.load(f)
    return TankConfig.from_dict(data, base_dir=os.path.dirname(config_path))
