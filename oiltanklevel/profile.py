"""
Parser for the per-pixel text dump written by ImageMagick's ``txt:`` format.

The preprocessed strip is one pixel wide, so every data line describes one
row of the strip::

    # ImageMagick pixel enumeration: 1,480,255,gray
    0,0: ( 29, 29, 29)  #1D1D1D  gray(29,29,29)
    0,1: (  0,  0,  0)  #000000  black
"""

import re
from typing import Iterable, Union

import numpy as np

from .errors import ParseError


PIXEL_LINE = re.compile(r'^0,(\d+): \(\s*(\d+),')


def parse_brightness_dump(lines: Union[str, Iterable[str]]) -> np.ndarray:
    """Convert a brightness dump into a brightness profile.

    Args:
        lines: Dump text, or an iterable of its lines. The first line is the
            header and is skipped.

    Returns:
        Read-only integer array, one sample per row, in line order

    Raises:
        ParseError: If a data line does not match the pixel pattern
    """
    if isinstance(lines, str):
        lines = lines.splitlines()

    samples = []
    for line_number, line in enumerate(lines, start=1):
        if line_number == 1:
            continue  # header
        if not line.strip():
            continue
        match = PIXEL_LINE.match(line)
        if match is None:
            raise ParseError(line_number, line)
        samples.append(int(match.group(2)))

    profile = np.array(samples, dtype=np.int64)
    profile.flags.writeable = False
    return profile


def load_brightness_dump(path: str) -> np.ndarray:
    """Read and parse a brightness dump file."""
    with open(path, 'r') as f:
        return parse_brightness_dump(f)
