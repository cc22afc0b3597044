"""
Image acquisition and preprocessing for the measurement strip.

The camera snapshot is fetched over HTTP, then ImageMagick crops the strip,
converts it to grayscale, runs edge detection and squeezes it to a single
column, writing the per-row brightness dump read by ``profile``.
"""

import logging
import subprocess
import time

import cv2
import requests

from .config import TankConfig
from .errors import CaptureError


logger = logging.getLogger(__name__)

SNAPSHOT_URL = 'http://{host}/snapshot.cgi'


def fetch_snapshot(
    host: str,
    username: str,
    password: str,
    dest: str,
    timeout: float = 10
) -> str:
    """Download a snapshot from the camera.

    Args:
        host: Camera host (and optional port)
        username: Camera user
        password: Camera password
        dest: Path to write the JPEG to
        timeout: Request timeout in seconds

    Returns:
        The destination path

    Raises:
        CaptureError: If the request fails or returns no image data
    """
    url = SNAPSHOT_URL.format(host=host)
    # Trailing timestamp keeps the camera from serving a cached frame
    params = {'user': username, 'pwd': password, 't': int(time.time())}

    try:
        response = requests.get(url, params=params, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise CaptureError(f"Snapshot download from {host} failed: {e}") from e

    if not response.content:
        raise CaptureError(f"Snapshot from {host} was empty")

    with open(dest, 'wb') as f:
        f.write(response.content)
    logger.debug("Saving image to: %s", dest)
    return dest


def build_preprocess_command(image_path: str, output_txt: str, config: TankConfig) -> list:
    """ImageMagick command line that turns a snapshot into a brightness dump."""
    return [
        'convert', image_path,
        '-crop', config.get_crop_geometry(),
        '-colorspace', 'Gray',
        '-edge', str(config.edge),
        '-liquid-rescale', '1x100%',
        output_txt,
    ]


def preprocess_image(image_path: str, output_txt: str, config: TankConfig) -> str:
    """Run ImageMagick over the snapshot.

    Args:
        image_path: Source JPEG
        output_txt: Destination ``.txt`` dump path
        config: Strip geometry and edge radius

    Returns:
        The dump path

    Raises:
        CaptureError: If ImageMagick is missing, fails, or reports errors
    """
    cmd = build_preprocess_command(image_path, output_txt, config)
    logger.debug("Running: %s", ' '.join(cmd))

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise CaptureError("ImageMagick 'convert' not found") from e

    if result.returncode != 0 or result.stderr:
        raise CaptureError(
            f"ImageMagick failed ({result.returncode}): {result.stderr.strip()}"
        )

    logger.debug("Output image to: %s", output_txt)
    return output_txt


def draw_confirmation_image(
    image_path: str,
    pixel: int,
    config: TankConfig,
    dest: str
) -> bool:
    """Draw the detected level onto the original snapshot.

    A red line is drawn across the strip at the detected row.

    Returns:
        True if the image was written
    """
    image = cv2.imread(image_path)
    if image is None:
        logger.error("Failed to load image for confirmation: %s", image_path)
        return False

    cv2.line(
        image,
        (config.strip_offset, int(pixel)),
        (config.strip_offset + config.strip_width, int(pixel)),
        (0, 0, 255),
        1
    )
    logger.debug("Writing confirmation image to %s", dest)
    return bool(cv2.imwrite(dest, image))
