#!/usr/bin/env python3
"""
Measure the oil tank level from the webcam.

Downloads a snapshot, extracts the sight glass strip, finds the liquid
surface and converts it to cm and liters with the calibration mapping.
Designed to run via cron job.

Usage:
    python measure_tank_level.py --host HOST --username USER --password PASS \
        --mapping calibration.json [--output levels.jsonl] [--loglevel DEBUG]

Examples:
    # Append the level to a log file every run
    python measure_tank_level.py --host 192.168.1.20 --username admin \
        --password secret --mapping calibration.json --output /var/log/oil.jsonl

    # Re-measure a saved snapshot and draw the detected line on it
    python measure_tank_level.py --image snapshot.jpg --mapping calibration.json \
        --confirmation-image confirm.jpg --loglevel DEBUG
"""

import argparse
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from oiltanklevel import TankConfig, TankLevelError, load_config, load_calibration_mapping
from oiltanklevel.integration import measure_and_log


def build_parser():
    parser = argparse.ArgumentParser(description='Determine oil tank level from webcam')
    parser.add_argument('--host', help='Camera host')
    parser.add_argument('--username', help='Camera user')
    parser.add_argument('--password', help='Camera password')
    parser.add_argument('--image', help='Measure this snapshot instead of downloading one')
    parser.add_argument('--mapping', help='Calibration JSON file ({"cm": pixel, ...})')
    parser.add_argument('--config', help='Tank config JSON file')
    parser.add_argument('--loglevel', default='INFO', help='Logging level')
    parser.add_argument('--strip-width', type=int)
    parser.add_argument('--strip-offset', type=int)
    parser.add_argument('--image-height', type=int)
    parser.add_argument('--edge', type=int, help='ImageMagick edge radius')
    parser.add_argument('--bright-threshold', type=int)
    parser.add_argument('--zero-run-length', type=int)
    parser.add_argument('--liter-per-cm', type=float)
    parser.add_argument('--confirmation-image', help='Write snapshot with the level drawn on it')
    parser.add_argument('--keep-txt-file', action='store_true', help='Keep the brightness dump')
    parser.add_argument('--output', help='Append the result to this JSON-lines file')
    parser.add_argument('--snapshot', help='Write the result to this JSON file')
    parser.add_argument('--db', help='Store the result in this SQLite database')
    return parser


def build_config(args) -> TankConfig:
    """Merge the config file, mapping file and command line overrides."""
    config = load_config(args.config) if args.config else TankConfig()

    if args.mapping:
        config.calibration = load_calibration_mapping(args.mapping)

    overrides = {
        'strip_width': args.strip_width,
        'strip_offset': args.strip_offset,
        'image_height': args.image_height,
        'edge': args.edge,
        'bright_threshold': args.bright_threshold,
        'zero_run_length': args.zero_run_length,
        'liters_per_unit': args.liter_per_cm,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(config, name, value)

    return config


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    loglevel = logging.getLevelName(args.loglevel.upper())
    if not isinstance(loglevel, int):
        parser.error(f"Unknown --loglevel: {args.loglevel}")

    logging.basicConfig(
        level=loglevel,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    logger = logging.getLogger('measure_tank_level')

    if not args.image:
        for name in ('host', 'username', 'password'):
            if not getattr(args, name):
                parser.error(f"Required parameter not defined: --{name}")

    config = build_config(args)
    if not config.calibration:
        parser.error("Required parameter not defined: --mapping")
    if config.zero_run_length < 1:
        parser.error(f"--zero-run-length must be at least 1, got {config.zero_run_length}")

    try:
        measure_and_log(
            config,
            host=args.host,
            username=args.username,
            password=args.password,
            image_path=args.image,
            output=args.output,
            snapshot=args.snapshot,
            confirmation_image=args.confirmation_image,
            keep_txt_file=args.keep_txt_file,
            db_path=args.db
        )
    except TankLevelError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
