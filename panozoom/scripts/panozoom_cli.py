from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import yaml
from PIL import Image

from panozoom import __version__
from panozoom.builder import build_pyramid
from panozoom.config import CONFIG_ENV_VAR, config_from_env
from panozoom.errors import PanoZoomError
from panozoom.logging_utils import setup_logging


def build_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="panozoom",
        description=(
            "Cut a horizontal panorama split across several same-height "
            "images into a Deep Zoom tile pyramid (./tiles by default)."
        ),
        epilog=f"Settings are read from the YAML file named by ${CONFIG_ENV_VAR}.",
    )
    p.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    p.add_argument(
        "images",
        nargs="*",
        type=Path,
        metavar="IMG",
        help="Input images, in left to right order",
    )
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_args(argv)
    log = logging.getLogger("panozoom")
    try:
        cfg = config_from_env()
    except (OSError, ValueError, yaml.YAMLError) as e:
        setup_logging()
        log.error("Invalid configuration: %s", e)
        return 1
    setup_logging(cfg.log_level, cfg.log_file)
    # Panorama slices routinely exceed Pillow's decompression-bomb limit
    Image.MAX_IMAGE_PIXELS = None

    try:
        result = build_pyramid(args.images, cfg)
    except PanoZoomError as e:
        log.error("%s", e)
        return 1

    log.info(
        "Pyramid written: %d levels -> %s",
        result.levels,
        result.layout.files_dir,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
