from __future__ import annotations

from pathlib import Path

from .utils import write_text

DEEPZOOM_NS = "http://schemas.microsoft.com/deepzoom/2008"


def dzi_xml(tile_size: int, width: int, height: int) -> str:
    # Single line, double-quoted declaration, no trailing newline
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<Image xmlns="{DEEPZOOM_NS}" TileSize="{tile_size}" '
        'Overlap="0" Format="jpg">'
        f'<Size Width="{width}" Height="{height}"/></Image>'
    )


def write_descriptor(path: Path, tile_size: int, width: int, height: int) -> None:
    write_text(path, dzi_xml(tile_size, width, height))
