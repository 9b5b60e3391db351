from __future__ import annotations


class PanoZoomError(Exception):
    """Base class for every fatal pyramid-building failure."""


class InputEmpty(PanoZoomError):
    pass


class ImageProbeError(PanoZoomError):
    pass


class ImageIOError(PanoZoomError):
    pass


class ImageDecodeError(PanoZoomError):
    pass


class TilePersistError(PanoZoomError):
    pass


class SweepOrderError(PanoZoomError, RuntimeError):
    """Extraction went back to a column the source cache already left."""
