"""Deep Zoom tile pyramids from panoramas split across several images."""

__version__ = "0.1.0"

from .builder import BuildResult, PyramidBuilder, build_pyramid
from .config import TilerConfig, load_config
from .levels import levels_for, plan_pyramid

__all__ = [
    "BuildResult",
    "PyramidBuilder",
    "TilerConfig",
    "build_pyramid",
    "levels_for",
    "load_config",
    "plan_pyramid",
]
