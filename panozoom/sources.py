from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from .errors import InputEmpty
from .utils import probe_size

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceImage:
    index: int
    path: Path
    width: int
    height: int


@dataclass(frozen=True)
class Canvas:
    """Sources placed left to right, top-aligned and cropped to one height."""

    full_width: int
    full_height: int

    @classmethod
    def from_sources(cls, sources: Sequence[SourceImage]) -> "Canvas":
        if not sources:
            raise InputEmpty("At least one input image is needed")
        return cls(
            full_width=sum(s.width for s in sources),
            full_height=min(s.height for s in sources),
        )


def probe_sources(paths: Sequence[Path]) -> List[SourceImage]:
    if not paths:
        raise InputEmpty("At least one input image is needed")

    sources: List[SourceImage] = []
    for index, path in enumerate(paths):
        width, height = probe_size(Path(path))
        log.info("Source %d: %s (%dx%d)", index, path, width, height)
        sources.append(SourceImage(index, Path(path), width, height))

    common = min(s.height for s in sources)
    for s in sources:
        if s.height > common:
            log.warning(
                "Image %s has height %d > %d, it will be cropped",
                s.path,
                s.height,
                common,
            )
    return sources
