"""Finest-level tile extraction from a canvas spread over several files.

The canvas is never assembled in memory. Each tile is composed from the
few source images its columns overlap, and decoded sources are kept in a
cache only while the column sweep still needs them.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np

from .errors import ImageDecodeError, SweepOrderError
from .sources import Canvas, SourceImage
from .utils import load_rgb

log = logging.getLogger(__name__)

Loader = Callable[[SourceImage], np.ndarray]


class SourceImageCache:
    """Decoded source buffers keyed by source index.

    Entries are loaded on first use and evicted once the sweep has moved
    past the last column their source covers. The sweep position is a
    high-water mark: it may only grow, so an evicted source is never
    needed again.
    """

    def __init__(self, loader: Loader) -> None:
        self._loader = loader
        self._entries: Dict[int, np.ndarray[Any, Any]] = {}
        self._sweep_left = 0
        self.loads = 0
        self.peak_resident = 0

    def __contains__(self, index: int) -> bool:
        return index in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def resident(self) -> List[int]:
        return sorted(self._entries)

    @property
    def sweep_left(self) -> int:
        return self._sweep_left

    def advance(self, left: int) -> None:
        if left < self._sweep_left:
            raise SweepOrderError(
                f"Tile column starting at x={left} requested after the "
                f"sweep reached x={self._sweep_left}"
            )
        self._sweep_left = left

    def get(self, source: SourceImage) -> np.ndarray[Any, Any]:
        buf = self._entries.get(source.index)
        if buf is None:
            buf = self._loader(source)
            self._entries[source.index] = buf
            self.loads += 1
            self.peak_resident = max(self.peak_resident, len(self._entries))
        return buf

    def evict(self, index: int) -> None:
        if self._entries.pop(index, None) is not None:
            log.debug("Evicted source %d", index)

    def clear(self) -> None:
        self._entries.clear()


class CanvasExtractor:
    """Cuts finest-level tiles out of the virtual canvas.

    Tiles must be requested with ``tile_x`` non-decreasing (``tile_x``
    outer, ``tile_y`` inner); the cache raises ``SweepOrderError``
    otherwise.
    """

    def __init__(
        self,
        sources: Sequence[SourceImage],
        tile_size: int,
        loader: Optional[Loader] = None,
    ) -> None:
        self.sources = list(sources)
        self.canvas = Canvas.from_sources(self.sources)
        self.tile_size = tile_size
        self.cache = SourceImageCache(loader or self._load_source)

    def _load_source(self, source: SourceImage) -> np.ndarray[Any, Any]:
        height = self.canvas.full_height
        buf = load_rgb(source.path, height=height)
        if buf.shape[:2] != (height, source.width):
            raise ImageDecodeError(
                f"Decoded {source.path} as {buf.shape[1]}x{buf.shape[0]}, "
                f"expected {source.width}x{height}"
            )
        return buf

    def extract(self, tile_x: int, tile_y: int) -> np.ndarray[Any, Any]:
        ts = self.tile_size
        full_w = self.canvas.full_width
        full_h = self.canvas.full_height
        left = tile_x * ts
        top = tile_y * ts
        if left >= full_w or top >= full_h or tile_x < 0 or tile_y < 0:
            raise IndexError(f"Tile ({tile_x}, {tile_y}) is outside the canvas")
        right = min(left + ts, full_w)
        bottom = min(top + ts, full_h)

        self.cache.advance(left)
        tile = np.zeros((bottom - top, right - left, 3), dtype=np.uint8)

        accum_left = 0
        for source in self.sources:
            accum_right = accum_left + source.width
            if accum_right <= left:
                # The sweep has passed this source for good
                self.cache.evict(source.index)
            else:
                log.debug(
                    "Using image %d for tile (%d, %d)",
                    source.index,
                    tile_x,
                    tile_y,
                )
                buf = self.cache.get(source)
                inner_left = max(left - accum_left, 0)
                inner_right = min(right, accum_right) - accum_left
                dst = max(accum_left - left, 0)
                tile[:, dst : dst + inner_right - inner_left] = buf[
                    top:bottom, inner_left:inner_right
                ]
            accum_left = accum_right
            if accum_left >= right:
                break
        return tile
