from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import numpy as np
from tqdm import tqdm

from .config import TilerConfig
from .descriptor import write_descriptor
from .errors import InputEmpty, TilePersistError
from .extractor import CanvasExtractor
from .levels import LevelGrid, PyramidPlan, plan_pyramid
from .reducer import reduce_tiles
from .sources import Canvas, probe_sources
from .timing import TimingStats, record
from .utils import load_rgb, save_tile

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TileLayout:
    """Deep Zoom directory layout under one output root."""

    root: Path
    name: str = "tiles"

    @property
    def descriptor_path(self) -> Path:
        return self.root / f"{self.name}.dzi"

    @property
    def files_dir(self) -> Path:
        return self.root / f"{self.name}_files"

    def level_dir(self, level: int) -> Path:
        return self.files_dir / str(level)

    def tile_path(self, level: int, tile_x: int, tile_y: int) -> Path:
        return self.level_dir(level) / f"{tile_x}_{tile_y}.jpg"

    def create_level_dir(self, level: int) -> Path:
        d = self.level_dir(level)
        try:
            d.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TilePersistError(f"Cannot create directory {d}: {e}") from e
        return d


@dataclass
class BuildResult:
    canvas: Canvas
    plan: PyramidPlan
    layout: TileLayout
    timings: Dict[str, Any]

    @property
    def levels(self) -> int:
        return self.plan.levels


class PyramidBuilder:
    def __init__(
        self, paths: Sequence[Path], config: Optional[TilerConfig] = None
    ) -> None:
        self.paths = [Path(p) for p in paths]
        self.config = config or TilerConfig()
        self.layout = TileLayout(self.config.output_root)
        self.timings = TimingStats(enabled=self.config.profiling)

    def run(self) -> BuildResult:
        if not self.paths:
            raise InputEmpty("At least one input image is needed")
        cfg = self.config

        with record(self.timings, "probe"):
            sources = probe_sources(self.paths)
        canvas = Canvas.from_sources(sources)
        plan = plan_pyramid(
            canvas.full_width,
            canvas.full_height,
            cfg.tile_size,
        )
        log.info(
            "Canvas %dx%d, tile size %d, levels: %d, finest grid %dx%d",
            canvas.full_width,
            canvas.full_height,
            cfg.tile_size,
            plan.levels,
            plan.finest.tile_count_width,
            plan.finest.tile_count_height,
        )

        extractor = CanvasExtractor(sources, cfg.tile_size)
        self._extract_finest(extractor, plan.levels - 1, plan.finest)
        log.info(
            "Decoded %d source loads, at most %d resident",
            extractor.cache.loads,
            extractor.cache.peak_resident,
        )
        extractor.cache.clear()

        for parent_level in range(plan.levels - 1, 0, -1):
            self._reduce_level(
                parent_level, plan.grids[parent_level], plan.grids[parent_level - 1]
            )

        write_descriptor(
            self.layout.descriptor_path,
            cfg.tile_size,
            canvas.full_width,
            canvas.full_height,
        )
        log.info("Descriptor written: %s", self.layout.descriptor_path)
        self.timings.log_summary(log)
        return BuildResult(canvas, plan, self.layout, self.timings.as_dict())

    def _save(self, tile: np.ndarray[Any, Any], path: Path) -> None:
        with record(self.timings, "save_tile"):
            save_tile(tile, path, quality=self.config.jpeg_quality)

    def _load(self, level: int, tile_x: int, tile_y: int) -> np.ndarray[Any, Any]:
        with record(self.timings, "load_tile"):
            return load_rgb(self.layout.tile_path(level, tile_x, tile_y))

    def _progress(self, total: int, level: int) -> tqdm:
        return tqdm(
            total=total,
            desc=f"Level {level}",
            unit="tile",
            disable=not self.config.show_progress,
        )

    def _extract_finest(
        self, extractor: CanvasExtractor, level: int, grid: LevelGrid
    ) -> None:
        self.layout.create_level_dir(level)
        with self._progress(grid.tile_count, level) as bar:
            # tile_x outer: the source cache only ever slides right
            for tx in range(grid.tile_count_width):
                for ty in range(grid.tile_count_height):
                    with record(self.timings, "extract"):
                        tile = extractor.extract(tx, ty)
                    self._save(tile, self.layout.tile_path(level, tx, ty))
                    bar.update(1)

    def _reduce_level(
        self, parent_level: int, parent: LevelGrid, child: LevelGrid
    ) -> None:
        level = parent_level - 1
        self.layout.create_level_dir(level)
        with self._progress(child.tile_count, level) as bar:
            for tx in range(child.tile_count_width):
                for ty in range(child.tile_count_height):
                    x0, y0 = 2 * tx, 2 * ty
                    has_right = x0 + 1 < parent.tile_count_width
                    has_bottom = y0 + 1 < parent.tile_count_height
                    top_left = self._load(parent_level, x0, y0)
                    top_right = (
                        self._load(parent_level, x0 + 1, y0) if has_right else None
                    )
                    bottom_left = (
                        self._load(parent_level, x0, y0 + 1) if has_bottom else None
                    )
                    bottom_right = (
                        self._load(parent_level, x0 + 1, y0 + 1)
                        if has_right and has_bottom
                        else None
                    )
                    with record(self.timings, "reduce"):
                        tile = reduce_tiles(
                            top_left, top_right, bottom_left, bottom_right
                        )
                    self._save(tile, self.layout.tile_path(level, tx, ty))
                    bar.update(1)


def build_pyramid(
    paths: Sequence[Path], config: Optional[TilerConfig] = None
) -> BuildResult:
    return PyramidBuilder(paths, config).run()
