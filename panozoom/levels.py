from __future__ import annotations

from dataclasses import dataclass
from typing import List


def _ceil_div(a: int, b: int) -> int:
    return (a + b - 1) // b


def levels_for(n: int) -> int:
    """Number of levels needed to halve ``n`` down to a single unit.

    One extra level is added whenever repeated halving would not land
    exactly on 1.
    """
    if n <= 0:
        raise ValueError(f"levels_for expects a positive integer, got {n}")
    if n == 1:
        return 1
    l2 = n.bit_length() - 1
    if n == 1 << l2:
        return l2 + 1
    return l2 + 2


def averaged_levels(tile_count_width: int, tile_count_height: int) -> int:
    """Historical level count, halfway between the finest grid's axes.

    Disagrees with levels_for on non-square canvases and can leave more
    than one tile at level 0, so plan_pyramid never uses it.
    """
    return (
        levels_for(tile_count_width) + levels_for(tile_count_height) + 1
    ) // 2


@dataclass(frozen=True)
class LevelGrid:
    tile_count_width: int
    tile_count_height: int

    def halved(self) -> "LevelGrid":
        return LevelGrid(
            _ceil_div(self.tile_count_width, 2),
            _ceil_div(self.tile_count_height, 2),
        )

    @property
    def tile_count(self) -> int:
        return self.tile_count_width * self.tile_count_height


def finest_grid(full_width: int, full_height: int, tile_size: int) -> LevelGrid:
    if tile_size <= 0:
        raise ValueError(f"tile_size must be positive, got {tile_size}")
    return LevelGrid(
        _ceil_div(full_width, tile_size), _ceil_div(full_height, tile_size)
    )


@dataclass(frozen=True)
class PyramidPlan:
    levels: int
    grids: List[LevelGrid]  # indexed by level, 0 is coarsest

    @property
    def finest(self) -> LevelGrid:
        return self.grids[-1]


def plan_pyramid(
    full_width: int,
    full_height: int,
    tile_size: int,
) -> PyramidPlan:
    top = finest_grid(full_width, full_height, tile_size)
    levels = levels_for(max(full_width, full_height))

    grids = [top]
    for _ in range(levels - 1):
        grids.append(grids[-1].halved())
    grids.reverse()
    return PyramidPlan(levels=levels, grids=grids)
