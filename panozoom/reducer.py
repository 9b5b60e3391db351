"""Half-resolution reduction of 2x2 sibling tiles.

The four siblings are laid edge to edge into one block and each output
pixel is the mean of the present pixels of its 2x2 neighbourhood. Pixels
past the trailing canvas edge are absent, not black: they are left out of
both the sum and the count.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

import numpy as np


@dataclass(frozen=True)
class Present:
    pixels: np.ndarray[Any, Any]

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])


@dataclass(frozen=True)
class Absent:
    width: int
    height: int


Quadrant = Union[Present, Absent]


def _quadrant(
    tile: Optional[np.ndarray[Any, Any]], width: int, height: int
) -> Quadrant:
    if tile is None:
        return Absent(width, height)
    return Present(tile)


def reduce_tiles(
    top_left: np.ndarray[Any, Any],
    top_right: Optional[np.ndarray[Any, Any]] = None,
    bottom_left: Optional[np.ndarray[Any, Any]] = None,
    bottom_right: Optional[np.ndarray[Any, Any]] = None,
) -> np.ndarray[Any, Any]:
    if top_left is None:
        raise ValueError("top_left tile is required")
    tl = Present(top_left)
    tr = _quadrant(top_right, 0, tl.height)
    bl = _quadrant(bottom_left, tl.width, 0)
    br = _quadrant(bottom_right, tr.width, bl.height)
    return reduce_quadrants(tl, tr, bl, br)


def reduce_quadrants(
    tl: Present, tr: Quadrant, bl: Quadrant, br: Quadrant
) -> np.ndarray[Any, Any]:
    if (
        tl.width != bl.width
        or tl.height != tr.height
        or br.width != tr.width
        or br.height != bl.height
    ):
        raise ValueError(
            "Sibling tiles do not line up: "
            f"tl={tl.width}x{tl.height} tr={tr.width}x{tr.height} "
            f"bl={bl.width}x{bl.height} br={br.width}x{br.height}"
        )

    full_w = tl.width + tr.width
    full_h = tl.height + bl.height
    half_w = (full_w + 1) // 2
    half_h = (full_h + 1) // 2

    # Padded to even dimensions; padding stays absent
    block = np.zeros((2 * half_h, 2 * half_w, 3), dtype=np.uint32)
    present = np.zeros((2 * half_h, 2 * half_w), dtype=np.uint32)
    for q, x0, y0 in (
        (tl, 0, 0),
        (tr, tl.width, 0),
        (bl, 0, tl.height),
        (br, tl.width, tl.height),
    ):
        if isinstance(q, Present):
            block[y0 : y0 + q.height, x0 : x0 + q.width] = q.pixels
            present[y0 : y0 + q.height, x0 : x0 + q.width] = 1

    sums = block.reshape(half_h, 2, half_w, 2, 3).sum(axis=(1, 3))
    counts = present.reshape(half_h, 2, half_w, 2).sum(axis=(1, 3))
    # A block with no present pixel stays black
    counts = np.maximum(counts, 1)[:, :, np.newaxis]
    return (sums // counts).astype(np.uint8)
