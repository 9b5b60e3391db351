import numpy as np
import pytest

from panozoom.reducer import Absent, Present, reduce_quadrants, reduce_tiles


def _const(h, w, val):
    return np.full((h, w, 3), val, dtype=np.uint8)


def _naive_reduce(block: np.ndarray) -> np.ndarray:
    h, w = block.shape[:2]
    out = np.zeros(((h + 1) // 2, (w + 1) // 2, 3), dtype=np.uint8)
    for y in range(out.shape[0]):
        for x in range(out.shape[1]):
            px = block[2 * y : 2 * y + 2, 2 * x : 2 * x + 2].reshape(-1, 3)
            out[y, x] = px.astype(np.int64).sum(axis=0) // len(px)
    return out


def test_full_block_is_floor_of_mean():
    rng = np.random.default_rng(0)
    tiles = [rng.integers(0, 256, (6, 6, 3), dtype=np.uint8) for _ in range(4)]
    out = reduce_tiles(*tiles)
    block = np.concatenate(
        [
            np.concatenate([tiles[0], tiles[1]], axis=1),
            np.concatenate([tiles[2], tiles[3]], axis=1),
        ],
        axis=0,
    )
    assert out.shape == (6, 6, 3)
    assert np.array_equal(out, _naive_reduce(block))


def test_sum_does_not_overflow():
    white = _const(4, 4, 255)
    out = reduce_tiles(white, white, white, white)
    assert out.shape == (4, 4, 3)
    assert (out == 255).all()


def test_floor_not_round():
    tl = np.zeros((2, 2, 3), dtype=np.uint8)
    tl[0, 0] = 1
    tl[0, 1] = 1
    tl[1, 0] = 1
    out = reduce_tiles(tl)
    # (1 + 1 + 1 + 0) / 4 -> 0
    assert out.shape == (1, 1, 3)
    assert (out == 0).all()


def test_ragged_corner_is_not_darkened():
    # Odd-sized trailing tiles: 3 wide and 3 high
    tl = _const(4, 4, 200)
    tr = _const(4, 3, 200)
    bl = _const(3, 4, 200)
    br = _const(3, 3, 200)
    out = reduce_tiles(tl, tr, bl, br)
    assert out.shape == (4, 4, 3)
    assert (out == 200).all()


def test_missing_right_and_bottom_siblings():
    tl = _const(5, 3, 100)
    out = reduce_tiles(tl)
    assert out.shape == (3, 2, 3)
    assert (out == 100).all()


def test_edge_pixels_average_only_present_ones():
    tl = np.zeros((3, 3, 3), dtype=np.uint8)
    tl[:, 2] = 90
    tl[2, :] = 30
    tl[2, 2] = 11
    out = reduce_tiles(tl)
    assert out.shape == (2, 2, 3)
    # right column: pixels (2,0),(2,1) -> 90
    assert (out[0, 1] == 90).all()
    # bottom row: pixels (0,2),(1,2) -> 30
    assert (out[1, 0] == 30).all()
    # corner: a single pixel
    assert (out[1, 1] == 11).all()


def test_missing_bottom_sibling_only():
    rng = np.random.default_rng(1)
    tl = rng.integers(0, 256, (3, 4, 3), dtype=np.uint8)
    tr = rng.integers(0, 256, (3, 2, 3), dtype=np.uint8)
    out = reduce_tiles(tl, tr)
    assert out.shape == (2, 3, 3)
    assert np.array_equal(out, _naive_reduce(np.concatenate([tl, tr], axis=1)))


def test_quadrants_must_line_up():
    with pytest.raises(ValueError):
        reduce_tiles(_const(4, 4, 0), _const(3, 4, 0))
    with pytest.raises(ValueError):
        reduce_quadrants(
            Present(_const(2, 2, 0)), Absent(0, 2), Absent(2, 1), Absent(1, 1)
        )
