"""
Ink classification over row-major RGBA rasters.

A pixel is *ink* when it is not (nearly) transparent and it is either darker
than 85 % luminance or has all three channels below 220. The second clause
keeps anti-aliased grey stroke edges; together they exclude white and
near-white backgrounds.

Luminance uses the Rec. 601 weights in integer form
(``299 R + 587 G + 114 B < 0.85 * 255 * 1000``) so the test is exact.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np

ALPHA_MIN = 13                      # alpha / 255 >= 0.05
LUMA_LIMIT = 216_750                # 0.85 * 255 * 1000
CHANNEL_LIMIT = 220
SAMPLE_BUDGET = 160_000             # ~400 x 400 samples

Bounds = Tuple[int, int, int, int]  # left, top, right, bottom (exclusive), PIL crop order


def is_ink_pixel(r: int, g: int, b: int, a: int) -> bool:
    if a < ALPHA_MIN:
        return False
    if 299 * r + 587 * g + 114 * b < LUMA_LIMIT:
        return True
    return r < CHANNEL_LIMIT and g < CHANNEL_LIMIT and b < CHANNEL_LIMIT


def ink_mask(rgba: np.ndarray) -> np.ndarray:
    """Boolean ``H x W`` mask of ink pixels for an ``H x W x 4`` uint8 array."""
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError(f"Expected an H x W x 4 RGBA array, got shape {rgba.shape}")
    r = rgba[..., 0].astype(np.int32)
    g = rgba[..., 1].astype(np.int32)
    b = rgba[..., 2].astype(np.int32)
    a = rgba[..., 3]
    luma = 299 * r + 587 * g + 114 * b
    dark = (r < CHANNEL_LIMIT) & (g < CHANNEL_LIMIT) & (b < CHANNEL_LIMIT)
    return (a >= ALPHA_MIN) & ((luma < LUMA_LIMIT) | dark)


def ink_bounds(rgba: np.ndarray) -> Optional[Bounds]:
    """Tight bounding box of all ink pixels (full-resolution scan), or None."""
    mask = ink_mask(rgba)
    rows = np.flatnonzero(mask.any(axis=1))
    if rows.size == 0:
        return None
    cols = np.flatnonzero(mask.any(axis=0))
    return int(cols[0]), int(rows[0]), int(cols[-1]) + 1, int(rows[-1]) + 1


def sample_stride(width: int, height: int) -> int:
    """Grid stride keeping the sample count near ``SAMPLE_BUDGET``."""
    return max(1, int(math.floor(math.sqrt((width * height) / SAMPLE_BUDGET))))


def ink_ratio(rgba: np.ndarray) -> Tuple[float, int]:
    """
    Fraction of sampled pixels that are ink.

    Returns:
        (ratio, sample_count); ratio is 0.0 when nothing was sampled
    """
    height, width = rgba.shape[:2]
    stride = sample_stride(width, height)
    sampled = rgba[::stride, ::stride]
    total = int(sampled.shape[0] * sampled.shape[1])
    if total == 0:
        return 0.0, 0
    return float(np.count_nonzero(ink_mask(sampled))) / total, total
