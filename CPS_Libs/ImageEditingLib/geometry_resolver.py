"""
Geometry Resolver.

Converts a normalized crop rectangle and a scale factor into the source-pixel
rectangle to sample and the output surface size, bound by a maximum dimension.

Example:
    >>> from CPS_Libs.ImageEditingLib.image_models import CropRect
    >>> geometry = resolve_geometry(4000, 3000, CropRect(0, 0, 0.5, 1), scale=1.0)
    >>> geometry.output_size
    (1067, 1600)
"""

import math
from dataclasses import dataclass
from typing import Tuple

from CPS_Libs.ImageEditingLib.image_models import CropRect
from CPS_Libs.constants import MAX_OUTPUT_DIMENSION


@dataclass(frozen=True)
class GeometryResult:
    """Resolved render geometry.

    Attributes:
        source_rect: (sx, sy, sw, sh) in source pixels, sw/sh at least 1
        target_size: (targetW, targetH) crop size after scaling, before clamping
        ratio: Clamp ratio applied to the target size (<= 1)
        output_size: (cw, ch) final surface size, each in [1, max_dimension]
    """
    source_rect: Tuple[float, float, float, float]
    target_size: Tuple[float, float]
    ratio: float
    output_size: Tuple[int, int]

    @property
    def source_box(self) -> Tuple[float, float, float, float]:
        """Source rectangle as (left, top, right, bottom)."""
        sx, sy, sw, sh = self.source_rect
        return sx, sy, sx + sw, sy + sh

    @property
    def output_width(self) -> int:
        return self.output_size[0]

    @property
    def output_height(self) -> int:
        return self.output_size[1]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def resolve_geometry(
    width: int,
    height: int,
    crop: CropRect,
    scale: float = 1.0,
    max_dimension: int = MAX_OUTPUT_DIMENSION,
) -> GeometryResult:
    """
    Resolve crop, scale and size clamp for a source image.

    Args:
        width: Source width in pixels (> 0)
        height: Source height in pixels (> 0)
        crop: Normalized crop rectangle
        scale: Multiplicative scale applied to the cropped size (> 0)
        max_dimension: Largest allowed output width/height (> 0)

    Returns:
        GeometryResult with source rectangle and output size

    Raises:
        ValueError: If a dimension, the scale or max_dimension is not positive
        TypeError: If crop is not a CropRect
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Source size must be positive, got {width}x{height}")
    if scale <= 0:
        raise ValueError(f"scale must be > 0, got {scale}")
    if max_dimension <= 0:
        raise ValueError(f"max_dimension must be > 0, got {max_dimension}")
    if not isinstance(crop, CropRect):
        raise TypeError(f"Expected CropRect, got {type(crop)}")

    sx = crop.x * width
    sy = crop.y * height
    # Degenerate crops still sample one pixel
    sw = max(1.0, crop.w * width)
    sh = max(1.0, crop.h * height)

    target_w = sw * scale
    target_h = sh * scale

    ratio = min(max_dimension / target_w, max_dimension / target_h, 1.0)
    cw = min(max_dimension, max(1, round_half_up(target_w * ratio)))
    ch = min(max_dimension, max(1, round_half_up(target_h * ratio)))

    return GeometryResult(
        source_rect=(sx, sy, sw, sh),
        target_size=(target_w, target_h),
        ratio=ratio,
        output_size=(cw, ch),
    )
