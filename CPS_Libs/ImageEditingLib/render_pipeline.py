"""
Render Pipeline.

Produces the output raster for one image and one set of settings:

1. Resolve geometry (crop rectangle, scale, size clamp)
2. Draw the source crop stretched to fill the whole output surface
3. Rotate about the surface center (clockwise positive, same size)
4. Apply the filter chain to the drawn result

`render` is a pure function; preview and export both call it directly.

Example:
    >>> from PIL import Image
    >>> source = SourceImage("id-1", "photo.png", Image.new("RGBA", (800, 600), "red"))
    >>> output = render(source, AdjustmentSettings(rotate=90, scale=0.5))
    >>> output.size
    (400, 300)
"""

import logging
from dataclasses import dataclass
from typing import Any, Tuple

from PIL import Image

from CPS_Libs.ImageEditingLib.filter_chain import (
    apply_filter_chain,
    build_filter_chain,
    describe_filter_chain,
)
from CPS_Libs.ImageEditingLib.geometry_resolver import (
    GeometryResult,
    resolve_geometry,
    round_half_up,
)
from CPS_Libs.ImageEditingLib.image_models import (
    AdjustmentSettings,
    SourceImage,
    new_canvas,
)
from CPS_Libs.constants import MAX_OUTPUT_DIMENSION, RGBA_MODE, TRANSPARENT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedOutput:
    """Result of one render.

    Attributes:
        image: RGBA PIL Image of size geometry.output_size
        geometry: Geometry the image was rendered with
    """
    image: Any
    geometry: GeometryResult

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size


def draw_source_region(image: Any, geometry: GeometryResult) -> Any:
    """
    Draw the geometry's source rectangle stretched over the output surface.

    Parts of the source rectangle beyond the image edge are clipped away and
    the matching area of the output stays transparent.

    Args:
        image: Source PIL Image
        geometry: Resolved geometry for that image

    Returns:
        RGBA PIL Image of size geometry.output_size
    """
    cw, ch = geometry.output_size
    src_w, src_h = image.size
    sx, sy, sw, sh = geometry.source_rect
    left, top, right, bottom = geometry.source_box

    clip_left = max(0, left)
    clip_top = max(0, top)
    clip_right = min(src_w, right)
    clip_bottom = min(src_h, bottom)

    canvas = new_canvas(cw, ch)
    if clip_right <= clip_left or clip_bottom <= clip_top:
        logger.debug(f"Crop {geometry.source_rect} lies outside {src_w}x{src_h}, nothing drawn")
        return canvas

    scale_x = cw / sw
    scale_y = ch / sh
    dest_left = round_half_up((clip_left - left) * scale_x)
    dest_top = round_half_up((clip_top - top) * scale_y)
    dest_w = max(1, round_half_up((clip_right - left) * scale_x) - dest_left)
    dest_h = max(1, round_half_up((clip_bottom - top) * scale_y) - dest_top)

    region = image.convert(RGBA_MODE).resize(
        (dest_w, dest_h),
        resample=Image.Resampling.BILINEAR,
        box=(clip_left, clip_top, clip_right, clip_bottom),
    )

    if (dest_left, dest_top, dest_w, dest_h) == (0, 0, cw, ch):
        return region

    canvas.paste(region, (dest_left, dest_top))
    return canvas


def rotate_about_center(image: Any, degrees: float) -> Any:
    """Rotate clockwise about the image center, keeping the image size."""
    if degrees % 360 == 0:
        return image
    width, height = image.size
    # Premultiplied so edges do not pick up the fill color; PIL rotates counter-clockwise
    rotated = image.convert("RGBa").rotate(
        -degrees,
        resample=Image.Resampling.BILINEAR,
        center=(width / 2, height / 2),
        fillcolor=TRANSPARENT,
    )
    return rotated.convert(RGBA_MODE)


def render(
    source: SourceImage,
    settings: AdjustmentSettings,
    max_dimension: int = MAX_OUTPUT_DIMENSION,
) -> RenderedOutput:
    """
    Render a source image with the given settings.

    Args:
        source: Decoded source image
        settings: Adjustment, crop, scale and rotate settings
        max_dimension: Largest allowed output width/height

    Returns:
        RenderedOutput holding a new RGBA image; the source is not modified

    Raises:
        TypeError: If source is not a SourceImage
        ValueError: If the source has not been decoded
    """
    if not isinstance(source, SourceImage):
        raise TypeError(f"Expected SourceImage, got {type(source)}")
    if not source.is_decoded:
        raise ValueError(f"Source image '{source.name}' is not decoded")

    geometry = resolve_geometry(
        source.width,
        source.height,
        settings.crop,
        settings.scale,
        max_dimension,
    )
    chain = build_filter_chain(settings)

    drawn = draw_source_region(source.image, geometry)
    rotated = rotate_about_center(drawn, settings.rotate)
    filtered = apply_filter_chain(rotated, chain)

    logger.debug(
        f"Rendered '{source.name}' {source.width}x{source.height} -> "
        f"{geometry.output_width}x{geometry.output_height} "
        f"rotate={settings.rotate:g} filter='{describe_filter_chain(chain)}'"
    )
    return RenderedOutput(image=filtered, geometry=geometry)
