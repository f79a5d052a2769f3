"""
Filter Chain Builder and Applier.

Maps adjustment settings to an ordered chain of color/tone operations and
executes that chain on an image.

Chain order is fixed:
    brightness, contrast, saturate, hue-rotate, blur, grayscale, sepia, invert

Operation semantics (values in the 0-1 color range):
- brightness: multiply RGB by a gain (brightness/100 + exposure/100)
- contrast: (v - 0.5) * c + 0.5
- saturate / hue-rotate: luminance-preserving color matrices
- grayscale / sepia: matrices interpolated by amount (clamped to 0-1)
- invert: v * (1 - a) + (1 - v) * a
- blur: Gaussian blur, radius is the standard deviation in pixels

Every step clamps its result to [0, 1]. Alpha is only touched by blur.

Example:
    >>> from CPS_Libs.ImageEditingLib.image_models import AdjustmentSettings
    >>> chain = build_filter_chain(AdjustmentSettings(sepia=18))
    >>> describe_filter_chain(chain)
    'brightness(1) contrast(100%) saturate(100%) hue-rotate(0deg) sepia(18%)'
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Sequence, Tuple

import numpy as np
from PIL import Image, ImageFilter

from CPS_Libs.ImageEditingLib.image_models import AdjustmentSettings
from CPS_Libs.constants import (
    OP_BLUR,
    OP_BRIGHTNESS,
    OP_CONTRAST,
    OP_GRAYSCALE,
    OP_HUE_ROTATE,
    OP_INVERT,
    OP_SATURATE,
    OP_SEPIA,
    RGBA_MODE,
    UNIT_DEGREES,
    UNIT_GAIN,
    UNIT_PERCENT,
    UNIT_PIXELS,
)

logger = logging.getLogger(__name__)

# Operates on a (height, width, 4) float array in [0, 1]
OperationFunction = Callable[[np.ndarray, float], np.ndarray]


@dataclass(frozen=True)
class FilterOperation:
    """One step of a filter chain.

    Attributes:
        name: Operation name (e.g. 'brightness', 'hue-rotate')
        value: Raw value in the operation's unit
        unit: '' for gain, '%' for percentages, 'deg' for degrees, 'px' for blur
    """
    name: str
    value: float
    unit: str = UNIT_GAIN

    @property
    def amount(self) -> float:
        """Value as a factor: percentages are divided by 100."""
        if self.unit == UNIT_PERCENT:
            return self.value / 100.0
        return self.value

    def to_css(self) -> str:
        return f"{self.name}({self.value:g}{self.unit})"


# ============================================================================
# Chain building
# ============================================================================

def brightness_gain(settings: AdjustmentSettings) -> float:
    """Brightness multiplier with exposure folded in as an additive offset."""
    return settings.brightness / 100 + settings.exposure / 100


def build_filter_chain(settings: AdjustmentSettings) -> Tuple[FilterOperation, ...]:
    """
    Build the ordered filter chain for a set of adjustments.

    blur, grayscale, sepia and invert are left out when exactly 0.
    brightness, contrast, saturate and hue-rotate are always present.

    Args:
        settings: Adjustment settings (transform fields are ignored)

    Returns:
        Tuple of FilterOperation in application order
    """
    chain = [
        FilterOperation(OP_BRIGHTNESS, brightness_gain(settings), UNIT_GAIN),
        FilterOperation(OP_CONTRAST, settings.contrast, UNIT_PERCENT),
        FilterOperation(OP_SATURATE, settings.saturation, UNIT_PERCENT),
        FilterOperation(OP_HUE_ROTATE, settings.hue, UNIT_DEGREES),
    ]
    if settings.blur:
        chain.append(FilterOperation(OP_BLUR, settings.blur, UNIT_PIXELS))
    if settings.grayscale:
        chain.append(FilterOperation(OP_GRAYSCALE, settings.grayscale, UNIT_PERCENT))
    if settings.sepia:
        chain.append(FilterOperation(OP_SEPIA, settings.sepia, UNIT_PERCENT))
    if settings.invert:
        chain.append(FilterOperation(OP_INVERT, settings.invert, UNIT_PERCENT))
    return tuple(chain)


def describe_filter_chain(chain: Sequence[FilterOperation]) -> str:
    """Render the chain as a CSS-style filter string."""
    return " ".join(operation.to_css() for operation in chain)


# ============================================================================
# Color matrices
# ============================================================================

def saturate_matrix(amount: float) -> np.ndarray:
    s = amount
    return np.array([
        [0.213 + 0.787 * s, 0.715 - 0.715 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 + 0.285 * s, 0.072 - 0.072 * s],
        [0.213 - 0.213 * s, 0.715 - 0.715 * s, 0.072 + 0.928 * s],
    ])


def hue_rotate_matrix(degrees: float) -> np.ndarray:
    angle = math.radians(degrees)
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array([
        [0.213 + c * 0.787 - s * 0.213, 0.715 - c * 0.715 - s * 0.715, 0.072 - c * 0.072 + s * 0.928],
        [0.213 - c * 0.213 + s * 0.143, 0.715 + c * 0.285 + s * 0.140, 0.072 - c * 0.072 - s * 0.283],
        [0.213 - c * 0.213 - s * 0.787, 0.715 - c * 0.715 + s * 0.715, 0.072 + c * 0.928 + s * 0.072],
    ])


def grayscale_matrix(amount: float) -> np.ndarray:
    g = 1.0 - min(1.0, max(0.0, amount))
    return np.array([
        [0.2126 + 0.7874 * g, 0.7152 - 0.7152 * g, 0.0722 - 0.0722 * g],
        [0.2126 - 0.2126 * g, 0.7152 + 0.2848 * g, 0.0722 - 0.0722 * g],
        [0.2126 - 0.2126 * g, 0.7152 - 0.7152 * g, 0.0722 + 0.9278 * g],
    ])


def sepia_matrix(amount: float) -> np.ndarray:
    g = 1.0 - min(1.0, max(0.0, amount))
    return np.array([
        [0.393 + 0.607 * g, 0.769 - 0.769 * g, 0.189 - 0.189 * g],
        [0.349 - 0.349 * g, 0.686 + 0.314 * g, 0.168 - 0.168 * g],
        [0.272 - 0.272 * g, 0.534 - 0.534 * g, 0.131 + 0.869 * g],
    ])


def _apply_matrix(rgba: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    result = rgba.copy()
    result[..., :3] = np.clip(rgba[..., :3] @ matrix.T, 0.0, 1.0)
    return result


# ============================================================================
# Operations
# ============================================================================

def _apply_brightness(rgba: np.ndarray, gain: float) -> np.ndarray:
    result = rgba.copy()
    result[..., :3] = np.clip(rgba[..., :3] * max(0.0, gain), 0.0, 1.0)
    return result


def _apply_contrast(rgba: np.ndarray, amount: float) -> np.ndarray:
    result = rgba.copy()
    result[..., :3] = np.clip((rgba[..., :3] - 0.5) * amount + 0.5, 0.0, 1.0)
    return result


def _apply_saturate(rgba: np.ndarray, amount: float) -> np.ndarray:
    return _apply_matrix(rgba, saturate_matrix(amount))


def _apply_hue_rotate(rgba: np.ndarray, degrees: float) -> np.ndarray:
    return _apply_matrix(rgba, hue_rotate_matrix(degrees))


def _apply_grayscale(rgba: np.ndarray, amount: float) -> np.ndarray:
    return _apply_matrix(rgba, grayscale_matrix(amount))


def _apply_sepia(rgba: np.ndarray, amount: float) -> np.ndarray:
    return _apply_matrix(rgba, sepia_matrix(amount))


def _apply_invert(rgba: np.ndarray, amount: float) -> np.ndarray:
    a = min(1.0, max(0.0, amount))
    result = rgba.copy()
    rgb = rgba[..., :3]
    result[..., :3] = np.clip(rgb * (1.0 - a) + (1.0 - rgb) * a, 0.0, 1.0)
    return result


def _apply_blur(rgba: np.ndarray, radius: float) -> np.ndarray:
    if radius <= 0:
        return rgba
    # Premultiplied so transparent pixels do not bleed dark fringes
    image = array_to_image(rgba).convert("RGBa")
    blurred = image.filter(ImageFilter.GaussianBlur(radius=radius)).convert(RGBA_MODE)
    return image_to_array(blurred)


OPERATIONS: Dict[str, OperationFunction] = {
    OP_BRIGHTNESS: _apply_brightness,
    OP_CONTRAST: _apply_contrast,
    OP_SATURATE: _apply_saturate,
    OP_HUE_ROTATE: _apply_hue_rotate,
    OP_BLUR: _apply_blur,
    OP_GRAYSCALE: _apply_grayscale,
    OP_SEPIA: _apply_sepia,
    OP_INVERT: _apply_invert,
}


def get_operation(name: str) -> OperationFunction:
    """
    Look up the function implementing a filter operation.

    Raises:
        KeyError: If no operation is registered under name
    """
    if name not in OPERATIONS:
        available = ", ".join(OPERATIONS)
        raise KeyError(f"No filter operation named '{name}'. Available operations: {available}")
    return OPERATIONS[name]


# ============================================================================
# Conversion helpers
# ============================================================================

def image_to_array(image: Any) -> np.ndarray:
    """Convert an image to a (height, width, 4) float array in [0, 1]."""
    return np.asarray(image.convert(RGBA_MODE), dtype=np.float64) / 255.0


def array_to_image(rgba: np.ndarray) -> Any:
    """Convert a float RGBA array in [0, 1] back to an 8-bit RGBA image."""
    data = np.rint(np.clip(rgba, 0.0, 1.0) * 255.0).astype(np.uint8)
    return Image.fromarray(data)


def apply_filter_chain(image: Any, chain: Sequence[FilterOperation]) -> Any:
    """
    Apply a filter chain to an image.

    Args:
        image: PIL Image (converted to RGBA)
        chain: Operations from build_filter_chain()

    Returns:
        New RGBA PIL Image; the input is not modified

    Raises:
        TypeError: If image is not a PIL Image
        KeyError: If the chain contains an unknown operation
    """
    if not hasattr(image, "convert"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    if not chain:
        return image.convert(RGBA_MODE).copy()

    rgba = image_to_array(image)
    for operation in chain:
        rgba = get_operation(operation.name)(rgba, operation.amount)

    logger.debug(f"Applied filter chain: {describe_filter_chain(chain)}")
    return array_to_image(rgba)
