"""
Image editing data models for Creative Photo Studio.

This module defines core data structures used throughout the editor.

Classes:
    SourceImage: Immutable decoded raster with a stable id and original filename
    CropRect: Normalized crop rectangle, every field clamped to [0, 1]
    AdjustmentSettings: Value object holding every adjustment and transform field

Functions:
    coerce_number: Convert loosely-typed input to a finite float
    clamp01: Coerce and clamp a value to [0, 1]
"""

import math
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Tuple

import numpy as np
from PIL import Image

from CPS_Libs.constants import (
    ADJUSTMENT_FIELDS,
    CROP_FIELDS,
    FIELD_CROP,
    NEUTRAL_VALUES,
    RGBA_MODE,
    SLIDER_RANGES,
    TRANSPARENT,
)


def coerce_number(value: Any, default: float = 0.0) -> float:
    """
    Convert a loosely-typed input value to a finite float.

    Strings are parsed, NaN/inf and anything unparseable fall back to default.
    """
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def clamp01(value: Any) -> float:
    """Coerce to a number (non-numeric -> 0) and clamp to [0, 1]."""
    return max(0.0, min(1.0, coerce_number(value, 0.0)))


def clamp_to_range(field_name: str, value: Any) -> float:
    """
    Coerce and clamp a slider value to its field range.

    Non-numeric input falls back to the field's neutral value.

    Raises:
        KeyError: If field_name has no slider range
    """
    if field_name not in SLIDER_RANGES:
        available = ", ".join(SLIDER_RANGES)
        raise KeyError(f"Unknown adjustment field '{field_name}'. Available fields: {available}")
    low, high, _step = SLIDER_RANGES[field_name]
    number = coerce_number(value, NEUTRAL_VALUES[field_name])
    return max(low, min(high, number))


@dataclass(frozen=True)
class SourceImage:
    """Decoded input image.

    Attributes:
        image_id: Stable unique identifier assigned on load
        name: Original filename, used for export naming
        image: Decoded Pillow image (RGBA)
    """
    image_id: str
    name: str
    image: Any

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def is_decoded(self) -> bool:
        return self.image is not None and self.width > 0 and self.height > 0

    def to_array(self) -> np.ndarray:
        """Return a (height, width, 4) uint8 copy of the pixel data."""
        return np.asarray(self.image.convert(RGBA_MODE), dtype=np.uint8).copy()

    def pixel(self, x: int, y: int) -> Tuple[int, ...]:
        return self.image.getpixel((x, y))


@dataclass(frozen=True)
class CropRect:
    """Normalized crop rectangle within the source image.

    Each field is clamped to [0, 1] independently. x + w <= 1 is not enforced;
    a crop running past the image edge renders transparent there.
    """
    x: float = 0.0
    y: float = 0.0
    w: float = 1.0
    h: float = 1.0

    def __post_init__(self):
        for name in CROP_FIELDS:
            object.__setattr__(self, name, clamp01(getattr(self, name)))

    @classmethod
    def full(cls) -> "CropRect":
        return cls()

    def with_field(self, name: str, value: Any) -> "CropRect":
        if name not in CROP_FIELDS:
            raise KeyError(f"Unknown crop field '{name}'. Valid fields: {', '.join(CROP_FIELDS)}")
        return replace(self, **{name: value})

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.w, self.h

    def to_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in CROP_FIELDS}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CropRect":
        return cls(**{k: v for k, v in data.items() if k in CROP_FIELDS})


@dataclass(frozen=True)
class AdjustmentSettings:
    """Every user-adjustable parameter of a render.

    Attributes:
        brightness: 0-200, 100 = neutral
        contrast: 0-200, 100 = neutral
        saturation: 0-300, 100 = neutral
        hue: -180-180 degrees
        blur: 0-10 pixel radius
        grayscale: 0-100 percent
        sepia: 0-100 percent
        invert: 0-100 percent
        exposure: -50-50, additive offset on the brightness gain
        rotate: -180-180 degrees, clockwise positive
        scale: 0.1-3 multiplicative
        crop: Normalized crop rectangle
    """
    brightness: float = 100.0
    contrast: float = 100.0
    saturation: float = 100.0
    hue: float = 0.0
    blur: float = 0.0
    grayscale: float = 0.0
    sepia: float = 0.0
    invert: float = 0.0
    exposure: float = 0.0
    rotate: float = 0.0
    scale: float = 1.0
    crop: CropRect = field(default_factory=CropRect)

    def with_value(self, field_name: str, value: Any) -> "AdjustmentSettings":
        """
        Return a copy with one slider field replaced.

        The value is coerced and clamped to the field's slider range.

        Raises:
            KeyError: If field_name is not a slider field
        """
        return replace(self, **{field_name: clamp_to_range(field_name, value)})

    def with_crop(self, crop: CropRect) -> "AdjustmentSettings":
        if not isinstance(crop, CropRect):
            raise TypeError(f"Expected CropRect, got {type(crop)}")
        return replace(self, crop=crop)

    def with_adjustments(self, values: Mapping[str, Any]) -> "AdjustmentSettings":
        """Replace several adjustment-only fields at once."""
        unknown = [name for name in values if name not in ADJUSTMENT_FIELDS]
        if unknown:
            raise KeyError(f"Not adjustment fields: {', '.join(sorted(unknown))}")
        return replace(
            self,
            **{name: clamp_to_range(name, value) for name, value in values.items()},
        )

    def adjustment_values(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in ADJUSTMENT_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            f.name: getattr(self, f.name) for f in fields(self) if f.name != FIELD_CROP
        }
        data[FIELD_CROP] = self.crop.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AdjustmentSettings":
        """Create from dictionary, ignoring unknown keys."""
        settings = cls()
        for name, value in data.items():
            if name == FIELD_CROP:
                crop = value if isinstance(value, CropRect) else CropRect.from_dict(value or {})
                settings = settings.with_crop(crop)
            elif name in SLIDER_RANGES:
                settings = settings.with_value(name, value)
        return settings


def new_canvas(width: int, height: int) -> Any:
    """Allocate a fully transparent RGBA surface."""
    return Image.new(RGBA_MODE, (width, height), TRANSPARENT)
