"""
Slider and crop input metadata for the editor panels.

The presentation layer builds its controls from these specs; the session
uses the same ranges to clamp incoming values.
"""

from dataclasses import dataclass
from typing import Any, Tuple

from CPS_Libs.constants import CROP_FIELDS, CROP_STEP, SLIDER_RANGES

PANEL_ADJUST = "Adjust"
PANEL_TRANSFORM = "Transform"


@dataclass(frozen=True)
class SliderSpec:
    label: str
    field: str
    minimum: float
    maximum: float
    step: float
    panel: str

    def format_value(self, value: Any) -> str:
        return format_value(value, self.step)


def _slider(label: str, field: str, panel: str) -> SliderSpec:
    minimum, maximum, step = SLIDER_RANGES[field]
    return SliderSpec(label, field, minimum, maximum, step, panel)


ADJUST_SLIDERS: Tuple[SliderSpec, ...] = (
    _slider("Brightness", "brightness", PANEL_ADJUST),
    _slider("Contrast", "contrast", PANEL_ADJUST),
    _slider("Saturation", "saturation", PANEL_ADJUST),
    _slider("Hue", "hue", PANEL_ADJUST),
    _slider("Exposure", "exposure", PANEL_ADJUST),
    _slider("Blur", "blur", PANEL_ADJUST),
    _slider("Grayscale", "grayscale", PANEL_ADJUST),
    _slider("Sepia", "sepia", PANEL_ADJUST),
    _slider("Invert", "invert", PANEL_ADJUST),
)

TRANSFORM_SLIDERS: Tuple[SliderSpec, ...] = (
    _slider("Rotate", "rotate", PANEL_TRANSFORM),
    _slider("Scale", "scale", PANEL_TRANSFORM),
)

ALL_SLIDERS = ADJUST_SLIDERS + TRANSFORM_SLIDERS

CROP_INPUTS: Tuple[SliderSpec, ...] = tuple(
    SliderSpec(name.upper(), name, 0.0, 1.0, CROP_STEP, PANEL_TRANSFORM) for name in CROP_FIELDS
)


def get_slider(field: str) -> SliderSpec:
    """
    Look up the slider for a settings field.

    Raises:
        KeyError: If no slider controls that field
    """
    for spec in ALL_SLIDERS:
        if spec.field == field:
            return spec
    available = ", ".join(spec.field for spec in ALL_SLIDERS)
    raise KeyError(f"No slider for field '{field}'. Available fields: {available}")


def format_value(value: Any, step: float = 1.0) -> str:
    """Display a slider value: two decimals for fractional steps, none otherwise."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    if step < 1:
        return f"{value:.2f}"
    return f"{value:.0f}"
