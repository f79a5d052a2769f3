"""
Preset Catalog for Creative Photo Studio.

Presets are named bundles of adjustment values. Each one carries a complete
set of adjustment fields and never touches rotate, scale or crop, so applying
a preset replaces exactly the adjustments and is idempotent.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Union

from CPS_Libs.ImageEditingLib.image_models import AdjustmentSettings
from CPS_Libs.constants import ADJUSTMENT_FIELDS, NEUTRAL_VALUES


# Default adjustments (all neutral)
DEFAULT_ADJUSTMENTS = {name: NEUTRAL_VALUES[name] for name in ADJUSTMENT_FIELDS}


@dataclass(frozen=True)
class Preset:
    name: str
    values: Mapping[str, float]


def _make_preset(name: str, adjustments: Dict[str, float] = None) -> Preset:
    """Helper to create a preset with neutral defaults filled in."""
    values = DEFAULT_ADJUSTMENTS.copy()
    if adjustments:
        unknown = set(adjustments) - set(ADJUSTMENT_FIELDS)
        if unknown:
            raise ValueError(f"Preset '{name}' has non-adjustment fields: {', '.join(sorted(unknown))}")
        values.update({key: float(value) for key, value in adjustments.items()})
    return Preset(name=name, values=MappingProxyType(values))


# ============================================================================
# PRESETS (display order)
# ============================================================================

PRESETS = (
    _make_preset("Original"),
    _make_preset("Vivid Pop", {
        "brightness": 110,
        "contrast": 115,
        "saturation": 135,
        "exposure": 5,
    }),
    _make_preset("Film Warm", {
        "brightness": 105,
        "contrast": 95,
        "saturation": 110,
        "hue": 10,
        "sepia": 18,
        "exposure": 4,
    }),
    _make_preset("Mono", {
        "contrast": 120,
        "saturation": 0,
        "grayscale": 100,
    }),
    _make_preset("Noir", {
        "brightness": 95,
        "contrast": 140,
        "saturation": 0,
        "blur": 1,
        "grayscale": 100,
        "exposure": -5,
    }),
)

_PRESETS_BY_NAME = {preset.name: preset for preset in PRESETS}


def list_preset_names() -> List[str]:
    return [preset.name for preset in PRESETS]


def get_preset(name: str) -> Preset:
    """
    Look up a preset by its display name.

    Raises:
        KeyError: If no preset has that name
    """
    if name not in _PRESETS_BY_NAME:
        available = ", ".join(list_preset_names())
        raise KeyError(f"Unknown preset '{name}'. Available presets: {available}")
    return _PRESETS_BY_NAME[name]


def apply_preset(
    settings: AdjustmentSettings,
    preset: Union[Preset, str],
) -> AdjustmentSettings:
    """
    Merge a preset over the current settings.

    Args:
        settings: Current settings
        preset: Preset instance or its name

    Returns:
        New settings with every adjustment field taken from the preset and
        rotate/scale/crop carried over unchanged
    """
    if isinstance(preset, str):
        preset = get_preset(preset)
    return settings.with_adjustments(preset.values)
