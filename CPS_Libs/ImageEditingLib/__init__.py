"""
ImageEditingLib - Core image transform functionality

This module provides the data models, geometry resolver, filter chain,
render pipeline and preset catalog for Creative Photo Studio.
"""

from CPS_Libs.ImageEditingLib.image_models import (
    AdjustmentSettings,
    CropRect,
    SourceImage,
    clamp01,
)
from CPS_Libs.ImageEditingLib.geometry_resolver import GeometryResult, resolve_geometry
from CPS_Libs.ImageEditingLib.filter_chain import (
    FilterOperation,
    apply_filter_chain,
    brightness_gain,
    build_filter_chain,
    describe_filter_chain,
)
from CPS_Libs.ImageEditingLib.render_pipeline import RenderedOutput, render
from CPS_Libs.ImageEditingLib.presets import (
    PRESETS,
    Preset,
    apply_preset,
    get_preset,
    list_preset_names,
)

__all__ = [
    "AdjustmentSettings",
    "CropRect",
    "SourceImage",
    "clamp01",
    "GeometryResult",
    "resolve_geometry",
    "FilterOperation",
    "apply_filter_chain",
    "brightness_gain",
    "build_filter_chain",
    "describe_filter_chain",
    "RenderedOutput",
    "render",
    "PRESETS",
    "Preset",
    "apply_preset",
    "get_preset",
    "list_preset_names",
]
