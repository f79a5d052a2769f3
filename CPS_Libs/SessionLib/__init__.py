"""
SessionLib - Editor state and image ingestion

This module provides the image collection, the slider/crop control
metadata and the editor session the UI drives.
"""

from CPS_Libs.SessionLib.image_collection import (
    ImageCollection,
    decode_image_file,
    get_supported_image_formats,
    is_supported_format,
)
from CPS_Libs.SessionLib.controls import (
    ADJUST_SLIDERS,
    CROP_INPUTS,
    TRANSFORM_SLIDERS,
    SliderSpec,
    format_value,
    get_slider,
)
from CPS_Libs.SessionLib.editor_session import EditorSession, EditorState

__all__ = [
    "ImageCollection",
    "decode_image_file",
    "get_supported_image_formats",
    "is_supported_format",
    "ADJUST_SLIDERS",
    "CROP_INPUTS",
    "TRANSFORM_SLIDERS",
    "SliderSpec",
    "format_value",
    "get_slider",
    "EditorSession",
    "EditorState",
]
