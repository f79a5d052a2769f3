"""
Constants and configuration values for Creative Photo Studio.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the editor.
"""

# Render constants
MAX_OUTPUT_DIMENSION = 1600
RGBA_MODE = "RGBA"
TRANSPARENT = (0, 0, 0, 0)

# Adjustment field names
FIELD_BRIGHTNESS = "brightness"
FIELD_CONTRAST = "contrast"
FIELD_SATURATION = "saturation"
FIELD_HUE = "hue"
FIELD_BLUR = "blur"
FIELD_GRAYSCALE = "grayscale"
FIELD_SEPIA = "sepia"
FIELD_INVERT = "invert"
FIELD_EXPOSURE = "exposure"
FIELD_ROTATE = "rotate"
FIELD_SCALE = "scale"
FIELD_CROP = "crop"

# Fields a preset may carry (never rotate/scale/crop)
ADJUSTMENT_FIELDS = (
    FIELD_BRIGHTNESS,
    FIELD_CONTRAST,
    FIELD_SATURATION,
    FIELD_HUE,
    FIELD_BLUR,
    FIELD_GRAYSCALE,
    FIELD_SEPIA,
    FIELD_INVERT,
    FIELD_EXPOSURE,
)

# Slider ranges: field -> (min, max, step)
SLIDER_RANGES = {
    FIELD_BRIGHTNESS: (0.0, 200.0, 1.0),
    FIELD_CONTRAST: (0.0, 200.0, 1.0),
    FIELD_SATURATION: (0.0, 300.0, 1.0),
    FIELD_HUE: (-180.0, 180.0, 1.0),
    FIELD_EXPOSURE: (-50.0, 50.0, 1.0),
    FIELD_BLUR: (0.0, 10.0, 1.0),
    FIELD_GRAYSCALE: (0.0, 100.0, 1.0),
    FIELD_SEPIA: (0.0, 100.0, 1.0),
    FIELD_INVERT: (0.0, 100.0, 1.0),
    FIELD_ROTATE: (-180.0, 180.0, 1.0),
    FIELD_SCALE: (0.1, 3.0, 0.01),
}

# Neutral values
NEUTRAL_VALUES = {
    FIELD_BRIGHTNESS: 100.0,
    FIELD_CONTRAST: 100.0,
    FIELD_SATURATION: 100.0,
    FIELD_HUE: 0.0,
    FIELD_BLUR: 0.0,
    FIELD_GRAYSCALE: 0.0,
    FIELD_SEPIA: 0.0,
    FIELD_INVERT: 0.0,
    FIELD_EXPOSURE: 0.0,
    FIELD_ROTATE: 0.0,
    FIELD_SCALE: 1.0,
}

# Crop inputs
CROP_FIELDS = ("x", "y", "w", "h")
CROP_STEP = 0.01

# Filter operation names, in chain order
OP_BRIGHTNESS = "brightness"
OP_CONTRAST = "contrast"
OP_SATURATE = "saturate"
OP_HUE_ROTATE = "hue-rotate"
OP_BLUR = "blur"
OP_GRAYSCALE = "grayscale"
OP_SEPIA = "sepia"
OP_INVERT = "invert"
FILTER_ORDER = (
    OP_BRIGHTNESS,
    OP_CONTRAST,
    OP_SATURATE,
    OP_HUE_ROTATE,
    OP_BLUR,
    OP_GRAYSCALE,
    OP_SEPIA,
    OP_INVERT,
)

# Filter units
UNIT_GAIN = ""
UNIT_PERCENT = "%"
UNIT_DEGREES = "deg"
UNIT_PIXELS = "px"

# Export formats
FORMAT_PNG = "png"
FORMAT_JPEG = "jpeg"
FORMAT_WEBP = "webp"
FORMAT_EXTENSIONS = {
    FORMAT_PNG: "png",
    FORMAT_JPEG: "jpg",
    FORMAT_WEBP: "webp",
}
FORMAT_MIME_TYPES = {
    FORMAT_PNG: "image/png",
    FORMAT_JPEG: "image/jpeg",
    FORMAT_WEBP: "image/webp",
}
PIL_SAVE_FORMATS = {
    FORMAT_PNG: "PNG",
    FORMAT_JPEG: "JPEG",
    FORMAT_WEBP: "WEBP",
}
FORMAT_ALIASES = {
    "jpg": FORMAT_JPEG,
    "image/png": FORMAT_PNG,
    "image/jpeg": FORMAT_JPEG,
    "image/jpg": FORMAT_JPEG,
    "image/webp": FORMAT_WEBP,
}

# Export qualities (0-1 scale)
SINGLE_EXPORT_QUALITY = 0.95
BATCH_EXPORT_QUALITY = 0.9
SHARE_QUALITY = 0.9

# File naming
SINGLE_EXPORT_PREFIX = "edited-"
BATCH_EXPORT_SUFFIX = "-batch"
BATCH_EXPORT_FORMAT = FORMAT_JPEG
SHARE_FILENAME = "photo.jpg"

# Share payload
SHARE_TITLE = "Edited photo"
SHARE_TEXT = "Shared via Creative Photo Studio"

# User-facing notices
NOTICE_NOTHING_TO_EXPORT = "Nothing to export."
NOTICE_SHARE_UNSUPPORTED = "Sharing is not supported on this platform. You can download instead."
NOTICE_SHARE_CANCELLED = "Sharing was cancelled."

# Supported input formats
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}
